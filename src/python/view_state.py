"""
ViewState: zoom and scroll window over a head timeline, in minutes.

The zoom level is explicit state owned by the caller; the projector only
ever sees the `TimelineScale` this window produces.
"""

from timeline_projector import TimelineScale


class ViewState:
    """Visible window (start/end minutes) derived from head span, zoom and scroll."""
    def __init__(self, total_time: float, visible_time: float, scroll_frac: float = 0.0, origin: float = 0.0):
        self.origin = float(origin)
        self.total_time = float(total_time)
        self.visible_time = float(visible_time)
        self.scroll_frac = float(scroll_frac)
        self._clamp()

    @classmethod
    def for_scale(cls, scale: TimelineScale) -> "ViewState":
        """Fully zoomed-out window over a display scale."""
        return cls(total_time=scale.total_duration, visible_time=scale.total_duration, origin=scale.offset)

    def _clamp(self):
        self.total_time = max(self.total_time, 0.0)
        self.visible_time = min(max(self.visible_time, 0.0), self.total_time)
        if self.total_time <= self.visible_time:
            # Window covers the whole span: start always at origin
            self.scroll_frac = 0.0
        else:
            self.scroll_frac = min(max(self.scroll_frac, 0.0), 1.0)

    @property
    def start(self) -> float:
        """Absolute start minute of the window."""
        return self.origin + (self.total_time - self.visible_time) * self.scroll_frac

    @property
    def end(self) -> float:
        """Absolute end minute of the window."""
        return self.start + self.visible_time

    @property
    def zoom_factor(self) -> float:
        """How many times the window is magnified relative to the whole span."""
        if self.visible_time <= 0.0:
            return 1.0
        return self.total_time / self.visible_time

    def to_scale(self) -> TimelineScale:
        """Projection scale for the current window."""
        return TimelineScale(offset=self.start, total_duration=self.visible_time)

    def set_total_time(self, total_time: float) -> None:
        self.total_time = float(total_time)
        self._clamp()

    def set_visible_time(self, visible_time: float) -> None:
        self.visible_time = float(visible_time)
        self._clamp()

    def set_scroll_frac(self, scroll_frac: float) -> None:
        self.scroll_frac = float(scroll_frac)
        self._clamp()

    def zoom(self, factor: float, anchor_frac: float = 0.5) -> None:
        """Scale the window by `factor` keeping the minute at `anchor_frac` of the window fixed."""
        anchor_time = self.start + anchor_frac * self.visible_time
        self.visible_time = min(max(self.visible_time * factor, 0.0), self.total_time)
        if self.total_time > self.visible_time:
            new_start = anchor_time - anchor_frac * self.visible_time - self.origin
            self.scroll_frac = new_start / (self.total_time - self.visible_time)
        else:
            self.scroll_frac = 0.0
        self._clamp()

    def pan(self, delta_frac: float) -> None:
        """Pan by shifting scroll_frac by `delta_frac` (can be negative)."""
        self.scroll_frac += float(delta_frac)
        self._clamp()
