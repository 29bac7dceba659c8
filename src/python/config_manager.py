import json
import pathlib
import sys
import logging
from typing import Any

from custom_types import DowntimeCategoryInfo, DowntimeConfig, MarkerStepConfig, TimelineConfig

logger = logging.getLogger(__name__)

DEFAULT_MARKER_STEPS: list[MarkerStepConfig] = [
    {"above": 120, "step": 30},
    {"above": 60, "step": 15},
    {"above": 0, "step": 10},
]


class ConfigManager:
    """Manages application configuration: timeline contracts, downtime categories, logging"""

    timeline: TimelineConfig
    downtime: DowntimeConfig
    exit_on_error: bool
    _cfg: dict[str, Any]
    cfg_path: str | pathlib.Path

    def __init__(
        self,
        cfg_path: str | pathlib.Path | None = None,
        exit_on_error: bool = True
    ) -> None:
        """Initialize the ConfigManager with an optional custom path.

        Args:
            cfg_path: Path to the config.json file (defaults to standard location if None)
            exit_on_error: Whether to exit the program on configuration errors
        """
        self.timeline = {}
        self.downtime = {}
        self.exit_on_error = exit_on_error
        self._cfg = {}

        self.cfg_path = cfg_path if cfg_path is not None else self._default_config_path()

        self.load_config()

    def _default_config_path(self) -> pathlib.Path:
        """Get the default path to the config.json file."""
        base = pathlib.Path(__file__).parent.parent.parent
        return base / "config" / "config.json"

    def load_config(self) -> None:
        """Load master configuration from the configured path."""
        try:
            with open(self.cfg_path, 'r') as f:
                self._cfg = json.load(f)
        except Exception as e:
            error_msg = "Critical error loading configuration '%s': %s"
            logger.error(error_msg, self.cfg_path, e)
            if self.exit_on_error:
                sys.exit(1)
            else:
                raise RuntimeError(f"Critical error loading configuration '{self.cfg_path}': {e}")

        # Validate and assign sections
        try:
            self.timeline = self._cfg["timeline"]
            self.downtime = self._cfg["downtime"]
        except KeyError as e:
            error_msg = "Configuration missing key: %s"
            logger.error(error_msg, e)
            if self.exit_on_error:
                sys.exit(1)
            else:
                raise KeyError(f"Configuration missing key: {e}")

        logger.debug("Loaded configuration from %s", self.cfg_path)

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        """Get a generic setting from the master config"""
        try:
            return self._cfg.get(section, {}).get(key, default)
        except Exception:
            return default

    def set_setting(self, section: str, key: str, value: Any) -> None:
        """Set a setting in memory (does not persist to file).

        Args:
            section: Configuration section (e.g., 'timeline', 'downtime')
            key: Setting key within the section
            value: Value to set
        """
        if section not in self._cfg:
            self._cfg[section] = {}
        self._cfg[section][key] = value

    def get_logging_setting(self, key: str, default: Any = None) -> Any:
        """Get a logging configuration setting"""
        try:
            return self._cfg.get("logging", {}).get(key, default)
        except Exception:
            return default

    # ============================================================================
    # Timeline Accessors
    # ============================================================================

    def get_timeline_setting(self, key: str, default: Any = None) -> Any:
        """Get a timeline setting by key"""
        return self.get_setting("timeline", key, default)

    def is_strict(self) -> bool:
        """Whether projection contract violations raise instead of degrading.

        Returns:
            bool: True in debug/test setups, False in production
        """
        return bool(self.get_timeline_setting("strictContracts", False))

    def get_min_scale_minutes(self, default: float = 1.0) -> float:
        """Get the smallest display scale (in minutes) a head timeline may use."""
        return float(self.get_timeline_setting("minScaleMinutes", default))

    def get_marker_steps(self) -> list[MarkerStepConfig]:
        """Get axis marker step rules ordered by descending threshold.

        Returns:
            list: Rules with keys:
                - above: Display duration threshold in minutes
                - step: Marker spacing used when duration exceeds threshold
        """
        steps = self.get_timeline_setting("markerSteps", DEFAULT_MARKER_STEPS)
        return sorted(steps, key=lambda s: s["above"], reverse=True)

    def get_final_marker_gap(self, default: float = 0.3) -> float:
        """Get the fraction of a step the tail must exceed to earn a final marker."""
        return float(self.get_timeline_setting("finalMarkerGap", default))

    # ============================================================================
    # Downtime Accessors
    # ============================================================================

    def get_downtime_budget(self, default: float = 60.0) -> float:
        """Get the downtime budget in minutes."""
        return float(self.downtime.get("budgetMins", default))

    def get_downtime_categories(self) -> list[DowntimeCategoryInfo]:
        """Get configured downtime categories.

        Returns:
            list: Categories with keys id, name, color
        """
        return list(self.downtime.get("categories", []))

    def get_downtime_category(self, category_id: str) -> DowntimeCategoryInfo | None:
        """Get a single downtime category by its id"""
        for category in self.get_downtime_categories():
            if category.get("id") == category_id:
                return category
        return None


# Create a singleton instance
config = ConfigManager()
