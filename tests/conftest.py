"""
conftest.py - Shared pytest fixtures for timeline engine tests

This module provides standardized test fixtures for use across all tests.
It includes fixtures for:
- Path setup and Python path configuration
- Configuration management
- Compact timeline payloads for the three editor variants
- Random generators for order-independence checks
"""
import json
import pathlib
import sys

import numpy as np
import pytest

# Add the src/python directory to the Python path
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent / "src" / "python"))

# Imports from project modules (now that path is configured)
from config_manager import ConfigManager, config


# Path and Environment Fixtures
# ----------------------------

@pytest.fixture
def project_paths():
    """Provide standard paths to key project directories."""
    root_dir = pathlib.Path(__file__).parent.parent
    return {
        'root': root_dir,
        'src': root_dir / 'src',
        'python': root_dir / 'src' / 'python',
        'config': root_dir / 'config',
        'bin': root_dir / 'bin',
        'tests': root_dir / 'tests'
    }


# Configuration Fixtures
# ---------------------

@pytest.fixture
def test_config_data():
    """Create minimal test configuration data."""
    return {
        "timeline": {
            "strictContracts": True,
            "minScaleMinutes": 5,
            "markerSteps": [
                {"above": 0, "step": 10},
                {"above": 60, "step": 15}
            ],
            "finalMarkerGap": 0.3
        },
        "downtime": {
            "budgetMins": 30,
            "categories": [
                {"id": "mech", "name": "Mechanical", "color": "#111111"},
                {"id": "mat", "name": "Material", "color": "#222222"}
            ]
        },
        "logging": {
            "level": "DEBUG",
            "console": False
        }
    }


@pytest.fixture
def test_config_files(tmp_path, test_config_data):
    """Create a temporary config file."""
    config_file = tmp_path / "test_config.json"

    with open(config_file, 'w') as f:
        json.dump(test_config_data, f)

    return {
        "config_path": config_file,
        "tmp_path": tmp_path
    }


@pytest.fixture
def test_config_manager(test_config_files):
    """Create a ConfigManager instance with test configuration."""
    return ConfigManager(
        cfg_path=test_config_files["config_path"],
        exit_on_error=False
    )


@pytest.fixture
def strict_contracts():
    """Switch the shared config to strict projection contracts for one test."""
    previous = config.get_timeline_setting("strictContracts", False)
    config.set_setting("timeline", "strictContracts", True)
    yield
    config.set_setting("timeline", "strictContracts", previous)


@pytest.fixture
def lenient_contracts():
    """Switch the shared config to silent degradation for one test."""
    previous = config.get_timeline_setting("strictContracts", False)
    config.set_setting("timeline", "strictContracts", False)
    yield
    config.set_setting("timeline", "strictContracts", previous)


# Timeline Payload Fixtures
# ------------------------

@pytest.fixture
def duration_payload():
    """Minute-based head: two overlapping subs, one cutoff (c flag)."""
    return json.dumps([
        {
            "n": "Line A",
            "t": 100,
            "s": [
                {"n": "Mixing", "c": 0, "i": [[0, 50]]},
                {"n": "Filling", "c": 0, "i": [[25, 75]]},
                {"n": "Lunch", "c": 1, "i": [[40, 60]]}
            ]
        }
    ])


@pytest.fixture
def clock_payload():
    """Clock-based head with HH:MM intervals and an overflowing sub."""
    return json.dumps([
        {
            "n": "Morning",
            "st": "08:00",
            "et": "10:00",
            "s": [
                {"n": "Assembly", "cut": 0, "i": [["08:00", "09:00"], ["09:30", "10:30"]]},
                {"n": "Break", "cut": 1, "i": [["09:00", "09:15"]]}
            ]
        }
    ])


@pytest.fixture
def production_payload():
    """Production editor save in minute mode; heads still carry display clock strings."""
    return json.dumps({
        "v": 2,
        "mode": "time",
        "sys": {
            "mhs": 5,
            "dbm": 45,
            "cats": [["mech", "Mechanical", "#111111"], ["mat", "Material", "#222222"]],
            "ctx": [["budget_remaining", "Not Available", "#374151"]]
        },
        "productions": [
            {
                "n": "Line 1",
                "ct": 240,
                "uict": 0,
                "kpi": [120, 2, "cycle", None, "net", "production", 0, None],
                "c": "#10b981",
                "h": [
                    {
                        "n": "Head 1",
                        "sm": 0,
                        "em": 120,
                        "t": 120,
                        "st": "08:00",
                        "et": "10:00",
                        "c": "#10b981",
                        "st2": "",
                        "sdg": 1,
                        "ict": 240,
                        "dt": [["mech", 10, 25], ["mat", 50, 60], ["mech", 90, 95]],
                        "s": [
                            {"n": "Run", "cut": 0, "c": "#3b82f6", "st": "",
                             "i": [[0, 60, "#ff0000"], [70, 120, ""]]},
                            {"n": "Setup", "cut": 1, "c": "#f43f5e", "st": "",
                             "i": [[60, 70, "#f43f5e"]]}
                        ]
                    }
                ]
            }
        ]
    })


@pytest.fixture
def production_clock_payload():
    """Production editor save in clock mode with stale minute fields and per-head cycle times."""
    return json.dumps({
        "v": 2,
        "mode": "oclock",
        "sys": {"mhs": 5, "dbm": 30, "cats": [], "ctx": []},
        "productions": [
            {
                "n": "Night",
                "ct": 180,
                "uict": 1,
                "kpi": [180, 1, "shift", 480, "raw", "production_plus_downtime", 1, 3],
                "c": "#8b5cf6",
                "h": [
                    {
                        "n": "H1", "sm": 0, "em": 60, "t": 90, "st": "22:00", "et": "23:30",
                        "st2": "Done", "sdg": 0, "ict": 100,
                        "dt": [["", "22:10", "22:20"]],
                        "s": [{"n": "Work", "cut": 0, "c": "#3b82f6", "st": "Paused",
                               "i": [["22:00", "23:00", "#3b82f6"]]}]
                    },
                    {
                        "n": "H2", "sm": 0, "em": 60, "t": 60, "st": "22:00", "et": "23:00",
                        "ict": 200, "dt": [], "s": []
                    }
                ]
            }
        ]
    })


@pytest.fixture
def rng():
    """Seeded numpy generator for shuffle-based property checks."""
    return np.random.default_rng(20240611)
