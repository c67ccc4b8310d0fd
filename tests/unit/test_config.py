"""Tests for router configuration."""

import dataclasses

import pytest

from flowroute import config as config_module
from flowroute.config import DEFAULT_CONFIG, SPACIOUS_CONFIG, RouterConfig


class TestDefaults:
    """Tests for the default configuration."""

    def test_defaults_match_module_constants(self):
        """The dataclass defaults come from the module constants."""
        cfg = RouterConfig()
        assert cfg.cell_size == config_module.CELL_SIZE == 40
        assert cfg.obstacle_margin == config_module.OBSTACLE_MARGIN == 50
        assert cfg.grid_margin == config_module.GRID_MARGIN == 200
        assert cfg.max_grid_cells == config_module.MAX_GRID_CELLS == 600
        assert cfg.hard_padding == 10
        assert cfg.soft_padding == 40
        assert cfg.soft_weight == 20
        assert cfg.approach_distance == 20
        assert cfg.corner_radius == 2
        assert cfg.use_soft_zone
        assert cfg.avoid_corners

    def test_default_config_is_valid(self):
        """validate() returns the config itself."""
        assert DEFAULT_CONFIG.validate() is DEFAULT_CONFIG

    def test_config_is_frozen(self):
        """Configurations cannot be mutated in place."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.cell_size = 10


class TestSpaciousPreset:
    """Tests for the spacious preset."""

    def test_values(self):
        """Coarser lattice, wider clearance, no soft zone."""
        assert SPACIOUS_CONFIG.cell_size == 50
        assert SPACIOUS_CONFIG.hard_padding == 25
        assert not SPACIOUS_CONFIG.use_soft_zone
        assert SPACIOUS_CONFIG.grid_margin == 150
        assert SPACIOUS_CONFIG.approach_distance == 15
        assert SPACIOUS_CONFIG.corner_radius == 8
        assert SPACIOUS_CONFIG.max_grid_cells == 500

    def test_is_valid(self):
        """The preset passes validation."""
        SPACIOUS_CONFIG.validate()


class TestValidation:
    """Tests for RouterConfig.validate()."""

    @pytest.mark.parametrize(
        "changes",
        [
            {"cell_size": 0},
            {"cell_size": -40},
            {"max_grid_cells": 0},
            {"grid_margin": -1},
            {"hard_padding": -5},
            {"approach_distance": -20},
            {"soft_weight": 0.5},
            {"heuristic_weight": 0.9},
            {"turn_penalty": -1},
            {"default_obstacle_width": 0},
        ],
    )
    def test_invalid_values_rejected(self, changes):
        """Out-of-range parameters raise ValueError."""
        with pytest.raises(ValueError):
            RouterConfig(**changes).validate()

    def test_with_overrides(self):
        """with_overrides returns a new validated copy."""
        cfg = DEFAULT_CONFIG.with_overrides(cell_size=20, turn_penalty=5)
        assert cfg.cell_size == 20
        assert cfg.turn_penalty == 5
        assert DEFAULT_CONFIG.cell_size == 40

    def test_with_overrides_validates(self):
        """Invalid overrides are rejected."""
        with pytest.raises(ValueError):
            DEFAULT_CONFIG.with_overrides(cell_size=0)
