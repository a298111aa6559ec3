"""Tests for the capacity model."""

import pytest

from tmuxpanes.core.capacity import calculate_capacity
from tmuxpanes.core.types import CapacityConfig

CFG = CapacityConfig(main_pane_min_width=120, agent_pane_min_width=40)


class TestCalculateCapacity:
    """Tests for calculate_capacity."""

    def test_one_short_of_first_agent(self):
        """Window one column short of main + agent floors fits nothing."""
        assert calculate_capacity(120 + 40 - 1, CFG) == 0

    def test_exactly_one_agent(self):
        assert calculate_capacity(120 + 40, CFG) == 1

    def test_two_agents_at_200(self):
        assert calculate_capacity(200, CFG) == 2

    def test_partial_pane_not_counted(self):
        """Leftover columns below the agent floor are ignored."""
        assert calculate_capacity(239, CFG) == 2
        assert calculate_capacity(240, CFG) == 3

    def test_narrower_than_main_pane(self):
        assert calculate_capacity(80, CFG) == 0
        assert calculate_capacity(0, CFG) == 0

    @pytest.mark.parametrize("width", [0, 50, 119, 160, 201, 333, 1000])
    @pytest.mark.parametrize(
        "cfg",
        [
            CapacityConfig(main_pane_min_width=120, agent_pane_min_width=40),
            CapacityConfig(main_pane_min_width=40, agent_pane_min_width=20),
            CapacityConfig(main_pane_min_width=80, agent_pane_min_width=100),
        ],
    )
    def test_matches_closed_form(self, width, cfg):
        expected = max(0, (width - cfg.main_pane_min_width) // cfg.agent_pane_min_width)
        assert calculate_capacity(width, cfg) == expected
