"""Shared fixtures: seeded generators, a fresh controller, profile helpers."""

from __future__ import annotations

import numpy as np
import pytest

from boss_ai import PlayerAction, create_controller
from dungeon_gen import DungeonGenerationParams, THEMES


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def controller(rng):
    ctrl = create_controller(rng=rng)
    ctrl.initialize("boss-1", 1000)
    return ctrl


@pytest.fixture
def crypt():
    return THEMES[0]


@pytest.fixture
def params():
    return DungeonGenerationParams(player_level=3, desired_difficulty=5.0)


def set_profile(controller, boss_id: str, **metrics) -> None:
    """Force profile metrics for selection tests."""
    profile = controller.get_state(boss_id).tracker._profile
    for name, value in metrics.items():
        setattr(profile, name, value)


def move(distance: float, timestamp: float = 0.0) -> PlayerAction:
    """A move action *distance* units east of a boss at the origin."""
    return PlayerAction("move", position=(distance, 0.0), boss_position=(0.0, 0.0),
                        timestamp=timestamp)
