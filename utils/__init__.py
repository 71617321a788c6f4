"""utils package – Small numeric helpers shared by the AI and generator."""

from .helpers import clamp, distance, population_stddev, round_half_up
