"""
persistence.py  –  Learned-weight save / load.

Writes a boss encounter's strategy weights, or the dungeon generator's
global generation weights, to a small JSON file and reads them back.
A missing or corrupt file yields defaults; the caller never sees an
exception for bad data on disk.
"""

import json
import logging
import os

from settings import WEIGHTS_FILE, WEIGHT_INITIAL
from boss_ai.strategy_catalog import strategy_ids

logger = logging.getLogger(__name__)

# Default JSON file lives in the project root
_JSON_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), WEIGHTS_FILE)


def _default_weights() -> dict:
    """Fresh weight map covering every catalog strategy."""
    return {sid: WEIGHT_INITIAL for sid in strategy_ids()}


def _read_json(path: str) -> dict | None:
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read %s; using defaults", path)
        return None
    if not isinstance(data, dict):
        return None
    return data


def _write_json(path: str, data: dict) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


# ==============================================================
#  Boss strategy weights
# ==============================================================

def load_weights(path: str | None = None) -> dict:
    """Load strategy weights from disk.

    Every catalog strategy is present in the result (forward-compat);
    non-numeric entries are dropped in favour of the default.
    """
    path = path or _JSON_PATH
    data = _read_json(path)
    weights = _default_weights()
    if data is None:
        return weights

    stored = data.get("strategy_weights", data)
    if not isinstance(stored, dict):
        logger.warning("strategy_weights in %s is not a mapping; using defaults", path)
        return weights
    for sid, value in stored.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.debug("Skipping malformed weight %s=%r", sid, value)
            continue
        weights[sid] = float(value)
    return weights


def save_weights(weights: dict, path: str | None = None) -> None:
    """Write a strategy weight map to disk."""
    path = path or _JSON_PATH
    data = _read_json(path) or {}
    data["strategy_weights"] = {sid: float(w) for sid, w in weights.items()}
    _write_json(path, data)
    logger.info("Saved %d strategy weights to %s", len(weights), path)


# ==============================================================
#  Dungeon generation weights
# ==============================================================

def load_generation_weights(path: str | None = None) -> dict[str, list[float]] | None:
    """Return the stored generation weight vectors, or None if absent."""
    path = path or _JSON_PATH
    data = _read_json(path)
    if data is None:
        return None
    stored = data.get("generation_weights")
    if not isinstance(stored, dict):
        return None

    vectors: dict[str, list[float]] = {}
    for name, values in stored.items():
        try:
            vectors[name] = [float(v) for v in values]
        except (TypeError, ValueError):
            logger.debug("Skipping malformed generation weights '%s'", name)
    return vectors


def save_generation_weights(vectors: dict[str, list[float]], path: str | None = None) -> None:
    path = path or _JSON_PATH
    data = _read_json(path) or {}
    data["generation_weights"] = {k: [float(v) for v in vs] for k, vs in vectors.items()}
    _write_json(path, data)
    logger.info("Saved generation weights to %s", path)
