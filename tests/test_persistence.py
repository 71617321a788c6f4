"""Tests for weight save / load."""

from __future__ import annotations

import json

import pytest

from boss_ai.persistence import (
    load_generation_weights, load_weights, save_generation_weights, save_weights,
)
from boss_ai.strategy_catalog import strategy_ids


class TestStrategyWeights:

    def test_missing_file_gives_defaults(self, tmp_path):
        weights = load_weights(str(tmp_path / "none.json"))
        assert weights == {sid: 1.0 for sid in strategy_ids()}

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_weights(str(path))["close-gap"] == 1.0

    def test_round_trip(self, tmp_path):
        path = str(tmp_path / "w.json")
        save_weights({"close-gap": 2.5, "aoe-spam": 0.3}, path)
        weights = load_weights(path)
        assert weights["close-gap"] == 2.5
        assert weights["aoe-spam"] == 0.3
        assert weights["burst-damage"] == 1.0

    def test_malformed_entries_skipped(self, tmp_path):
        path = tmp_path / "w.json"
        path.write_text(json.dumps({"strategy_weights": {
            "close-gap": "fast", "aoe-spam": True, "burst-damage": 1.7,
        }}), encoding="utf-8")
        weights = load_weights(str(path))
        assert weights["close-gap"] == 1.0
        assert weights["aoe-spam"] == 1.0
        assert weights["burst-damage"] == 1.7

    @pytest.mark.parametrize("section", [None, [1.5, 2.0], "x", 3])
    def test_non_mapping_section_gives_defaults(self, tmp_path, section):
        path = tmp_path / "w.json"
        path.write_text(json.dumps({"strategy_weights": section}), encoding="utf-8")
        assert load_weights(str(path)) == {sid: 1.0 for sid in strategy_ids()}


class TestGenerationWeights:

    def test_absent_section(self, tmp_path):
        path = str(tmp_path / "w.json")
        save_weights({"close-gap": 2.0}, path)
        assert load_generation_weights(path) is None

    def test_both_sections_share_a_file(self, tmp_path):
        path = str(tmp_path / "w.json")
        save_weights({"close-gap": 2.0}, path)
        save_generation_weights({"room_type": [1, 2], "enemy_density": [0.3]}, path)
        assert load_weights(path)["close-gap"] == 2.0
        assert load_generation_weights(path) == {"room_type": [1.0, 2.0],
                                                 "enemy_density": [0.3]}
