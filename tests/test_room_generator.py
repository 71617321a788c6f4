"""Tests for single-room synthesis."""

from __future__ import annotations

from collections import Counter

import numpy as np
import pytest

from dungeon_gen import (
    DungeonGenerationParams, GenerationWeights, PlayStyle, PreviousPerformance,
    RoomGenerator, RoomType, Tile, THEMES,
)
from dungeon_gen.room_generator import (
    EnemyBehavior, Rarity, count_floor_neighbors, layout_complexity, smooth,
)


def _rooms(rng, params, theme, total=10):
    gen = RoomGenerator(rng=rng)
    return [gen.generate_room(params, theme, i, total) for i in range(total)]


# ===========================================================================
# Layout validity
# ===========================================================================

class TestLayout:

    @pytest.mark.parametrize("difficulty", [0, 2.5, 5, 9])
    def test_one_door_top_and_bottom(self, rng, crypt, difficulty):
        params = DungeonGenerationParams(desired_difficulty=difficulty)
        for room in _rooms(rng, params, crypt):
            layout = room.layout
            assert np.count_nonzero(layout[0] == Tile.DOOR) == 1
            assert np.count_nonzero(layout[-1] == Tile.DOOR) == 1
            assert layout[0, room.size // 2] == Tile.DOOR
            assert layout[-1, room.size // 2] == Tile.DOOR

    def test_border_stays_wall(self, rng, crypt, params):
        for room in _rooms(rng, params, crypt):
            border = np.concatenate([room.layout[0], room.layout[-1],
                                     room.layout[:, 0], room.layout[:, -1]])
            assert set(np.unique(border)) <= {Tile.WALL, Tile.DOOR}

    def test_size_follows_difficulty(self, rng, crypt):
        gen = RoomGenerator(rng=rng)
        assert gen.generate_layout(RoomType.COMBAT, 5).shape == (20, 20)
        assert gen.generate_layout(RoomType.COMBAT, 2.7).shape == (15, 15)

    def test_no_entity_on_wall_or_door(self, rng, params):
        for theme in THEMES:
            for room in _rooms(rng, params, theme):
                for entity in (*room.enemies, *room.items, *room.hazards):
                    assert room.tile_at(entity.position) is Tile.FLOOR

    def test_layout_read_only(self, rng, crypt, params):
        room = RoomGenerator(rng=rng).generate_room(params, crypt, 0, 10)
        with pytest.raises(ValueError):
            room.layout[1, 1] = Tile.FLOOR

    def test_seed_reproduces_room(self, crypt, params):
        a = RoomGenerator(rng=np.random.default_rng(5)).generate_room(params, crypt, 0, 10)
        b = RoomGenerator(rng=np.random.default_rng(5)).generate_room(params, crypt, 0, 10)
        assert np.array_equal(a.layout, b.layout)
        assert a.enemies == b.enemies


class TestCellularAutomaton:

    def test_neighbor_count(self):
        layout = np.zeros((5, 5), dtype=np.int8)
        layout[2, 1:4] = Tile.FLOOR
        counts = count_floor_neighbors(layout)
        assert counts[2, 1] == 1
        assert counts[2, 2] == 2
        assert counts[1, 2] == 3

    def test_isolated_floor_dies(self):
        layout = np.zeros((5, 5), dtype=np.int8)
        layout[2, 2] = Tile.FLOOR
        assert np.count_nonzero(smooth(layout) == Tile.FLOOR) == 0

    def test_surrounded_wall_becomes_floor(self):
        layout = np.full((5, 5), Tile.FLOOR, dtype=np.int8)
        layout[0, :] = layout[-1, :] = layout[:, 0] = layout[:, -1] = Tile.WALL
        layout[2, 2] = Tile.WALL
        assert smooth(layout)[2, 2] == Tile.FLOOR

    def test_complexity_counts_corridors(self):
        layout = np.zeros((5, 5), dtype=np.int8)
        layout[2, 1:4] = Tile.FLOOR
        assert layout_complexity(layout) == pytest.approx(1.5)


# ===========================================================================
# Room type prediction
# ===========================================================================

class TestRoomType:

    def test_last_room_is_boss(self, rng, params):
        for theme in THEMES:
            rooms = _rooms(rng, params, theme, total=7)
            assert rooms[-1].type is RoomType.BOSS

    def test_single_room_dungeon_is_boss(self, rng, crypt, params):
        assert RoomGenerator(rng=rng).predict_room_type(params, 0, 1) is RoomType.BOSS

    def test_first_room_combat_for_balanced(self, rng, params):
        assert RoomGenerator(rng=rng).predict_room_type(params, 0, 10) is RoomType.COMBAT

    def test_stealth_favors_traps(self, rng):
        params = DungeonGenerationParams(play_style=PlayStyle.STEALTH)
        assert RoomGenerator(rng=rng).predict_room_type(params, 0, 10) is RoomType.TRAP

    def test_many_deaths_sometimes_forces_safe(self, rng):
        params = DungeonGenerationParams(
            previous_performance=PreviousPerformance(death_count=8),
        )
        gen = RoomGenerator(rng=rng)
        types = Counter(gen.predict_room_type(params, 0, 10) for _ in range(400))
        assert 0.2 < types[RoomType.SAFE] / 400 < 0.4

    def test_few_deaths_never_safe_at_start(self, rng, params):
        gen = RoomGenerator(rng=rng)
        assert all(gen.predict_room_type(params, 0, 10) is not RoomType.SAFE
                   for _ in range(100))


# ===========================================================================
# Placement
# ===========================================================================

class TestPlacement:

    def test_enemy_counts_by_room_type(self, rng, crypt, params):
        for room in _rooms(rng, params, crypt):
            if room.type in (RoomType.SAFE, RoomType.TREASURE):
                assert room.enemies == ()
            elif room.type is RoomType.BOSS:
                assert len(room.enemies) <= 1
            else:
                assert len(room.enemies) <= 7

    def test_density_weight_scales_enemy_count(self, rng, crypt, params):
        weights = GenerationWeights(enemy_density=[0.2, 0.3, 0.2, 0.1])
        gen = RoomGenerator(weights, rng)
        layout = np.full((20, 20), Tile.FLOOR, dtype=np.int8)
        assert len(gen.place_enemies(layout, crypt, params, RoomType.COMBAT)) == 3
        gen.weights.enemy_density[0] = 0.4
        assert len(gen.place_enemies(layout, crypt, params, RoomType.COMBAT)) == 7

    def test_placement_stops_when_floor_runs_out(self, rng, crypt, params):
        layout = np.zeros((5, 5), dtype=np.int8)
        layout[2, 2] = Tile.FLOOR
        gen = RoomGenerator(rng=rng)
        assert len(gen.place_enemies(layout, crypt, params, RoomType.COMBAT)) == 1
        assert len(gen.place_items(layout, crypt, RoomType.TREASURE)) == 1

    def test_item_counts(self, rng, crypt):
        gen = RoomGenerator(rng=rng)
        layout = np.full((20, 20), Tile.FLOOR, dtype=np.int8)
        assert len(gen.place_items(layout, crypt, RoomType.TREASURE)) == 5
        assert len(gen.place_items(layout, crypt, RoomType.BOSS)) == 3
        assert len(gen.place_items(layout, crypt, RoomType.PUZZLE)) == 1

    def test_enemies_drawn_without_replacement(self, rng, crypt, params):
        layout = np.full((20, 20), Tile.FLOOR, dtype=np.int8)
        enemies = RoomGenerator(rng=rng).place_enemies(layout, crypt, params, RoomType.COMBAT)
        positions = [e.position for e in enemies]
        assert len(positions) == len(set(positions))

    def test_hazard_count_and_types(self, rng):
        volcano = THEMES[1]
        layout = np.full((20, 20), Tile.FLOOR, dtype=np.int8)
        hazards = RoomGenerator(rng=rng).place_hazards(layout, volcano, 7)
        assert len(hazards) == 3
        assert {h.type for h in hazards} <= set(volcano.hazards)


class TestEnemySelection:

    def test_avoided_types_excluded(self, rng, crypt):
        params = DungeonGenerationParams(
            previous_performance=PreviousPerformance(avoided_enemies=("skeleton", "ghost")),
        )
        gen = RoomGenerator(rng=rng)
        picks = {gen.select_enemy_type(crypt, params) for _ in range(200)}
        assert picks <= {"zombie", "necromancer"}

    def test_everything_avoided_falls_back_to_first(self, rng, crypt):
        params = DungeonGenerationParams(
            previous_performance=PreviousPerformance(avoided_enemies=crypt.enemy_types),
        )
        gen = RoomGenerator(rng=rng)
        assert {gen.select_enemy_type(crypt, params) for _ in range(20)} == {"skeleton"}

    def test_preferred_types_favored(self, rng, crypt):
        params = DungeonGenerationParams(
            previous_performance=PreviousPerformance(preferred_enemies=("ghost",)),
        )
        gen = RoomGenerator(rng=rng)
        picks = Counter(gen.select_enemy_type(crypt, params) for _ in range(1000))
        # 0.6 + 0.4 / 4 = 0.7 expected
        assert 0.62 < picks["ghost"] / 1000 < 0.78

    def test_behavior_pool_follows_play_style(self, rng):
        gen = RoomGenerator(rng=rng)
        behaviors = {gen.select_enemy_behavior(PlayStyle.AGGRESSIVE) for _ in range(100)}
        assert behaviors <= {EnemyBehavior.DEFENSIVE, EnemyBehavior.RANGED,
                             EnemyBehavior.SUPPORT}


class TestRarity:

    def test_high_tier_always_mythic(self, rng):
        gen = RoomGenerator(rng=rng)
        assert {gen.select_item_rarity(10) for _ in range(50)} == {Rarity.MYTHIC}

    def test_tier_zero_spread(self, rng):
        gen = RoomGenerator(rng=rng)
        counts = Counter(gen.select_item_rarity(0) for _ in range(2000))
        assert set(counts) == set(Rarity)
        assert counts[Rarity.COMMON] > counts[Rarity.MYTHIC]


# ===========================================================================
# Scores
# ===========================================================================

class TestScores:

    def test_difficulty_formula(self, rng, crypt, params):
        for room in _rooms(rng, params, crypt):
            expected = (2 * len(room.enemies) + 1.5 * len(room.hazards)
                        + layout_complexity(room.layout))
            assert room.difficulty == pytest.approx(expected)

    def test_ai_score_bounded(self, rng, params):
        for theme in THEMES:
            for room in _rooms(rng, params, theme):
                assert 0 <= room.ai_score <= 100

    def test_score_room_components(self, params):
        from dungeon_gen.room_generator import PlacedEnemy, PlacedItem, Position, ItemKind
        enemies = [
            PlacedEnemy("ghost", Position(1, 1), EnemyBehavior.MIXED),
            PlacedEnemy("zombie", Position(2, 1), EnemyBehavior.MIXED),
        ]
        items = [PlacedItem(ItemKind.POTION, Position(3, 3), Rarity.RARE)]
        assert RoomGenerator.score_room(enemies, items, 0.0, params) == pytest.approx(20)

        fan = DungeonGenerationParams(
            previous_performance=PreviousPerformance(preferred_enemies=("ghost",)),
        )
        assert RoomGenerator.score_room(enemies, items, 2.0, fan) == pytest.approx(25)


class TestRoomData:

    def test_to_dict_and_ascii(self, rng, crypt, params):
        room = RoomGenerator(rng=rng).generate_room(params, crypt, 0, 10)
        data = room.to_dict()
        assert data["type"] == room.type.value
        assert len(data["layout"]) == room.size
        assert len(data["enemies"]) == len(room.enemies)
        lines = room.ascii().splitlines()
        assert len(lines) == room.size
        assert lines[0][room.size // 2] == "+"

    def test_room_ids_unique(self, rng, crypt, params):
        ids = [r.id for r in _rooms(rng, params, crypt)]
        assert len(ids) == len(set(ids))
