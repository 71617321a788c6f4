"""
settings.py - Tuning constants for the adaptive boss AI and dungeon generator.

All configurable values live here so they're easy to tweak
and easy to reference from any module.
"""

VERSION = "1.1.0"

# ── Behavior tracker ──────────────────────────────────────
HISTORY_CAPACITY = 100         # snapshots kept for movement detection
PREDICTABILITY_WINDOW = 20     # snapshots needed for predictability
MOVEMENT_WINDOW = 10           # snapshots averaged for movement pattern
DEFAULT_PREDICTABILITY = 0.5
DEFAULT_REACTION_TIME = 500.0  # ms
REACTION_TIME_MIN = 50.0       # ms
REACTION_TIME_MAX = 2000.0     # ms

# Movement pattern thresholds (pixels)
BACKPEDAL_DISTANCE = 250.0
AGGRESSIVE_DISTANCE = 100.0
CIRCLE_DEVIATION = 30.0

# Predictability = 1 - (std_attack + std_dodge) / this
PREDICTABILITY_SPREAD = 10.0

# ── Strategy weights ──────────────────────────────────────
WEIGHT_INITIAL = 1.0
WEIGHT_MIN = 0.1
WEIGHT_MAX = 3.0

# ── Boss controller ───────────────────────────────────────
BOSS_START_PHASE = 1
BOSS_BASE_AGGRESSION = 5
BOSS_MAX_AGGRESSION = 10
BOSS_AGGRESSION_PER_PHASE = 2
BOSS_BASE_LEARNING_RATE = 0.1
BOSS_MAX_LEARNING_RATE = 0.3
BOSS_LEARNING_RATE_PER_PHASE = 0.05

# Outcome -> effectiveness
EFFECT_HIT_BONUS = 0.5
EFFECT_NOT_DODGED_BONUS = 0.3
EFFECT_DAMAGE_SCALE = 100.0

# Adaptation log running average (first sample taken as is)
ADAPTATION_SMOOTHING = 0.3

# Difficulty multiplier
ADAPTATION_DIFFICULTY_STEP = 0.05
ADAPTATION_DIFFICULTY_CAP = 0.5
PHASE_DIFFICULTY_STEP = 0.2

# ── Boss special abilities ────────────────────────────────
ENRAGED_SPEED_MULT = 1.5
ENRAGED_DAMAGE_MULT = 1.5
ENRAGED_COOLDOWN_MULT = 0.7
SUMMON_MIN_MINIONS = 2
SUMMON_MAX_MINIONS = 3
TELEPORT_BASE_CHANCE = 0.3
TELEPORT_CHANCE_PER_PHASE = 0.1
BOSS_LEVEL_INTERVAL = 5

# ── Dungeon generation ────────────────────────────────────
DEFAULT_ROOM_COUNT = 10
ROOM_BASE_SIZE = 10
ROOM_SIZE_PER_DIFFICULTY = 2
FLOOR_CHANCE = 0.5
BOSS_FLOOR_CHANCE = 0.6
CA_ITERATIONS = 3
CA_FLOOR_SURVIVE = 4           # floor stays floor with >= this many floor neighbours
CA_WALL_TO_FLOOR = 5           # wall becomes floor with >= this many

SAFE_ROOM_DEATH_THRESHOLD = 5
SAFE_ROOM_CHANCE = 0.3
PREFERRED_ENEMY_CHANCE = 0.6
THEME_LEVEL_TOLERANCE = 3
DEFAULT_DESIRED_DIFFICULTY = 5.0
MIN_DESIRED_DIFFICULTY = 0.0
MAX_DESIRED_DIFFICULTY = 10.0   # caps room size at 30x30
GENERATION_HISTORY_LIMIT = 500  # rooms remembered for feedback

TREASURE_ITEM_COUNT = 5
BOSS_ITEM_COUNT = 3
DEFAULT_ITEM_COUNT = 1

# Room scoring
ENEMY_DIFFICULTY = 2.0
HAZARD_DIFFICULTY = 1.5
CORRIDOR_COMPLEXITY = 0.5      # floor tile with <= 2 floor neighbours
JUNCTION_COMPLEXITY = 0.3      # floor tile with >= 3 floor neighbours
BALANCE_SCORE_BONUS = 10.0
VARIETY_SCORE = 5.0
PREFERENCE_SCORE = 3.0
AI_SCORE_MAX = 100.0

# Learned generation weights
ROOM_TYPE_WEIGHTS = (0.3, 0.2, 0.15, 0.1, 0.15, 0.1)
ENEMY_DENSITY_WEIGHTS = (0.4, 0.3, 0.2, 0.1)
FEEDBACK_LEARNING_RATE = 0.01
FEEDBACK_ENJOYMENT_THRESHOLD = 7
FEEDBACK_DIFFICULTY_THRESHOLD = 8
ENEMY_DENSITY_FLOOR = 0.1

# ── Preview window ────────────────────────────────────────
PREVIEW_WIDTH = 960
PREVIEW_HEIGHT = 640
PREVIEW_FPS = 30
PREVIEW_TITLE = "Dungeon AI – Preview"
TILE_PIXELS = 14
FONT_SIZE = 20

WHITE = (255, 255, 255)
BG_COLOR = (30, 30, 30)
WALL_COLOR = (60, 60, 60)
FLOOR_COLOR = (170, 150, 120)
DOOR_COLOR = (80, 220, 255)
SPECIAL_COLOR = (180, 80, 255)
ENEMY_COLOR = (220, 50, 50)
ITEM_COLOR = (255, 220, 60)
HAZARD_COLOR = (255, 160, 40)

# ── Encounter stats ───────────────────────────────────────
WEIGHT_PLOT_FILE = "strategy_weights.png"
WEIGHTS_FILE = "boss_weights.json"
