from __future__ import annotations
from dataclasses import dataclass

# --- Display ---
WIDTH = 520
HEIGHT = 360
FPS = 60
DT = 1.0 / FPS              # fixed simulation step (sec)

# --- World / Physics ---
PX_PER_METER = 140.0        # world units per physics metre
GRAVITY = -3.2 * PX_PER_METER   # (u/s^2), negative = down
MAX_RISE_SPEED = 350.0
MAX_FALL_SPEED = -260.0
MOVE_SPEED = 165.0          # horizontal speed cap (u/s)
GROUND_ACCEL = 0.28         # fraction of the gap closed per tick on the ground
AIR_ACCEL = 0.12            # ... and in the air
JUMP_VELOCITY = 350.0
CONTACT_SKIN = 0.5          # boxes closer than this count as touching
PENETRATION_EPS = 1e-6

# --- Jump gating ---
EDGE_JUMP_MIN_VY = -30.0    # edge jump needs vy above this ...
EDGE_JUMP_MIN_VX = 10.0     # ... |vx| above this ...
EDGE_JUMP_COOLDOWN_S = 0.08 # ... and this long since the last jump

# --- Player ---
PLAYER_W = 24
PLAYER_H = 34
SPAWN_X = 0.0
SPAWN_Y = -90.0
FACING_DEADZONE = 0.1

# --- Moving platform carrier ---
CARRY_GRACE_S = 0.12        # tolerate single-frame contact flicker
CARRY_RELEASE_VY = 80.0     # faster than this means jumping/falling, not standing

# --- Static surfaces ---
WALL_W = 16
WALL_INSET = 16             # wall centre distance from the playfield edge
WALL_H = 1.0e6
GROUND_Y = -140.0
GROUND_H = 60
HAZARD_H = 20
KILL_ZONE_OFFSET = 60       # below the bottom edge of the view

# --- Camera ---
CAMERA_LERP = 0.18

# --- Level generation ---
PLATFORM_H = 16
PLATFORM_MIN_W = 90
PLATFORM_MAX_W = 150
PLATFORM_SIDE_MARGIN = 40
GAP_MIN = 90
GAP_MAX = 130
SPAWN_MARGIN = 220          # generate this far above the player
CLEANUP_MARGIN = 300        # cull this far below the camera
SCORE_MARGIN = 8            # player must be this far above a platform to score it
SEED_DEFAULT = 12345
START_LAYOUT = (            # (x, y, width)
    (-100.0, -20.0, 140),
    (120.0, 40.0, 140),
    (-40.0, 110.0, 110),
)

# --- Moving Platform Parameters ---
MOVING_EVERY = 5            # every Nth created platform moves
MOTION_PADDING = 24         # travel keeps this far from the playfield edge
MIN_TRAVEL_SPAN = 12        # shorter paths fall back to a calmer motion
MIN_LEG_DURATION_S = 0.7
BASE_HORIZONTAL_TRAVEL = 120.0
BASE_VERTICAL_TRAVEL = 80.0
BASE_MOTION_SPEED = 100.0

# --- Clouds (background only) ---
CLOUD_FIRST_OFFSET = 140
CLOUD_GAP_MIN = 160
CLOUD_GAP_MAX = 240
CLOUD_LOOKAHEAD = 200
CLOUD_MIN_W = 160
CLOUD_MAX_W = 280

# --- Scores ---
SCOREBOARD_LIMIT = 10
DEFAULT_PLAYER_NAME = "Player"

# --- Colors (RGB) ---
COLOR_BG = (61, 79, 133)
COLOR_SKYLINE = (82, 105, 161)
COLOR_PLAT = (140, 163, 219)
COLOR_PLAT_MOVING = (173, 194, 240)
COLOR_PLAYER = (240, 247, 255)
COLOR_CLOUD = (110, 128, 178)
COLOR_HUD = (240, 247, 255)
COLOR_SCORE = (255, 232, 184)
COLOR_DANGER = (255, 86, 110)


@dataclass(frozen=True)
class Playfield:
    """Size of the visible play area; x spans [-width/2, width/2]."""
    width: float = WIDTH
    height: float = HEIGHT

    def __post_init__(self):
        if self.height <= 0:
            raise ValueError(f"playfield height must be positive, got {self.height}")
        # The widest platform plus its side margins has to fit between the walls.
        needed = PLATFORM_MAX_W + 2 * PLATFORM_SIDE_MARGIN
        if self.width <= needed:
            raise ValueError(
                f"playfield width {self.width} cannot host a {PLATFORM_MAX_W}-wide "
                f"platform with {PLATFORM_SIDE_MARGIN} margins"
            )

    @property
    def half_width(self) -> float:
        return self.width / 2
