# src/dockjumper/level.py
from __future__ import annotations
import itertools
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .config import (
    PLATFORM_H, PLATFORM_MIN_W, PLATFORM_MAX_W, PLATFORM_SIDE_MARGIN,
    GAP_MIN, GAP_MAX, START_LAYOUT,
    MOVING_EVERY, MOTION_PADDING, MIN_TRAVEL_SPAN, MIN_LEG_DURATION_S,
    BASE_HORIZONTAL_TRAVEL, BASE_VERTICAL_TRAVEL, BASE_MOTION_SPEED,
    CLOUD_FIRST_OFFSET, CLOUD_GAP_MIN, CLOUD_GAP_MAX, CLOUD_LOOKAHEAD,
    CLOUD_MIN_W, CLOUD_MAX_W,
    Playfield,
)
from .physics import Body, Category, PhysicsWorld

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class MotionKind(Enum):
    STATIC = "static"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"


@dataclass(frozen=True)
class MotionParams:
    horizontal_travel: float
    vertical_travel: float
    speed: float


def motion_kind(score: int, platform_index: int) -> MotionKind:
    """Which way the moving platform with this creation index travels."""
    if score < 15:
        return MotionKind.HORIZONTAL
    if score < 20:
        return MotionKind.VERTICAL if platform_index % 2 == 0 else MotionKind.HORIZONTAL
    return (MotionKind.DIAGONAL, MotionKind.VERTICAL, MotionKind.HORIZONTAL)[platform_index % 3]


def motion_params(score: int) -> MotionParams:
    """
    Difficulty table (pure function of the score):

      score >= 5  : horizontal travel x(1+b), speed x(1+0.65b), b = min((score-4)*0.08, 1)
      score >= 12 : vertical travel 80 x min(1 + (score-12)*0.08, 1.8)
      score >= 18 : speed x1.15
      score >= 24 : horizontal travel x1.1, speed x1.1

    Every boost is capped, so difficulty saturates at score 24+.
    """
    horizontal = BASE_HORIZONTAL_TRAVEL
    vertical = 0.0
    speed = BASE_MOTION_SPEED

    if score >= 5:
        boost = min((score - 4) * 0.08, 1.0)
        horizontal *= 1.0 + boost
        speed *= 1.0 + boost * 0.65

    if score >= 12:
        vertical = BASE_VERTICAL_TRAVEL * min(1.0 + (score - 12) * 0.08, 1.8)

    if score >= 18:
        speed *= 1.15

    if score >= 24:
        horizontal *= 1.1
        speed *= 1.1

    return MotionParams(horizontal, vertical, speed)


@dataclass
class PlatformMotion:
    """
    Piecewise-linear oscillation: `intro` legs run once, then `loop` legs repeat.
    Each leg is (target, duration).
    """
    kind: MotionKind
    origin: Point
    intro: List[Tuple[Point, float]]
    loop: List[Tuple[Point, float]]
    elapsed: float = 0.0
    leg: int = 0

    def _legs(self) -> List[Tuple[Point, float]]:
        return self.intro + self.loop

    def advance(self, dt: float) -> Point:
        """Move along the path by dt seconds and return the new position."""
        legs = self._legs()
        remaining = dt
        while True:
            target, duration = legs[self.leg]
            left = duration - self.elapsed
            if remaining < left:
                self.elapsed += remaining
                t = self.elapsed / duration
                return (self.origin[0] + (target[0] - self.origin[0]) * t,
                        self.origin[1] + (target[1] - self.origin[1]) * t)
            remaining -= left
            self.origin = target
            self.elapsed = 0.0
            self.leg += 1
            if self.leg >= len(legs):
                self.leg = len(self.intro)


@dataclass(frozen=True)
class PlatformHandle:
    """Non-owning reference to a platform: valid while the serial is alive in the same layout."""
    serial: int
    generation: int


@dataclass(eq=False)
class Platform:
    body: Body
    serial: int
    base: Point
    motion: Optional[PlatformMotion] = None
    scored: bool = False

    @property
    def x(self) -> float:
        return self.body.x

    @property
    def y(self) -> float:
        return self.body.y

    @property
    def width(self) -> float:
        return self.body.width

    @property
    def height(self) -> float:
        return self.body.height

    @property
    def moving(self) -> bool:
        return self.motion is not None

    @property
    def kind(self) -> MotionKind:
        return self.motion.kind if self.motion is not None else MotionKind.STATIC

    def update_movement(self, dt: float):
        """Update moving platform position"""
        if self.motion is not None:
            self.body.x, self.body.y = self.motion.advance(dt)


@dataclass
class Cloud:
    """Background decoration; drifts sideways and back, never collides."""
    base_x: float
    y: float
    width: float
    height: float
    drift: float
    period: float                   # seconds per one-way drift
    direction: int
    puffs: List[Tuple[float, float, float, float]] = field(default_factory=list)
    t: float = 0.0

    @property
    def x(self) -> float:
        phase = (self.t % (2 * self.period)) / self.period
        out = phase if phase <= 1.0 else 2.0 - phase
        return self.base_x + self.drift * self.direction * out

    def update(self, dt: float):
        self.t += dt


class LevelGen:
    """
    Streams platforms above the player and drops them once they fall behind
    the camera. Every MOVING_EVERY-th platform gets a motion frozen from the
    score at the time it is created.
    """
    def __init__(self, world: PhysicsWorld, playfield: Playfield, seed: int | None = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.seed = seed
        self.rng = random.Random(seed)
        self.world = world
        self.playfield = playfield
        self.platforms: List[Platform] = []
        self.clouds: List[Cloud] = []
        self.created_count = 0          # selects which platforms move; restarts with the layout
        self.generation = 0
        self.next_platform_y = 0.0      # frontier
        self.next_cloud_y = 0.0
        self._serials = itertools.count(1)
        self._by_serial: Dict[int, Platform] = {}
        self.reset()

    # -------------------- Layout --------------------

    def reset(self):
        """Drop every platform and rebuild the fixed opening layout."""
        for platform in self.platforms:
            self._destroy(platform)
        self.platforms = []
        self.created_count = 0
        self.generation += 1

        for x, y, w in START_LAYOUT:
            self.add_platform(x, y, w, score=0)

        top = max((p.y for p in self.platforms), default=0.0)
        self.next_platform_y = top + self.rng.uniform(GAP_MIN, GAP_MAX)

    def add_platform(self, x: float, y: float, width: float, score: int,
                     height: float = PLATFORM_H) -> Platform:
        body = Body(x=float(x), y=float(y), width=float(width), height=float(height),
                    category=Category.GROUND)
        platform = Platform(body=body, serial=next(self._serials), base=(float(x), float(y)))
        body.owner = platform

        self.created_count += 1
        if self.created_count % MOVING_EVERY == 0:
            kind = motion_kind(score, self.created_count)
            platform.motion = self._plan_motion(platform, kind, motion_params(score))

        self.world.add(body)
        self.platforms.append(platform)
        self._by_serial[platform.serial] = platform
        return platform

    def spawn_platform(self, y: float, score: int) -> Platform:
        w = self.rng.uniform(PLATFORM_MIN_W, PLATFORM_MAX_W)
        half = w / 2
        min_x = -self.playfield.half_width + half + PLATFORM_SIDE_MARGIN
        max_x = self.playfield.half_width - half - PLATFORM_SIDE_MARGIN
        x = self.rng.uniform(min_x, max_x)
        return self.add_platform(x, y, w, score)

    def extend(self, target_y: float, score: int = 0, force: bool = False) -> int:
        """Spawn platforms until the frontier passes target_y; `force` spawns at least one."""
        spawned = 0
        while force or self.next_platform_y < target_y:
            self.spawn_platform(self.next_platform_y, score)
            spawned += 1
            self.next_platform_y += self.rng.uniform(GAP_MIN, GAP_MAX)
            if force and self.next_platform_y >= target_y:
                break
        if spawned:
            logger.debug("spawned %d platform(s), frontier now %.1f", spawned, self.next_platform_y)
        return spawned

    def cull(self, below_y: float) -> int:
        """Remove every platform whose centre is below below_y; returns how many went."""
        doomed = [p for p in self.platforms if p.y < below_y]
        if not doomed:
            return 0
        for platform in doomed:
            self._destroy(platform)
        self.platforms = [p for p in self.platforms if p.serial in self._by_serial]
        return len(doomed)

    def _destroy(self, platform: Platform):
        platform.motion = None
        self._by_serial.pop(platform.serial, None)
        self.world.remove(platform.body)

    def update_movement(self, dt: float):
        for platform in self.platforms:
            platform.update_movement(dt)
        for cloud in self.clouds:
            cloud.update(dt)

    # -------------------- Handles --------------------

    def handle(self, platform: Platform) -> PlatformHandle:
        return PlatformHandle(platform.serial, self.generation)

    def resolve(self, handle: Optional[PlatformHandle]) -> Optional[Platform]:
        """The live platform behind a handle, or None once it was culled or the layout rebuilt."""
        if handle is None or handle.generation != self.generation:
            return None
        return self._by_serial.get(handle.serial)

    @staticmethod
    def platform_for(body: Body) -> Optional[Platform]:
        return body.owner if isinstance(body.owner, Platform) else None

    # -------------------- Motion --------------------

    def _plan_motion(self, platform: Platform, kind: MotionKind,
                     params: MotionParams) -> Optional[PlatformMotion]:
        """
        Clamp the travel to the playfield and fall back to a calmer motion when
        the clamped path is too short. Returns None for a static platform.
        """
        x, y = platform.base
        half = platform.width / 2
        min_x = -self.playfield.half_width + half + MOTION_PADDING
        max_x = self.playfield.half_width - half - MOTION_PADDING
        left = max(min_x, x - params.horizontal_travel)
        right = min(max_x, x + params.horizontal_travel)
        lower = y - params.vertical_travel
        upper = y + params.vertical_travel

        has_horizontal = right - left >= MIN_TRAVEL_SPAN
        has_vertical = upper - lower >= MIN_TRAVEL_SPAN

        if kind in (MotionKind.VERTICAL, MotionKind.DIAGONAL) and not has_vertical:
            kind = MotionKind.HORIZONTAL
        if kind is MotionKind.DIAGONAL and not has_horizontal:
            kind = MotionKind.VERTICAL
        if kind is MotionKind.HORIZONTAL and not has_horizontal:
            kind = MotionKind.STATIC

        speed = params.speed

        def duration(distance: float) -> float:
            return max(MIN_LEG_DURATION_S, distance / speed)

        if kind is MotionKind.HORIZONTAL:
            full = duration(right - left)
            if self.rng.random() < 0.5:
                intro = [((left, y), duration(x - left))]
                loop = [((right, y), full), ((left, y), full)]
            else:
                intro = [((right, y), duration(right - x))]
                loop = [((left, y), full), ((right, y), full)]
            return PlatformMotion(kind, (x, y), intro, loop)

        if kind is MotionKind.VERTICAL:
            full = duration(upper - lower)
            return PlatformMotion(kind, (x, y), [], [((x, upper), full), ((x, lower), full)])

        if kind is MotionKind.DIAGONAL:
            full = duration(right - left)
            return PlatformMotion(kind, (x, y), [],
                                  [((left, upper), full), ((right, lower), full)])

        return None

    # -------------------- Clouds --------------------

    def reset_clouds(self, from_y: float, up_to_y: float):
        self.clouds = []
        self.next_cloud_y = from_y + CLOUD_FIRST_OFFSET
        self.spawn_clouds(up_to_y)

    def spawn_clouds(self, up_to_y: float):
        capped = up_to_y + CLOUD_LOOKAHEAD
        while self.next_cloud_y < capped:
            self.clouds.append(self._make_cloud(self.next_cloud_y))
            self.next_cloud_y += self.rng.uniform(CLOUD_GAP_MIN, CLOUD_GAP_MAX)

    def cull_clouds(self, below_y: float):
        self.clouds = [c for c in self.clouds if c.y >= below_y]

    def _make_cloud(self, y: float) -> Cloud:
        rng = self.rng
        w = rng.uniform(CLOUD_MIN_W, CLOUD_MAX_W)
        h = w * rng.uniform(0.4, 0.55)
        puffs = []
        for i in range(rng.randint(3, 5)):
            spread = w * 0.45
            puffs.append((
                rng.uniform(-spread, spread),
                rng.uniform(-h * 0.2, h * 0.2) - (i % 2) * 6,
                w * rng.uniform(0.45, 0.7),
                h * rng.uniform(0.55, 0.85),
            ))
        reach = self.playfield.width / 2.2
        return Cloud(
            base_x=rng.uniform(-reach, reach),
            y=y + rng.uniform(-60, 60),
            width=w,
            height=h,
            drift=rng.uniform(50, 100),
            period=rng.uniform(14, 20),
            direction=1 if rng.random() < 0.5 else -1,
            puffs=puffs,
        )
