# src/dockjumper/world.py
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .camera import Camera
from .carrier import MovingPlatformCarrier
from .config import (
    DT, SPAWN_MARGIN, CLEANUP_MARGIN,
    WALL_W, WALL_H, WALL_INSET, GROUND_Y, GROUND_H, HAZARD_H,
    Playfield,
)
from .controls import InputMapper
from .level import LevelGen
from .physics import Body, Category, PhysicsWorld
from .player import Player
from .run import RunController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformView:
    x: float
    y: float
    width: float
    height: float
    moving: bool


@dataclass(frozen=True)
class CloudView:
    x: float
    y: float
    puffs: Tuple[Tuple[float, float, float, float], ...]


@dataclass(frozen=True)
class RenderFrame:
    """Everything a renderer needs for one tick, in world coordinates (Y up)."""
    player: Tuple[float, float, float, float]   # x, y, w, h (centre based)
    facing: int
    platforms: Tuple[PlatformView, ...]
    clouds: Tuple[CloudView, ...]
    ground: Tuple[float, float, float, float]
    kill_zone_y: float
    camera_y: float
    score: int
    high_score: int
    player_name: str


class FrameDriver:
    """
    One fixed tick of the game, in this order:

      input -> horizontal control -> physics step -> contacts (ground state,
      hazard death) -> platform motion -> moving-platform carry -> stream
      platforms/clouds ahead, cull behind -> camera + kill zone -> scoring ->
      bounds check

    A respawn anywhere in the chain ends the tick early.
    """
    def __init__(self,
                 seed: Optional[int] = None,
                 playfield: Optional[Playfield] = None,
                 store=None,
                 player_name: Optional[str] = None,
                 clock: Callable[[], float] = time.time):
        self.playfield = playfield or Playfield()
        self.physics = PhysicsWorld()
        self.walls, self.ground, self.hazard = self._build_surfaces()

        self.level = LevelGen(self.physics, self.playfield, seed)
        self.player = Player.spawn()
        self.physics.add(self.player.body)
        self.camera = Camera(self.playfield, self.hazard, y=self.player.y)
        self.controls = InputMapper()
        self.carrier = MovingPlatformCarrier(self.level)
        self.run = RunController(
            self.physics, self.player, self.level, self.carrier, self.controls,
            self.camera, store=store, player_name=player_name, clock=clock,
        )
        self.time = 0.0
        self.ticks = 0

        self.level.reset_clouds(self.player.y, self.player.y + self.playfield.height)
        self.level.extend(self.player.y + SPAWN_MARGIN, score=0, force=True)
        self.camera.update_kill_zone()
        logger.debug("world ready: seed=%s playfield=%sx%s",
                     self.level.seed, self.playfield.width, self.playfield.height)

    def _build_surfaces(self) -> Tuple[List[Body], Body, Body]:
        half = self.playfield.half_width
        walls = [
            Body(x=x, y=0.0, width=WALL_W, height=WALL_H, category=Category.WALL)
            for x in (-half + WALL_INSET, half - WALL_INSET)
        ]
        ground = Body(x=0.0, y=GROUND_Y, width=self.playfield.width * 2, height=GROUND_H,
                      category=Category.GROUND)
        hazard = Body(x=0.0, y=0.0, width=self.playfield.width * 2, height=HAZARD_H,
                      category=Category.HAZARD)
        for body in (*walls, ground, hazard):
            self.physics.add(body)
        return walls, ground, hazard

    # -------------------- Tick --------------------

    def tick(self, dt: float = DT) -> bool:
        """Advance one fixed step. Returns True if the run was reset during it."""
        self.time += dt
        self.ticks += 1
        now = self.time
        run = self.run

        if self.controls.consume_restart():
            run.respawn(now, cause="restart")
            return True
        if self.controls.consume_jump():
            run.try_jump(now)
        self.player.facing = self.controls.facing
        self.player.apply_horizontal_control(self.controls.move_direction)

        events = self.physics.step(dt)
        if run.handle_contacts(events, now):
            return True

        self.level.update_movement(dt)
        self.carrier.sync(self.player, now)

        self.level.extend(self.player.y + SPAWN_MARGIN, run.current_score)
        self.level.cull(self.camera.y - CLEANUP_MARGIN)
        self.level.spawn_clouds(self.camera.y + self.playfield.height)
        self.level.cull_clouds(self.camera.y - self.playfield.height)

        self.camera.follow(self.player.y)
        self.camera.update_kill_zone()

        run.check_scoring()
        return run.check_bounds(now)

    # -------------------- Render side --------------------

    def snapshot(self) -> RenderFrame:
        p = self.player
        g = self.ground
        return RenderFrame(
            player=(p.x, p.y, p.body.width, p.body.height),
            facing=p.facing,
            platforms=tuple(PlatformView(pl.x, pl.y, pl.width, pl.height, pl.moving)
                            for pl in self.level.platforms),
            clouds=tuple(CloudView(c.x, c.y, tuple(c.puffs)) for c in self.level.clouds),
            ground=(g.x, g.y, g.width, g.height),
            kill_zone_y=self.camera.kill_zone_y,
            camera_y=self.camera.y,
            score=self.run.current_score,
            high_score=self.run.high_score,
            player_name=self.run.player_name,
        )
