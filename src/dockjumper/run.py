# src/dockjumper/run.py
from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional

from .camera import Camera
from .carrier import MovingPlatformCarrier
from .config import SPAWN_X, SPAWN_Y, SPAWN_MARGIN, SCORE_MARGIN
from .controls import InputMapper
from .level import LevelGen
from .physics import Category, ContactEvent, PhysicsWorld
from .player import Player
from .scores import MemoryScoreStore

logger = logging.getLogger(__name__)


class RunController:
    """
    Owns the run: score, high score, ground state and the respawn life cycle.

    There is a single `Running` state; a respawn is an instantaneous reset
    back into it. Contact events from the physics step come in through
    `handle_contacts`, which returns True when the run was reset so the caller
    can drop the rest of the tick.
    """
    def __init__(self,
                 physics: PhysicsWorld,
                 player: Player,
                 level: LevelGen,
                 carrier: MovingPlatformCarrier,
                 controls: InputMapper,
                 camera: Camera,
                 store=None,
                 player_name: Optional[str] = None,
                 clock: Callable[[], float] = time.time):
        self.physics = physics
        self.player = player
        self.level = level
        self.carrier = carrier
        self.controls = controls
        self.camera = camera
        self.store = store if store is not None else MemoryScoreStore()
        self.player_name = player_name or self.store.load_player_name()
        self.clock = clock

        self.current_score = 0
        self.high_score = self.store.load_high_score()
        self.respawns = 0
        self.last_respawn_cause: Optional[str] = None

    # -------------------- Contacts --------------------

    def handle_contacts(self, events: List[ContactEvent], now: float) -> bool:
        for event in events:
            other = event.body_b
            if other.category & Category.HAZARD:
                if event.began:
                    self.respawn(now, cause="hazard")
                    return True
            elif other.category & Category.GROUND:
                if event.began:
                    self._ground_begin(event, now)
                else:
                    self._ground_end(event, now)
        return False

    def _ground_begin(self, event: ContactEvent, now: float):
        self.player.touch_ground(now)
        platform = self.level.platform_for(event.body_b)
        if platform is not None and platform.moving:
            self.carrier.attach(self.player, platform)

    def _ground_end(self, event: ContactEvent, now: float):
        self.player.leave_ground(now)
        platform = self.level.platform_for(event.body_b)
        if platform is not None and self.carrier.carrying(self.player) is platform:
            self.carrier.release(self.player)

    # -------------------- Actions --------------------

    def try_jump(self, now: float) -> bool:
        return self.player.try_jump(now)

    def check_scoring(self) -> int:
        """Score every platform the player has climbed past. Returns points awarded."""
        awarded = 0
        for platform in self.level.platforms:
            if platform.scored:
                continue
            if self.player.y > platform.y + SCORE_MARGIN:
                platform.scored = True
                self._award_point()
                awarded += 1
        return awarded

    def _award_point(self):
        self.current_score += 1
        if self.current_score > self.high_score:
            self.high_score = self.current_score
            self.store.store_high_score(self.high_score)

    def check_bounds(self, now: float) -> bool:
        if self.player.y < self.camera.kill_zone_y:
            self.respawn(now, cause="fall")
            return True
        return False

    # -------------------- Life cycle --------------------

    def respawn(self, now: float, cause: str = "restart"):
        if self.current_score > 0:
            self.store.record_finished_run(self.player_name, self.current_score, self.clock())
        logger.debug("respawn (%s) after score %d, high %d", cause, self.current_score, self.high_score)

        self.respawns += 1
        self.last_respawn_cause = cause
        self.current_score = 0
        self.controls.clear()
        self.physics.forget_contacts()

        self.player.reset(SPAWN_X, SPAWN_Y, now)
        self.level.reset()
        self.camera.snap_to(self.player.y)
        self.level.reset_clouds(self.player.y, self.player.y + self.camera.playfield.height)
        self.level.extend(self.player.y + SPAWN_MARGIN, score=0, force=True)
        self.camera.update_kill_zone()
