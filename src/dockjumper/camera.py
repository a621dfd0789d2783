# src/dockjumper/camera.py
from __future__ import annotations
from dataclasses import dataclass

from .config import CAMERA_LERP, KILL_ZONE_OFFSET, Playfield
from .physics import Body


@dataclass
class Camera:
    """Vertical follow camera; drags the kill-zone hazard along below the view."""
    playfield: Playfield
    hazard: Body
    y: float = 0.0

    @property
    def kill_zone_y(self) -> float:
        return self.y - self.playfield.height / 2 - KILL_ZONE_OFFSET

    def follow(self, target_y: float, lerp: float = CAMERA_LERP):
        self.y += (target_y - self.y) * lerp

    def snap_to(self, y: float):
        self.y = float(y)

    def update_kill_zone(self):
        self.hazard.x = 0.0
        self.hazard.y = self.kill_zone_y
