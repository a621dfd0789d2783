# src/dockjumper/controls.py
from __future__ import annotations
from enum import Enum
from typing import Dict, Optional

import pygame

from .config import FACING_DEADZONE


class Intent(Enum):
    LEFT = "left"
    RIGHT = "right"
    JUMP = "jump"
    RESTART = "restart"


DEFAULT_BINDINGS: Dict[int, Intent] = {
    pygame.K_LEFT: Intent.LEFT,
    pygame.K_a: Intent.LEFT,
    pygame.K_RIGHT: Intent.RIGHT,
    pygame.K_d: Intent.RIGHT,
    pygame.K_SPACE: Intent.JUMP,
    pygame.K_r: Intent.RESTART,
}


class InputMapper:
    """
    Raw key presses -> intents. Left/right are held states; jump and restart
    are edges that the frame driver consumes once.
    """
    def __init__(self, bindings: Optional[Dict[int, Intent]] = None):
        self.bindings = dict(DEFAULT_BINDINGS if bindings is None else bindings)
        self.left = False
        self.right = False
        self.facing = 1
        self._jump = False
        self._restart = False

    def handle_key(self, key: int, pressed: bool) -> Optional[Intent]:
        intent = self.bindings.get(key)
        if intent is not None:
            self.set(intent, pressed)
        return intent

    def set(self, intent: Intent, pressed: bool):
        if intent is Intent.LEFT:
            self.left = pressed
        elif intent is Intent.RIGHT:
            self.right = pressed
        elif intent is Intent.JUMP:
            if pressed:
                self._jump = True
        elif intent is Intent.RESTART:
            if pressed:
                self._restart = True
        self._update_facing()

    @property
    def move_direction(self) -> int:
        return int(self.right) - int(self.left)

    def _update_facing(self):
        direction = self.move_direction
        if direction > FACING_DEADZONE:
            self.facing = 1
        elif direction < -FACING_DEADZONE:
            self.facing = -1

    def consume_jump(self) -> bool:
        requested, self._jump = self._jump, False
        return requested

    def consume_restart(self) -> bool:
        requested, self._restart = self._restart, False
        return requested

    def clear(self):
        self.left = self.right = False
        self._jump = self._restart = False
        self.facing = 1
