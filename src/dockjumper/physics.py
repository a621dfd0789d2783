# src/dockjumper/physics.py
"""
Fixed-step physics for axis-aligned boxes.

Only dynamic bodies (the player) are integrated. Static bodies are walls, the
ground strip, the kill-zone hazard and the platforms; they can still be moved
from outside between steps (moving platforms, the hazard that tracks the
camera). A step:

  1. semi-implicit Euler: gravity into vy, clamp vx/vy, move by v*dt
  2. push the dynamic body out of every solid in its collision mask
  3. diff the set of touching boxes in its contact mask against the previous
     step and emit begin/end events

The world never decides what a contact *means*: scoring, respawns and the
moving-platform carry are handled by whoever consumes the events.
"""
from __future__ import annotations
import itertools
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Dict, List

from .config import (
    GRAVITY, MAX_RISE_SPEED, MAX_FALL_SPEED, MOVE_SPEED,
    CONTACT_SKIN, PENETRATION_EPS
)


class Category(IntFlag):
    NONE = 0
    PLAYER = 1 << 0
    GROUND = 1 << 1     # ground strip and every platform
    WALL = 1 << 2
    HAZARD = 1 << 3


_body_ids = itertools.count(1)


def _span_overlap(c1: float, size1: float, c2: float, size2: float) -> float:
    """Overlap of two centred 1-D spans; negative values are the gap between them."""
    return min(c1 + size1 / 2, c2 + size2 / 2) - max(c1 - size1 / 2, c2 - size2 / 2)


@dataclass(eq=False)
class Body:
    """An axis-aligned box, positioned by its centre (Y grows upward)."""
    x: float
    y: float
    width: float
    height: float
    category: Category
    dynamic: bool = False
    vx: float = 0.0
    vy: float = 0.0
    collision_mask: Category = Category.NONE
    contact_mask: Category = Category.NONE
    owner: Any = None
    id: int = field(default_factory=lambda: next(_body_ids))

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def bottom(self) -> float:
        return self.y - self.height / 2

    @property
    def top(self) -> float:
        return self.y + self.height / 2

    def overlap(self, other: "Body") -> tuple[float, float]:
        """(x, y) overlap with another box; a negative component is a gap."""
        return (
            _span_overlap(self.x, self.width, other.x, other.width),
            _span_overlap(self.y, self.height, other.y, other.height),
        )

    def touches(self, other: "Body", skin: float = CONTACT_SKIN) -> bool:
        ox, oy = self.overlap(other)
        return ox > -skin and oy > -skin


@dataclass(frozen=True)
class ContactEvent:
    """Begin/end of a contact between a dynamic body and another box."""
    began: bool
    body_a: Body    # the dynamic body
    body_b: Body

    @property
    def categories(self) -> tuple[Category, Category]:
        return self.body_a.category, self.body_b.category

    def involves(self, category: Category) -> bool:
        return bool((self.body_a.category | self.body_b.category) & category)


class PhysicsWorld:
    def __init__(self,
                 gravity: float = GRAVITY,
                 max_rise: float = MAX_RISE_SPEED,
                 max_fall: float = MAX_FALL_SPEED,
                 max_speed: float = MOVE_SPEED):
        self.gravity = float(gravity)
        self.max_rise = float(max_rise)
        self.max_fall = float(max_fall)
        self.max_speed = float(max_speed)
        self.bodies: List[Body] = []
        # dynamic body id -> {touching body id: body}
        self._touching: Dict[int, Dict[int, Body]] = {}
        self._pending: List[ContactEvent] = []

    def add(self, body: Body) -> Body:
        self.bodies.append(body)
        if body.dynamic:
            self._touching.setdefault(body.id, {})
        return body

    def remove(self, body: Body) -> None:
        """Drop a body; a contact it was part of ends on the next step."""
        if body not in self.bodies:
            return
        self.bodies.remove(body)
        if body.dynamic:
            self._touching.pop(body.id, None)
            return
        for dyn in self.bodies:
            touching = self._touching.get(dyn.id)
            if touching and touching.pop(body.id, None) is not None:
                self._pending.append(ContactEvent(False, dyn, body))

    def forget_contacts(self) -> None:
        """Clear every contact without emitting events (used when the world is rebuilt)."""
        for touching in self._touching.values():
            touching.clear()
        self._pending.clear()

    def touching(self, body: Body) -> List[Body]:
        return list(self._touching.get(body.id, {}).values())

    # -------------------- Step --------------------

    def step(self, dt: float) -> List[ContactEvent]:
        events, self._pending = self._pending, []
        statics = [b for b in self.bodies if not b.dynamic]
        for body in [b for b in self.bodies if b.dynamic]:
            self._integrate(body, dt, statics)
            events.extend(self._update_contacts(body, statics))
        return events

    def _integrate(self, body: Body, dt: float, statics: List[Body]) -> None:
        body.vy += self.gravity * dt
        body.vy = max(self.max_fall, min(body.vy, self.max_rise))
        body.vx = max(-self.max_speed, min(body.vx, self.max_speed))

        prev_x, prev_y = body.x, body.y
        body.x += body.vx * dt
        body.y += body.vy * dt

        for solid in statics:
            if solid.category & body.collision_mask:
                self._resolve(body, solid, prev_x, prev_y)

    def _resolve(self, body: Body, solid: Body, prev_x: float, prev_y: float) -> None:
        ox, oy = body.overlap(solid)
        if ox <= PENETRATION_EPS or oy <= PENETRATION_EPS:
            return

        # Resolve along the axis we were clear on before moving; if we were
        # already inside on both axes (carried into it), take the shallow one.
        clear_y = _span_overlap(prev_y, body.height, solid.y, solid.height) <= PENETRATION_EPS
        clear_x = _span_overlap(prev_x, body.width, solid.x, solid.width) <= PENETRATION_EPS
        if clear_y:
            vertical = True
        elif clear_x:
            vertical = False
        else:
            vertical = oy < ox

        if vertical:
            if prev_y >= solid.y:
                body.y = solid.top + body.height / 2
                body.vy = max(body.vy, 0.0)
            else:
                body.y = solid.bottom - body.height / 2
                body.vy = min(body.vy, 0.0)
        else:
            if prev_x <= solid.x:
                body.x = solid.left - body.width / 2
                body.vx = min(body.vx, 0.0)
            else:
                body.x = solid.right + body.width / 2
                body.vx = max(body.vx, 0.0)

    def _update_contacts(self, body: Body, statics: List[Body]) -> List[ContactEvent]:
        before = self._touching.setdefault(body.id, {})
        now = {
            other.id: other for other in statics
            if (other.category & body.contact_mask) and body.touches(other)
        }
        events = [ContactEvent(True, body, other)
                  for oid, other in now.items() if oid not in before]
        events.extend(ContactEvent(False, body, other)
                      for oid, other in before.items() if oid not in now)
        self._touching[body.id] = now
        return events
