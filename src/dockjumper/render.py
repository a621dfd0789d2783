# src/dockjumper/render.py
from __future__ import annotations
from typing import List, Optional

import pygame

from .config import (
    COLOR_BG, COLOR_SKYLINE, COLOR_PLAT, COLOR_PLAT_MOVING, COLOR_PLAYER,
    COLOR_CLOUD, COLOR_HUD, COLOR_SCORE, COLOR_DANGER, Playfield
)
from .world import RenderFrame

HELP_TEXT = "Left/A  Right/D  Space jump  R restart  Esc quit"


def to_screen_rect(frame: RenderFrame, playfield: Playfield,
                   x: float, y: float, w: float, h: float) -> pygame.Rect:
    """World box (centre based, Y up) -> screen rect (top-left, Y down), camera centred."""
    sx = x - w / 2 + playfield.width / 2
    sy = playfield.height / 2 - (y - frame.camera_y) - h / 2
    return pygame.Rect(int(round(sx)), int(round(sy)), int(round(w)), int(round(h)))


def draw_frame(surf: pygame.Surface, frame: RenderFrame, playfield: Playfield,
               font: Optional[pygame.font.Font] = None,
               scoreboard_lines: Optional[List[str]] = None):
    surf.fill(COLOR_BG)

    for cloud in frame.clouds:
        for dx, dy, w, h in cloud.puffs:
            pygame.draw.ellipse(surf, COLOR_CLOUD,
                                to_screen_rect(frame, playfield, cloud.x + dx, cloud.y + dy, w, h))

    gx, gy, gw, gh = frame.ground
    pygame.draw.rect(surf, COLOR_SKYLINE, to_screen_rect(frame, playfield, gx, gy, gw, gh))

    for p in frame.platforms:
        color = COLOR_PLAT_MOVING if p.moving else COLOR_PLAT
        pygame.draw.rect(surf, color, to_screen_rect(frame, playfield, p.x, p.y, p.width, p.height),
                         border_radius=3)

    px, py, pw, ph = frame.player
    body = to_screen_rect(frame, playfield, px, py, pw, ph)
    pygame.draw.rect(surf, COLOR_PLAYER, body, border_radius=4)
    # eye on the facing side
    eye_x = body.centerx + frame.facing * (pw // 4)
    pygame.draw.circle(surf, COLOR_BG, (eye_x, body.top + 9), 3)

    kill = to_screen_rect(frame, playfield, 0.0, frame.kill_zone_y, playfield.width, 4)
    pygame.draw.rect(surf, COLOR_DANGER, kill)

    if font is None:
        return
    surf.blit(font.render(HELP_TEXT, True, COLOR_HUD), (12, 10))
    hud = f"Score: {frame.score}  High: {frame.high_score}"
    surf.blit(font.render(hud, True, COLOR_SCORE), (12, playfield.height - 28))
    if scoreboard_lines:
        y0 = 34
        for i, line in enumerate(scoreboard_lines):
            txt = font.render(line, True, COLOR_HUD)
            surf.blit(txt, (playfield.width - txt.get_width() - 24, y0 + i * 16))
