# src/env/climb_env.py
from __future__ import annotations
from typing import Optional, Tuple, Dict, Any

import numpy as np
import gymnasium as gym
import pygame

from src.dockjumper.config import FPS, Playfield
from src.dockjumper.controls import Intent
from src.dockjumper.render import draw_frame
from src.dockjumper.scores import MemoryScoreStore
from src.dockjumper.world import FrameDriver
from src.env.observations import build_observation, observation_bounds

# action -> (move direction, jump)
ACTIONS: Tuple[Tuple[int, bool], ...] = (
    (0, False),     # 0 NOOP
    (-1, False),    # 1 LEFT
    (1, False),     # 2 RIGHT
    (0, True),      # 3 JUMP
    (-1, True),     # 4 LEFT + JUMP
    (1, True),      # 5 RIGHT + JUMP
)


class ClimbEnv(gym.Env):
    """
    DockJumper Gymnasium environment (vector observations).
    - Simulation at 60 Hz (internal), same tick as the game.
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Reward: +1 per platform climbed past, -1 when the run ends.
    - An episode ends on the first respawn (hazard or fall).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.sim_fps = FPS
        self.dt = 1.0 / self.sim_fps
        self.playfield = Playfield()

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(len(ACTIONS))
        low, high = observation_bounds()
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.driver: Optional[FrameDriver] = None
        self.store = MemoryScoreStore()
        self.alive: bool = True
        self.timestep: int = 0
        self.current_seed: Optional[int] = None
        self.death_cause: Optional[str] = None
        self.best_height: float = 0.0

        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # The level seed always comes from np_random, so reset(seed=s) is reproducible.
        level_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.driver = FrameDriver(seed=level_seed, playfield=self.playfield, store=self.store,
                                  player_name="agent", clock=lambda: 0.0)

        self.alive = True
        self.death_cause = None
        self.timestep = 0
        self.current_seed = level_seed
        self.best_height = self.driver.player.y

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0}
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.driver is not None, "Call reset() first."
        driver = self.driver

        direction, jump = ACTIONS[int(action)]
        driver.controls.set(Intent.LEFT, direction < 0)
        driver.controls.set(Intent.RIGHT, direction > 0)
        if jump:
            driver.controls.set(Intent.JUMP, True)

        reward = 0.0
        for _ in range(self.frame_skip):
            before = driver.run.current_score
            respawned = driver.tick(self.dt)
            if respawned:
                self.alive = False
                self.death_cause = driver.run.last_respawn_cause
                reward -= 1.0
                break
            reward += float(driver.run.current_score - before)
            self.best_height = max(self.best_height, driver.player.y)

        self.timestep += 1
        terminated = not self.alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "seed": self.current_seed,
            "timestep": self.timestep,
            "score": driver.run.current_score,
            "high_score": driver.run.high_score,
            "grounded": driver.player.grounded,
            "best_height": self.best_height,
            "death_cause": self.death_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.driver is not None
        low, high = self.observation_space.low, self.observation_space.high
        return np.clip(build_observation(self.driver), low, high).astype(np.float32)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.driver is None:
            return None

        size = (int(self.playfield.width), int(self.playfield.height))
        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("DockJumper - Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)
            if pygame.font.get_init():
                self.font = pygame.font.SysFont("jetbrainsmono", 13)

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()

        draw_frame(self.screen, self.driver.snapshot(), self.playfield, self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        # Return an (H, W, 3) uint8 array
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
