from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_rl.game import Action, GameConfig, GameSession, ManualScheduler, Playfield, ScoringRules


def _board_features(field: Playfield) -> Dict[str, int]:
    return {
        "max_height": field.get_max_height(),
        "holes": field.count_holes(),
        "bumpiness": field.get_bumpiness(),
    }


class TetrisEnv(gym.Env):
    """Drives a :class:`GameSession` one command and one frame per step.

    Each step applies the chosen action, then advances the session clock by
    ``frame_ms`` so gravity keeps acting even when the agent idles.
    """

    metadata = {"render_modes": [], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 render_mode: Optional[str] = None,
                 frame_ms: float = 100.0,
                 max_episode_steps: int = 10000,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = 0.0,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = -10.0) -> None:
        super().__init__()
        self.scheduler = ManualScheduler()
        self.session = GameSession(config, rules, scheduler=self.scheduler)
        self.render_mode = render_mode
        self.frame_ms = float(frame_ms)
        self.max_episode_steps = int(max_episode_steps)

        # Reward shaping parameters
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            # Positive components
            "score": 0.01,           # reward per engine point
            "lines": 1.0,            # reward per line cleared
            # Negative components (penalize increases)
            "holes": 0.1,
            "bumpiness": 0.01,
            "height": 0.02,
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        width = self.session.config.width
        height = self.session.config.height
        kinds = 7

        # Board cells: 0 empty, 1..7 locked piece ids, -7..-1 falling piece overlay
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-kinds, high=kinds, shape=(height, width), dtype=np.int8),
                "next_piece": spaces.Discrete(kinds + 1),
                "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        next_piece = self.session.next_piece
        return {
            "board": self.session.get_state().astype(np.int8),
            "next_piece": int(next_piece.kind) if next_piece is not None else 0,
            "level": np.array([self.session.level], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.session.score,
            "level": self.session.level,
            "lines_cleared_total": self.session.lines_cleared_total,
            "pieces_locked": self.session.pieces_locked,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.session.rng.seed(seed)
        self.session.restart()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = Action(int(action))
        score_before = self.session.score
        lines_before = self.session.lines_cleared_total
        features_before = _board_features(self.session.field)

        accepted = self.session.apply(action)
        self.scheduler.advance(self.frame_ms)

        features_after = _board_features(self.session.field)
        score_delta = self.session.score - score_before
        lines = self.session.lines_cleared_total - lines_before

        reward_components: Dict[str, float] = {
            "score": self.reward_weights["score"] * float(score_delta),
            "lines": self.reward_weights["lines"] * float(lines),
            "holes": -self.reward_weights["holes"] * float(
                max(0, features_after["holes"] - features_before["holes"])),
            "bumpiness": -self.reward_weights["bumpiness"] * float(
                max(0, features_after["bumpiness"] - features_before["bumpiness"])),
            "height": -self.reward_weights["height"] * float(
                max(0, features_after["max_height"] - features_before["max_height"])),
        }
        if not accepted and action != Action.NONE:
            reward_components["invalid"] = self.invalid_action_penalty

        reward_components["step"] = self.step_penalty
        terminated = bool(self.session.game_over)
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(score_delta)
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> None:
        # Drawing belongs to the presentation layer; use session.snapshot()
        return None

    def close(self) -> None:
        self.session.stop()
