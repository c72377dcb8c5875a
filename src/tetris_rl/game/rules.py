from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    # Indexed by lines cleared in one lock; multiplied by the current level
    line_clear_scores: tuple[int, int, int, int, int] = (0, 100, 300, 500, 800)
    points_per_level: int = 1000
    initial_drop_interval: int = 1000
    drop_interval_step: int = 100
    min_drop_interval: int = 100

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if lines <= 0:
            return 0
        if lines < len(self.line_clear_scores):
            return self.line_clear_scores[lines] * level
        # Exaggerate beyond 4 just in case of variants
        extra = lines - (len(self.line_clear_scores) - 1)
        return (self.line_clear_scores[-1] + extra * 400) * level

    def level_for_score(self, score: int) -> int:
        return score // self.points_per_level + 1

    def drop_interval_for_level(self, level: int) -> int:
        return max(self.min_drop_interval, self.initial_drop_interval - (level - 1) * self.drop_interval_step)
