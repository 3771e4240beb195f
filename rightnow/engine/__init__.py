"""Scoring and free-time engine for rightnow."""

from rightnow.engine.scoring import energy_fit, urgency, time_fit, calculate_score
from rightnow.engine.suggestion import suggest_tasks, score_tasks
from rightnow.engine.free_blocks import compute_free_blocks, next_free_block, clamp_to_next_conflict

__all__ = [
    "energy_fit",
    "urgency",
    "time_fit",
    "calculate_score",
    "suggest_tasks",
    "score_tasks",
    "compute_free_blocks",
    "next_free_block",
    "clamp_to_next_conflict",
]
