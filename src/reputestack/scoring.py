"""
Scoring engine — trust score from an agent's attestation history.

Components of the composite (0-100):
  Success   40  share of successful outcomes
  Volume    30  escrow settled on successful tasks, saturating at 100 tokens
  Streak    20  recent activity window, saturating at 30
  Disputes  10  share of tasks not disputed

Everything is recomputed from the full history on every call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .core import Attestation, Outcome

TOKEN_SCALE = 10 ** 18
DAY_MS = 24 * 60 * 60 * 1000
STREAK_GAP_MS = 2 * DAY_MS

WEIGHTS = {
    "success": 40,
    "volume": 30,
    "streak": 20,
    "dispute": 10,
}

VOLUME_SATURATION = 100
STREAK_SATURATION = 30

POINTS = {
    Outcome.SUCCESS: 10,
    Outcome.FAILURE: -5,
    Outcome.DISPUTED: -10,
}
POINTS_PER_LEVEL = 50


@dataclass(frozen=True)
class Score:
    agent_id: str
    total_tasks: int
    success_rate: float  # 0-1
    dispute_rate: float  # 0-1, lower is better
    volume_score: int  # whole tokens settled on successful tasks
    streak_days: int
    last_active: int  # ms since epoch, 0 if no history

    def to_dict(self) -> dict:
        return {
            "agentId": self.agent_id,
            "totalTasks": self.total_tasks,
            "successRate": self.success_rate,
            "disputeRate": self.dispute_rate,
            "volumeScore": self.volume_score,
            "streakDays": self.streak_days,
            "lastActive": self.last_active,
        }


def empty_score(agent_id: str = "") -> Score:
    return Score(agent_id, 0, 0.0, 0.0, 0, 0, 0)


def volume_of(attestations: Sequence[Attestation]) -> int:
    """Sum successful escrow exactly, then scale down once."""
    total = sum(a.escrow_amount for a in attestations if a.outcome is Outcome.SUCCESS)
    return total // TOKEN_SCALE


def streak_of(timestamps: Sequence[int]) -> int:
    """Count adjacent gaps <= 2 days walking back from the most recent timestamp.

    Approximates the length of the latest active window; it is not a tally of
    calendar days.
    """
    ordered = sorted(timestamps, reverse=True)
    streak = 0
    for newer, older in zip(ordered, ordered[1:]):
        if newer - older > STREAK_GAP_MS:
            break
        streak += 1
    return streak


def calculate_score(attestations: Sequence[Attestation], agent_id: Optional[str] = None) -> Score:
    """Compute a Score from one agent's attestations (any order)."""
    if not attestations:
        return empty_score(agent_id or "")

    total = len(attestations)
    successes = sum(1 for a in attestations if a.outcome is Outcome.SUCCESS)
    disputes = sum(1 for a in attestations if a.outcome is Outcome.DISPUTED)
    timestamps = [a.timestamp for a in attestations]

    return Score(
        agent_id=agent_id or attestations[0].agent_id,
        total_tasks=total,
        success_rate=successes / total,
        dispute_rate=disputes / total,
        volume_score=volume_of(attestations),
        streak_days=streak_of(timestamps),
        last_active=max(timestamps),
    )


def composite_breakdown(score: Score) -> dict[str, float]:
    """Weighted contribution of each component, each capped at its weight."""
    if score.total_tasks == 0:
        return {name: 0.0 for name in WEIGHTS}
    return {
        "success": score.success_rate * WEIGHTS["success"],
        "volume": min(score.volume_score / VOLUME_SATURATION, 1) * WEIGHTS["volume"],
        "streak": min(score.streak_days / STREAK_SATURATION, 1) * WEIGHTS["streak"],
        "dispute": (1 - score.dispute_rate) * WEIGHTS["dispute"],
    }


def composite_score(score: Score) -> int:
    """Composite 0-100 for ranking; halves round up."""
    if score.total_tasks == 0:
        return 0
    total = sum(composite_breakdown(score).values())
    return max(0, min(100, math.floor(total + 0.5)))


# ─── Reputation points ─────────────────────────────────────────────

def points_for(outcome) -> int:
    return POINTS[Outcome.parse(outcome)]


def reputation_points(attestations: Sequence[Attestation]) -> int:
    return sum(POINTS[a.outcome] for a in attestations)


def level_for(points: int) -> int:
    """One level per 50 points, never below 1."""
    return max(1, points // POINTS_PER_LEVEL + 1)


def score_report(attestations: Sequence[Attestation], agent_id: str, scheme) -> dict:
    """Score, composite, tier and reputation for one agent as a JSON-ready dict."""
    score = calculate_score(attestations, agent_id)
    composite = composite_score(score)
    points = reputation_points(attestations)
    return {
        "agentId": agent_id,
        "score": score.to_dict(),
        "composite": composite,
        "tier": scheme.label(composite, has_history=score.total_tasks > 0),
        "reputation": {"points": points, "level": level_for(points)},
    }


__all__ = [
    "Score", "calculate_score", "composite_score", "composite_breakdown",
    "empty_score", "volume_of", "streak_of",
    "points_for", "reputation_points", "level_for", "score_report",
    "WEIGHTS", "TOKEN_SCALE", "DAY_MS",
]
