"""reputestack — Reputation scores for AI agents from task-outcome attestations."""

from reputestack.core import (
    Attestation, AttestationStore, Outcome,
    ReputeStackError, InvalidAttestation,
)
from reputestack.scoring import (
    Score, calculate_score, composite_score, composite_breakdown,
    reputation_points, level_for, score_report,
)
from reputestack.tiers import TierScheme, PRIMARY, LETTER, get_scheme, score_to_tier

__all__ = [
    "Attestation",
    "AttestationStore",
    "Outcome",
    "ReputeStackError",
    "InvalidAttestation",
    "Score",
    "calculate_score",
    "composite_score",
    "composite_breakdown",
    "reputation_points",
    "level_for",
    "score_report",
    "TierScheme",
    "PRIMARY",
    "LETTER",
    "get_scheme",
    "score_to_tier",
]
