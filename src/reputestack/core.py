#!/usr/bin/env python3
"""
reputestack — Reputation scoring for AI agents.

Core module: outcomes, attestations, the in-memory attestation store.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHAIN = "base"


# ─── Errors ────────────────────────────────────────────────────────

class ReputeStackError(Exception):
    """Base error for reputestack."""


class InvalidAttestation(ReputeStackError, ValueError):
    """An attestation is missing a required field or breaks an invariant."""

    def __init__(self, field_name: str, message: str):
        self.field = field_name
        super().__init__(f"{field_name}: {message}")


# ─── Outcome ───────────────────────────────────────────────────────

class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    DISPUTED = "disputed"

    @classmethod
    def parse(cls, value) -> "Outcome":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(o.value for o in cls)
            raise InvalidAttestation("outcome", f"must be one of {allowed}, got {value!r}") from None


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_escrow(value) -> int:
    """Exact integer escrow amount from an int or a decimal-digit string."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise InvalidAttestation("escrowAmount", "must be an integer")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        amount = int(value.strip())
    else:
        raise InvalidAttestation("escrowAmount", f"must be a non-negative integer, got {value!r}")
    if amount < 0:
        raise InvalidAttestation("escrowAmount", "must be >= 0")
    return amount


# ─── Attestation ───────────────────────────────────────────────────

@dataclass(frozen=True)
class Attestation:
    """A recorded task outcome: 'agent A finished task X with outcome O at time T'."""

    agent_id: str
    task_id: str
    outcome: Outcome
    timestamp: int = field(default_factory=now_ms)
    escrow_amount: int = 0
    chain: str = DEFAULT_CHAIN

    def __post_init__(self):
        for name, wire in (("agent_id", "agentId"), ("task_id", "taskId")):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidAttestation(wire, "required and must be non-empty")
        object.__setattr__(self, "outcome", Outcome.parse(self.outcome))
        object.__setattr__(self, "escrow_amount", parse_escrow(self.escrow_amount))
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise InvalidAttestation("timestamp", "must be integer milliseconds")
        if not self.chain:
            object.__setattr__(self, "chain", DEFAULT_CHAIN)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict (escrow as a decimal string)."""
        return {
            "agentId": self.agent_id,
            "taskId": self.task_id,
            "outcome": self.outcome.value,
            "timestamp": self.timestamp,
            "escrowAmount": str(self.escrow_amount),
            "chain": self.chain,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Attestation":
        """Deserialize from a wire dict. Raises InvalidAttestation on bad input."""
        if not isinstance(data, dict):
            raise InvalidAttestation("attestation", "must be an object")
        for wire in ("agentId", "taskId", "outcome"):
            if not data.get(wire):
                raise InvalidAttestation(wire, "required and must be non-empty")
        kwargs = {
            "agent_id": data["agentId"],
            "task_id": data["taskId"],
            "outcome": data["outcome"],
            "escrow_amount": data.get("escrowAmount") or 0,
            "chain": data.get("chain") or DEFAULT_CHAIN,
        }
        if data.get("timestamp") is not None:
            kwargs["timestamp"] = data["timestamp"]
        return cls(**kwargs)


# ─── Attestation Store ─────────────────────────────────────────────

class AttestationStore:
    """Append-only attestation lists keyed by agent id.

    Lives for the process lifetime. Appends and snapshot reads share one lock
    so concurrent submissions for the same agent are never lost.
    """

    def __init__(self, attestations: Optional[Iterable[Attestation]] = None):
        self._by_agent: dict[str, list[Attestation]] = {}
        self._lock = threading.Lock()
        for att in attestations or ():
            self.record(att)

    def record(self, attestation: Attestation) -> Attestation:
        """Append an attestation for its agent. Returns the stored record."""
        if not isinstance(attestation, Attestation):
            raise InvalidAttestation("attestation", f"expected Attestation, got {type(attestation).__name__}")
        with self._lock:
            self._by_agent.setdefault(attestation.agent_id, []).append(attestation)
            count = len(self._by_agent[attestation.agent_id])
        logger.debug("recorded %s for %s (%d total)",
                     attestation.outcome.value, attestation.agent_id, count)
        return attestation

    def list(self, agent_id: str, ignore_case: bool = False) -> list[Attestation]:
        """All attestations for an agent in insertion order (empty if unknown)."""
        with self._lock:
            if not ignore_case:
                return list(self._by_agent.get(agent_id, ()))
            wanted = agent_id.lower()
            return [
                att
                for key, atts in self._by_agent.items()
                if key.lower() == wanted
                for att in atts
            ]

    def agents(self) -> list[str]:
        with self._lock:
            return list(self._by_agent)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(atts) for atts in self._by_agent.values())

    def __contains__(self, agent_id: str) -> bool:
        with self._lock:
            return agent_id in self._by_agent

    def to_list(self) -> list[dict]:
        with self._lock:
            return [att.to_dict() for atts in self._by_agent.values() for att in atts]

    @classmethod
    def from_list(cls, data: list[dict]) -> "AttestationStore":
        return cls(Attestation.from_dict(item) for item in data)

    def save(self, filepath: str):
        """Write a JSON snapshot of every attestation."""
        with open(filepath, "w") as f:
            json.dump(self.to_list(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> "AttestationStore":
        """Load a store from a JSON snapshot written by save()."""
        with open(filepath) as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise InvalidAttestation("file", f"{filepath} must hold a JSON list of attestations")
        return cls.from_list(data)
