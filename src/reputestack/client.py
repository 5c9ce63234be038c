"""
reputestack.client — Python SDK for the reputestack API.

Usage:
    from reputestack.client import ReputeStackClient

    with ReputeStackClient("http://localhost:3001") as client:
        client.record("agent-1", "task-42", "success", escrow_amount=5 * 10**18)
        print(client.score("agent-1")["tier"])
"""

from __future__ import annotations

import httpx
from dataclasses import dataclass, field
from typing import Optional, Union
from urllib.parse import quote


class ReputeStackClientError(Exception):
    """Raised when the API returns an error."""
    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(f"[{status}] {detail}")


@dataclass
class ReputeStackClient:
    """Lightweight synchronous client."""

    base_url: str = "http://localhost:3001"
    timeout: float = 10.0
    transport: Optional[httpx.BaseTransport] = None
    _http: httpx.Client = field(init=False, repr=False)

    def __post_init__(self):
        self._http = httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -- internal --

    def _request(self, method: str, path: str, **kwargs) -> dict:
        r = self._http.request(method, path, **kwargs)
        if r.status_code >= 400:
            detail = r.json().get("detail", r.text) if r.headers.get("content-type", "").startswith("application/json") else r.text
            raise ReputeStackClientError(r.status_code, detail)
        return r.json()

    # -- Attestations --

    def record(self, agent_id: str, task_id: str, outcome: str,
               escrow_amount: Union[int, str] = 0, chain: Optional[str] = None) -> dict:
        """Submit a task outcome. Escrow is sent as a decimal string to keep it exact."""
        body = {
            "agentId": agent_id,
            "taskId": task_id,
            "outcome": outcome,
            "escrowAmount": str(escrow_amount),
        }
        if chain:
            body["chain"] = chain
        return self._request("POST", "/attestations", json=body)["attestation"]

    def attestations(self, agent_id: str) -> list[dict]:
        return self._request("GET", f"/attestations/{quote(agent_id, safe='')}")["attestations"]

    # -- Scores --

    def score(self, agent_id: str) -> dict:
        return self._request("GET", "/score", params={"agentId": agent_id})

    def score_for_wallet(self, wallet: str) -> dict:
        return self._request("GET", "/score", params={"wallet": wallet})

    def health(self) -> dict:
        return self._request("GET", "/health")
