#!/usr/bin/env python3
"""
reputestack API — attestation intake and reputation scores over HTTP.

  POST /attestations         — record a task outcome (alias: /receipts)
  GET  /attestations/{id}    — attestation history for an agent
  GET  /score/{id}           — score, composite and tier for an agent
  GET  /score?agentId=|wallet=
  GET  /health
"""

import os
from typing import Optional, Union

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from .config import Settings
from .core import Attestation, AttestationStore, now_ms
from .scoring import score_report
from .security import apply_security, logger, write_rate_limit

__version__ = "0.1.0"


# ─── Models ────────────────────────────────────────────────────────

class AttestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(..., alias="agentId", min_length=1, max_length=200)
    task_id: str = Field(..., alias="taskId", min_length=1, max_length=200)
    outcome: str = Field(..., min_length=1, max_length=32)
    escrow_amount: Optional[Union[int, str]] = Field(None, alias="escrowAmount")
    chain: Optional[str] = Field(None, max_length=64)


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "reputestack"
    version: str = __version__
    agents: int = 0
    attestations: int = 0


# ─── Dependencies ──────────────────────────────────────────────────

def get_store(request: Request) -> AttestationStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# ─── Router ────────────────────────────────────────────────────────

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(store: AttestationStore = Depends(get_store)):
    return HealthResponse(agents=len(store.agents()), attestations=len(store))


@router.post("/attestations", status_code=201, dependencies=[Depends(write_rate_limit)])
@router.post("/receipts", status_code=201, dependencies=[Depends(write_rate_limit)])
def create_attestation(
    req: AttestRequest,
    store: AttestationStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Record a task outcome for an agent. The server clock stamps it."""
    attestation = Attestation(
        agent_id=req.agent_id.strip(),
        task_id=req.task_id.strip(),
        outcome=req.outcome,
        escrow_amount=req.escrow_amount if req.escrow_amount is not None else 0,
        chain=req.chain or settings.default_chain,
        timestamp=now_ms(),
    )
    store.record(attestation)
    logger.info("attestation recorded", extra={
        "agent_id": attestation.agent_id,
        "task_id": attestation.task_id,
        "outcome": attestation.outcome.value,
    })
    return {"success": True, "attestation": attestation.to_dict()}


@router.get("/attestations/{agent_id}")
def list_attestations(agent_id: str, store: AttestationStore = Depends(get_store)):
    attestations = store.list(agent_id)
    return {
        "agentId": agent_id,
        "count": len(attestations),
        "attestations": [a.to_dict() for a in attestations],
    }


def _score_response(agent_id: str, store: AttestationStore, settings: Settings,
                    ignore_case: bool = False) -> dict:
    report = score_report(store.list(agent_id, ignore_case=ignore_case), agent_id, settings.scheme)
    report["updatedAt"] = now_ms()
    return report


@router.get("/score/{agent_id}")
def get_score(
    agent_id: str,
    store: AttestationStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Score an agent from its full history. Unknown agents score zero."""
    return _score_response(agent_id, store, settings)


@router.get("/score")
def get_score_by_query(
    agent_id: Optional[str] = Query(None, alias="agentId"),
    wallet: Optional[str] = Query(None),
    store: AttestationStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Score lookup by ?agentId= or by ?wallet= (wallets match case-insensitively)."""
    if agent_id and agent_id.strip():
        return _score_response(agent_id.strip(), store, settings)
    if wallet and wallet.strip():
        return _score_response(wallet.strip().lower(), store, settings, ignore_case=True)
    raise HTTPException(status_code=400, detail="agentId or wallet required")


# ─── App factory ───────────────────────────────────────────────────

def create_app(store: Optional[AttestationStore] = None,
               settings: Optional[Settings] = None) -> FastAPI:
    """Create a FastAPI app that owns one attestation store."""
    settings = settings or Settings.from_env()
    app = FastAPI(
        title="reputestack API",
        description="Reputation scores for AI agents from task-outcome attestations.",
        version=__version__,
        docs_url=None if settings.production else "/docs",
        redoc_url=None if settings.production else "/redoc",
    )
    app.state.store = store if store is not None else AttestationStore()
    app.state.settings = settings
    apply_security(app, settings)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "3001")))
