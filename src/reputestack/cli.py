#!/usr/bin/env python3
"""
reputestack CLI — Offline scoring over an attestation JSON file.

Works directly with core modules (no server required).

Commands:
    attest - Append an attestation to a file
    score  - Score an agent
    rank   - Rank every agent in a file by composite score
    serve  - Run the HTTP API
"""

import argparse
import json
import os
import sys
from typing import Optional


def _output(data, args: argparse.Namespace, human_fn=None):
    """Output data as JSON or pretty-printed."""
    if getattr(args, 'json', False):
        print(json.dumps(data, indent=2, default=str))
    elif human_fn:
        human_fn(data)
    else:
        print(json.dumps(data, indent=2, default=str))


def _load_store(path: str, missing_ok: bool = False):
    from reputestack.core import AttestationStore

    if missing_ok and not os.path.exists(path):
        return AttestationStore()
    return AttestationStore.load(path)


# ─── Commands ──────────────────────────────────────────────────────

def cmd_attest(args):
    """Append an attestation to a JSON file (created if missing)."""
    from reputestack.core import Attestation

    store = _load_store(args.file, missing_ok=True)
    kwargs = {}
    if args.timestamp is not None:
        kwargs["timestamp"] = args.timestamp
    att = store.record(Attestation(
        agent_id=args.agent_id,
        task_id=args.task_id,
        outcome=args.outcome,
        escrow_amount=args.escrow,
        chain=args.chain,
        **kwargs,
    ))
    store.save(args.file)

    result = att.to_dict()
    result["total"] = len(store)

    def human(d):
        print("✅ Attestation recorded")
        print(f"   Agent:    {d['agentId']}")
        print(f"   Task:     {d['taskId']}")
        print(f"   Outcome:  {d['outcome']}")
        print(f"   Escrow:   {d['escrowAmount']} ({d['chain']})")
        print(f"   Saved to: {args.file} ({d['total']} attestations)")

    _output(result, args, human)
    return result


def cmd_score(args):
    """Score one agent from a file."""
    from reputestack.scoring import score_report
    from reputestack.tiers import get_scheme, tier_emoji

    store = _load_store(args.file)
    scheme = get_scheme(args.scheme)
    if args.wallet:
        agent_id = args.agent_id.lower()
        attestations = store.list(agent_id, ignore_case=True)
    else:
        agent_id = args.agent_id
        attestations = store.list(agent_id)
    result = score_report(attestations, agent_id, scheme)

    def human(d):
        s = d["score"]
        print(f"📊 Reputation for {d['agentId']}")
        print(f"   Composite:    {d['composite']} {tier_emoji(d['tier'])} {d['tier']}")
        print(f"   Tasks:        {s['totalTasks']}")
        print(f"   Success rate: {s['successRate']:.0%}")
        print(f"   Dispute rate: {s['disputeRate']:.0%}")
        print(f"   Volume:       {s['volumeScore']}")
        print(f"   Streak:       {s['streakDays']}")
        print(f"   Points:       {d['reputation']['points']} (level {d['reputation']['level']})")

    _output(result, args, human)
    return result


def cmd_rank(args):
    """Rank all agents in a file by composite score."""
    from reputestack.scoring import score_report
    from reputestack.tiers import get_scheme

    store = _load_store(args.file)
    scheme = get_scheme(args.scheme)
    reports = [score_report(store.list(a), a, scheme) for a in store.agents()]
    reports.sort(key=lambda r: (-r["composite"], r["agentId"]))
    result = {
        "agents": len(reports),
        "attestations": len(store),
        "ranking": [
            {"agentId": r["agentId"], "composite": r["composite"], "tier": r["tier"],
             "totalTasks": r["score"]["totalTasks"]}
            for r in reports[:args.top]
        ],
    }

    def human(d):
        print(f"🏆 {d['agents']} agents, {d['attestations']} attestations")
        for i, row in enumerate(d["ranking"], 1):
            print(f"   {i:>2}. {row['agentId']:<30} {row['composite']:>3}  {row['tier']}")

    _output(result, args, human)
    return result


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn
    from reputestack.api import create_app
    from reputestack.config import Settings

    settings = Settings.from_env()
    if args.scheme:
        settings.tier_scheme = args.scheme
    store = _load_store(args.file) if args.file else None
    uvicorn.run(create_app(store=store, settings=settings), host=args.host, port=args.port)


# ─── Parser ────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    from reputestack.tiers import SCHEMES

    parser = argparse.ArgumentParser(
        prog="reputestack",
        description="reputestack — agent reputation scoring CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--json", action="store_true", help="Machine-readable JSON output")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # attest
    p = sub.add_parser("attest", help="Append an attestation to a file")
    p.add_argument("file", help="Attestation JSON file")
    p.add_argument("agent_id", help="Agent ID")
    p.add_argument("task_id", help="Task ID")
    p.add_argument("outcome", choices=["success", "failure", "disputed"])
    p.add_argument("-e", "--escrow", default="0", help="Escrow amount in base units")
    p.add_argument("--chain", default="base", help="Settlement network tag")
    p.add_argument("-t", "--timestamp", type=int, help="Timestamp in ms (default: now)")

    # score
    p = sub.add_parser("score", help="Score an agent")
    p.add_argument("file", help="Attestation JSON file")
    p.add_argument("agent_id", help="Agent ID or wallet")
    p.add_argument("-w", "--wallet", action="store_true", help="Match the ID case-insensitively")
    p.add_argument("-s", "--scheme", default="primary", choices=sorted(SCHEMES))

    # rank
    p = sub.add_parser("rank", help="Rank agents by composite score")
    p.add_argument("file", help="Attestation JSON file")
    p.add_argument("-t", "--top", type=int, default=10, help="Top N agents to show")
    p.add_argument("-s", "--scheme", default="primary", choices=sorted(SCHEMES))

    # serve
    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("-f", "--file", help="Preload attestations from a JSON file")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=3001)
    p.add_argument("-s", "--scheme", choices=sorted(SCHEMES))

    return parser


def main(argv: Optional[list[str]] = None) -> Optional[dict]:
    """CLI entry point. Returns result dict for testing."""
    from reputestack.core import ReputeStackError

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "attest": cmd_attest,
        "score": cmd_score,
        "rank": cmd_rank,
        "serve": cmd_serve,
    }

    try:
        return commands[args.command](args)
    except FileNotFoundError as e:
        print(f"❌ File not found: {e}", file=sys.stderr)
        sys.exit(1)
    except (ReputeStackError, ValueError, json.JSONDecodeError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
