#!/usr/bin/env python3
"""reputestack quickstart — score two agents in a few lines.

Run:  python3 examples/quickstart.py
"""
from reputestack import AttestationStore, Attestation, LETTER, PRIMARY, score_report

DAY = 24 * 60 * 60 * 1000
TOKEN = 10 ** 18
NOW = 1_700_000_000_000

store = AttestationStore()

# 1. Alice: steady, well-funded work with one dispute
for day in range(12):
    store.record(Attestation("alice", f"job-{day}", "success", timestamp=NOW - day * DAY,
                             escrow_amount=10 * TOKEN))
store.record(Attestation("alice", "job-x", "disputed", timestamp=NOW - 20 * DAY))

# 2. Bob: a success and a failure a month apart
store.record(Attestation("bob", "job-1", "success", timestamp=NOW, escrow_amount=TOKEN // 2))
store.record(Attestation("bob", "job-2", "failure", timestamp=NOW - 30 * DAY))

# 3. Score with both tier schemes
for agent in store.agents():
    primary = score_report(store.list(agent), agent, PRIMARY)
    letter = score_report(store.list(agent), agent, LETTER)
    s = primary["score"]
    print(f"📊 {agent}: composite {primary['composite']} → {primary['tier']} / {letter['tier']}")
    print(f"   tasks={s['totalTasks']} success={s['successRate']:.0%} "
          f"disputes={s['disputeRate']:.0%} volume={s['volumeScore']} streak={s['streakDays']}")
