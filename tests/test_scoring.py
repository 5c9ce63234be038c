"""Tests for the scoring engine, composite score and reputation points."""

import pytest

from reputestack.core import Attestation
from reputestack.scoring import (
    DAY_MS, TOKEN_SCALE, calculate_score, composite_breakdown, composite_score,
    empty_score, level_for, points_for, reputation_points, score_report, streak_of,
)
from reputestack.tiers import LETTER, PRIMARY

T = 1_700_000_000_000


def att(outcome="success", escrow=0, ts=T, agent="agent-1", task="t"):
    return Attestation(agent_id=agent, task_id=task, outcome=outcome,
                       escrow_amount=escrow, timestamp=ts)


# ── Empty history ──

def test_empty_sequence_scores_zero():
    score = calculate_score([], "ghost")
    assert score == empty_score("ghost")
    assert score.total_tasks == 0
    assert score.last_active == 0
    assert composite_score(score) == 0
    assert PRIMARY.label(0, has_history=False) == "unverified"


def test_empty_sequence_without_agent_id():
    assert calculate_score([]).agent_id == ""


# ── Rates ──

def test_rates_bounded_and_complementary():
    atts = [att("success"), att("failure"), att("disputed"), att("success")]
    score = calculate_score(atts)
    assert score.total_tasks == 4
    assert score.success_rate == 0.5
    assert score.dispute_rate == 0.25
    assert 0 <= score.success_rate <= 1
    assert 0 <= score.dispute_rate <= 1
    assert score.success_rate + (1 - score.success_rate) == 1


def test_agent_id_taken_from_history():
    assert calculate_score([att(agent="bob")]).agent_id == "bob"


# ── Volume ──

def test_volume_counts_only_successes():
    atts = [att("success", 3 * TOKEN_SCALE), att("failure", 50 * TOKEN_SCALE),
            att("disputed", 50 * TOKEN_SCALE)]
    assert calculate_score(atts).volume_score == 3


def test_volume_divides_the_aggregated_sum():
    # each amount alone truncates to 0 tokens, together they make 1
    half = TOKEN_SCALE // 2
    atts = [att("success", half), att("success", half)]
    assert calculate_score(atts).volume_score == 1


def test_volume_truncates():
    assert calculate_score([att("success", 2 * TOKEN_SCALE - 1)]).volume_score == 1


def test_volume_exact_for_huge_amounts():
    amount = 10**40 + 7
    assert calculate_score([att("success", amount)]).volume_score == amount // TOKEN_SCALE


# ── Streak ──

def test_streak_stops_at_first_long_gap():
    atts = [att(ts=T), att(ts=T - DAY_MS), att(ts=T - 10 * DAY_MS)]
    score = calculate_score(atts)
    assert score.streak_days == 1
    assert score.last_active == T


def test_streak_ignores_insertion_order():
    atts = [att(ts=T - 2 * DAY_MS), att(ts=T), att(ts=T - DAY_MS)]
    score = calculate_score(atts)
    assert score.streak_days == 2
    assert score.last_active == T


def test_streak_gap_of_exactly_two_days_counts():
    assert streak_of([T, T - 2 * DAY_MS]) == 1
    assert streak_of([T, T - 2 * DAY_MS - 1]) == 0


def test_streak_single_attestation():
    assert streak_of([T]) == 0


# ── Composite ──

def test_concrete_scenario():
    atts = [att("success", 5 * TOKEN_SCALE), att("disputed", 0, ts=T - 30 * DAY_MS)]
    score = calculate_score(atts)
    assert score.total_tasks == 2
    assert score.success_rate == 0.5
    assert score.dispute_rate == 0.5
    assert score.volume_score == 5
    assert score.streak_days == 0
    assert composite_score(score) == 27
    assert PRIMARY.label(27) == "unverified"


def test_half_rounds_up():
    # 40 + 4.5 + 0 + 10 = 54.5
    score = calculate_score([att("success", 15 * TOKEN_SCALE)])
    assert sum(composite_breakdown(score).values()) == pytest.approx(54.5)
    assert composite_score(score) == 55


def test_perfect_agent_reaches_100():
    atts = [att("success", 100 * TOKEN_SCALE, ts=T - i * DAY_MS, task=f"t{i}") for i in range(31)]
    assert composite_score(calculate_score(atts)) == 100


def test_components_capped_at_weight():
    atts = [att("success", 10_000 * TOKEN_SCALE, ts=T - i * DAY_MS) for i in range(60)]
    breakdown = composite_breakdown(calculate_score(atts))
    assert breakdown == {"success": 40, "volume": 30, "streak": 20, "dispute": 10}


def test_all_failures_still_get_dispute_term():
    score = calculate_score([att("failure", ts=T - 30 * DAY_MS * i) for i in range(3)])
    assert composite_score(score) == 10


def test_adding_success_never_lowers_composite():
    history = [att("failure", ts=T - DAY_MS), att("disputed", ts=T - 5 * DAY_MS),
               att("success", TOKEN_SCALE, ts=T)]
    before = composite_score(calculate_score(history))
    after = composite_score(calculate_score(history + [att("success", 2 * TOKEN_SCALE, ts=T)]))
    assert after >= before


def test_scoring_is_idempotent():
    history = (att("success", 3 * TOKEN_SCALE), att("disputed", ts=T - DAY_MS))
    first = calculate_score(history)
    second = calculate_score(history)
    assert first == second
    assert composite_score(first) == composite_score(second)


def test_composite_in_range():
    for outcomes in (["failure"], ["disputed"], ["success"], ["success", "disputed", "failure"]):
        score = calculate_score([att(o) for o in outcomes])
        assert 0 <= composite_score(score) <= 100


# ── Reputation points ──

@pytest.mark.parametrize("outcome,points", [("success", 10), ("failure", -5), ("disputed", -10)])
def test_points_for(outcome, points):
    assert points_for(outcome) == points


def test_reputation_points_and_level():
    atts = [att("success") for _ in range(6)] + [att("failure")]
    points = reputation_points(atts)
    assert points == 55
    assert level_for(points) == 2


def test_level_never_below_one():
    assert level_for(0) == 1
    assert level_for(-30) == 1
    assert level_for(49) == 1
    assert level_for(50) == 2


# ── Report ──

def test_score_report_shape():
    report = score_report([att("success", 5 * TOKEN_SCALE)], "agent-1", PRIMARY)
    assert report["agentId"] == "agent-1"
    assert set(report["score"]) == {
        "agentId", "totalTasks", "successRate", "disputeRate",
        "volumeScore", "streakDays", "lastActive",
    }
    assert report["composite"] == 52
    assert report["tier"] == "novice"
    assert report["reputation"] == {"points": 10, "level": 1}


def test_score_report_empty_letter_scheme():
    report = score_report([], "nobody", LETTER)
    assert report["composite"] == 0
    assert report["tier"] == "Unranked"
