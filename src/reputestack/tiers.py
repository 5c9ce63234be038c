"""Tier label schemes mapping a 0-100 composite score to a label."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TierScheme:
    """Fixed thresholds, evaluated high to low, first match wins."""

    name: str
    thresholds: tuple[tuple[int, str], ...]
    fallback: str
    no_history: str

    def label(self, composite: int, has_history: bool = True) -> str:
        if not has_history:
            return self.no_history
        for minimum, tier in self.thresholds:
            if composite >= minimum:
                return tier
        return self.fallback

    @property
    def labels(self) -> list[str]:
        return [tier for _, tier in self.thresholds] + [self.fallback]


PRIMARY = TierScheme(
    name="primary",
    thresholds=((90, "legendary"), (75, "expert"), (60, "verified"), (40, "novice")),
    fallback="unverified",
    no_history="unverified",
)

LETTER = TierScheme(
    name="letter",
    thresholds=((85, "A"), (70, "B"), (55, "C")),
    fallback="D",
    no_history="Unranked",
)

SCHEMES: dict[str, TierScheme] = {s.name: s for s in (PRIMARY, LETTER)}


def get_scheme(name: str) -> TierScheme:
    """Look up a tier scheme by name. Raises ValueError for unknown names."""
    try:
        return SCHEMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown tier scheme {name!r} (choose from {', '.join(SCHEMES)})") from None


def score_to_tier(composite: int, scheme: str = "primary") -> str:
    return get_scheme(scheme).label(composite)


def tier_emoji(tier: str) -> str:
    return {
        "legendary": "🟣", "expert": "🟢", "verified": "🔵", "novice": "🟡", "unverified": "🔴",
        "A": "🟢", "B": "🔵", "C": "🟡", "D": "🟠", "Unranked": "⚪",
    }.get(tier, "⚪")
