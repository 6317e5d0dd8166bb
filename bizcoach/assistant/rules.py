"""
Scoring rule primitives.

Each scorer is an ordered table of pure rules. A rule looks at a context and
either returns a RuleOutcome (score delta + human-readable reason) or None
when it does not apply. apply_rules() folds a table into a clamped score.
"""
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class RuleOutcome:
    delta: float
    reason: str


Rule = Callable[[Any], Optional[RuleOutcome]]


@dataclass(frozen=True)
class ScoringRule:
    """A named rule, so tables stay readable and individually testable."""
    name: str
    evaluate: Rule


def apply_rules(
    base: float,
    rules: Sequence[ScoringRule],
    context: Any,
    minimum: float = 0,
    maximum: float = 100,
) -> Tuple[float, List[str]]:
    """
    Sum every triggered rule's delta onto `base` and clamp the result.

    Returns:
        (clamped score, reasons in rule order)
    """
    score = base
    reasons: List[str] = []
    for rule in rules:
        outcome = rule.evaluate(context)
        if outcome is None:
            continue
        score += outcome.delta
        reasons.append(outcome.reason)
    return clamp(score, minimum, maximum), reasons


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def tiered_points(
    value: float,
    tiers: Sequence[Tuple[float, float]],
    fallback: Optional[Callable[[float], float]] = None,
) -> float:
    """
    Points for the first tier whose threshold `value` reaches.

    Args:
        value: Measured value.
        tiers: (threshold, points) pairs, highest threshold first.
        fallback: Points when no tier matches (default 0).
    """
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return fallback(value) if fallback else 0
