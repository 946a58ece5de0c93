"""
Small combinators for extractors that try several strategies.

A strategy is a pure function ``str -> Optional[Match]``. Extractors declare an
ordered list of strategies and let these helpers pick the result instead of
nesting conditionals.
"""
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence


@dataclass(frozen=True)
class Match:
    value: object
    confidence: float
    method: str


Strategy = Callable[[str], Optional[Match]]


def best_match(candidates: Iterable[Optional[Match]]) -> Optional[Match]:
    """Reduce to the highest-confidence match. None entries are ignored; first wins on ties."""
    best: Optional[Match] = None
    for cand in candidates:
        if cand is None:
            continue
        if best is None or cand.confidence > best.confidence:
            best = cand
    return best


def first_confident(strategies: Sequence[Strategy], text: str, floor: float = 0.5) -> Optional[Match]:
    """
    Evaluate strategies in priority order and return the first match whose
    confidence reaches ``floor``. If none does, return the best sub-floor match.
    """
    fallbacks = []
    for strategy in strategies:
        result = strategy(text)
        if result is None:
            continue
        if result.confidence >= floor:
            return result
        fallbacks.append(result)
    return best_match(fallbacks)
