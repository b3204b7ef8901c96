from __future__ import annotations

import itertools
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .cards import Card

HandStrength = Tuple[int, List[int]]
Evaluator = Callable[[Sequence[Card], Sequence[Card]], HandStrength]

CATEGORY_NAMES = (
    "high_card",
    "pair",
    "two_pair",
    "three_of_a_kind",
    "straight",
    "flush",
    "full_house",
    "four_of_a_kind",
    "straight_flush",
)


def evaluate(hole: Sequence[Card], shared: Sequence[Card]) -> HandStrength:
    """Score hole cards plus 0-5 shared cards. Higher is better."""
    cards = list(hole) + list(shared)
    if len(cards) < 5:
        return _evaluate_group(cards)
    return evaluate_best(cards)


def evaluate_best(cards: Sequence[Card]) -> HandStrength:
    """Return a strength tuple for the best 5 of up to 7 cards."""
    best: Optional[HandStrength] = None
    for combo in itertools.combinations(cards, 5):
        rank = _evaluate_group(combo)
        if best is None or rank > best:
            best = rank
    assert best is not None
    return best


def describe_rank(score: HandStrength) -> str:
    return CATEGORY_NAMES[score[0]]


def _evaluate_group(cards: Sequence[Card]) -> HandStrength:
    # Straights and flushes need five cards; partial boards only score sets.
    ranks = sorted((card.rank for card in cards), reverse=True)
    complete = len(cards) == 5

    is_flush = complete and len({card.suit for card in cards}) == 1
    straight_high = _straight_high(cards) if complete else None

    counts = {}
    for rank in ranks:
        counts[rank] = counts.get(rank, 0) + 1

    ordered_counts = sorted(counts.items(), key=lambda x: (x[1], x[0]), reverse=True)
    count_values = sorted(counts.values(), reverse=True) + [0]

    if straight_high and is_flush:
        return (8, [straight_high])
    if count_values[0] == 4:
        four_rank = ordered_counts[0][0]
        kickers = [r for r, c in ordered_counts[1:]]
        return (7, [four_rank] + kickers)
    if count_values[0] == 3 and count_values[1] >= 2:
        return (6, [ordered_counts[0][0], ordered_counts[1][0]])
    if is_flush:
        return (5, ranks)
    if straight_high:
        return (4, [straight_high])
    if count_values[0] == 3:
        kickers = [r for r, c in ordered_counts[1:]]
        return (3, [ordered_counts[0][0]] + kickers)
    if count_values[0] == 2 and count_values[1] == 2:
        kickers = [r for r, c in ordered_counts[2:]]
        return (2, [ordered_counts[0][0], ordered_counts[1][0]] + kickers)
    if count_values[0] == 2:
        kickers = [r for r, c in ordered_counts[1:]]
        return (1, [ordered_counts[0][0]] + kickers)
    return (0, ranks)


def _straight_high(cards: Iterable[Card]) -> Optional[int]:
    ranks = {card.rank for card in cards}
    if 14 in ranks:  # Ace low
        ranks.add(1)
    ordered = sorted(ranks)
    best = None
    for idx in range(len(ordered) - 4):
        window = ordered[idx : idx + 5]
        if window == list(range(window[0], window[0] + 5)):
            best = window[-1]
    return best
