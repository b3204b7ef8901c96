from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .errors import EmptyDeck

RANKS = "23456789TJQKA"
SUITS = "cdhs"
RANK_VALUE = {rank: idx for idx, rank in enumerate(RANKS, start=2)}
DECK_SIZE = 52


@dataclass(frozen=True)
class Card:
    rank: int
    suit: int

    def __post_init__(self) -> None:
        if not 2 <= self.rank <= 14:
            raise ValueError(f"Invalid rank: {self.rank}")
        if not 1 <= self.suit <= 4:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def code(self) -> int:
        return self.suit * 100 + self.rank

    @property
    def label(self) -> str:
        return f"{RANKS[self.rank - 2]}{SUITS[self.suit - 1]}"

    def __str__(self) -> str:
        return self.label


def full_deck() -> List[Card]:
    return [Card(rank, suit) for suit in range(1, 5) for rank in range(2, 15)]


def parse_label(label: str) -> Card:
    if len(label) != 2 or label[0] not in RANK_VALUE or label[1] not in SUITS:
        raise ValueError(f"Invalid card label: {label}")
    return Card(RANK_VALUE[label[0]], SUITS.index(label[1]) + 1)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


class Deck:
    """Draw stack for one table. Cards come off the end of the list."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.cards: List[Card] = full_deck()

    def __len__(self) -> int:
        return len(self.cards)

    def deal(self) -> Card:
        if not self.cards:
            raise EmptyDeck("Deck is empty")
        return self.cards.pop()

    def rebuild(self, outstanding: Iterable[Card]) -> "Deck":
        """Take back every card in play and reshuffle the full 52."""
        self.cards.extend(outstanding)
        if len(self.cards) != DECK_SIZE or len(set(self.cards)) != DECK_SIZE:
            raise RuntimeError(f"Deck rebuild produced {len(self.cards)} cards ({len(set(self.cards))} unique)")
        self.rng.shuffle(self.cards)
        return self
