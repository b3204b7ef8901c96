from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .cards import Card


class Phase(str, Enum):
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"


class EngineState(str, Enum):
    IDLE = "IDLE"
    AWAITING_ACTION = "AWAITING_ACTION"
    STREET_COMPLETE = "STREET_COMPLETE"
    SHOWDOWN = "SHOWDOWN"
    HAND_OVER = "HAND_OVER"


DEFAULT_NAMES = ("You", "Computer", "Computer 2")


@dataclass
class TableConfig:
    ante: int = 10
    starting_chips: int = 1_000
    seats: int = 3
    human_seat: int = 0
    seed: Optional[int] = None

    def seat_name(self, seat: int) -> str:
        if seat == self.human_seat:
            return DEFAULT_NAMES[0]
        bot_number = seat if seat < self.human_seat else seat - 1
        if bot_number == 0:
            return DEFAULT_NAMES[1]
        return f"{DEFAULT_NAMES[1]} {bot_number + 1}"


@dataclass
class Participant:
    seat: int
    name: str
    chips: int
    is_human: bool = False
    hole_cards: List[Card] = field(default_factory=list)
    street_bet: int = 0
    wagered: int = 0
    folded: bool = False

    @property
    def is_all_in(self) -> bool:
        return self.chips == 0 and not self.folded

    def reset_for_hand(self) -> None:
        self.street_bet = 0
        self.wagered = 0
        self.folded = False
        self.hole_cards.clear()

    def reset_for_street(self) -> None:
        self.street_bet = 0

    def public_state(self) -> Dict[str, object]:
        return {
            "seat": self.seat,
            "name": self.name,
            "chips": self.chips,
            "street_bet": self.street_bet,
            "folded": self.folded,
        }


@dataclass(frozen=True)
class SeatView:
    """Everything a seat may observe when it is asked to act."""

    seat: int
    hole_cards: Tuple[Card, ...]
    chips: int
    street_bet: int
    to_call: int
    pot: int
    current_bet: int
    ante: int
    shared_cards: Tuple[Card, ...]
    phase: Phase
    min_bet: Optional[int]
    max_bet: Optional[int]
    legal: Tuple[ActionType, ...]
    players: Tuple[Dict[str, object], ...]

    @property
    def live_opponents(self) -> int:
        return sum(1 for p in self.players if p["seat"] != self.seat and not p["folded"])

    def to_payload(self) -> Dict[str, object]:
        return {
            "seat": self.seat,
            "phase": self.phase.value,
            "pot": self.pot,
            "current_bet": self.current_bet,
            "ante": self.ante,
            "you": {
                "hole": [card.label for card in self.hole_cards],
                "chips": self.chips,
                "street_bet": self.street_bet,
                "to_call": self.to_call,
            },
            "players": [dict(p) for p in self.players],
            "shared": [card.label for card in self.shared_cards],
            "legal": [action.value for action in self.legal],
            "min_bet": self.min_bet,
            "max_bet": self.max_bet,
        }


@dataclass
class PayoutSummary:
    reason: str
    pot: int
    awards: Dict[int, int] = field(default_factory=dict)
    remainder: int = 0
    strengths: Dict[int, Any] = field(default_factory=dict)

    @property
    def winners(self) -> List[int]:
        return sorted(seat for seat, amount in self.awards.items() if amount > 0)

    def to_payload(self) -> Dict[str, object]:
        return {
            "reason": self.reason,
            "pot": self.pot,
            "awards": [{"seat": seat, "amount": amount} for seat, amount in sorted(self.awards.items())],
            "remainder": self.remainder,
        }
