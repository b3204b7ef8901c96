"""Ante Hold'em betting engine and the pieces it is built from."""

from .cards import Card, Deck, full_deck, parse_cards, parse_label
from .errors import EmptyDeck, IllegalAction, IllegalAutomatedAction, InsufficientChips
from .evaluator import describe_rank, evaluate
from .events import EventRecorder, TableListener
from .game import BettingEngine, HandContext, start_session
from .models import ActionType, EngineState, Participant, PayoutSummary, Phase, SeatView, TableConfig
from .seats import AutomatedSeat, DecisionPolicy, HumanSeat

__all__ = [
    "Card",
    "Deck",
    "full_deck",
    "parse_cards",
    "parse_label",
    "EmptyDeck",
    "IllegalAction",
    "IllegalAutomatedAction",
    "InsufficientChips",
    "describe_rank",
    "evaluate",
    "EventRecorder",
    "TableListener",
    "BettingEngine",
    "HandContext",
    "start_session",
    "ActionType",
    "EngineState",
    "Participant",
    "PayoutSummary",
    "Phase",
    "SeatView",
    "TableConfig",
    "AutomatedSeat",
    "DecisionPolicy",
    "HumanSeat",
]
