from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Sequence

from holdem.cards import Card, full_deck
from holdem.events import TableListener
from holdem.game import BettingEngine, start_session
from holdem.models import ActionType, SeatView
from holdem.seats import Decision, DecisionPolicy


class ScriptedPolicy:
    """Policy returning predetermined decisions; callables receive the SeatView."""

    def __init__(self, actions: Iterable[object] = ()) -> None:
        self._queue = deque(actions)
        self.views: List[SeatView] = []

    def decide(self, view: SeatView) -> Decision:
        self.views.append(view)
        if not self._queue:
            raise RuntimeError("No more scripted actions available")
        action = self._queue.popleft()
        if callable(action):
            return action(view)
        return action


class CheckCallPolicy:
    def decide(self, view: SeatView) -> Decision:
        if ActionType.CHECK in view.legal:
            return ActionType.CHECK, None
        if ActionType.CALL in view.legal:
            return ActionType.CALL, None
        return ActionType.FOLD, None


class SeatStrengthEvaluator:
    """Stand-in hand evaluator: strength is looked up by the seat holding the cards."""

    def __init__(self, engine: BettingEngine, strengths: Dict[int, int]) -> None:
        self.engine = engine
        self.strengths = strengths
        self.calls = 0

    def __call__(self, hole: Sequence[Card], shared: Sequence[Card]) -> int:
        self.calls += 1
        for participant in self.engine.participants:
            if list(participant.hole_cards) == list(hole):
                return self.strengths[participant.seat]
        raise AssertionError(f"Unknown hole cards {hole}")


def create_engine(
    *,
    seats: int = 3,
    ante: int = 10,
    starting_chips: int = 1_000,
    policies: Optional[Sequence[DecisionPolicy]] = None,
    listener: Optional[TableListener] = None,
    seed: int = 42,
    first_turn: Optional[int] = 0,
) -> BettingEngine:
    """Instantiate a session with the human in seat 0."""
    if policies is None:
        policies = [CheckCallPolicy() for _ in range(seats - 1)]
    return start_session(
        ante,
        starting_chips,
        seats,
        policies=policies,
        listener=listener,
        seed=seed,
        first_turn=first_turn,
    )


def rank_seats(engine: BettingEngine, strengths: Dict[int, int]) -> SeatStrengthEvaluator:
    evaluator = SeatStrengthEvaluator(engine, strengths)
    engine.evaluator = evaluator
    return evaluator


def card_universe_intact(engine: BettingEngine) -> bool:
    cards: List[Card] = list(engine.deck.cards) + engine.shared_cards
    for participant in engine.participants:
        cards.extend(participant.hole_cards)
    return len(cards) == 52 and set(cards) == set(full_deck())


def check_down(engine: BettingEngine) -> None:
    """Check (or call) for the human until the hand ends."""
    while engine.awaiting_human():
        legal, *_ = engine.legal_actions(engine.turn_index)
        action = ActionType.CHECK if ActionType.CHECK in legal else ActionType.CALL
        engine.apply_human_action(action)
