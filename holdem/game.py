from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Sequence, Tuple

from .cards import DECK_SIZE, Card, Deck, cards_to_labels
from .errors import IllegalAction, IllegalAutomatedAction, InsufficientChips
from .evaluator import Evaluator, evaluate
from .events import TableListener
from .models import ActionType, EngineState, Participant, PayoutSummary, Phase, SeatView, TableConfig
from .seats import AutomatedSeat, DecisionPolicy, DecisionSource, HumanSeat

LOGGER = logging.getLogger("holdem.engine")

# BettingEngine owns every piece of per-hand state for one table. Participants
# only carry their own chips and cards; all mutation goes through the engine.
# No I/O happens here, listeners receive notifications and that is all.

MAX_SEATS = (DECK_SIZE - 5) // 2
SHARED_PHASES = {0: Phase.PRE_FLOP, 3: Phase.FLOP, 4: Phase.TURN, 5: Phase.RIVER}


@dataclass
class HandContext:
    # Mutable info about the current hand; replaced wholesale by start_new_hand.
    number: int
    history: Deque[ActionType]
    shared: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    over: bool = False
    payout: Optional[PayoutSummary] = None


class BettingEngine:
    """Ante Hold'em table: turn order, betting streets, pot and showdown."""

    def __init__(
        self,
        config: TableConfig,
        sources: Sequence[DecisionSource],
        evaluator: Optional[Evaluator] = None,
        listener: Optional[TableListener] = None,
        rng: Optional[random.Random] = None,
        first_turn: Optional[int] = None,
    ) -> None:
        if not 2 <= config.seats <= MAX_SEATS:
            raise ValueError(f"Seat count must be between 2 and {MAX_SEATS}")
        if len(sources) != config.seats:
            raise ValueError("One decision source required per seat")
        if config.ante <= 0:
            raise ValueError("Ante must be positive")
        if config.starting_chips < config.ante:
            raise ValueError("Starting chips must cover the ante")

        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.deck = Deck(self.rng)
        self.sources = list(sources)
        self.participants = [
            Participant(
                seat=idx,
                name=config.seat_name(idx),
                chips=config.starting_chips,
                is_human=source.is_human,
            )
            for idx, source in enumerate(self.sources)
        ]
        self.evaluator: Evaluator = evaluator or evaluate
        self.listener = listener or TableListener()
        if first_turn is None:
            first_turn = self.rng.randrange(config.seats)
        if not 0 <= first_turn < config.seats:
            raise ValueError(f"Invalid first turn: {first_turn}")
        self.turn_index = first_turn
        self.hand: Optional[HandContext] = None
        self.hands_played = 0
        self.state = EngineState.IDLE

    # Session lifecycle -----------------------------------------------

    def can_start_hand(self) -> bool:
        return all(p.chips >= self.config.ante for p in self.participants)

    def start_new_hand(self) -> HandContext:
        if self.hand is not None and not self.hand.over:
            raise IllegalAction("Hand already in progress")
        short = [p.name for p in self.participants if p.chips < self.config.ante]
        if short:
            raise InsufficientChips(f"{', '.join(short)} cannot cover the ante of {self.config.ante}")

        outstanding: List[Card] = list(self.hand.shared) if self.hand else []
        for participant in self.participants:
            outstanding.extend(participant.hole_cards)
            participant.reset_for_hand()
        self.deck.rebuild(outstanding)

        self.hands_played += 1
        ctx = HandContext(number=self.hands_played, history=deque(maxlen=len(self.participants)))
        self.hand = ctx
        LOGGER.debug("Hand %s starting, seat %s to act", ctx.number, self.turn_index)

        for _ in range(2):
            for participant in self.participants:
                card = self.deck.deal()
                participant.hole_cards.append(card)
                self.listener.on_card_dealt(card, participant.seat)

        for participant in self.participants:
            self._commit(participant, self.config.ante)
        self.listener.on_hand_started(ctx.number, ctx.pot)
        for participant in self.participants:
            self.listener.on_chips_changed(participant)

        if self._anyone_all_in():
            # A zero stack leaves no legal bet size; run the board out.
            self._advance_street()
        else:
            self._run_turns()
        return ctx

    def reset_session(self) -> None:
        if self.hand is not None and not self.hand.over:
            raise IllegalAction("Cannot reset the session during a hand")
        for participant in self.participants:
            participant.chips = self.config.starting_chips
            self.listener.on_chips_changed(participant)
        LOGGER.info("Session reset to %s chips per seat", self.config.starting_chips)

    def is_session_over(self) -> bool:
        return any(p.chips <= 0 for p in self.participants)

    # Queries ---------------------------------------------------------

    @property
    def pot(self) -> int:
        return self.hand.pot if self.hand else 0

    @property
    def current_bet(self) -> int:
        return self.hand.current_bet if self.hand else 0

    @property
    def shared_cards(self) -> List[Card]:
        return list(self.hand.shared) if self.hand else []

    @property
    def phase(self) -> Phase:
        if self.hand is None:
            return Phase.PRE_FLOP
        if self.hand.over and self.hand.payout and self.hand.payout.reason != "uncontested":
            return Phase.SHOWDOWN
        return SHARED_PHASES[len(self.hand.shared)]

    @property
    def last_payout(self) -> Optional[PayoutSummary]:
        return self.hand.payout if self.hand else None

    def is_hand_over(self) -> bool:
        return self.hand is None or self.hand.over

    def current_participant(self) -> Participant:
        return self.participants[self.turn_index]

    def awaiting_human(self) -> bool:
        return not self.is_hand_over() and self.sources[self.turn_index].is_human

    def live_participants(self) -> List[Participant]:
        return [p for p in self.participants if not p.folded]

    def total_chips(self) -> int:
        return sum(p.chips for p in self.participants) + self.pot

    def min_bet_allowed(self) -> int:
        smallest = min(p.chips for p in self.participants)
        # A stack below the ante lowers the floor so it can still be put all-in.
        return smallest if smallest < self.config.ante else self.config.ante

    def max_bet_allowed(self) -> int:
        return min(p.chips for p in self.participants)

    def is_betting_done(self) -> bool:
        ctx = self._require_hand()
        live = self.live_participants()
        if ctx.current_bet > 0:
            return all(p.street_bet == ctx.current_bet for p in live)
        # Fixed trailing window: the last k recorded actions, k = live seats now.
        window = list(ctx.history)[-len(live):]
        return len(window) == len(live) and all(action == ActionType.CHECK for action in window)

    def legal_actions(self, seat_idx: int) -> Tuple[List[ActionType], Optional[int], Optional[int], Optional[int]]:
        """Legal moves for a seat plus call amount and the bet/raise size range."""
        ctx = self._require_hand()
        seat = self.participants[seat_idx]
        if ctx.over or seat.folded:
            raise IllegalAction("Seat not active")

        legal: List[ActionType] = [ActionType.FOLD]
        to_call = ctx.current_bet - seat.street_bet
        if to_call <= 0:
            legal.append(ActionType.CHECK)
        elif to_call <= seat.chips:
            legal.append(ActionType.CALL)

        low = max(self.min_bet_allowed(), 1)
        high = self.max_bet_allowed()
        if ctx.current_bet == 0:
            if low <= high:
                legal.append(ActionType.BET)
        else:
            high = min(high, seat.chips - max(to_call, 0))
            if low <= high:
                legal.append(ActionType.RAISE)

        sized = ActionType.BET in legal or ActionType.RAISE in legal
        return (
            legal,
            to_call if to_call > 0 else None,
            low if sized else None,
            high if sized else None,
        )

    def observe(self, seat_idx: int) -> SeatView:
        ctx = self._require_hand()
        seat = self.participants[seat_idx]
        legal, _, low, high = self.legal_actions(seat_idx)
        return SeatView(
            seat=seat_idx,
            hole_cards=tuple(seat.hole_cards),
            chips=seat.chips,
            street_bet=seat.street_bet,
            to_call=max(ctx.current_bet - seat.street_bet, 0),
            pot=ctx.pot,
            current_bet=ctx.current_bet,
            ante=self.config.ante,
            shared_cards=tuple(ctx.shared),
            phase=self.phase,
            min_bet=low,
            max_bet=high,
            legal=tuple(legal),
            players=tuple(p.public_state() for p in self.participants),
        )

    # Commands --------------------------------------------------------

    def apply_human_action(self, action: ActionType, amount: Optional[int] = None) -> None:
        """Apply the human seat's move, then play automated seats until the human is up again."""
        ctx = self._require_hand()
        if ctx.over:
            raise IllegalAction("Hand is over")
        seat = self.current_participant()
        if not self.sources[seat.seat].is_human:
            raise IllegalAction(f"Not your turn: waiting on {seat.name}")

        self._apply_action(seat, action, amount)
        self._next_turn()
        self._run_turns()

    def _apply_action(self, seat: Participant, action: ActionType, amount: Optional[int]) -> None:
        # Validate completely before touching any state.
        ctx = self._require_hand()
        if seat.folded:
            raise IllegalAction("Seat has folded")

        moved = 0
        if action == ActionType.FOLD:
            seat.folded = True
        elif action == ActionType.CHECK:
            if ctx.current_bet != seat.street_bet:
                raise IllegalAction("Cannot check when facing a bet")
        elif action == ActionType.CALL:
            moved = ctx.current_bet - seat.street_bet
            if moved <= 0:
                raise IllegalAction("Nothing to call")
            self._require_chips(seat, moved)
            self._commit(seat, moved)
            seat.street_bet = ctx.current_bet
        elif action == ActionType.BET:
            if ctx.current_bet != 0:
                raise IllegalAction("Cannot bet when a bet is open")
            size = self._require_amount(action, amount)
            self._require_chips(seat, size)
            self._require_sizing(size)
            moved = size
            self._commit(seat, moved)
            ctx.current_bet = size
            seat.street_bet = size
        elif action == ActionType.RAISE:
            if ctx.current_bet == 0:
                raise IllegalAction("Nothing to raise")
            size = self._require_amount(action, amount)
            moved = ctx.current_bet + size - seat.street_bet
            self._require_chips(seat, moved)
            self._require_sizing(size)
            self._commit(seat, moved)
            ctx.current_bet += size
            seat.street_bet = ctx.current_bet
        else:
            raise IllegalAction(f"Unsupported action {action}")

        ctx.history.append(ActionType(action))
        LOGGER.debug("Seat %s %s %s (pot %s)", seat.seat, ActionType(action).value, moved, ctx.pot)
        self.listener.on_action(seat.seat, ActionType(action), moved)
        if moved:
            self.listener.on_chips_changed(seat)

    def _require_amount(self, action: ActionType, amount: Optional[int]) -> int:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise IllegalAction(f"{ActionType(action).value} requires an integer amount")
        if amount <= 0:
            raise IllegalAction(f"{ActionType(action).value} amount must be positive")
        return amount

    def _require_chips(self, seat: Participant, debit: int) -> None:
        if debit > seat.chips:
            raise InsufficientChips(f"{seat.name}: {debit} chips needed, {seat.chips} available")

    def _require_sizing(self, size: int) -> None:
        low, high = self.min_bet_allowed(), self.max_bet_allowed()
        if size < low or size > high:
            raise IllegalAction(f"Bet size {size} outside [{low}, {high}]")

    def _commit(self, seat: Participant, amount: int) -> None:
        ctx = self._require_hand()
        seat.chips -= amount
        seat.wagered += amount
        ctx.pot += amount

    # Turn and street progression ---------------------------------------

    def _run_turns(self) -> None:
        ctx = self._require_hand()
        while not ctx.over:
            seat = self.current_participant()
            if seat.folded:
                self._next_turn()
                continue
            self.state = EngineState.AWAITING_ACTION
            source = self.sources[seat.seat]
            if source.is_human:
                return
            action, amount = source.decide(self.observe(seat.seat))
            try:
                self._apply_action(seat, action, amount)
            except IllegalAction as exc:
                raise IllegalAutomatedAction(seat.seat, action, amount, str(exc)) from exc
            self._next_turn()

    def _next_turn(self) -> None:
        self.turn_index = (self.turn_index + 1) % len(self.participants)
        self._check_round()

    def _check_round(self) -> None:
        live = self.live_participants()
        if len(live) == 1:
            self._award_uncontested(live[0])
            return
        if self.is_betting_done():
            self.state = EngineState.STREET_COMPLETE
            self._advance_street()

    def _advance_street(self) -> None:
        ctx = self._require_hand()
        while not ctx.over:
            if len(ctx.shared) < 3:
                self._deal_shared(3)
            elif len(ctx.shared) < 5:
                self._deal_shared(1)
            else:
                self._showdown()
                return

            ctx.current_bet = 0
            ctx.history.clear()
            for participant in self.live_participants():
                participant.reset_for_street()

            if not self._anyone_all_in():
                break
            LOGGER.debug("All-in at the table, dealing on without betting")

    def _deal_shared(self, count: int) -> None:
        ctx = self._require_hand()
        dealt = []
        for _ in range(count):
            card = self.deck.deal()
            ctx.shared.append(card)
            dealt.append(card)
            self.listener.on_card_dealt(card, None)
        LOGGER.debug("Hand %s %s: %s", ctx.number, self.phase.value, " ".join(cards_to_labels(dealt)))

    def _anyone_all_in(self) -> bool:
        return any(p.chips == 0 for p in self.live_participants())

    # Settlement ------------------------------------------------------

    def _showdown(self) -> None:
        ctx = self._require_hand()
        self.state = EngineState.SHOWDOWN
        live = self.live_participants()
        strengths = {p.seat: self.evaluator(tuple(p.hole_cards), tuple(ctx.shared)) for p in live}
        best = max(strengths.values())
        leaders = [seat for seat, strength in strengths.items() if strength == best]

        if len(leaders) == 1:
            self._settle("showdown", {leaders[0]: ctx.pot}, strengths)
        else:
            # Any tie splits evenly between every live seat; odd chips are dropped.
            share = ctx.pot // len(live)
            self._settle("split", {p.seat: share for p in live}, strengths)

    def _award_uncontested(self, winner: Participant) -> None:
        ctx = self._require_hand()
        self._settle("uncontested", {winner.seat: ctx.pot}, {})

    def _settle(self, reason: str, awards: Dict[int, int], strengths: Dict[int, object]) -> None:
        ctx = self._require_hand()
        summary = PayoutSummary(
            reason=reason,
            pot=ctx.pot,
            awards=dict(awards),
            remainder=ctx.pot - sum(awards.values()),
            strengths=dict(strengths),
        )
        for seat_idx, amount in awards.items():
            participant = self.participants[seat_idx]
            participant.chips += amount
            self.listener.on_chips_changed(participant)

        ctx.pot = 0
        ctx.over = True
        ctx.payout = summary
        self.state = EngineState.HAND_OVER
        LOGGER.info(
            "Hand %s settled (%s): %s",
            ctx.number,
            reason,
            ", ".join(f"{self.participants[s].name} +{a}" for s, a in sorted(awards.items())),
        )

        self.listener.on_hand_ended(summary)
        for participant in self.participants:
            if participant.chips <= 0:
                LOGGER.info("%s is out of chips", participant.name)
                self.listener.on_participant_eliminated(participant)

    def _require_hand(self) -> HandContext:
        if self.hand is None:
            raise IllegalAction("No hand in progress")
        return self.hand


def start_session(
    ante: int,
    starting_chips: int,
    seat_count: int,
    *,
    policies: Iterable[DecisionPolicy] = (),
    evaluator: Optional[Evaluator] = None,
    listener: Optional[TableListener] = None,
    seed: Optional[int] = None,
    human_seat: int = 0,
    first_turn: Optional[int] = None,
) -> BettingEngine:
    """Seat one human and one automated seat per policy; returns the session's engine."""
    config = TableConfig(
        ante=ante,
        starting_chips=starting_chips,
        seats=seat_count,
        human_seat=human_seat,
        seed=seed,
    )
    remaining = list(policies)
    if len(remaining) != seat_count - 1:
        raise ValueError(f"Expected {seat_count - 1} policies, got {len(remaining)}")
    if not 0 <= human_seat < seat_count:
        raise ValueError(f"Invalid human seat: {human_seat}")

    sources: List[DecisionSource] = []
    for seat_idx in range(seat_count):
        if seat_idx == human_seat:
            sources.append(HumanSeat())
        else:
            sources.append(AutomatedSeat(remaining.pop(0)))
    return BettingEngine(config, sources, evaluator=evaluator, listener=listener, first_turn=first_turn)
