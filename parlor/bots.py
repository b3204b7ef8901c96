from __future__ import annotations

import random
from typing import List, Optional, Sequence

from holdem.cards import Card, full_deck
from holdem.evaluator import Evaluator, evaluate
from holdem.models import ActionType, Phase, SeatView
from holdem.seats import Decision


def _rough_hand_strength(hole: Sequence[Card]) -> int:
    """Very rough proxy for hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    values = [card.rank for card in hole]
    score = sum(values)
    if values[0] == values[1]:
        score += 14  # pairs are quite strong pre-flop
    else:
        gap = abs(values[0] - values[1])
        if gap == 1:
            score += 4
        elif gap == 2:
            score += 2
    if hole[0].suit == hole[1].suit:
        score += 3
    if min(values) >= 11:
        score += 2

    return score


def _choose_size(view: SeatView, rng: random.Random, facing_bet: bool) -> int:
    low, high = view.min_bet, view.max_bet
    if low is None or high is None:
        raise ValueError("Bet requested without a legal size range")
    if high <= low:
        return low

    span = high - low
    roll = rng.random()

    # Facing a bet → weight toward stronger responses, otherwise mix in more probes.
    if facing_bet:
        if roll < 0.2:
            return low
        if roll > 0.85:
            return high
    else:
        if roll < 0.35:
            return low
        if roll > 0.9:
            return high

    return low + int(span * rng.random())


def _passive(view: SeatView) -> Decision:
    if ActionType.CHECK in view.legal:
        return ActionType.CHECK, None
    if ActionType.CALL in view.legal:
        return ActionType.CALL, None
    return ActionType.FOLD, None


def _aggressive_action(view: SeatView) -> Optional[ActionType]:
    for action in (ActionType.BET, ActionType.RAISE):
        if action in view.legal:
            return action
    return None


class BaselinePolicy:
    """Aggressive demo bot: mixes in random bets with a bias toward stronger holdings."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def decide(self, view: SeatView) -> Decision:
        strength = _rough_hand_strength(view.hole_cards)
        facing_bet = view.to_call > 0
        aggressive = _aggressive_action(view)

        if aggressive is not None and self._should_raise(strength, view.phase, facing_bet):
            return aggressive, _choose_size(view, self.rng, facing_bet)

        if ActionType.CALL in view.legal:
            return ActionType.CALL, None
        if ActionType.CHECK in view.legal:
            return ActionType.CHECK, None
        return ActionType.FOLD, None

    def _should_raise(self, strength: int, phase: Phase, facing_bet: bool) -> bool:
        # Encourage more post-flop barreling and occasional light opens.
        base = 0.1 if facing_bet else 0.25
        phase_bonus = {
            Phase.PRE_FLOP: 0.0,
            Phase.FLOP: 0.05,
            Phase.TURN: 0.1,
            Phase.RIVER: 0.12,
        }.get(phase, 0.0)
        scaled_strength = min(strength / 45.0, 0.45)
        probability = min(0.85, base + phase_bonus + scaled_strength)

        # Always attack with premium holdings.
        if strength >= 36:
            return True
        return self.rng.random() < probability


class EquityPolicy:
    """Estimates its win probability by sampling runouts and opponent hands."""

    def __init__(
        self,
        evaluator: Evaluator = evaluate,
        rng: Optional[random.Random] = None,
        iterations: int = 200,
        aggression: float = 0.65,
    ) -> None:
        self.evaluator = evaluator
        self.rng = rng or random.Random()
        self.iterations = iterations
        self.aggression = aggression

    def estimate_equity(self, view: SeatView) -> float:
        board = list(view.shared_cards)
        mine = list(view.hole_cards)
        opponents = max(1, view.live_opponents)
        used = set(board + mine)
        remaining: List[Card] = [card for card in full_deck() if card not in used]
        need = 5 - len(board)

        score = 0.0
        for _ in range(self.iterations):
            sample = self.rng.sample(remaining, 2 * opponents + need)
            runout = board + sample[2 * opponents :]
            my_strength = self.evaluator(mine, runout)
            best_other = max(
                self.evaluator(sample[2 * idx : 2 * idx + 2], runout) for idx in range(opponents)
            )
            if my_strength > best_other:
                score += 1.0
            elif my_strength == best_other:
                score += 0.5
        return score / self.iterations

    def decide(self, view: SeatView) -> Decision:
        equity = self.estimate_equity(view)
        aggressive = _aggressive_action(view)
        fair_share = 1.0 / (view.live_opponents + 1)

        if aggressive is not None and equity >= max(self.aggression, fair_share * 1.5):
            return aggressive, self._size_for(view, equity)

        if view.to_call > 0:
            pot_odds = view.to_call / (view.pot + view.to_call)
            if ActionType.CALL in view.legal and equity >= pot_odds:
                return ActionType.CALL, None
            return ActionType.FOLD, None

        return _passive(view)

    def _size_for(self, view: SeatView, equity: float) -> int:
        assert view.min_bet is not None and view.max_bet is not None
        # Scale between the floor and the cap with how far equity clears the bar.
        edge = (equity - self.aggression) / max(1.0 - self.aggression, 1e-6)
        target = view.min_bet + int((view.max_bet - view.min_bet) * min(max(edge, 0.0), 1.0) * 0.5)
        return max(view.min_bet, min(target, view.max_bet))
