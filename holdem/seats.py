from __future__ import annotations

from typing import Optional, Protocol, Tuple, Union

from .models import ActionType, SeatView

Decision = Tuple[ActionType, Optional[int]]


class DecisionPolicy(Protocol):
    def decide(self, view: SeatView) -> Decision:
        """Pick a legal action for the seat described by view."""


class HumanSeat:
    """Seat driven by apply_human_action; the engine stops and waits here."""

    is_human = True

    def decide(self, view: SeatView) -> Decision:
        raise RuntimeError("Human seats are driven through apply_human_action")


class AutomatedSeat:
    is_human = False

    def __init__(self, policy: DecisionPolicy) -> None:
        self.policy = policy

    def decide(self, view: SeatView) -> Decision:
        return self.policy.decide(view)


DecisionSource = Union[HumanSeat, AutomatedSeat]
