from __future__ import annotations

from typing import Dict, List, Optional

from .cards import Card
from .models import ActionType, Participant, PayoutSummary

# Listeners are notified fire-and-forget; the engine never reads a return value.


class TableListener:
    """No-op notification sink. Override the hooks you care about."""

    def on_hand_started(self, hand_number: int, pot: int) -> None:
        pass

    def on_card_dealt(self, card: Card, seat: Optional[int]) -> None:
        """seat is None for a shared card."""

    def on_action(self, seat: int, action: ActionType, amount: int) -> None:
        pass

    def on_chips_changed(self, participant: Participant) -> None:
        pass

    def on_hand_ended(self, summary: PayoutSummary) -> None:
        pass

    def on_participant_eliminated(self, participant: Participant) -> None:
        pass


class EventRecorder(TableListener):
    """Keeps every notification as an event dict, ready to broadcast."""

    def __init__(self, viewer_seat: Optional[int] = None, reveal_hole_cards: bool = False) -> None:
        self.viewer_seat = viewer_seat
        self.reveal_hole_cards = reveal_hole_cards
        self.events: List[Dict[str, object]] = []

    def consume(self) -> List[Dict[str, object]]:
        events = list(self.events)
        self.events.clear()
        return events

    def on_hand_started(self, hand_number: int, pot: int) -> None:
        self.events.append({"ev": "HAND_START", "hand": hand_number, "pot": pot})

    def on_card_dealt(self, card: Card, seat: Optional[int]) -> None:
        if seat is None:
            self.events.append({"ev": "SHARED", "card": card.label})
            return
        visible = self.reveal_hole_cards or seat == self.viewer_seat
        self.events.append({"ev": "HOLE", "seat": seat, "card": card.label if visible else "hidden"})

    def on_action(self, seat: int, action: ActionType, amount: int) -> None:
        self.events.append({"ev": action.value, "seat": seat, "amount": amount})

    def on_chips_changed(self, participant: Participant) -> None:
        self.events.append({"ev": "CHIPS", "seat": participant.seat, "chips": participant.chips})

    def on_hand_ended(self, summary: PayoutSummary) -> None:
        self.events.append({"ev": "HAND_END", **summary.to_payload()})

    def on_participant_eliminated(self, participant: Participant) -> None:
        self.events.append({"ev": "ELIMINATED", "seat": participant.seat, "name": participant.name})
