"""Error kinds raised by the betting engine."""


class IllegalAction(ValueError):
    """Action not legal for the current turn or table state. State is left unchanged."""

    code = "ILLEGAL_ACTION"


class InsufficientChips(IllegalAction):
    code = "INSUFFICIENT_CHIPS"


class EmptyDeck(RuntimeError):
    """A card was requested from an empty deck (street sizing defect)."""


class IllegalAutomatedAction(RuntimeError):
    """A decision policy returned an action the engine rejected."""

    def __init__(self, seat: int, action: object, amount: object, reason: str) -> None:
        super().__init__(f"Policy for seat {seat} chose {action} ({amount}): {reason}")
        self.seat = seat
        self.action = action
        self.amount = amount
        self.reason = reason
