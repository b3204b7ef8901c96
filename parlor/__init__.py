"""House side of the table: bots and the websocket host a human connects to."""

from .bots import BaselinePolicy, EquityPolicy

try:
    from .server import ParlorSession, run_server
except ModuleNotFoundError:  # Optional dependency for offline engine tests
    ParlorSession = None
    run_server = None

__all__ = ["BaselinePolicy", "EquityPolicy", "ParlorSession", "run_server"]
