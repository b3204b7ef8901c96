from __future__ import annotations

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Sequence

import websockets
from websockets.asyncio.server import ServerConnection
from websockets.exceptions import ConnectionClosed

from holdem.errors import IllegalAction
from holdem.events import EventRecorder
from holdem.game import BettingEngine, start_session
from holdem.models import ActionType, TableConfig
from holdem.seats import DecisionPolicy
from parlor.bots import BaselinePolicy, EquityPolicy

LOGGER = logging.getLogger("parlor_host")

# The server is the presentation boundary: it forwards engine notifications to
# one remote human and feeds the human's moves back. Rules live in holdem.


class ParlorServerError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


class ClientLeft(Exception):
    """The remote player asked to leave the table."""


def _config_payload(config: TableConfig) -> Dict[str, Any]:
    return {
        "seats": config.seats,
        "starting_chips": config.starting_chips,
        "ante": config.ante,
        "human_seat": config.human_seat,
    }


def house_policies(config: TableConfig) -> List[DecisionPolicy]:
    """One bot per automated seat, alternating the equity bot and the baseline bot."""
    policies: List[DecisionPolicy] = []
    for idx in range(config.seats - 1):
        rng = random.Random(None if config.seed is None else config.seed + idx + 1)
        if idx % 2 == 0:
            policies.append(EquityPolicy(rng=rng))
        else:
            policies.append(BaselinePolicy(rng=rng))
    return policies


async def _send_error(websocket: ServerConnection, code: str, msg: str) -> None:
    await websocket.send(json.dumps({"type": "error", "code": code, "msg": msg}))


@dataclass
class RemotePlayer:
    name: str
    websocket: ServerConnection

    async def send_json(self, payload: Dict[str, Any]) -> None:
        await self.websocket.send(json.dumps({"v": 1, **payload}))

    async def recv_json(self) -> Dict[str, Any]:
        raw = await self.websocket.recv()
        message = json.loads(raw)
        if not isinstance(message, dict):
            raise ParlorServerError("BAD_SCHEMA", "Messages must be JSON objects")
        return message


class ParlorSession:
    """Handles one table: a remote human against the house bots."""

    def __init__(
        self,
        config: TableConfig,
        remote: RemotePlayer,
        policies: Optional[Sequence[DecisionPolicy]] = None,
        first_turn: Optional[int] = None,
    ) -> None:
        self.config = config
        self.remote = remote
        self.recorder = EventRecorder(viewer_seat=config.human_seat)
        self.engine: BettingEngine = start_session(
            config.ante,
            config.starting_chips,
            config.seats,
            policies=policies if policies is not None else house_policies(config),
            listener=self.recorder,
            seed=config.seed,
            human_seat=config.human_seat,
            first_turn=first_turn,
        )
        self.engine.participants[config.human_seat].name = remote.name

    async def run(self) -> None:
        await self.remote.send_json({
            "type": "welcome",
            "seat": self.config.human_seat,
            "config": _config_payload(self.config),
            "players": [p.public_state() for p in self.engine.participants],
        })
        try:
            while True:
                if not self.engine.can_start_hand():
                    await self.remote.send_json({"type": "match_end", "stacks": self._stacks()})
                    await self._wait_for("reset")
                    self.engine.reset_session()
                    await self._flush_events()
                    continue

                ctx = self.engine.start_new_hand()
                await self.remote.send_json({"type": "start_hand", "hand": ctx.number, "stacks": self._stacks()})
                await self._flush_events()
                await self._play_hand()

                payout = self.engine.last_payout
                assert payout is not None
                await self.remote.send_json({
                    "type": "end_hand",
                    "hand": ctx.number,
                    "payout": payout.to_payload(),
                    "reveal": {
                        str(p.seat): [card.label for card in p.hole_cards]
                        for p in self.engine.live_participants()
                    },
                    "stacks": self._stacks(),
                })
                if self.engine.can_start_hand():
                    await self._wait_for("next_hand")
        except ClientLeft:
            LOGGER.info("%s left after %s hands", self.remote.name, self.engine.hands_played)

    async def _play_hand(self) -> None:
        human = self.config.human_seat
        while self.engine.awaiting_human():
            view = self.engine.observe(human)
            await self.remote.send_json({"type": "act", "hand": self.engine.hands_played, **view.to_payload()})
            message = await self._wait_for("action")
            try:
                action = ActionType(message.get("action"))
                amount = message.get("amount")
                self.engine.apply_human_action(action, amount)
            except IllegalAction as exc:
                await self.remote.send_json({"type": "error", "code": exc.code, "msg": str(exc)})
                continue
            except ValueError:
                await self.remote.send_json({"type": "error", "code": "BAD_ACTION", "msg": "Unknown action"})
                continue
            await self._flush_events()
        await self._flush_events()

    async def _wait_for(self, expected: str) -> Dict[str, Any]:
        while True:
            message = await self.remote.recv_json()
            msg_type = message.get("type")
            if msg_type == "leave":
                raise ClientLeft()
            if msg_type == expected:
                return message

    async def _flush_events(self) -> None:
        for event in self.recorder.consume():
            await self.remote.send_json({"type": "event", **event})

    def _stacks(self) -> List[Dict[str, Any]]:
        return [{"seat": p.seat, "name": p.name, "chips": p.chips} for p in self.engine.participants]


async def handle_connection(websocket: ServerConnection, config: TableConfig) -> None:
    # Basic handshake: the first message names the human player.
    try:
        hello = json.loads(await websocket.recv())
    except (ValueError, ConnectionClosed):
        return
    if not isinstance(hello, dict) or hello.get("type") != "hello":
        await _send_error(websocket, "BAD_HELLO", "Expected hello")
        return

    name_raw = hello.get("name")
    name = name_raw.strip() if isinstance(name_raw, str) else ""
    remote = RemotePlayer(name=name or "You", websocket=websocket)

    session = ParlorSession(config, remote)
    try:
        await session.run()
    except ParlorServerError as exc:
        await _send_error(websocket, exc.code, exc.msg)
    except ConnectionClosed:
        LOGGER.info("%s disconnected", remote.name)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Parlor session crashed: %s", exc)


def _process_request(connection: ServerConnection, request: Any) -> Any:
    """Return a simple HTTP response for health checks."""

    upgrade_header = request.headers.get("Upgrade", "").lower()
    if upgrade_header == "websocket":
        return None  # let the WebSocket handshake continue

    if request.path in {"/", "/health", "/healthz"}:
        return connection.respond(HTTPStatus.OK, "parlor server running\n")
    return connection.respond(HTTPStatus.NOT_FOUND, "not found\n")


async def run_server(host: str, port: int, config: TableConfig) -> None:
    async def _handler(ws: ServerConnection) -> None:
        await handle_connection(ws, config)

    async with websockets.serve(_handler, host, port, process_request=_process_request):
        LOGGER.info("Parlor server listening on %s:%s", host, port)
        await asyncio.Future()
