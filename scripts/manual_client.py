#!/usr/bin/env python3
"""Terminal client for the human seat at a parlor table.

Example:
    python -m parlor --seed 7 &
    python scripts/manual_client.py --name Evan
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Optional

import websockets
from websockets.asyncio.client import ClientConnection

logging.basicConfig(level=logging.INFO)

# ManualClient renders what the engine reports and turns typed commands into actions.


@dataclass
class ActContext:
    hand: int
    legal: list[str]
    to_call: int
    min_bet: Optional[int]
    max_bet: Optional[int]


class ManualClient:
    def __init__(self, name: str, url: str) -> None:
        self.name = name
        self.url = url
        self.websocket: Optional[ClientConnection] = None
        self.seat: Optional[int] = None
        self.recent_events: deque[str] = deque(maxlen=8)

    async def run(self) -> None:
        async with websockets.connect(self.url) as ws:
            self.websocket = ws
            await self._send({"type": "hello", "v": 1, "name": self.name})
            await self._loop()

    async def _loop(self) -> None:
        assert self.websocket is not None
        while True:
            raw = await self.websocket.recv()
            msg = json.loads(raw)
            msg_type = msg.get("type")
            self._print_message(msg)

            if msg_type == "act":
                await self._handle_act(msg)
            elif msg_type == "end_hand":
                await self._between_hands("next_hand", "Press Enter for the next hand (q to quit): ")
            elif msg_type == "match_end":
                await self._between_hands("reset", "Someone is out of chips. Enter to play again (q to quit): ")

    async def _between_hands(self, reply: str, prompt: str) -> None:
        choice = input(prompt).strip().lower()
        if choice == "q":
            await self._send({"type": "leave", "v": 1})
            raise SystemExit(0)
        self.recent_events.clear()
        await self._send({"type": reply, "v": 1})

    async def _handle_act(self, msg: Dict[str, Any]) -> None:
        you = msg.get("you", {})
        ctx = ActContext(
            hand=msg.get("hand", 0),
            legal=list(msg.get("legal", [])),
            to_call=you.get("to_call", 0),
            min_bet=msg.get("min_bet"),
            max_bet=msg.get("max_bet"),
        )
        while True:
            action = self._prompt_action(ctx)
            if action is None:
                continue
            await self._send(action)
            break

    def _prompt_action(self, ctx: ActContext) -> Optional[Dict[str, Any]]:
        prompt = "Action [" + "/".join(ctx.legal) + "](h=help): "
        choice = input(prompt).strip().upper()
        if not choice:
            choice = "CHECK" if "CHECK" in ctx.legal else "CALL" if "CALL" in ctx.legal else "FOLD"
            print(f"Using default: {choice}")

        if choice == "H":
            self._print_act_help(ctx)
            return None

        if choice not in ctx.legal:
            print("Illegal selection. Try again.")
            return None

        payload: Dict[str, Any] = {"type": "action", "v": 1, "action": choice}
        if choice in ("BET", "RAISE"):
            amount = self._prompt_amount(ctx)
            if amount is None:
                return None
            payload["amount"] = amount
        return payload

    def _prompt_amount(self, ctx: ActContext) -> Optional[int]:
        assert ctx.min_bet is not None and ctx.max_bet is not None
        value = input(f"Amount [{ctx.min_bet}-{ctx.max_bet}]: ").strip()
        if not value:
            print("Cancelled")
            return None
        try:
            amount = int(value)
        except ValueError:
            print("Enter a valid integer")
            return None
        # The slider clamps in the same way; the engine rejects anything else anyway.
        return max(ctx.min_bet, min(amount, ctx.max_bet))

    def _print_message(self, msg: Dict[str, Any]) -> None:
        msg_type = msg.get("type")
        if msg_type == "event":
            self.recent_events.append(self._describe_event(msg))
            return
        print(f"\n>>> {str(msg_type).upper()}")
        if msg_type == "welcome":
            self.seat = msg.get("seat")
            print(f"Seat: {self.seat}, config: {json.dumps(msg['config'])}")
        elif msg_type == "start_hand":
            seated = ", ".join(f"{entry['name']}:{entry['chips']}" for entry in msg.get("stacks", []))
            print(f"Hand {msg['hand']} | stacks {seated}")
        elif msg_type == "act":
            self._render_act_view(msg)
        elif msg_type == "end_hand":
            self._print_recent()
            payout = msg.get("payout", {})
            awards = ", ".join(f"seat {a['seat']} +{a['amount']}" for a in payout.get("awards", []))
            print(f"{payout.get('reason')} | pot {payout.get('pot')} | {awards}")
            for seat, cards in msg.get("reveal", {}).items():
                print(f"  Seat {seat}: {' '.join(cards)}")
        elif msg_type == "error":
            print(f"Error {msg.get('code')}: {msg.get('msg')}")
        elif msg_type == "match_end":
            print(f"Final stacks: {msg.get('stacks')}")
        else:
            print(json.dumps(msg, indent=2))

    def _describe_event(self, msg: Dict[str, Any]) -> str:
        ev = msg.get("ev")
        if ev in ("FOLD", "CHECK", "CALL", "BET", "RAISE"):
            amount = msg.get("amount")
            return f"Seat {msg.get('seat')} {ev.lower()}" + (f" {amount}" if amount else "")
        if ev == "SHARED":
            return f"Board card {msg.get('card')}"
        if ev == "HOLE":
            return f"Seat {msg.get('seat')} dealt {msg.get('card')}"
        summary = {k: v for k, v in msg.items() if k not in {"type", "v", "ev"}}
        return f"{ev}: {summary}"

    def _render_act_view(self, msg: Dict[str, Any]) -> None:
        you = msg.get("you", {})
        board = " ".join(msg.get("shared", [])) or "--"
        print(f"Hand {msg.get('hand')} | Phase {msg['phase']} | Board {board} | Pot={msg['pot']} | Bet={msg['current_bet']}")
        print(f"You: hole={' '.join(you.get('hole', []))} chips={you.get('chips')} to_call={you.get('to_call')}")
        print(f"Legal: {msg.get('legal')} | size={msg.get('min_bet')}-{msg.get('max_bet')}")
        print("Table:")
        for player in msg.get("players", []):
            marker = "→" if player["seat"] == msg.get("seat") else " "
            tags = " [FOLD]" if player["folded"] else ""
            print(f"  {marker}{player['name']:>12}: chips={player['chips']:>5} bet={player['street_bet']:>5}{tags}")
        self._print_recent()

    def _print_recent(self) -> None:
        if self.recent_events:
            print("Recent:")
            for entry in self.recent_events:
                print(f"  {entry}")

    def _print_act_help(self, ctx: ActContext) -> None:
        print("Options:")
        for opt in ctx.legal:
            if opt == "FOLD":
                print("  FOLD  → give up the pot")
            elif opt == "CHECK":
                print("  CHECK → pass the action with no chips")
            elif opt == "CALL":
                print(f"  CALL  → match {ctx.to_call} chips")
            elif opt == "BET":
                print(f"  BET   → open between {ctx.min_bet} and {ctx.max_bet}")
            elif opt == "RAISE":
                print(f"  RAISE → call {ctx.to_call} and add {ctx.min_bet} to {ctx.max_bet}")

    async def _send(self, payload: Dict[str, Any]) -> None:
        assert self.websocket is not None
        await self.websocket.send(json.dumps(payload))


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ante Hold'em manual client")
    parser.add_argument("--url", default="ws://127.0.0.1:9876/ws")
    parser.add_argument("--name", default="You")
    return parser.parse_args(argv)


def main(argv: list[str]) -> None:
    args = parse_args(argv)
    client = ManualClient(name=args.name, url=args.url)
    try:
        asyncio.run(client.run())
    except KeyboardInterrupt:
        print("\nSession closed")


if __name__ == "__main__":
    main(sys.argv[1:])
