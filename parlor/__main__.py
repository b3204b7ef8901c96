import argparse
import asyncio
import logging

from holdem.models import TableConfig

from .server import run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Ante Hold'em table: one human against the house bots")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=9876)
    parser.add_argument("--ante", type=int, default=10)
    parser.add_argument("--starting-chips", type=int, default=1_000)
    parser.add_argument("--seats", type=int, default=3, help="Total seats including the human")
    parser.add_argument("--seed", type=int, default=None, help="Seed the deck and bots for a reproducible session")
    parser.add_argument("--verbose", action="store_true", help="Log every engine action")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = TableConfig(
        ante=args.ante,
        starting_chips=args.starting_chips,
        seats=args.seats,
        seed=args.seed,
    )
    asyncio.run(run_server(args.host, args.port, config))


if __name__ == "__main__":
    main()
