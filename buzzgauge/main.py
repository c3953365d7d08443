"""
BuzzGauge CLI. Run from project root: python -m buzzgauge.main
Logs drinks to a local JSON file, prints current BAC and countdowns, and optionally saves a graph.
"""

import argparse
import logging
import os
import sys
from datetime import datetime

from buzzgauge.drinks import DEFAULT_ABV_PERCENT, DEFAULT_VOLUME_ML
from buzzgauge.errors import InvalidInput
from buzzgauge.graph import save_bac_graph
from buzzgauge.logging_setup import configure_logging
from buzzgauge.profile import Profile
from buzzgauge.session import format_duration, now_ms
from buzzgauge.storage import load_session, save_session

DEFAULT_STORE_PATH = os.path.join("instance", "buzzgauge.json")
MS_PER_MINUTE = 60 * 1000

logger = logging.getLogger("buzzgauge.main")


def _store_path() -> str:
    return os.environ.get("BUZZGAUGE_STORE_PATH", DEFAULT_STORE_PATH)


def _clock(ms: float) -> str:
    return datetime.fromtimestamp(ms / 1000.0).strftime("%I:%M %p").lstrip("0")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BuzzGauge: log drinks and estimate BAC over time")
    parser.add_argument("--store", type=str, default=None, metavar="FILE", help="Drink log JSON file (default: $BUZZGAUGE_STORE_PATH or instance/buzzgauge.json)")
    parser.add_argument("--weight", type=float, help="Body weight (kg)")
    sex = parser.add_mutually_exclusive_group()
    sex.add_argument("--male", action="store_const", const="male", dest="sex", help="Male")
    sex.add_argument("--female", action="store_const", const="female", dest="sex", help="Female")
    parser.add_argument("--limit", type=float, help="Legal BAC limit (%%)")
    parser.add_argument(
        "--add",
        nargs=2,
        type=float,
        metavar=("VOLUME_ML", "ABV"),
        help=f"Log a drink, e.g. --add {DEFAULT_VOLUME_ML:g} {DEFAULT_ABV_PERCENT:g}",
    )
    parser.add_argument("--ago", type=float, default=0.0, metavar="MINUTES", help="Minutes since the added drink (default 0)")
    parser.add_argument("--remove", type=int, metavar="INDEX", help="Remove drink INDEX (as listed)")
    parser.add_argument("--reset", action="store_true", help="Clear the drink log")
    parser.add_argument("--demo", action="store_true", help="Replace the log with 3 x 500 ml 5%% drinks (now, 1h and 2h ago)")
    parser.add_argument("--graph", type=str, metavar="FILE", help="Save BAC graph to FILE (e.g. bac_graph.png)")
    parser.add_argument("--log-level", type=str, default=os.environ.get("LOG_LEVEL", "WARNING"))
    parser.add_argument("--log-json", action="store_true", help="Emit log records as JSON lines")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_format=args.log_json)

    store = args.store or _store_path()
    session = load_session(store)
    now = now_ms()

    try:
        if args.sex is not None or args.weight is not None or args.limit is not None:
            current = session.profile
            session.profile = Profile(
                sex=args.sex or current.sex,
                weight_kg=current.weight_kg if args.weight is None else args.weight,
                legal_limit_percent=current.legal_limit_percent if args.limit is None else args.limit,
            )
        if args.reset:
            session.clear()
            print("Drink log cleared.")
        if args.demo:
            session.clear()
            for hours_ago in (0, 1, 2):
                session.add_drink(500.0, 5.0, at=now - hours_ago * 60 * MS_PER_MINUTE)
            print("Demo session: 500 ml 5% drinks now, 1h ago and 2h ago")
        if args.add:
            volume, abv = args.add
            event = session.add_drink(volume, abv, at=now - int(args.ago * MS_PER_MINUTE))
            print(f"Added {event.volume_ml:g}ml drink with {event.abv_percent:g}% alcohol.")
        if args.remove is not None:
            removed = session.remove_drink(args.remove)
            print(f"Removed {removed.volume_ml:g}ml drink from {_clock(removed.occurred_at)}.")
    except (InvalidInput, IndexError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    profile = session.profile
    bac = session.bac_now(now)
    until_legal = session.ms_until_legal(now)
    until_sober = session.ms_until_sober(now)

    print(f"Profile: {profile.sex}, {profile.weight_kg:g} kg, legal limit {profile.legal_limit_percent:.2f}%")
    flag = "  OVER LIMIT" if session.is_over_limit(now) else ""
    print(f"Current BAC: {bac:.3f}%{flag}")
    print(f"Time until legal: {format_duration(until_legal)} (at {_clock(now + until_legal)})")
    print(f"Time until sober: {format_duration(until_sober)} (at {_clock(now + until_sober)})")

    events = session.events
    if events:
        print("Drinks:")
        for i, event in enumerate(events):
            print(f"  [{i}] {_clock(event.occurred_at)}  {event.volume_ml:g}ml  {event.abv_percent:g}%")
    else:
        print("No drinks logged.")

    if args.graph:
        try:
            path = save_bac_graph(session, output_path=args.graph, now=now)
            print(f"Graph saved: {path}")
        except ImportError:
            print("matplotlib not installed. pip install matplotlib", file=sys.stderr)
            return 1

    if session.clear_if_sober(now):
        logger.info("BAC back to zero; drink log cleared")
        print("BAC is back to zero; drink log cleared.")

    save_session(store, session)
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
