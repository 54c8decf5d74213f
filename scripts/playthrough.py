"""
Headless fast-forward over the bundled data pack.

Sets up optional standing transfers, advances the requested number of
days in batches, and prints a summary line per batch.

Usage:
    python scripts/playthrough.py [days] [--refresh N] [--transfer RESOURCE AMOUNT FROM TO]...
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dictation.simulation import DictationSimulation
from dictation.commands import execute, TransferCommand
from dictation.constants import DAY_SUMMARY_INTERVAL


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be positive")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fast-forward the Dictation solar system")
    parser.add_argument("days", nargs="?", type=_positive_int, default=365, help="Days to simulate")
    parser.add_argument("--refresh", type=_positive_int, default=DAY_SUMMARY_INTERVAL,
                        help="Days between summary lines")
    parser.add_argument("--transfer", nargs=4, action="append",
                        metavar=("RESOURCE", "AMOUNT", "FROM", "TO"),
                        help="Standing annual transfer (repeatable)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    transfers = [TransferCommand(*values) for values in args.transfer or []]
    data_root = Path(__file__).parent.parent / "data"
    sim = DictationSimulation.from_data_pack(data_root, data_root / "schemas")

    for command in transfers:
        result = execute(sim, command)
        if not result.ok:
            print(f"[WARN] {result.error_kind}: {result.error}")
            continue
        t = result.payload['transfer']
        print(f"[OK] Transfer #{t['transfer_id']}: {command.resource} "
              f"{command.source} -> {command.destination}")

    for summary in sim.iter_advance(args.days, refresh_interval=args.refresh):
        sim.print_day_summary()
        if not summary.alive:
            break

    totals = sim.sum_all()
    print("\nSum of all planets:")
    for name, value in totals.to_dict().items():
        print(f"  {name:>10}: {value:.3e}")

    print("\nPlanet QOL's:")
    summary = sim.summarize()
    for name in sorted(summary.planet_qol):
        print(f"  {name:>10}: {summary.planet_qol[name]:.3e} ({summary.planet_qol_rate[name]:+.3%})")

    report = sim.final_report()
    print(f"\nDays: {report.days_survived}, total QOL: {report.qol_score:.5e}")
    print(f"Trade: {sim.trade.get_telemetry()['total_lost_in_transit']}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
