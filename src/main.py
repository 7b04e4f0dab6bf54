import argparse
import logging
import sys

from engine import PaymentsEngine

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replay a CSV of transactions and print final client balances as CSV.",
    )
    parser.add_argument("input", help="Path to the transactions CSV (type, client, tx, amount)")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Diagnostics written to stderr (default: WARNING)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print processed/failed counts to stderr after the run",
    )
    return parser


def write_accounts(accounts, stream=None) -> None:
    stream = stream or sys.stdout
    print("client,available,held,total,locked", file=stream)
    for account in sorted(accounts, key=lambda a: a.client):
        print(
            f"{account.client},"
            f"{account.available},"
            f"{account.held},"
            f"{account.total},"
            f"{str(account.locked).lower()}",
            file=stream,
        )


def write_summary(engine: PaymentsEngine, stream=None) -> None:
    stream = stream or sys.stderr
    stats = engine.stats
    print(f"Processed: {stats.processed}, Failed: {stats.failed}", file=stream)
    for code, count in sorted(stats.failures_by_code.items()):
        print(f"  {code}: {count}", file=stream)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(args.input)
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    write_accounts(accounts)
    if args.summary:
        write_summary(engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
