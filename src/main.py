import os
import sys
import logging
from typing import Iterable

from models import AccountView
from payments_engine import PaymentsEngine

LOG_LEVEL_ENV = "LEDGER_LOG_LEVEL"

CSV_HEADER = "client,available,held,total,locked"


def configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_account(account: AccountView) -> str:
    return (
        f"{account.client_id},"
        f"{account.available},"
        f"{account.held},"
        f"{account.total},"
        f"{str(account.locked).lower()}"
    )


def write_snapshot(accounts: Iterable[AccountView], stream=None) -> None:
    stream = stream if stream is not None else sys.stdout
    print(CSV_HEADER, file=stream)
    for account in accounts:
        print(format_account(account), file=stream)


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    configure_logging()

    filepath = argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        print(f"Cannot read {filepath}: {e}", file=sys.stderr)
        return 1

    write_snapshot(accounts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
