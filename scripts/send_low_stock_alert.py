import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy.exc import SQLAlchemyError

from inventorypro.core.logging import setup_logging
from inventorypro.services.alert_service import run_low_stock_alert


def parse_args():
    parser = argparse.ArgumentParser(description="Email the current low-stock list.")
    parser.add_argument("--email", default=None, help="Recipient. Default: ALERT_RECIPIENT_EMAIL.")
    parser.add_argument(
        "--no-send",
        action="store_true",
        help="Build and log the alert without sending it.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    try:
        outcome = run_low_stock_alert(recipient=args.email, send_notifications=not args.no_send)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Alert failed: {exc}") from exc

    print(outcome.message)
    if not outcome.success:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
