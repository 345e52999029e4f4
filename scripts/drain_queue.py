"""Utility script to run one push queue drain from the command line."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict

from notify_chat.application.use_cases.push import drain_queue
from notify_chat.infrastructure.database import SessionLocal, initialize_database
from notify_chat.infrastructure.push import get_push_gateway, reset_push_gateway
from notify_chat.infrastructure.repositories import PushNotificationQueueRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the drain."""

    parser = argparse.ArgumentParser(
        description="Deliver pending chat push notifications once and print the result.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Maximum number of notifications to claim (default: PUSH_BATCH_SIZE)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log each delivery attempt.",
    )
    return parser.parse_args()


def main() -> None:
    """Drain the queue using the configured gateway credentials."""

    args = parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    initialize_database()
    gateway = get_push_gateway()
    batch_size = args.batch_size or gateway.batch_size
    if batch_size <= 0:
        raise SystemExit("--batch-size must be a positive integer.")

    session = SessionLocal()
    try:
        queue = PushNotificationQueueRepository(
            session, claim_timeout_seconds=gateway.claim_timeout_seconds
        )
        result = drain_queue(
            queue,
            credentials=gateway.credentials,
            dispatcher=gateway.dispatcher,
            batch_size=batch_size,
            channel_id=gateway.android_channel_id,
        )
    finally:
        session.close()
        reset_push_gateway()

    print(
        json.dumps(
            {
                "processed": [asdict(item) for item in result.processed],
                "errors": [asdict(item) for item in result.errors],
                "summary": result.summary,
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
