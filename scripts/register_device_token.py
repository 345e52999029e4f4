"""Utility script to register a device token for a user."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from notify_chat.domain.entities import DEFAULT_DEVICE_TYPE
from notify_chat.infrastructure.database import SessionLocal, initialize_database
from notify_chat.infrastructure.repositories import DeviceTokenRepository


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Register a push device token so the user receives chat notifications.",
    )
    parser.add_argument("--user-id", required=True, help="Identifier of the token owner")
    parser.add_argument("--token", required=True, help="Device registration token")
    parser.add_argument(
        "--device-type",
        default=DEFAULT_DEVICE_TYPE,
        help=f"Device platform (default: {DEFAULT_DEVICE_TYPE})",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        target = DeviceTokenRepository(session).register(
            args.user_id, args.token, device_type=args.device_type
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the device token: {exc}") from exc
    else:
        print(f"Registered {target.device_type} token for user {args.user_id}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
