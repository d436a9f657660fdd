#!/usr/bin/env python3
"""
Simulated confirmation session

Runs the confirmation core against an in-process signing backend and
prints every call made to the messaging and presentation collaborators:
1. Queue two transactions (one with an invalid destination)
2. Accept with wrong passwords until the form resets
3. Accept with the right password
4. Register the chat subscription and receive the hash

Usage:
    python3 scripts/simulate_session.py [--password PW] [--wrong-attempts N]
"""

import argparse
import asyncio
import json
import logging
from typing import Any, Dict

from web3 import Web3

from tx_confirmation import (
    AcceptTransactions,
    ConfirmationService,
    ConfirmationSettings,
    SubscriptionRegistered,
    UnlockRejected,
    configure_logging,
    parse_event,
)

logger = logging.getLogger("simulate_session")


class SimulatedSigningBackend:
    """Signing backend that hashes the transaction ID instead of signing."""

    def __init__(self, password: str):
        self.password = password

    async def complete_transaction(self, transaction_id: str, password: str) -> str:
        await asyncio.sleep(0.05)
        if password != self.password:
            raise UnlockRejected("2")
        tx_hash = Web3.keccak(text=transaction_id).hex()
        return json.dumps({"hash": tx_hash, "error": ""})

    async def discard_transaction(self, transaction_id: str) -> None:
        print(f"  [signing] discarded {transaction_id}")


class PrintingMessaging:
    def deliver_hash(self, chat_id: str, handler_data: Dict[str, Any]) -> None:
        print(f"  [messaging] deliver to {chat_id}: {handler_data}")

    def knows_message(self, message_id: str) -> bool:
        return True


class PrintingPresentation:
    def open_confirmation_surface(self) -> None:
        print("  [ui] open confirmation")

    def close_confirmation_surface(self) -> None:
        print("  [ui] close confirmation")

    def show_wrong_password_feedback(self) -> None:
        print("  [ui] wrong password")

    def hide_wrong_password_feedback(self) -> None:
        print("  [ui] hide wrong password")

    def clear_password_field(self) -> None:
        print("  [ui] clear password field")


async def run(password: str, wrong_attempts: int, settings: ConfirmationSettings) -> None:
    service = ConfirmationService.create(
        SimulatedSigningBackend(password),
        PrintingMessaging(),
        PrintingPresentation(),
        settings=settings,
    )
    await service.start()

    print("1. Queue transactions")
    service.channel.post_raw({
        "kind": "transaction_queued",
        "id": "tx-1",
        "message_id": "msg-1",
        "args": {"from": "0x" + "12" * 20, "to": "0x" + "ab" * 20, "value": "0x0de0b6b3a7640000"},
    })
    service.channel.post(parse_event({
        "kind": "transaction_queued",
        "id": "tx-2",
        "args": {"to": "not-an-address"},
    }))
    await service.settle()

    print(f"2. {wrong_attempts} wrong password attempt(s)")
    for _ in range(wrong_attempts):
        service.channel.post(AcceptTransactions(password="wrong"))
        await service.settle()
        print(f"  retry count: {service.coordinator.snapshot().retry_count}")

    print("3. Accept with the right password")
    service.channel.post(AcceptTransactions(password=password))
    await service.settle()

    print("4. Chat subscribes to the hash")
    service.channel.post(SubscriptionRegistered(message_id="msg-1", chat_id="chat-1"))
    await service.settle()

    print(f"Final state: {service.coordinator.snapshot()}")
    await service.stop()


def main():
    parser = argparse.ArgumentParser(description="Simulated confirmation session")
    parser.add_argument("--password", default="correct horse", help="Password the backend accepts")
    parser.add_argument("--wrong-attempts", type=int, default=3, help="Wrong passwords before the right one")
    parser.add_argument("--log-level", default="WARNING", help="Log level")
    args = parser.parse_args()

    settings = ConfirmationSettings(log_level=args.log_level)
    configure_logging(settings)
    asyncio.run(run(args.password, args.wrong_attempts, settings))


if __name__ == "__main__":
    main()
