"""
Nonce sequencing for the relay's controlled account.

The relay signs for exactly one account, so every nonce-consuming
submission is serialized behind a single lock. Callers hold the lock
across the whole allocate -> sign -> send sequence via ``exclusive()``;
the counter itself only advances on ``commit()`` once a send was accepted.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import AsyncIterator, Optional, Protocol

from .models import ControlledAccount, NonceState


logger = logging.getLogger(__name__)


class TransactionCountSource(Protocol):
    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        ...


class AccountSequencer:
    """
    Owns the in-memory nonce counter for the controlled account.

    ``allocate``, ``commit`` and ``resynchronize`` must be called while
    holding ``exclusive()`` in the same task; calling them from any other
    task is a bug and raises ``RuntimeError``.
    """

    def __init__(self, account: ControlledAccount, block_tag: str = "pending"):
        self.account = account
        self._block_tag = block_tag
        self._lock = asyncio.Lock()
        self._owner: Optional[asyncio.Task] = None
        self._state = NonceState(address=account.address, chain_id=account.chain_id)

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator["AccountSequencer"]:
        """Hold the account lock for a full submission."""
        async with self._lock:
            self._owner = asyncio.current_task()
            try:
                yield self
            finally:
                self._owner = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @property
    def needs_sync(self) -> bool:
        return self._state.next_nonce is None

    def _require_lock(self, operation: str) -> None:
        if self._owner is None or self._owner is not asyncio.current_task():
            raise RuntimeError(f"AccountSequencer.{operation}() called without holding the account lock")

    def allocate(self) -> int:
        """Return the next nonce without advancing the counter."""
        self._require_lock("allocate")
        if self._state.next_nonce is None:
            raise RuntimeError("Nonce state not synchronized with the execution layer")
        return self._state.next_nonce

    def commit(self) -> int:
        """Advance the counter after a send was accepted. Returns the new value."""
        self._require_lock("commit")
        if self._state.next_nonce is None:
            raise RuntimeError("Cannot commit an unsynchronized nonce")
        self._state.next_nonce += 1
        self._state.committed += 1
        self._state.last_updated = datetime.now(timezone.utc)
        return self._state.next_nonce

    async def resynchronize(self, client: TransactionCountSource) -> int:
        """Overwrite the counter with the account's on-chain transaction count."""
        self._require_lock("resynchronize")
        on_chain_nonce = await client.get_transaction_count(self.account.address, self._block_tag)

        previous = self._state.next_nonce
        self._state.next_nonce = on_chain_nonce
        self._state.last_synced_nonce = on_chain_nonce
        self._state.resyncs += 1
        self._state.last_updated = datetime.now(timezone.utc)

        logger.info(
            f"Nonce resynchronized for {self.account.address}: {previous} -> {on_chain_nonce}"
        )
        return on_chain_nonce

    def snapshot(self) -> NonceState:
        """Copy of the current state, safe to hand out."""
        return replace(self._state)
