"""
Tests for the account nonce sequencer.
"""

import asyncio
from datetime import timezone

import pytest


@pytest.mark.asyncio
async def test_operations_require_the_account_lock(sequencer, client):
    with pytest.raises(RuntimeError):
        sequencer.allocate()
    with pytest.raises(RuntimeError):
        sequencer.commit()
    with pytest.raises(RuntimeError):
        await sequencer.resynchronize(client)


@pytest.mark.asyncio
async def test_other_task_cannot_use_a_held_lock(sequencer, client):
    held = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with sequencer.exclusive():
            await sequencer.resynchronize(client)
            held.set()
            await release.wait()

    task = asyncio.create_task(holder())
    await held.wait()
    try:
        assert sequencer.locked
        with pytest.raises(RuntimeError):
            sequencer.allocate()
        with pytest.raises(RuntimeError):
            sequencer.commit()
    finally:
        release.set()
        await task

    assert sequencer.snapshot().next_nonce == 0


@pytest.mark.asyncio
async def test_allocate_before_sync_fails(sequencer):
    assert sequencer.needs_sync
    async with sequencer.exclusive():
        with pytest.raises(RuntimeError):
            sequencer.allocate()


@pytest.mark.asyncio
async def test_allocate_does_not_advance_until_commit(sequencer, client):
    client.on_chain_nonce = 7

    async with sequencer.exclusive():
        assert await sequencer.resynchronize(client) == 7
        assert sequencer.allocate() == 7
        assert sequencer.allocate() == 7
        assert sequencer.commit() == 8
        assert sequencer.allocate() == 8

    state = sequencer.snapshot()
    assert state.next_nonce == 8
    assert state.last_synced_nonce == 7
    assert state.committed == 1
    assert state.resyncs == 1


@pytest.mark.asyncio
async def test_resynchronize_overwrites_local_counter(sequencer, client):
    async with sequencer.exclusive():
        await sequencer.resynchronize(client)
        sequencer.commit()
        sequencer.commit()

        client.on_chain_nonce = 1
        await sequencer.resynchronize(client)
        assert sequencer.allocate() == 1


@pytest.mark.asyncio
async def test_exclusive_serializes_holders(sequencer):
    order = []

    async def holder(name):
        async with sequencer.exclusive():
            order.append(f"{name}:enter")
            await asyncio.sleep(0.01)
            order.append(f"{name}:exit")

    await asyncio.gather(holder("a"), holder("b"))

    assert order == ["a:enter", "a:exit", "b:enter", "b:exit"]
    assert not sequencer.locked


@pytest.mark.asyncio
async def test_snapshot_is_a_copy(sequencer, client):
    async with sequencer.exclusive():
        await sequencer.resynchronize(client)

    snapshot = sequencer.snapshot()
    snapshot.next_nonce = 99

    assert sequencer.snapshot().next_nonce == 0


@pytest.mark.asyncio
async def test_state_timestamps_are_utc_aware(sequencer, client):
    async with sequencer.exclusive():
        await sequencer.resynchronize(client)

    assert sequencer.snapshot().last_updated.tzinfo is timezone.utc
