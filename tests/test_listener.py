"""
Tests for SlotPoller: cursor seeding and advance, empty backoff, rate charging,
error propagation and stop().
"""

from __future__ import annotations

import io

import pytest

from tests.payloads import (
    OWNER_A,
    OWNER_B,
    TOKEN_ACCOUNT_A,
    TOKEN_ACCOUNT_B,
    USDC_MINT,
    make_block,
    make_tx,
    transfer_ix,
)
from transfer_monitor.core.exceptions import MalformedInputError
from transfer_monitor.solana_listener.listener import SlotPoller
from transfer_monitor.solana_listener.parser import parse_block
from transfer_monitor.solana_listener.rate_limit import RateWindow


class FakeSlotSource:
    """Scripted node: get_slots answers come from a queue, blocks from a dict."""

    def __init__(self, current_slot=100, slot_answers=None, blocks=None):
        self.current_slot = current_slot
        self.slot_answers = list(slot_answers or [])
        self.blocks = blocks or {}
        self.calls: list[tuple] = []
        self.on_get_slots = None

    def get_current_slot(self):
        self.calls.append(("getSlot",))
        return self.current_slot

    def get_slots(self, from_slot):
        self.calls.append(("getBlocks", from_slot))
        if self.on_get_slots is not None:
            self.on_get_slots()
        return self.slot_answers.pop(0) if self.slot_answers else []

    def get_block(self, slot):
        self.calls.append(("getBlock", slot))
        raw = self.blocks.get(slot, make_block([make_tx([])]))
        return parse_block(raw, slot)


def _transfer_block(amount="1000000"):
    return make_block([make_tx([[transfer_ix(TOKEN_ACCOUNT_A, TOKEN_ACCOUNT_B, amount)]])])


def _poller(client, clock, sink=None, **kwargs):
    window = RateWindow(1000, 10.0, clock=clock, sleep=clock.sleep)
    return SlotPoller(
        client,
        sink if sink is not None else io.StringIO(),
        mint=USDC_MINT,
        rate_window=window,
        sleep=clock.sleep,
        **kwargs,
    )


# --- Cursor ---


def test_start_seeds_cursor_from_current_slot(fake_clock):
    client = FakeSlotSource(current_slot=250684537)
    poller = _poller(client, fake_clock)
    assert poller.start() == 250684537
    assert poller.next_slot == 250684537


def test_start_slot_skips_get_slot(fake_clock):
    client = FakeSlotSource()
    poller = _poller(client, fake_clock, start_slot=42)
    poller.start()
    assert ("getSlot",) not in client.calls
    assert poller.next_slot == 42


def test_poll_processes_slots_in_order_and_advances(fake_clock):
    sink = io.StringIO()
    client = FakeSlotSource(
        slot_answers=[[103, 101, 100]],
        blocks={101: _transfer_block("1400010000")},
    )
    poller = _poller(client, fake_clock, sink=sink)
    poller.start()
    assert poller.poll_once() == 1
    assert poller.next_slot == 104
    assert [c[1] for c in client.calls if c[0] == "getBlock"] == [100, 101, 103]
    assert sink.getvalue().splitlines() == [
        "Latest block: 100",
        "Latest block: 101",
        f"TX detected: {OWNER_A} sent 1,400.01 USDC to {OWNER_B}",
        "Latest block: 103",
    ]


def test_slots_behind_cursor_are_not_reprocessed(fake_clock):
    client = FakeSlotSource(slot_answers=[[100, 101], [101, 102]])
    poller = _poller(client, fake_clock)
    poller.start()
    poller.poll_once()
    poller.poll_once()
    fetched = [c[1] for c in client.calls if c[0] == "getBlock"]
    assert fetched == [100, 101, 102]
    assert client.calls[-2] == ("getBlocks", 102)


def test_empty_slot_list_backs_off(fake_clock):
    client = FakeSlotSource(slot_answers=[[]])
    poller = _poller(client, fake_clock, empty_backoff_sec=0.4)
    poller.start()
    assert poller.poll_once() == 0
    assert fake_clock.sleeps == [0.4]
    assert poller.next_slot == 100


def test_stale_slot_list_backs_off(fake_clock):
    client = FakeSlotSource(slot_answers=[[90, 95]])
    poller = _poller(client, fake_clock)
    poller.start()
    assert poller.poll_once() == 0
    assert fake_clock.sleeps == [0.4]
    assert poller.next_slot == 100


# --- Rate window ---


def test_every_rpc_request_charges_the_window(fake_clock):
    client = FakeSlotSource(slot_answers=[[100, 101]])
    window = RateWindow(1000, 10.0, clock=fake_clock, sleep=fake_clock.sleep)
    poller = SlotPoller(
        client, io.StringIO(), mint=USDC_MINT, rate_window=window, sleep=fake_clock.sleep
    )
    poller.start()
    poller.poll_once()
    # getSlot + getBlocks + 2 x getBlock
    assert len(client.calls) == 4
    assert len(window) == 4


def test_full_window_delays_requests(fake_clock):
    client = FakeSlotSource(slot_answers=[[100]])
    window = RateWindow(2, 1.0, poll_sec=0.25, clock=fake_clock, sleep=fake_clock.sleep)
    poller = SlotPoller(
        client, io.StringIO(), mint=USDC_MINT, rate_window=window, sleep=fake_clock.sleep
    )
    poller.start()
    poller.poll_once()
    # Third request (getBlock) waits a full window after getSlot
    assert fake_clock.now == 1001.0


# --- Errors and shutdown ---


def test_malformed_block_propagates(fake_clock):
    bad = make_tx([[transfer_ix(TOKEN_ACCOUNT_A, TOKEN_ACCOUNT_B, "1")]])
    del bad["meta"]["preTokenBalances"][0]["owner"]
    sink = io.StringIO()
    client = FakeSlotSource(slot_answers=[[100, 101]], blocks={101: make_block([bad])})
    poller = _poller(client, fake_clock, sink=sink)
    poller.start()
    with pytest.raises(MalformedInputError):
        poller.poll_once()
    assert sink.getvalue().splitlines() == ["Latest block: 100"]


def test_run_returns_after_stop(fake_clock):
    client = FakeSlotSource(slot_answers=[[100], [], []])
    poller = _poller(client, fake_clock)
    polls = []

    def _stop_on_third_poll():
        polls.append(1)
        if len(polls) == 3:
            poller.stop()

    client.on_get_slots = _stop_on_third_poll
    poller.run()
    assert len(polls) == 3
    assert poller.next_slot == 101


def test_invalid_arguments_rejected(fake_clock):
    client = FakeSlotSource()
    with pytest.raises(ValueError):
        _poller(client, fake_clock, empty_backoff_sec=0)
    with pytest.raises(ValueError):
        _poller(client, fake_clock, start_slot=-1)
