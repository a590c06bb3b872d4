"""Test change streams and the signal store."""

import random

import pytest

from tuiwave.data_model import Bit, SignalKind
from tuiwave.errors import ContractViolation, IndexOutOfRange
from tuiwave.signal_store import SignalStore, SignalStream


def make_stream(times):
    stream = SignalStream()
    for i, t in enumerate(times):
        stream.append(t, Bit(i % 2 == 1))
    return stream


def linear_change_before(times, t):
    candidates = [i for i, event_t in enumerate(times) if event_t <= t]
    return candidates[-1] if candidates else None


def linear_change_after(times, t):
    candidates = [i for i, event_t in enumerate(times) if event_t >= t]
    return candidates[0] if candidates else None


class TestRangeQueries:
    def test_first_event_after_zero(self) -> None:
        """A stream starting at tick 5 has nothing before 0 and index 0 after it."""
        stream = make_stream([5, 9])
        assert stream.change_before(0) is None
        assert stream.change_after(0) == 0

    def test_exact_hits(self) -> None:
        stream = make_stream([0, 3, 7])
        assert stream.change_before(3) == 1
        assert stream.change_after(3) == 1
        assert stream.change_before(6) == 1
        assert stream.change_after(4) == 2

    def test_past_the_end(self) -> None:
        stream = make_stream([0, 3, 7])
        assert stream.change_before(100) == 2
        assert stream.change_after(8) is None

    def test_empty_stream(self) -> None:
        stream = SignalStream()
        assert stream.change_before(0) is None
        assert stream.change_after(0) is None
        assert stream.last_change_time() == 0

    def test_matches_linear_scan(self) -> None:
        rng = random.Random(1234)
        times = sorted(rng.sample(range(500), 60))
        stream = make_stream(times)
        for t in range(-1, 502):
            assert stream.change_before(t) == linear_change_before(times, t)
            assert stream.change_after(t) == linear_change_after(times, t)


class TestAppend:
    def test_same_tick_keeps_last_value(self) -> None:
        stream = SignalStream()
        stream.append(2, Bit(False))
        stream.append(2, Bit(True))
        assert len(stream) == 1
        assert stream[0].value == Bit(True)

    def test_time_going_backwards(self) -> None:
        stream = make_stream([4])
        with pytest.raises(ContractViolation):
            stream.append(3, Bit(True))

    def test_negative_time(self) -> None:
        with pytest.raises(ContractViolation):
            SignalStream().append(-1, Bit(True))

    def test_value_at(self) -> None:
        stream = make_stream([2, 6])
        assert stream.value_at(1) is None
        assert stream.value_at(2) == Bit(False)
        assert stream.value_at(5) == Bit(False)
        assert stream.value_at(6) == Bit(True)


class TestSignalStore:
    def test_indices_are_sequential(self) -> None:
        store = SignalStore()
        assert store.add_stream() == 0
        assert store.add_stream(SignalKind.REAL) == 1
        assert len(store) == 2
        assert store.stream(1).kind is SignalKind.REAL

    def test_out_of_range(self) -> None:
        store = SignalStore()
        store.add_stream()
        with pytest.raises(IndexOutOfRange) as exc_info:
            store.stream(1)
        assert exc_info.value.index == 1
        assert exc_info.value.size == 1
        with pytest.raises(IndexError):
            store.stream(-1)

    def test_last_change_time(self) -> None:
        store = SignalStore()
        assert store.last_change_time() == 0
        a, b = store.add_stream(), store.add_stream()
        store.append(a, 3, Bit(True))
        store.append(b, 11, Bit(True))
        store.append(a, 7, Bit(False))
        assert store.last_change_time() == 11
