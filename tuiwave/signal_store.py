"""Signal store: per-signal change streams with binary-search range queries.

Each signal owns one SignalStream, an append-only list of ChangeEvents with
strictly increasing times. Streams are addressed by SignalIndex; the scope tree
refers to them only through that integer.
"""

from bisect import bisect_left, bisect_right
from typing import Generic, Iterator, List, Optional

from .data_model import ChangeEvent, SignalIndex, SignalKind, Time, V
from .errors import ContractViolation, IndexOutOfRange


class SignalStream(Generic[V]):
    """Time-ordered value changes of a single signal."""

    def __init__(self, kind: SignalKind = SignalKind.BITS, width: int = 1) -> None:
        self.kind = kind
        self.width = width
        self._events: List[ChangeEvent[V]] = []
        # Parallel list of event times for bisect
        self._times: List[Time] = []

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, idx: int) -> ChangeEvent[V]:
        return self._events[idx]

    def __iter__(self) -> Iterator[ChangeEvent[V]]:
        return iter(self._events)

    def append(self, time: Time, value: V) -> None:
        """Append a change; a change at the current last tick replaces it."""
        if time < 0:
            raise ContractViolation(f"negative time {time}")
        if self._times:
            last = self._times[-1]
            if time < last:
                raise ContractViolation(f"change at {time} precedes last change at {last}")
            if time == last:
                self._events[-1] = ChangeEvent(time, value)
                return
        self._events.append(ChangeEvent(time, value))
        self._times.append(time)

    def change_before(self, time: Time) -> Optional[int]:
        """Index of the latest event with event.time <= time, or None."""
        idx = bisect_right(self._times, time) - 1
        return idx if idx >= 0 else None

    def change_after(self, time: Time) -> Optional[int]:
        """Index of the first event with event.time >= time, or None."""
        idx = bisect_left(self._times, time)
        return idx if idx < len(self._times) else None

    def last_change_time(self) -> Time:
        return self._times[-1] if self._times else 0

    def value_at(self, time: Time) -> Optional[V]:
        """Value in effect at `time`, None before the first change."""
        idx = self.change_before(time)
        return self._events[idx].value if idx is not None else None


class SignalStore:
    """Owns every SignalStream of a trace, indexed by SignalIndex."""

    def __init__(self) -> None:
        self._streams: List[SignalStream] = []

    def __len__(self) -> int:
        return len(self._streams)

    def add_stream(self, kind: SignalKind = SignalKind.BITS, width: int = 1) -> SignalIndex:
        """Register a new empty stream and return its stable index."""
        self._streams.append(SignalStream(kind, width))
        return len(self._streams) - 1

    def stream(self, index: SignalIndex) -> SignalStream:
        if not 0 <= index < len(self._streams):
            raise IndexOutOfRange(index, len(self._streams))
        return self._streams[index]

    def append(self, index: SignalIndex, time: Time, value: object) -> None:
        self.stream(index).append(time, value)

    def last_change_time(self) -> Time:
        """Largest timestamp across all streams (time_last), 0 if empty."""
        return max((s.last_change_time() for s in self._streams), default=0)
