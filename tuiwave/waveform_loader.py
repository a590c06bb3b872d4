"""Ingestion: build a Trace from declared hierarchy and value changes.

A decoder hands over two things:

1. The declared hierarchy as nested ScopeDecl/SignalDecl records. `build_trace`
   turns it into the scope tree and allocates one stream per signal. Indices
   are assigned depth first, the signals of a scope before those of its
   subscopes, and are stable for the lifetime of the trace.
2. A stream of (time, signal_index, value) triples in non-decreasing time
   order, appended by `ingest_changes`.

`load_waveform` does both for VCD/FST files using pywellen.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple, Union

from .data_model import (
    MAX_VECTOR_WIDTH, SignalIndex, SignalKind, Time, Value, decode_native
)
from .errors import ContractViolation
from .scope_tree import Scope
from .signal_store import SignalStore

logger = logging.getLogger(__name__)


@dataclass
class SignalDecl:
    name: str
    kind: SignalKind = SignalKind.BITS
    width: int = 1


@dataclass
class ScopeDecl:
    name: str
    items: List[Union["ScopeDecl", SignalDecl]] = field(default_factory=list)


@dataclass
class Trace:
    """A loaded trace: scope tree, signal store and the path -> index assignment."""
    root: Scope
    store: SignalStore
    paths: Dict[str, SignalIndex] = field(default_factory=dict)
    timescale: Tuple[int, str] = (1, "tick")

    @property
    def time_last(self) -> Time:
        return self.store.last_change_time()


def build_trace(declarations: Iterable[Union[ScopeDecl, SignalDecl]], root_name: str = "top",
                timescale: Tuple[int, str] = (1, "tick")) -> Trace:
    """Create the scope tree and one empty stream per declared signal."""
    root = Scope(root_name)
    trace = Trace(root, SignalStore(), timescale=timescale)

    def append_items(scope: Scope, path: str, items: List[Union[ScopeDecl, SignalDecl]]) -> None:
        for item in items:
            if isinstance(item, SignalDecl):
                index = trace.store.add_stream(item.kind, item.width)
                scope.add_signal(item.name, index)
                trace.paths[f"{path}.{item.name}"] = index
        for item in items:
            if isinstance(item, ScopeDecl):
                subscope = scope.add_scope(Scope(item.name))
                append_items(subscope, f"{path}.{item.name}", item.items)

    append_items(root, root_name, list(declarations))
    root.sort_items()
    return trace


def ingest_changes(store: SignalStore, changes: Iterable[Tuple[Time, SignalIndex, Value]]) -> int:
    """Append value changes; same-tick writes to one signal keep the last value.

    Raises:
        IndexOutOfRange: A change names a signal index the store does not have.
        ContractViolation: Times go backwards.

    Returns:
        Number of changes consumed.
    """
    count = 0
    current_t = 0
    for t, index, value in changes:
        if t < current_t:
            raise ContractViolation(f"change at {t} after time {current_t}")
        current_t = t
        store.append(index, t, value)
        count += 1
    return count


def _signal_kind(var: Any) -> SignalKind:
    if var.is_real:
        return SignalKind.REAL
    if var.is_string:
        return SignalKind.STRING
    return SignalKind.BITS


def _timescale_of(waveform: Any) -> Tuple[int, str]:
    timescale = waveform.timescale
    if timescale is None:
        return (1, "tick")
    # Units print as "TimescaleUnit.NanoSeconds" in some pywellen releases
    unit = str(timescale.unit).rsplit('.', 1)[-1]
    return (int(timescale.factor), unit)


def _declare_vars(variables: Iterable[Any], scope_path: str, decl: ScopeDecl,
                  var_paths: List[Tuple[str, Any]]) -> None:
    seen = set()
    for var in variables:
        kind = _signal_kind(var)
        width = var.bitwidth or 1
        name = var.name
        if name in seen:
            logger.warning(f"Skipping duplicate variable {scope_path}.{name}")
            continue
        if kind is SignalKind.BITS and width > MAX_VECTOR_WIDTH:
            logger.warning(f"Skipping {scope_path}.{name}: {width} bits exceeds {MAX_VECTOR_WIDTH}")
            continue
        seen.add(name)
        decl.items.append(SignalDecl(name, kind, width))
        var_paths.append((f"{scope_path}.{name}", var))


def load_waveform(file_path: Union[str, Path], root_name: str = "top") -> Trace:
    """Load a VCD or FST file through pywellen.

    Top-level file scopes become children of a synthetic root scope named
    `root_name`; variables declared outside any scope sit directly under it.
    Vectors wider than 128 bits are not representable and are skipped with a
    warning.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"waveform file not found: {path}")

    import pywellen

    start_time = time.time()
    logger.info(f"Loading {path.name}...")

    waveform = pywellen.Waveform(str(path), multi_threaded=True)

    var_paths: List[Tuple[str, Any]] = []

    def declare(scope: Any, scope_path: str) -> ScopeDecl:
        decl = ScopeDecl(scope.name)
        _declare_vars(scope.vars(), scope_path, decl, var_paths)
        for child in scope.scopes():
            decl.items.append(declare(child, f"{scope_path}.{child.name}"))
        return decl

    root = ScopeDecl(root_name)
    _declare_vars(waveform.vars(), root_name, root, var_paths)
    for scope in waveform.scopes():
        root.items.append(declare(scope, f"{root_name}.{scope.name}"))
    trace = build_trace(root.items, root_name, _timescale_of(waveform))

    for var_path, var in var_paths:
        stream = trace.store.stream(trace.paths[var_path])
        # tv: (time, value) pairs; int for two-state bits, str for four-state
        # bit strings and text, float for reals
        for t, raw in var.tv:
            if stream.kind is SignalKind.BITS:
                stream.append(t, decode_native(raw, stream.width))
            elif stream.kind is SignalKind.REAL:
                stream.append(t, float(raw))
            else:
                stream.append(t, str(raw))

    logger.info(f"  - Loaded {len(trace.store)} signals in {time.time() - start_time:.2f} seconds")
    logger.info(f"  - Last change at {trace.time_last} ({trace.timescale[0]} {trace.timescale[1]})")
    return trace
