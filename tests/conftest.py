"""Common test fixtures for tuiwave tests."""

import pytest

from tuiwave.data_model import Bit, HighZ, SignalKind, Unknown, Vector
from tuiwave.waveform_loader import ScopeDecl, SignalDecl, build_trace, ingest_changes


def make_small_trace():
    """Trace with two top-level bits and a nested cpu/alu hierarchy.

    Index assignment (declaration order, signals before subscopes):
        top.clk=0, top.rst=1, top.cpu.pc=2, top.cpu.ir=3, top.cpu.alu.flag=4
    Last change at tick 8.
    """
    declarations = [
        SignalDecl("clk"),
        SignalDecl("rst"),
        ScopeDecl("cpu", [
            SignalDecl("pc", SignalKind.BITS, 8),
            SignalDecl("ir", SignalKind.BITS, 8),
            ScopeDecl("alu", [SignalDecl("flag")]),
        ]),
    ]
    trace = build_trace(declarations)
    ingest_changes(trace.store, [
        (0, 0, Bit(False)), (0, 1, Bit(True)), (0, 2, Vector(0x1f, 8)), (0, 3, Unknown), (0, 4, HighZ),
        (2, 0, Bit(True)),
        (3, 1, Bit(False)),
        (4, 0, Bit(False)), (4, 3, Vector(0xab, 8)),
        (5, 2, Vector(0x20, 8)),
        (6, 0, Bit(True)),
        (7, 4, Bit(True)),
        (8, 0, Bit(False)),
    ])
    return trace


@pytest.fixture
def small_trace():
    """Freshly built trace; tests may toggle its tree freely."""
    return make_small_trace()


@pytest.fixture
def vcd_file(tmp_path):
    """Small 4-state VCD file with a clock and a 4-bit bus."""
    path = tmp_path / "small.vcd"
    path.write_text(
        "$timescale 1ns $end\n"
        "$scope module tb $end\n"
        "$var wire 1 ! clk $end\n"
        "$var wire 4 \" data $end\n"
        "$upscope $end\n"
        "$enddefinitions $end\n"
        "#0\n"
        "0!\n"
        "b0000 \"\n"
        "#5\n"
        "1!\n"
        "b1010 \"\n"
        "#10\n"
        "0!\n"
        "bx010 \"\n"
    )
    return path
