"""tuiwave - Terminal viewer for digital-logic simulation traces."""

__version__ = "0.1.0"

from .data_model import (
    Bit, Vector, Unknown, HighZ, ChangeEvent, SignalKind,
    decode_scalar, decode_vector
)
from .signal_store import SignalStream, SignalStore
from .scope_tree import Scope, SignalRef, walk_outline, is_renderable
from .selection_cache import SelectionCache
from .waveform_renderer import Segment, StyleTag, RenderedRow, render_row, render_rows
from .viewport import PaneFocus, ViewportState
from .waveform_controller import WaveformController, KeyEvent, ResizeEvent, Frame
from .waveform_loader import ScopeDecl, SignalDecl, Trace, build_trace, ingest_changes, load_waveform
from .errors import TuiwaveError, IndexOutOfRange, ContractViolation, ConfigError
from .config import RENDERING, OUTLINE, UI, KEYS, load_config

__all__ = [
    'Bit', 'Vector', 'Unknown', 'HighZ', 'ChangeEvent', 'SignalKind',
    'decode_scalar', 'decode_vector',
    'SignalStream', 'SignalStore', 'Scope', 'SignalRef', 'walk_outline', 'is_renderable',
    'SelectionCache', 'Segment', 'StyleTag', 'RenderedRow', 'render_row', 'render_rows',
    'PaneFocus', 'ViewportState', 'WaveformController', 'KeyEvent', 'ResizeEvent', 'Frame',
    'ScopeDecl', 'SignalDecl', 'Trace', 'build_trace', 'ingest_changes', 'load_waveform',
    'TuiwaveError', 'IndexOutOfRange', 'ContractViolation', 'ConfigError',
    'RENDERING', 'OUTLINE', 'UI', 'KEYS', 'load_config',
]
