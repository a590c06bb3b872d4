"""Command-line entry point."""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_config
from .errors import ConfigError
from .waveform_controller import WaveformController
from .waveform_loader import load_waveform

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tuiwave", description="Terminal waveform viewer")
    parser.add_argument("waveform", help="Waveform file (.vcd or .fst)")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML configuration file (default: $XDG_CONFIG_HOME/tuiwave/config.yaml)")
    parser.add_argument("--log-file", type=str, default="tuiwave.log", help="Log file path")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # The terminal belongs to the UI; logs go to a file
    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        trace = load_waveform(args.waveform)
    except ConfigError as e:
        logger.error(f"Bad configuration: {e}")
        print(f"tuiwave: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        # pywellen parse errors surface as assorted exception types
        logger.exception(f"Failed to load {args.waveform}")
        print(f"tuiwave: {e}", file=sys.stderr)
        return 1

    from .terminal import run
    run(WaveformController(trace, config=config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
