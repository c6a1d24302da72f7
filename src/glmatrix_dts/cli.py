"""Command line interface for generating ``gl-matrix.d.ts``.

Usage
-----
Run from a directory containing a gl-matrix checkout::

    python -m glmatrix_dts > gl-matrix.d.ts
    python -m glmatrix_dts --disable-javadoc > gl-matrix.d.ts
    python -m glmatrix_dts --strictly-typed --for-import -o gl-matrix.d.ts

Defaults for every option can also be supplied through ``GLMATRIX_DTS_``
environment variables; explicit flags win.
"""

from __future__ import annotations

import argparse
import enum
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from glmatrix_dts.config import GeneratorConfig, GeneratorSettings, load_settings
from glmatrix_dts.errors import ConfigurationError, DeclarationBuilderError, SourceNotFoundError
from glmatrix_dts.logging import get_logger, setup_logging
from glmatrix_dts.pipeline import generate_from_directory

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["ExitStatus", "build_parser", "main"]

LOGGER = get_logger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ExitStatus(enum.IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    CONFIG = 2
    ERROR = 3


def build_parser(settings: GeneratorSettings | None = None) -> argparse.ArgumentParser:
    """Return the argument parser seeded with ``settings`` defaults."""
    defaults = settings or GeneratorSettings()
    parser = argparse.ArgumentParser(
        prog="glmatrix-dts",
        description="Generate TypeScript declarations for gl-matrix from its JSDoc comments.",
    )
    parser.add_argument(
        "--strictly-typed",
        action="store_true",
        default=defaults.strictly_typed,
        help="Keep vec2/mat4/... as nominal types extending the typed array.",
    )
    parser.add_argument(
        "--disable-javadoc",
        dest="enable_javadoc",
        action="store_false",
        default=defaults.enable_javadoc,
        help="Omit documentation comments from the output.",
    )
    parser.add_argument(
        "--for-import",
        action="store_true",
        default=defaults.for_import,
        help="Emit exported declarations for use with module imports.",
    )
    parser.add_argument(
        "--source-dir",
        type=Path,
        default=defaults.source_dir,
        help="Directory holding common.js and the per-class modules (default: %(default)s).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the declarations to this file instead of stdout.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=_LOG_LEVELS,
        default=defaults.log_level,
        help="Logging threshold written to stderr (default: %(default)s).",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=defaults.log_json,
        help="Emit log records as JSON.",
    )
    return parser


def _report(exc: DeclarationBuilderError) -> None:
    problem = exc.to_problem_details(instance="urn:glmatrix-dts:generate")
    LOGGER.error(
        "%s",
        exc,
        extra={"operation": "generate", "status": "error", "problem": dict(problem)},
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the generator and return a process exit code."""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        setup_logging()
        _report(exc)
        return int(ExitStatus.CONFIG)

    args = build_parser(settings).parse_args(argv)
    setup_logging(args.log_level, json_output=args.log_json)

    try:
        config = GeneratorConfig(
            strictly_typed=args.strictly_typed,
            enable_javadoc=args.enable_javadoc,
            for_import=args.for_import,
        )
        result = generate_from_directory(args.source_dir, config)
    except (ConfigurationError, SourceNotFoundError) as exc:
        _report(exc)
        return int(ExitStatus.CONFIG)
    except DeclarationBuilderError as exc:
        _report(exc)
        return int(ExitStatus.ERROR)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(result.document, encoding="utf-8")
        LOGGER.info("Wrote %s", args.output, extra={"operation": "write", "status": "success"})
    else:
        sys.stdout.write(result.document)
    return int(ExitStatus.SUCCESS)
