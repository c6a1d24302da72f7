"""Module entrypoint for ``python -m glmatrix_dts``."""

from __future__ import annotations

from glmatrix_dts.cli import main


def run() -> None:
    """Invoke the CLI and exit with its status code.

    Raises
    ------
    SystemExit
        Exits with the status code returned by the CLI main function.
    """
    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    run()
