"""Read gl-matrix module sources from a checkout."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from glmatrix_dts.errors import SourceNotFoundError
from glmatrix_dts.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = ["COMMON_FILE", "LIBRARY_FILE", "SourceBundle", "load_sources"]

LOGGER = get_logger(__name__)

COMMON_FILE: Final = "common.js"
# The bundled library sits one level above the per-module sources.
LIBRARY_FILE: Final = Path("..") / "gl-matrix.js"


@dataclass(frozen=True, slots=True)
class SourceBundle:
    """Raw text of every module taking part in one run.

    Attributes
    ----------
    library : str
        Bundled library file, used for its ``@version`` tag.
    common : str
        Shared utility module.
    classes : Mapping[str, str]
        Class name to module text, in processing order.
    """

    library: str = ""
    common: str = ""
    classes: Mapping[str, str] = field(default_factory=dict)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"module source {path} does not exist"
        raise SourceNotFoundError(msg, context={"path": str(path)}) from exc
    except OSError as exc:
        msg = f"module source {path} could not be read"
        raise SourceNotFoundError(msg, context={"path": str(path), "error": str(exc)}) from exc


def load_sources(source_dir: Path, klasses: Sequence[str]) -> SourceBundle:
    """Load ``common.js``, one ``<klass>.js`` per class and ``../gl-matrix.js``.

    Raises
    ------
    SourceNotFoundError
        If any of the files is missing or unreadable.
    """
    LOGGER.debug("Loading module sources from %s", source_dir, extra={"operation": "load_sources"})
    library = _read(source_dir / LIBRARY_FILE)
    common = _read(source_dir / COMMON_FILE)
    classes = {klass: _read(source_dir / f"{klass}.js") for klass in klasses}
    return SourceBundle(library=library, common=common, classes=classes)
