"""Harvest the shared ``glMatrix`` utility module and library metadata.

``common.js`` assigns configuration properties such as::

    glMatrix.EPSILON = 0.000001;
    glMatrix.ARRAY_TYPE = (typeof Float32Array !== 'undefined') ? Float32Array : Array;
    glMatrix.RANDOM = Math.random;

Each assignment becomes a typed property of the ``glMatrix`` interface. The
``ARRAY_TYPE`` ternary also decides which typed array the class-family types
collapse to in loose mode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final

from glmatrix_dts.logging import get_logger

__all__ = [
    "CommonModule",
    "PropertyDeclaration",
    "extract_version",
    "harvest_common_module",
    "infer_property_type",
]

LOGGER = get_logger(__name__)

_VERSION_PATTERN: Final = re.compile(r"@version\s*([0-9.]+)")
_TERNARY_PATTERN: Final = re.compile(r".*\?\s*(\w+)\s*:\s*(\w+)")
_BOOLEAN_PATTERN: Final = re.compile(r"true|false|.*&&.*")
_NUMBER_PATTERN: Final = re.compile(r"(?:\.|[0-9])+")


def _property_pattern(module: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(module)}\.(\w+)\s*=\s*(.*);$", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class PropertyDeclaration:
    name: str
    type: str


@dataclass(frozen=True, slots=True)
class CommonModule:
    """Properties of the utility module and the buffer type it selects."""

    properties: tuple[PropertyDeclaration, ...] = field(default_factory=tuple)
    array_type: str | None = None


def extract_version(library_source: str) -> str:
    """Return the ``@version`` of the bundled library, or an empty string."""
    match = _VERSION_PATTERN.search(library_source)
    return match.group(1) if match else ""


def infer_property_type(value: str, array_type: str) -> tuple[str, str | None]:
    """Infer the declaration type of a property assignment.

    Parameters
    ----------
    value : str
        Right-hand side of the assignment, without the trailing semicolon.
    array_type : str
        Buffer type currently in effect.

    Returns
    -------
    tuple[str, str | None]
        The inferred type and, for an ``Array``/``Float*Array`` ternary, the
        typed array it selects (None otherwise).

    Examples
    --------
    >>> infer_property_type("Math.random", "Float32Array")
    ('() => number', None)
    >>> value = "(typeof Float64Array !== 'undefined') ? Float64Array : Array"
    >>> infer_property_type(value, "Float32Array")
    ('Float64Array | Array<number>', 'Float64Array')
    """
    if value == "Math.random":
        return "() => number", None

    ternary = _TERNARY_PATTERN.search(value)
    if ternary is not None:
        left, right = ternary.groups()
        if "Array" in left and "Array" in right:
            detected: str | None = None
            if left == "Array" and "Float" in right:
                detected = right
            elif right == "Array" and "Float" in left:
                detected = left
            effective = detected or array_type
            return f"{effective} | Array<number>", detected
        return f"{left} | {right}", None

    if _BOOLEAN_PATTERN.search(value):
        return "boolean", None
    if _NUMBER_PATTERN.search(value):
        return "number", None
    return value, None


def harvest_common_module(source: str, module: str, array_type: str) -> CommonModule:
    """Collect the typed properties assigned in the utility module.

    A buffer type detected from one property applies to every later property.
    """
    properties: list[PropertyDeclaration] = []
    detected: str | None = None
    current = array_type
    for match in _property_pattern(module).finditer(source):
        name, raw_value = match.groups()
        value_type, selected = infer_property_type(raw_value.strip(), current)
        if selected is not None:
            detected = current = selected
        properties.append(PropertyDeclaration(name=name, type=value_type))
    LOGGER.debug(
        "Harvested %d %s properties",
        len(properties),
        module,
        extra={"operation": "harvest_common", "count": len(properties)},
    )
    return CommonModule(properties=tuple(properties), array_type=detected)
