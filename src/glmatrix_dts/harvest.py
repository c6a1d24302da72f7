"""Harvest type tags from JSDoc comment blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

__all__ = [
    "DocumentationHarvest",
    "harvest_documentation",
    "harvest_return_type",
    "harvest_types",
    "structural_type",
]

# Group 2 captures the field list of "Object containing the following values: a, b".
_TAG_PATTERN: Final = re.compile(r"@(?:param|returns)\s*\{(\w+)\}\s\S*\s(?:Object.*values: (.*))?")
_RETURNS_PATTERN: Final = re.compile(r"@return(?:s)?\s*\{(\w+)\}")
_FIELD_SEPARATOR: Final = re.compile(r"\s*,\s*")


@dataclass(frozen=True, slots=True)
class DocumentationHarvest:
    """Type information recovered from one documentation block.

    Attributes
    ----------
    types : tuple[str, ...]
        One entry per ``@param``/``@returns`` tag in textual order. Tags that
        enumerate named fields carry a synthesized structural type instead of
        their declared token.
    returns : str | None
        Token of the first ``@return``/``@returns`` tag, if any.
    """

    types: tuple[str, ...] = ()
    returns: str | None = None

    def type_at(self, index: int) -> str | None:
        """Return the harvested type at ``index`` or None when undocumented."""
        if 0 <= index < len(self.types):
            return self.types[index]
        return None


def structural_type(fields: str) -> str:
    """Return an inline object type with one numeric member per field.

    Examples
    --------
    >>> structural_type("upDegrees, downDegrees")
    '{upDegrees: number, downDegrees: number}'
    """
    members = ", ".join(f"{name}: number" for name in _FIELD_SEPARATOR.split(fields))
    return "{" + members + "}"


def harvest_types(documentation: str) -> list[str]:
    """Return the declared types of every tag in ``documentation``, in order.

    Correspondence with parameter positions is left to the caller.
    """
    types: list[str] = []
    for match in _TAG_PATTERN.finditer(documentation):
        declared, fields = match.groups()
        types.append(structural_type(fields) if fields else declared)
    return types


def harvest_return_type(documentation: str) -> str | None:
    match = _RETURNS_PATTERN.search(documentation)
    return match.group(1) if match else None


def harvest_documentation(documentation: str) -> DocumentationHarvest:
    """Harvest both the ordered tag types and the explicit return tag."""
    return DocumentationHarvest(
        types=tuple(harvest_types(documentation)),
        returns=harvest_return_type(documentation),
    )
