"""Locate documented declarations in module source text.

A declaration is a ``/** ... */`` block followed, possibly after unrelated
code, by ``<class>.<method> = <function-like>`` where the function-like part is
one of

* a function literal: ``vec2.add = function(out, a, b) { ... }``
* a closure returning the real implementation:
  ``vec2.forEach = (function() { var vec = vec2.create(); return function(a, stride) { ... } })()``
* an alias: ``vec2.sub = vec2.subtract`` or ``quat.set = vec4.set``, optionally
  through a ``SIMD``/``scalar`` namespace segment.

:func:`extract_signatures` turns every match into a
:class:`~glmatrix_dts.models.Signature` with resolved types.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final, Protocol

from glmatrix_dts.errors import MalformedInputError
from glmatrix_dts.harvest import harvest_documentation
from glmatrix_dts.logging import get_logger, with_fields
from glmatrix_dts.models import Signature
from glmatrix_dts.typemap import resolve

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from glmatrix_dts.config import GeneratorConfig

__all__ = [
    "SignatureLookup",
    "compile_declaration_pattern",
    "extract_signatures",
    "split_parameters",
]

LOGGER = get_logger(__name__)

_EXPECTED_GROUPS: Final = 6

_DOC_TERM: Final = r"(?:[^*]|\*(?!/))*?"
_METHOD: Final = r"\.(?:(?:SIMD|scalar)\.)?(\w+)"
_CLOSURE: Final = r"\(function[\s\S]*?return\s*function"
_PARAMS: Final = r"(?:\((.*)\))?"
_BODY: Final = r"(?:\{[\s\S]*?(?:(return)|\}))?"


class SignatureLookup(Protocol):
    """Read access to already registered signatures."""

    def resolve_target(self, klass: str, method: str) -> Signature: ...


def compile_declaration_pattern(owners: Sequence[str], klasses: Sequence[str]) -> re.Pattern[str]:
    """Compile the composite declaration pattern.

    Parameters
    ----------
    owners : Sequence[str]
        Names that may appear on the left-hand side of the assignment.
    klasses : Sequence[str]
        Names an alias may reference on the right-hand side.

    Returns
    -------
    re.Pattern[str]
        Pattern with six groups: documentation, method, alias class, alias
        method, parameter text and the ``return`` marker.
    """
    alias_klasses = "|".join(re.escape(name) for name in klasses)
    alias = rf"({alias_klasses})(?:SIMD|scalar)?{_METHOD}"
    function_like = rf"(?:function|(?:{_CLOSURE})|(?:{alias}))"
    head = rf"(/\*\*{_DOC_TERM}\*/){_DOC_TERM}"
    owner = "(?:" + "|".join(re.escape(name) for name in owners) + ")"
    tail = rf"{_METHOD}\s*=\s*{function_like}\s*{_PARAMS}\s*{_BODY}"
    return re.compile(head + owner + tail)


def split_parameters(parameter_text: str | None) -> list[str]:
    """Split a raw parameter list on commas, keeping positions of blank entries."""
    if parameter_text is None:
        return []
    return [part.strip() for part in parameter_text.strip().split(",")]


def extract_signatures(
    klass: str,
    source: str,
    pattern: re.Pattern[str],
    registry: SignatureLookup,
    *,
    config: GeneratorConfig,
) -> Iterator[Signature]:
    """Yield one signature per documented declaration of ``klass``, in source order.

    Parameters
    ----------
    klass : str
        Owning class of ``source``.
    source : str
        Raw module text.
    pattern : re.Pattern[str]
        Pattern from :func:`compile_declaration_pattern`.
    registry : SignatureLookup
        Resolves cross-class alias targets registered by earlier classes.
    config : GeneratorConfig
        Run configuration.

    Yields
    ------
    Signature
        Extracted records. Cross-class aliases copy the parameters and return
        type of their target. Same-class aliases carry no parameters; their
        shape is filled in when the registry resolves them.

    Raises
    ------
    MalformedInputError
        If a match does not have the expected capture shape.
    UnresolvedAliasError
        If a cross-class alias references an unregistered method.
    """
    logger = with_fields(LOGGER, operation="extract", klass=klass)
    count = 0
    for match in pattern.finditer(source):
        groups = match.groups()
        if len(groups) != _EXPECTED_GROUPS:
            msg = f"OOPS! unknown format <{klass}.js>"
            raise MalformedInputError(
                msg,
                context={"klass": klass, "groups": len(groups), "offset": match.start()},
            )
        documentation, method, target_klass, target_method, parameter_text, has_return = groups

        is_alias = target_klass is not None
        names: list[str] = []
        types: list[str] = []
        return_type = resolve(klass, klass, method, config=config)

        if target_klass is not None and target_klass != klass:
            # Cross-class aliases keep the target's shape unchanged.
            target = registry.resolve_target(target_klass, target_method or "")
            names = list(target.parameter_names)
            types = list(target.parameter_types)
            return_type = target.return_type
        elif not is_alias:
            harvest = harvest_documentation(documentation)
            for index, name in enumerate(split_parameters(parameter_text)):
                if not name:
                    continue
                declared = harvest.type_at(index)
                types.append(resolve(declared, klass, config=config))
                if index == 0 and has_return:
                    # The first argument doubles as the output value.
                    return_type = resolve(declared, klass, method, config=config)
                names.append(name)
            if harvest.returns is not None:
                return_type = resolve(harvest.returns, klass, method, config=config)

        count += 1
        logger.debug(
            "Matched %s.%s",
            klass,
            method,
            extra={"method": method, "alias": is_alias},
        )
        yield Signature(
            owning_class=klass,
            documentation=documentation,
            method_name=method,
            is_alias=is_alias,
            alias_target_class=target_klass,
            alias_target_method=target_method,
            parameter_names=tuple(names),
            parameter_types=tuple(types),
            return_type=return_type,
        )
    logger.debug("Extracted %d signatures", count, extra={"count": count, "status": "success"})
