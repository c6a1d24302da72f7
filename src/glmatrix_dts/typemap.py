"""Map JSDoc type tokens onto TypeScript declaration types.

Tokens are first classified into a closed set of variants
(:class:`ClassName`, :class:`Primitive`, :class:`ArrayOf`, :class:`FunctionSig`,
:class:`Generic`, :class:`StructuralLiteral`, :class:`NoValue`) by
:func:`parse_type_token`; :func:`render_type` then turns a variant into text
under a :class:`~glmatrix_dts.config.GeneratorConfig`. :func:`resolve` combines
both steps and is the entry point used by extraction.

Examples
--------
>>> from glmatrix_dts.config import GeneratorConfig
>>> resolve("vec2", "vec2", "add", config=GeneratorConfig())
'Float32Array'
>>> resolve("vec2", "vec2", "add", config=GeneratorConfig(strictly_typed=True))
'vec2'
>>> resolve("Array", "mat2", config=GeneratorConfig())
'Float32Array[]'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, TypeAlias

if TYPE_CHECKING:
    from glmatrix_dts.config import GeneratorConfig

__all__ = [
    "ARRAY_RETURN_OVERRIDES",
    "ARRAY_SUFFIX",
    "GENERIC_PARAMETER",
    "NO_VALUE",
    "ArrayOf",
    "ClassName",
    "FunctionSig",
    "Generic",
    "NoValue",
    "Primitive",
    "StructuralLiteral",
    "TypeRef",
    "parse_type_token",
    "render_type",
    "resolve",
]

NO_VALUE: Final = "void"
GENERIC_PARAMETER: Final = "T"
ARRAY_SUFFIX: Final = "[]"

# mat2.LDU documents no @returns but hands back the [L, D, U] triple.
ARRAY_RETURN_OVERRIDES: Final = frozenset({"LDU"})

_LEGACY_SYNONYMS: Final = {"quat4": "quat"}
_PRIMITIVES: Final = {
    "number": "number",
    "Number": "number",
    "String": "string",
    "string": "string",
    "Boolean": "boolean",
    "boolean": "boolean",
}
_GENERIC_KEYWORDS: Final = frozenset({"Object", "Type", GENERIC_PARAMETER})


@dataclass(frozen=True, slots=True)
class ClassName:
    """A nominal type: a class-family name, the buffer type or a module name."""

    name: str


@dataclass(frozen=True, slots=True)
class Primitive:
    name: str


@dataclass(frozen=True, slots=True)
class ArrayOf:
    element: TypeRef


@dataclass(frozen=True, slots=True)
class FunctionSig:
    """Per-element callback ``(a: K, b: K, arg: T) => void``."""

    argument: TypeRef


@dataclass(frozen=True, slots=True)
class Generic:
    pass


@dataclass(frozen=True, slots=True)
class StructuralLiteral:
    """An inline ``{field: type, ...}`` object type, kept verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class NoValue:
    pass


TypeRef: TypeAlias = ClassName | Primitive | ArrayOf | FunctionSig | Generic | StructuralLiteral | NoValue


def _is_structural_literal(token: str) -> bool:
    return len(token) >= 2 and token[0] == "{" and token[-1] == "}"


def parse_type_token(token: str | None, enclosing_class: str, config: GeneratorConfig) -> TypeRef:
    """Classify a documented type token.

    Parameters
    ----------
    token : str | None
        Type token harvested from a ``@param``/``@returns`` tag, or None when
        the parameter carries no documentation.
    enclosing_class : str
        Class whose module the token was found in.
    config : GeneratorConfig
        Run configuration providing the class vocabulary.

    Returns
    -------
    TypeRef
        Variant describing the token. Unknown tokens yield :class:`NoValue`.
    """
    if token is None:
        return NoValue()
    if token in _LEGACY_SYNONYMS:
        return ClassName(_LEGACY_SYNONYMS[token])
    if token == "Array":
        return ArrayOf(ClassName(enclosing_class))
    if token == "Function":
        return FunctionSig(ClassName(enclosing_class))
    if token in _GENERIC_KEYWORDS:
        return Generic()
    if token in _PRIMITIVES:
        return Primitive(_PRIMITIVES[token])
    if config.is_class_family(token) or token == config.array_type:
        return ClassName(token)
    if _is_structural_literal(token):
        return StructuralLiteral(token)
    return NoValue()


def render_type(ref: TypeRef, config: GeneratorConfig) -> str:
    """Render ``ref`` as TypeScript text under ``config``."""
    match ref:
        case ClassName(name=name):
            if not config.strictly_typed and config.is_class_family(name):
                return config.array_type
            return name
        case Primitive(name=name):
            return name
        case ArrayOf(element=element):
            return render_type(element, config) + ARRAY_SUFFIX
        case FunctionSig(argument=argument):
            rendered = render_type(argument, config)
            return f"(a: {rendered}, b: {rendered}, arg: {GENERIC_PARAMETER}) => {NO_VALUE}"
        case Generic():
            return GENERIC_PARAMETER
        case StructuralLiteral(text=text):
            return text
        case NoValue():
            return NO_VALUE
    msg = f"unsupported type reference {ref!r}"
    raise TypeError(msg)


def resolve(
    source_type: str | None,
    enclosing_class: str,
    method_name: str | None = None,
    *,
    config: GeneratorConfig,
) -> str:
    """Resolve a documented type token to its declaration type.

    Parameters
    ----------
    source_type : str | None
        Harvested type token; None is treated as undocumented.
    enclosing_class : str
        Owning class of the declaration being resolved.
    method_name : str | None, optional
        Method whose return type is being resolved. Parameter types are
        resolved without a method name. Defaults to None.
    config : GeneratorConfig
        Run configuration.

    Returns
    -------
    str
        TypeScript type text. The array suffix is applied at most once.
    """
    ref = parse_type_token(source_type, enclosing_class, config)
    if method_name in ARRAY_RETURN_OVERRIDES and not isinstance(ref, ArrayOf):
        ref = ArrayOf(ref)
    return render_type(ref, config)
