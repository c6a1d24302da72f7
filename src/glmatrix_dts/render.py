"""Render resolved signatures and assemble the declaration document."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from jinja2 import Environment, StrictUndefined, select_autoescape

from glmatrix_dts.typemap import GENERIC_PARAMETER

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from jinja2 import Template

    from glmatrix_dts.common import PropertyDeclaration
    from glmatrix_dts.config import GeneratorConfig
    from glmatrix_dts.models import Signature

__all__ = [
    "INCOMPATIBLE_METHODS",
    "INCOMPATIBLE_REASON",
    "format_parameters",
    "indent_documentation",
    "is_incompatible",
    "render_class_interface",
    "render_common_interface",
    "render_document",
    "render_header",
    "render_signature",
]

# Members of the strict nominal types that clash with the typed-array base
# interface (``set``, ``length``, ``forEach`` already exist there).
INCOMPATIBLE_METHODS: Final = frozenset({"set", "length", "forEach"})
INCOMPATIBLE_REASON: Final = "not Float32Array compatible"

_NON_EMPTY_LINE: Final = re.compile(r"^(.+?)$", re.MULTILINE)

_HEADER_TEMPLATE = (
    "// Type definitions for gl-matrix {{ version }}\n"
    "// Project: {{ header.project_url }}\n"
    "// Definitions by: {{ header.definitions_by }}\n"
    "// Definitions: {{ header.definitions_url }}\n"
)
_COMMON_TEMPLATE = (
    "{{ config.interface_decl }} {{ name }} {{ '{' }}\n"
    "{% for prop in properties %}  {{ prop.name }}: {{ prop.type }};\n{% endfor %}"
    "{{ members }}{{ '}' }}\n"
    "{{ config.var_decl }} {{ name }}: {{ name }};\n"
)
_CLASS_TEMPLATE = (
    "\n\n{{ config.interface_decl }} {{ name }}"
    "{% if config.strictly_typed %} extends {{ config.array_type }}{% endif %} {{ '{' }}"
    "{% if not config.enable_javadoc %}\n{% endif %}"
    "{{ members }}{{ '}' }}\n"
    "{{ config.var_decl }} {{ name }}: {{ name }};\n"
)
_DOCUMENT_TEMPLATE = (
    "{{ header }}\n\n{{ common }}{% for block in classes %}{{ block }}{% endfor %}\n"
)


def _build_environment() -> Environment:
    return Environment(
        undefined=StrictUndefined,
        trim_blocks=False,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=select_autoescape(
            enabled_extensions=(), default=False, default_for_string=False
        ),
    )


_ENV = _build_environment()
_HEADER: Template = _ENV.from_string(_HEADER_TEMPLATE)
_COMMON: Template = _ENV.from_string(_COMMON_TEMPLATE)
_CLASS: Template = _ENV.from_string(_CLASS_TEMPLATE)
_DOCUMENT: Template = _ENV.from_string(_DOCUMENT_TEMPLATE)


def is_incompatible(method_name: str, config: GeneratorConfig) -> bool:
    """Return True when ``method_name`` must be disabled under ``config``."""
    return config.strictly_typed and method_name in INCOMPATIBLE_METHODS


def indent_documentation(documentation: str) -> str:
    """Indent every non-empty line of ``documentation`` by two spaces."""
    return _NON_EMPTY_LINE.sub(r"  \1", documentation)


def format_parameters(signature: Signature) -> str:
    """Return ``name: type`` pairs joined by commas."""
    return ", ".join(
        f"{name}: {type_}"
        for name, type_ in zip(signature.parameter_names, signature.parameter_types, strict=True)
    )


def render_signature(signature: Signature, config: GeneratorConfig) -> str:
    """Render one declaration fragment.

    Parameters
    ----------
    signature : Signature
        Resolved record.
    config : GeneratorConfig
        Run configuration; ``strictly_typed`` selects the disabled members and
        ``enable_javadoc`` the documentation block.

    Returns
    -------
    str
        The optional documentation block followed by a single declaration
        line, commented out with the reason when the member is incompatible.

    Examples
    --------
    >>> from glmatrix_dts.config import GeneratorConfig
    >>> from glmatrix_dts.models import Signature
    >>> sig = Signature("vec2", "/** @returns {vec2} */", "create", return_type="vec2")
    >>> render_signature(sig, GeneratorConfig(enable_javadoc=False))
    '  create(): vec2;\\n'
    """
    fragment = ""
    if config.enable_javadoc:
        fragment += f"\n{indent_documentation(signature.documentation)}\n"

    incompatible = is_incompatible(signature.method_name, config)
    fragment += "  // " if incompatible else "  "
    fragment += signature.method_name
    if signature.is_generic:
        fragment += f"<{GENERIC_PARAMETER}>"
    fragment += f"({format_parameters(signature)}): {signature.return_type};"
    if incompatible:
        fragment += f" // {INCOMPATIBLE_REASON}"
    return fragment + "\n"


def render_header(version: str, config: GeneratorConfig) -> str:
    return _HEADER.render(version=version, header=config.header)


def render_common_interface(
    properties: Sequence[PropertyDeclaration],
    members: Iterable[str],
    config: GeneratorConfig,
) -> str:
    """Render the shared utility module interface with its property list."""
    return _COMMON.render(
        name=config.common_module,
        properties=properties,
        members="".join(members),
        config=config,
    )


def render_class_interface(klass: str, members: Iterable[str], config: GeneratorConfig) -> str:
    """Render one class interface; strict mode extends the buffer type."""
    return _CLASS.render(name=klass, members="".join(members), config=config)


def render_document(header: str, common: str, classes: Iterable[str]) -> str:
    return _DOCUMENT.render(header=header, common=common, classes=list(classes))
