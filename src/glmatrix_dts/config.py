"""Configuration for declaration generation runs.

Two layers mirror the rest of the tooling: :class:`GeneratorSettings` reads
environment variables through ``pydantic-settings`` and :class:`GeneratorConfig`
is the immutable value threaded through every extraction, resolution and
rendering call. No module keeps process-wide configuration state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Final

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from glmatrix_dts.errors import ConfigurationError
from glmatrix_dts.logging import get_logger

__all__ = [
    "CLASS_FAMILY",
    "COMMON_MODULE",
    "DEFAULT_ARRAY_TYPE",
    "DEFAULT_SOURCE_DIR",
    "GeneratorConfig",
    "GeneratorSettings",
    "HeaderInfo",
    "load_settings",
]

LOGGER = get_logger(__name__)

CLASS_FAMILY: Final[tuple[str, ...]] = (
    "vec2",
    "vec3",
    "vec4",
    "mat2",
    "mat2d",
    "mat3",
    "mat4",
    "quat",
)
COMMON_MODULE: Final = "glMatrix"
DEFAULT_ARRAY_TYPE: Final = "Float32Array"
DEFAULT_SOURCE_DIR: Final = Path("gl-matrix/src/gl-matrix")

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


@dataclass(frozen=True, slots=True)
class HeaderInfo:
    """Attribution lines written at the top of the declaration document."""

    project_url: str = "http://glmatrix.net/"
    definitions_by: str = "chuntaro <https://github.com/chuntaro/>"
    definitions_url: str = "https://github.com/chuntaro/gl-matrix.d.ts"


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Immutable options for one generation run.

    Attributes
    ----------
    strictly_typed : bool, optional
        Keep nominal class-family types instead of collapsing them to
        ``array_type``. Defaults to False.
    enable_javadoc : bool, optional
        Emit the re-indented documentation block above each declaration.
        Defaults to True.
    for_import : bool, optional
        Emit ``export`` declarations suitable for module imports. Defaults to False.
    array_type : str, optional
        Shared numeric-buffer type name. Defaults to ``Float32Array``.
    klasses : tuple[str, ...], optional
        Class-family names in processing order.
    common_module : str, optional
        Name of the shared utility module.
    header : HeaderInfo, optional
        Attribution written in the document header.

    Raises
    ------
    ConfigurationError
        If ``array_type`` or a class name is not an identifier, or when
        ``klasses`` is empty or contains duplicates.

    Examples
    --------
    >>> config = GeneratorConfig(strictly_typed=True)
    >>> config.interface_decl
    'interface'
    >>> GeneratorConfig(for_import=True).var_decl
    'export declare var'
    """

    strictly_typed: bool = False
    enable_javadoc: bool = True
    for_import: bool = False
    array_type: str = DEFAULT_ARRAY_TYPE
    klasses: tuple[str, ...] = CLASS_FAMILY
    common_module: str = COMMON_MODULE
    header: HeaderInfo = field(default_factory=HeaderInfo)

    def __post_init__(self) -> None:
        if not _IDENTIFIER.match(self.array_type):
            msg = f"array_type must be an identifier, got {self.array_type!r}"
            raise ConfigurationError(msg, context={"field": "array_type", "value": self.array_type})
        if not self.klasses:
            msg = "klasses must name at least one class"
            raise ConfigurationError(msg, context={"field": "klasses"})
        if len(set(self.klasses)) != len(self.klasses):
            msg = "klasses must not contain duplicates"
            raise ConfigurationError(msg, context={"field": "klasses", "value": list(self.klasses)})
        for name in (*self.klasses, self.common_module):
            if not _IDENTIFIER.match(name):
                msg = f"class name must be an identifier, got {name!r}"
                raise ConfigurationError(msg, context={"field": "klasses", "value": name})

    @property
    def interface_decl(self) -> str:
        """Keyword(s) opening an interface declaration."""
        return "export interface" if self.for_import else "interface"

    @property
    def var_decl(self) -> str:
        """Keyword(s) opening the companion value declaration."""
        return "export declare var" if self.for_import else "declare var"

    def is_class_family(self, name: str | None) -> bool:
        return name is not None and name in self.klasses

    def with_array_type(self, array_type: str) -> GeneratorConfig:
        """Return a copy using ``array_type`` as the shared buffer type."""
        if array_type == self.array_type:
            return self
        LOGGER.debug(
            "Switching numeric buffer type %s -> %s",
            self.array_type,
            array_type,
            extra={"operation": "configure"},
        )
        return replace(self, array_type=array_type)


class GeneratorSettings(BaseSettings):
    """Environment-driven defaults for the command line.

    Every field can be set through a ``GLMATRIX_DTS_`` prefixed variable, for
    example ``GLMATRIX_DTS_STRICTLY_TYPED=1``.
    """

    model_config = SettingsConfigDict(
        env_prefix="GLMATRIX_DTS_", case_sensitive=False, extra="ignore"
    )

    strictly_typed: bool = False
    enable_javadoc: bool = True
    for_import: bool = False
    source_dir: Path = Field(default=DEFAULT_SOURCE_DIR)
    log_level: str = "WARNING"
    log_json: bool = False

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            msg = f"unknown log level {value!r}"
            raise ValueError(msg)
        return upper

    def to_config(self) -> GeneratorConfig:
        return GeneratorConfig(
            strictly_typed=self.strictly_typed,
            enable_javadoc=self.enable_javadoc,
            for_import=self.for_import,
        )


def load_settings() -> GeneratorSettings:
    """Load :class:`GeneratorSettings` from the environment.

    Returns
    -------
    GeneratorSettings
        Validated settings.

    Raises
    ------
    ConfigurationError
        If an environment variable fails validation.
    """
    try:
        return GeneratorSettings()
    except ValidationError as exc:
        errors = [
            {"loc": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
            for error in exc.errors()
        ]
        msg = "Failed to load generator settings"
        raise ConfigurationError(msg, context={"errors": errors}) from exc
