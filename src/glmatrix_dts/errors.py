"""Exception hierarchy and Problem Details support for the declaration builder.

Every failure raised by :mod:`glmatrix_dts` derives from
:class:`DeclarationBuilderError`. Errors carry an :class:`ErrorCode`, a context
mapping and can be rendered as RFC 9457 Problem Details payloads so the CLI can
report them in a structured way.

Examples
--------
>>> from glmatrix_dts.errors import MalformedInputError
>>> error = MalformedInputError("OOPS! unknown format <vec2.js>", context={"klass": "vec2"})
>>> error.to_problem_details()["type"]
'https://glmatrix-dts.dev/problems/malformed-input'
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Final, TypedDict

__all__ = [
    "BASE_TYPE_URI",
    "ConfigurationError",
    "DeclarationBuilderError",
    "ErrorCode",
    "MalformedInputError",
    "ProblemDetails",
    "RegistryError",
    "SourceNotFoundError",
    "UnresolvedAliasError",
]

BASE_TYPE_URI: Final = "https://glmatrix-dts.dev/problems/"


class ErrorCode(StrEnum):
    """Stable identifiers for every error kind the builder can raise."""

    RUNTIME_ERROR = "runtime-error"
    MALFORMED_INPUT = "malformed-input"
    UNRESOLVED_ALIAS = "unresolved-alias"
    CONFIGURATION_ERROR = "configuration-error"
    SOURCE_NOT_FOUND = "source-not-found"
    REGISTRY_ERROR = "registry-error"


class ProblemDetails(TypedDict, total=False):
    """RFC 9457 Problem Details envelope used for error reporting."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    extensions: dict[str, object]


class DeclarationBuilderError(RuntimeError):
    """Base exception for declaration builder failures.

    Parameters
    ----------
    message : str
        Human-readable error message.
    context : Mapping[str, object] | None, optional
        Structured details attached to the error. Defaults to None.

    Attributes
    ----------
    code : ErrorCode
        Class-level error code.
    title : str
        Short Problem Details title.
    context : dict[str, object]
        Additional context for the error.
    """

    code: ErrorCode = ErrorCode.RUNTIME_ERROR
    title: str = "Declaration builder failure"
    http_status: int = 500

    def __init__(self, message: str, *, context: Mapping[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, object] = dict(context or {})

    def to_problem_details(self, instance: str | None = None) -> ProblemDetails:
        """Return the Problem Details representation of this error.

        Parameters
        ----------
        instance : str | None, optional
            URI reference identifying the failing occurrence. Defaults to None.

        Returns
        -------
        ProblemDetails
            Problem Details payload including the error context as extensions.
        """
        problem: ProblemDetails = {
            "type": f"{BASE_TYPE_URI}{self.code.value}",
            "title": self.title,
            "status": self.http_status,
            "detail": self.message,
            "code": self.code.value,
        }
        if instance is not None:
            problem["instance"] = instance
        if self.context:
            problem["extensions"] = dict(self.context)
        return problem

    def __str__(self) -> str:
        return self.message


class MalformedInputError(DeclarationBuilderError):
    """Raised when a declaration match has an unexpected capture shape."""

    code = ErrorCode.MALFORMED_INPUT
    title = "Malformed module source"
    http_status = 422


class UnresolvedAliasError(DeclarationBuilderError):
    """Raised when an alias references a method that is not registered."""

    code = ErrorCode.UNRESOLVED_ALIAS
    title = "Unresolvable method alias"
    http_status = 422


class ConfigurationError(DeclarationBuilderError):
    """Raised when generator configuration or settings are invalid."""

    code = ErrorCode.CONFIGURATION_ERROR
    title = "Invalid generator configuration"
    http_status = 400


class SourceNotFoundError(DeclarationBuilderError):
    """Raised when a module source file cannot be read."""

    code = ErrorCode.SOURCE_NOT_FOUND
    title = "Module source not found"
    http_status = 404


class RegistryError(DeclarationBuilderError):
    """Raised when the signature registry is used out of order."""

    code = ErrorCode.REGISTRY_ERROR
    title = "Signature registry misuse"
