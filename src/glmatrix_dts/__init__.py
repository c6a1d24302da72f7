"""TypeScript declaration generator for the gl-matrix library.

The package recovers method signatures from gl-matrix's JSDoc comments,
resolves aliases between modules and renders ``gl-matrix.d.ts``.
"""

from __future__ import annotations

from glmatrix_dts.config import GeneratorConfig
from glmatrix_dts.errors import (
    ConfigurationError,
    DeclarationBuilderError,
    MalformedInputError,
    UnresolvedAliasError,
)
from glmatrix_dts.models import Signature
from glmatrix_dts.pipeline import GenerationResult, generate, generate_from_directory
from glmatrix_dts.registry import SignatureRegistry
from glmatrix_dts.typemap import resolve

__version__ = "1.1.0"

__all__ = [
    "ConfigurationError",
    "DeclarationBuilderError",
    "GenerationResult",
    "GeneratorConfig",
    "MalformedInputError",
    "Signature",
    "SignatureRegistry",
    "UnresolvedAliasError",
    "__version__",
    "generate",
    "generate_from_directory",
    "resolve",
]
