"""Run the full declaration generation pipeline.

The steps are strictly sequential:

1. Harvest the utility module properties and pick the numeric buffer type.
2. Pass 1: extract and register every class, then the utility module.
3. Pass 2: resolve aliases and render each registered map.
4. Assemble the header, utility interface and class interfaces.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from glmatrix_dts.common import CommonModule, extract_version, harvest_common_module
from glmatrix_dts.extract import compile_declaration_pattern, extract_signatures
from glmatrix_dts.logging import get_logger, with_fields
from glmatrix_dts.registry import SignatureRegistry
from glmatrix_dts.render import (
    render_class_interface,
    render_common_interface,
    render_document,
    render_header,
)
from glmatrix_dts.sources import load_sources

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from glmatrix_dts.config import GeneratorConfig
    from glmatrix_dts.sources import SourceBundle

__all__ = [
    "GenerationResult",
    "build_registry",
    "generate",
    "generate_from_directory",
]

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of one run.

    Attributes
    ----------
    document : str
        Complete declaration document.
    config : GeneratorConfig
        Configuration actually used, including the detected buffer type.
    version : str
        Library version from the header, possibly empty.
    fragments : Mapping[str, tuple[str, ...]]
        Rendered member fragments per module, in emission order.
    """

    document: str
    config: GeneratorConfig
    version: str = ""
    common: CommonModule = field(default_factory=CommonModule)
    fragments: Mapping[str, tuple[str, ...]] = field(default_factory=dict)


def build_registry(sources: SourceBundle, config: GeneratorConfig) -> SignatureRegistry:
    """Run pass 1 for every class and the utility module."""
    registry = SignatureRegistry()
    class_pattern = compile_declaration_pattern(config.klasses, config.klasses)
    for klass in config.klasses:
        source = sources.classes.get(klass, "")
        registry.register_pass(
            klass,
            extract_signatures(klass, source, class_pattern, registry, config=config),
        )
    common_pattern = compile_declaration_pattern((config.common_module,), config.klasses)
    registry.register_pass(
        config.common_module,
        extract_signatures(
            config.common_module, sources.common, common_pattern, registry, config=config
        ),
    )
    return registry


def generate(sources: SourceBundle, config: GeneratorConfig) -> GenerationResult:
    """Generate the declaration document for ``sources``.

    Parameters
    ----------
    sources : SourceBundle
        Module texts.
    config : GeneratorConfig
        Requested options. The buffer type is replaced when the utility module
        selects a different one.

    Returns
    -------
    GenerationResult
        Document and intermediate fragments.

    Raises
    ------
    MalformedInputError
        If a declaration cannot be parsed unambiguously.
    UnresolvedAliasError
        If an alias references an unknown method.
    """
    logger = with_fields(LOGGER, operation="generate")
    started = time.perf_counter()

    version = extract_version(sources.library)
    common = harvest_common_module(sources.common, config.common_module, config.array_type)
    if common.array_type is not None:
        config = config.with_array_type(common.array_type)

    registry = build_registry(sources, config)

    fragments: dict[str, tuple[str, ...]] = {
        config.common_module: tuple(registry.resolve_and_render(config.common_module, config))
    }
    class_blocks: list[str] = []
    for klass in config.klasses:
        members = tuple(registry.resolve_and_render(klass, config))
        fragments[klass] = members
        class_blocks.append(render_class_interface(klass, members, config))

    document = render_document(
        render_header(version, config),
        render_common_interface(common.properties, fragments[config.common_module], config),
        class_blocks,
    )
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Generated declarations for %d modules",
        len(fragments),
        extra={"status": "success", "count": len(fragments), "duration_ms": duration_ms},
    )
    return GenerationResult(
        document=document,
        config=config,
        version=version,
        common=common,
        fragments=fragments,
    )


def generate_from_directory(source_dir: Path, config: GeneratorConfig) -> GenerationResult:
    """Load the modules under ``source_dir`` and generate their declarations."""
    return generate(load_sources(source_dir, config.klasses), config)
