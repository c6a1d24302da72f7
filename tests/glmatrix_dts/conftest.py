"""Shared fixtures for declaration builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from glmatrix_dts.config import GeneratorConfig
from glmatrix_dts.sources import SourceBundle
from tests.glmatrix_dts.js_sources import (
    COMMON_JS,
    LIBRARY_JS,
    MAT2_JS,
    MAT4_JS,
    QUAT_JS,
    VEC2_JS,
    VEC4_JS,
)


@pytest.fixture
def loose_config() -> GeneratorConfig:
    return GeneratorConfig()


@pytest.fixture
def strict_config() -> GeneratorConfig:
    return GeneratorConfig(strictly_typed=True)


@pytest.fixture
def source_bundle() -> SourceBundle:
    return SourceBundle(
        library=LIBRARY_JS,
        common=COMMON_JS,
        classes={
            "vec2": VEC2_JS,
            "vec4": VEC4_JS,
            "mat2": MAT2_JS,
            "mat4": MAT4_JS,
            "quat": QUAT_JS,
        },
    )


@pytest.fixture
def checkout(tmp_path: Path, source_bundle: SourceBundle) -> Path:
    """Write a minimal gl-matrix checkout and return its module directory."""
    module_dir = tmp_path / "gl-matrix" / "src" / "gl-matrix"
    module_dir.mkdir(parents=True)
    (module_dir.parent / "gl-matrix.js").write_text(source_bundle.library, encoding="utf-8")
    (module_dir / "common.js").write_text(source_bundle.common, encoding="utf-8")
    for klass in GeneratorConfig().klasses:
        text = source_bundle.classes.get(klass, "")
        (module_dir / f"{klass}.js").write_text(text, encoding="utf-8")
    return module_dir
