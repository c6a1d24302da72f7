"""End-to-end tests for declaration generation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from glmatrix_dts.config import GeneratorConfig
from glmatrix_dts.errors import SourceNotFoundError, UnresolvedAliasError
from glmatrix_dts.pipeline import build_registry, generate, generate_from_directory
from glmatrix_dts.sources import SourceBundle, load_sources
from tests.glmatrix_dts.js_sources import COMMON_JS, LIBRARY_JS, QUAT_JS

CREATE_ONLY_JS = """\
/**
 * Creates a new, empty vec2
 *
 * @returns {vec2} a new 2D vector
 */
vec2.create = function() {
    var out = new glMatrix.ARRAY_TYPE(2);
    return out;
};
"""

HEADER = (
    "// Type definitions for gl-matrix 2.3.2\n"
    "// Project: http://glmatrix.net/\n"
    "// Definitions by: chuntaro <https://github.com/chuntaro/>\n"
    "// Definitions: https://github.com/chuntaro/gl-matrix.d.ts\n"
)


def _lines(config: GeneratorConfig, sources: SourceBundle, klass: str) -> tuple[str, ...]:
    return generate(sources, config).fragments[klass]


def test_minimal_document_is_assembled_exactly() -> None:
    sources = SourceBundle(
        library=LIBRARY_JS,
        common="glMatrix.EPSILON = 0.000001;\n",
        classes={"vec2": CREATE_ONLY_JS},
    )
    config = GeneratorConfig(enable_javadoc=False, klasses=("vec2",))

    result = generate(sources, config)

    assert result.document == (
        HEADER
        + "\n\n"
        + "interface glMatrix {\n  EPSILON: number;\n}\ndeclare var glMatrix: glMatrix;\n"
        + "\n\ninterface vec2 {\n  create(): Float32Array;\n}\ndeclare var vec2: vec2;\n"
        + "\n"
    )
    assert result.version == "2.3.2"


def test_loose_class_members(source_bundle: SourceBundle) -> None:
    members = _lines(GeneratorConfig(enable_javadoc=False), source_bundle, "vec2")

    assert members == (
        "  create(): Float32Array;\n",
        "  set(out: Float32Array, x: number, y: number): Float32Array;\n",
        "  add(out: Float32Array, a: Float32Array, b: Float32Array): Float32Array;\n",
        "  subtract(out: Float32Array, a: Float32Array, b: Float32Array): Float32Array;\n",
        "  sub(out: Float32Array, a: Float32Array, b: Float32Array): Float32Array;\n",
        "  length(a: Float32Array): number;\n",
        "  len(a: Float32Array): number;\n",
        "  forEach<T>(a: Float32Array[], stride: number, offset: number, count: number, "
        "fn: (a: Float32Array, b: Float32Array, arg: T) => void, arg: T): Float32Array[];\n",
        "  str(a: Float32Array): string;\n",
    )


def test_strict_class_members(source_bundle: SourceBundle) -> None:
    config = GeneratorConfig(strictly_typed=True, enable_javadoc=False)

    members = _lines(config, source_bundle, "vec2")

    assert members[2] == "  add(out: vec2, a: vec2, b: vec2): vec2;\n"
    assert members[1] == (
        "  // set(out: vec2, x: number, y: number): vec2; // not Float32Array compatible\n"
    )
    assert members[5] == "  // length(a: vec2): number; // not Float32Array compatible\n"
    assert members[6] == "  len(a: vec2): number;\n"
    assert members[7].startswith("  // forEach<T>(a: vec2[], ")


def test_cross_class_alias_end_to_end(source_bundle: SourceBundle) -> None:
    config = GeneratorConfig(strictly_typed=True, enable_javadoc=False)

    members = _lines(config, source_bundle, "quat")

    assert members == (
        "  // set(out: vec4, x: number, y: number, z: number, w: number): vec4;"
        " // not Float32Array compatible\n",
        "  // length(a: vec4): number; // not Float32Array compatible\n",
        "  len(a: vec4): number;\n",
    )


def test_cross_class_alias_documentation(source_bundle: SourceBundle) -> None:
    config = GeneratorConfig(strictly_typed=True)

    set_fragment, length_fragment, len_fragment = _lines(config, source_bundle, "quat")

    assert "   * Set the components of a vec4 to the given values\n" in set_fragment
    assert "   * Calculates the length of a vec4\n" in length_fragment
    assert "   * Calculates the length of a quat\n" in len_fragment
    assert len_fragment.endswith("  len(a: vec4): number;\n")


def test_common_module_members(source_bundle: SourceBundle) -> None:
    members = _lines(GeneratorConfig(enable_javadoc=False), source_bundle, "glMatrix")

    assert members == (
        "  setMatrixArrayType<T>(type: T): void;\n",
        "  toRadian(a: number): number;\n",
    )


def test_loose_document_layout(source_bundle: SourceBundle) -> None:
    document = generate(source_bundle, GeneratorConfig(enable_javadoc=False)).document

    assert document.startswith(HEADER + "\n\ninterface glMatrix {\n  EPSILON: number;\n")
    assert "  ARRAY_TYPE: Float32Array | Array<number>;\n" in document
    assert "  RANDOM: () => number;\n" in document
    assert "\n\ninterface vec3 {\n}\ndeclare var vec3: vec3;\n" in document
    assert "extends" not in document
    assert document.endswith("declare var quat: quat;\n\n")
    assert document.index("interface vec2 ") < document.index("interface mat4 ")


def test_strict_document_extends_buffer_type(source_bundle: SourceBundle) -> None:
    document = generate(source_bundle, GeneratorConfig(strictly_typed=True)).document

    for klass in GeneratorConfig().klasses:
        assert f"interface {klass} extends Float32Array {{" in document
    assert "interface glMatrix {" in document


def test_for_import_document(source_bundle: SourceBundle) -> None:
    document = generate(source_bundle, GeneratorConfig(for_import=True)).document

    assert "export interface glMatrix {" in document
    assert "export declare var glMatrix: glMatrix;" in document
    assert "export declare var mat2d: mat2d;" in document
    assert "\ndeclare var" not in document


def test_javadoc_blocks_are_emitted(source_bundle: SourceBundle) -> None:
    document = generate(source_bundle, GeneratorConfig()).document

    assert "\n  /**\n   * Adds two vec2's\n" in document
    assert "   */\n  add(out: Float32Array" in document


def test_detected_buffer_type_replaces_default(source_bundle: SourceBundle) -> None:
    common = COMMON_JS.replace(
        "(typeof Float32Array !== 'undefined') ? Float32Array : Array",
        "(typeof Float64Array !== 'undefined') ? Float64Array : Array",
    )
    sources = SourceBundle(source_bundle.library, common, source_bundle.classes)

    result = generate(sources, GeneratorConfig(enable_javadoc=False))

    assert result.config.array_type == "Float64Array"
    assert result.fragments["vec2"][0] == "  create(): Float64Array;\n"
    assert "  ARRAY_TYPE: Float64Array | Array<number>;\n" in result.document


def test_build_registry_registers_utility_module_last(
    source_bundle: SourceBundle, strict_config: GeneratorConfig
) -> None:
    registry = build_registry(source_bundle, strict_config)

    assert list(registry) == [*strict_config.klasses, "glMatrix"]
    assert registry.method_map("vec3") == {}


def test_alias_to_unprocessed_class_is_fatal() -> None:
    sources = SourceBundle(library=LIBRARY_JS, common=COMMON_JS, classes={"quat": QUAT_JS})

    with pytest.raises(UnresolvedAliasError):
        generate(sources, GeneratorConfig())


def test_generation_is_deterministic(source_bundle: SourceBundle) -> None:
    config = GeneratorConfig(strictly_typed=True)

    assert generate(source_bundle, config).document == generate(source_bundle, config).document


def test_generate_from_directory(checkout: Path, source_bundle: SourceBundle) -> None:
    config = GeneratorConfig(enable_javadoc=False)

    from_disk = generate_from_directory(checkout, config)

    assert from_disk.document == generate(source_bundle, config).document


def test_load_sources_reads_every_module(checkout: Path) -> None:
    sources = load_sources(checkout, ("vec2", "quat"))

    assert "@version 2.3.2" in sources.library
    assert sources.common.startswith("/**")
    assert list(sources.classes) == ["vec2", "quat"]


def test_missing_module_source(checkout: Path) -> None:
    (checkout / "mat3.js").unlink()

    with pytest.raises(SourceNotFoundError) as excinfo:
        generate_from_directory(checkout, GeneratorConfig())

    assert excinfo.value.context["path"].endswith("mat3.js")


def test_generation_logs_summary(
    source_bundle: SourceBundle, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="glmatrix_dts.pipeline")

    generate(source_bundle, GeneratorConfig())

    records = [record for record in caplog.records if record.name == "glmatrix_dts.pipeline"]
    assert records
    assert records[-1].operation == "generate"  # type: ignore[attr-defined]
    assert records[-1].status == "success"  # type: ignore[attr-defined]
    assert records[-1].count == 9  # type: ignore[attr-defined]
