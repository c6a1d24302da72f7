"""Tests for JSDoc type harvesting."""

from __future__ import annotations

from glmatrix_dts.harvest import (
    DocumentationHarvest,
    harvest_documentation,
    harvest_return_type,
    harvest_types,
    structural_type,
)

ADD_DOC = """/**
 * Adds two vec2's
 *
 * @param {vec2} out the receiving vector
 * @param {vec2} a the first operand
 * @param {vec2} b the second operand
 * @returns {vec2} out
 */"""

FOV_DOC = """/**
 * Generates a perspective projection matrix with the given field of view.
 *
 * @param {mat4} out mat4 frustum matrix will be written into
 * @param {Object} fov Object containing the following values: upDegrees, downDegrees, leftDegrees, rightDegrees
 * @param {number} near Near bound of the frustum
 * @returns {mat4} out
 */"""


def test_harvest_types_in_textual_order() -> None:
    assert harvest_types(ADD_DOC) == ["vec2", "vec2", "vec2", "vec2"]


def test_harvest_expands_structured_parameter() -> None:
    types = harvest_types(FOV_DOC)

    assert types[1] == (
        "{upDegrees: number, downDegrees: number, leftDegrees: number, rightDegrees: number}"
    )
    assert types == ["mat4", types[1], "number", "mat4"]


def test_harvest_without_tags_is_empty() -> None:
    doc = "/**\n * Alias for {@link vec2.subtract}\n * @function\n */"

    assert harvest_types(doc) == []
    assert harvest_return_type(doc) is None


def test_harvest_optional_parameter_name() -> None:
    doc = "/**\n * @param {Object} [arg] additional argument to pass to fn\n */"

    assert harvest_types(doc) == ["Object"]


def test_harvest_return_type_accepts_short_tag() -> None:
    assert harvest_return_type("/** @return {Number} the dot product */") == "Number"
    assert harvest_return_type(ADD_DOC) == "vec2"


def test_structural_type_trims_separators() -> None:
    assert structural_type("x ,y,  z") == "{x: number, y: number, z: number}"


def test_harvest_documentation_positions() -> None:
    harvest = harvest_documentation(ADD_DOC)

    assert harvest == DocumentationHarvest(types=("vec2",) * 4, returns="vec2")
    assert harvest.type_at(0) == "vec2"
    assert harvest.type_at(7) is None
    assert harvest.type_at(-1) is None
