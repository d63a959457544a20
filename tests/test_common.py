"""
tests/test_common.py
Unit tests for modelgql.common (shared comparison inputs and enums).
"""

from __future__ import annotations

from typing import Dict, List

import pytest

from modelgql.common import (
    TIMESTAMP_DESCRIPTION,
    common_types,
    create_attribute_types_type,
    create_boolean_input_type,
    create_float_input_type,
    create_id_input_type,
    create_int_input_type,
    create_size_input_type,
    create_sort_direction_type,
    create_string_input_type,
    create_timestamp_scalar,
)
from modelgql.models import TypeDefinition, TypeKind
from modelgql.typegraph import TypeArena, merge_definitions


def _field_types(definition: TypeDefinition) -> Dict[str, str]:
    return {name: str(f.type) for name, f in definition.input_fields.items()}


class TestEnumsAndScalars:

    def test_sort_direction(self) -> None:
        definition = create_sort_direction_type()
        assert definition.kind == TypeKind.ENUM
        assert [v.name for v in definition.values] == ["ASC", "DESC"]

    def test_attribute_types(self) -> None:
        values: List[str] = [v.name for v in create_attribute_types_type().values]
        assert values == [
            "binary",
            "binarySet",
            "bool",
            "list",
            "map",
            "number",
            "numberSet",
            "string",
            "stringSet",
            "_null",
        ]

    def test_timestamp_scalar(self) -> None:
        definition = create_timestamp_scalar()
        assert definition.kind == TypeKind.SCALAR
        assert definition.name == "AWSTimestamp"
        assert definition.description == TIMESTAMP_DESCRIPTION


class TestComparisonInputs:

    def test_string_input(self) -> None:
        assert _field_types(create_string_input_type()) == {
            "ne": "String",
            "eq": "String",
            "le": "String",
            "lt": "String",
            "ge": "String",
            "gt": "String",
            "contains": "String",
            "notContains": "String",
            "between": "[String]",
            "beginsWith": "String",
            "attributeExists": "Boolean",
            "attributeType": "ModelAttributeTypes",
            "size": "ModelSizeInput",
        }

    def test_id_input_mirrors_string_input(self) -> None:
        id_fields = _field_types(create_id_input_type())
        string_fields = _field_types(create_string_input_type())
        assert list(id_fields) == list(string_fields)
        assert id_fields["eq"] == "ID"
        assert id_fields["between"] == "[ID]"

    @pytest.mark.parametrize(
        "builder, scalar",
        [(create_int_input_type, "Int"), (create_float_input_type, "Float")],
    )
    def test_numeric_inputs(self, builder, scalar: str) -> None:
        assert _field_types(builder()) == {
            "ne": scalar,
            "eq": scalar,
            "le": scalar,
            "lt": scalar,
            "ge": scalar,
            "gt": scalar,
            "between": f"[{scalar}]",
            "attributeExists": "Boolean",
            "attributeType": "ModelAttributeTypes",
        }

    def test_boolean_input(self) -> None:
        assert _field_types(create_boolean_input_type()) == {
            "ne": "Boolean",
            "eq": "Boolean",
            "attributeExists": "Boolean",
            "attributeType": "ModelAttributeTypes",
        }

    def test_size_input(self) -> None:
        fields = _field_types(create_size_input_type())
        assert list(fields) == ["ne", "eq", "le", "lt", "ge", "gt", "between"]
        assert fields["between"] == "[Int]"


class TestCommonTypes:

    def test_fresh_but_identical(self) -> None:
        first = common_types()
        second = common_types()
        assert [t.name for t in first] == [t.name for t in second]
        for a, b in zip(first, second):
            assert a is not b
            assert _field_types(a) == _field_types(b)

    def test_registration_is_idempotent(self) -> None:
        arena = TypeArena()
        added = merge_definitions(arena, common_types())
        assert len(added) == 9
        assert merge_definitions(arena, common_types()) == []
        assert len(arena.user_definitions()) == 9
