# File: modelgql/common.py
"""
ModelGQL - Common Scalar/Input Library
========================================
Builders for the comparison inputs and enums shared by every model's filter
and condition types.  Each call returns a fresh but structurally identical
definition; callers register them insert-if-absent, so processing many
models never duplicates or conflicts.
"""

from __future__ import annotations

import logging
from typing import List

from modelgql.models import (
    EnumValueDefinition,
    InputValueDefinition,
    TypeDefinition,
    TypeKind,
    TypeRef,
)
from modelgql.names import CommonNames

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.common")

TIMESTAMP_DESCRIPTION: str = (
    "The AWSTimestamp scalar type represents the number of seconds that have "
    "elapsed since 1970-01-01T00:00Z. Timestamps are serialized and "
    "deserialized as numbers. Negative values are also accepted and these "
    "represent the number of seconds till 1970-01-01T00:00Z."
)

_ATTRIBUTE_TYPES: List[str] = [
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


def _input(name: str, type_ref: TypeRef) -> InputValueDefinition:
    return InputValueDefinition(name=name, type=type_ref)


def _comparison_fields(scalar: str, operators: List[str]) -> List[InputValueDefinition]:
    return [_input(op, TypeRef.named(scalar)) for op in operators]


def _input_object(name: str, fields: List[InputValueDefinition]) -> TypeDefinition:
    return TypeDefinition(
        name=name,
        kind=TypeKind.INPUT_OBJECT,
        input_fields={f.name: f for f in fields},
    )


def _attribute_fields() -> List[InputValueDefinition]:
    return [
        _input("attributeExists", TypeRef.named("Boolean")),
        _input("attributeType", TypeRef.named(CommonNames.ATTRIBUTE_TYPES)),
    ]


# ---------------------------------------------------------------------------
# Enums and scalars
# ---------------------------------------------------------------------------


def create_sort_direction_type() -> TypeDefinition:
    return TypeDefinition(
        name=CommonNames.SORT_DIRECTION,
        kind=TypeKind.ENUM,
        values=[EnumValueDefinition("ASC"), EnumValueDefinition("DESC")],
    )


def create_attribute_types_type() -> TypeDefinition:
    return TypeDefinition(
        name=CommonNames.ATTRIBUTE_TYPES,
        kind=TypeKind.ENUM,
        values=[EnumValueDefinition(value) for value in _ATTRIBUTE_TYPES],
    )


def create_timestamp_scalar() -> TypeDefinition:
    return TypeDefinition(
        name=CommonNames.TIMESTAMP,
        kind=TypeKind.SCALAR,
        description=TIMESTAMP_DESCRIPTION,
    )


# ---------------------------------------------------------------------------
# Comparison inputs
# ---------------------------------------------------------------------------


def create_size_input_type() -> TypeDefinition:
    fields = _comparison_fields("Int", ["ne", "eq", "le", "lt", "ge", "gt"])
    fields.append(_input("between", TypeRef.list_of(TypeRef.named("Int"))))
    return _input_object(CommonNames.SIZE_INPUT, fields)


def _string_like_input(name: str, scalar: str) -> TypeDefinition:
    fields = _comparison_fields(
        scalar, ["ne", "eq", "le", "lt", "ge", "gt", "contains", "notContains"]
    )
    fields.append(_input("between", TypeRef.list_of(TypeRef.named(scalar))))
    fields.append(_input("beginsWith", TypeRef.named(scalar)))
    fields.extend(_attribute_fields())
    fields.append(_input("size", TypeRef.named(CommonNames.SIZE_INPUT)))
    return _input_object(name, fields)


def _numeric_input(name: str, scalar: str) -> TypeDefinition:
    fields = _comparison_fields(scalar, ["ne", "eq", "le", "lt", "ge", "gt"])
    fields.append(_input("between", TypeRef.list_of(TypeRef.named(scalar))))
    fields.extend(_attribute_fields())
    return _input_object(name, fields)


def create_string_input_type() -> TypeDefinition:
    return _string_like_input(CommonNames.STRING_INPUT, "String")


def create_id_input_type() -> TypeDefinition:
    return _string_like_input(CommonNames.ID_INPUT, "ID")


def create_int_input_type() -> TypeDefinition:
    return _numeric_input(CommonNames.INT_INPUT, "Int")


def create_float_input_type() -> TypeDefinition:
    return _numeric_input(CommonNames.FLOAT_INPUT, "Float")


def create_boolean_input_type() -> TypeDefinition:
    fields = _comparison_fields("Boolean", ["ne", "eq"])
    fields.extend(_attribute_fields())
    return _input_object(CommonNames.BOOLEAN_INPUT, fields)


def common_types() -> List[TypeDefinition]:
    """Fresh instances of every shared definition, in registration order."""
    return [
        create_timestamp_scalar(),
        create_sort_direction_type(),
        create_attribute_types_type(),
        create_size_input_type(),
        create_string_input_type(),
        create_id_input_type(),
        create_int_input_type(),
        create_float_input_type(),
        create_boolean_input_type(),
    ]


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TIMESTAMP_DESCRIPTION",
    "create_sort_direction_type",
    "create_attribute_types_type",
    "create_timestamp_scalar",
    "create_size_input_type",
    "create_string_input_type",
    "create_id_input_type",
    "create_int_input_type",
    "create_float_input_type",
    "create_boolean_input_type",
    "common_types",
]

logger.debug("modelgql.common loaded: %d public symbols.", len(__all__))
