# File: modelgql/models.py
"""
ModelGQL - Core Data Models
=============================
Records shared by every stage of the pipeline:

* the **type arena**: ``TypeDefinition`` entries keyed by name, whose fields
  refer to other types through ``TypeRef`` handles that are only resolved
  by name when the final schema is emitted;
* ``TransformConfig``: the pydantic settings model for a transform run;
* the output records handed to the provisioning layer
  (``MappingTemplatePair``, ``ResolverTemplate``, ``IndexDescriptor``).

Arena records are plain mutable dataclasses because the visitors grow them
in place.  Configuration and output records are validated pydantic models.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from graphql.language import DirectiveNode, ValueNode
from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TypeKind(str, Enum):
    """Kinds of named schema types held in the arena."""

    SCALAR = "scalar"
    OBJECT = "object"
    INTERFACE = "interface"
    UNION = "union"
    ENUM = "enum"
    INPUT_OBJECT = "input_object"


class RefKind(str, Enum):
    """Shape of a single ``TypeRef`` layer."""

    NAMED = "named"
    LIST = "list"
    NON_NULL = "non_null"


class Cardinality(str, Enum):
    """Cardinality of a ``@connection`` field."""

    SINGULAR = "singular"
    LIST = "list"


class ResolverKind(str, Enum):
    """Which generated surface a resolver template serves."""

    QUERY = "query"
    MUTATION = "mutation"
    CONNECTION = "connection"


# ---------------------------------------------------------------------------
# Type references (handles resolved by name)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeRef:
    """
    A possibly wrapped reference to a named type.

    A NAMED ref is only a handle: the arena entry it points to may not exist
    yet while the visitors run.  References are checked and resolved by name
    once, when the schema is finalised.
    """

    kind: RefKind
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = None

    @classmethod
    def named(cls, name: str) -> "TypeRef":
        return cls(RefKind.NAMED, name=name)

    @classmethod
    def list_of(cls, of_type: "TypeRef") -> "TypeRef":
        return cls(RefKind.LIST, of_type=of_type)

    @classmethod
    def non_null(cls, of_type: "TypeRef") -> "TypeRef":
        if of_type.kind == RefKind.NON_NULL:
            raise ValueError(f"Cannot wrap non-null type {of_type} in non-null.")
        return cls(RefKind.NON_NULL, of_type=of_type)

    @property
    def is_named(self) -> bool:
        return self.kind == RefKind.NAMED

    @property
    def is_list(self) -> bool:
        return self.kind == RefKind.LIST

    @property
    def is_non_null(self) -> bool:
        return self.kind == RefKind.NON_NULL

    @property
    def named_type(self) -> str:
        """Name of the innermost named type."""
        ref: TypeRef = self
        while ref.of_type is not None:
            ref = ref.of_type
        assert ref.name is not None
        return ref.name

    def nullable(self) -> "TypeRef":
        """Strip one outer non-null layer, if present."""
        if self.is_non_null and self.of_type is not None:
            return self.of_type
        return self

    def __str__(self) -> str:
        if self.kind == RefKind.LIST:
            return f"[{self.of_type}]"
        if self.kind == RefKind.NON_NULL:
            return f"{self.of_type}!"
        return self.name or ""


# ---------------------------------------------------------------------------
# Arena records
# ---------------------------------------------------------------------------


@dataclass
class DirectiveUsage:
    """A directive applied to a type or field, with plain-Python argument values."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    node: Optional[DirectiveNode] = None


@dataclass
class InputValueDefinition:
    """A field argument or an input-object field."""

    name: str
    type: TypeRef
    default_value: Optional[ValueNode] = None
    description: Optional[str] = None
    directives: List[DirectiveUsage] = field(default_factory=list)


@dataclass
class FieldDefinition:
    """An output field of an object or interface type."""

    name: str
    type: TypeRef
    arguments: Dict[str, InputValueDefinition] = field(default_factory=dict)
    description: Optional[str] = None
    directives: List[DirectiveUsage] = field(default_factory=list)

    @property
    def has_arguments(self) -> bool:
        return bool(self.arguments)


@dataclass
class EnumValueDefinition:
    name: str
    description: Optional[str] = None
    directives: List[DirectiveUsage] = field(default_factory=list)


@dataclass
class TypeDefinition:
    """
    One named entry of the type arena.

    Which collections are meaningful depends on ``kind``: ``fields`` for
    objects and interfaces, ``input_fields`` for input objects, ``values``
    for enums, ``members`` for unions and ``interfaces`` for objects.
    """

    name: str
    kind: TypeKind
    description: Optional[str] = None
    fields: Dict[str, FieldDefinition] = field(default_factory=dict)
    input_fields: Dict[str, InputValueDefinition] = field(default_factory=dict)
    values: List[EnumValueDefinition] = field(default_factory=list)
    members: List[str] = field(default_factory=list)
    interfaces: List[str] = field(default_factory=list)
    directives: List[DirectiveUsage] = field(default_factory=list)
    builtin: bool = False

    @property
    def is_object(self) -> bool:
        return self.kind == TypeKind.OBJECT

    @property
    def is_input_object(self) -> bool:
        return self.kind == TypeKind.INPUT_OBJECT

    @property
    def is_leaf(self) -> bool:
        return self.kind in (TypeKind.SCALAR, TypeKind.ENUM)

    def get_directive(self, name: str) -> Optional[DirectiveUsage]:
        for directive in self.directives:
            if directive.name == name:
                return directive
        return None

    def __repr__(self) -> str:
        size: int = len(self.fields) or len(self.input_fields) or len(self.values)
        return f"<TypeDefinition {self.kind.value} {self.name} ({size} members)>"


# ---------------------------------------------------------------------------
# Shared pydantic configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=False,
    frozen=False,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Transform configuration
# ---------------------------------------------------------------------------


class TransformConfig(BaseModel):
    """
    Settings for one transform run.

    Only the template generator and the pre-flight validation policy read
    these values; the schema synthesis itself is fully determined by the
    input document.
    """

    model_config = _SHARED_CONFIG

    default_list_limit: int = Field(
        default=10, ge=1, le=1000, description="Page size for list<Models> when no limit is given."
    )
    default_sync_limit: int = Field(
        default=100, ge=1, le=10000, description="Page size for sync<Models> when no limit is given."
    )
    connection_list_limit: int = Field(
        default=10, ge=1, le=1000, description="Page size for list connection fields."
    )
    missing_key_sentinel: str = Field(
        default="___xamznone____",
        min_length=1,
        description="Key looked up when a singular connection has no foreign key value.",
    )
    fail_on_warnings: bool = Field(
        default=False,
        description="Abort the transform when pre-flight validation reports warnings.",
    )

    @model_validator(mode="after")
    def _validate_limits(self) -> "TransformConfig":
        if self.default_list_limit > self.default_sync_limit:
            raise ValueError(
                f"default_list_limit ({self.default_list_limit}) must be "
                f"<= default_sync_limit ({self.default_sync_limit})."
            )
        return self


# ---------------------------------------------------------------------------
# Output records for the provisioning layer
# ---------------------------------------------------------------------------


class MappingTemplatePair(BaseModel):
    """Request/response mapping templates for a single resolver."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    request: str = Field(..., min_length=1, description="Request mapping template.")
    response: str = Field(..., min_length=1, description="Response mapping template.")


class ResolverTemplate(BaseModel):
    """
    A resolver ready to attach: (type, field) plus its template pair.

    ``data_source`` names the model whose table serves the resolver.  For
    connection fields this is the *target* model, not the owner.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type_name: str = Field(..., min_length=1)
    field_name: str = Field(..., min_length=1)
    data_source: str = Field(..., min_length=1)
    kind: ResolverKind
    templates: MappingTemplatePair

    @property
    def key(self) -> str:
        return f"{self.type_name}.{self.field_name}"

    def __repr__(self) -> str:
        return f"<ResolverTemplate {self.key} ({self.kind.value}) on {self.data_source}>"


class IndexDescriptor(BaseModel):
    """Secondary index a list-connection query template expects on a model table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    table: str = Field(..., min_length=1, description="Model whose table carries the index.")
    index_name: str = Field(..., min_length=1)
    partition_key: str = Field(..., min_length=1, description="Foreign-key attribute name.")


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TypeKind",
    "RefKind",
    "Cardinality",
    "ResolverKind",
    "TypeRef",
    "DirectiveUsage",
    "InputValueDefinition",
    "FieldDefinition",
    "EnumValueDefinition",
    "TypeDefinition",
    "TransformConfig",
    "MappingTemplatePair",
    "ResolverTemplate",
    "IndexDescriptor",
]

logger.debug("modelgql.models loaded: %d public symbols.", len(__all__))
