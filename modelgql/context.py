# File: modelgql/context.py
"""
ModelGQL - Transformation Context
===================================
The explicit state threaded through both directive passes of one transform.

A ``TransformationContext`` is created per invocation and passed by
reference; nothing here is global.  The visitors append ``ModelRecord`` and
``ConnectionRecord`` entries, and the template generator reads them once
the schema is final.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from modelgql.models import Cardinality, FieldDefinition, TypeDefinition
from modelgql.names import DerivedNameSet
from modelgql.typegraph import TypeArena, is_list_type

logger: logging.Logger = logging.getLogger("modelgql.context")


@dataclass
class ModelContext:
    """
    Per-model synthesis state.

    ``missing_types`` is an ordered, duplicate-free queue of object type names
    that are referenced from a generated input but have no ``<Name>Input``
    yet.  It only grows during synthesis and is drained by the backfill.
    """

    type: TypeDefinition
    types: TypeArena
    names: DerivedNameSet
    missing_types: List[str] = field(default_factory=list)

    def queue_missing(self, name: str) -> None:
        if name not in self.missing_types:
            self.missing_types.append(name)
            logger.debug("Queued missing input for %s (model %s).", name, self.type.name)


@dataclass
class ModelRecord:
    names: DerivedNameSet
    context: ModelContext

    @property
    def name(self) -> str:
        return self.names.main


@dataclass
class ConnectionRecord:
    """
    One ``@connection`` field, recorded before the field is rewritten.

    ``field`` is a snapshot of the original definition, so the cardinality
    stays observable after a list field has been turned into a paginated
    connection.  Type refs are immutable; only the containers are copied.
    """

    model_type: TypeDefinition
    create_input_type_name: str
    update_input_type_name: str
    field: FieldDefinition
    id_field_name: str
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def capture(
        cls,
        model_type: TypeDefinition,
        names: DerivedNameSet,
        original: FieldDefinition,
        id_field_name: str,
        name: str,
        args: Optional[Dict[str, Any]] = None,
    ) -> "ConnectionRecord":
        return cls(
            model_type=model_type,
            create_input_type_name=names.create_input,
            update_input_type_name=names.update_input,
            field=replace(
                original,
                arguments=dict(original.arguments),
                directives=list(original.directives),
            ),
            id_field_name=id_field_name,
            name=name,
            args=dict(args or {}),
        )

    @property
    def owner_type_name(self) -> str:
        return self.model_type.name

    @property
    def target_type_name(self) -> str:
        return self.field.type.named_type

    @property
    def cardinality(self) -> Cardinality:
        return Cardinality.LIST if is_list_type(self.field.type) else Cardinality.SINGULAR

    def __repr__(self) -> str:
        return (
            f"<ConnectionRecord {self.owner_type_name}.{self.field.name} -> "
            f"{self.target_type_name} ({self.cardinality.value}) name={self.name}>"
        )


@dataclass
class TransformationContext:
    types: TypeArena = field(default_factory=TypeArena)
    models: List[ModelRecord] = field(default_factory=list)
    connections: List[ConnectionRecord] = field(default_factory=list)
    subscription_map: Dict[str, List[str]] = field(default_factory=dict)

    def get_model(self, name: str) -> Optional[ModelRecord]:
        for record in self.models:
            if record.name == name:
                return record
        return None

    def record_subscription(self, subscription_field: str, mutation_field: str) -> None:
        mutations: List[str] = self.subscription_map.setdefault(subscription_field, [])
        if mutation_field not in mutations:
            mutations.append(mutation_field)


__all__: List[str] = [
    "ModelContext",
    "ModelRecord",
    "ConnectionRecord",
    "TransformationContext",
]
