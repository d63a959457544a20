# File: modelgql/connection_visitor.py
"""
ModelGQL - @connection Visitor
================================
Registers one ``ConnectionRecord`` per ``@connection`` field and rewrites
list-valued connections into paginated ``Model<T>Connection`` fields.

Singular connections are left untouched here; the assembler later adds
their foreign-key field to the owner's create and update inputs.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from modelgql.context import ConnectionRecord, TransformationContext
from modelgql.directives import DirectiveSite, FieldDirectiveSite
from modelgql.errors import DirectiveMisuseError
from modelgql.models import FieldDefinition, InputValueDefinition, TypeDefinition, TypeKind, TypeRef
from modelgql.names import CommonNames, DerivedNameSet, derive_names
from modelgql.utils import to_camel_case

logger: logging.Logger = logging.getLogger("modelgql.connection_visitor")

MODEL_DIRECTIVE: str = "model"


def connection_id_field_name(owner: str, target: str) -> str:
    """Foreign-key field added to the owner's inputs, e.g. ``postBlogId``."""
    return to_camel_case(f"{owner}{target}Id")


def default_connection_name(owner: str, target: str) -> str:
    return f"${owner}{target}"


def _pagination_arguments(target_names: DerivedNameSet) -> Dict[str, InputValueDefinition]:
    return {
        "filter": InputValueDefinition("filter", TypeRef.named(target_names.model_filter_input)),
        "sortDirection": InputValueDefinition(
            "sortDirection", TypeRef.named(CommonNames.SORT_DIRECTION)
        ),
        "limit": InputValueDefinition("limit", TypeRef.named("Int")),
        "nextToken": InputValueDefinition("nextToken", TypeRef.named("String")),
    }


def _resolve_target(
    context: TransformationContext,
    site: FieldDirectiveSite,
    target_ref: TypeRef,
) -> TypeDefinition:
    target_name: str = target_ref.named_type
    target: Optional[TypeDefinition] = context.types.get(target_name)
    if target is None:
        raise DirectiveMisuseError(
            f"Connection target '{target_name}' does not exist.",
            type_name=site.type_name,
            field_name=site.field_name,
        )
    if target.kind != TypeKind.OBJECT:
        raise DirectiveMisuseError(
            "@connection may only be applied to fields that return an object, list, "
            f"non-null object, or non-null list; '{target_name}' is a {target.kind.value}.",
            type_name=site.type_name,
            field_name=site.field_name,
        )
    if target.get_directive(MODEL_DIRECTIVE) is None:
        raise DirectiveMisuseError(
            f"Connection target '{target_name}' is not annotated with @model.",
            type_name=site.type_name,
            field_name=site.field_name,
        )
    return target


def visit_connection(context: TransformationContext, site: DirectiveSite) -> ConnectionRecord:
    """
    Handle one ``@connection`` usage.

    The field's outer non-null wrapper is ignored when deciding the shape:
    ``Blog!`` is singular and ``[Post]!`` is a list.

    Raises:
        DirectiveMisuseError: The field is not on an object type, declares
            arguments, or its target is missing, not an object type, or not
            a model.
    """
    if not isinstance(site, FieldDirectiveSite) or site.type_kind != TypeKind.OBJECT:
        raise DirectiveMisuseError(
            "@connection may only be applied to fields that belong to an object type.",
            type_name=site.type_name,
            field_name=getattr(site, "field_name", None),
        )

    owner: TypeDefinition = context.types.require(site.type_name, TypeKind.OBJECT)
    field: FieldDefinition = owner.fields[site.field_name]
    if field.has_arguments:
        raise DirectiveMisuseError(
            "@connection may only be applied to fields with no arguments.",
            type_name=owner.name,
            field_name=field.name,
        )

    shape: TypeRef = field.type.nullable()
    target: TypeDefinition = _resolve_target(context, site, shape)

    args: Dict[str, Any] = dict(site.directive.arguments)
    connection_name: Optional[str] = args.get("name")
    record = ConnectionRecord.capture(
        model_type=owner,
        names=derive_names(owner.name),
        original=field,
        id_field_name=connection_id_field_name(owner.name, target.name),
        name=connection_name or default_connection_name(owner.name, target.name),
        args=args,
    )
    context.connections.append(record)

    if shape.is_list:
        target_names: DerivedNameSet = derive_names(target.name)
        field.type = TypeRef.named(target_names.model_connection)
        field.arguments = _pagination_arguments(target_names)
        logger.debug(
            "Rewrote %s.%s to %s.", owner.name, field.name, target_names.model_connection
        )
    else:
        logger.debug("Recorded singular connection %s.%s.", owner.name, field.name)
    return record


__all__: List[str] = [
    "connection_id_field_name",
    "default_connection_name",
    "visit_connection",
]
