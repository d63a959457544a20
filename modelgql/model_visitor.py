# File: modelgql/model_visitor.py
"""
ModelGQL - @model Visitor
===========================
Synthesizes the generated type set for each ``@model`` object type.

The work is split in two phases because create/update inputs must not
contain fields that the ``@connection`` pass later rewrites into paginated
connections:

1. ``visit_model`` (model pass): bookkeeping fields, the connection
   wrapper, the delete input and the Query/Mutation/Subscription fields.
   Generated operations refer to inputs that do not exist yet; the handles
   are resolved by name at emission time.
2. ``add_model_input_types`` (after the connection pass): create, update,
   filter and condition inputs, followed by ``backfill_missing_types``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from modelgql.common import common_types
from modelgql.context import ModelContext, ModelRecord, TransformationContext
from modelgql.directives import DirectiveSite, ObjectDirectiveSite
from modelgql.errors import DirectiveMisuseError, TypeResolutionError
from modelgql.models import (
    FieldDefinition,
    InputValueDefinition,
    TypeDefinition,
    TypeKind,
    TypeRef,
)
from modelgql.names import CommonNames, DerivedNameSet, derive_names, input_type_name
from modelgql.typegraph import TypeArena, merge_definitions, rewrap

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.model_visitor")

# Helper types declared only to type the @model directive's arguments.
TYPES_TO_PRUNE: List[str] = [
    "ModelMutationMap",
    "ModelQueryMap",
    "ModelSubscriptionMap",
    "ModelSubscriptionLevel",
]

BOOKKEEPING_FIELDS: List[str] = ["_version", "_deleted", "_lastChangedAt"]


# ---------------------------------------------------------------------------
# Small constructors
# ---------------------------------------------------------------------------


def _named(name: str) -> TypeRef:
    return TypeRef.named(name)


def _required(name: str) -> TypeRef:
    return TypeRef.non_null(TypeRef.named(name))


def _arg(name: str, type_ref: TypeRef) -> InputValueDefinition:
    return InputValueDefinition(name=name, type=type_ref)


def _field(name: str, type_ref: TypeRef, *args: InputValueDefinition) -> FieldDefinition:
    return FieldDefinition(name=name, type=type_ref, arguments={a.name: a for a in args})


def _is_input_candidate(field: FieldDefinition) -> bool:
    """Identity, bookkeeping and argument-bearing fields never appear in generated inputs."""
    return field.name != "id" and not field.name.startswith("_") and not field.has_arguments


def _root_type(types: TypeArena, name: str) -> TypeDefinition:
    """Fetch (or create) the root operation type *name*; it must be an object type."""
    if name not in types:
        types.register(TypeDefinition(name=name, kind=TypeKind.OBJECT))
    return types.require(name, TypeKind.OBJECT)


# ---------------------------------------------------------------------------
# Model pass
# ---------------------------------------------------------------------------


def _add_bookkeeping_fields(main: TypeDefinition) -> None:
    main.fields["_version"] = _field("_version", _required("Int"))
    main.fields["_deleted"] = _field("_deleted", _named("Boolean"))
    main.fields["_lastChangedAt"] = _field("_lastChangedAt", _required(CommonNames.TIMESTAMP))


def _create_connection_type(names: DerivedNameSet) -> TypeDefinition:
    return TypeDefinition(
        name=names.model_connection,
        kind=TypeKind.OBJECT,
        fields={
            "items": _field("items", TypeRef.list_of(_named(names.main))),
            "nextToken": _field("nextToken", _named("String")),
            "startedAt": _field("startedAt", _named(CommonNames.TIMESTAMP)),
        },
    )


def _create_delete_input_type(names: DerivedNameSet) -> TypeDefinition:
    return TypeDefinition(
        name=names.delete_input,
        kind=TypeKind.INPUT_OBJECT,
        input_fields={
            "id": _arg("id", _named("ID")),
            "_version": _arg("_version", _named("Int")),
        },
    )


def _add_query_fields(types: TypeArena, names: DerivedNameSet) -> None:
    query: TypeDefinition = _root_type(types, "Query")
    query.fields[names.query.get] = _field(
        names.query.get, _named(names.main), _arg("id", _required("ID"))
    )
    query.fields[names.query.list] = _field(
        names.query.list,
        _named(names.model_connection),
        _arg("filter", _named(names.model_filter_input)),
        _arg("limit", _named("Int")),
        _arg("nextToken", _named("String")),
    )
    query.fields[names.query.sync] = _field(
        names.query.sync,
        _named(names.model_connection),
        _arg("filter", _named(names.model_filter_input)),
        _arg("limit", _named("Int")),
        _arg("nextToken", _named("String")),
        _arg("lastSync", _named(CommonNames.TIMESTAMP)),
    )


def _add_mutation_fields(types: TypeArena, names: DerivedNameSet) -> None:
    mutation: TypeDefinition = _root_type(types, "Mutation")
    for field_name, input_name in (
        (names.mutation.create, names.create_input),
        (names.mutation.update, names.update_input),
        (names.mutation.delete, names.delete_input),
    ):
        mutation.fields[field_name] = _field(
            field_name,
            _named(names.main),
            _arg("input", _required(input_name)),
            _arg("condition", _named(names.model_condition_input)),
        )


def _add_subscription_fields(context: TransformationContext, names: DerivedNameSet) -> None:
    subscription: TypeDefinition = _root_type(context.types, "Subscription")
    for field_name, mutation_name in (
        (names.subscription.on_create, names.mutation.create),
        (names.subscription.on_update, names.mutation.update),
        (names.subscription.on_delete, names.mutation.delete),
    ):
        subscription.fields[field_name] = _field(field_name, _named(names.main))
        context.record_subscription(field_name, mutation_name)


def visit_model(context: TransformationContext, site: DirectiveSite) -> ModelRecord:
    """
    Handle one ``@model`` usage and register the resulting ``ModelRecord``.

    Raises:
        DirectiveMisuseError: The directive is not on an object type.
        TypeResolutionError: ``Query``/``Mutation``/``Subscription`` exists
            but is not an object type.
    """
    if not isinstance(site, ObjectDirectiveSite) or site.type_kind != TypeKind.OBJECT:
        raise DirectiveMisuseError(
            "@model can only be applied to object types.", type_name=site.type_name
        )
    if site.directive.arguments:
        logger.warning(
            "@model arguments on %s are accepted but not used for naming: %s",
            site.type_name,
            ", ".join(sorted(site.directive.arguments)),
        )

    types: TypeArena = context.types
    main: TypeDefinition = types.require(site.type_name, TypeKind.OBJECT)
    names: DerivedNameSet = derive_names(main.name)

    merge_definitions(types, common_types())
    _add_bookkeeping_fields(main)
    types.register(_create_connection_type(names))
    types.register(_create_delete_input_type(names))
    _add_query_fields(types, names)
    _add_mutation_fields(types, names)
    _add_subscription_fields(context, names)

    record = ModelRecord(names=names, context=ModelContext(type=main, types=types, names=names))
    context.models.append(record)
    logger.debug("Registered model %s.", main.name)
    return record


# ---------------------------------------------------------------------------
# Input synthesis
# ---------------------------------------------------------------------------


def input_field_type(model_context: ModelContext, field: FieldDefinition) -> Optional[TypeRef]:
    """
    Best-effort input type for an output field, or ``None`` to skip it.

    Scalars and enums pass through.  Object fields map to ``<Name>Input``
    with the same list/non-null wrapping; if that input does not exist yet
    the object type is queued for the backfill.  Interfaces and unions have
    no input counterpart.
    """
    types: TypeArena = model_context.types
    named: TypeDefinition = types.require(field.type.named_type)
    if named.is_leaf:
        return field.type
    if not named.is_object:
        return None

    mirrored: str = input_type_name(named.name)
    existing: Optional[TypeDefinition] = types.get(mirrored)
    if existing is None:
        model_context.queue_missing(named.name)
    elif not existing.is_input_object:
        raise TypeResolutionError(
            f"'{mirrored}' exists but is not an input object type.",
            type_name=model_context.type.name,
            field_name=field.name,
        )
    return rewrap(field.type, mirrored)


def _mirrored_fields(model_context: ModelContext, nullable: bool) -> List[InputValueDefinition]:
    result: List[InputValueDefinition] = []
    for field in model_context.type.fields.values():
        if not _is_input_candidate(field):
            continue
        type_ref: Optional[TypeRef] = input_field_type(model_context, field)
        if type_ref is None:
            continue
        result.append(_arg(field.name, type_ref.nullable() if nullable else type_ref))
    return result


def _create_create_input_type(model_context: ModelContext) -> TypeDefinition:
    fields: List[InputValueDefinition] = [_arg("id", _named("ID"))]
    fields.extend(_mirrored_fields(model_context, nullable=False))
    fields.append(_arg("_version", _named("Int")))
    return TypeDefinition(
        name=model_context.names.create_input,
        kind=TypeKind.INPUT_OBJECT,
        input_fields={f.name: f for f in fields},
    )


def _create_update_input_type(model_context: ModelContext) -> TypeDefinition:
    fields: List[InputValueDefinition] = [_arg("id", _required("ID"))]
    fields.extend(_mirrored_fields(model_context, nullable=True))
    fields.append(_arg("_version", _named("Int")))
    return TypeDefinition(
        name=model_context.names.update_input,
        kind=TypeKind.INPUT_OBJECT,
        input_fields={f.name: f for f in fields},
    )


def _comparison_fields(model_context: ModelContext) -> List[InputValueDefinition]:
    """One comparison input per plain ID/String/Int/Float/Boolean field; lists are skipped."""
    result: List[InputValueDefinition] = []
    for field in model_context.type.fields.values():
        if not _is_input_candidate(field):
            continue
        nullable: TypeRef = field.type.nullable()
        if not nullable.is_named:
            continue
        comparison: Optional[str] = CommonNames.COMPARISON_INPUTS.get(nullable.named_type)
        if comparison is not None:
            result.append(_arg(field.name, _named(comparison)))
    return result


def _create_combinator_input_type(
    types: TypeArena,
    name: str,
    fields: List[InputValueDefinition],
) -> TypeDefinition:
    """
    Two-phase construction of a self-referential filter/condition input.

    The definition is registered first, then populated; ``and``/``or``/``not``
    refer to it by name.  If a definition with this name already exists it
    is kept untouched.
    """
    if name in types:
        logger.warning("Keeping existing definition of %s.", name)
        return types.require(name)
    definition: TypeDefinition = types.register(TypeDefinition(name=name, kind=TypeKind.INPUT_OBJECT))
    for f in fields:
        definition.input_fields[f.name] = f
    definition.input_fields["and"] = _arg("and", TypeRef.list_of(_named(name)))
    definition.input_fields["or"] = _arg("or", TypeRef.list_of(_named(name)))
    definition.input_fields["not"] = _arg("not", _named(name))
    return definition


def add_model_input_types(model_context: ModelContext) -> List[str]:
    """
    Synthesize create/update/filter/condition inputs for one model, then backfill.

    Must run after the connection pass.  Returns the backfilled input names.
    """
    types: TypeArena = model_context.types
    names: DerivedNameSet = model_context.names

    types.register(_create_create_input_type(model_context))
    types.register(_create_update_input_type(model_context))

    comparisons: List[InputValueDefinition] = _comparison_fields(model_context)
    _create_combinator_input_type(
        types,
        names.model_filter_input,
        [_arg("id", _named(CommonNames.ID_INPUT))] + comparisons,
    )
    _create_combinator_input_type(types, names.model_condition_input, list(comparisons))

    backfilled: List[str] = backfill_missing_types(model_context)
    logger.debug(
        "Inputs for %s done (%d comparison fields, %d backfilled).",
        names.main,
        len(comparisons),
        len(backfilled),
    )
    return backfilled


def backfill_missing_types(model_context: ModelContext) -> List[str]:
    """
    Drain ``missing_types``, mirroring each queued object type into ``<Name>Input``.

    The mirror is registered before its fields are walked, so recursive and
    mutually recursive object graphs terminate.  Running this again once the
    queue is empty adds nothing.

    Raises:
        TypeResolutionError: A queued name is not an object type.
    """
    types: TypeArena = model_context.types
    created: List[str] = []
    while model_context.missing_types:
        name: str = model_context.missing_types.pop(0)
        mirrored: str = input_type_name(name)
        if mirrored in types:
            continue
        source: Optional[TypeDefinition] = types.get(name)
        if source is None or not source.is_object:
            raise TypeResolutionError(
                f"Cannot backfill '{mirrored}': '{name}' is not an object type.",
                type_name=name,
            )
        mirror: TypeDefinition = types.register(
            TypeDefinition(name=mirrored, kind=TypeKind.INPUT_OBJECT)
        )
        for field in source.fields.values():
            if field.has_arguments:
                continue
            type_ref: Optional[TypeRef] = input_field_type(model_context, field)
            if type_ref is not None:
                mirror.input_fields[field.name] = _arg(field.name, type_ref)
        created.append(mirrored)
        logger.debug("Backfilled %s with %d fields.", mirrored, len(mirror.input_fields))
    return created


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TYPES_TO_PRUNE",
    "BOOKKEEPING_FIELDS",
    "visit_model",
    "input_field_type",
    "add_model_input_types",
    "backfill_missing_types",
]

logger.debug("modelgql.model_visitor loaded: %d public symbols.", len(__all__))
