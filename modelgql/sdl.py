# File: modelgql/sdl.py
"""
ModelGQL - SDL Ingestion & Emission
=====================================
Conversion between graphql-core AST nodes and the type arena.

``ingest_document`` loads the type definitions (and extensions) of a parsed
document into a ``TypeArena``.  ``emit_document`` goes the other way, and
``render_schema`` prints the arena through graphql-core's own schema
printer so the output text is canonical.  ``add_subscribe_directives``
re-annotates the printed ``Subscription`` fields with ``@aws_subscribe``.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from graphql import (
    GraphQLSchema,
    build_ast_schema,
    print_schema,
)
from graphql.language import (
    SKIP,
    ArgumentNode,
    DefinitionNode,
    DirectiveDefinitionNode,
    DirectiveNode,
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    EnumValueDefinitionNode,
    FieldDefinitionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    ListValueNode,
    NamedTypeNode,
    NameNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    StringValueNode,
    TypeNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    Visitor,
    visit,
)
from graphql.utilities import value_from_ast_untyped

from modelgql.errors import TypeResolutionError
from modelgql.models import (
    DirectiveUsage,
    EnumValueDefinition,
    FieldDefinition,
    InputValueDefinition,
    RefKind,
    TypeDefinition,
    TypeKind,
    TypeRef,
)
from modelgql.typegraph import TypeArena

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.sdl")

# Only these directive usages survive emission; the schema printer drops the rest.
EMITTED_DIRECTIVES: Tuple[str, ...] = ("deprecated", "specifiedBy")

SUBSCRIBE_DIRECTIVE: str = "aws_subscribe"

_KIND_BY_NODE: Dict[type, TypeKind] = {
    ObjectTypeDefinitionNode: TypeKind.OBJECT,
    ObjectTypeExtensionNode: TypeKind.OBJECT,
    InterfaceTypeDefinitionNode: TypeKind.INTERFACE,
    InterfaceTypeExtensionNode: TypeKind.INTERFACE,
    UnionTypeDefinitionNode: TypeKind.UNION,
    UnionTypeExtensionNode: TypeKind.UNION,
    EnumTypeDefinitionNode: TypeKind.ENUM,
    EnumTypeExtensionNode: TypeKind.ENUM,
    InputObjectTypeDefinitionNode: TypeKind.INPUT_OBJECT,
    InputObjectTypeExtensionNode: TypeKind.INPUT_OBJECT,
    ScalarTypeDefinitionNode: TypeKind.SCALAR,
    ScalarTypeExtensionNode: TypeKind.SCALAR,
}

_EXTENSION_NODES: Tuple[type, ...] = (
    ObjectTypeExtensionNode,
    InterfaceTypeExtensionNode,
    UnionTypeExtensionNode,
    EnumTypeExtensionNode,
    InputObjectTypeExtensionNode,
    ScalarTypeExtensionNode,
)


# ---------------------------------------------------------------------------
# AST -> arena
# ---------------------------------------------------------------------------


def type_ref_from_node(node: TypeNode) -> TypeRef:
    if isinstance(node, NonNullTypeNode):
        return TypeRef.non_null(type_ref_from_node(node.type))
    if isinstance(node, ListTypeNode):
        return TypeRef.list_of(type_ref_from_node(node.type))
    return TypeRef.named(node.name.value)


def _description(node: DefinitionNode) -> Optional[str]:
    description = getattr(node, "description", None)
    return description.value if description is not None else None


def _directive_usages(nodes: Optional[Sequence[DirectiveNode]]) -> List[DirectiveUsage]:
    usages: List[DirectiveUsage] = []
    for node in nodes or ():
        arguments = {
            argument.name.value: value_from_ast_untyped(argument.value)
            for argument in node.arguments or ()
        }
        usages.append(DirectiveUsage(name=node.name.value, arguments=arguments, node=node))
    return usages


def _input_value(node: InputValueDefinitionNode) -> InputValueDefinition:
    return InputValueDefinition(
        name=node.name.value,
        type=type_ref_from_node(node.type),
        default_value=node.default_value,
        description=_description(node),
        directives=_directive_usages(node.directives),
    )


def _field(node: FieldDefinitionNode) -> FieldDefinition:
    return FieldDefinition(
        name=node.name.value,
        type=type_ref_from_node(node.type),
        arguments={arg.name.value: _input_value(arg) for arg in node.arguments or ()},
        description=_description(node),
        directives=_directive_usages(node.directives),
    )


def _apply_members(definition: TypeDefinition, node: DefinitionNode) -> None:
    """Copy the members of a definition or extension node onto *definition*."""
    kind: TypeKind = definition.kind
    if kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
        for field_node in node.fields or ():
            definition.fields[field_node.name.value] = _field(field_node)
        for interface in getattr(node, "interfaces", None) or ():
            definition.interfaces.append(interface.name.value)
    elif kind == TypeKind.INPUT_OBJECT:
        for field_node in node.fields or ():
            definition.input_fields[field_node.name.value] = _input_value(field_node)
    elif kind == TypeKind.ENUM:
        for value_node in node.values or ():
            definition.values.append(
                EnumValueDefinition(
                    name=value_node.name.value,
                    description=_description(value_node),
                    directives=_directive_usages(value_node.directives),
                )
            )
    elif kind == TypeKind.UNION:
        for member in node.types or ():
            definition.members.append(member.name.value)
    definition.directives.extend(_directive_usages(node.directives))


def definition_from_node(node: DefinitionNode) -> TypeDefinition:
    kind: Optional[TypeKind] = _KIND_BY_NODE.get(type(node))
    if kind is None:
        raise TypeResolutionError(f"Unsupported definition kind '{node.kind}'.")
    definition = TypeDefinition(name=node.name.value, kind=kind, description=_description(node))
    _apply_members(definition, node)
    return definition


def ingest_document(document: DocumentNode, arena: TypeArena) -> List[DirectiveDefinitionNode]:
    """
    Load every type definition of *document* into *arena*.

    Extensions are merged into the type they extend once all definitions
    are loaded.  Directive definitions are returned, not stored: they never
    reach the output schema.
    """
    directives: List[DirectiveDefinitionNode] = []
    extensions: List[DefinitionNode] = []
    for node in document.definitions:
        if isinstance(node, DirectiveDefinitionNode):
            directives.append(node)
        elif isinstance(node, (SchemaDefinitionNode, SchemaExtensionNode)):
            logger.warning("Ignoring schema definition; root types are resolved by name.")
        elif isinstance(node, _EXTENSION_NODES):
            extensions.append(node)
        else:
            arena.register(definition_from_node(node))

    for node in extensions:
        target: TypeDefinition = arena.require(node.name.value, _KIND_BY_NODE[type(node)])
        _apply_members(target, node)
        logger.debug("Merged extension into %s.", target.name)

    logger.info(
        "Ingested %d types, %d extensions and %d directive definitions.",
        len(arena.user_definitions()),
        len(extensions),
        len(directives),
    )
    return directives


# ---------------------------------------------------------------------------
# Arena -> AST
# ---------------------------------------------------------------------------


def _name(value: str) -> NameNode:
    return NameNode(value=value)


def type_ref_to_node(type_ref: TypeRef) -> TypeNode:
    if type_ref.kind == RefKind.NON_NULL:
        return NonNullTypeNode(type=type_ref_to_node(type_ref.of_type))
    if type_ref.kind == RefKind.LIST:
        return ListTypeNode(type=type_ref_to_node(type_ref.of_type))
    return NamedTypeNode(name=_name(type_ref.name))


def _description_node(description: Optional[str]) -> Optional[StringValueNode]:
    if description is None:
        return None
    return StringValueNode(value=description, block=True)


def _directive_nodes(usages: Sequence[DirectiveUsage]) -> Tuple[DirectiveNode, ...]:
    return tuple(
        usage.node
        for usage in usages
        if usage.name in EMITTED_DIRECTIVES and usage.node is not None
    )


def _input_value_node(value: InputValueDefinition) -> InputValueDefinitionNode:
    return InputValueDefinitionNode(
        name=_name(value.name),
        description=_description_node(value.description),
        type=type_ref_to_node(value.type),
        default_value=value.default_value,
        directives=_directive_nodes(value.directives),
    )


def _field_node(field: FieldDefinition) -> FieldDefinitionNode:
    return FieldDefinitionNode(
        name=_name(field.name),
        description=_description_node(field.description),
        arguments=tuple(_input_value_node(arg) for arg in field.arguments.values()),
        type=type_ref_to_node(field.type),
        directives=_directive_nodes(field.directives),
    )


def node_from_definition(definition: TypeDefinition) -> DefinitionNode:
    common = dict(
        name=_name(definition.name),
        description=_description_node(definition.description),
        directives=_directive_nodes(definition.directives),
    )
    kind: TypeKind = definition.kind
    if kind == TypeKind.OBJECT:
        return ObjectTypeDefinitionNode(
            interfaces=tuple(NamedTypeNode(name=_name(i)) for i in definition.interfaces),
            fields=tuple(_field_node(f) for f in definition.fields.values()),
            **common,
        )
    if kind == TypeKind.INTERFACE:
        return InterfaceTypeDefinitionNode(
            interfaces=tuple(NamedTypeNode(name=_name(i)) for i in definition.interfaces),
            fields=tuple(_field_node(f) for f in definition.fields.values()),
            **common,
        )
    if kind == TypeKind.INPUT_OBJECT:
        return InputObjectTypeDefinitionNode(
            fields=tuple(_input_value_node(f) for f in definition.input_fields.values()),
            **common,
        )
    if kind == TypeKind.ENUM:
        return EnumTypeDefinitionNode(
            values=tuple(
                EnumValueDefinitionNode(
                    name=_name(v.name),
                    description=_description_node(v.description),
                    directives=_directive_nodes(v.directives),
                )
                for v in definition.values
            ),
            **common,
        )
    if kind == TypeKind.UNION:
        return UnionTypeDefinitionNode(
            types=tuple(NamedTypeNode(name=_name(m)) for m in definition.members),
            **common,
        )
    return ScalarTypeDefinitionNode(**common)


def emit_document(arena: TypeArena) -> DocumentNode:
    return DocumentNode(
        definitions=tuple(node_from_definition(d) for d in arena.user_definitions())
    )


def render_schema(arena: TypeArena) -> str:
    """Build the arena into an executable schema and print it canonically."""
    schema: GraphQLSchema = build_ast_schema(emit_document(arena), assume_valid_sdl=True)
    return print_schema(schema)


# ---------------------------------------------------------------------------
# Subscription annotations
# ---------------------------------------------------------------------------


def subscribe_directive(mutations: Sequence[str]) -> DirectiveNode:
    return DirectiveNode(
        name=_name(SUBSCRIBE_DIRECTIVE),
        arguments=(
            ArgumentNode(
                name=_name("mutations"),
                value=ListValueNode(values=tuple(StringValueNode(value=m) for m in mutations)),
            ),
        ),
    )


class SubscribeAnnotator(Visitor):
    """Attach ``@aws_subscribe(mutations: [...])`` to mapped ``Subscription`` fields."""

    def __init__(self, subscription_map: Dict[str, List[str]]) -> None:
        super().__init__()
        self.subscription_map = subscription_map
        self.annotated: int = 0

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        if node.name.value != "Subscription":
            return SKIP
        return None

    def enter_interface_type_definition(self, node: InterfaceTypeDefinitionNode, *_args):
        return SKIP

    def enter_field_definition(self, node: FieldDefinitionNode, *_args):
        mutations: Optional[List[str]] = self.subscription_map.get(node.name.value)
        if not mutations:
            return None
        self.annotated += 1
        return FieldDefinitionNode(
            name=node.name,
            description=node.description,
            arguments=node.arguments,
            type=node.type,
            directives=tuple(node.directives or ()) + (subscribe_directive(mutations),),
        )


def add_subscribe_directives(
    document: DocumentNode,
    subscription_map: Dict[str, List[str]],
) -> DocumentNode:
    annotator = SubscribeAnnotator(subscription_map)
    annotated: DocumentNode = visit(document, annotator)
    logger.debug("Annotated %d subscription fields.", annotator.annotated)
    return annotated


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "EMITTED_DIRECTIVES",
    "SUBSCRIBE_DIRECTIVE",
    "type_ref_from_node",
    "type_ref_to_node",
    "definition_from_node",
    "ingest_document",
    "node_from_definition",
    "emit_document",
    "render_schema",
    "subscribe_directive",
    "SubscribeAnnotator",
    "add_subscribe_directives",
]

logger.debug("modelgql.sdl loaded: %d public symbols.", len(__all__))
