# File: modelgql/typegraph.py
"""
ModelGQL - Type-Graph Utilities
=================================
The name-keyed type arena plus the helpers that walk it:

* wrapper navigation (``unwrap_non_null``, ``is_list_type``, ``rewrap``);
* insert-if-absent registration and merging;
* reference collection, dangling-reference detection and the final
  resolution check;
* pruning of internal-only helper types.

Fields never hold a type object, only ``TypeRef`` handles, so a generated
type may point at an input that is registered later in the same pass.  The
one obligation this creates is checked by ``assert_resolved`` before the
schema is emitted.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from modelgql.errors import InternalInvariantError, TypeResolutionError
from modelgql.models import RefKind, TypeDefinition, TypeKind, TypeRef

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.typegraph")

BUILTIN_SCALARS: Tuple[str, ...] = ("ID", "String", "Int", "Float", "Boolean")


# ---------------------------------------------------------------------------
# Wrapper navigation
# ---------------------------------------------------------------------------


def unwrap_non_null(type_ref: TypeRef) -> TypeRef:
    return type_ref.nullable()


def is_list_type(type_ref: TypeRef) -> bool:
    """True for ``[T]`` and ``[T]!``."""
    return type_ref.nullable().is_list


def rewrap(type_ref: TypeRef, name: str) -> TypeRef:
    """
    Rebuild the list/non-null wrapping of *type_ref* around the named type *name*.

    ``rewrap([Post!]!, "PostInput")`` gives ``[PostInput!]!``.
    """
    if type_ref.kind == RefKind.NAMED:
        return TypeRef.named(name)
    assert type_ref.of_type is not None
    inner: TypeRef = rewrap(type_ref.of_type, name)
    if type_ref.kind == RefKind.LIST:
        return TypeRef.list_of(inner)
    return TypeRef.non_null(inner)


# ---------------------------------------------------------------------------
# Type arena
# ---------------------------------------------------------------------------


class TypeArena:
    """
    Ordered, name-keyed store of every type definition in one transform.

    Registration is insert-if-absent: ``register`` returns whichever
    definition ends up stored under the name, so callers always work with
    the canonical instance.
    """

    def __init__(self, seed_builtins: bool = True) -> None:
        self._types: Dict[str, TypeDefinition] = {}
        if seed_builtins:
            for name in BUILTIN_SCALARS:
                self._types[name] = TypeDefinition(name=name, kind=TypeKind.SCALAR, builtin=True)

    def register(self, definition: TypeDefinition, overwrite: bool = False) -> TypeDefinition:
        existing: Optional[TypeDefinition] = self._types.get(definition.name)
        if existing is not None and not overwrite:
            return existing
        if existing is not None:
            logger.debug("Overwriting type %s.", definition.name)
        self._types[definition.name] = definition
        return definition

    def get(self, name: str) -> Optional[TypeDefinition]:
        return self._types.get(name)

    def require(self, name: str, kind: Optional[TypeKind] = None) -> TypeDefinition:
        """Look up *name*, raising ``TypeResolutionError`` if absent or of the wrong kind."""
        definition: Optional[TypeDefinition] = self._types.get(name)
        if definition is None:
            raise TypeResolutionError(f"Unknown type '{name}'.", type_name=name)
        if kind is not None and definition.kind != kind:
            raise TypeResolutionError(
                f"Type '{name}' is a {definition.kind.value}, expected {kind.value}.",
                type_name=name,
            )
        return definition

    def remove(self, name: str) -> Optional[TypeDefinition]:
        return self._types.pop(name, None)

    def names(self) -> List[str]:
        return list(self._types)

    def user_definitions(self) -> List[TypeDefinition]:
        """Every non-builtin definition, in registration order."""
        return [t for t in self._types.values() if not t.builtin]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDefinition]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"<TypeArena {len(self.user_definitions())} types>"


def merge_definitions(
    arena: TypeArena,
    definitions: Iterable[TypeDefinition],
    overwrite: bool = False,
) -> List[str]:
    """Register *definitions*; return the names that were newly stored."""
    added: List[str] = []
    for definition in definitions:
        was_present: bool = definition.name in arena
        stored: TypeDefinition = arena.register(definition, overwrite=overwrite)
        if stored is definition and not was_present:
            added.append(definition.name)
    return added


# ---------------------------------------------------------------------------
# Reference tracking
# ---------------------------------------------------------------------------


def iter_references(definition: TypeDefinition) -> Iterator[Tuple[str, str]]:
    """Yield ``(location, referenced type name)`` for every reference *definition* holds."""
    for field in definition.fields.values():
        yield f"{definition.name}.{field.name}", field.type.named_type
        for argument in field.arguments.values():
            yield f"{definition.name}.{field.name}({argument.name})", argument.type.named_type
    for input_field in definition.input_fields.values():
        yield f"{definition.name}.{input_field.name}", input_field.type.named_type
    for member in definition.members:
        yield f"{definition.name}|{member}", member
    for interface in definition.interfaces:
        yield f"{definition.name}&{interface}", interface


def find_dangling_references(arena: TypeArena) -> Dict[str, List[str]]:
    """Map each referenced-but-undefined type name to the locations that reference it."""
    dangling: Dict[str, List[str]] = {}
    for definition in arena:
        for location, name in iter_references(definition):
            if name not in arena:
                dangling.setdefault(name, []).append(location)
    return dangling


def assert_resolved(arena: TypeArena) -> None:
    """
    Check that every handle in the arena resolves to a concrete definition.

    This is the only point where references are reconciled against the
    arena; a failure here means a synthesis step forgot to register a type.
    """
    dangling: Dict[str, List[str]] = find_dangling_references(arena)
    if dangling:
        locations: List[str] = [loc for locs in dangling.values() for loc in locs]
        logger.error("Unresolved type references at %s", ", ".join(sorted(locations)))
        raise InternalInvariantError("Unresolved type references remain", names=list(dangling))
    logger.debug("All references in %r resolve.", arena)


def prune_types(arena: TypeArena, names: Iterable[str]) -> List[str]:
    """
    Remove internal-only types from the arena.

    Raises ``InternalInvariantError`` if a surviving type still references
    one of the pruned names.
    """
    doomed: List[str] = [name for name in names if name in arena]
    for name in doomed:
        arena.remove(name)
    still_referenced: Dict[str, List[str]] = {
        name: locations
        for name, locations in find_dangling_references(arena).items()
        if name in doomed
    }
    if still_referenced:
        raise InternalInvariantError("Pruned types are still referenced", names=list(still_referenced))
    logger.debug("Pruned %d helper types.", len(doomed))
    return doomed


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "BUILTIN_SCALARS",
    "unwrap_non_null",
    "is_list_type",
    "rewrap",
    "TypeArena",
    "merge_definitions",
    "iter_references",
    "find_dangling_references",
    "assert_resolved",
    "prune_types",
]

logger.debug("modelgql.typegraph loaded: %d public symbols.", len(__all__))
