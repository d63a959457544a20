"""
tests/test_typegraph.py
Unit tests for modelgql.typegraph and modelgql.sdl.

Tests cover:
- TypeRef wrapping, unwrapping and rewrapping
- Insert-if-absent registration and kind-checked lookup
- Dangling-reference detection and pruning
- SDL ingestion (extensions, descriptions, directive arguments)
- Emission through graphql-core and @aws_subscribe annotation
"""

from __future__ import annotations

import pytest
from graphql import parse, print_ast

from modelgql.errors import InternalInvariantError, TypeResolutionError
from modelgql.models import (
    FieldDefinition,
    InputValueDefinition,
    TypeDefinition,
    TypeKind,
    TypeRef,
)
from modelgql.sdl import (
    add_subscribe_directives,
    ingest_document,
    render_schema,
    type_ref_from_node,
)
from modelgql.typegraph import (
    TypeArena,
    assert_resolved,
    find_dangling_references,
    is_list_type,
    merge_definitions,
    prune_types,
    rewrap,
    unwrap_non_null,
)


def _object(type_name: str, /, **fields: TypeRef) -> TypeDefinition:
    return TypeDefinition(
        name=type_name,
        kind=TypeKind.OBJECT,
        fields={k: FieldDefinition(name=k, type=v) for k, v in fields.items()},
    )


# ===========================================================================
# TypeRef navigation
# ===========================================================================


class TestTypeRef:

    def test_str(self) -> None:
        ref = TypeRef.non_null(TypeRef.list_of(TypeRef.non_null(TypeRef.named("Post"))))
        assert str(ref) == "[Post!]!"
        assert ref.named_type == "Post"

    def test_double_non_null_rejected(self) -> None:
        with pytest.raises(ValueError):
            TypeRef.non_null(TypeRef.non_null(TypeRef.named("ID")))

    def test_unwrap_non_null(self) -> None:
        assert str(unwrap_non_null(TypeRef.non_null(TypeRef.named("ID")))) == "ID"
        assert str(unwrap_non_null(TypeRef.named("ID"))) == "ID"

    def test_is_list_type_ignores_outer_non_null(self) -> None:
        assert is_list_type(TypeRef.list_of(TypeRef.named("Post")))
        assert is_list_type(TypeRef.non_null(TypeRef.list_of(TypeRef.named("Post"))))
        assert not is_list_type(TypeRef.non_null(TypeRef.named("Post")))

    def test_rewrap_preserves_wrapping(self) -> None:
        ref = type_ref_from_node(parse("type T { f: [Post!]! }").definitions[0].fields[0].type)
        assert str(rewrap(ref, "PostInput")) == "[PostInput!]!"

    def test_refs_are_hashable_values(self) -> None:
        assert TypeRef.named("ID") == TypeRef.named("ID")
        assert len({TypeRef.named("ID"), TypeRef.named("ID")}) == 1


# ===========================================================================
# TypeArena
# ===========================================================================


class TestTypeArena:

    def test_builtins_seeded(self) -> None:
        arena = TypeArena()
        for name in ("ID", "String", "Int", "Float", "Boolean"):
            assert name in arena
        assert arena.user_definitions() == []

    def test_register_is_insert_if_absent(self) -> None:
        arena = TypeArena()
        first = _object("Blog", id=TypeRef.named("ID"))
        second = _object("Blog", name=TypeRef.named("String"))
        assert arena.register(first) is first
        assert arena.register(second) is first
        assert arena.register(second, overwrite=True) is second

    def test_merge_reports_new_names(self) -> None:
        arena = TypeArena()
        arena.register(_object("Blog"))
        added = merge_definitions(arena, [_object("Blog"), _object("Post")])
        assert added == ["Post"]

    def test_require_missing(self) -> None:
        with pytest.raises(TypeResolutionError):
            TypeArena().require("Nope")

    def test_require_wrong_kind(self) -> None:
        arena = TypeArena()
        arena.register(_object("Blog"))
        with pytest.raises(TypeResolutionError, match="expected input_object"):
            arena.require("Blog", TypeKind.INPUT_OBJECT)


# ===========================================================================
# Reference resolution and pruning
# ===========================================================================


class TestReferences:

    def test_dangling_reference_locations(self) -> None:
        arena = TypeArena()
        arena.register(_object("Blog", posts=TypeRef.list_of(TypeRef.named("Post"))))
        assert find_dangling_references(arena) == {"Post": ["Blog.posts"]}

    def test_dangling_argument_reference(self) -> None:
        arena = TypeArena()
        query = _object("Query", getBlog=TypeRef.named("ID"))
        query.fields["getBlog"].arguments["filter"] = InputValueDefinition(
            "filter", TypeRef.named("ModelBlogFilterInput")
        )
        arena.register(query)
        assert find_dangling_references(arena) == {
            "ModelBlogFilterInput": ["Query.getBlog(filter)"]
        }

    def test_assert_resolved(self) -> None:
        arena = TypeArena()
        arena.register(_object("Blog", id=TypeRef.named("ID")))
        assert_resolved(arena)
        arena.register(_object("Post", blog=TypeRef.named("Ghost")))
        with pytest.raises(InternalInvariantError) as excinfo:
            assert_resolved(arena)
        assert excinfo.value.names == ["Ghost"]

    def test_prune_unreferenced(self) -> None:
        arena = TypeArena()
        arena.register(_object("Helper"))
        arena.register(_object("Blog", id=TypeRef.named("ID")))
        assert prune_types(arena, ["Helper", "Missing"]) == ["Helper"]
        assert "Helper" not in arena

    def test_prune_still_referenced(self) -> None:
        arena = TypeArena()
        arena.register(_object("Helper"))
        arena.register(_object("Blog", helper=TypeRef.named("Helper")))
        with pytest.raises(InternalInvariantError, match="Helper"):
            prune_types(arena, ["Helper"])


# ===========================================================================
# SDL ingestion and emission
# ===========================================================================


class TestSdl:

    def test_ingest_collects_directive_definitions(self) -> None:
        arena = TypeArena()
        directives = ingest_document(
            parse('directive @x on OBJECT\n"A blog" type Blog @x { id: ID! }'), arena
        )
        assert [d.name.value for d in directives] == ["x"]
        blog = arena.require("Blog", TypeKind.OBJECT)
        assert blog.description == "A blog"
        assert blog.get_directive("x") is not None

    def test_directive_arguments_are_plain_values(self) -> None:
        arena = TypeArena()
        ingest_document(
            parse('type Post { blog: Blog @connection(name: "BlogPosts", fields: ["a"]) }'),
            arena,
        )
        usage = arena.require("Post").fields["blog"].directives[0]
        assert usage.name == "connection"
        assert usage.arguments == {"name": "BlogPosts", "fields": ["a"]}

    def test_extensions_are_merged(self) -> None:
        arena = TypeArena()
        ingest_document(
            parse("extend type Blog { name: String }\ntype Blog { id: ID! }"), arena
        )
        assert list(arena.require("Blog").fields) == ["id", "name"]

    def test_extension_of_unknown_type(self) -> None:
        with pytest.raises(TypeResolutionError):
            ingest_document(parse("extend type Ghost { id: ID }"), TypeArena())

    def test_render_drops_custom_directives(self) -> None:
        arena = TypeArena()
        ingest_document(parse('type Query { blog: String @model @deprecated(reason: "x") }'), arena)
        text = render_schema(arena)
        assert "@model" not in text
        assert "@deprecated" in text

    def test_subscribe_annotation(self) -> None:
        document = parse("type Subscription { onCreateBlog: String }\ntype Other { onCreateBlog: String }")
        annotated = print_ast(add_subscribe_directives(document, {"onCreateBlog": ["createBlog"]}))
        assert annotated.count('@aws_subscribe(mutations: ["createBlog"])') == 1
