"""
tests/test_templates.py
Unit tests for modelgql.templates (TemplateGenerator).

Tests cover:
- The six CRUD template pairs of a model
- Limits and sentinel taken from TransformConfig
- Connection template selection by cardinality
- Aggregate generation keyed by (type, field)
- Secondary index descriptors
"""

from __future__ import annotations

from typing import Dict

import pytest

from modelgql.models import (
    IndexDescriptor,
    ResolverKind,
    ResolverTemplate,
    TransformConfig,
)
from modelgql.names import derive_names
from modelgql.templates import (
    DEFAULT_RESPONSE,
    TemplateGenerator,
    connection_attribute_name,
    connection_index_name,
)
from modelgql.transformer import TransformResult


# ===========================================================================
# Model CRUD templates
# ===========================================================================


class TestModelTemplates:

    @pytest.fixture()
    def generator(self, default_config: TransformConfig) -> TemplateGenerator:
        return TemplateGenerator(default_config)

    def test_operations(self, generator: TemplateGenerator) -> None:
        templates = generator.model_templates(derive_names("Blog"))
        assert '"operation": "GetItem"' in templates.get.request
        assert '"operation": "Sync"' in templates.sync.request
        assert '"operation": "PutItem"' in templates.create.request
        assert '"operation": "UpdateItem"' in templates.update.request
        assert '"operation": "DeleteItem"' in templates.delete.request

    def test_list_query_or_scan(self, generator: TemplateGenerator) -> None:
        request = generator.model_templates(derive_names("Blog")).list.request
        assert '$ListRequest.put("operation", "Query")' in request
        assert '$ListRequest.put("operation", "Scan")' in request

    def test_default_response(self, generator: TemplateGenerator) -> None:
        templates = generator.model_templates(derive_names("Blog"))
        for pair in (templates.get, templates.list, templates.create, templates.delete):
            assert pair.response == DEFAULT_RESPONSE

    def test_create_condition(self, generator: TemplateGenerator) -> None:
        request = generator.model_templates(derive_names("Blog")).create.request
        assert "attribute_not_exists(#id)" in request
        assert "$util.autoId()" in request

    def test_typename_is_model_name(self, generator: TemplateGenerator) -> None:
        templates = generator.model_templates(derive_names("Comment"))
        for request in (templates.create.request, templates.update.request):
            assert '$context.args.input.put("__typename", "Comment")' in request
            assert '"Blog"' not in request

    def test_update_and_delete_preconditions(self, generator: TemplateGenerator) -> None:
        templates = generator.model_templates(derive_names("Blog"))
        for request in (templates.update.request, templates.delete.request):
            assert "attribute_exists(#id)" in request
            assert "$versionedCondition.expression" in request
            assert "$conditionFilterExpressions.expression" in request
            assert "$condition.expressionValues.size() == 0" in request
            assert "%(" not in request

    def test_limits_from_config(self) -> None:
        generator = TemplateGenerator(
            TransformConfig(default_list_limit=25, default_sync_limit=250)
        )
        templates = generator.model_templates(derive_names("Blog"))
        assert "$util.defaultIfNull($context.args.limit, 25)" in templates.list.request
        assert "$util.defaultIfNull($ctx.args.limit, 250)" in templates.sync.request


# ===========================================================================
# Connection templates
# ===========================================================================


class TestConnectionTemplates:

    def test_naming_helpers(self) -> None:
        assert connection_index_name("Blog", "Post") == "gsi-BlogPosts"
        assert connection_attribute_name("Blog", "Post") == "postBlogId"

    def test_item_template(self) -> None:
        pair = TemplateGenerator(TransformConfig()).connection_item_templates("Post", "Blog")
        assert '"operation": "GetItem"' in pair.request
        assert "$ctx.source.postBlogId" in pair.request
        assert '"___xamznone____"' in pair.request
        assert pair.response == "$util.toJson($context.result)"

    def test_item_sentinel_from_config(self) -> None:
        generator = TemplateGenerator(TransformConfig(missing_key_sentinel="__none__"))
        assert '"__none__"' in generator.connection_item_templates("Post", "Blog").request

    def test_list_template(self) -> None:
        generator = TemplateGenerator(TransformConfig(connection_list_limit=7))
        request = generator.connection_list_templates("Blog", "Post").request
        assert '"operation": "Query"' in request
        assert '"index": "gsi-BlogPosts"' in request
        assert '"#connectionAttribute": "postBlogId"' in request
        assert "$util.defaultIfNull($context.args.limit, 7)" in request
        assert '"operation": "Scan"' in request

    def test_selection_by_cardinality(
        self, blog_post_comment_result: TransformResult, default_config: TransformConfig
    ) -> None:
        generator = TemplateGenerator(default_config)
        by_field = {
            f"{c.owner_type_name}.{c.field.name}": generator.connection_templates(c)
            for c in blog_post_comment_result.context.connections
        }
        assert '"index": "gsi-BlogPosts"' in by_field["Blog.posts"].request
        assert '"index": "gsi-PostComments"' in by_field["Post.comments"].request
        assert "$ctx.source.postBlogId" in by_field["Post.blog"].request
        assert "$ctx.source.commentPostId" in by_field["Comment.post"].request


# ===========================================================================
# Aggregate generation
# ===========================================================================


class TestGenerateAll:

    def _by_key(self, resolvers) -> Dict[str, ResolverTemplate]:
        return {r.key: r for r in resolvers}

    def test_single_model(self, blog_result: TransformResult, transformer) -> None:
        resolvers = transformer.generate_templates(blog_result)
        assert len(resolvers) == 6
        assert set(self._by_key(resolvers)) == {
            "Query.getBlog",
            "Query.listBlogs",
            "Query.syncBlogs",
            "Mutation.createBlog",
            "Mutation.updateBlog",
            "Mutation.deleteBlog",
        }
        assert all(r.data_source == "Blog" for r in resolvers)

    def test_models_and_connections(
        self, blog_post_comment_result: TransformResult, default_config: TransformConfig
    ) -> None:
        resolvers = TemplateGenerator(default_config).generate_all(
            blog_post_comment_result.context
        )
        assert len(resolvers) == 3 * 6 + 4
        by_key = self._by_key(resolvers)
        assert len(by_key) == len(resolvers)

        posts = by_key["Blog.posts"]
        assert posts.kind == ResolverKind.CONNECTION
        assert posts.data_source == "Post"

        blog = by_key["Post.blog"]
        assert blog.data_source == "Blog"

        assert by_key["Mutation.createComment"].kind == ResolverKind.MUTATION
        assert by_key["Query.listPosts"].kind == ResolverKind.QUERY


class TestSecondaryIndexes:

    def test_one_per_singular_connection(
        self, blog_post_comment_result: TransformResult, default_config: TransformConfig
    ) -> None:
        indexes = TemplateGenerator(default_config).secondary_indexes(
            blog_post_comment_result.context
        )
        assert indexes == [
            IndexDescriptor(table="Post", index_name="gsi-BlogPosts", partition_key="postBlogId"),
            IndexDescriptor(
                table="Comment", index_name="gsi-PostComments", partition_key="commentPostId"
            ),
        ]

    def test_indexes_match_list_templates(
        self, blog_post_comment_result: TransformResult, default_config: TransformConfig
    ) -> None:
        generator = TemplateGenerator(default_config)
        requests = "".join(
            r.templates.request for r in generator.generate_all(blog_post_comment_result.context)
        )
        for index in generator.secondary_indexes(blog_post_comment_result.context):
            assert f'"index": "{index.index_name}"' in requests
            assert f'"#connectionAttribute": "{index.partition_key}"' in requests

    def test_no_connections(self, blog_result: TransformResult, default_config: TransformConfig) -> None:
        assert TemplateGenerator(default_config).secondary_indexes(blog_result.context) == []
