# File: modelgql/templates.py
"""
ModelGQL - Resolver Mapping Template Engine
=============================================
Produces the request/response mapping template pairs for every generated
operation and connection field.

The templates are Velocity (VTL) documents evaluated by the resolver
runtime, not by this package.  Python only substitutes names and limits
into them with ``%``-style named placeholders; there is no data-dependent
branching on this side.

**Output contract:**
    - six pairs per model (get, list, sync, create, update, delete);
    - one pair per ``@connection`` field, picked by cardinality;
    - update/delete preconditions AND the version check with the caller's
      condition, and drop an empty ``expressionValues`` map.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from pydantic import BaseModel, ConfigDict

from modelgql.context import ConnectionRecord, TransformationContext
from modelgql.models import (
    Cardinality,
    IndexDescriptor,
    MappingTemplatePair,
    ResolverKind,
    ResolverTemplate,
    TransformConfig,
)
from modelgql.names import DerivedNameSet
from modelgql.utils import to_camel_case, to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.templates")

# ---------------------------------------------------------------------------
# Template sources
# ---------------------------------------------------------------------------

DEFAULT_RESPONSE: str = """#if( $ctx.error )
$util.error($ctx.error.message, $ctx.error.type, $ctx.result)
#else
$util.toJson($ctx.result)
#end"""

_GET_REQUEST: str = """{
    "version": "2018-05-29",
    "operation": "GetItem",
    "key": #if( $modelObjectKey ) $util.toJson($modelObjectKey) #else {
    "id": $util.dynamodb.toDynamoDBJson($ctx.args.id)
    } #end
}"""

_LIST_REQUEST: str = """#set( $limit = $util.defaultIfNull($context.args.limit, %(limit)d) )
#set( $ListRequest = {
    "version": "2018-05-29",
    "limit": $limit
} )
#if( $context.args.nextToken )
    #set( $ListRequest.nextToken = "$context.args.nextToken" )
#end
#if( $context.args.filter )
    #set( $ListRequest.filter = $util.parseJson("$util.transform.toDynamoDBFilterExpression($ctx.args.filter)") )
#end
#if( !$util.isNull($modelQueryExpression)
                        && !$util.isNullOrEmpty($modelQueryExpression.expression) )
    $util.qr($ListRequest.put("operation", "Query"))
    $util.qr($ListRequest.put("query", $modelQueryExpression))
    #if( !$util.isNull($ctx.args.sortDirection) && $ctx.args.sortDirection == "DESC" )
    #set( $ListRequest.scanIndexForward = false )
    #else
    #set( $ListRequest.scanIndexForward = true )
    #end
#else
    $util.qr($ListRequest.put("operation", "Scan"))
#end
$util.toJson($ListRequest)"""

_SYNC_REQUEST: str = """{
    "version": "2018-05-29",
    "operation": "Sync",
    "limit": $util.defaultIfNull($ctx.args.limit, %(limit)d),
    "nextToken": $util.toJson($util.defaultIfNull($ctx.args.nextToken, null)),
    "lastSync": $util.toJson($util.defaultIfNull($ctx.args.lastSync, null)),
    "filter":   #if( $context.args.filter )
$util.transform.toDynamoDBFilterExpression($ctx.args.filter)
    #else
null
    #end
}"""

# Shared tail of the create/update/delete preconditions.
_CALLER_CONDITION: str = """#if( $context.args.condition )
  #set( $conditionFilterExpressions = $util.parseJson($util.transform.toDynamoDBConditionExpression($context.args.condition)) )
  $util.qr($condition.put("expression", "($condition.expression) AND $conditionFilterExpressions.expression"))
  $util.qr($condition.expressionNames.putAll($conditionFilterExpressions.expressionNames))
  #set( $conditionExpressionValues = $util.defaultIfNull($condition.expressionValues, {}) )
  $util.qr($conditionExpressionValues.putAll($conditionFilterExpressions.expressionValues))
  #set( $condition.expressionValues = $conditionExpressionValues )
#end
#if( $condition.expressionValues && $condition.expressionValues.size() == 0 )
  #set( $condition = {
  "expression": $condition.expression,
  "expressionNames": $condition.expressionNames
} )
#end"""

_VERSIONED_CONDITION: str = """#if( $versionedCondition )
  $util.qr($condition.put("expression", "($condition.expression) AND $versionedCondition.expression"))
  $util.qr($condition.expressionNames.putAll($versionedCondition.expressionNames))
  #set( $expressionValues = $util.defaultIfNull($condition.expressionValues, {}) )
  $util.qr($expressionValues.putAll($versionedCondition.expressionValues))
  #set( $condition.expressionValues = $expressionValues )
#end"""

# Key must exist before update/delete; an auth condition, if present, is extended.
_EXISTS_CONDITION: str = """#if( $authCondition && $authCondition.expression != "" )
  #set( $condition = $authCondition )
  #if( $modelObjectKey )
    #foreach( $entry in $modelObjectKey.entrySet() )
      $util.qr($condition.put("expression", "$condition.expression AND attribute_exists(#keyCondition$velocityCount)"))
      $util.qr($condition.expressionNames.put("#keyCondition$velocityCount", "$entry.key"))
    #end
  #else
    $util.qr($condition.put("expression", "$condition.expression AND attribute_exists(#id)"))
    $util.qr($condition.expressionNames.put("#id", "id"))
  #end
#else
  #if( $modelObjectKey )
    #set( $condition = {
  "expression": "",
  "expressionNames": {},
  "expressionValues": {}
} )
    #foreach( $entry in $modelObjectKey.entrySet() )
      #if( $velocityCount == 1 )
        $util.qr($condition.put("expression", "attribute_exists(#keyCondition$velocityCount)"))
      #else
        $util.qr($condition.put("expression", "$condition.expression AND attribute_exists(#keyCondition$velocityCount)"))
      #end
      $util.qr($condition.expressionNames.put("#keyCondition$velocityCount", "$entry.key"))
    #end
  #else
    #set( $condition = {
  "expression": "attribute_exists(#id)",
  "expressionNames": {
      "#id": "id"
  },
  "expressionValues": {}
} )
  #end
#end"""

_CREATE_REQUEST: str = """## [Start] Prepare DynamoDB PutItem Request. **
$util.qr($context.args.input.put("createdAt", $util.defaultIfNull($ctx.args.input.createdAt, $util.time.nowISO8601())))
$util.qr($context.args.input.put("updatedAt", $util.defaultIfNull($ctx.args.input.updatedAt, $util.time.nowISO8601())))
$util.qr($context.args.input.put("__typename", "%(type_name)s"))
#set( $condition = {
  "expression": "attribute_not_exists(#id)",
  "expressionNames": {
      "#id": "id"
  }
} )
%(caller_condition)s
{
  "version": "2018-05-29",
  "operation": "PutItem",
  "key": #if( $modelObjectKey ) $util.toJson($modelObjectKey) #else {
  "id":   $util.dynamodb.toDynamoDBJson($util.defaultIfNullOrBlank($ctx.args.input.id, $util.autoId()))
} #end,
  "attributeValues": $util.dynamodb.toMapValuesJson($context.args.input),
  "condition": $util.toJson($condition)
}
## [End] Prepare DynamoDB PutItem Request. **"""

_UPDATE_REQUEST: str = """%(exists_condition)s
## Automatically set the updatedAt timestamp. **
$util.qr($context.args.input.put("updatedAt", $util.defaultIfNull($ctx.args.input.updatedAt, $util.time.nowISO8601())))
$util.qr($context.args.input.put("__typename", "%(type_name)s"))
## Update condition if type is @versioned **
%(versioned_condition)s
%(caller_condition)s
#set( $expNames = {} )
#set( $expValues = {} )
#set( $expSet = {} )
#set( $expAdd = {} )
#set( $expRemove = [] )
#if( $modelObjectKey )
  #set( $keyFields = [] )
  #foreach( $entry in $modelObjectKey.entrySet() )
    $util.qr($keyFields.add("$entry.key"))
  #end
#else
  #set( $keyFields = ["id", "_version", "_deleted", "_lastChangedAt"] )
#end
#foreach( $entry in $util.map.copyAndRemoveAllKeys($context.args.input, $keyFields).entrySet() )
  #if( !$util.isNull($dynamodbNameOverrideMap) && $dynamodbNameOverrideMap.containsKey("$entry.key") )
    #set( $entryKeyAttributeName = $dynamodbNameOverrideMap.get("$entry.key") )
  #else
    #set( $entryKeyAttributeName = $entry.key )
  #end
  #if( $util.isNull($entry.value) )
    #set( $discard = $expRemove.add("#$entryKeyAttributeName") )
    $util.qr($expNames.put("#$entryKeyAttributeName", "$entry.key"))
  #else
    $util.qr($expSet.put("#$entryKeyAttributeName", ":$entryKeyAttributeName"))
    $util.qr($expNames.put("#$entryKeyAttributeName", "$entry.key"))
    $util.qr($expValues.put(":$entryKeyAttributeName", $util.dynamodb.toDynamoDB($entry.value)))
  #end
#end
#set( $expression = "" )
#if( !$expSet.isEmpty() )
  #set( $expression = "SET" )
  #foreach( $entry in $expSet.entrySet() )
    #set( $expression = "$expression $entry.key = $entry.value" )
    #if( $foreach.hasNext() )
      #set( $expression = "$expression," )
    #end
  #end
#end
#if( !$expAdd.isEmpty() )
  #set( $expression = "$expression ADD" )
  #foreach( $entry in $expAdd.entrySet() )
    #set( $expression = "$expression $entry.key $entry.value" )
    #if( $foreach.hasNext() )
      #set( $expression = "$expression," )
    #end
  #end
#end
#if( !$expRemove.isEmpty() )
  #set( $expression = "$expression REMOVE" )
  #foreach( $entry in $expRemove )
    #set( $expression = "$expression $entry" )
    #if( $foreach.hasNext() )
      #set( $expression = "$expression," )
    #end
  #end
#end
#set( $update = {} )
$util.qr($update.put("expression", "$expression"))
#if( !$expNames.isEmpty() )
  $util.qr($update.put("expressionNames", $expNames))
#end
#if( !$expValues.isEmpty() )
  $util.qr($update.put("expressionValues", $expValues))
#end
{
  "version": "2018-05-29",
  "operation": "UpdateItem",
  "key": #if( $modelObjectKey ) $util.toJson($modelObjectKey) #else {
  "id": {
      "S": "$context.args.input.id"
  }
} #end,
  "update": $util.toJson($update),
  "condition": $util.toJson($condition),
  "_version": $util.defaultIfNull($ctx.args.input["_version"], "0")
}"""

_DELETE_REQUEST: str = """%(exists_condition)s
%(versioned_condition)s
%(caller_condition)s
{
  "version": "2018-05-29",
  "operation": "DeleteItem",
  "key": #if( $modelObjectKey ) $util.toJson($modelObjectKey) #else {
  "id": $util.dynamodb.toDynamoDBJson($ctx.args.input.id)
} #end,
  "condition": $util.toJson($condition),
  "_version": $util.defaultIfNull($ctx.args.input["_version"], "0")
}"""

_CONNECTION_ITEM_REQUEST: str = """{
  "version": "2017-02-28",
  "operation": "GetItem",
  "key": {
      "id": $util.dynamodb.toDynamoDBJson($util.defaultIfNullOrBlank($ctx.source.%(foreign_key)s, "%(sentinel)s"))
  }
}"""

_CONNECTION_ITEM_RESPONSE: str = "$util.toJson($context.result)"

_CONNECTION_LIST_REQUEST: str = """#set( $limit = $util.defaultIfNull($context.args.limit, %(limit)d) )
#if( !$util.isNullOrBlank($context.source.id) )
#set( $query = {
  "expression": "#connectionAttribute = :connectionAttribute",
  "expressionNames": {
      "#connectionAttribute": "%(connection_attribute)s"
  },
  "expressionValues": {
      ":connectionAttribute": {
          "S": "$context.source.id"
    }
  }
} )
{
  "version": "2017-02-28",
  "operation": "Query",
  "query":   $util.toJson($query),
  "scanIndexForward":   #if( $context.args.sortDirection )
    #if( $context.args.sortDirection == "ASC" )
true
    #else
false
    #end
  #else
true
  #end,
  "filter":   #if( $context.args.filter )
$util.transform.toDynamoDBFilterExpression($ctx.args.filter)
  #else
null
  #end,
  "limit": $limit,
  "nextToken":   #if( $context.args.nextToken )
"$context.args.nextToken"
  #else
null
  #end,
  "index": "%(index_name)s"
}
#else
## No source id to query the index with: full table scan. **
{
  "version": "2017-02-28",
  "operation": "Scan",
  "filter":   #if( $context.args.filter )
$util.transform.toDynamoDBFilterExpression($ctx.args.filter)
  #else
null
  #end,
  "limit": $limit,
  "nextToken":   #if( $context.args.nextToken )
"$context.args.nextToken"
  #else
null
  #end
}
#end"""

_CONNECTION_LIST_RESPONSE: str = """#if( !$result )
  #set( $result = $ctx.result )
#end
$util.toJson($result)"""


# ---------------------------------------------------------------------------
# Naming helpers shared with the index descriptors
# ---------------------------------------------------------------------------


def connection_index_name(list_owner: str, list_target: str) -> str:
    """Index queried by ``list_owner``'s list field of ``list_target`` items."""
    return f"gsi-{list_owner}{to_plural(list_target)}"


def connection_attribute_name(list_owner: str, list_target: str) -> str:
    """Foreign-key attribute stored on ``list_target`` items, e.g. ``postBlogId``."""
    return f"{to_camel_case(list_target)}{list_owner}Id"


# ---------------------------------------------------------------------------
# Template containers
# ---------------------------------------------------------------------------


class ModelMappingTemplates(BaseModel):
    """The six CRUD template pairs of one model."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    get: MappingTemplatePair
    list: MappingTemplatePair
    sync: MappingTemplatePair
    create: MappingTemplatePair
    update: MappingTemplatePair
    delete: MappingTemplatePair


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless mapping-template engine.

    Accepts a ``TransformConfig`` and produces template pairs from the
    derived names and connection records of a finished transform.
    """

    def __init__(self, config: TransformConfig) -> None:
        self._config: TransformConfig = config
        logger.debug(
            "TemplateGenerator initialised (list=%d, sync=%d, connection=%d).",
            config.default_list_limit,
            config.default_sync_limit,
            config.connection_list_limit,
        )

    # ===================================================================
    # 1. Model CRUD templates
    # ===================================================================

    def model_templates(self, names: DerivedNameSet) -> ModelMappingTemplates:
        values: Dict[str, object] = {
            "type_name": names.main,
            "exists_condition": _EXISTS_CONDITION,
            "versioned_condition": _VERSIONED_CONDITION,
            "caller_condition": _CALLER_CONDITION,
        }
        return ModelMappingTemplates(
            get=self._pair(_GET_REQUEST),
            list=self._pair(_LIST_REQUEST % {"limit": self._config.default_list_limit}),
            sync=self._pair(_SYNC_REQUEST % {"limit": self._config.default_sync_limit}),
            create=self._pair(_CREATE_REQUEST % values),
            update=self._pair(_UPDATE_REQUEST % values),
            delete=self._pair(_DELETE_REQUEST % values),
        )

    @staticmethod
    def _pair(request: str, response: str = DEFAULT_RESPONSE) -> MappingTemplatePair:
        return MappingTemplatePair(request=request, response=response)

    # ===================================================================
    # 2. Connection templates
    # ===================================================================

    def connection_item_templates(self, owner: str, target: str) -> MappingTemplatePair:
        """GetItem on the foreign key stored on the ``owner`` item."""
        request: str = _CONNECTION_ITEM_REQUEST % {
            "foreign_key": f"{to_camel_case(owner)}{target}Id",
            "sentinel": self._config.missing_key_sentinel,
        }
        return MappingTemplatePair(request=request, response=_CONNECTION_ITEM_RESPONSE)

    def connection_list_templates(self, owner: str, target: str) -> MappingTemplatePair:
        """Paginated Query of ``target`` items pointing back at the ``owner`` item."""
        request: str = _CONNECTION_LIST_REQUEST % {
            "limit": self._config.connection_list_limit,
            "connection_attribute": connection_attribute_name(owner, target),
            "index_name": connection_index_name(owner, target),
        }
        return MappingTemplatePair(request=request, response=_CONNECTION_LIST_RESPONSE)

    def connection_templates(self, connection: ConnectionRecord) -> MappingTemplatePair:
        owner: str = connection.owner_type_name
        target: str = connection.target_type_name
        if connection.cardinality == Cardinality.LIST:
            return self.connection_list_templates(owner, target)
        return self.connection_item_templates(owner, target)

    # ===================================================================
    # 3. Aggregate generation
    # ===================================================================

    def generate_all(self, context: TransformationContext) -> List[ResolverTemplate]:
        """
        Every resolver of a finished transform, keyed by (type, field).

        Model operations are served by the model's own table; a connection
        field is served by the table of its *target* model.
        """
        result: List[ResolverTemplate] = []
        for model in context.models:
            names: DerivedNameSet = model.names
            templates: ModelMappingTemplates = self.model_templates(names)
            for type_name, field_name, pair, kind in (
                ("Query", names.query.get, templates.get, ResolverKind.QUERY),
                ("Query", names.query.list, templates.list, ResolverKind.QUERY),
                ("Query", names.query.sync, templates.sync, ResolverKind.QUERY),
                ("Mutation", names.mutation.create, templates.create, ResolverKind.MUTATION),
                ("Mutation", names.mutation.update, templates.update, ResolverKind.MUTATION),
                ("Mutation", names.mutation.delete, templates.delete, ResolverKind.MUTATION),
            ):
                result.append(
                    ResolverTemplate(
                        type_name=type_name,
                        field_name=field_name,
                        data_source=names.main,
                        kind=kind,
                        templates=pair,
                    )
                )

        for connection in context.connections:
            result.append(
                ResolverTemplate(
                    type_name=connection.owner_type_name,
                    field_name=connection.field.name,
                    data_source=connection.target_type_name,
                    kind=ResolverKind.CONNECTION,
                    templates=self.connection_templates(connection),
                )
            )

        logger.info(
            "Generated %d resolver templates (%d models, %d connections).",
            len(result),
            len(context.models),
            len(context.connections),
        )
        return result

    def secondary_indexes(self, context: TransformationContext) -> List[IndexDescriptor]:
        """
        Indexes the list-connection queries expect.

        A singular connection ``Post.blog`` stores ``postBlogId`` on Post
        items; the matching list field ``Blog.posts`` queries it through
        ``gsi-BlogPosts`` on the Post table.
        """
        result: List[IndexDescriptor] = []
        for connection in context.connections:
            if connection.cardinality != Cardinality.SINGULAR:
                continue
            owner: str = connection.owner_type_name
            target: str = connection.target_type_name
            descriptor = IndexDescriptor(
                table=owner,
                index_name=connection_index_name(target, owner),
                partition_key=connection.id_field_name,
            )
            if descriptor not in result:
                result.append(descriptor)
        return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_RESPONSE",
    "connection_index_name",
    "connection_attribute_name",
    "ModelMappingTemplates",
    "TemplateGenerator",
]

logger.debug("modelgql.templates loaded: %d public symbols.", len(__all__))
