# File: modelgql/definitions.py
"""
Directive definitions merged into every input document, and the AppSync
subscription directive needed to rebuild a transformed schema.
"""

from __future__ import annotations

import logging
from typing import List

from graphql import DocumentNode, parse

logger: logging.Logger = logging.getLogger("modelgql.definitions")

CONNECTION_DEFINITIONS: str = """
directive @connection(name: String, fields: [String!]) on FIELD_DEFINITION
"""

MODEL_DEFINITIONS: str = """
directive @model(
    queries: ModelQueryMap,
    mutations: ModelMutationMap,
    subscriptions: ModelSubscriptionMap
) on OBJECT
input ModelMutationMap { create: String, update: String, delete: String }
input ModelQueryMap { get: String, list: String }
input ModelSubscriptionMap {
    onCreate: [String]
    onUpdate: [String]
    onDelete: [String]
    level: ModelSubscriptionLevel
}
enum ModelSubscriptionLevel { off public on }
"""

APPSYNC_DEFINITIONS: str = """
directive @aws_subscribe(mutations: [String!]) on FIELD_DEFINITION
"""


def merge_documents(*documents: DocumentNode) -> DocumentNode:
    """Concatenate the definitions of several documents, in order."""
    definitions: List = []
    for document in documents:
        definitions.extend(document.definitions)
    return DocumentNode(definitions=tuple(definitions))


def base_document() -> DocumentNode:
    """Fresh parse of the directive definitions every transform starts from."""
    return merge_documents(parse(CONNECTION_DEFINITIONS), parse(MODEL_DEFINITIONS))


def appsync_document() -> DocumentNode:
    return parse(APPSYNC_DEFINITIONS)


__all__: List[str] = [
    "CONNECTION_DEFINITIONS",
    "MODEL_DEFINITIONS",
    "APPSYNC_DEFINITIONS",
    "merge_documents",
    "base_document",
    "appsync_document",
]
