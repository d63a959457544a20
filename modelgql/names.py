# File: modelgql/names.py
"""
ModelGQL - Naming Deriver
===========================
Every generated type and operation name is a pure function of a model's
base name.  Both directive passes (and the template generator) call
``derive_names`` independently and must agree, so the function is cached
and has no inputs besides the name itself.

Pluralisation is the naive ``+ "s"`` rule from ``modelgql.utils.to_plural``.
"""

from __future__ import annotations

import functools
import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from modelgql.utils import to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.names")

_FROZEN: ConfigDict = ConfigDict(frozen=True, extra="forbid", protected_namespaces=())


# ---------------------------------------------------------------------------
# Shared names
# ---------------------------------------------------------------------------


class CommonNames:
    """Names of the comparison inputs and enums shared by every model."""

    SORT_DIRECTION: str = "ModelSortDirection"
    ATTRIBUTE_TYPES: str = "ModelAttributeTypes"
    SIZE_INPUT: str = "ModelSizeInput"
    STRING_INPUT: str = "ModelStringInput"
    ID_INPUT: str = "ModelIDInput"
    INT_INPUT: str = "ModelIntInput"
    FLOAT_INPUT: str = "ModelFloatInput"
    BOOLEAN_INPUT: str = "ModelBooleanInput"

    TIMESTAMP: str = "AWSTimestamp"

    # Scalar field type -> comparison input used by filters and conditions.
    COMPARISON_INPUTS = {
        "ID": ID_INPUT,
        "String": STRING_INPUT,
        "Int": INT_INPUT,
        "Float": FLOAT_INPUT,
        "Boolean": BOOLEAN_INPUT,
    }


# ---------------------------------------------------------------------------
# Derived name set
# ---------------------------------------------------------------------------


class QueryNames(BaseModel):
    model_config = _FROZEN

    get: str
    list: str
    sync: str


class MutationNames(BaseModel):
    model_config = _FROZEN

    create: str
    update: str
    delete: str


class SubscriptionNames(BaseModel):
    model_config = _FROZEN

    on_create: str
    on_update: str
    on_delete: str


class DerivedNameSet(BaseModel):
    """All names generated for one model."""

    model_config = _FROZEN

    main: str = Field(..., min_length=1, description="The model type itself.")
    model_connection: str = Field(..., description="Paginated wrapper, Model<X>Connection.")
    create_input: str
    update_input: str
    delete_input: str
    model_filter_input: str
    model_condition_input: str
    query: QueryNames
    mutation: MutationNames
    subscription: SubscriptionNames

    def __repr__(self) -> str:
        return f"<DerivedNameSet {self.main}>"


@functools.lru_cache(maxsize=None)
def derive_names(base_name: str) -> DerivedNameSet:
    """
    Derive every generated name for the model ``base_name``.

    Examples:
        >>> names = derive_names("Blog")
        >>> names.model_connection, names.query.list
        ('ModelBlogConnection', 'listBlogs')
    """
    plural: str = to_plural(base_name)
    names = DerivedNameSet(
        main=base_name,
        model_connection=f"Model{base_name}Connection",
        create_input=f"Create{base_name}Input",
        update_input=f"Update{base_name}Input",
        delete_input=f"Delete{base_name}Input",
        model_filter_input=f"Model{base_name}FilterInput",
        model_condition_input=f"Model{base_name}ConditionInput",
        query=QueryNames(
            get=f"get{base_name}",
            list=f"list{plural}",
            sync=f"sync{plural}",
        ),
        mutation=MutationNames(
            create=f"create{base_name}",
            update=f"update{base_name}",
            delete=f"delete{base_name}",
        ),
        subscription=SubscriptionNames(
            on_create=f"onCreate{base_name}",
            on_update=f"onUpdate{base_name}",
            on_delete=f"onDelete{base_name}",
        ),
    )
    logger.debug("Derived names for %s.", base_name)
    return names


def input_type_name(object_type_name: str) -> str:
    """Name of the mirrored input type for an object type referenced from an input."""
    return f"{object_type_name}Input"


def generated_type_names(names: DerivedNameSet) -> List[str]:
    """Type names (not field names) a model contributes to the schema."""
    return [
        names.model_connection,
        names.create_input,
        names.update_input,
        names.delete_input,
        names.model_filter_input,
        names.model_condition_input,
    ]


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CommonNames",
    "QueryNames",
    "MutationNames",
    "SubscriptionNames",
    "DerivedNameSet",
    "derive_names",
    "input_type_name",
    "generated_type_names",
]

logger.debug("modelgql.names loaded: %d public symbols.", len(__all__))
