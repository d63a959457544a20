# File: modelgql/validators.py
"""
ModelGQL - Pre-flight Schema Validators
=========================================
Semantic checks run on the ingested arena **before** any synthesis.

Structural problems (unknown types, misplaced directives) are already
rejected by graphql-core's SDL validation and raised as transform errors.
The checks here catch documents that are valid GraphQL but likely to
produce a surprising output: models without an ``id``, user types that
shadow generated ones, connection names that do not pair up.

They only ever report warnings and infos.  ``TransformConfig.fail_on_warnings``
decides whether the transformer treats warnings as fatal.

Usage:
    from modelgql.validators import validate_full
    result = validate_full(arena, sites)
    print(result.format_report())
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence

from modelgql.directives import DirectiveSite, FieldDirectiveSite, ObjectDirectiveSite
from modelgql.model_visitor import BOOKKEEPING_FIELDS
from modelgql.models import TypeDefinition, TypeKind
from modelgql.names import DerivedNameSet, derive_names, generated_type_names
from modelgql.typegraph import TypeArena
from modelgql.utils import to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationIssue:
    """Lightweight issue descriptor."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """Accumulates ``ValidationIssue`` instances produced by the checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationIssue] = []

    # -- Mutation -----------------------------------------------------------

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("warning", code, message, context))

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self._items if i.is_warning]

    @property
    def all_items(self) -> List[ValidationIssue]:
        return list(self._items)

    @property
    def has_warnings(self) -> bool:
        return any(i.is_warning for i in self._items)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self._items if i.is_warning)

    def codes(self) -> List[str]:
        return [i.code for i in self._items]

    def summary(self) -> str:
        return (
            f"Validation: {self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            lines.append(f"  [{item.level.upper()}] [{item.code}] {item.message}")
            for k, v in item.context.items():
                lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def model_types(arena: TypeArena, sites: Sequence[DirectiveSite]) -> List[TypeDefinition]:
    """The object types carrying ``@model``, in document order."""
    result: List[TypeDefinition] = []
    for site in sites:
        if (
            isinstance(site, ObjectDirectiveSite)
            and site.directive.name == "model"
            and site.type_kind == TypeKind.OBJECT
        ):
            definition: Optional[TypeDefinition] = arena.get(site.type_name)
            if definition is not None and definition not in result:
                result.append(definition)
    return result


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def validate_model_ids(models: Sequence[TypeDefinition]) -> ValidationResult:
    """Generated get/update/delete operations key on ``id: ID!``."""
    result = ValidationResult()
    for model in models:
        id_field = model.fields.get("id")
        if id_field is None or str(id_field.type) != "ID!":
            result.add_warning(
                "MODEL_MISSING_ID",
                f"Model '{model.name}' has no 'id: ID!' field; generated key lookups "
                f"will not match its items.",
                {"model": model.name},
            )
    return result


def validate_reserved_fields(models: Sequence[TypeDefinition]) -> ValidationResult:
    result = ValidationResult()
    for model in models:
        for name in BOOKKEEPING_FIELDS:
            if name in model.fields:
                result.add_warning(
                    "RESERVED_FIELD_OVERWRITTEN",
                    f"Model '{model.name}' declares '{name}', which is replaced by the "
                    f"generated bookkeeping field.",
                    {"model": model.name, "field": name},
                )
    return result


def validate_generated_names(
    arena: TypeArena,
    models: Sequence[TypeDefinition],
) -> ValidationResult:
    """
    User-defined types whose names a model would generate.

    The user definition is kept and the generated one is dropped, so the
    generated operations may end up typed against an unexpected shape.
    """
    result = ValidationResult()
    for model in models:
        names: DerivedNameSet = derive_names(model.name)
        for type_name in generated_type_names(names):
            if type_name in arena:
                result.add_warning(
                    "GENERATED_NAME_COLLISION",
                    f"Type '{type_name}' is already defined; the definition generated "
                    f"for model '{model.name}' is skipped.",
                    {"model": model.name, "type": type_name},
                )
    return result


def validate_root_fields(
    arena: TypeArena,
    models: Sequence[TypeDefinition],
) -> ValidationResult:
    """Hand-written root fields that a generated operation replaces."""
    result = ValidationResult()
    for model in models:
        names: DerivedNameSet = derive_names(model.name)
        generated: Dict[str, List[str]] = {
            "Query": [names.query.get, names.query.list, names.query.sync],
            "Mutation": [names.mutation.create, names.mutation.update, names.mutation.delete],
            "Subscription": [
                names.subscription.on_create,
                names.subscription.on_update,
                names.subscription.on_delete,
            ],
        }
        for root_name, field_names in generated.items():
            root: Optional[TypeDefinition] = arena.get(root_name)
            if root is None:
                continue
            for field_name in field_names:
                if field_name in root.fields:
                    result.add_warning(
                        "ROOT_FIELD_OVERWRITTEN",
                        f"'{root_name}.{field_name}' is replaced by the operation generated "
                        f"for model '{model.name}'.",
                        {"model": model.name, "field": f"{root_name}.{field_name}"},
                    )
    return result


def validate_connection_names(sites: Sequence[DirectiveSite]) -> ValidationResult:
    """
    Explicit ``@connection(name: ...)`` values should pair exactly two fields.

    An unpaired name is legal (a one-directional relationship) and only
    reported as info.
    """
    result = ValidationResult()
    usage: Dict[str, List[str]] = defaultdict(list)
    for site in sites:
        if isinstance(site, FieldDirectiveSite) and site.directive.name == "connection":
            name = site.directive.arguments.get("name")
            if name:
                usage[name].append(site.location)

    for name, locations in usage.items():
        if len(locations) == 1:
            result.add_info(
                "CONNECTION_NAME_UNPAIRED",
                f"Connection '{name}' is only used by {locations[0]}.",
                {"connection": name},
            )
        elif len(locations) > 2:
            result.add_warning(
                "CONNECTION_NAME_OVERUSED",
                f"Connection '{name}' is used by {len(locations)} fields; a name should "
                f"group at most one bidirectional pair.",
                {"connection": name, "fields": ", ".join(locations)},
            )
    return result


def validate_plural_names(models: Sequence[TypeDefinition]) -> ValidationResult:
    """
    Models whose naive plural is another model's name (``Post`` and ``Posts``).

    Both then expose operations ending in ``Posts`` (``listPosts`` and
    ``getPosts``), which is easy to misread.
    """
    result = ValidationResult()
    model_names = {m.name for m in models}
    for model in models:
        plural: str = to_plural(model.name)
        if plural in model_names:
            result.add_warning(
                "PLURAL_NAME_COLLISION",
                f"The plural of model '{model.name}' is the model '{plural}'; "
                f"generated operation names become ambiguous.",
                {"model": model.name, "other": plural},
            )
    return result


# ---------------------------------------------------------------------------
# Composite entry point
# ---------------------------------------------------------------------------


def validate_full(arena: TypeArena, sites: Sequence[DirectiveSite]) -> ValidationResult:
    """
    **Master pre-flight entry point.**

    Runs every check against the ingested arena and the collected
    directive sites.  Must be called before the model pass mutates the arena.
    """
    models: List[TypeDefinition] = model_types(arena, sites)
    logger.info("Starting pre-flight validation: %d models.", len(models))

    result = ValidationResult()
    result.merge(validate_model_ids(models))
    result.merge(validate_reserved_fields(models))
    result.merge(validate_generated_names(arena, models))
    result.merge(validate_root_fields(arena, models))
    result.merge(validate_connection_names(sites))
    result.merge(validate_plural_names(models))

    for issue in result.warnings:
        logger.warning("%s", issue)
    logger.info("Pre-flight validation done. %s", result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationIssue",
    "ValidationResult",
    "model_types",
    "validate_model_ids",
    "validate_reserved_fields",
    "validate_generated_names",
    "validate_root_fields",
    "validate_connection_names",
    "validate_plural_names",
    "validate_full",
]

logger.debug("modelgql.validators loaded: %d public symbols.", len(__all__))
