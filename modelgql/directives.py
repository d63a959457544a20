# File: modelgql/directives.py
"""
ModelGQL - Directive Sites & Dispatch
=======================================
Each directive usage found in the arena is described by a tagged site:
``ObjectDirectiveSite`` for a directive on a type, ``FieldDirectiveSite``
for one on a field.  Handlers are looked up in an explicit
``name -> handler`` table and run in pass order, so every ``@model`` is
processed before the first ``@connection``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Union

from modelgql.context import TransformationContext
from modelgql.models import DirectiveUsage, TypeKind
from modelgql.typegraph import TypeArena

logger: logging.Logger = logging.getLogger("modelgql.directives")


@dataclass(frozen=True)
class ObjectDirectiveSite:
    """A directive applied to a named type."""

    directive: DirectiveUsage
    type_name: str
    type_kind: TypeKind

    @property
    def location(self) -> str:
        return self.type_name


@dataclass(frozen=True)
class FieldDirectiveSite:
    """A directive applied to a field of a named type."""

    directive: DirectiveUsage
    type_name: str
    type_kind: TypeKind
    field_name: str

    @property
    def location(self) -> str:
        return f"{self.type_name}.{self.field_name}"


DirectiveSite = Union[ObjectDirectiveSite, FieldDirectiveSite]
DirectiveHandler = Callable[[TransformationContext, Any], Any]


def collect_directive_sites(arena: TypeArena, names: Iterable[str]) -> List[DirectiveSite]:
    """Collect every usage of the directives in *names*, in document order."""
    wanted = set(names)
    sites: List[DirectiveSite] = []
    for definition in arena.user_definitions():
        for usage in definition.directives:
            if usage.name in wanted:
                sites.append(ObjectDirectiveSite(usage, definition.name, definition.kind))
        for field in definition.fields.values():
            for usage in field.directives:
                if usage.name in wanted:
                    sites.append(
                        FieldDirectiveSite(usage, definition.name, definition.kind, field.name)
                    )
        for input_field in definition.input_fields.values():
            for usage in input_field.directives:
                if usage.name in wanted:
                    sites.append(
                        FieldDirectiveSite(usage, definition.name, definition.kind, input_field.name)
                    )
    logger.debug("Collected %d directive sites.", len(sites))
    return sites


def dispatch(
    context: TransformationContext,
    sites: Sequence[DirectiveSite],
    handlers: Mapping[str, DirectiveHandler],
    order: Sequence[str],
) -> Dict[str, List[Any]]:
    """
    Run ``handlers[name]`` over the sites of each directive in *order*.

    Returns the handler results grouped by directive name.
    """
    results: Dict[str, List[Any]] = {}
    for name in order:
        handler: DirectiveHandler = handlers[name]
        batch: List[Any] = []
        for site in sites:
            if site.directive.name == name:
                batch.append(handler(context, site))
        results[name] = batch
        logger.info("@%s pass processed %d sites.", name, len(batch))
    return results


__all__: List[str] = [
    "ObjectDirectiveSite",
    "FieldDirectiveSite",
    "DirectiveSite",
    "DirectiveHandler",
    "collect_directive_sites",
    "dispatch",
]
