# File: modelgql/transformer.py
"""
ModelGQL - Schema Transformation Pipeline (Orchestrator)
==========================================================

Connects every phase of a transform:

    SDL → Build & Ingest → Pre-flight → @model pass → @connection pass
        → Model inputs & Backfill → Foreign keys → Resolve → Prune → Emit

``SchemaTransformer`` is the programmatic API; ``transform_schema`` is the
one-call shortcut.

Workflow::

    1. Merge the @model/@connection definitions with the caller's document.
    2. Validate the SDL and build it with graphql-core, then load it into a
       fresh type arena.
    3. Collect the directive sites and run the pre-flight checks.
    4. Dispatch the model pass, then the connection pass.
    5. Synthesize create/update/filter/condition inputs per model and
       backfill every queued ``<Name>Input``.
    6. Add foreign-key fields for singular connections.
    7. Check that every type reference resolves.
    8. Prune the directive-argument helper types.
    9. Print through graphql-core and annotate the subscriptions.

Error handling strategy:
    - Every failure is fatal; no partial schema is ever returned.
    - Errors are logged once here, then propagated unchanged.
    - Parser syntax errors (``GraphQLError``) come straight from graphql-core.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from graphql import GraphQLError, GraphQLSchema, build_ast_schema, parse, print_ast
from graphql.language import DocumentNode
from graphql.validation.validate import validate_sdl
from pydantic import ValidationError as PydanticValidationError

from modelgql.connection_visitor import visit_connection
from modelgql.context import TransformationContext
from modelgql.definitions import appsync_document, base_document, merge_documents
from modelgql.directives import DirectiveHandler, DirectiveSite, collect_directive_sites, dispatch
from modelgql.errors import DirectiveMisuseError, TransformError, TypeResolutionError
from modelgql.model_visitor import TYPES_TO_PRUNE, add_model_input_types, visit_model
from modelgql.models import (
    Cardinality,
    InputValueDefinition,
    ResolverTemplate,
    TransformConfig,
    TypeDefinition,
    TypeRef,
)
from modelgql.sdl import add_subscribe_directives, ingest_document, render_schema
from modelgql.templates import TemplateGenerator
from modelgql.typegraph import assert_resolved, prune_types
from modelgql.utils import Timer
from modelgql.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.transformer")

# Fragments of the graphql-core SDL validation messages that concern
# directive usage (KnownDirectives, UniqueDirectivesPerLocation,
# KnownArgumentNamesOnDirectives, ProvidedRequiredArgumentsOnDirectives).
DIRECTIVE_ERROR_MARKERS: tuple[str, ...] = (
    "Unknown directive",
    "may not be used on",
    "can only be used once",
    "on directive '@",
    "Argument '@",
)


def _is_directive_error(message: str) -> bool:
    return any(marker in message for marker in DIRECTIVE_ERROR_MARKERS)


# ---------------------------------------------------------------------------
# Transform report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class TransformStepMetric:
    """Timing for a single pipeline step."""

    step_name: str = ""
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class TransformReport:
    """Counts, timings and pre-flight findings of one transform."""

    model_count: int = 0
    connection_count: int = 0
    type_count: int = 0
    pruned_types: List[str] = field(default_factory=list)
    backfilled_types: List[str] = field(default_factory=list)
    total_elapsed_seconds: float = 0.0

    step_metrics: List[TransformStepMetric] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    validation_infos: List[str] = field(default_factory=list)

    def step(self, name: str) -> Optional[TransformStepMetric]:
        for metric in self.step_metrics:
            if metric.step_name == name:
                return metric
        return None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        lines.append(f"{'=' * 60}")
        lines.append("  ModelGQL Transform Report")
        lines.append(f"{'=' * 60}")
        lines.append(f"  Models:           {self.model_count}")
        lines.append(f"  Connections:      {self.connection_count}")
        lines.append(f"  Output types:     {self.type_count}")
        lines.append(f"  Backfilled:       {', '.join(self.backfilled_types) or '-'}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'-' * 60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                lines.append(
                    f"    {step.step_name:<28s} {step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        if self.validation_warnings:
            lines.append(f"{'-' * 60}")
            lines.append(f"  Validation Warnings ({len(self.validation_warnings)}):")
            for warn in self.validation_warnings:
                lines.append(f"    ! {warn}")

        lines.append(f"{'=' * 60}")
        return "\n".join(lines)


@dataclass(frozen=False, slots=True)
class TransformResult:
    """Finalised schema text plus the registries the template generator reads."""

    source: str
    context: TransformationContext
    report: TransformReport


# ---------------------------------------------------------------------------
# Config loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at top level, got {type(data).__name__}.")
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping at top level, got {type(data).__name__}.")
    return data


def load_config_file(path: Union[str, Path]) -> TransformConfig:
    """
    Load a ``TransformConfig`` from a YAML or JSON file.

    Settings may sit at the top level or under a ``config`` key.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Config path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix == ".json":
        raw: Dict[str, Any] = _load_json_file(path)
    else:
        raw = _load_yaml_file(path)

    data: Any = raw.get("config", raw)
    if not isinstance(data, dict):
        raise ValueError(f"'config' in {path} must be a mapping.")
    try:
        config = TransformConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc
    logger.info("Loaded transform config from %s.", path)
    return config


def build_output_schema(source: str) -> GraphQLSchema:
    """
    Build a transformed schema text into a ``GraphQLSchema``.

    The output carries ``@aws_subscribe`` usages without their definition,
    so the AppSync directive definitions are merged in first.
    """
    return build_ast_schema(merge_documents(appsync_document(), parse(source)))


# ---------------------------------------------------------------------------
# SchemaTransformer - Master orchestrator
# ---------------------------------------------------------------------------


class SchemaTransformer:
    """
    Master pipeline orchestrator.

    Usage::

        transformer = SchemaTransformer(TransformConfig())
        result = transformer.transform(sdl_text)
        print(result.source)
        resolvers = transformer.generate_templates(result)

    The transformer holds no per-run state; every ``transform`` call builds
    its own ``TransformationContext``.
    """

    HANDLERS: Dict[str, DirectiveHandler] = {
        "model": visit_model,
        "connection": visit_connection,
    }
    PASS_ORDER: tuple = ("model", "connection")

    def __init__(self, config: Optional[TransformConfig] = None) -> None:
        self._config: TransformConfig = config or TransformConfig()
        logger.debug("SchemaTransformer initialised (%r).", self._config)

    @property
    def config(self) -> TransformConfig:
        return self._config

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def transform(self, source: Union[str, DocumentNode]) -> TransformResult:
        """
        Run the full pipeline on SDL text or an already parsed document.

        Raises:
            GraphQLError: The SDL text does not parse.
            DirectiveMisuseError: A directive is misplaced or misused.
            TypeResolutionError: A referenced type is missing or has the wrong kind.
            InternalInvariantError: Reference resolution or pruning failed.
        """
        document: DocumentNode = parse(source) if isinstance(source, str) else source
        report = TransformReport()
        context = TransformationContext()
        pipeline_start: float = time.perf_counter()

        try:
            text: str = self._run_pipeline(document, context, report)
        except TransformError as exc:
            logger.error("Transform failed: %s", exc)
            raise

        report.total_elapsed_seconds = time.perf_counter() - pipeline_start
        logger.info(
            "Transform complete: %d models, %d connections, %d types in %.3fs.",
            report.model_count,
            report.connection_count,
            report.type_count,
            report.total_elapsed_seconds,
        )
        return TransformResult(source=text, context=context, report=report)

    def generate_templates(self, result: TransformResult) -> List[ResolverTemplate]:
        """Resolver template pairs for a finished transform."""
        return TemplateGenerator(self._config).generate_all(result.context)

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        document: DocumentNode,
        context: TransformationContext,
        report: TransformReport,
    ) -> str:
        with Timer("build") as t:
            self._step_build(document, context)
        self._record(report, "Build & Ingest", t, f"{len(context.types.user_definitions())} types")

        sites: List[DirectiveSite] = collect_directive_sites(context.types, self.HANDLERS)

        with Timer("preflight") as t:
            self._step_validate(context, sites, report)
        self._record(report, "Pre-flight Validation", t, f"{len(report.validation_warnings)} warning(s)")

        with Timer("dispatch") as t:
            results = dispatch(context, sites, self.HANDLERS, self.PASS_ORDER)
        self._record(
            report,
            "Directive Passes",
            t,
            ", ".join(f"@{name}: {len(batch)}" for name, batch in results.items()),
        )

        with Timer("inputs") as t:
            for model in context.models:
                report.backfilled_types.extend(add_model_input_types(model.context))
        self._record(report, "Model Inputs & Backfill", t, f"{len(report.backfilled_types)} backfilled")

        with Timer("foreign_keys") as t:
            added: int = self._step_foreign_keys(context)
        self._record(report, "Foreign Keys", t, f"{added} field(s)")

        with Timer("resolve") as t:
            assert_resolved(context.types)
        self._record(report, "Resolve References", t, "ok")

        with Timer("prune") as t:
            report.pruned_types = prune_types(context.types, TYPES_TO_PRUNE)
        self._record(report, "Prune", t, f"{len(report.pruned_types)} type(s)")

        with Timer("emit") as t:
            printed: DocumentNode = parse(render_schema(context.types))
            text: str = print_ast(add_subscribe_directives(printed, context.subscription_map))
        self._record(report, "Emit", t, f"{len(text)} chars")

        report.model_count = len(context.models)
        report.connection_count = len(context.connections)
        report.type_count = len(context.types.user_definitions())
        return text

    @staticmethod
    def _record(report: TransformReport, name: str, timer: Timer, detail: str) -> None:
        report.step_metrics.append(
            TransformStepMetric(step_name=name, elapsed_seconds=timer.elapsed, detail=detail)
        )

    # -----------------------------------------------------------------
    # Pipeline step: build & ingest
    # -----------------------------------------------------------------

    def _step_build(self, document: DocumentNode, context: TransformationContext) -> None:
        merged: DocumentNode = merge_documents(base_document(), document)

        errors: List[GraphQLError] = validate_sdl(merged)
        if errors:
            messages: List[str] = [error.message for error in errors]
            detail: str = " ".join(messages)
            if any(_is_directive_error(message) for message in messages):
                raise DirectiveMisuseError(detail)
            raise TypeResolutionError(detail)

        try:
            build_ast_schema(merged, assume_valid_sdl=True)
        except TypeError as exc:
            raise TypeResolutionError(str(exc)) from exc

        ingest_document(merged, context.types)

    # -----------------------------------------------------------------
    # Pipeline step: pre-flight validation
    # -----------------------------------------------------------------

    def _step_validate(
        self,
        context: TransformationContext,
        sites: List[DirectiveSite],
        report: TransformReport,
    ) -> None:
        result: ValidationResult = validate_full(context.types, sites)
        for issue in result.all_items:
            if issue.is_warning:
                report.validation_warnings.append(str(issue))
            else:
                report.validation_infos.append(str(issue))

        if self._config.fail_on_warnings and result.has_warnings:
            logger.error("Pre-flight validation failed.\n%s", result.format_report())
            raise DirectiveMisuseError(
                f"Pre-flight validation reported {result.warning_count} warning(s): "
                + "; ".join(issue.code for issue in result.warnings)
            )

    # -----------------------------------------------------------------
    # Pipeline step: foreign keys
    # -----------------------------------------------------------------

    @staticmethod
    def _input_type(context: TransformationContext, name: str, owner: str) -> TypeDefinition:
        definition: Optional[TypeDefinition] = context.types.get(name)
        if definition is None:
            raise TypeResolutionError(
                f"Input '{name}' does not exist; foreign keys can only be added to "
                f"inputs of @model types.",
                type_name=owner,
            )
        if not definition.is_input_object:
            raise TypeResolutionError(
                f"Found type '{name}', but it is not an input object.", type_name=owner
            )
        return definition

    def _step_foreign_keys(self, context: TransformationContext) -> int:
        """Add ``<idFieldName>: ID`` to the owner's create and update inputs per singular connection."""
        added: int = 0
        for connection in context.connections:
            if connection.cardinality != Cardinality.SINGULAR:
                continue
            for input_name in (connection.create_input_type_name, connection.update_input_type_name):
                target: TypeDefinition = self._input_type(
                    context, input_name, connection.owner_type_name
                )
                target.input_fields[connection.id_field_name] = InputValueDefinition(
                    name=connection.id_field_name, type=TypeRef.named("ID")
                )
                added += 1
            logger.debug("Added %s to inputs of %s.", connection.id_field_name, connection.owner_type_name)
        return added


def transform_schema(
    source: Union[str, DocumentNode],
    config: Optional[TransformConfig] = None,
) -> TransformResult:
    """One-call shortcut for ``SchemaTransformer(config).transform(source)``."""
    return SchemaTransformer(config).transform(source)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TransformStepMetric",
    "TransformReport",
    "TransformResult",
    "load_config_file",
    "build_output_schema",
    "SchemaTransformer",
    "transform_schema",
]

logger.debug("modelgql.transformer loaded: %d public symbols.", len(__all__))
