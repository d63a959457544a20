# File: modelgql/__init__.py
"""
ModelGQL: GraphQL @model/@connection Schema Transformer
=========================================================

Expands a GraphQL SDL document annotated with ``@model`` and
``@connection`` into a complete CRUD schema (queries, mutations,
subscriptions, filter and condition inputs) plus the resolver mapping
templates that bind each generated operation to a key-value table.

Architecture overview::

    ┌──────────────────┐     ┌─────────────────────┐
    │ SchemaTransformer│────▶│  TemplateGenerator  │
    │ (transformer.py) │     │   (templates.py)    │
    └────────┬─────────┘     └─────────────────────┘
             │
     ┌───────┼──────────────┬──────────────────┐
     ▼       ▼              ▼                  ▼
  ┌──────┐ ┌───────────┐ ┌──────────────┐ ┌────────────────────┐
  │ sdl  │ │validators │ │model_visitor │ │connection_visitor  │
  └──────┘ └───────────┘ └──────────────┘ └────────────────────┘

Usage::

    from modelgql import SchemaTransformer, TransformConfig
    transformer = SchemaTransformer(TransformConfig())
    result = transformer.transform(sdl_text)
    print(result.source)
    for resolver in transformer.generate_templates(result):
        ...

Public API:
    - SchemaTransformer / transform_schema  - Pipeline entry points
    - TransformConfig                       - Settings model
    - TemplateGenerator                     - Mapping template engine
    - derive_names                          - Generated-name deriver
    - validate_full                         - Pre-flight checks
"""

from __future__ import annotations

__version__: str = "0.1.0"

from modelgql.context import ConnectionRecord, ModelRecord, TransformationContext
from modelgql.errors import (
    DirectiveMisuseError,
    InternalInvariantError,
    TransformError,
    TypeResolutionError,
)
from modelgql.models import (
    Cardinality,
    IndexDescriptor,
    MappingTemplatePair,
    ResolverKind,
    ResolverTemplate,
    TransformConfig,
)
from modelgql.names import CommonNames, DerivedNameSet, derive_names
from modelgql.templates import ModelMappingTemplates, TemplateGenerator
from modelgql.transformer import (
    SchemaTransformer,
    TransformReport,
    TransformResult,
    build_output_schema,
    load_config_file,
    transform_schema,
)
from modelgql.utils import Timer
from modelgql.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    "__version__",
    # Core orchestrator
    "SchemaTransformer",
    "TransformReport",
    "TransformResult",
    "transform_schema",
    "build_output_schema",
    "load_config_file",
    # Records
    "TransformationContext",
    "ModelRecord",
    "ConnectionRecord",
    "Cardinality",
    "IndexDescriptor",
    "MappingTemplatePair",
    "ResolverKind",
    "ResolverTemplate",
    "TransformConfig",
    # Names
    "CommonNames",
    "DerivedNameSet",
    "derive_names",
    # Templates
    "ModelMappingTemplates",
    "TemplateGenerator",
    # Validation
    "validate_full",
    "ValidationResult",
    # Errors
    "TransformError",
    "DirectiveMisuseError",
    "TypeResolutionError",
    "InternalInvariantError",
    # Utilities
    "Timer",
]
