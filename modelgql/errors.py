# File: modelgql/errors.py
"""
Exceptions raised by the ModelGQL transform pipeline.

Every error is fatal for the invocation that raised it: the transformer
never returns a partial schema.
"""

from __future__ import annotations

from typing import List, Optional


class TransformError(Exception):
    """Base exception for all transform errors."""

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        self.message = message
        self.type_name = type_name
        self.field_name = field_name
        super().__init__(self._format())

    def _format(self) -> str:
        parts: List[str] = [p for p in (self.type_name, self.field_name) if p]
        if not parts:
            return self.message
        return f"[{'.'.join(parts)}] {self.message}"


class DirectiveMisuseError(TransformError):
    """A directive is applied to an unsupported node, or with forbidden arguments."""
    pass


class TypeResolutionError(TransformError):
    """A referenced type is missing, or has the wrong kind for its use."""
    pass


class InternalInvariantError(TransformError):
    """Reference resolution or pruning reached a state that should be unreachable."""

    def __init__(self, message: str, names: Optional[List[str]] = None) -> None:
        self.names: List[str] = sorted(names or [])
        if self.names:
            message = f"{message}: {', '.join(self.names)}"
        super().__init__(message)


__all__: List[str] = [
    "TransformError",
    "DirectiveMisuseError",
    "TypeResolutionError",
    "InternalInvariantError",
]
