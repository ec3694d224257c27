"""
Exception hierarchy for the hypermedia layer.

Registration-time errors (routes, relations, composite and legacy mappings) are
programming errors and abort startup. EntityNotFound is the only per-request
error; the application turns it into a structured 404 response.

    HypermediaError
    ├── RouteNotFoundError
    ├── DuplicateRouteError
    ├── RouteRegistryFrozenError
    ├── AssemblerFrozenError
    ├── MissingRouteParameterError
    ├── DuplicateRelationError
    ├── FieldCollisionError
    └── EntityNotFound          -> 404 Not Found
"""

from typing import Any, Dict, Optional


class HypermediaError(Exception):
    """
    Base exception for the service.

    Attributes:
        message:  Human-readable description
        context:  Structured details, logged and (for EntityNotFound) returned
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class RouteNotFoundError(HypermediaError):
    """No URI template is registered for a (kind, operation) pair."""

    def __init__(self, kind: str, operation: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx.update(kind=kind, operation=operation)
        super().__init__(message=f"No route registered for ({kind!r}, {operation!r})", context=ctx)
        self.kind = kind
        self.operation = operation


class DuplicateRouteError(HypermediaError):
    """A second template was registered for an existing (kind, operation) pair."""

    def __init__(self, kind: str, operation: str, existing: str, rejected: str):
        super().__init__(
            message=(
                f"Route ({kind!r}, {operation!r}) is already registered as {existing!r}; "
                f"refusing {rejected!r}"
            ),
            context={"kind": kind, "operation": operation, "existing": existing, "rejected": rejected},
        )


class RouteRegistryFrozenError(HypermediaError):
    """A route was registered after startup froze the registry."""

    def __init__(self, kind: str, operation: str):
        super().__init__(
            message=f"The route registry is frozen; cannot register ({kind!r}, {operation!r})",
            context={"kind": kind, "operation": operation},
        )


class AssemblerFrozenError(HypermediaError):
    """A resource kind or hook was added after startup froze the assembler."""

    def __init__(self, kind: str):
        super().__init__(
            message=f"The resource assembler is frozen; cannot change {kind!r}",
            context={"kind": kind},
        )


class MissingRouteParameterError(HypermediaError):
    """A template placeholder had no value, which would produce a dangling URI."""

    def __init__(self, kind: str, operation: str, parameter: str):
        super().__init__(
            message=f"Route ({kind!r}, {operation!r}) requires a value for {parameter!r}",
            context={"kind": kind, "operation": operation, "parameter": parameter},
        )


class DuplicateRelationError(HypermediaError):
    """Two link builders assigned the same relation name in one envelope."""

    def __init__(self, rel: str, kind: str):
        super().__init__(
            message=f"Relation {rel!r} is already present on the {kind!r} resource",
            context={"rel": rel, "kind": kind},
        )
        self.rel = rel


class FieldCollisionError(HypermediaError):
    """A composite or legacy field mapping is ambiguous or refers to an unknown field."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class EntityNotFound(HypermediaError):
    """A requested entity does not exist in the store."""

    def __init__(self, kind: str, entity_id: Any = None):
        message = f"The requested {kind} was not found"
        if entity_id is not None:
            message = f"{kind} with id {entity_id!r} was not found"
        ctx: Dict[str, Any] = {"kind": kind}
        if entity_id is not None:
            ctx["id"] = entity_id
        super().__init__(message=message, context=ctx)
        self.kind = kind
        self.entity_id = entity_id
