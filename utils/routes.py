from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from string import Formatter
from typing import Any, Dict, Iterator, Tuple
from urllib.parse import quote

from fastapi import FastAPI

from models.hateoas import HATEOASLink
from utils.exceptions import (
    DuplicateRouteError,
    MissingRouteParameterError,
    RouteNotFoundError,
    RouteRegistryFrozenError,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{[^}]*\}")
_HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"}


# -----------------------------------------------------------------------------
# Route entries
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RouteTemplate:
    kind: str
    operation: str
    template: str
    method: str = "GET"
    placeholders: Tuple[str, ...] = ()

    @property
    def shape(self) -> str:
        """Template with placeholder names erased, e.g. "/employees/{}"."""
        return _PLACEHOLDER.sub("{}", self.template)


def _placeholders(template: str) -> Tuple[str, ...]:
    names = []
    for _, field_name, _, _ in Formatter().parse(template):
        if field_name is None:
            continue
        if field_name == "" or not field_name.isidentifier():
            raise ValueError(f"Invalid placeholder {{{field_name}}} in route template {template!r}")
        names.append(field_name)
    return tuple(names)


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------
class RouteRegistry:
    """
    Static table of (kind, operation) -> URI template.

    Populated once at startup, then frozen. Links are only ever built from this
    table so a renamed route changes every link that points at it.
    """

    def __init__(self) -> None:
        self._routes: Dict[Tuple[str, str], RouteTemplate] = {}
        self._frozen = False

    def register(self, kind: str, operation: str, template: str, method: str = "GET") -> RouteTemplate:
        if self._frozen:
            raise RouteRegistryFrozenError(kind, operation)
        if not template.startswith("/"):
            raise ValueError(f"Route template must start with '/': {template!r}")

        key = (kind, operation)
        existing = self._routes.get(key)
        if existing is not None:
            raise DuplicateRouteError(kind, operation, existing.template, template)

        route = RouteTemplate(
            kind=kind,
            operation=operation,
            template=template,
            method=method.upper(),
            placeholders=_placeholders(template),
        )
        self._routes[key] = route
        logger.debug("Registered route (%s, %s) -> %s %s", kind, operation, route.method, template)
        return route

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, kind: str, operation: str) -> RouteTemplate:
        try:
            return self._routes[(kind, operation)]
        except KeyError:
            raise RouteNotFoundError(kind, operation) from None

    def has(self, kind: str, operation: str) -> bool:
        return (kind, operation) in self._routes

    def resolve(self, kind: str, operation: str, **params: Any) -> str:
        route = self.get(kind, operation)
        values = {}
        for name in route.placeholders:
            value = params.get(name)
            if value is None or value == "":
                raise MissingRouteParameterError(kind, operation, name)
            values[name] = quote(str(value), safe="")
        return route.template.format(**values)

    def link(self, rel: str, kind: str, operation: str, **params: Any) -> HATEOASLink:
        route = self.get(kind, operation)
        return HATEOASLink(
            rel=rel,
            href=self.resolve(kind, operation, **params),
            method=None if route.method == "GET" else route.method,
        )

    def __iter__(self) -> Iterator[RouteTemplate]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    # -------------------------------------------------------------------------
    # Startup verification
    # -------------------------------------------------------------------------
    def check_against(self, app: FastAPI) -> None:
        """
        Fail fast if a registered template is not served by the application.
        Placeholder names may differ ({id} vs {employee_id}); the shape may not.
        Served routes come from the OpenAPI path table, which also lists the
        routes of included routers.
        """
        served = set()
        for path, operations in app.openapi().get("paths", {}).items():
            shape = _PLACEHOLDER.sub("{}", path)
            for method in operations:
                if method.upper() in _HTTP_METHODS:
                    served.add((shape, method.upper()))

        for entry in self:
            if (entry.shape, entry.method) not in served:
                raise RouteNotFoundError(
                    entry.kind,
                    entry.operation,
                    context={"template": entry.template, "method": entry.method},
                )
        logger.info("Verified %d link routes against the application", len(self))
