from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from models.hateoas import HATEOASLink
from utils.exceptions import AssemblerFrozenError, DuplicateRelationError
from utils.routes import RouteRegistry

logger = logging.getLogger(__name__)

HAL_MEDIA_TYPE = "application/hal+json"


class HALResponse(JSONResponse):
    media_type = HAL_MEDIA_TYPE


# -----------------------------------------------------------------------------
# Envelopes
# -----------------------------------------------------------------------------
class _Linked:
    """Ordered link set keyed by relation name. Links can be added, never removed."""

    kind: str

    def __init__(self) -> None:
        self._links: Dict[str, HATEOASLink] = {}

    @property
    def links(self) -> Mapping[str, HATEOASLink]:
        return MappingProxyType(self._links)

    def add_link(self, link: HATEOASLink) -> HATEOASLink:
        if link.rel in self._links:
            raise DuplicateRelationError(link.rel, self.kind)
        self._links[link.rel] = link
        return link

    def add_links(self, links: Iterable[HATEOASLink]) -> None:
        for link in links:
            self.add_link(link)

    def has_link(self, rel: str) -> bool:
        return rel in self._links

    def hrefs(self) -> Dict[str, str]:
        return {rel: link.href for rel, link in self._links.items()}

    def _links_hal(self) -> Dict[str, Any]:
        return {rel: link.to_hal() for rel, link in self._links.items()}


class Resource(_Linked):
    """
    One entity (or derived view) as returned to a client: its fields plus links.
    `source` is the object the fields were read from and is never serialized.
    """

    def __init__(self, kind: str, fields: Mapping[str, Any], source: Any = None) -> None:
        super().__init__()
        self.kind = kind
        self.fields: Dict[str, Any] = dict(fields)
        self.source = source

    def to_hal(self) -> Dict[str, Any]:
        document = dict(self.fields)
        document["_links"] = self._links_hal()
        return document

    def __repr__(self) -> str:
        return f"Resource(kind={self.kind!r}, fields={self.fields!r}, links={self.hrefs()!r})"


class CollectionResource(_Linked):
    """Ordered members under `_embedded[embedded_rel]`, with the collection's own links."""

    def __init__(self, kind: str, embedded_rel: str, members: Iterable[Resource]) -> None:
        super().__init__()
        self.kind = kind
        self.embedded_rel = embedded_rel
        self.members: List[Resource] = list(members)

    def to_hal(self) -> Dict[str, Any]:
        return {
            "_embedded": {self.embedded_rel: [member.to_hal() for member in self.members]},
            "_links": self._links_hal(),
        }

    def __len__(self) -> int:
        return len(self.members)


# -----------------------------------------------------------------------------
# Assembler
# -----------------------------------------------------------------------------
LinkHook = Callable[[Resource, Any, RouteRegistry], None]
CollectionHook = Callable[[CollectionResource, RouteRegistry], None]


@dataclass
class KindAssembly:
    """How one resource kind is turned into an envelope."""
    kind: str
    schema: Type[BaseModel]
    collection_rel: str
    embedded_rel: str
    default_links: bool = True
    fields_of: Optional[Callable[[Any], Any]] = None
    identity: Callable[[Any], Any] = lambda source: source.id
    hooks: List[LinkHook] = field(default_factory=list)
    collection_hooks: List[CollectionHook] = field(default_factory=list)

    def project(self, source: Any) -> Dict[str, Any]:
        data = self.fields_of(source) if self.fields_of is not None else source
        return self.schema.model_validate(data).model_dump(mode="json")


class ResourceAssembler:
    """
    Fixed pipeline: project fields -> default links -> per-kind link hooks.

    Kinds are registered at startup with their schema and hooks; there is no
    subclassing per kind.
    """

    def __init__(self, routes: RouteRegistry) -> None:
        self.routes = routes
        self._kinds: Dict[str, KindAssembly] = {}
        self._frozen = False

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------
    def register(
        self,
        kind: str,
        schema: Type[BaseModel],
        *,
        collection_rel: str,
        embedded_rel: Optional[str] = None,
        default_links: bool = True,
        fields_of: Optional[Callable[[Any], Any]] = None,
    ) -> KindAssembly:
        self._check_open(kind)
        if kind in self._kinds:
            raise ValueError(f"Resource kind {kind!r} is already registered")

        # Default links need both routes; resolve failures surface here, not per request
        if default_links:
            self.routes.get(kind, "detail")
            self.routes.get(kind, "list")

        assembly = KindAssembly(
            kind=kind,
            schema=schema,
            collection_rel=collection_rel,
            embedded_rel=embedded_rel or collection_rel,
            default_links=default_links,
            fields_of=fields_of,
        )
        self._kinds[kind] = assembly
        logger.debug("Registered resource kind %s (collection rel %r)", kind, collection_rel)
        return assembly

    def add_link_hook(self, kind: str, hook: LinkHook) -> None:
        self._check_open(kind)
        self._assembly(kind).hooks.append(hook)

    def add_collection_hook(self, kind: str, hook: CollectionHook) -> None:
        self._check_open(kind)
        self._assembly(kind).collection_hooks.append(hook)

    def freeze(self) -> None:
        self._frozen = True

    def _check_open(self, kind: str) -> None:
        if self._frozen:
            raise AssemblerFrozenError(kind)

    def _assembly(self, kind: str) -> KindAssembly:
        try:
            return self._kinds[kind]
        except KeyError:
            raise KeyError(f"Resource kind {kind!r} is not registered") from None

    def kinds(self) -> Tuple[str, ...]:
        return tuple(self._kinds)

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------
    def to_model(self, kind: str, source: Any) -> Resource:
        assembly = self._assembly(kind)
        resource = Resource(kind, assembly.project(source), source=source)

        if assembly.default_links:
            identity = assembly.identity(source)
            resource.add_link(self.routes.link("self", kind, "detail", id=identity))
            resource.add_link(self.routes.link(assembly.collection_rel, kind, "list"))

        for hook in assembly.hooks:
            hook(resource, source, self.routes)
        return resource

    def to_collection(
        self,
        kind: str,
        sources: Iterable[Any],
        *,
        self_route: Optional[Tuple[str, str]] = None,
        **params: Any,
    ) -> CollectionResource:
        assembly = self._assembly(kind)
        members = [self.to_model(kind, source) for source in sources]
        collection = CollectionResource(kind, assembly.embedded_rel, members)

        route_kind, operation = self_route or (kind, "list")
        collection.add_link(self.routes.link("self", route_kind, operation, **params))

        for hook in assembly.collection_hooks:
            hook(collection, self.routes)
        return collection
