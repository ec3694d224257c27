from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel

from utils.exceptions import FieldCollisionError
from utils.hateoas import Resource

# A legacy field either copies a current field by name or derives its value
# from the object the current envelope was assembled from.
FieldSource = Union[str, Callable[[Any], Any]]


class LegacyShape:
    """
    Serves an older representation of a current resource kind.

    The legacy envelope takes its fields through a fixed mapping and its links
    verbatim from the current envelope; it never computes links of its own.
    """

    def __init__(
        self,
        kind: str,
        *,
        source_kind: str,
        source_schema: Type[BaseModel],
        fields: Mapping[str, FieldSource],
        schema: Optional[Type[BaseModel]] = None,
    ) -> None:
        self.kind = kind
        self.schema = schema
        self.source_kind = source_kind
        known = set(source_schema.model_fields)

        for legacy_name, source in fields.items():
            if isinstance(source, str):
                if source not in known:
                    raise FieldCollisionError(
                        f"Legacy {kind!r}.{legacy_name} maps unknown {source_kind!r} field {source!r}",
                        context={"legacy": kind, "field": legacy_name},
                    )
            elif not callable(source):
                raise FieldCollisionError(
                    f"Legacy {kind!r}.{legacy_name} must map a field name or a callable",
                    context={"legacy": kind, "field": legacy_name},
                )
        self.fields: Dict[str, FieldSource] = dict(fields)

    def build(self, current: Resource) -> Resource:
        if current.kind != self.source_kind:
            raise FieldCollisionError(
                f"Legacy {self.kind!r} is built from {self.source_kind!r}, got {current.kind!r}",
                context={"legacy": self.kind, "kind": current.kind},
            )

        values: Dict[str, Any] = {}
        for legacy_name, source in self.fields.items():
            if isinstance(source, str):
                values[legacy_name] = current.fields[source]
            else:
                values[legacy_name] = source(current.source)

        if self.schema is not None:
            values = self.schema.model_validate(values).model_dump(mode="json")

        legacy = Resource(self.kind, values, source=current.source)
        legacy.add_links(current.links.values())
        return legacy
