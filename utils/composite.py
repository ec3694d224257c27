from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Type

from pydantic import BaseModel

from utils.exceptions import FieldCollisionError

PRIMARY = "primary"
SECONDARY = "secondary"

# (kind, read schema of that kind, fields taken from it)
SourceSpec = Tuple[str, Type[BaseModel], Sequence[str]]


@dataclass(frozen=True)
class OutputField:
    name: str
    side: str       # PRIMARY or SECONDARY
    source: str     # attribute read from that side


@dataclass
class CompositeView:
    """Read-only merge of two entities; built per request, never stored."""
    kind: str
    id: Any
    fields: Dict[str, Any]
    primary: Any = field(repr=False)
    secondary: Any = field(repr=False, default=None)


class CompositeType:
    """
    Declares once how two entity kinds merge into one view.

    Primary fields keep their names, secondary fields keep theirs unless renamed
    with "<kind>.<field>" -> "<output>". Every declared field must exist on its
    kind's read schema, every output must exist on `schema` when one is given,
    and no two fields may land on the same output name. All of it is checked
    here, at declaration time.

        CompositeType(
            "employee_with_manager",
            primary=("employee", EmployeeRead, ["id", "name", "role"]),
            secondary=("manager", ManagerRead, ["name"]),
            renames={"manager.name": "manager"},
            schema=EmployeeWithManagerRead,
        )
    """

    def __init__(
        self,
        kind: str,
        *,
        primary: SourceSpec,
        secondary: SourceSpec,
        renames: Optional[Mapping[str, str]] = None,
        schema: Optional[Type[BaseModel]] = None,
    ) -> None:
        self.kind = kind
        self.schema = schema
        self.primary_kind, primary_schema, primary_fields = primary
        self.secondary_kind, secondary_schema, secondary_fields = secondary
        if self.primary_kind == self.secondary_kind:
            raise FieldCollisionError(
                f"Composite {kind!r} merges two {self.primary_kind!r} sources; renames would be ambiguous",
                context={"composite": kind},
            )
        self.fields: Tuple[OutputField, ...] = self._plan(
            [
                (PRIMARY, self.primary_kind, primary_schema, primary_fields),
                (SECONDARY, self.secondary_kind, secondary_schema, secondary_fields),
            ],
            dict(renames or {}),
        )
        if schema is not None:
            self._check_outputs(schema)

    def _plan(
        self,
        sides: Sequence[Tuple[str, str, Type[BaseModel], Sequence[str]]],
        renames: Dict[str, str],
    ) -> Tuple[OutputField, ...]:
        planned: Dict[str, OutputField] = {}
        unused = set(renames)

        for side, source_kind, source_schema, names in sides:
            known = source_schema.model_fields
            for name in names:
                qualified = f"{source_kind}.{name}"
                if name not in known:
                    raise FieldCollisionError(
                        f"Composite {self.kind!r} reads {qualified}, which "
                        f"{source_schema.__name__} does not declare",
                        context={"composite": self.kind, "field": qualified},
                    )
                output = renames.get(qualified, name)
                unused.discard(qualified)

                clash = planned.get(output)
                if clash is not None:
                    clash_kind = self.primary_kind if clash.side == PRIMARY else self.secondary_kind
                    raise FieldCollisionError(
                        f"Composite {self.kind!r}: {qualified} and {clash_kind}.{clash.source} "
                        f"both map to {output!r}; rename one of them",
                        context={"composite": self.kind, "field": output},
                    )
                planned[output] = OutputField(name=output, side=side, source=name)

        if unused:
            raise FieldCollisionError(
                f"Composite {self.kind!r} renames undeclared fields: {sorted(unused)}",
                context={"composite": self.kind, "renames": sorted(unused)},
            )
        return tuple(planned.values())

    def _check_outputs(self, schema: Type[BaseModel]) -> None:
        declared = schema.model_fields
        for out in self.fields:
            if out.name not in declared:
                raise FieldCollisionError(
                    f"Composite {self.kind!r} produces {out.name!r}, which "
                    f"{schema.__name__} does not declare",
                    context={"composite": self.kind, "field": out.name},
                )
        missing = [
            name for name, info in declared.items()
            if info.is_required() and name not in self.output_names()
        ]
        if missing:
            raise FieldCollisionError(
                f"Composite {self.kind!r} leaves required {schema.__name__} fields unset: {missing}",
                context={"composite": self.kind, "fields": missing},
            )

    def output_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def build(self, primary: Any, secondary: Any = None) -> CompositeView:
        values: Dict[str, Any] = {}
        for out in self.fields:
            source = primary if out.side == PRIMARY else secondary
            values[out.name] = None if source is None else getattr(source, out.source)
        return CompositeView(
            kind=self.kind,
            id=primary.id,
            fields=values,
            primary=primary,
            secondary=secondary,
        )

    def build_many(self, pairs: Iterable[Tuple[Any, Any]]) -> list:
        return [self.build(primary, secondary) for primary, secondary in pairs]
