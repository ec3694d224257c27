"""
Link wiring for every resource kind the API serves.

Everything here runs once while the application is created: the route table,
the per-kind link hooks, the composite and the legacy shape. Any mistake
(duplicate route, colliding composite field, unknown legacy field) raises
before the first request is accepted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request

from models.employee import Employee, EmployeeRead
from models.manager import Manager, ManagerRead
from models.views import EmployeeWithManagerRead, SupervisorRead
from utils.composite import CompositeType, CompositeView
from utils.hateoas import CollectionResource, Resource, ResourceAssembler
from utils.legacy import LegacyShape
from utils.routes import RouteRegistry

logger = logging.getLogger(__name__)

EMPLOYEE = "employee"
MANAGER = "manager"
EMPLOYEE_WITH_MANAGER = "employee_with_manager"
SUPERVISOR = "supervisor"
ROOT = "root"


# -----------------------------------------------------------------------------
# Route table
# -----------------------------------------------------------------------------
def build_routes() -> RouteRegistry:
    routes = RouteRegistry()
    routes.register(ROOT, "index", "/")

    routes.register(EMPLOYEE, "list", "/employees")
    routes.register(EMPLOYEE, "create", "/employees", method="POST")
    routes.register(EMPLOYEE, "detail", "/employees/{id}")
    routes.register(EMPLOYEE, "manager", "/employees/{id}/manager")

    routes.register(MANAGER, "list", "/managers")
    routes.register(MANAGER, "create", "/managers", method="POST")
    routes.register(MANAGER, "detail", "/managers/{id}")
    routes.register(MANAGER, "employees", "/managers/{id}/employees")

    routes.register(EMPLOYEE_WITH_MANAGER, "list", "/employees/detailed")
    routes.register(EMPLOYEE_WITH_MANAGER, "detail", "/employees/{id}/detailed")

    routes.register(SUPERVISOR, "detail", "/supervisors/{id}")

    routes.freeze()
    return routes


# -----------------------------------------------------------------------------
# Link hooks
# -----------------------------------------------------------------------------
def employee_links(resource: Resource, employee: Employee, routes: RouteRegistry) -> None:
    resource.add_link(routes.link("detailed", EMPLOYEE_WITH_MANAGER, "detail", id=employee.id))
    if employee.manager_id is not None:
        resource.add_link(routes.link("manager", MANAGER, "detail", id=employee.manager_id))


def manager_links(resource: Resource, manager: Manager, routes: RouteRegistry) -> None:
    resource.add_link(routes.link("employees", MANAGER, "employees", id=manager.id))


def employee_with_manager_links(resource: Resource, view: CompositeView, routes: RouteRegistry) -> None:
    resource.add_link(routes.link("summary", EMPLOYEE, "detail", id=view.id))
    if view.secondary is not None:
        resource.add_link(routes.link("manager", MANAGER, "detail", id=view.secondary.id))


def creatable(kind: str):
    def hook(collection: CollectionResource, routes: RouteRegistry) -> None:
        collection.add_link(routes.link("create", kind, "create"))
    return hook


def root_link(collection: CollectionResource, routes: RouteRegistry) -> None:
    collection.add_link(routes.link("root", ROOT, "index"))


def summary_collection_link(collection: CollectionResource, routes: RouteRegistry) -> None:
    collection.add_link(routes.link("employees", EMPLOYEE, "list"))


def build_root(routes: RouteRegistry) -> Resource:
    root = Resource(ROOT, {})
    root.add_link(routes.link("self", ROOT, "index"))
    root.add_link(routes.link("employees", EMPLOYEE, "list"))
    root.add_link(routes.link("managers", MANAGER, "list"))
    root.add_link(routes.link("detailedEmployees", EMPLOYEE_WITH_MANAGER, "list"))
    return root


# -----------------------------------------------------------------------------
# Assembler
# -----------------------------------------------------------------------------
def build_assembler(routes: RouteRegistry) -> ResourceAssembler:
    assembler = ResourceAssembler(routes)

    assembler.register(EMPLOYEE, EmployeeRead, collection_rel="employees")
    assembler.add_link_hook(EMPLOYEE, employee_links)
    assembler.add_collection_hook(EMPLOYEE, creatable(EMPLOYEE))
    assembler.add_collection_hook(EMPLOYEE, root_link)

    assembler.register(MANAGER, ManagerRead, collection_rel="managers")
    assembler.add_link_hook(MANAGER, manager_links)
    assembler.add_collection_hook(MANAGER, creatable(MANAGER))
    assembler.add_collection_hook(MANAGER, root_link)

    assembler.register(
        EMPLOYEE_WITH_MANAGER,
        EmployeeWithManagerRead,
        collection_rel="employees",
        embedded_rel="employeesWithManagers",
        fields_of=lambda view: view.fields,
    )
    assembler.add_link_hook(EMPLOYEE_WITH_MANAGER, employee_with_manager_links)
    assembler.add_collection_hook(EMPLOYEE_WITH_MANAGER, summary_collection_link)
    assembler.add_collection_hook(EMPLOYEE_WITH_MANAGER, root_link)

    assembler.freeze()
    return assembler


# -----------------------------------------------------------------------------
# Derived views
# -----------------------------------------------------------------------------
def build_employee_with_manager() -> CompositeType:
    return CompositeType(
        EMPLOYEE_WITH_MANAGER,
        primary=(EMPLOYEE, EmployeeRead, ["id", "name", "role"]),
        secondary=(MANAGER, ManagerRead, ["name"]),
        renames={"manager.name": "manager"},
        schema=EmployeeWithManagerRead,
    )


def supervised(manager: Manager) -> list[str]:
    return [f"{employee.name}::{employee.role}" for employee in manager.employees]


SUPERVISOR_FIELDS = {
    "id": "id",
    "name": "name",
    "employees": supervised,
}


def build_supervisor() -> LegacyShape:
    return LegacyShape(
        SUPERVISOR,
        source_kind=MANAGER,
        source_schema=ManagerRead,
        fields=SUPERVISOR_FIELDS,
        schema=SupervisorRead,
    )


# -----------------------------------------------------------------------------
# Container
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Hypermedia:
    routes: RouteRegistry
    assembler: ResourceAssembler
    employee_with_manager: CompositeType
    supervisor: LegacyShape

    def root(self) -> Resource:
        return build_root(self.routes)


def create_hypermedia() -> Hypermedia:
    routes = build_routes()
    hypermedia = Hypermedia(
        routes=routes,
        assembler=build_assembler(routes),
        employee_with_manager=build_employee_with_manager(),
        supervisor=build_supervisor(),
    )
    logger.info(
        "Hypermedia ready: %d routes, kinds=%s",
        len(routes),
        ", ".join(hypermedia.assembler.kinds()),
    )
    return hypermedia


def get_hypermedia(request: Request) -> Hypermedia:
    """FastAPI dependency: the frozen link machinery built at startup."""
    return request.app.state.hypermedia
