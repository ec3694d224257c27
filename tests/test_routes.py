"""Route registry: resolution, rejection of duplicates, startup verification."""

import pytest
from fastapi import APIRouter, FastAPI

from utils.exceptions import (
    DuplicateRouteError,
    MissingRouteParameterError,
    RouteNotFoundError,
    RouteRegistryFrozenError,
)
from utils.routes import RouteRegistry


@pytest.fixture
def routes():
    registry = RouteRegistry()
    registry.register("employee", "list", "/employees")
    registry.register("employee", "create", "/employees", method="post")
    registry.register("employee", "detail", "/employees/{id}")
    registry.register("manager", "employees", "/managers/{id}/employees")
    return registry


class TestResolve:

    def test_substitutes_parameters(self, routes):
        assert routes.resolve("employee", "detail", id=1) == "/employees/1"
        assert routes.resolve("manager", "employees", id=9) == "/managers/9/employees"

    def test_template_without_parameters(self, routes):
        assert routes.resolve("employee", "list") == "/employees"

    def test_values_are_url_quoted(self, routes):
        assert routes.resolve("employee", "detail", id="a b/c") == "/employees/a%20b%2Fc"

    def test_unknown_key_raises(self, routes):
        with pytest.raises(RouteNotFoundError) as exc_info:
            routes.resolve("manager", "detail", id=1)
        assert exc_info.value.kind == "manager"
        assert exc_info.value.operation == "detail"

    @pytest.mark.parametrize("params", [{}, {"id": None}, {"id": ""}])
    def test_missing_parameter_never_yields_a_uri(self, routes, params):
        with pytest.raises(MissingRouteParameterError):
            routes.resolve("employee", "detail", **params)

    def test_link_carries_method_hint_only_for_non_get(self, routes):
        create = routes.link("create", "employee", "create")
        detail = routes.link("self", "employee", "detail", id=3)

        assert create.method == "POST"
        assert create.to_hal() == {"href": "/employees", "method": "POST"}
        assert detail.method is None
        assert detail.to_hal() == {"href": "/employees/3"}


class TestRegistration:

    def test_duplicate_key_rejected_and_original_kept(self, routes):
        with pytest.raises(DuplicateRouteError):
            routes.register("employee", "detail", "/people/{id}")
        assert routes.resolve("employee", "detail", id=1) == "/employees/1"

    def test_template_must_be_absolute(self):
        with pytest.raises(ValueError):
            RouteRegistry().register("employee", "list", "employees")

    def test_invalid_placeholder_rejected(self):
        with pytest.raises(ValueError):
            RouteRegistry().register("employee", "detail", "/employees/{}")

    def test_frozen_registry_rejects_registration(self, routes):
        routes.freeze()
        assert routes.frozen
        with pytest.raises(RouteRegistryFrozenError):
            routes.register("manager", "list", "/managers")
        # reads still work
        assert routes.resolve("employee", "list") == "/employees"

    def test_iteration_and_len(self, routes):
        assert len(routes) == 4
        assert {(r.kind, r.operation) for r in routes} == {
            ("employee", "list"),
            ("employee", "create"),
            ("employee", "detail"),
            ("manager", "employees"),
        }


class TestCheckAgainstApp:

    def _app(self, *paths):
        app = FastAPI()
        for method, path in paths:
            app.add_api_route(path, lambda: None, methods=[method])
        return app

    def test_passes_when_every_template_is_served(self, routes):
        app = self._app(
            ("GET", "/employees"),
            ("POST", "/employees"),
            ("GET", "/employees/{employee_id}"),
            ("GET", "/managers/{manager_id}/employees"),
        )
        routes.check_against(app)

    def test_missing_route_fails_fast(self, routes):
        app = self._app(
            ("GET", "/employees"),
            ("GET", "/employees/{employee_id}"),
            ("GET", "/managers/{manager_id}/employees"),
        )
        with pytest.raises(RouteNotFoundError) as exc_info:
            routes.check_against(app)
        assert exc_info.value.operation == "create"

    def test_application_routes_all_verified(self, hypermedia):
        from main import app

        hypermedia.routes.check_against(app)

    def test_routes_of_included_routers_are_seen(self, routes):
        employees = APIRouter(prefix="/employees")
        employees.add_api_route("", lambda: None, methods=["GET"])
        employees.add_api_route("", lambda: None, methods=["POST"])
        employees.add_api_route("/{employee_id}", lambda: None, methods=["GET"])
        managers = APIRouter(prefix="/managers")
        managers.add_api_route("/{manager_id}/employees", lambda: None, methods=["GET"])

        app = FastAPI()
        app.include_router(employees)
        app.include_router(managers)

        routes.check_against(app)

    def test_router_missing_a_method_fails_fast(self, routes):
        employees = APIRouter(prefix="/employees")
        employees.add_api_route("", lambda: None, methods=["GET"])
        employees.add_api_route("/{employee_id}", lambda: None, methods=["GET"])
        employees.add_api_route("/{employee_id}/manager", lambda: None, methods=["GET"])

        app = FastAPI()
        app.include_router(employees)

        with pytest.raises(RouteNotFoundError) as exc_info:
            routes.check_against(app)
        assert exc_info.value.operation == "create"
