"""Resource assembler: default links, per-kind hooks, collections, HAL output."""

import json

import pytest
from pydantic import BaseModel, ConfigDict

from models.employee import Employee, EmployeeRead
from services.hypermedia import EMPLOYEE, MANAGER
from utils.exceptions import AssemblerFrozenError, DuplicateRelationError
from utils.hateoas import CollectionResource, Resource, ResourceAssembler
from utils.routes import RouteRegistry


class TestEmployeeEnvelope:

    def test_employee_with_manager(self, hypermedia, frodo):
        resource = hypermedia.assembler.to_model(EMPLOYEE, frodo)

        assert resource.fields == {"id": 1, "name": "Frodo", "role": "ring bearer"}
        links = resource.hrefs()
        assert links["self"] == "/employees/1"
        assert links["manager"] == "/managers/9"
        assert links["employees"] == "/employees"
        assert links["detailed"] == "/employees/1/detailed"

    def test_employee_without_manager_has_no_manager_link(self, hypermedia, unmanaged):
        resource = hypermedia.assembler.to_model(EMPLOYEE, unmanaged)

        assert resource.hrefs()["self"] == "/employees/2"
        assert not resource.has_link("manager")
        assert all(link.href for link in resource.links.values())

    def test_self_link_matches_template_for_every_employee(self, hypermedia):
        for employee_id in (1, 7, 42, 1000):
            employee = Employee(id=employee_id, name="x", role="y", manager_id=None)
            resource = hypermedia.assembler.to_model(EMPLOYEE, employee)
            self_links = [link for link in resource.links.values() if link.rel == "self"]
            assert len(self_links) == 1
            assert self_links[0].href == f"/employees/{employee_id}"

    def test_source_is_kept_but_not_serialized(self, hypermedia, frodo):
        resource = hypermedia.assembler.to_model(EMPLOYEE, frodo)

        assert resource.source is frodo
        assert "source" not in resource.to_hal()


class TestManagerEnvelope:

    def test_manager_links(self, hypermedia, gandalf):
        resource = hypermedia.assembler.to_model(MANAGER, gandalf)

        assert resource.fields == {"id": 9, "name": "Gandalf"}
        assert resource.hrefs() == {
            "self": "/managers/9",
            "managers": "/managers",
            "employees": "/managers/9/employees",
        }

    def test_employees_are_never_inlined(self, hypermedia, gandalf, frodo):
        # frodo's fixture attaches him to gandalf.employees
        assert gandalf.employees == [frodo]
        resource = hypermedia.assembler.to_model(MANAGER, gandalf)
        assert "employees" not in resource.fields


class TestCollections:

    def test_employee_collection(self, hypermedia, frodo, unmanaged):
        collection = hypermedia.assembler.to_collection(EMPLOYEE, [frodo, unmanaged])

        assert isinstance(collection, CollectionResource)
        assert len(collection) == 2
        assert collection.hrefs() == {
            "self": "/employees",
            "create": "/employees",
            "root": "/",
        }
        assert collection.links["create"].method == "POST"
        # members carry their own links, not the collection's
        assert collection.members[0].hrefs()["self"] == "/employees/1"

    def test_collection_self_route_override(self, hypermedia, frodo):
        collection = hypermedia.assembler.to_collection(
            EMPLOYEE, [frodo], self_route=(MANAGER, "employees"), id=9
        )
        assert collection.hrefs()["self"] == "/managers/9/employees"

    def test_empty_collection_still_embeds_a_list(self, hypermedia):
        document = hypermedia.assembler.to_collection(MANAGER, []).to_hal()

        assert document["_embedded"] == {"managers": []}
        assert document["_links"]["self"] == {"href": "/managers"}


class TestHooks:

    class Thing(BaseModel):
        id: int

        model_config = ConfigDict(from_attributes=True)

    class Source:
        def __init__(self, id):
            self.id = id

    def _routes(self):
        routes = RouteRegistry()
        routes.register("thing", "list", "/things")
        routes.register("thing", "detail", "/things/{id}")
        routes.register("thing", "audit", "/things/{id}/audit")
        return routes

    def test_duplicate_relation_is_an_error(self):
        assembler = ResourceAssembler(self._routes())
        assembler.register("thing", self.Thing, collection_rel="things")
        assembler.add_link_hook(
            "thing", lambda resource, source, routes: resource.add_link(
                routes.link("self", "thing", "audit", id=source.id)
            )
        )

        with pytest.raises(DuplicateRelationError) as exc_info:
            assembler.to_model("thing", self.Source(1))
        assert exc_info.value.rel == "self"

    def test_hooks_run_in_registration_order(self):
        calls = []
        assembler = ResourceAssembler(self._routes())
        assembler.register("thing", self.Thing, collection_rel="things")
        assembler.add_link_hook("thing", lambda r, s, routes: calls.append("first"))
        assembler.add_link_hook("thing", lambda r, s, routes: calls.append("second"))

        assembler.to_model("thing", self.Source(1))
        assert calls == ["first", "second"]

    def test_opting_out_of_default_links(self):
        assembler = ResourceAssembler(self._routes())
        assembler.register("thing", self.Thing, collection_rel="things", default_links=False)
        assembler.add_link_hook(
            "thing", lambda resource, source, routes: resource.add_link(
                routes.link("self", "thing", "audit", id=source.id)
            )
        )

        resource = assembler.to_model("thing", self.Source(5))
        assert resource.hrefs() == {"self": "/things/5/audit"}

    def test_registering_default_links_without_routes_fails_at_registration(self):
        from utils.exceptions import RouteNotFoundError

        assembler = ResourceAssembler(RouteRegistry())
        with pytest.raises(RouteNotFoundError):
            assembler.register("thing", self.Thing, collection_rel="things")

    def test_links_cannot_be_removed(self, hypermedia, frodo):
        resource = hypermedia.assembler.to_model(EMPLOYEE, frodo)
        with pytest.raises(TypeError):
            del resource.links["self"]

    def test_frozen_assembler_rejects_hooks(self, hypermedia):
        with pytest.raises(AssemblerFrozenError) as exc_info:
            hypermedia.assembler.add_link_hook(EMPLOYEE, lambda r, s, routes: None)
        assert exc_info.value.context == {"kind": EMPLOYEE}

    def test_frozen_assembler_rejects_new_kinds(self, hypermedia):
        with pytest.raises(AssemblerFrozenError):
            hypermedia.assembler.register("wizard", EmployeeRead, collection_rel="wizards")

    def test_unknown_kind(self, hypermedia, frodo):
        with pytest.raises(KeyError):
            hypermedia.assembler.to_model("wizard", frodo)


class TestHalDocument:

    def test_fields_come_first_then_links(self, hypermedia, frodo):
        document = hypermedia.assembler.to_model(EMPLOYEE, frodo).to_hal()

        assert list(document) == ["id", "name", "role", "_links"]
        assert document["_links"]["self"] == {"href": "/employees/1"}

    def test_json_round_trip_keeps_fields_and_links(self, hypermedia, frodo):
        resource = hypermedia.assembler.to_model(EMPLOYEE, frodo)
        parsed = json.loads(json.dumps(resource.to_hal()))

        links = {(rel, link["href"]) for rel, link in parsed.pop("_links").items()}
        assert parsed == resource.fields
        assert links == set(resource.hrefs().items())

    def test_resource_rejects_duplicate_rel_directly(self, hypermedia):
        resource = Resource("employee", {"id": 1})
        resource.add_link(hypermedia.routes.link("self", EMPLOYEE, "detail", id=1))
        with pytest.raises(DuplicateRelationError):
            resource.add_link(hypermedia.routes.link("self", EMPLOYEE, "detail", id=2))

    def test_schema_projection_drops_relations(self, frodo):
        assert EmployeeRead.model_validate(frodo).model_dump() == {
            "id": 1,
            "name": "Frodo",
            "role": "ring bearer",
        }
