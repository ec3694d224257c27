from fastapi import APIRouter, Depends, Path, Request, status

from models.manager import Manager, ManagerCreate
from services.hypermedia import EMPLOYEE, MANAGER, Hypermedia, get_hypermedia
from services.store import EntityStore, get_store
from utils.etag import conditional_hal_response
from utils.hateoas import HALResponse


router = APIRouter(
    prefix="/managers",
    tags=["Managers"],
    default_response_class=HALResponse,
)


# -----------------------------------------------------------------------------
# POST Endpoint
# -----------------------------------------------------------------------------

@router.post("", status_code=201, name="create_manager")
async def create_manager(
    manager_req: ManagerCreate,
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    manager = await store.add(Manager(name=manager_req.name))

    resource = hypermedia.assembler.to_model(MANAGER, manager)
    return HALResponse(
        resource.to_hal(),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": resource.links["self"].href},
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", name="list_managers")
async def list_managers(
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    managers = await store.find_all(MANAGER)
    return HALResponse(hypermedia.assembler.to_collection(MANAGER, managers).to_hal())


@router.get("/{manager_id}", name="get_manager")
async def get_manager(
    request: Request,
    manager_id: int = Path(..., ge=1, description="Manager identifier"),
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    manager = await store.find_by_id(MANAGER, manager_id)
    return conditional_hal_response(request, hypermedia.assembler.to_model(MANAGER, manager))


@router.get("/{manager_id}/employees", name="list_manager_employees")
async def list_manager_employees(
    manager_id: int = Path(..., ge=1, description="Manager identifier"),
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    """Employees reporting to one manager, linked back to that manager."""
    # 404 for an unknown manager rather than an empty list
    await store.find_by_id(MANAGER, manager_id)
    employees = await store.find_related(EMPLOYEE, "manager_id", manager_id)

    collection = hypermedia.assembler.to_collection(
        EMPLOYEE,
        employees,
        self_route=(MANAGER, "employees"),
        id=manager_id,
    )
    collection.add_link(hypermedia.routes.link("manager", MANAGER, "detail", id=manager_id))
    return HALResponse(collection.to_hal())
