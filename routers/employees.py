from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from models.employee import Employee, EmployeeCreate
from services.hypermedia import EMPLOYEE, MANAGER, Hypermedia, get_hypermedia
from services.store import EntityStore, get_store
from utils.etag import conditional_hal_response
from utils.exceptions import EntityNotFound
from utils.hateoas import HALResponse


router = APIRouter(
    prefix="/employees",
    tags=["Employees"],
    default_response_class=HALResponse,
)


# -----------------------------------------------------------------------------
# POST Endpoint
# -----------------------------------------------------------------------------

@router.post("", status_code=201, name="create_employee")
async def create_employee(
    employee_req: EmployeeCreate,
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    if employee_req.manager_id is not None:
        try:
            await store.find_by_id(MANAGER, employee_req.manager_id)
        except EntityNotFound:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown manager_id: {employee_req.manager_id}",
            )

    employee = await store.add(
        Employee(
            name=employee_req.name,
            role=employee_req.role,
            manager_id=employee_req.manager_id,
        )
    )

    resource = hypermedia.assembler.to_model(EMPLOYEE, employee)
    return HALResponse(
        resource.to_hal(),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": resource.links["self"].href},
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", name="list_employees")
async def list_employees(
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    employees = await store.find_all(EMPLOYEE)
    return HALResponse(hypermedia.assembler.to_collection(EMPLOYEE, employees).to_hal())


@router.get("/{employee_id}", name="get_employee")
async def get_employee(
    request: Request,
    employee_id: int = Path(..., ge=1, description="Employee identifier"),
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    employee = await store.find_by_id(EMPLOYEE, employee_id)
    return conditional_hal_response(request, hypermedia.assembler.to_model(EMPLOYEE, employee))


@router.get("/{employee_id}/manager", name="get_employee_manager")
async def get_employee_manager(
    employee_id: int = Path(..., ge=1, description="Employee identifier"),
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    """The manager of one employee; 404 when the employee has none."""
    manager = await store.find_manager_of(employee_id)
    return HALResponse(hypermedia.assembler.to_model(MANAGER, manager).to_hal())
