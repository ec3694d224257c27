from fastapi import APIRouter, Depends, Path

from services.hypermedia import EMPLOYEE, EMPLOYEE_WITH_MANAGER, Hypermedia, get_hypermedia
from services.store import EntityStore, get_store
from utils.hateoas import HALResponse


# Included before the employees router so "/employees/detailed" is not read as an id
router = APIRouter(
    prefix="/employees",
    tags=["Employees (detailed)"],
    default_response_class=HALResponse,
)


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("/detailed", name="list_detailed_employees")
async def list_detailed_employees(
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    """Every employee merged with its manager's name."""
    employees = await store.find_all(EMPLOYEE)
    views = hypermedia.employee_with_manager.build_many(
        (employee, employee.manager) for employee in employees
    )
    return HALResponse(
        hypermedia.assembler.to_collection(EMPLOYEE_WITH_MANAGER, views).to_hal()
    )


@router.get("/{employee_id}/detailed", name="get_detailed_employee")
async def get_detailed_employee(
    employee_id: int = Path(..., ge=1, description="Employee identifier"),
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    employee = await store.find_by_id(EMPLOYEE, employee_id)
    view = hypermedia.employee_with_manager.build(employee, employee.manager)
    return HALResponse(hypermedia.assembler.to_model(EMPLOYEE_WITH_MANAGER, view).to_hal())
