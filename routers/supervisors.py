from fastapi import APIRouter, Depends, Path

from services.hypermedia import MANAGER, Hypermedia, get_hypermedia
from services.store import EntityStore, get_store
from utils.hateoas import HALResponse


router = APIRouter(
    prefix="/supervisors",
    tags=["Supervisors (legacy)"],
    default_response_class=HALResponse,
)


@router.get("/{supervisor_id}", name="get_supervisor")
async def get_supervisor(
    supervisor_id: int = Path(..., ge=1, description="Manager identifier"),
    store: EntityStore = Depends(get_store),
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    """
    Old "supervisor" shape of a manager.
    Links are the manager's own, so clients can move to /managers directly.
    """
    manager = await store.find_by_id(MANAGER, supervisor_id, include=("employees",))
    current = hypermedia.assembler.to_model(MANAGER, manager)
    return HALResponse(hypermedia.supervisor.build(current).to_hal())
