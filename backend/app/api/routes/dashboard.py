from typing import Annotated, Any

from fastapi import APIRouter, Depends

from app import crud
from app.api.deps import SessionDep, require_capability
from app.core.permissions import Capability
from app.models import DashboardStats, User

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def read_dashboard_stats(
    session: SessionDep,
    current_user: Annotated[User, Depends(require_capability(Capability.VIEW_DASHBOARD))],
) -> Any:
    return crud.get_dashboard_stats(session=session)
