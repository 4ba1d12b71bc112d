from fastapi import APIRouter

from nixshares.api.dtos import DataResponse, SuccessResponse
from nixshares.api.routers.errors import to_http_exception
from nixshares.system.rebuild import rebuild_system
from nixshares.system.users import get_system_groups, get_system_users

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/users", response_model=DataResponse)
def list_users_endpoint():
    return DataResponse(data=get_system_users())


@router.get("/groups", response_model=DataResponse)
def list_groups_endpoint():
    return DataResponse(data=get_system_groups())


@router.post("/rebuild", response_model=SuccessResponse)
def rebuild_endpoint():
    """Apply the configuration with the configured rebuild command; callers cannot choose the command."""
    try:
        output = rebuild_system()
        return SuccessResponse(message=output.strip() or "System configuration applied.")
    except Exception as e:
        raise to_http_exception("rebuilding system", e)
