from fastapi import APIRouter

from nixshares.api.dtos import DataResponse, RemoteMountRequest, SuccessResponse, UnmountRequest
from nixshares.api.routers.errors import to_http_exception
from nixshares.mounts.cifs import CifsMountManager
from nixshares.mounts.state import is_mounted, list_all_shares
from nixshares.shares.models import MountOptions
from nixshares.shares.remote import RemoteShareManager

router = APIRouter(prefix="/mounts", tags=["Mounts"])


@router.get("", response_model=DataResponse)
def list_mounts_endpoint():
    try:
        manager = RemoteShareManager()
        return DataResponse(data=list_all_shares(manager.list_shares(), manager.fs_type))
    except Exception as e:
        raise to_http_exception("listing mounts", e)


@router.get("/status", response_model=DataResponse)
def mount_status_endpoint(mount_point: str):
    return DataResponse(data={"mount_point": mount_point, "is_mounted": is_mounted(mount_point)})


@router.post("/mount", response_model=SuccessResponse)
def mount_endpoint(request: RemoteMountRequest):
    options = MountOptions(uid=request.uid, gid=request.gid)
    if request.additional_opts is not None:
        options.additional_opts = request.additional_opts
    try:
        CifsMountManager().mount(
            request.remote_url,
            request.mount_point,
            request.username,
            request.password,
            options,
        )
        return SuccessResponse(message=f"Mounted {request.remote_url} on {request.mount_point}.")
    except Exception as e:
        raise to_http_exception("mounting share", e)


@router.post("/unmount", response_model=SuccessResponse)
def unmount_endpoint(request: UnmountRequest):
    try:
        CifsMountManager().unmount(request.mount_point)
        return SuccessResponse(message=f"Unmounted {request.mount_point}.")
    except Exception as e:
        raise to_http_exception("unmounting share", e)
