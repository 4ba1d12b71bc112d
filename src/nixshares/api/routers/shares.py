from fastapi import APIRouter, HTTPException

from nixshares.api.dtos import DataResponse, SuccessResponse
from nixshares.api.routers.errors import to_http_exception
from nixshares.shares.local import LocalShareManager
from nixshares.shares.models import LocalShare, RemoteShare
from nixshares.shares.remote import RemoteShareManager

router = APIRouter(prefix="/shares", tags=["Shares"])


@router.get("/local", response_model=DataResponse)
def list_local_shares_endpoint():
    try:
        return DataResponse(data=LocalShareManager().list_shares())
    except Exception as e:
        raise to_http_exception("listing samba shares", e)


@router.get("/local/{name}", response_model=DataResponse)
def get_local_share_endpoint(name: str):
    try:
        return DataResponse(data=LocalShareManager().get_share(name))
    except Exception as e:
        raise to_http_exception("getting samba share", e)


@router.post("/local", response_model=SuccessResponse)
def create_local_share_endpoint(share: LocalShare):
    try:
        LocalShareManager().create_share(share)
        return SuccessResponse(message=f"Share {share.name} created.")
    except Exception as e:
        raise to_http_exception("creating samba share", e)


@router.put("/local/{name}", response_model=SuccessResponse)
def update_local_share_endpoint(name: str, share: LocalShare):
    try:
        LocalShareManager().update_share(name, share)
        return SuccessResponse(message=f"Share {name} updated.")
    except Exception as e:
        raise to_http_exception("updating samba share", e)


@router.delete("/local/{name}", response_model=SuccessResponse)
def delete_local_share_endpoint(name: str):
    try:
        LocalShareManager().delete_share(name)
        return SuccessResponse(message=f"Share {name} deleted.")
    except Exception as e:
        raise to_http_exception("deleting samba share", e)


@router.get("/remote", response_model=DataResponse)
def list_remote_shares_endpoint():
    try:
        return DataResponse(data=RemoteShareManager().list_shares())
    except Exception as e:
        raise to_http_exception("listing remote shares", e)


@router.post("/remote", response_model=SuccessResponse)
def create_remote_share_endpoint(share: RemoteShare):
    try:
        RemoteShareManager().create_share(share)
        return SuccessResponse(message=f"Remote share {share.name} created.")
    except Exception as e:
        raise to_http_exception("creating remote share", e)


@router.put("/remote", response_model=SuccessResponse)
def update_remote_share_endpoint(mount_point: str, share: RemoteShare):
    # mount points contain slashes, so they travel as a query parameter
    try:
        RemoteShareManager().update_share(mount_point, share)
        return SuccessResponse(message=f"Remote share {mount_point} updated.")
    except Exception as e:
        raise to_http_exception("updating remote share", e)


@router.delete("/remote", response_model=SuccessResponse)
def delete_remote_share_endpoint(mount_point: str):
    if not mount_point:
        raise HTTPException(status_code=400, detail="mount_point is required")
    try:
        RemoteShareManager().delete_share(mount_point)
        return SuccessResponse(message=f"Remote share {mount_point} deleted.")
    except Exception as e:
        raise to_http_exception("deleting remote share", e)
