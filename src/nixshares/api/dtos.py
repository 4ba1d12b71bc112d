from typing import Any, List, Optional

from pydantic import BaseModel


class BaseResponse(BaseModel):
    status: str = "success"
    message: Optional[str] = None


class SuccessResponse(BaseResponse):
    pass


class DataResponse(BaseResponse):
    data: Optional[Any] = None


class RemoteMountRequest(BaseModel):
    remote_url: str
    mount_point: str
    username: str
    password: str
    uid: Optional[int] = None
    gid: Optional[int] = None
    additional_opts: Optional[List[str]] = None


class UnmountRequest(BaseModel):
    mount_point: str

