"""
Response schemas for the endpoint info listing.
"""

from typing import Any

from pydantic import BaseModel


class ParamInfo(BaseModel):
    """One declared parameter as shown in the endpoint info listing."""

    name: str
    type: str
    array: bool = False
    required: bool = False
    default: Any = None
    min: float | None = None
    max: float | None = None
    description: str | None = None


class EndpointInfo(BaseModel):
    path: str
    method: str
    version: str | None = None
    description: str | None = None
    params: list[ParamInfo] = []


class EndpointInfoList(BaseModel):
    data: list[EndpointInfo]
    count: int
