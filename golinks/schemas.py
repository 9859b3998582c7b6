from typing import Annotated

from fastapi import Path
from pydantic import BaseModel, ConfigDict

SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1

# ids outside the signed 64-bit range can not name a row; reject them as bad input
LinkId = Annotated[int, Path(ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX)]


class LinkIn(BaseModel):
    path: str = ""
    url: str = ""


class LinkOut(BaseModel):
    id: int
    path: str
    url: str

    model_config = ConfigDict(from_attributes=True)


class ErrorOut(BaseModel):
    error: str
    message: str


class HealthOut(BaseModel):
    status: str
    links: int
