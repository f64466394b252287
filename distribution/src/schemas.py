from typing import Optional
from pydantic import BaseModel


class RequestInfo(BaseModel):
    method: str
    path: str
    app_id: int


class HealthStatus(BaseModel):
    status: str
    version: str


class ErrorResponse(BaseModel):
    detail: str


class TransitionReport(BaseModel):
    superseded: int = 0
    activated: int = 0
    expired: int = 0
    deactivated: int = 0
    failed: int = 0
    skipped: bool = False
    error: Optional[str] = None
