from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Generic, TypeVar
from datetime import datetime, timezone

T = TypeVar('T')


class ErrorBody(BaseModel):
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    request_id: str = "unknown"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Envelope(BaseModel, Generic[T]):
    status: str
    data: Optional[T] = None
    error: Optional[ErrorBody] = None


def ok(data: Any = None) -> Dict[str, Any]:
    return {"status": "ok", "data": data, "error": None}
