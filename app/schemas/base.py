from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    error: str
    error_code: Optional[str] = None
