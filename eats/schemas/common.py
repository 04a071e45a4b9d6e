from pydantic import BaseModel
from typing import Optional


class CoreOutput(BaseModel):
    """Uniform result shape returned by every service operation."""

    ok: bool
    error: Optional[str] = None


class PaginationOutput(CoreOutput):
    total_pages: Optional[int] = None
    total_results: Optional[int] = None
