"""Error body shared by every non-2xx response (``application/problem+json``)."""

from typing import Optional

from pydantic import BaseModel


class ProblemDetail(BaseModel):
    """RFC 9457 problem document, built by ``weatherapp.api.errors``."""

    type: str = "about:blank"
    title: str
    status: int
    detail: Optional[str] = None
    instance: Optional[str] = None
