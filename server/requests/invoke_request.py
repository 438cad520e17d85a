"""InvokeRequest model."""

from pydantic import BaseModel


class InvokeRequest(BaseModel):
    # None continues a thread that was resumed after an interrupt
    message: str | None = None
