"""FileEntry model."""

from pydantic import BaseModel


class FileEntry(BaseModel):
    path: str
    is_dir: bool = False
    size: int | None = None
