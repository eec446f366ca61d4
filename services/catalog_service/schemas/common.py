from typing import Annotated, Generic, List, TypeVar

from pydantic import BaseModel, StringConstraints

T = TypeVar("T")

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    data: T


class Page(BaseModel, Generic[T]):
    docs: List[T]
    total_count: int
    total_pages: int
    current_page: int
    page_size: int


class DeleteConfirmation(BaseModel):
    id: str
    deleted: bool = True
