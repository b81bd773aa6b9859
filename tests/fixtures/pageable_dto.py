from dataclasses import dataclass
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass
class PageableDTO(Generic[T]):
    page: int
    limit: int
    total: int
    results: List[T]


@dataclass
class EnvelopeDTO(Generic[T]):
    request_id: str
    payload: T
