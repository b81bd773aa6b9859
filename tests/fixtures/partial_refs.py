"""Classes whose annotations resolve only in part at runtime."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from tests.fixtures.enums import UserStatus

if TYPE_CHECKING:
    from tests.fixtures.address_dto import AddressDTO

T = TypeVar("T")


class Ticket:
    status: UserStatus
    address: AddressDTO


class Bag(Generic[T]):
    items: list[T]
    address: AddressDTO
