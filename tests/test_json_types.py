from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from typeforge.json_types import to_plain_json_value
from tests.fixtures.address_dto import AddressDTO
from tests.fixtures.catalog_models import SupplierModel
from tests.fixtures.enums import Priority, UserStatus
from tests.fixtures.graph import TreeNode


def test_structured_values_become_plain_json() -> None:
    node = TreeNode.__new__(TreeNode)
    node.label = "root"
    node.children = []
    value = {
        "address": AddressDTO(street="Main", city="Porto", zip_code="4000"),
        "supplier": SupplierModel(supplier_id="s-1", name="Acme", email="a@b.c"),
        "node": node,
        "when": datetime(2024, 1, 2, 3, 4, 5),
        "day": date(2024, 1, 2),
        "status": UserStatus.ACTIVE,
        "priority": Priority.HIGH,
        "tags": ("a", "b"),
        "total": Decimal("1.50"),
    }

    assert to_plain_json_value(value) == {
        "address": {"street": "Main", "city": "Porto", "zip_code": "4000"},
        "supplier": {"supplier_id": "s-1", "name": "Acme", "email": "a@b.c"},
        "node": {"label": "root", "children": []},
        "when": "2024-01-02T03:04:05",
        "day": "2024-01-02",
        "status": "ACTIVE",
        "priority": 10,
        "tags": ["a", "b"],
        "total": "1.50",
    }


def test_sets_are_sorted() -> None:
    assert to_plain_json_value({3, 1, 2}) == [1, 2, 3]
