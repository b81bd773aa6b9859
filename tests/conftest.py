from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from typeforge.engine import TypeForge
from typeforge.registry import RegistryOptions, TypeRegistry
from typeforge.values import FakerValueSynthesizer
from tests.fixtures.address_dto import AddressDTO
from tests.fixtures.enums import UserStatus
from tests.fixtures.order_dto import OrderDTO
from tests.fixtures.pageable_dto import EnvelopeDTO, PageableDTO
from tests.fixtures.task_dto import TaskDTO
from tests.fixtures.user_dto import UserDTO

FIXTURES_DIR = ROOT / "tests" / "fixtures"


@pytest.fixture
def registry() -> TypeRegistry:
    registry = TypeRegistry()
    registry.register(AddressDTO)
    registry.register(OrderDTO)
    registry.register(
        UserDTO,
        RegistryOptions(allowed_values={"status": [status.value for status in UserStatus]}),
    )
    registry.register(PageableDTO)
    registry.register(EnvelopeDTO)
    registry.register(TaskDTO)
    return registry


@pytest.fixture
def forge(registry: TypeRegistry) -> TypeForge:
    return TypeForge(registry, synthesizer=FakerValueSynthesizer(seed=1234))


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
