from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence, runtime_checkable

from faker import Faker

from typeforge.introspection.contract import PrimitiveKind


@runtime_checkable
class ValueSynthesizer(Protocol):
    def primitive(self, hint: str, kind: PrimitiveKind) -> object: ...

    def choice(self, values: Sequence[object]) -> object: ...


class FakerValueSynthesizer:
    """Primitive values from Faker, flavored by the field name.

    Name hints (``*id``, ``*email*``, ``*name*``, ``*date*``, ``*at``) only
    apply where they agree with the declared kind, so a ``bool`` field named
    ``paid`` still gets a boolean.
    """

    def __init__(self, seed: int | None = None, locale: str | None = None) -> None:
        self.faker = Faker(locale)
        if seed is not None:
            self.faker.seed_instance(seed)

    def choice(self, values: Sequence[object]) -> object:
        return self.faker.random.choice(list(values))

    def primitive(self, hint: str, kind: PrimitiveKind) -> object:
        key = hint.lower().replace("_", "")
        if kind in (PrimitiveKind.STRING, PrimitiveKind.UNKNOWN):
            if key.endswith("id") or key.endswith("uuid"):
                return self.faker.uuid4()
            if "email" in key:
                return self.faker.email()
            if "name" in key:
                return self.faker.name()
            if "date" in key or key.endswith("at"):
                if kind is PrimitiveKind.STRING:
                    return self._recent_datetime().isoformat()
                return self._recent_datetime()
        return self._for_kind(kind)

    def _for_kind(self, kind: PrimitiveKind) -> object:
        if kind is PrimitiveKind.STRING:
            return self.faker.word()
        if kind is PrimitiveKind.INTEGER:
            return self.faker.pyint(min_value=1, max_value=1000)
        if kind is PrimitiveKind.FLOAT:
            return self.faker.pyfloat(min_value=1, max_value=1000, right_digits=2)
        if kind is PrimitiveKind.DECIMAL:
            return self.faker.pydecimal(min_value=1, max_value=1000, right_digits=2)
        if kind is PrimitiveKind.BOOLEAN:
            return self.faker.pybool()
        if kind is PrimitiveKind.DATETIME:
            return self._recent_datetime()
        if kind is PrimitiveKind.DATE:
            return self.faker.date_between(start_date="-30d", end_date="today")
        if kind is PrimitiveKind.UUID:
            return self.faker.uuid4(cast_to=None)
        return self.faker.word()

    def _recent_datetime(self) -> datetime:
        return self.faker.date_time_between(start_date="-30d", end_date="now")
