from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest

from typeforge.introspection.contract import PrimitiveKind
from typeforge.values import FakerValueSynthesizer, ValueSynthesizer


def test_faker_synthesizer_satisfies_protocol() -> None:
    assert isinstance(FakerValueSynthesizer(seed=1), ValueSynthesizer)


def test_seeded_synthesizers_are_deterministic() -> None:
    first = FakerValueSynthesizer(seed=42)
    second = FakerValueSynthesizer(seed=42)
    for hint, kind in (
        ("title", PrimitiveKind.STRING),
        ("count", PrimitiveKind.INTEGER),
        ("email", PrimitiveKind.STRING),
    ):
        assert first.primitive(hint, kind) == second.primitive(hint, kind)
    assert first.choice(["a", "b", "c"]) == second.choice(["a", "b", "c"])


@pytest.mark.parametrize("hint", ["id", "user_id", "orderId", "session_uuid"])
def test_identifier_hints_yield_uuid_strings(hint: str) -> None:
    value = FakerValueSynthesizer(seed=1).primitive(hint, PrimitiveKind.STRING)
    assert isinstance(value, str)
    uuid.UUID(value)


def test_email_and_name_hints() -> None:
    synthesizer = FakerValueSynthesizer(seed=1)
    assert "@" in synthesizer.primitive("contact_email", PrimitiveKind.STRING)
    name = synthesizer.primitive("first_name", PrimitiveKind.STRING)
    assert isinstance(name, str) and name


def test_date_hints_follow_declared_kind() -> None:
    synthesizer = FakerValueSynthesizer(seed=1)
    assert isinstance(synthesizer.primitive("created_at", PrimitiveKind.UNKNOWN), datetime)
    text = synthesizer.primitive("delivery_date", PrimitiveKind.STRING)
    assert isinstance(text, str)
    datetime.fromisoformat(text)


def test_name_hints_do_not_override_non_string_kinds() -> None:
    synthesizer = FakerValueSynthesizer(seed=1)
    assert isinstance(synthesizer.primitive("paid", PrimitiveKind.BOOLEAN), bool)
    assert isinstance(synthesizer.primitive("parent_id", PrimitiveKind.INTEGER), int)
    assert isinstance(synthesizer.primitive("updated_at", PrimitiveKind.DATE), date)


def test_kind_dispatch() -> None:
    synthesizer = FakerValueSynthesizer(seed=9)
    number = synthesizer.primitive("quantity", PrimitiveKind.INTEGER)
    assert isinstance(number, int) and 1 <= number <= 1000
    assert isinstance(synthesizer.primitive("price", PrimitiveKind.FLOAT), float)
    assert isinstance(synthesizer.primitive("flag", PrimitiveKind.BOOLEAN), bool)
    assert isinstance(synthesizer.primitive("when", PrimitiveKind.DATETIME), datetime)
    assert isinstance(synthesizer.primitive("token", PrimitiveKind.UUID), uuid.UUID)
    filler = synthesizer.primitive("blob", PrimitiveKind.UNKNOWN)
    assert isinstance(filler, str) and filler


def test_choice_draws_from_values() -> None:
    synthesizer = FakerValueSynthesizer(seed=5)
    drawn = {synthesizer.choice(("x", "y")) for _ in range(50)}
    assert drawn <= {"x", "y"}


def test_decimal_kind() -> None:
    value = FakerValueSynthesizer(seed=2).primitive("total", PrimitiveKind.DECIMAL)
    assert isinstance(value, Decimal)
