"""Unit tests for order number generators."""

import re

import pytest
from services.petstore_service.generators import (
    SequentialOrderNumberGenerator,
    TimeBasedOrderNumberGenerator,
    UUIDOrderNumberGenerator,
    build_generator,
)


@pytest.mark.unit
def test_uuid_generator_format():
    number = UUIDOrderNumberGenerator().generate()
    assert re.fullmatch(r"ORD-[0-9A-F]{10}", number)


@pytest.mark.unit
def test_sequential_generator_counts_and_wraps():
    generator = SequentialOrderNumberGenerator(clock=lambda: 1700000000.9)

    assert generator.generate() == "ORD-1700000000-00001"
    assert generator.generate() == "ORD-1700000000-00002"

    generator._counter = iter([100001])
    assert generator.generate() == "ORD-1700000000-00001"


@pytest.mark.unit
def test_timebased_generator_uses_clock():
    generator = TimeBasedOrderNumberGenerator(clock=lambda: 1700000123.456)

    number = generator.generate()

    # 1700000123456 ms -> last six digits 123456
    assert re.fullmatch(r"ORD-123456\d{4}", number)


@pytest.mark.unit
def test_timebased_generator_pads_millis():
    generator = TimeBasedOrderNumberGenerator(clock=lambda: 1.5)
    assert re.fullmatch(r"ORD-001500\d{4}", generator.generate())


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, expected",
    [
        ("uuid", UUIDOrderNumberGenerator),
        ("Sequential", SequentialOrderNumberGenerator),
        ("timebased", TimeBasedOrderNumberGenerator),
        ("bogus", UUIDOrderNumberGenerator),
        (None, UUIDOrderNumberGenerator),
    ],
)
def test_build_generator(name, expected):
    assert isinstance(build_generator(name), expected)
