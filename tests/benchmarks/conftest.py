"""Deterministic object generators for performance benchmarks.

All generators produce fixed, reproducible object graphs. No random values.
Three tiers: 10-member flat records, ~1000-node nested orders, and a cyclic
graph of 200 people who reference each other.
Each tier provides both an "equal" and a "different" pair generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import pytest


@dataclass(eq=False)
class Record:
    f0: int
    f1: int
    f2: int
    f3: str
    f4: str
    f5: str
    f6: float
    f7: float
    f8: bool
    f9: Decimal


@dataclass(eq=False)
class Line:
    sku: str
    quantity: int
    price: Decimal


@dataclass(eq=False)
class Order:
    id: int
    customer: str
    lines: list[Line]
    tags: dict[str, str]


@dataclass(eq=False)
class Person:
    id: int
    name: str
    friends: list[Person] = field(default_factory=list)


def make_record(seed: int = 0) -> Record:
    """Generate a flat 10-member record."""
    return Record(
        seed, seed + 1, seed + 2, f"s{seed}", "text", "more", 0.5, 1.5, True, Decimal("9.99")
    )


def make_orders(
    num_orders: int = 20, num_lines: int = 10, changed: int | None = None
) -> list[Order]:
    """Generate a list of orders, optionally changing one line's quantity."""
    orders = []
    for i in range(num_orders):
        lines = [Line(f"sku-{i}-{j}", j, Decimal(f"{j}.25")) for j in range(num_lines)]
        if changed == i:
            lines[-1].quantity += 1
        orders.append(Order(i, f"customer-{i}", lines, {"region": "eu", "channel": f"c{i % 3}"}))
    return orders


def make_people(num_people: int = 200, renamed: int | None = None) -> Person:
    """Generate a ring of people, each knowing the next two; returns the first."""
    people = [Person(i, f"person-{i}" if i != renamed else "renamed") for i in range(num_people)]
    for i, person in enumerate(people):
        person.friends.extend([people[(i + 1) % num_people], people[(i + 2) % num_people]])
    return people[0]


# --- Fixtures for each size tier ---


@pytest.fixture
def pair_flat_equal() -> tuple[Any, Any]:
    """Flat 10-member records with equal values."""
    return make_record(), make_record()


@pytest.fixture
def pair_flat_different() -> tuple[Any, Any]:
    """Flat 10-member records differing in four members."""
    return make_record(), make_record(1)


@pytest.fixture
def pair_nested_equal() -> tuple[Any, Any]:
    """20 orders x 10 lines, equal."""
    return make_orders(), make_orders()


@pytest.fixture
def pair_nested_different() -> tuple[Any, Any]:
    """20 orders x 10 lines, the last order's last line differs."""
    return make_orders(), make_orders(changed=19)


@pytest.fixture
def pair_cyclic_equal() -> tuple[Any, Any]:
    """200-person friendship ring, equal."""
    return make_people(), make_people()


@pytest.fixture
def pair_cyclic_different() -> tuple[Any, Any]:
    """200-person friendship ring, one person renamed."""
    return make_people(), make_people(renamed=150)
