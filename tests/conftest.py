"""Pytest configuration for dataknobs_validation tests."""

import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_validation import reset_settings, schema_factory  # noqa: E402


@dataclass
class Address:
    street: str | None = None
    city: str | None = None
    postalCode: str | None = None
    country: str | None = None


@dataclass
class User:
    name: str | None = None
    email: str | None = None
    age: int | float | None = None
    phone: str | None = None
    tags: list[str] = field(default_factory=list)
    address: Address | None = None


@pytest.fixture(autouse=True)
def default_settings():
    """Run every test against the default settings."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def address():
    """A valid US address."""
    return Address(street="1 Main St", city="Springfield", postalCode="12345", country="USA")


@pytest.fixture
def user(address):
    """A valid user living at a US address."""
    return User(
        name="Jane Doe",
        email="jane@example.com",
        age=30,
        phone="+1-555-123-4567",
        tags=["admin", "staff"],
        address=address,
    )


@pytest.fixture
def address_validator():
    """Address validator: every field required, five digit postal code."""
    sf = schema_factory
    return sf.object({
        "street": sf.string().min_length(1),
        "city": sf.string().min_length(1),
        "postalCode": sf.string().postal_code(),
        "country": sf.string().min_length(2),
    })


@pytest.fixture
def user_validator(address_validator):
    """User validator with an optional phone that must be +1- for US addresses."""
    sf = schema_factory
    validator = sf.object({
        "name": sf.string().min_length(2).max_length(50),
        "email": sf.string().email(),
        "age": sf.number().integer().range(0, 120),
        "phone": sf.string(),
        "tags": sf.array(sf.string()).max_length(5).unique(),
        "address": address_validator,
    }).mark_optional("phone", "tags")

    validator.add_dependency_rule(
        "phone",
        "phone",
        "address.country",
        lambda root, phone, country: country != "USA" or (phone is not None and phone.startswith("+1-")),
        "Phone numbers for US addresses must start with +1-",
    )
    return validator
