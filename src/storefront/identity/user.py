"""User aggregate: storefront customer accounts and their address book."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, HasMany, Integer, String

from storefront.domain import storefront
from storefront.errors import InvalidInput

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\d{10}$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[!@#$%^&*]).{6,}$")

PASSWORD_RULE = (
    "Password must be at least 6 characters and include upper and lower case "
    "letters, a digit and one of !@#$%^&*"
)


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


def normalize_email(email):
    return (email or "").strip().lower()


def validate_signup(name, email, password, phone):
    """Field checks for a new account, all reported at once."""
    errors = {}
    if not (name or "").strip():
        errors["name"] = ["Name is required"]
    if not EMAIL_RE.match(normalize_email(email)):
        errors["email"] = ["Enter a valid email address"]
    if not PASSWORD_RE.match(password or ""):
        errors["password"] = [PASSWORD_RULE]
    if not PHONE_RE.match((phone or "").strip()):
        errors["phone"] = ["Phone number must be 10 digits"]

    if errors:
        raise InvalidInput(next(iter(errors.values()))[0], errors)


@storefront.entity(part_of="User")
class Address:
    label: String(max_length=50)
    line1: String(required=True, max_length=255)
    line2: String(max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip: String(required=True, max_length=20)
    country: String(max_length=2, default="IN")
    phone: String(max_length=20)
    position: Integer(default=0, min_value=0)


@storefront.aggregate
class User:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255, sanitize=False)
    phone: String(required=True, max_length=10, unique=True)
    role: String(max_length=10, choices=Role, default=Role.USER.value)
    addresses: HasMany(Address)
    last_login_at: DateTime()
    created_at: DateTime()

    @classmethod
    def register(cls, name, email, password_hash, phone):
        return cls(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
            phone=phone.strip(),
            role=Role.USER.value,
            created_at=datetime.now(UTC),
        )

    def record_login(self):
        self.last_login_at = datetime.now(UTC)

    def add_address(self, line1, city, state, zip, label=None, line2=None, country=None, phone=None):
        address = Address(
            label=label,
            line1=line1,
            line2=line2,
            city=city,
            state=state,
            zip=zip,
            country=country or "IN",
            phone=phone,
            position=len(self.addresses),
        )
        self.add_addresses(address)
        return address

    @property
    def address_book(self):
        return sorted(self.addresses, key=lambda a: a.position)
