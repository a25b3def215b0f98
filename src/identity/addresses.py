"""Saved delivery addresses and checkout prefill."""

from pydantic import BaseModel, ConfigDict, field_validator

from identity.contact import is_valid_phone, is_valid_postcode
from ordering.checkout.form import ShippingDetails
from shared.client import BackendClient
from shared.exceptions import ValidationError


class Address(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    label: str = "Home"
    recipient_name: str
    phone: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str = "Malaysia"
    is_default: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return None if value is None else str(value)

    @property
    def street(self) -> str:
        return ", ".join(part for part in (self.address_line1, self.address_line2) if part)

    def check(self) -> "Address":
        errors: dict[str, list[str]] = {}
        if not is_valid_phone(self.phone):
            errors["phone"] = ["Enter a valid phone number"]
        if not is_valid_postcode(self.postal_code):
            errors["postal_code"] = ["Postcode must be 5 digits"]
        if errors:
            raise ValidationError(errors)
        return self

    def to_payload(self) -> dict:
        return self.model_dump(exclude={"id"})

    def to_shipping(self, email: str = "") -> ShippingDetails:
        return ShippingDetails(
            name=self.recipient_name,
            phone=self.phone,
            address=self.street,
            city=self.city,
            state=self.state,
            postcode=self.postal_code,
            email=email,
        )


def default_address(addresses: list[Address]) -> Address | None:
    """The flagged default, else the first saved address."""
    if not addresses:
        return None
    return next((a for a in addresses if a.is_default), addresses[0])


def prefill_shipping(addresses: list[Address], profile: dict | None = None) -> ShippingDetails:
    """Shipping form defaults for a member: the default address, else the profile."""
    profile = profile or {}
    email = profile.get("email") or ""
    address = default_address(addresses)
    if address is not None:
        return address.to_shipping(email=email)
    return ShippingDetails(
        name=profile.get("name") or "",
        phone=profile.get("phone") or "",
        address=profile.get("address") or "",
        email=email,
    )


async def list_addresses(client: BackendClient) -> list[Address]:
    data = await client.list_addresses()
    return [Address.model_validate(a) for a in data.get("addresses", [])]


async def save_address(client: BackendClient, address: Address) -> Address:
    address.check()
    if address.id is None:
        data = await client.add_address(address.to_payload())
    else:
        data = await client.update_address(address.id, address.to_payload())
    return Address.model_validate(data["address"])
