"""Shipping details captured at checkout and their local validation.

Validation runs before any network call; a failing form never reaches the
order service.
"""

from dataclasses import asdict, dataclass

from identity.contact import is_valid_email, is_valid_phone, is_valid_postcode
from shared.exceptions import ValidationError

REQUIRED_FIELDS = {
    "name": "Full name is required",
    "phone": "Phone number is required",
    "address": "Shipping address is required",
    "city": "City is required",
    "state": "State is required",
    "postcode": "Postcode is required",
}


@dataclass(frozen=True)
class ShippingDetails:
    name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postcode: str = ""
    email: str = ""
    agreed_to_policy: bool = False

    def cleaned(self) -> "ShippingDetails":
        values = {k: v.strip() if isinstance(v, str) else v for k, v in asdict(self).items()}
        values["email"] = values["email"].lower()
        return ShippingDetails(**values)

    def validate(self, guest: bool) -> "ShippingDetails":
        """Return the cleaned details or raise ValidationError listing every problem.

        Guests must give an email for the order confirmation; members' orders
        are tied to their account, so an email is only checked when present.
        """
        details = self.cleaned()
        errors: dict[str, list[str]] = {}

        for field_name, message in REQUIRED_FIELDS.items():
            if not getattr(details, field_name):
                errors.setdefault(field_name, []).append(message)

        if details.phone and not is_valid_phone(details.phone):
            errors.setdefault("phone", []).append("Enter a valid phone number")

        if details.postcode and not is_valid_postcode(details.postcode):
            errors.setdefault("postcode", []).append("Postcode must be 5 digits")

        if guest and not details.email:
            errors.setdefault("email", []).append("Email is required for guest checkout")
        elif details.email and not is_valid_email(details.email):
            errors.setdefault("email", []).append("Enter a valid email address")

        if not details.agreed_to_policy:
            errors.setdefault("agreed_to_policy", []).append("Please agree to the terms and refund policy")

        if errors:
            raise ValidationError(errors)
        return details

    def to_payload(self, guest: bool = False) -> dict[str, str]:
        payload = {
            "shipping_name": self.name,
            "shipping_phone": self.phone,
            "shipping_address": self.address,
            "shipping_city": self.city,
            "shipping_state": self.state,
            "shipping_postcode": self.postcode,
        }
        if guest:
            payload["guest_email"] = self.email
        return payload
