"""Tests for contact detail checks."""

import pytest
from identity.contact import is_valid_email, is_valid_phone, is_valid_postcode


class TestEmail:
    @pytest.mark.parametrize("email", ["cat@example.com", "first.last+pets@shop.com.my", "a@b.co"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize(
        "email",
        ["", "plainaddress", "two@@example.com", "a@b", ".cat@example.com", "cat@example..com", "cat @example.com", "cat@-example.com", "cat;@example.com"],
    )
    def test_invalid(self, email):
        assert not is_valid_email(email)


class TestPhone:
    @pytest.mark.parametrize("number", ["0123456789", "+60 12-345 6789", "(03) 7956 1234"])
    def test_valid(self, number):
        assert is_valid_phone(number)

    @pytest.mark.parametrize("number", ["", "12345", "012-CALL-NOW", "+" + "1" * 16])
    def test_invalid(self, number):
        assert not is_valid_phone(number)


class TestPostcode:
    def test_five_digits(self):
        assert is_valid_postcode("47301")

    @pytest.mark.parametrize("postcode", ["", "4730", "473011", "4730A"])
    def test_anything_else(self, postcode):
        assert not is_valid_postcode(postcode)
