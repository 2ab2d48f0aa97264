import random

import pytest

from smsauth.application.services.phone_validator import is_valid_phone, require_valid_phone
from smsauth.exceptions import InvalidPhoneFormat


def _expected(s: str) -> bool:
    return (
        len(s) == 11
        and s[0] == "1"
        and s[1] in "3456789"
        and all(ch in "0123456789" for ch in s)
    )


@pytest.mark.parametrize("phone", ["13800138000", "13912345678", "19999999999", "15000000000", "17012345678"])
def test_valid_numbers(phone):
    assert is_valid_phone(phone) is True


@pytest.mark.parametrize("phone", [
    "",
    "123",
    "abc",
    "1234567890123",
    "12800138000",   # second digit 2
    "10800138000",   # second digit 0
    "23800138000",   # first digit not 1
    "1380013800",    # 10 digits
    "138001380000",  # 12 digits
    "13800138000\n",
    " 13800138000",
    "+8613800138000",
    "1380013800a",
    "１３８００１３８０００",  # full-width digits
    "13800١٣٨000",
])
def test_invalid_numbers(phone):
    assert is_valid_phone(phone) is False


@pytest.mark.parametrize("value", [None, 13800138000, b"13800138000"])
def test_non_strings_are_rejected(value):
    assert is_valid_phone(value) is False


def test_matches_reference_predicate_on_generated_strings():
    rng = random.Random(20240601)
    alphabet = "0123456789" * 4 + "ab +-١"
    for _ in range(5000):
        length = rng.randint(0, 14)
        prefix = rng.choice(["", "1", "13", "19", "12", "10", "2"])
        body = "".join(rng.choice(alphabet) for _ in range(max(0, length - len(prefix))))
        candidate = prefix + body
        assert is_valid_phone(candidate) is _expected(candidate), candidate


def test_require_valid_phone():
    assert require_valid_phone("13800138000") == "13800138000"
    with pytest.raises(InvalidPhoneFormat):
        require_valid_phone("12345")
