import re

from ...exceptions import InvalidPhoneFormat

# 11 ASCII digits: 1, then 3-9, then nine more
PHONE_PATTERN = re.compile(r"1[3-9][0-9]{9}")


def is_valid_phone(phone_number) -> bool:
    if not isinstance(phone_number, str):
        return False
    return PHONE_PATTERN.fullmatch(phone_number) is not None


def require_valid_phone(phone_number) -> str:
    if not is_valid_phone(phone_number):
        raise InvalidPhoneFormat()
    return phone_number
