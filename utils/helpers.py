"""Вспомогательные функции"""

import random
import re
import string
import time
from datetime import date, datetime

from config import (
    ADMIN_IDS,
    RESERVATION_CODE_PREFIX,
    RESERVATION_CODE_SUFFIX_LENGTH,
    TIMEZONE,
)

_BASE36_ALPHABET = string.digits + string.ascii_uppercase


def now_local() -> datetime:
    """Текущее время в таймзоне приложения"""
    return datetime.now(TIMEZONE)


def today_local() -> date:
    """Текущая дата в таймзоне приложения"""
    return now_local().date()


def to_base36(value: int) -> str:
    """Число в base36 (верхний регистр)"""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"

    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_reservation_code() -> str:
    """Код бронирования: RES-<timestamp base36>-<4 символа>"""
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(
        random.choices(_BASE36_ALPHABET, k=RESERVATION_CODE_SUFFIX_LENGTH)
    )
    return f"{RESERVATION_CODE_PREFIX}-{timestamp}-{suffix}"


def phone_digits(phone: str) -> str:
    """Оставить в номере только цифры"""
    return re.sub(r"\D", "", phone or "")


def whatsapp_link(phone: str) -> str:
    """Ссылка wa.me для номера клиента"""
    return f"https://wa.me/{phone_digits(phone)}"


def is_admin(user_id: int) -> bool:
    """Проверка прав администратора"""
    return user_id in ADMIN_IDS
