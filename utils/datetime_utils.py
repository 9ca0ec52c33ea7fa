"""Утилиты для работы с датами и временем"""

from datetime import date, datetime
from typing import Tuple, Union

from config import DATE_FORMAT, TIME_FORMAT

DateLike = Union[date, str]


def parse_date(value: DateLike) -> date:
    """Парсинг даты YYYY-MM-DD

    Args:
        value: Строка YYYY-MM-DD или объект date

    Returns:
        Объект date (без времени и таймзоны)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, DATE_FORMAT).date()


def format_date(value: DateLike) -> str:
    """Дата в формате хранения YYYY-MM-DD"""
    return parse_date(value).strftime(DATE_FORMAT)


def is_valid_date(value: str) -> bool:
    """Проверка строки даты YYYY-MM-DD"""
    try:
        parse_date(value)
    except (TypeError, ValueError):
        return False
    return True


def is_valid_time(value: str) -> bool:
    """Проверка строки времени HH:MM (24ч)"""
    try:
        datetime.strptime(value, TIME_FORMAT)
    except (TypeError, ValueError):
        return False
    return len(value) == 5


def weekday_index(value: DateLike) -> int:
    """Номер дня недели: 0 = воскресенье ... 6 = суббота"""
    return (parse_date(value).weekday() + 1) % 7


def month_range(year: int, month: int) -> Tuple[str, str]:
    """Границы месяца [начало, начало следующего)

    Returns:
        Кортеж строк YYYY-MM-DD, конец не включается
    """
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT)
