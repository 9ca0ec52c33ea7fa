"""Исключения предметной области"""


class BookingError(Exception):
    """Базовая ошибка бронирования"""


class ValidationError(BookingError):
    """Отсутствует или некорректно обязательное поле"""


class InvalidTransition(ValidationError):
    """Недопустимый переход статуса"""

    def __init__(self, current: str, new: str):
        super().__init__(f"Cannot change status from '{current}' to '{new}'")
        self.current = current
        self.new = new


class NotFound(BookingError):
    """Запись не найдена"""


class ConflictError(BookingError):
    """Слот уже занят или нарушена уникальность"""


class StorageUnavailable(BookingError):
    """Хранилище недоступно"""

    def __init__(self, message: str = "Could not load or save data, please try again"):
        super().__init__(message)
