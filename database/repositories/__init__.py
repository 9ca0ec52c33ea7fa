"""Репозитории для работы с базой данных"""

from database.repositories.reservation_repository import ReservationRepository
from database.repositories.service_repository import ServiceRepository

__all__ = [
    "ReservationRepository",
    "ServiceRepository",
]
