"""Пакет для версий миграций"""

from database.migrations.versions.v001_initial_schema import InitialSchema
from database.migrations.versions.v002_active_slot_index import ActiveSlotIndex

ALL_MIGRATIONS = [InitialSchema, ActiveSlotIndex]

__all__ = ["InitialSchema", "ActiveSlotIndex", "ALL_MIGRATIONS"]
