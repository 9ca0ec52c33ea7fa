"""Защита от двойного бронирования на уровне БД"""

from database.migrations.migration_manager import Migration


class ActiveSlotIndex(Migration):
    version = 2
    description = "Unique (service, date, time) for pending and approved reservations"

    async def upgrade(self, db):
        # Названия услуг уникальны, поэтому снимок названия годится как ключ слота
        await db.execute(
            """CREATE UNIQUE INDEX IF NOT EXISTS idx_reservations_active_slot
            ON reservations(service, date, time)
            WHERE status IN ('pending', 'approved')"""
        )

    async def downgrade(self, db):
        await db.execute("DROP INDEX IF EXISTS idx_reservations_active_slot")
