"""Сервис уведомлений"""

import logging
from typing import Optional

from aiogram import Bot

import config
from database.models import Reservation
from utils.datetime_utils import parse_date
from utils.helpers import whatsapp_link


def format_new_reservation(reservation: Reservation) -> str:
    """Текст уведомления о новой записи"""
    date_obj = parse_date(reservation.date)
    return (
        "🔔 Новая запись\n\n"
        f"Клиент: {reservation.name}\n"
        f"WhatsApp: {reservation.whatsapp} ({whatsapp_link(reservation.whatsapp)})\n"
        f"Услуга: {reservation.service}\n"
        f"Дата: {date_obj.strftime('%d.%m.%Y')}\n"
        f"Время: {reservation.time}\n"
        f"Статус: {reservation.status}\n"
        f"Код: {reservation.reservation_code}"
    )


class NotificationService:
    """Уведомления админам через Telegram-бота

    Ошибки отправки только логируются и никогда не пробрасываются.
    """

    def __init__(self, bot: Optional[Bot], admin_ids=None):
        self.bot = bot
        self.admin_ids = list(config.ADMIN_IDS if admin_ids is None else admin_ids)

    @classmethod
    def from_config(cls) -> "NotificationService":
        """Сервис на боте из BOT_TOKEN, без токена уведомления отключены"""
        if not config.BOT_TOKEN:
            logging.info("BOT_TOKEN not set, admin notifications disabled")
            return cls(None)
        return cls(Bot(token=config.BOT_TOKEN))

    async def close(self):
        """Закрыть HTTP-сессию бота"""
        if self.bot is not None:
            await self.bot.session.close()

    async def notify_admin_new_reservation(self, reservation: Reservation) -> int:
        """Уведомление админам о новой записи

        Returns:
            Количество успешно отправленных сообщений
        """
        if self.bot is None or not self.admin_ids:
            logging.debug("Notifications disabled, skipping")
            return 0

        try:
            message_text = format_new_reservation(reservation)
        except Exception as e:
            logging.error(f"Error formatting notification for {reservation.id}: {e}")
            return 0

        sent = 0
        for admin_id in self.admin_ids:
            try:
                await self.bot.send_message(admin_id, message_text)
                sent += 1
            except Exception as e:
                logging.error(f"Failed to notify admin {admin_id}: {e}")
        return sent
