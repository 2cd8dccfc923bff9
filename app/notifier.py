import logging

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

logger = logging.getLogger(__name__)


class Notifier:
    """Best-effort delivery of reply text. Failures are logged, never raised."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send(self, chat_id: int, text: str) -> bool:
        try:
            await self.bot.send_message(chat_id, text)
        except TelegramAPIError as e:
            logger.error(f"Не удалось отправить сообщение пользователю {chat_id}: {e}")
            return False
        return True
