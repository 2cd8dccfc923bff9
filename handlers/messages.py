# handlers/messages.py
import logging

from aiogram import Router
from aiogram.types import Message

from app.engine import InteractionEngine
from app.errors import StoreUnavailable
from app.notifier import Notifier

logger = logging.getLogger(__name__)

router = Router()

FAILURE_TEXT = "Произошла ошибка. Попробуйте позже."


@router.message()
async def handle_message(message: Message, interactions: InteractionEngine, notifier: Notifier):
    chat_id = message.chat.id
    text = (message.text or "").strip()

    try:
        reply = await interactions.handle(chat_id, text)
        answer = reply.text
    except StoreUnavailable as e:
        logger.exception(f"Ошибка БД при обработке сообщения от {chat_id}: {e}")
        answer = FAILURE_TEXT

    await notifier.send(chat_id, answer)
