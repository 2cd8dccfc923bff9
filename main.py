import logging
import random

from aiohttp import web
from aiogram import Bot, Dispatcher
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

import config
from app.database.db import async_session, engine, init_db
from app.engine import InteractionEngine
from app.notifier import Notifier
from app.stores.ledger import SqlLedger
from app.stores.sessions import make_session_store
from handlers import messages
from handlers.dashboard import setup_dashboard

# Настройка логирования
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=config.LOG_LEVEL,
)
logger = logging.getLogger(__name__)


async def on_startup(bot: Bot):
    await init_db(engine)
    if config.BASE_WEBHOOK_URL:
        await bot.set_webhook(
            f"{config.BASE_WEBHOOK_URL}{config.WEBHOOK_PATH}",
            secret_token=config.WEBHOOK_SECRET,
        )
        logger.info(f"Webhook установлен: {config.BASE_WEBHOOK_URL}{config.WEBHOOK_PATH}")
    else:
        logger.warning("BASE_WEBHOOK_URL не задан, webhook не регистрируется")


async def on_shutdown():
    await engine.dispose()
    logger.info("Бот остановлен")


def create_app(bot: Bot) -> web.Application:
    ledger = SqlLedger(async_session)
    sessions = make_session_store(config.SESSION_BACKEND, async_session)
    interactions = InteractionEngine(
        ledger,
        sessions,
        video_url=config.VIDEO_URL,
        ad_url=config.AD_URL,
        rng=random.Random(),
    )

    dp = Dispatcher(interactions=interactions, notifier=Notifier(bot))
    dp.include_router(messages.router)
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    app = web.Application()
    # Telegram ждёт 200, поэтому апдейт обрабатывается в фоне
    SimpleRequestHandler(
        dispatcher=dp,
        bot=bot,
        handle_in_background=True,
        secret_token=config.WEBHOOK_SECRET,
    ).register(app, path=config.WEBHOOK_PATH)
    setup_dashboard(app, ledger)
    setup_application(app, dp, bot=bot)
    return app


def main():
    config.require_env("TELEGRAM_TOKEN")
    config.require_env("TELEGRAM_WEBHOOK_SECRET")

    bot = Bot(config.TELEGRAM_TOKEN)
    app = create_app(bot)

    logger.info("Бот запущен")
    web.run_app(app, host=config.WEB_SERVER_HOST, port=config.WEB_SERVER_PORT)


if __name__ == "__main__":
    main()
