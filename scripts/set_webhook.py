# scripts/set_webhook.py
import asyncio

from aiogram import Bot

import config


async def set_webhook():
    url = config.require_env("BASE_WEBHOOK_URL") + config.WEBHOOK_PATH
    bot = Bot(config.require_env("TELEGRAM_TOKEN"))
    try:
        await bot.set_webhook(url, secret_token=config.require_env("TELEGRAM_WEBHOOK_SECRET"))
        info = await bot.get_webhook_info()
    finally:
        await bot.session.close()
    print(f"✅ Webhook: {info.url} (pending updates: {info.pending_update_count})")

if __name__ == "__main__":
    asyncio.run(set_webhook())
