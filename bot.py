import asyncio
import logging
import signal
import sys
import time

from telegram import Update
from telegram.error import NetworkError
from telegram.ext import (
    Application,
    CommandHandler,
    InlineQueryHandler,
    MessageHandler,
    TypeHandler,
    filters,
)

import config
import db
import handlers
import inline
import uptime
from commands import bot_commands
from helpers.admin_utils import STATE_KEY, BotState


async def post_init(application: Application):
    state = BotState(stop_event=asyncio.Event())
    application.bot_data[STATE_KEY] = state
    state.server_task = uptime.start(config.PORT, state.stop_event)
    await application.bot.set_my_commands(bot_commands())


async def post_shutdown(application: Application):
    state = application.bot_data.get(STATE_KEY)
    if state is None or state.stop_event is None:
        return
    state.stop_event.set()
    if state.server_task is None:
        return
    try:
        await state.server_task
    except Exception:
        logging.exception("Uptime server stopped with an error")


def register_handlers(application: Application) -> None:
    application.add_handler(TypeHandler(Update, handlers.remember_user), group=-1)
    for name, callback in handlers.HANDLERS.items():
        application.add_handler(CommandHandler(name, callback))
    application.add_handler(MessageHandler(filters.TEXT & (~filters.COMMAND), handlers.track_activity))
    application.add_handler(InlineQueryHandler(inline.inline_query))
    application.add_error_handler(handlers.error_handler)


def build_application(token: str) -> Application:
    application = (
        Application.builder()
        .token(token)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )
    register_handlers(application)
    return application


def safe_polling(app):
    while True:
        try:
            app.run_polling(
                allowed_updates=Update.ALL_TYPES,
                stop_signals=(signal.SIGINT, signal.SIGTERM),
            )
            return
        except NetworkError as e:
            logging.warning(f"Network error: {e}. Retrying in 10 sec...")
            time.sleep(10)
        except Exception as e:
            logging.exception("Unexpected error in polling:", exc_info=e)
            time.sleep(10)


def main():
    if not config.TOKEN:
        logging.error("BOT_TOKEN environment variable is not set!")
        sys.exit(1)
    db.setup_db()
    application = build_application(config.TOKEN)
    logging.info("Bot is running...")
    safe_polling(application)


if __name__ == "__main__":
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    main()
