from functools import wraps
from telegram import Update
from telegram.ext import ContextTypes

import config

ADMIN_ID = config.ADMIN_ID
NOT_AUTHORIZED = "❌ You are not authorized."


def is_admin(user_id: int) -> bool:
    return bool(ADMIN_ID) and user_id == ADMIN_ID


def admin_only(func):
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if user is None or not is_admin(user.id):
            await update.effective_message.reply_text(NOT_AUTHORIZED)
            return
        return await func(update, context, *args, **kwargs)

    return wrapper
