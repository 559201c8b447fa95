import asyncio
import logging
from telegram import ChatPermissions, Update
from telegram.constants import MessageLimit, ParseMode
from telegram.error import BadRequest, Forbidden, TelegramError
from telegram.ext import ContextTypes

import db
import llm
import replies
from commands import generate_menu
from helpers import command_argument, parse_user_id
from helpers.admin_utils import get_state
from helpers.duration import parse_duration
from helpers.permissions import admin_only, is_admin

# how many messages /clear removes, counting the command itself
CLEAR_WINDOW = 5

MUTED = ChatPermissions(can_send_messages=False)
UNMUTED = ChatPermissions(
    can_send_messages=True,
    can_send_audios=True,
    can_send_documents=True,
    can_send_photos=True,
    can_send_videos=True,
    can_send_video_notes=True,
    can_send_voice_notes=True,
    can_send_polls=True,
    can_send_other_messages=True,
    can_add_web_page_previews=True,
)


async def _safe_send_message(bot, chat_id: int, text: str, **kwargs) -> bool:
    """Send a Telegram message; report failure instead of raising."""
    try:
        await bot.send_message(chat_id, text, **kwargs)
    except Forbidden:
        logging.warning("Cannot send message to %s: forbidden", chat_id)
        return False
    except Exception as e:
        logging.warning("Error sending message to %s: %s", chat_id, e)
        return False
    return True


def _argument(update: Update) -> str:
    return command_argument(update.effective_message.text)


def static_reply(text: str):
    """Build a handler that always answers with ``text``."""
    async def handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.effective_message.reply_text(text)
    return handler


def generated_reply(make_reply):
    """Build a handler answering with a fresh ``make_reply()`` each time."""
    async def handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.effective_message.reply_text(make_reply())
    return handler


def text_reply(transform, usage: str, parse_mode=None):
    """Build a handler that transforms the command argument."""
    async def handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
        text = _argument(update)
        if not text:
            await update.effective_message.reply_text(usage)
            return
        await update.effective_message.reply_text(transform(text), parse_mode=parse_mode)
    return handler


echo = text_reply(replies.echo, "❌ Usage: /echo [text]")
reverse = text_reply(replies.reverse, "❌ Usage: /reverse [text]")
upper = text_reply(replies.upper, "❌ Usage: /upper [text]")
lower = text_reply(replies.lower, "❌ Usage: /lower [text]")
choose = text_reply(replies.choose, "❌ Usage: /choose [word1] [word2] ...")
calc = text_reply(replies.calc, "❌ Usage: /calc [expression]")
rate = text_reply(replies.rate, "❌ Usage: /rate [thing]", parse_mode=ParseMode.MARKDOWN)
short = text_reply(replies.short, "❌ Usage: /short https://example.com")


async def menu(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.effective_message.reply_text(generate_menu(), parse_mode=ParseMode.MARKDOWN)


async def myid(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.effective_message.reply_text(f"🪪 Your ID: {update.effective_user.id}")


async def love(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.effective_message.reply_text(replies.love(_argument(update) or None))


async def ask(update: Update, context: ContextTypes.DEFAULT_TYPE):
    question = _argument(update)
    if not question:
        await update.effective_message.reply_text("❌ Usage: /ask [your question]")
        return
    _, answer = await llm.ask(question)
    await update.effective_message.reply_text(answer[:MessageLimit.MAX_TEXT_LENGTH])


async def translate(update: Update, context: ContextTypes.DEFAULT_TYPE):
    message = update.effective_message
    if not message.reply_to_message:
        await message.reply_text("❌ Reply to a message to translate it.")
        return
    original = message.reply_to_message.text
    if not original:
        await message.reply_text("❌ That message has no text to translate.")
        return
    ok, translated = await llm.translate(original)
    if not ok:
        await message.reply_text(translated)
        return
    text = f"🇬🇧 *Translation:*\n{translated}"[:MessageLimit.MAX_TEXT_LENGTH]
    try:
        await message.reply_text(text, parse_mode=ParseMode.MARKDOWN)
    except BadRequest:
        # model output is not always valid Markdown
        await message.reply_text(f"🇬🇧 Translation:\n{translated}"[:MessageLimit.MAX_TEXT_LENGTH])


async def active(update: Update, context: ContextTypes.DEFAULT_TYPE):
    users = get_state(context).seen_users
    if not users:
        await update.effective_message.reply_text("❌ No active users.")
        return
    listing = "\n".join(str(uid) for uid in sorted(users))
    await update.effective_message.reply_text(f"👥 Active users:\n{listing}")


@admin_only
async def shutdown(update: Update, context: ContextTypes.DEFAULT_TYPE):
    get_state(context).active = False
    logging.info("Bot switched OFF by %s", update.effective_user.id)
    await update.effective_message.reply_text("⚠️ Bot is now OFF. Use /poweron to turn it back ON.")


@admin_only
async def poweron(update: Update, context: ContextTypes.DEFAULT_TYPE):
    get_state(context).active = True
    logging.info("Bot switched ON by %s", update.effective_user.id)
    await update.effective_message.reply_text("⚡ Bot is now ON ✅")


@admin_only
async def broadcast(update: Update, context: ContextTypes.DEFAULT_TYPE):
    text = _argument(update)
    if not text:
        await update.effective_message.reply_text("❌ Specify a message: /broadcast <message>")
        return
    user_ids = await asyncio.to_thread(db.list_active_user_ids)
    sent = 0
    for uid in user_ids:
        if await _safe_send_message(context.bot, uid, f"📢 Admin broadcast:\n{text}"):
            sent += 1
    logging.info("Broadcast delivered to %s of %s users", sent, len(user_ids))
    await update.effective_message.reply_text(f"✅ Broadcast sent to {sent} users!")


@admin_only
async def ban(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user_id = parse_user_id(_argument(update))
    if not user_id:
        await update.effective_message.reply_text("❌ Specify a user ID: /ban <id>")
        return
    await asyncio.to_thread(db.ban, user_id)
    await update.effective_message.reply_text(f"🚫 User {user_id} is now banned.")


@admin_only
async def unban(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user_id = parse_user_id(_argument(update))
    if not user_id:
        await update.effective_message.reply_text("❌ Specify a user ID: /unban <id>")
        return
    await asyncio.to_thread(db.unban, user_id)
    await update.effective_message.reply_text(f"✅ User {user_id} is now unbanned.")


@admin_only
async def listbanned(update: Update, context: ContextTypes.DEFAULT_TYPE):
    banned = await asyncio.to_thread(db.list_banned_user_ids)
    listing = "\n".join(str(uid) for uid in banned) or "None"
    await update.effective_message.reply_text(f"🚫 Banned users:\n{listing}")


@admin_only
async def stats(update: Update, context: ContextTypes.DEFAULT_TYPE):
    count = await asyncio.to_thread(db.count_active_users)
    status = "ON" if get_state(context).active else "OFF"
    await update.effective_message.reply_text(f"📊 BOT STATS\nUsers: {count}\nStatus: {status}")


def _replied_user_id(update: Update):
    replied = update.effective_message.reply_to_message
    if replied is None or replied.from_user is None:
        return None
    return replied.from_user.id


@admin_only
async def kick(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user_id = _replied_user_id(update) or parse_user_id(_argument(update))
    if not user_id:
        await update.effective_message.reply_text("❌ Reply to a user or specify user ID: /kick <id>")
        return
    chat_id = update.effective_chat.id
    try:
        await context.bot.ban_chat_member(chat_id, user_id)
        await context.bot.unban_chat_member(chat_id, user_id, only_if_banned=True)
    except TelegramError:
        logging.exception("Kick error")
        await update.effective_message.reply_text("❌ Failed to kick user. Make sure I'm an admin with ban permissions.")
        return
    await update.effective_message.reply_text(f"👢 User {user_id} has been kicked from the group.")


@admin_only
async def clear(update: Update, context: ContextTypes.DEFAULT_TYPE):
    chat_id = update.effective_chat.id
    message_id = update.effective_message.message_id
    deleted = 0
    for offset in range(CLEAR_WINDOW):
        try:
            await context.bot.delete_message(chat_id, message_id - offset)
            deleted += 1
        except TelegramError as e:
            logging.debug("Cannot delete message %s in %s: %s", message_id - offset, chat_id, e)
    logging.info("Cleared %s messages in %s", deleted, chat_id)


@admin_only
async def tagall(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.effective_message.reply_text(replies.TAG_ALL)


async def _unmute_job(context: ContextTypes.DEFAULT_TYPE):
    job = context.job
    state = get_state(context)
    if state.mutes.get((job.chat_id, job.user_id)) is job:
        del state.mutes[(job.chat_id, job.user_id)]
    try:
        await context.bot.restrict_chat_member(job.chat_id, job.user_id, permissions=UNMUTED)
    except TelegramError:
        logging.exception("Auto-unmute failed for %s in %s", job.user_id, job.chat_id)
        return
    await _safe_send_message(context.bot, job.chat_id, f"🔊 User unmuted after {job.data['duration']}")


@admin_only
async def mute(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user_id = _replied_user_id(update)
    if not user_id:
        await update.effective_message.reply_text("❌ Reply to a user to mute")
        return
    duration = (_argument(update).split() or [""])[0]
    seconds = parse_duration(duration)
    if seconds is None:
        await update.effective_message.reply_text("❌ Usage: /mute [duration] (e.g., /mute 10m)")
        return
    chat_id = update.effective_chat.id
    try:
        await context.bot.restrict_chat_member(chat_id, user_id, permissions=MUTED)
    except TelegramError:
        logging.exception("Mute error")
        await update.effective_message.reply_text("❌ Failed to mute user")
        return
    job = context.job_queue.run_once(
        _unmute_job,
        when=seconds,
        data={"duration": duration},
        chat_id=chat_id,
        user_id=user_id,
        name=f"unmute:{chat_id}:{user_id}",
    )
    get_state(context).replace_mute(chat_id, user_id, job)
    await update.effective_message.reply_text(f"🔇 User muted for {duration}")


@admin_only
async def unmute(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user_id = _replied_user_id(update)
    if not user_id:
        await update.effective_message.reply_text("❌ Reply to the user you want to unmute")
        return
    chat_id = update.effective_chat.id
    get_state(context).cancel_mute(chat_id, user_id)
    try:
        await context.bot.restrict_chat_member(chat_id, user_id, permissions=UNMUTED)
    except TelegramError:
        logging.exception("Unmute error")
        await update.effective_message.reply_text("❌ Failed to unmute user")
        return
    await update.effective_message.reply_text("🔊 User unmuted")


async def remember_user(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user = update.effective_user
    if user is not None:
        get_state(context).remember(user.id)


async def _track(user_id: int) -> None:
    try:
        if await asyncio.to_thread(db.is_banned, user_id):
            return
        await asyncio.to_thread(db.record_activity, user_id)
    except Exception:
        logging.exception("Failed to record activity for %s", user_id)


async def track_activity(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Record plain text senders; banned users and a switched-off bot skip it."""
    user = update.effective_user
    if user is None:
        return
    if not get_state(context).active and not is_admin(user.id):
        return
    context.application.create_task(_track(user.id), update=update)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    logging.error("Exception while handling update %s", update, exc_info=context.error)


# command name -> handler; plain-text commands are added from replies.STATIC
HANDLERS = {
    "menu": menu,
    "time": generated_reply(replies.current_time),
    "date": generated_reply(replies.current_date),
    "id": myid,
    "echo": echo,
    "reverse": reverse,
    "upper": upper,
    "lower": lower,
    "random": generated_reply(replies.random_number),
    "roll": generated_reply(replies.roll),
    "flip": generated_reply(replies.flip),
    "choose": choose,
    "love": love,
    "vibe": generated_reply(replies.vibe),
    "emoji": generated_reply(replies.emoji),
    "calc": calc,
    "ip": generated_reply(replies.fake_ip),
    "game": generated_reply(replies.game),
    "movie": generated_reply(replies.movie),
    "rate": rate,
    "ask": ask,
    "active": active,
    "shutdown": shutdown,
    "broadcast": broadcast,
    "ban": ban,
    "unban": unban,
    "kick": kick,
    "listbanned": listbanned,
    "poweron": poweron,
    "stats": stats,
    "clear": clear,
    "trt": translate,
    "short": short,
    "tagall": tagall,
    "mute": mute,
    "unmute": unmute,
}
HANDLERS.update({name: static_reply(text) for name, text in replies.STATIC.items()})
