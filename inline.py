"""Inline mode: ``@bot <keyword> [text]`` in any chat."""

import inspect
import logging
import time

from telegram import InlineQueryResultArticle, InputTextMessageContent, Update
from telegram.constants import MessageLimit, ParseMode
from telegram.ext import ContextTypes

import llm
import replies
from helpers import shorten

HELP_TEXT = (
    "📖 Inline commands:\n"
    "joke, fact, quote, flip, roll, random, vibe, emoji, ping, time, date, math, "
    "alive, hack, weather, ip, about, owner, cat, dog, game, movie, secret, anime, "
    "animeclips, roast, bless\n\n"
    "With text: ask [q], love [name], echo [text], reverse [text], upper [text], "
    "lower [text], choose [words], calc [expr], rate [thing], short [url]"
)
HELP_HINT = "Type: joke, fact, quote, flip, roll, ask [question], and more!"


def article(result_id, title, description, text, parse_mode=None, unique=False):
    if unique:
        result_id = f"{result_id}-{int(time.time() * 1000)}"
    return InlineQueryResultArticle(
        id=result_id,
        title=title,
        description=description,
        input_message_content=InputTextMessageContent(text, parse_mode=parse_mode),
    )


def help_article(unknown: bool = False):
    if unknown:
        return article("unknown", "❓ Unknown command", "Try: joke, fact, quote, flip, roll, ask [question], and more!", HELP_TEXT)
    return article("help", "How to use inline mode", HELP_HINT, HELP_TEXT)


# keyword -> (title, description, text); replies never change
STATIC = {
    "joke": ("😂 Get a Joke", "Click to send a joke", replies.JOKE),
    "fact": ("📘 Get a Fact", "Click to send a fact", replies.FACT),
    "quote": ("💬 Get a Quote", "Click to send a quote", replies.QUOTE),
    "roast": ("🔥 Roast", "Click to send a roast", replies.ROAST),
    "bless": ("✨ Blessing", "Click to send a blessing", replies.BLESS),
    "anime": ("🎌 Anime Quote", "Click to send an anime quote", replies.ANIME),
    "ping": ("🏓 Ping", "Click to send pong", replies.PONG),
    "math": ("➗ Math Fact", "Click to send a math fact", replies.MATH_FACT),
    "alive": ("🔥 Alive Check", "Click to confirm bot is alive", replies.ALIVE),
    "hack": ("💻 Fake Hack", "Click to send fake hack", replies.HACK),
    "weather": ("🌤️ Weather", "Click to send weather", replies.WEATHER),
    "about": ("🤖 About", "About the bot", replies.ABOUT),
    "owner": ("👑 Owner", "Bot owner info", replies.OWNER),
    "cat": ("🐱 Cat", "Meow!", replies.CAT),
    "dog": ("🐶 Dog", "Woof!", replies.DOG),
    "secret": ("🤫 Secret", "Click to reveal a secret", replies.SECRET),
    "animeclips": ("🔥 Anime Clips", "Get anime clips link", replies.ANIME_CLIPS),
}

# keyword -> (title, description, reply function); a fresh reply per query
RANDOM = {
    "flip": ("🪙 Flip a Coin", "Click to flip", replies.flip),
    "roll": ("🎲 Roll a Dice", "Click to roll", replies.roll),
    "random": ("🎲 Random Number", "Click to get a random number", replies.random_number),
    "vibe": ("💫 Vibe Check", "Click to check your vibe", replies.vibe),
    "emoji": ("🎭 Random Emoji", "Click to get a random emoji", replies.emoji),
    "time": ("🕐 Current Time", "Click to send current time", replies.current_time),
    "date": ("📅 Today's Date", "Click to send today's date", replies.current_date),
}


def _ip(_):
    address = replies.fake_ip_address()
    return article("ip", "🌍 Fake IP", address, replies.fake_ip(address), unique=True)


def _game(_):
    name = replies.pick_game()
    return article("game", "🎮 Random Game", name, replies.game(name), unique=True)


def _movie(_):
    name = replies.pick_movie()
    return article("movie", "🎬 Random Movie", name, replies.movie(name), unique=True)


def _love(name):
    name = name or "someone"
    return article("love", "❤️ Love Calculator", f"Check love level for {name}", replies.love(name), unique=True)


def _echo(text):
    return article("echo", "📢 Echo", f"Echo: {text}", replies.echo(text), unique=True)


def _reverse(text):
    reversed_text = replies.reverse(text)
    return article("reverse", "🔄 Reverse Text", f"Reversed: {reversed_text}", reversed_text, unique=True)


def _upper(text):
    text = replies.upper(text)
    return article("upper", "🔠 Uppercase", text, text, unique=True)


def _lower(text):
    text = replies.lower(text)
    return article("lower", "🔡 Lowercase", text, text, unique=True)


def _choose(text):
    choice = replies.pick(text)
    return article("choose", "🤖 Choose", f"I choose: {choice}", replies.choose(text, choice), unique=True)


def _calc(expression):
    result = replies.calc_result(expression)
    if result is None:
        return article("calc-error", "❌ Invalid Expression", "Could not calculate", replies.INVALID_EXPRESSION)
    return article("calc", "🧮 Calculator", f"Result: {result}", replies.calc(expression, result), unique=True)


def _rate(thing):
    score = replies.rating()
    return article(
        "rate", "⭐ Rate", f"Rating for {thing}: {score}/10",
        replies.rate(thing, score), parse_mode=ParseMode.MARKDOWN, unique=True,
    )


def _short(url):
    return article("short", "🔗 Shorten URL", "Click to get shortened URL", replies.short(url), unique=True)


async def _ask(question):
    ok, answer = await llm.ask(question)
    if not ok:
        return article("ask-error", "⚠️ AI Error", "Something went wrong", answer)
    answer = answer[:MessageLimit.MAX_TEXT_LENGTH]
    return article("ask", "🤖 AI Answer", shorten(answer), answer, unique=True)


# zero-argument keywords with a dynamic description
EXACT = {
    "ip": _ip,
    "game": _game,
    "movie": _movie,
    "love": _love,
}

# keywords followed by a space and an argument, checked in order
PREFIXED = [
    ("love", _love),
    ("ask", _ask),
    ("echo", _echo),
    ("reverse", _reverse),
    ("upper", _upper),
    ("lower", _lower),
    ("choose", _choose),
    ("calc", _calc),
    ("rate", _rate),
    ("short", _short),
]


async def _match(query: str):
    if query in STATIC:
        title, description, text = STATIC[query]
        return article(query, title, description, text)
    if query in RANDOM:
        title, description, reply = RANDOM[query]
        return article(query, title, description, reply(), unique=True)
    if query in EXACT:
        return EXACT[query]("")
    for keyword, build in PREFIXED:
        if query.startswith(keyword + " "):
            result = build(query[len(keyword) + 1:].strip())
            if inspect.isawaitable(result):
                result = await result
            return result
    return None


async def build_results(query: str | None) -> list:
    """Return the results for ``query``; never empty."""
    query = (query or "").strip().lower()
    if not query:
        return [help_article()]
    result = await _match(query)
    if result is None:
        return [help_article(unknown=True)]
    return [result]


async def inline_query(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.inline_query
    results = await build_results(query.query)
    logging.info("Inline query %r from %s -> %s", query.query, query.from_user.id, results[0].id)
    await query.answer(results, cache_time=0)
