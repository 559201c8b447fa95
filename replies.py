"""Reply texts shared by the slash commands and inline mode."""

import random
from datetime import datetime
from urllib.parse import quote

from telegram.helpers import escape_markdown

from helpers import calc as calculator

JOKE = "😂 Why don't robots panic? Because they have nerves of steel."
FACT = "📘 Fact: Honey never spoils."
QUOTE = "💬 'Stay hungry, stay foolish.'"
MATH_FACT = "➗ Math fact: Zero is the only number that can't be divided."
ALIVE = "🔥 I'm alive boss!"
PONG = "🏓 Pong!"
HACK = "💻 Hacking... 0% ▓▓▓▓ 100% DONE 😂"
WEATHER = "🌤️ Weather: Sunny 29°C"
ABOUT = "🤖 A multipurpose Telegram bot made by you."
OWNER = "👑 Owner: YOU!"
ROAST = "🔥 You look like WiFi with weak signal 😂"
BLESS = "✨ You are blessed bro."
CAT = "🐱 Meow!"
DOG = "🐶 Woof!"
ANIME = "🎌 'People die if they are killed.' – Shirou"
SECRET = "🤫 Secret: You are awesome. Don't tell anyone."
ANIME_CLIPS = "🔥 Check out anime clips here: https://hiitwixtor.com/"
AVATAR = "⚠️ Telegram doesn't allow fetching profile pics via bot."
TAG_ALL = "📣 @everyone"
STARTED = "🔥 Bot started! Use /menu to view all commands."
HELP = "Use /menu to see the full list of commands."

INVALID_EXPRESSION = "❌ Invalid expression."

# commands whose reply never changes
STATIC = {
    "start": STARTED,
    "help": HELP,
    "ping": PONG,
    "math": MATH_FACT,
    "joke": JOKE,
    "fact": FACT,
    "quote": QUOTE,
    "alive": ALIVE,
    "avatar": AVATAR,
    "hack": HACK,
    "weather": WEATHER,
    "about": ABOUT,
    "owner": OWNER,
    "roast": ROAST,
    "bless": BLESS,
    "cat": CAT,
    "dog": DOG,
    "anime": ANIME,
    "secret": SECRET,
    "animeclips": ANIME_CLIPS,
}

COIN_SIDES = ["🪙 Heads!", "🪙 Tails!"]
VIBES = ["Chill", "Angry", "Happy", "Tired", "Excited", "Mysterious"]
EMOJIS = ["😀", "🔥", "⚡", "💀", "💎", "👻", "🤖", "🎉", "💯", "🌟"]
GAMES = ["Apex Legends", "Fortnite", "Minecraft", "Valorant", "GTA V", "Call of Duty"]
MOVIES = ["Interstellar", "Inception", "The Dark Knight", "Avatar", "Titanic", "Avengers"]


def current_time() -> str:
    return "🕐 " + datetime.now().strftime("%H:%M:%S")


def current_date() -> str:
    return "📅 " + datetime.now().strftime("%a %b %d %Y")


def random_number() -> str:
    return f"🎲 {random.randint(0, 99)}"


def roll() -> str:
    return f"🎲 You rolled: {random.randint(1, 6)}"


def flip() -> str:
    return random.choice(COIN_SIDES)


def vibe() -> str:
    return "💫 Vibe: " + random.choice(VIBES)


def emoji() -> str:
    return random.choice(EMOJIS)


def pick_game() -> str:
    return random.choice(GAMES)


def game(name: str | None = None) -> str:
    return "🎮 Random game: " + (name or pick_game())


def pick_movie() -> str:
    return random.choice(MOVIES)


def movie(name: str | None = None) -> str:
    return "🎬 Movie: " + (name or pick_movie())


def fake_ip_address() -> str:
    return f"192.168.0.{random.randint(0, 254)}"


def fake_ip(address: str | None = None) -> str:
    return "🌍 Fake IP: " + (address or fake_ip_address())


def love(name: str | None = None) -> str:
    percent = random.randint(0, 99)
    if name:
        return f"❤️ Love level for {name}: {percent}%"
    return f"❤️ Love level: {percent}%"


def rating() -> int:
    return random.randint(0, 9)


def rate(thing: str, score: int | None = None) -> str:
    """Markdown reply; ``thing`` is escaped so user text cannot break it."""
    if score is None:
        score = rating()
    return f"⭐ I rate *{escape_markdown(thing)}* — {score}/10"


def pick(text: str) -> str:
    return random.choice(text.split())


def choose(text: str, choice: str | None = None) -> str:
    return "🤖 I choose: " + (choice or pick(text))


def echo(text: str) -> str:
    return text


def reverse(text: str) -> str:
    return text[::-1]


def upper(text: str) -> str:
    return text.upper()


def lower(text: str) -> str:
    return text.lower()


def short(text: str) -> str:
    url = text.split()[0]
    return "🔗 Shortened:\nhttps://tinyurl.com/api-create.php?url=" + quote(url, safe="")


def calc_result(expression: str) -> str | None:
    """Formatted value of ``expression``, or None when it cannot be evaluated."""
    try:
        value = calculator.evaluate(expression)
    except calculator.CalcError:
        return None
    return calculator.format_number(value)


def calc(expression: str, result: str | None = None) -> str:
    if result is None:
        result = calc_result(expression)
    if result is None:
        return INVALID_EXPRESSION
    return "🧮 Result: " + result
