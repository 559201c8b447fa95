from telegram import BotCommand

COMMANDS = {
    "start": "Start the bot",
    "help": "Show help info",
    "menu": "Show full command list",
    "ping": "Check bot speed",
    "time": "Get current time",
    "date": "Get today's date",
    "id": "Get your Telegram ID",
    "math": "Random math fact",
    "joke": "Random joke",
    "fact": "Random fact",
    "quote": "Random quote",
    "alive": "Check if bot is alive",
    "echo": "Repeat your message",
    "reverse": "Reverse text",
    "upper": "Text to uppercase",
    "lower": "Text to lowercase",
    "avatar": "Get your profile photo",
    "random": "Random number",
    "roll": "Dice roll",
    "flip": "Coin flip",
    "choose": "Let bot choose between words",
    "love": "Love percentage",
    "hack": "Fake hack",
    "vibe": "Random vibe check",
    "emoji": "Random emoji",
    "calc": "Simple calculator",
    "weather": "Fake weather",
    "ip": "Fake IP check",
    "about": "About the bot",
    "owner": "Bot owner info",
    "roast": "Roast someone",
    "bless": "Bless someone",
    "cat": "Random cat",
    "dog": "Random dog",
    "anime": "Random anime quote",
    "game": "Random game name",
    "movie": "Random movie name",
    "rate": "Rate anything",
    "ask": "Ask the bot anything",
    "secret": "Random secret",
    "active": "Show active users count",
    "shutdown": "Shutdown bot (Admin only)",
    "broadcast": "Send message to all users (Admin)",
    "ban": "Ban a user (Admin only)",
    "unban": "Unban a user (Admin only)",
    "kick": "Kick a user (Admin only)",
    "listbanned": "List banned users (Admin only)",
    "poweron": "Check if bot is running (Admin only)",
    "stats": "Bot stats (Admin only)",
    "clear": "Delete last 5 messages (Admin only)",
    "trt": "Translate message to English (reply to msg)",
    "short": "Shorten a URL",
    "tagall": "Tag everyone (Admin only)",
    "mute": "Timed mute (e.g., /mute 10m) (Admin only)",
    "unmute": "Unmute a user (Admin only, reply to msg)",
    "animeclips": "Get anime clips link",
}


def generate_menu() -> str:
    msg = "📜 *BOT COMMANDS*\n\n"
    for name, description in COMMANDS.items():
        msg += f"/{name} - {description}\n"
    return msg


def bot_commands() -> list[BotCommand]:
    return [BotCommand(name, description) for name, description in COMMANDS.items()]
