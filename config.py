import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int = 0) -> int:
    try:
        return int(os.getenv(name) or default)
    except ValueError:
        return default


TOKEN = os.getenv("BOT_TOKEN")
ADMIN_ID = _int_env("ADMIN_ID")
DATABASE_URL = os.getenv("DATABASE_URL", "")
SQLITE_PATH = os.getenv("SQLITE_PATH") or os.path.join(os.path.dirname(__file__), "botdb.sqlite")

GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

PORT = _int_env("PORT", 5000)
