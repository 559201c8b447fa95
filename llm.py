"""Text generation for /ask, /trt and the inline ``ask`` keyword.

Gemini is used when ``GOOGLE_API_KEY`` is configured, otherwise OpenAI when
``OPENAI_API_KEY`` is. Every call is a single attempt; callers get a fixed
apology text instead of an exception.
"""

import asyncio
import logging

import google.generativeai as genai
from openai import AsyncOpenAI

import config

ASK_FAILED = "⚠️ Sorry, something went wrong. Try again later."
NO_ANSWER = "Sorry, I couldn't generate a response."
TRANSLATE_FAILED = "⚠️ Translation failed."
NO_TRANSLATION = "Translation failed."

TRANSLATE_PROMPT = (
    "Translate the following text to English. "
    "Only return the translation, nothing else:\n\n{text}"
)


class LLMUnavailable(RuntimeError):
    """No text-generation key is configured."""


_gemini_ready = False
_openai_client: AsyncOpenAI | None = None


def _gemini_text(response) -> str:
    # ``response.text`` raises when the candidate was blocked or empty
    try:
        return response.text or ""
    except ValueError:
        return ""


async def _generate_gemini(prompt: str) -> str:
    global _gemini_ready
    if not _gemini_ready:
        genai.configure(api_key=config.GOOGLE_API_KEY)
        _gemini_ready = True
    model = genai.GenerativeModel(config.GEMINI_MODEL)
    response = await asyncio.to_thread(model.generate_content, prompt)
    return _gemini_text(response)


async def _generate_openai(prompt: str) -> str:
    global _openai_client
    if _openai_client is None:
        _openai_client = AsyncOpenAI(api_key=config.OPENAI_API_KEY)
    completion = await _openai_client.chat.completions.create(
        model=config.OPENAI_MODEL,
        messages=[{"role": "user", "content": prompt}],
    )
    if not completion.choices:
        return ""
    return completion.choices[0].message.content or ""


async def generate(prompt: str) -> str | None:
    """Return generated text, or ``None`` when the service answered with nothing."""
    if config.GOOGLE_API_KEY:
        text = await _generate_gemini(prompt)
    elif config.OPENAI_API_KEY:
        text = await _generate_openai(prompt)
    else:
        raise LLMUnavailable("neither GOOGLE_API_KEY nor OPENAI_API_KEY is set")
    text = text.strip()
    return text or None


async def ask(question: str) -> tuple[bool, str]:
    """Answer ``question``; the flag is False when the call failed."""
    try:
        answer = await generate(question)
    except Exception:
        logging.exception("AI /ask error")
        return False, ASK_FAILED
    return True, answer or NO_ANSWER


async def translate(text: str) -> tuple[bool, str]:
    try:
        translated = await generate(TRANSLATE_PROMPT.format(text=text))
    except Exception:
        logging.exception("Translate error")
        return False, TRANSLATE_FAILED
    return True, translated or NO_TRANSLATION
