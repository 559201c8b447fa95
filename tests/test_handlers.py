import asyncio
import types

import pytest

try:
    import handlers
    from commands import COMMANDS
    from helpers import permissions
    from helpers.admin_utils import BotState, get_state
    from telegram.error import BadRequest, Forbidden
except ModuleNotFoundError:
    pytest.skip("telegram not available", allow_module_level=True)

ADMIN = 42
USER = 7
CHAT = -100


class DummyMessage:
    def __init__(self, text="", reply_to=None, message_id=50):
        self.text = text
        self.reply_to_message = reply_to
        self.message_id = message_id
        self.replies = []
        self.kwargs = []

    async def reply_text(self, text, **kwargs):
        self.replies.append(text)
        self.kwargs.append(kwargs)


class DummyBot:
    def __init__(self, fail_for=(), moderation_error=None):
        self.fail_for = set(fail_for)
        self.moderation_error = moderation_error
        self.sent = []
        self.calls = []

    async def send_message(self, chat_id, text, **kwargs):
        if chat_id in self.fail_for:
            raise Forbidden("bot was blocked by the user")
        self.sent.append((chat_id, text))

    async def _moderate(self, name, *args, **kwargs):
        if self.moderation_error:
            raise self.moderation_error
        self.calls.append((name, args, kwargs))

    async def ban_chat_member(self, *args, **kwargs):
        await self._moderate("ban", *args, **kwargs)

    async def unban_chat_member(self, *args, **kwargs):
        await self._moderate("unban", *args, **kwargs)

    async def restrict_chat_member(self, *args, **kwargs):
        await self._moderate("restrict", *args, **kwargs)

    async def delete_message(self, chat_id, message_id):
        if message_id % 2:
            raise BadRequest("Message to delete not found")
        self.calls.append(("delete", (chat_id, message_id), {}))


class DummyJob:
    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)
        self.removed = False

    def schedule_removal(self):
        self.removed = True


class DummyJobQueue:
    def __init__(self):
        self.jobs = []

    def run_once(self, callback, when, **kwargs):
        job = DummyJob(callback=callback, when=when, **kwargs)
        self.jobs.append(job)
        return job


class DummyApplication:
    def __init__(self):
        self.tasks = []

    def create_task(self, coro, update=None):
        self.tasks.append(coro)

    def run_tasks(self):
        for coro in self.tasks:
            asyncio.run(coro)


@pytest.fixture(autouse=True)
def admin(monkeypatch):
    monkeypatch.setattr(permissions, "ADMIN_ID", ADMIN)


def make_context(bot=None):
    return types.SimpleNamespace(
        bot=bot or DummyBot(),
        bot_data={},
        job_queue=DummyJobQueue(),
        application=DummyApplication(),
    )


def make_update(text, user_id=USER, reply_to=None):
    msg = DummyMessage(text, reply_to=reply_to)
    return types.SimpleNamespace(
        message=msg,
        effective_message=msg,
        effective_user=types.SimpleNamespace(id=user_id),
        effective_chat=types.SimpleNamespace(id=CHAT),
    )


def reply_to(user_id, text="hola"):
    return types.SimpleNamespace(from_user=types.SimpleNamespace(id=user_id), text=text)


def run(handler, update, context):
    asyncio.run(handler(update, context))
    return update.effective_message.replies


def test_every_command_has_a_handler():
    assert set(handlers.HANDLERS) == set(COMMANDS)


def test_static_and_transform_replies():
    ctx = make_context()
    assert run(handlers.HANDLERS["joke"], make_update("/joke"), ctx) == [handlers.replies.JOKE]
    assert run(handlers.reverse, make_update("/reverse hello"), ctx) == ["olleh"]
    assert run(handlers.echo, make_update("/echo"), ctx) == ["❌ Usage: /echo [text]"]
    assert run(handlers.calc, make_update("/calc 2+2"), ctx) == ["🧮 Result: 4"]
    assert run(handlers.calc, make_update("/calc 10/0"), ctx) == ["❌ Invalid expression."]
    assert run(handlers.myid, make_update("/id"), ctx) == [f"🪪 Your ID: {USER}"]


def test_menu_is_markdown():
    update = make_update("/menu")
    run(handlers.menu, update, make_context())
    assert update.message.kwargs[0]["parse_mode"] == "Markdown"
    assert "/mute - Timed mute" in update.message.replies[0]


@pytest.mark.parametrize("name", ["shutdown", "poweron", "ban", "unban", "kick", "listbanned",
                                  "stats", "clear", "tagall", "mute", "unmute", "broadcast"])
def test_admin_commands_reject_other_users(name, monkeypatch):
    touched = []
    for func in ("ban", "unban", "list_banned_user_ids", "count_active_users", "list_active_user_ids"):
        monkeypatch.setattr(handlers.db, func, lambda *a, _f=func: touched.append(_f))
    bot = DummyBot()
    ctx = make_context(bot)
    state = get_state(ctx)
    update = make_update(f"/{name} 123 10m", reply_to=reply_to(99))
    assert run(handlers.HANDLERS[name], update, ctx) == [permissions.NOT_AUTHORIZED]
    assert state.active is True
    assert touched == []
    assert bot.calls == [] and bot.sent == []
    assert ctx.job_queue.jobs == []


def test_shutdown_and_poweron_toggle_flag():
    ctx = make_context()
    run(handlers.shutdown, make_update("/shutdown", ADMIN), ctx)
    assert get_state(ctx).active is False
    run(handlers.poweron, make_update("/poweron", ADMIN), ctx)
    assert get_state(ctx).active is True


def test_stats_reports_count_and_flag(monkeypatch):
    monkeypatch.setattr(handlers.db, "count_active_users", lambda: 12)
    ctx = make_context()
    get_state(ctx).active = False
    assert run(handlers.stats, make_update("/stats", ADMIN), ctx) == ["📊 BOT STATS\nUsers: 12\nStatus: OFF"]


def test_broadcast_counts_successful_deliveries(monkeypatch):
    monkeypatch.setattr(handlers.db, "list_active_user_ids", lambda: [1, 2, 3, 4, 5])
    bot = DummyBot(fail_for={2, 4})
    replies = run(handlers.broadcast, make_update("/broadcast hello all", ADMIN), make_context(bot))
    assert replies == ["✅ Broadcast sent to 3 users!"]
    assert bot.sent[0] == (1, "📢 Admin broadcast:\nhello all")


def test_broadcast_needs_message():
    replies = run(handlers.broadcast, make_update("/broadcast", ADMIN), make_context())
    assert replies == ["❌ Specify a message: /broadcast <message>"]


def test_ban_unban_and_list(monkeypatch):
    banned = set()
    monkeypatch.setattr(handlers.db, "ban", banned.add)
    monkeypatch.setattr(handlers.db, "unban", banned.discard)
    monkeypatch.setattr(handlers.db, "list_banned_user_ids", lambda: sorted(banned))
    ctx = make_context()
    assert run(handlers.ban, make_update("/ban 555", ADMIN), ctx) == ["🚫 User 555 is now banned."]
    assert run(handlers.listbanned, make_update("/listbanned", ADMIN), ctx) == ["🚫 Banned users:\n555"]
    assert run(handlers.unban, make_update("/unban 555", ADMIN), ctx) == ["✅ User 555 is now unbanned."]
    assert run(handlers.listbanned, make_update("/listbanned", ADMIN), ctx) == ["🚫 Banned users:\nNone"]
    assert run(handlers.ban, make_update("/ban nobody", ADMIN), ctx) == ["❌ Specify a user ID: /ban <id>"]


def test_kick_uses_replied_user():
    bot = DummyBot()
    replies = run(handlers.kick, make_update("/kick", ADMIN, reply_to=reply_to(99)), make_context(bot))
    assert replies == ["👢 User 99 has been kicked from the group."]
    assert [c[0] for c in bot.calls] == ["ban", "unban"]


def test_kick_failure_is_reported():
    bot = DummyBot(moderation_error=BadRequest("Not enough rights"))
    replies = run(handlers.kick, make_update("/kick 99", ADMIN), make_context(bot))
    assert replies == ["❌ Failed to kick user. Make sure I'm an admin with ban permissions."]


def test_clear_is_best_effort():
    bot = DummyBot()
    update = make_update("/clear", ADMIN)
    run(handlers.clear, update, make_context(bot))
    assert [c[1][1] for c in bot.calls] == [50, 48, 46]


def test_mute_schedules_unmute_and_replaces_pending_job():
    ctx = make_context()
    first = make_update("/mute 10m", ADMIN, reply_to=reply_to(99))
    assert run(handlers.mute, first, ctx) == ["🔇 User muted for 10m"]
    job = ctx.job_queue.jobs[0]
    assert job.when == 600
    assert job.data == {"duration": "10m"}
    assert get_state(ctx).mutes[(CHAT, 99)] is job

    run(handlers.mute, make_update("/mute 1h", ADMIN, reply_to=reply_to(99)), ctx)
    assert job.removed
    assert get_state(ctx).mutes[(CHAT, 99)] is ctx.job_queue.jobs[1]


def test_mute_requires_reply_and_duration():
    ctx = make_context()
    assert run(handlers.mute, make_update("/mute 10m", ADMIN), ctx) == ["❌ Reply to a user to mute"]
    bad = make_update("/mute soon", ADMIN, reply_to=reply_to(99))
    assert run(handlers.mute, bad, ctx) == ["❌ Usage: /mute [duration] (e.g., /mute 10m)"]
    assert ctx.job_queue.jobs == []


def test_mute_rejects_huge_duration_before_restricting():
    bot = DummyBot()
    ctx = make_context(bot)
    update = make_update("/mute 100000y", ADMIN, reply_to=reply_to(99))
    assert run(handlers.mute, update, ctx) == ["❌ Usage: /mute [duration] (e.g., /mute 10m)"]
    assert bot.calls == []
    assert ctx.job_queue.jobs == []


def test_unmute_cancels_pending_job():
    bot = DummyBot()
    ctx = make_context(bot)
    run(handlers.mute, make_update("/mute 10m", ADMIN, reply_to=reply_to(99)), ctx)
    job = ctx.job_queue.jobs[0]
    assert run(handlers.unmute, make_update("/unmute", ADMIN, reply_to=reply_to(99)), ctx) == ["🔊 User unmuted"]
    assert job.removed
    assert get_state(ctx).mutes == {}
    assert bot.calls[-1][2]["permissions"] == handlers.UNMUTED


def test_unmute_job_restores_permissions():
    bot = DummyBot()
    ctx = make_context(bot)
    job = DummyJob(chat_id=CHAT, user_id=99, data={"duration": "10m"})
    get_state(ctx).mutes[(CHAT, 99)] = job
    ctx.job = job
    asyncio.run(handlers._unmute_job(ctx))
    assert bot.calls == [("restrict", (CHAT, 99), {"permissions": handlers.UNMUTED})]
    assert bot.sent == [(CHAT, "🔊 User unmuted after 10m")]
    assert get_state(ctx).mutes == {}


def test_active_lists_seen_users():
    ctx = make_context()
    assert run(handlers.active, make_update("/active"), ctx) == ["❌ No active users."]
    asyncio.run(handlers.remember_user(make_update("hi", 3), ctx))
    asyncio.run(handlers.remember_user(make_update("hi", 1), ctx))
    assert run(handlers.active, make_update("/active"), ctx) == ["👥 Active users:\n1\n3"]


def test_tracking_respects_flag_and_bans(monkeypatch):
    recorded = []
    banned = {13}
    monkeypatch.setattr(handlers.db, "record_activity", recorded.append)
    monkeypatch.setattr(handlers.db, "is_banned", lambda uid: uid in banned)

    ctx = make_context()
    for uid in (USER, 13):
        asyncio.run(handlers.track_activity(make_update("hello", uid), ctx))
    ctx.application.run_tasks()
    assert recorded == [USER]

    ctx = make_context()
    get_state(ctx).active = False
    asyncio.run(handlers.track_activity(make_update("hello", USER), ctx))
    asyncio.run(handlers.track_activity(make_update("hello", ADMIN), ctx))
    ctx.application.run_tasks()
    assert recorded == [USER, ADMIN]


def test_tracking_failure_is_logged_not_raised(monkeypatch):
    def broken(uid):
        raise RuntimeError("database is down")

    monkeypatch.setattr(handlers.db, "is_banned", broken)
    asyncio.run(handlers._track(USER))


def test_ask_and_translate(monkeypatch):
    async def fake_ask(question):
        return True, f"answer to {question}"

    async def fake_translate(text):
        return True, "hello"

    monkeypatch.setattr(handlers.llm, "ask", fake_ask)
    monkeypatch.setattr(handlers.llm, "translate", fake_translate)
    ctx = make_context()
    assert run(handlers.ask, make_update("/ask why"), ctx) == ["answer to why"]
    assert run(handlers.ask, make_update("/ask"), ctx) == ["❌ Usage: /ask [your question]"]
    assert run(handlers.translate, make_update("/trt"), ctx) == ["❌ Reply to a message to translate it."]
    no_text = make_update("/trt", reply_to=reply_to(99, text=None))
    assert run(handlers.translate, no_text, ctx) == ["❌ That message has no text to translate."]
    update = make_update("/trt", reply_to=reply_to(99))
    assert run(handlers.translate, update, ctx) == ["🇬🇧 *Translation:*\nhello"]
    assert update.message.kwargs[0]["parse_mode"] == "Markdown"


def test_state_is_created_once():
    ctx = make_context()
    state = get_state(ctx)
    assert isinstance(state, BotState)
    assert get_state(ctx) is state
