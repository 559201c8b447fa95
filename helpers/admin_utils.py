"""Process-lifetime state shared by all handlers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

STATE_KEY = "state"


@dataclass
class BotState:
    # gates activity tracking for non-admins; replies are not affected
    active: bool = True
    # users seen since start, independent of the stored active_users table
    seen_users: Set[int] = field(default_factory=set)
    # (chat_id, user_id) -> pending un-mute job
    mutes: Dict[Tuple[int, int], object] = field(default_factory=dict)
    stop_event: Optional[asyncio.Event] = None
    server_task: Optional[asyncio.Task] = None

    def remember(self, user_id: int) -> None:
        self.seen_users.add(user_id)

    def replace_mute(self, chat_id: int, user_id: int, job) -> None:
        """Store ``job`` for the target, cancelling whatever was pending."""
        self.cancel_mute(chat_id, user_id)
        self.mutes[(chat_id, user_id)] = job

    def cancel_mute(self, chat_id: int, user_id: int) -> bool:
        job = self.mutes.pop((chat_id, user_id), None)
        if job is None:
            return False
        job.schedule_removal()
        return True


def get_state(context) -> BotState:
    """Return the state stored in the application's ``bot_data``."""
    return context.bot_data.setdefault(STATE_KEY, BotState())
