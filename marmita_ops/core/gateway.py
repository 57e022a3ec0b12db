"""Message gateway: decide which WhatsApp events reach the dispatcher, and reply.

Only private text chats from someone other than the bot operator are
handled.  Each event runs in its own task; a failure while handling one
message is logged and never escapes to the webhook listener.
"""

import asyncio
import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from marmita_ops import config
from marmita_ops.core.dispatcher import HELP_MENU, Dispatcher

log = logging.getLogger(__name__)


@dataclass
class InboundMessage:
    """One event as posted by the WPPConnect server webhook."""
    sender: str
    body: str = ""
    type: str = "chat"
    is_group: bool = False
    from_me: bool = False
    event: Optional[str] = None

    @classmethod
    def from_event(cls, payload: dict) -> "InboundMessage":
        sender = payload.get("from") or ""
        if not sender and isinstance(payload.get("sender"), dict):
            sender = payload["sender"].get("id") or ""
        return cls(
            sender=str(sender),
            body=payload.get("body") or "",
            type=payload.get("type") or "",
            is_group=bool(payload.get("isGroupMsg", False)),
            from_me=bool(payload.get("fromMe", False)),
            event=payload.get("event"),
        )


def _user_part(jid: str) -> str:
    """'5511999999999@c.us' -> '5511999999999'."""
    return jid.split("@", 1)[0].strip()


def should_handle(message: InboundMessage, owner_id: Optional[str]) -> bool:
    if message.event is not None and message.event != "onmessage":
        return False
    if message.is_group or message.type != "chat" or message.from_me:
        return False
    if not message.sender or not message.body.strip():
        return False
    if owner_id and _user_part(message.sender) == _user_part(owner_id):
        return False
    return True


class MessageGateway:
    def __init__(self, dispatcher: Dispatcher, sender, owner_id: Optional[str] = None):
        """sender is anything with an async send_text(to, text), e.g. WppConnectClient.

        owner_id=None reads the owner number from config on every event, so
        changes saved through /settings apply without a restart.
        """
        self.dispatcher = dispatcher
        self.sender = sender
        self.owner_id = owner_id

    def owner(self) -> Optional[str]:
        """The owner id to filter out; None when it cannot be read from settings."""
        if self.owner_id is not None:
            return self.owner_id
        try:
            return config.get_owner_number()
        except sqlite3.Error:
            log.error("Could not read owner number, handling events without it", exc_info=True)
            return None

    async def handle_event(self, message: InboundMessage) -> Optional[str]:
        """Process one event. Returns the reply sent, or None if the event was ignored."""
        try:
            if not should_handle(message, self.owner()):
                log.debug("Ignoring event from %s (type=%s, group=%s)", message.sender, message.type, message.is_group)
                return None
        except Exception:
            log.exception("Could not filter event from %s", message.sender)
            return None

        try:
            reply = await asyncio.to_thread(self.dispatcher.handle, message.body)
        except Exception:
            log.exception("Unexpected error handling message from %s", message.sender)
            reply = HELP_MENU

        try:
            await self.sender.send_text(message.sender, reply)
        except Exception:
            log.exception("Could not send reply to %s", message.sender)
        return reply
