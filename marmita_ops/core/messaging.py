"""WhatsApp outbound client for a WPPConnect server (REST API).

Delivery is fire-and-forget: HTTP failures are logged and swallowed so a
reply that cannot be delivered never breaks message handling.
"""

import logging
from typing import Optional

import httpx

log = logging.getLogger(__name__)


class WppConnectClient:
    def __init__(self, base_url: str, session: str, token: Optional[str] = None,
                 timeout: float = 15, transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def send_text(self, to: str, text: str) -> bool:
        """Send a text message. Returns True when the server accepted it."""
        url = f"{self.base_url}/api/{self.session}/send-message"
        payload = {"phone": to.split("@", 1)[0], "message": text, "isGroup": False}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self._headers())
                response.raise_for_status()
        except httpx.HTTPError as e:
            log.warning("Failed to send message to %s: %s", to, e)
            return False
        return True
