# socialgraph/services/push_vendor.py

"""Push vendor integration (Expo push API)."""

import logging
from typing import Any, Dict, Optional, Protocol

import requests

from socialgraph.core.config import settings
from socialgraph.core.errors import PushDeliveryError

logger = logging.getLogger(__name__)


class PushClient(Protocol):
    def send(self, token: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]: ...


class ExpoPushClient:
    def __init__(self, url: str, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "ExpoPushClient":
        return cls(settings.EXPO_PUSH_URL, timeout=settings.VENDOR_TIMEOUT_SECONDS)

    def send(self, token: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send one message and return the vendor ticket.

        Raises:
            PushDeliveryError: transport failure or the vendor reported an error.
        """
        payload = {
            "to": token,
            "title": title,
            "body": body,
            "sound": "default",
            "data": data if data is not None else {"screen": "notifications"},
        }
        try:
            response = self._session.post(
                self._url,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
            result = response.json()
        except requests.RequestException as e:
            raise PushDeliveryError(str(e)) from e
        except ValueError as e:
            raise PushDeliveryError("Push vendor returned a non-JSON response") from e

        ticket = result.get("data") if isinstance(result, dict) else None
        if not isinstance(ticket, dict):
            raise PushDeliveryError("Push vendor returned no ticket")
        if ticket.get("status") == "error":
            raise PushDeliveryError(ticket.get("message") or "Push vendor rejected the message")
        return ticket
