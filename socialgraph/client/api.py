# socialgraph/client/api.py

"""HTTP client for the socialgraph API.

Every method returns a plain value or raises a ``SocialGraphError``
subclass; transport failures surface as ``ServiceUnavailable``.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from socialgraph.core.errors import ERRORS_BY_NAME, ServiceUnavailable, SocialGraphError, Unauthorized

logger = logging.getLogger(__name__)

# Hashes per lookup request
LOOKUP_BATCH_SIZE = 100


class SocialGraphClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self.token = token

    # --- profile ---

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/v1/profile/me")

    def save_push_token(self, token: str) -> Dict[str, Any]:
        return self._request("PUT", "/api/v1/profile/me/push-token", json={"token": token})

    def clear_push_token(self) -> None:
        self._request("DELETE", "/api/v1/profile/me/push-token")

    # --- verification ---

    def start_verification(self, phone: str) -> str:
        return self._request("POST", "/api/v1/verification/start", json={"phone": phone})["request_id"]

    def check_verification(self, request_id: str, code: str, phone: str) -> bool:
        data = self._request(
            "POST",
            "/api/v1/verification/check",
            json={"request_id": request_id, "code": code, "phone": phone},
        )
        return bool(data.get("success"))

    # --- contacts ---

    def lookup_by_hashes(self, hashes: Iterable[str], batch_size: int = LOOKUP_BATCH_SIZE) -> List[Dict[str, Any]]:
        unique = list(dict.fromkeys(hashes))
        profiles: Dict[str, Dict[str, Any]] = {}
        for start in range(0, len(unique), batch_size):
            batch = unique[start:start + batch_size]
            for profile in self._request("POST", "/api/v1/contacts/lookup", json={"hashes": batch}):
                profiles[profile["id"]] = profile
        return list(profiles.values())

    # --- friends ---

    def list_friends(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/v1/friends/")

    def list_incoming(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/v1/friends/requests")

    def list_sent(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/v1/friends/sent")

    def send_request(self, target_id: str) -> Dict[str, Any]:
        return self._request("POST", "/api/v1/friends/requests", json={"target_id": target_id})

    def accept_request(self, friendship_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/v1/friends/requests/{friendship_id}/accept")

    def reject_request(self, friendship_id: str) -> None:
        self._request("POST", f"/api/v1/friends/requests/{friendship_id}/reject")

    def remove_friend(self, friendship_id: str) -> None:
        self._request("DELETE", f"/api/v1/friends/{friendship_id}")

    # --- notifications ---

    def notifications(
        self, limit: Optional[int] = None, before: Optional[str] = None, before_id: Optional[str] = None
    ) -> Dict[str, Any]:
        params = {
            k: v for k, v in (("limit", limit), ("before", before), ("before_id", before_id)) if v is not None
        }
        return self._request("GET", "/api/v1/notifications/", params=params)

    def mark_read(self, notification_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/v1/notifications/{notification_id}/read")

    def mark_all_read(self) -> int:
        return self._request("POST", "/api/v1/notifications/read-all")["updated"]

    # --- transport ---

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self._session.request(
                method, f"{self._base_url}{path}", headers=headers, timeout=self._timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, type(e).__name__)
            raise ServiceUnavailable() from e

        if response.status_code == 204:
            return None
        try:
            body = response.json()
        except ValueError as e:
            raise ServiceUnavailable("Unexpected response from server") from e

        if response.status_code >= 400:
            raise error_from_response(response.status_code, body)
        return body


def error_from_response(status_code: int, body: Any) -> SocialGraphError:
    """Rebuild the typed error the server raised."""
    if isinstance(body, dict):
        cls = ERRORS_BY_NAME.get(str(body.get("error")))
        detail = body.get("detail")
        if cls is not None:
            return cls(detail if isinstance(detail, str) else None, details=body.get("details"))
        if status_code == 401:
            return Unauthorized()
    # Request validation (422) and anything unrecognised
    return ServiceUnavailable(f"Request failed with status {status_code}", details={"status_code": status_code})
