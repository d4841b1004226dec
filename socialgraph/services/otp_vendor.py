# socialgraph/services/otp_vendor.py

"""OTP vendor integration (Vonage Verify v1).

Only the outcome matters to the rest of the system: ``start`` yields a
request id, ``check`` either returns or raises ``InvalidCode`` /
``VendorError``. Vendor error texts are logged, never returned to callers.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import requests

from socialgraph.core.config import settings
from socialgraph.core.errors import InvalidCode, VendorError

logger = logging.getLogger(__name__)

STATUS_OK = "0"

# Verify check statuses that mean "the user got the code wrong or too late"
CODE_REJECTED_STATUSES = {
    "6",   # request not found or already completed/expired
    "16",  # wrong code
    "17",  # too many wrong codes
}


class OtpVendor(Protocol):
    def start(self, phone: str) -> str: ...

    def check(self, request_id: str, code: str) -> None: ...


class VonageVerifyClient:
    """Thin requests-based client for the Verify JSON API."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = "https://api.nexmo.com",
        brand: str = "FastTrack",
        code_length: int = 6,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._brand = brand
        self._code_length = code_length
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "VonageVerifyClient":
        return cls(
            api_key=settings.VONAGE_API_KEY,
            api_secret=settings.VONAGE_API_SECRET,
            base_url=settings.VONAGE_BASE_URL,
            brand=settings.VONAGE_BRAND,
            code_length=settings.VONAGE_CODE_LENGTH,
            timeout=settings.VENDOR_TIMEOUT_SECONDS,
        )

    def start(self, phone: str) -> str:
        # Vonage expects digits only, without the leading +
        number = phone.strip().lstrip("+")
        data = self._get(
            "/verify/json",
            {
                "number": number,
                "brand": self._brand,
                "code_length": str(self._code_length),
            },
        )
        status = str(data.get("status"))
        if status != STATUS_OK:
            logger.warning("Verify start rejected: status=%s error=%s", status, data.get("error_text"))
            raise VendorError("Failed to send verification", details={"vendor_status": status})

        request_id = data.get("request_id")
        if not request_id:
            logger.error("Verify start returned no request_id")
            raise VendorError()
        return str(request_id)

    def check(self, request_id: str, code: str) -> None:
        data = self._get("/verify/check/json", {"request_id": request_id, "code": code})
        status = str(data.get("status"))
        if status == STATUS_OK:
            return
        logger.warning("Verify check rejected: status=%s error=%s", status, data.get("error_text"))
        if status in CODE_REJECTED_STATUSES:
            raise InvalidCode()
        raise VendorError("Verification service unavailable", details={"vendor_status": status})

    def _get(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        query = {"api_key": self._api_key, "api_secret": self._api_secret, **params}
        try:
            response = self._session.get(f"{self._base_url}{path}", params=query, timeout=self._timeout)
            return response.json()
        except requests.RequestException as e:
            logger.warning("Verify request to %s failed: %s", path, type(e).__name__)
            raise VendorError("Verification service unavailable") from e
        except ValueError as e:
            logger.warning("Verify response from %s was not JSON", path)
            raise VendorError("Verification service unavailable") from e
