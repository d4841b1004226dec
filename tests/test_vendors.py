from unittest.mock import MagicMock

import pytest
import requests

from socialgraph.core.errors import InvalidCode, PushDeliveryError, VendorError
from socialgraph.services.otp_vendor import VonageVerifyClient
from socialgraph.services.push_vendor import ExpoPushClient


def json_response(body):
    response = MagicMock()
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def vonage(session):
    return VonageVerifyClient("key", "secret", base_url="https://vendor.test/", session=session)


# --- Vonage Verify ---

def test_start_returns_request_id(vonage, session):
    session.get.return_value = json_response({"status": "0", "request_id": "abc123"})

    assert vonage.start("+15551112222") == "abc123"

    url = session.get.call_args.args[0]
    params = session.get.call_args.kwargs["params"]
    assert url == "https://vendor.test/verify/json"
    assert params["number"] == "15551112222"
    assert params["api_key"] == "key"
    assert params["brand"] == "FastTrack"
    assert params["code_length"] == "6"


def test_start_rejection_hides_vendor_text(vonage, session):
    session.get.return_value = json_response({"status": "3", "error_text": "Invalid value for param: number"})

    with pytest.raises(VendorError) as exc:
        vonage.start("12")

    assert "param" not in exc.value.message
    assert exc.value.details == {"vendor_status": "3"}


def test_start_without_request_id(vonage, session):
    session.get.return_value = json_response({"status": "0"})
    with pytest.raises(VendorError):
        vonage.start("15551112222")


def test_transport_failure_log_omits_number_and_secret(session, caplog):
    url = "https://vendor.test/verify/json?api_key=key&api_secret=TOPSECRET&number=15551234567"
    session.get.side_effect = requests.ConnectionError(f"Max retries exceeded with url: {url}")
    client = VonageVerifyClient("key", "TOPSECRET", base_url="https://vendor.test", session=session)

    with caplog.at_level("WARNING", logger="socialgraph.services.otp_vendor"):
        with pytest.raises(VendorError):
            client.start("+15551234567")

    assert "ConnectionError" in caplog.text
    assert "15551234567" not in caplog.text
    assert "TOPSECRET" not in caplog.text


def test_check_success(vonage, session):
    session.get.return_value = json_response({"status": "0", "event_id": "e1"})
    vonage.check("abc123", "123456")
    assert session.get.call_args.kwargs["params"]["code"] == "123456"


@pytest.mark.parametrize("status", ["6", "16", "17"])
def test_check_code_rejections(vonage, session, status):
    session.get.return_value = json_response({"status": status, "error_text": "nope"})
    with pytest.raises(InvalidCode):
        vonage.check("abc123", "000000")


def test_check_other_failures_are_vendor_errors(vonage, session):
    session.get.return_value = json_response({"status": "5", "error_text": "Internal Error"})
    with pytest.raises(VendorError):
        vonage.check("abc123", "123456")


def test_transport_failure(vonage, session):
    session.get.side_effect = requests.Timeout("timed out")
    with pytest.raises(VendorError):
        vonage.start("15551112222")


def test_garbage_body(vonage, session):
    response = MagicMock()
    response.json.side_effect = ValueError("no json")
    session.get.return_value = response
    with pytest.raises(VendorError):
        vonage.check("abc123", "123456")


# --- Expo push ---

def test_push_success(session):
    session.post.return_value = json_response({"data": {"status": "ok", "id": "t1"}})
    client = ExpoPushClient("https://push.test/send", session=session)

    ticket = client.send("ExponentPushToken[x]", "Title", "Body")

    assert ticket == {"status": "ok", "id": "t1"}
    payload = session.post.call_args.kwargs["json"]
    assert payload == {
        "to": "ExponentPushToken[x]",
        "title": "Title",
        "body": "Body",
        "sound": "default",
        "data": {"screen": "notifications"},
    }


def test_push_vendor_error(session):
    session.post.return_value = json_response({"data": {"status": "error", "message": "DeviceNotRegistered"}})
    with pytest.raises(PushDeliveryError) as exc:
        ExpoPushClient("https://push.test/send", session=session).send("tok", "t", "b", {"screen": "x"})
    assert exc.value.message == "DeviceNotRegistered"


def test_push_transport_error(session):
    session.post.side_effect = requests.ConnectionError("down")
    with pytest.raises(PushDeliveryError):
        ExpoPushClient("https://push.test/send", session=session).send("tok", "t", "b")
