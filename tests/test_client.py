"""Tests for SlackUploadClient and the response models.

WHY: Each protocol step has its own contract with Slack (auth, encoding,
validation). Testing the steps one at a time pins down those contracts
independently of the orchestration in the action.

HOW: FakeSlack (conftest) is mounted as an httpx.MockTransport. Tests call
one client method and inspect the recorded request and the return value.

RULES:
- Slack is never called for real
- Form bodies are decoded with form_of()
"""

from __future__ import annotations

import json

import httpx
import pytest

from conftest import BASE_URL, FILE_BYTES, FILE_ID, TOKEN, UPLOAD_URL, form_of
from slack_file_uploader.api.client import (
    FileTransferError,
    SlackUploadClient,
    UploadURLError,
    build_completion_form,
)
from slack_file_uploader.api.models import CompletionResult, UploadURLResponse, parse_json


@pytest.fixture
def client(fake_slack):
    with SlackUploadClient(TOKEN, base_url=BASE_URL, transport=fake_slack.transport) as c:
        yield c


# ---------------------------------------------------------------------------
# parse_json / models
# ---------------------------------------------------------------------------


class TestParseJson:
    """parse_json never raises and always returns a dict."""

    def test_object(self):
        assert parse_json('{"ok": true}') == {"ok": True}

    def test_empty_and_none(self):
        assert parse_json("") == {}
        assert parse_json(None) == {}

    def test_invalid_json(self):
        assert parse_json("<html>502 Bad Gateway</html>") == {}

    def test_non_object_json(self):
        assert parse_json("[1, 2]") == {}
        assert parse_json('"ok"') == {}

    def test_deeply_nested_json(self):
        assert parse_json("[" * 200000) == {}
        assert parse_json('{"a":' * 200000) == {}


class TestUploadURLResponse:
    def test_valid(self):
        resp = UploadURLResponse.from_dict({"ok": True, "upload_url": UPLOAD_URL, "file_id": FILE_ID})
        assert resp.is_valid()

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"ok": False, "upload_url": UPLOAD_URL, "file_id": FILE_ID},
            {"ok": True, "file_id": FILE_ID},
            {"ok": True, "upload_url": UPLOAD_URL},
            {"ok": True, "upload_url": "", "file_id": FILE_ID},
        ],
    )
    def test_invalid(self, payload):
        assert not UploadURLResponse.from_dict(payload).is_valid()


class TestUploadRequestRedaction:
    def test_token_not_in_repr(self, make_request):
        request = make_request()
        assert TOKEN not in repr(request)

    def test_redacted_masks_token(self, make_request):
        redacted = make_request(title="T").redacted()
        assert redacted["api_token"] == "********"
        assert redacted["title"] == "T"
        assert TOKEN not in str(redacted)

    def test_request_is_frozen(self, make_request):
        request = make_request()
        with pytest.raises(AttributeError):
            request.title = "changed"


# ---------------------------------------------------------------------------
# Step 1: get_upload_url
# ---------------------------------------------------------------------------


class TestGetUploadURL:
    def test_returns_url_and_file_id(self, client):
        upload = client.get_upload_url("test.png", 42)
        assert upload.upload_url == UPLOAD_URL
        assert upload.file_id == FILE_ID

    def test_request_shape(self, client, fake_slack):
        client.get_upload_url("test.png", 42)
        [req] = fake_slack.calls_to("get_upload_url")
        assert req.method == "POST"
        assert str(req.url) == BASE_URL + "/files.getUploadURLExternal"
        assert req.headers["Authorization"] == "Bearer " + TOKEN
        assert req.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert form_of(req) == {"filename": "test.png", "length": "42"}

    def test_not_ok_raises_with_payload(self, client, fake_slack):
        fake_slack.upload_url_body = json.dumps({"ok": False, "error": "invalid_auth"})
        with pytest.raises(UploadURLError) as excinfo:
            client.get_upload_url("test.png", 42)
        assert excinfo.value.payload == {"ok": False, "error": "invalid_auth"}

    def test_non_json_body_raises_with_empty_payload(self, client, fake_slack):
        fake_slack.upload_url_body = "upstream connect error"
        with pytest.raises(UploadURLError) as excinfo:
            client.get_upload_url("test.png", 42)
        assert excinfo.value.payload == {}


# ---------------------------------------------------------------------------
# Step 2: send_file_bytes
# ---------------------------------------------------------------------------


class TestSendFileBytes:
    def test_posts_raw_bytes_without_auth(self, client, fake_slack):
        client.send_file_bytes(UPLOAD_URL, FILE_BYTES)
        [req] = fake_slack.calls_to("send_bytes")
        assert req.method == "POST"
        assert str(req.url) == UPLOAD_URL
        assert req.headers["Content-Type"] == "application/octet-stream"
        assert "Authorization" not in req.headers
        assert req.content == FILE_BYTES

    @pytest.mark.parametrize("status", [201, 400, 500])
    def test_non_200_raises(self, client, fake_slack, status):
        fake_slack.transfer_status = status
        with pytest.raises(FileTransferError) as excinfo:
            client.send_file_bytes(UPLOAD_URL, FILE_BYTES)
        assert excinfo.value.status_code == status


# ---------------------------------------------------------------------------
# Step 3: complete_upload
# ---------------------------------------------------------------------------


class TestBuildCompletionForm:
    """Optional fields appear in the form if and only if they were provided."""

    def test_minimal(self):
        assert build_completion_form("F1") == {"files": '[{"id":"F1"}]'}

    def test_title_goes_inside_files(self):
        form = build_completion_form("F1", title="Nightly")
        assert json.loads(form["files"]) == [{"id": "F1", "title": "Nightly"}]
        assert "title" not in form

    @pytest.mark.parametrize("field", ["channels", "initial_comment", "thread_ts"])
    def test_each_field_independently(self, field):
        form = build_completion_form("F1", **{field: "value"})
        assert form[field] == "value"
        others = {"channels", "initial_comment", "thread_ts"} - {field}
        assert not others & set(form)

    def test_all_fields(self):
        form = build_completion_form(
            "F1",
            title="T",
            channels="general, random",
            initial_comment="Hi",
            thread_ts="1700000000.000100",
        )
        assert form["channels"] == "general, random"
        assert form["initial_comment"] == "Hi"
        assert form["thread_ts"] == "1700000000.000100"

    def test_empty_strings_are_omitted(self):
        form = build_completion_form("F1", title="", channels="", initial_comment="", thread_ts="")
        assert form == {"files": '[{"id":"F1"}]'}


class TestCompleteUpload:
    def test_request_shape(self, client, fake_slack):
        client.complete_upload(FILE_ID, channels="general")
        [req] = fake_slack.calls_to("complete")
        assert str(req.url) == BASE_URL + "/files.completeUploadExternal"
        assert req.headers["Authorization"] == "Bearer " + TOKEN
        assert form_of(req) == {"files": '[{"id":"F1"}]', "channels": "general"}

    def test_wraps_response(self, client, fake_slack):
        result = client.complete_upload(FILE_ID)
        assert isinstance(result, CompletionResult)
        assert result.status == 200
        assert result.body == fake_slack.complete_body
        assert result.json == {"ok": True, "files": [{"id": FILE_ID}]}

    def test_not_ok_is_still_returned(self, client, fake_slack):
        fake_slack.complete_body = json.dumps({"ok": False, "error": "channel_not_found"})
        result = client.complete_upload(FILE_ID, channels="nope")
        assert result.json["error"] == "channel_not_found"

    def test_error_status_with_html_body(self, client, fake_slack):
        fake_slack.complete_status = 503
        fake_slack.complete_body = "<html>Service Unavailable</html>"
        result = client.complete_upload(FILE_ID)
        assert result.status == 503
        assert result.body == "<html>Service Unavailable</html>"
        assert result.json == {}

    def test_to_dict(self, client):
        result = client.complete_upload(FILE_ID)
        assert set(result.to_dict()) == {"status", "body", "json"}


class TestClientLifecycle:
    def test_requires_context_manager(self):
        client = SlackUploadClient(TOKEN, base_url=BASE_URL)
        with pytest.raises(RuntimeError):
            client.get_upload_url("x.png", 1)

    def test_repr_hides_token(self):
        assert TOKEN not in repr(SlackUploadClient(TOKEN))

    def test_transport_errors_propagate(self, client, fake_slack):
        fake_slack.raise_on = "get_upload_url"
        with pytest.raises(httpx.ConnectError):
            client.get_upload_url("test.png", 1)
