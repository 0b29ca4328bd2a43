import asyncio
import base64
import json

import httpx
import pytest

from petspot.client.announcement_client import AnnouncementClient, classify_response
from petspot.core.errors import SubmissionError
from petspot.core.submission import PHASE_CREATE, SubmissionPipeline
from petspot.store.models import FlowData, PhotoAttachment


def _client(handler) -> AnnouncementClient:
    return AnnouncementClient(base_url="http://api.test", timeout=1, transport=httpx.MockTransport(handler))


def _run(coro_fn):
    async def go():
        return await coro_fn()
    return asyncio.run(go())


def test_create_announcement_returns_result():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "abc", "managementPassword": "012345", "species": "DOG"})

    client = _client(handler)
    result = _run(lambda: client.create_announcement({"species": "DOG"}))

    assert result.id == "abc"
    assert result.managementPassword == "012345"
    assert seen == {"path": "/api/v1/announcements", "body": {"species": "DOG"}}


@pytest.mark.parametrize("status,body,expected_type,expected_status", [
    (400, {"error": {"code": "MISSING_VALUE", "message": "species cannot be empty"}}, "validation", 400),
    (409, {"error": {"code": "DUPLICATE_MICROCHIP", "message": "dup"}}, "duplicate-microchip", 409),
    (500, {}, "server", 500),
    (503, {}, "server", 503),
    (422, {}, "validation", 422),
])
def test_create_errors_are_classified(status, body, expected_type, expected_status):
    client = _client(lambda request: httpx.Response(status, json=body))

    with pytest.raises(SubmissionError) as exc:
        _run(lambda: client.create_announcement({}))

    assert exc.value.type == expected_type
    assert exc.value.statusCode == expected_status


def test_validation_error_surfaces_server_message():
    resp = httpx.Response(400, json={"error": {"message": "email is not a valid email address"}})
    assert classify_response(resp).message == "email is not a valid email address"
    assert classify_response(httpx.Response(400, text="oops")).message == SubmissionError.validation().message


def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(SubmissionError) as exc:
        _run(lambda: client.create_announcement({}))
    assert exc.value.type == "network"
    assert exc.value.statusCode is None


@pytest.mark.parametrize("reply", [
    httpx.Response(201, text="<html>Created</html>"),
    httpx.Response(201, json={"id": "abc"}),
    httpx.Response(200, json=["abc", "012345"]),
])
def test_unreadable_create_reply_is_server_error(reply):
    client = _client(lambda request: reply)

    with pytest.raises(SubmissionError) as exc:
        _run(lambda: client.create_announcement({}))

    assert exc.value.type == "server"
    assert exc.value.statusCode == reply.status_code


def test_pipeline_reports_unreadable_create_reply():
    client = _client(lambda request: httpx.Response(201, text="<html>"))
    pipeline = SubmissionPipeline(client)

    result = _run(lambda: pipeline.submit(FlowData(species="DOG", sex="MALE", email="a@b.co")))

    assert result is None
    assert pipeline.error.type == "server"
    assert pipeline.error_phase == PHASE_CREATE
    assert not pipeline.is_submitting


def test_upload_photo_sends_multipart_with_basic_auth(tmp_path):
    path = tmp_path / "rex.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fakejpeg")
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        seen["body"] = request.content
        return httpx.Response(201, json={})

    client = _client(handler)
    photo = PhotoAttachment(rawFileHandle=str(path), filename="rex.jpg", sizeBytes=12, mimeType="image/jpeg")
    _run(lambda: client.upload_photo("abc", photo, "012345"))

    assert seen["path"] == "/api/v1/announcements/abc/photos"
    assert seen["auth"] == "Basic " + base64.b64encode(b"abc:012345").decode()
    assert b'name="photo"; filename="rex.jpg"' in seen["body"]
    assert b"fakejpeg" in seen["body"]


def test_upload_photo_failure_is_classified(tmp_path):
    path = tmp_path / "rex.jpg"
    path.write_bytes(b"x")
    client = _client(lambda request: httpx.Response(500, json={}))
    photo = PhotoAttachment(rawFileHandle=str(path), filename="rex.jpg")

    with pytest.raises(SubmissionError) as exc:
        _run(lambda: client.upload_photo("abc", photo, "012345"))
    assert exc.value.type == "server"


def test_upload_photo_missing_file(tmp_path):
    client = _client(lambda request: httpx.Response(201, json={}))
    photo = PhotoAttachment(rawFileHandle=str(tmp_path / "gone.jpg"), filename="gone.jpg")

    with pytest.raises(SubmissionError) as exc:
        _run(lambda: client.upload_photo("abc", photo, "012345"))
    assert exc.value.type == "validation"


def test_get_announcements_with_location_filter():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"data": [{
            "id": "a1", "species": "CAT", "sex": "FEMALE", "lastSeenDate": "2025-12-01",
            "status": "MISSING", "locationLatitude": 52.2, "locationLongitude": 21.0,
            "email": "owner@example.com", "futureField": 1,
        }]})

    client = _client(handler)
    items = _run(lambda: client.get_announcements(lat=52.2, lng=21.0))

    assert seen["params"] == {"lat": "52.2", "lng": "21.0", "range": "15"}
    assert len(items) == 1
    assert items[0].id == "a1"
    assert items[0].extra == {"futureField": 1}


def test_get_announcements_without_filter_sends_no_params():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"data": []})

    client = _client(handler)
    assert _run(lambda: client.get_announcements(lat=52.2)) == []
    assert seen["params"] == {}


def test_get_announcement_by_id_not_found():
    client = _client(lambda request: httpx.Response(404, json={"error": {"code": "NOT_FOUND"}}))
    with pytest.raises(LookupError):
        _run(lambda: client.get_announcement_by_id("missing"))
