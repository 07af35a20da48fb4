import json

import httpx
import pytest

from conftest import BASE_URL, multipart_parts
from taskboard.services.api_client import ApiClient, FilePart, FormPayload


def _recording_client(status=200):
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(status, json={"data": []})

    return ApiClient(BASE_URL, transport=httpx.MockTransport(handler)), seen


@pytest.mark.asyncio
async def test_get_sends_json_header_and_query_params():
    api, seen = _recording_client()

    res = await api.get("/tasks", params={"order": "DESC"})

    assert res.status_code == 200
    assert res.json() == {"data": []}
    assert str(seen[0].url) == "http://backend.test/api/tasks?order=DESC"
    assert seen[0].headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_json_verbs_encode_body():
    api, seen = _recording_client()

    await api.post_json("/tasks", {"heading": "a"})
    await api.put("/tasks/7", {"heading": "b"})
    await api.delete("/tasks/7")

    assert [r.method for r in seen] == ["POST", "PUT", "DELETE"]
    assert json.loads(seen[0].content) == {"heading": "a"}
    assert seen[1].url.path == "/api/tasks/7"
    assert all(r.headers["content-type"] == "application/json" for r in seen)


@pytest.mark.asyncio
async def test_form_without_file_is_still_multipart():
    api, seen = _recording_client()
    form = FormPayload()
    form.add("heading", "Pay rent")
    form.add("priority", "low")

    await api.put_form("/tasks/1", form)

    assert seen[0].method == "PUT"
    assert seen[0].headers["content-type"].startswith("multipart/form-data; boundary=")
    parts = multipart_parts(seen[0])
    assert parts["heading"] == (None, b"Pay rent")
    assert parts["priority"] == (None, b"low")
    assert "image" not in parts


@pytest.mark.asyncio
async def test_form_with_file_carries_filename():
    api, seen = _recording_client()
    form = FormPayload()
    form.add("heading", "Pay rent")
    form.attach("image", FilePart("cat.png", b"fake-png-bytes", "image/png"))

    await api.post_form("/tasks", form)

    parts = multipart_parts(seen[0])
    assert parts["image"] == ("cat.png", b"fake-png-bytes")


@pytest.mark.asyncio
async def test_non_2xx_is_raised_to_the_caller():
    api, seen = _recording_client(status=500)

    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        await api.delete("/tasks/1")

    assert excinfo.value.response.status_code == 500
    assert len(seen) == 1  # no retry


@pytest.mark.asyncio
async def test_transport_error_is_raised():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    api = ApiClient(BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.ConnectError):
        await api.get("/tasks")
