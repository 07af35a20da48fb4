from __future__ import annotations

import sys
from email import policy
from email.parser import BytesParser
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from taskboard.core.notifications import ToastQueue  # noqa: E402
from taskboard.services.api_client import ApiClient  # noqa: E402

BASE_URL = "http://backend.test/api"


def make_task(task_id, heading, priority, created_at, **extra) -> dict:
    task = {
        "id": task_id,
        "heading": heading,
        "description": f"{heading} description",
        "date": "2024-05-01",
        "time": "09:30",
        "priority": priority,
        "image": f"http://backend.test/uploads/{task_id}.png",
        "createdAt": created_at,
    }
    task.update(extra)
    return task


def multipart_parts(request: httpx.Request) -> dict[str, tuple[str | None, bytes]]:
    """Split a recorded multipart request into {name: (filename, payload)}."""
    head = b"Content-Type: " + request.headers["content-type"].encode() + b"\r\n\r\n"
    msg = BytesParser(policy=policy.HTTP).parsebytes(head + request.content)
    parts = {}
    for part in msg.iter_parts():
        name = part.get_param("name", header="content-disposition")
        parts[name] = (part.get_filename(), part.get_payload(decode=True))
    return parts


class FakeBackend:
    """In-memory stand-in for the task REST API, mounted on httpx.MockTransport."""

    def __init__(self, tasks=None):
        self.tasks: list[dict] = list(tasks or [])
        self.requests: list[httpx.Request] = []
        self.fail: dict[tuple[str, str], int] = {}

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        status = self.fail.get((request.method, path))
        if status is not None:
            return httpx.Response(status, json={"message": "failed"})

        if path == "/tasks":
            if request.method == "GET":
                return self._list(request)
            if request.method == "POST":
                new_id = str(len(self.tasks) + 100)
                self.tasks.append(make_task(new_id, "created", "low", "2024-06-01T00:00:00Z"))
                return httpx.Response(200, json={"data": self.tasks[-1]})

        task_id = path.rsplit("/", 1)[-1]
        task = next((t for t in self.tasks if str(t["id"]) == task_id), None)
        if task is None:
            return httpx.Response(404, json={"message": "Task not found"})
        if request.method == "GET":
            return httpx.Response(200, json={"data": task})
        if request.method == "PUT":
            return httpx.Response(200, json={"data": task})
        if request.method == "DELETE":
            self.tasks.remove(task)
            return httpx.Response(200, json={"message": "deleted"})
        return httpx.Response(405)

    def _list(self, request: httpx.Request) -> httpx.Response:
        rows = list(self.tasks)
        priority = request.url.params.get("priority")
        if priority:
            rows = [t for t in rows if t["priority"].lower() == priority.lower()]
        rows.sort(key=lambda t: t["createdAt"], reverse=request.url.params.get("order") == "DESC")
        return httpx.Response(200, json={"data": rows})


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(
        [
            make_task("1", "Pay rent", "Low", "2024-04-01T10:00:00Z"),
            make_task("2", "Ship release", "High", "2024-04-02T10:00:00Z"),
        ]
    )


@pytest.fixture
def api(backend) -> ApiClient:
    return ApiClient(BASE_URL, transport=httpx.MockTransport(backend))


@pytest.fixture
def notifier() -> ToastQueue:
    return ToastQueue()
