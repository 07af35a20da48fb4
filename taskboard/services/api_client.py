# taskboard/services/api_client.py
"""
Thin async wrappers around the task backend.

Every call is exactly one request. Status codes are not interpreted here:
a non-2xx answer is raised as ``httpx.HTTPStatusError`` and a transport
failure as ``httpx.TransportError``; callers catch ``httpx.HTTPError``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class FilePart:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass
class FormPayload:
    """Multipart body: ordered text fields plus optional file parts."""

    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, FilePart] = field(default_factory=dict)

    def add(self, name: str, value: Any) -> None:
        self.fields[name] = "" if value is None else str(value)

    def attach(self, name: str, part: FilePart) -> None:
        self.files[name] = part

    def to_multipart(self) -> list[tuple[str, tuple]]:
        # text fields go in as filename-less parts so httpx always builds a
        # multipart body, even when no file is attached
        parts: list[tuple[str, tuple]] = [
            (name, (None, value)) for name, value in self.fields.items()
        ]
        for name, part in self.files.items():
            parts.append((name, (part.filename, part.content, part.content_type)))
        return parts


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            res = await self._http.request(method, url, **kwargs)
            res.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("%s %s -> %s", method, url, e.response.status_code)
            raise
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise
        return res

    async def get(self, url: str, params: Optional[Mapping[str, str]] = None) -> httpx.Response:
        return await self._send("GET", url, params=params, headers=JSON_HEADERS)

    async def post_json(self, url: str, body: Any) -> httpx.Response:
        return await self._send("POST", url, json=body, headers=JSON_HEADERS)

    async def post_form(self, url: str, form: FormPayload) -> httpx.Response:
        return await self._send("POST", url, files=form.to_multipart())

    async def put_form(self, url: str, form: FormPayload) -> httpx.Response:
        return await self._send("PUT", url, files=form.to_multipart())

    async def put(self, url: str, body: Any) -> httpx.Response:
        return await self._send("PUT", url, json=body, headers=JSON_HEADERS)

    async def delete(self, url: str) -> httpx.Response:
        return await self._send("DELETE", url, headers=JSON_HEADERS)
