"""测试共用的假档案服务：基于 httpx.MockTransport 按 host + path 路由。"""

from __future__ import annotations

import json
from typing import Callable, Union

import httpx
import pytest

Handler = Callable[[httpx.Request], httpx.Response]


class FakeArchive:
    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, host: str, path: str, payload=None, *, status: int = 200,
            handler: Union[Handler, None] = None, text: Union[str, None] = None) -> None:
        if handler is None:
            if text is not None:
                handler = lambda req: httpx.Response(status, text=text)
            else:
                body = json.dumps(payload).encode("utf-8")
                handler = lambda req: httpx.Response(
                    status, content=body, headers={"content-type": "application/json"}
                )
        self.routes[(host, path)] = handler

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.url.host, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def hutime_echo(texts: dict[str, str]) -> Handler:
    """按输入顺序返回 texts 中对应的换算结果；不在表中的返回空"""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        dates = body["params"]["ival"].split("\n")
        return httpx.Response(200, json={"result": [{"text": texts.get(d, "")} for d in dates]})

    return handler


@pytest.fixture
def archive() -> FakeArchive:
    return FakeArchive()
