"""
jitai/sources/base.py
=====================
所有数据源适配器共享的基类。

子类实现 `fetch`，返回本数据源映射好的 GlyphRecord 列表。
请求失败或响应结构不符时抛出 SourceUnavailable，由聚合器统一处理。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from jitai.errors import SourceUnavailable
from jitai.models import GlyphRecord, SourceTag

M = TypeVar("M", bound=BaseModel)


class SourceAdapter(ABC):
    """适配器抽象基类。HTTP 客户端由调用方注入，适配器不负责关闭。"""

    tag: SourceTag

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @abstractmethod
    async def fetch(self, character: str, *, delegate: bool = False) -> list[GlyphRecord]:
        """检索单个字符，返回零条或多条尚未定年的记录。

        delegate 为 True 时同时检索代表字形；不支持的数据源忽略该参数。
        """
        ...

    async def _get(self, url: str, params: dict | None = None) -> httpx.Response:
        logger.debug(f"[{self.tag.value.upper()}] GET {url} {params or ''}")
        try:
            resp = await self._client.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise SourceUnavailable(self.tag.value, f"request failed: {exc}") from exc
        return resp

    async def _get_json(self, url: str, params: dict | None = None) -> Any:
        resp = await self._get(url, params)
        try:
            return resp.json()
        except ValueError as exc:
            raise SourceUnavailable(self.tag.value, f"invalid JSON from {url}") from exc

    def _parse(self, model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise SourceUnavailable(self.tag.value, f"unexpected response shape: {exc}") from exc

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} source={self.tag.value}>"
