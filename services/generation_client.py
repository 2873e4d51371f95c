"""
生成服务客户端 (Generation Client)
向外部文本生成服务发送一次请求，并把各种结果统一为 GenerationResult。
不重试、不缓存；是否允许发起请求由 SessionState 决定。
"""
from __future__ import annotations
import logging
from typing import Optional

import httpx

from config.loader import get_generation_settings
from core.exceptions import EmptyResponseError, TransportError
from core.schemas import FailureReason, GenerationResult

logger = logging.getLogger(__name__)


class GenerationClient:
    def __init__(self, endpoint_url: str, timeout_seconds: float = 60.0,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.endpoint_url = endpoint_url
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client

    @classmethod
    def from_config(cls, config: dict, http_client: Optional[httpx.AsyncClient] = None) -> "GenerationClient":
        settings = get_generation_settings(config)
        return cls(settings["endpoint_url"], settings["timeout_seconds"], http_client=http_client)

    async def submit(self, prompt: str) -> GenerationResult:
        """
        发送 POST {"prompt": ...}，期望返回 {"result": ...}。

        Returns:
            GenerationResult: 成功时携带 markdown 文本；
                返回体缺少可用文本时为 EMPTY_RESPONSE；
                超时、连接失败或非 2xx 状态码时为 TRANSPORT_ERROR。
        """
        logger.info(f"发送生成请求: {self.endpoint_url} (提示词长度: {len(prompt)})")
        try:
            text = await self.request_text(prompt)
        except TransportError as e:
            logger.warning(f"生成服务请求失败: {e}")
            return GenerationResult.failure(FailureReason.TRANSPORT_ERROR, str(e))
        except EmptyResponseError as e:
            logger.warning(f"生成服务返回内容不可用: {e}")
            return GenerationResult.failure(FailureReason.EMPTY_RESPONSE, str(e))

        logger.info(f"生成成功 (返回长度: {len(text)})")
        return GenerationResult.success(text)

    async def request_text(self, prompt: str) -> str:
        """
        发送请求并取出 result 字段。

        Raises:
            TransportError: 超时、连接失败或非 2xx 状态码。
            EmptyResponseError: 返回体不是 JSON 对象，或缺少非空字符串 result。
        """
        try:
            response = await self._post({"prompt": prompt})
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise TransportError(f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise EmptyResponseError("response body is not JSON") from e

        text = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(text, str) or not text:
            raise EmptyResponseError(f"missing 'result' field: {str(payload)[:200]}")
        return text

    async def _post(self, body: dict) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(self.endpoint_url, json=body, timeout=self.timeout_seconds)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.post(self.endpoint_url, json=body)
