"""フラグサービス HTTP クライアント実装"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from .exceptions import ApiError, AuthError, TransportError
from .models import Auth, FlagsResponse

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "k1s0-flags-python"


class FlagsTransport(ABC):
    """リモートフラグ取得の抽象基底クラス。"""

    @abstractmethod
    async def fetch_flags(self, auth: Auth | None) -> FlagsResponse:
        """リモートのフラグ一覧と更新間隔を取得する。"""
        ...


class HttpFlagsTransport(FlagsTransport):
    """httpx を使ったフラグサービス HTTP クライアント。"""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
        )

    @staticmethod
    def _auth_headers(auth: Auth) -> dict[str, str]:
        return {
            "X-Project-ID": auth.project_id,
            "X-Agent-ID": auth.agent_id,
            "X-Environment-ID": auth.environment_id,
        }

    async def fetch_flags(self, auth: Auth | None) -> FlagsResponse:
        if auth is None:
            raise AuthError("Authentication is required")
        try:
            async with self._make_client() as client:
                resp = await client.get("/flags", headers=self._auth_headers(auth))
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to fetch flags: {e}", cause=e) from e
        if not resp.is_success:
            raise ApiError(f"Unexpected status code: {resp.status_code}")
        try:
            data: dict[str, Any] = resp.json()
            return FlagsResponse.from_dict(data)
        except Exception as e:
            raise ApiError(f"Invalid response body: {e}", cause=e) from e
