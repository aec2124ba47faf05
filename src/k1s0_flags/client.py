"""FlagsClient — フラグ評価の公開ファサード"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .breaker import CircuitBreaker
from .builder import ClientBuilder
from .cache import FlagCache
from .config import ClientConfig
from .exceptions import CacheError, FlagError
from .http_client import FlagsTransport, HttpFlagsTransport
from .memory import InMemoryFlagCache
from .models import FeatureFlag
from .normalizer import normalize
from .refresh import ErrorCallback, RefreshCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Flag:
    """client.is_(name).enabled() 形式のためのラッパー。"""

    name: str
    client: FlagsClient

    async def enabled(self) -> bool:
        return await self.client.is_enabled(self.name)


class FlagsClient:
    """フィーチャーフラグクライアント。

    キャッシュが期限切れのときだけリモートを再取得し、以降はキャッシュから読む。
    真偽値を返すメソッドは内部エラー時に False を返す（fail open）。
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        cache: FlagCache | None = None,
        transport: FlagsTransport | None = None,
        error_callback: ErrorCallback | None = None,
        environ: Mapping[str, str] | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._cache = cache or InMemoryFlagCache()
        self._refresher = RefreshCoordinator(
            cache=self._cache,
            transport=transport
            or HttpFlagsTransport(self._config.base_url, timeout=self._config.timeout),
            auth=self._config.auth,
            max_retries=self._config.max_retries,
            retry_delay=self._config.retry_delay,
            breaker=breaker,
            error_callback=error_callback,
            environ=environ,
        )
        self._refresh_in_progress = False

    @staticmethod
    def builder() -> ClientBuilder:
        return ClientBuilder()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def debug_info(self) -> str:
        return (
            f"FlagsClient(base_url={self._config.base_url!r}, "
            f"max_retries={self._config.max_retries}, auth={self._config.auth!r})"
        )

    def is_(self, name: str) -> Flag:
        return Flag(name=name, client=self)

    async def is_enabled(self, name: str) -> bool:
        """フラグが有効か判定する。"""
        await self._refresh_if_stale()
        return await self._lookup(name)

    async def get_multiple(self, names: Iterable[str]) -> dict[str, bool]:
        """複数フラグをまとめて判定する。キーは呼び出し側の表記のまま。"""
        await self._refresh_if_stale()
        return {name: await self._lookup(name) for name in names}

    async def all_enabled(self, names: Iterable[str]) -> bool:
        names = list(names)
        if not names:
            return True
        flags = await self.get_multiple(names)
        return all(flags[name] for name in names)

    async def any_enabled(self, names: Iterable[str]) -> bool:
        names = list(names)
        if not names:
            return False
        flags = await self.get_multiple(names)
        return any(flags[name] for name in names)

    async def list(self) -> list[FeatureFlag]:
        """キャッシュ上の全フラグを返す。

        Raises:
            CacheError: キャッシュの読み出しに失敗した場合
        """
        await self._refresh_if_stale()
        try:
            return await self._cache.get_all()
        except FlagError:
            raise
        except Exception as e:
            raise CacheError(f"Failed to list flags: {e}", cause=e) from e

    async def _lookup(self, name: str) -> bool:
        try:
            enabled, exists = await self._cache.get(normalize(name))
        except Exception as e:
            logger.warning("Flag lookup failed", extra={"flag": name, "error": str(e)})
            return False
        return exists and enabled

    async def _refresh_if_stale(self) -> None:
        if not await self._cache.should_refresh_cache():
            return
        if self._refresh_in_progress:
            return
        self._refresh_in_progress = True
        try:
            await self._refresher.refresh()
        except FlagError as e:
            logger.warning("Flag refresh failed, serving cached flags", extra={"error": str(e)})
        finally:
            self._refresh_in_progress = False
