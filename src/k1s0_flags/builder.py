"""ClientBuilder — 不変な fluent ビルダー"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .cache import FlagCache
from .config import DEFAULT_BASE_URL, DEFAULT_MAX_RETRIES, ClientConfig, validate_config
from .http_client import FlagsTransport
from .models import Auth
from .refresh import DEFAULT_RETRY_DELAY, ErrorCallback

if TYPE_CHECKING:
    from .client import FlagsClient


@dataclass(frozen=True)
class ClientBuilder:
    """FlagsClient のビルダー。with_* は新しいビルダーを返し、build() で一度だけ検証する。"""

    base_url: str = DEFAULT_BASE_URL
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    timeout: float = 10.0
    auth: Auth | None = None
    error_callback: ErrorCallback | None = None
    cache: FlagCache | None = None
    transport: FlagsTransport | None = None
    environ: Mapping[str, str] | None = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> ClientBuilder:
        return cls(
            base_url=config.base_url,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
            auth=config.auth,
        )

    def with_base_url(self, base_url: str) -> ClientBuilder:
        return replace(self, base_url=base_url)

    def with_max_retries(self, max_retries: int) -> ClientBuilder:
        return replace(self, max_retries=max_retries)

    def with_retry_delay(self, retry_delay: float) -> ClientBuilder:
        return replace(self, retry_delay=retry_delay)

    def with_auth(self, auth: Auth) -> ClientBuilder:
        return replace(self, auth=auth)

    def with_error_callback(self, callback: ErrorCallback) -> ClientBuilder:
        return replace(self, error_callback=callback)

    def with_cache(self, cache: FlagCache) -> ClientBuilder:
        return replace(self, cache=cache)

    def with_transport(self, transport: FlagsTransport) -> ClientBuilder:
        return replace(self, transport=transport)

    def with_environ(self, environ: Mapping[str, str]) -> ClientBuilder:
        """オーバーライドの読み取り元を os.environ 以外に差し替える。"""
        return replace(self, environ=environ)

    def build(self) -> FlagsClient:
        """設定を検証して FlagsClient を生成する。

        Raises:
            ConfigError: 設定が不正な場合
        """
        from .client import FlagsClient

        config = validate_config(
            {
                "base_url": self.base_url,
                "max_retries": self.max_retries,
                "retry_delay": self.retry_delay,
                "timeout": self.timeout,
                "auth": self.auth,
            }
        )
        return FlagsClient(
            config,
            cache=self.cache,
            transport=self.transport,
            error_callback=self.error_callback,
            environ=self.environ,
        )
