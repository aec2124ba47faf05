"""RefreshCoordinator — リモート取得・マージ・キャッシュ反映"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Mapping

from .breaker import CircuitBreaker
from .cache import FlagCache
from .exceptions import CacheError, FlagError, TransportError
from .http_client import FlagsTransport
from .local import build_local
from .memory import DEFAULT_TTL
from .models import Auth, FeatureFlag
from .normalizer import normalize

ErrorCallback = Callable[[FlagError], None]

DEFAULT_RETRY_DELAY = 0.1

logger = logging.getLogger(__name__)


def merge_flags(remote: list[FeatureFlag], local: list[FeatureFlag]) -> list[FeatureFlag]:
    """リモートとローカルを統合する。同名ならローカルが優先される。

    結果は名前ごとに 1 件。リモート内の同名は後勝ちで 1 件にまとめ、
    ローカル側に対応のあるものはローカルに置き換わる（位置はリモートのまま）。
    残ったローカルフラグは末尾に追加される。
    """
    merged: dict[str, FeatureFlag] = {flag.details.name: flag for flag in remote}
    for flag in local:
        merged[flag.details.name] = flag
    return list(merged.values())


def _normalized(flag: FeatureFlag) -> FeatureFlag:
    return dataclasses.replace(
        flag, details=dataclasses.replace(flag.details, name=normalize(flag.details.name))
    )


class RefreshCoordinator:
    """サーキットブレーカーとリトライ付きでフラグキャッシュを更新する。"""

    def __init__(
        self,
        cache: FlagCache,
        transport: FlagsTransport,
        auth: Auth | None = None,
        max_retries: int = 3,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        breaker: CircuitBreaker | None = None,
        error_callback: ErrorCallback | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._cache = cache
        self._transport = transport
        self._auth = auth
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._breaker = breaker or CircuitBreaker()
        self._error_callback = error_callback
        self._environ = environ

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    async def refresh(self) -> None:
        """キャッシュを更新する。

        認証情報がなければローカルオーバーライドのみを反映する。
        ブレーカーが開いている間は何もしない。全リトライ失敗時は
        ローカルオーバーライドを反映したうえで最後のエラーを送出する。

        Raises:
            FlagError: 全リトライ失敗、またはキャッシュ反映の失敗
        """
        if self._auth is None:
            await self._commit(build_local(self._environ), DEFAULT_TTL)
            return

        if not self._breaker.allow_request():
            logger.debug(
                "Circuit breaker open, keeping cached flags",
                extra={"failure_count": self._breaker.failure_count},
            )
            return

        attempts = max(self._max_retries, 1)
        for attempt in range(1, attempts + 1):
            try:
                resp = await self._transport.fetch_flags(self._auth)
            except Exception as e:
                error = e if isinstance(e, FlagError) else TransportError(str(e), cause=e)
                if attempt < attempts:
                    logger.warning(
                        "Flag fetch failed, retrying",
                        extra={"attempt": attempt, "max_attempts": attempts, "error": str(error)},
                    )
                    self._report(error)
                    await asyncio.sleep(self._retry_delay * attempt)
                    continue

                self._breaker.record_failure()
                logger.warning(
                    "Flag fetch failed, falling back to local overrides",
                    extra={"attempts": attempts, "error": str(error)},
                )
                self._report(error)
                await self._commit(build_local(self._environ), DEFAULT_TTL)
                if error is e:
                    raise
                raise error from e

            self._breaker.record_success()
            remote = [_normalized(flag) for flag in resp.flags]
            merged = merge_flags(remote, build_local(self._environ))
            await self._commit(merged, resp.interval_allowed)
            logger.debug(
                "Flags refreshed",
                extra={"count": len(merged), "interval_allowed": resp.interval_allowed},
            )
            return

    async def _commit(self, flags: list[FeatureFlag], interval_allowed: int) -> None:
        try:
            await self._cache.refresh(flags, interval_allowed)
        except FlagError as e:
            self._report(e)
            raise
        except Exception as e:
            error = CacheError(f"Failed to refresh cache: {e}", cause=e)
            self._report(error)
            raise error from e

    def _report(self, error: FlagError) -> None:
        if self._error_callback is not None:
            self._error_callback(error)
