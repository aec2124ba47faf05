"""InMemoryFlagCache 実装"""

from __future__ import annotations

import time

from .cache import FlagCache
from .models import FeatureFlag

DEFAULT_TTL = 60
_INITIAL_OFFSET = 90.0


class InMemoryFlagCache(FlagCache):
    """インメモリのフラグキャッシュ。"""

    def __init__(self) -> None:
        self._flags: dict[str, FeatureFlag] = {}
        self._ttl = DEFAULT_TTL
        self._next_refresh = time.monotonic() - _INITIAL_OFFSET

    @property
    def ttl(self) -> int:
        return self._ttl

    async def get(self, name: str) -> tuple[bool, bool]:
        flag = self._flags.get(name)
        if flag is None:
            return False, False
        return flag.enabled, True

    async def get_all(self) -> list[FeatureFlag]:
        return list(self._flags.values())

    async def refresh(self, flags: list[FeatureFlag], interval_allowed: int) -> None:
        # 読み手に途中状態を見せないよう新しい dict を組み立ててから差し替える
        self._flags = {flag.details.name: flag for flag in flags}
        self._ttl = interval_allowed
        self._next_refresh = time.monotonic() + interval_allowed

    async def should_refresh_cache(self) -> bool:
        return time.monotonic() > self._next_refresh

    async def initialize(self) -> None:
        self._ttl = DEFAULT_TTL
        self._next_refresh = time.monotonic() - _INITIAL_OFFSET
