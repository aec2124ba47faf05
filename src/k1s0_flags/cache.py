"""FlagCache 抽象基底クラス"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import FeatureFlag


class FlagCache(ABC):
    """フラグキャッシュ抽象基底クラス。"""

    @abstractmethod
    async def get(self, name: str) -> tuple[bool, bool]:
        """(enabled, exists) を返す。存在しなければ (False, False)。"""
        ...

    @abstractmethod
    async def get_all(self) -> list[FeatureFlag]:
        """保持している全フラグを返す。"""
        ...

    @abstractmethod
    async def refresh(self, flags: list[FeatureFlag], interval_allowed: int) -> None:
        """フラグ集合を丸ごと置き換え、次回更新期限を interval_allowed 秒後にする。"""
        ...

    @abstractmethod
    async def should_refresh_cache(self) -> bool:
        """更新期限を過ぎていれば True。"""
        ...

    @abstractmethod
    async def initialize(self) -> None:
        """TTL を既定値に戻し、期限を過去に設定する。"""
        ...
