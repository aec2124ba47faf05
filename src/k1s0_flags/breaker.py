"""リモートフラグ取得用のサーキットブレーカー"""

from __future__ import annotations

import time

DEFAULT_COOLDOWN = 10.0


class CircuitBreaker:
    """リトライを使い切った更新サイクルを記録し、OPEN の間は取得を抑止する。

    更新サイクルが 1 回失敗し切った時点で OPEN になる。OPEN の間は最後の失敗から
    cooldown 秒経過するまで拒否し、経過後の最初の要求で CLOSED に戻して通す。
    """

    def __init__(self, cooldown: float = DEFAULT_COOLDOWN) -> None:
        self.cooldown = cooldown
        self._is_open = False
        self._failure_count = 0
        self._last_failure_at: float | None = None

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def last_failure_at(self) -> float | None:
        return self._last_failure_at

    def allow_request(self) -> bool:
        """取得を試みてよければ True。"""
        if not self._is_open:
            return True
        if self._last_failure_at is not None:
            if time.monotonic() - self._last_failure_at < self.cooldown:
                return False
        self._is_open = False
        self._failure_count = 0
        return True

    def record_success(self) -> None:
        """取得成功を記録する。OPEN 状態は変更しない。"""
        self._failure_count = 0

    def record_failure(self) -> None:
        """全リトライが失敗した更新サイクルを記録する。"""
        self._failure_count += 1
        self._last_failure_at = time.monotonic()
        self._is_open = True
