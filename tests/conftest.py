"""flags テスト共通フィクスチャ"""

from __future__ import annotations

import logging
import os

import pytest
import structlog
from k1s0_flags import Auth, FeatureFlag, FlagDetails, FlagsResponse, FlagsTransport


class StubTransport(FlagsTransport):
    """呼び出し回数を記録し、用意した結果を順に返すトランスポート。"""

    def __init__(self, *results: FlagsResponse | Exception) -> None:
        self._results = list(results)
        self.calls = 0

    async def fetch_flags(self, auth: Auth | None) -> FlagsResponse:
        self.calls += 1
        result = self._results[min(self.calls, len(self._results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


def make_flag(name: str, enabled: bool, flag_id: str | None = None) -> FeatureFlag:
    return FeatureFlag(enabled=enabled, details=FlagDetails(name=name, id=flag_id or f"id-{name}"))


def make_response(*flags: FeatureFlag, interval: int = 60) -> FlagsResponse:
    return FlagsResponse(interval_allowed=interval, flags=list(flags))


AUTH = Auth(project_id="test-project", agent_id="test-agent", environment_id="development")


@pytest.fixture(autouse=True)
def clean_flags_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """実行環境の FLAGS_* 変数がテストに混入しないようにする。"""
    for key in list(os.environ):
        if key.startswith("FLAGS_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def reset_logging():
    """configure_logging が差し替えたハンドラをテストごとに元へ戻す。"""
    yield
    library_logger = logging.getLogger("k1s0_flags")
    library_logger.handlers = []
    library_logger.setLevel(logging.NOTSET)
    library_logger.propagate = True
    structlog.reset_defaults()
