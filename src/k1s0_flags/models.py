"""flags データモデル"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _require(data: dict[str, Any], key: str, kind: type) -> Any:
    """必須フィールドを型付きで取り出す。欠落・型違いは ValueError。"""
    if key not in data:
        raise ValueError(f"missing field: {key}")
    value = data[key]
    # bool は int のサブクラスなので int 指定時は明示的に除外する
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"invalid type for {key}: {type(value).__name__}")
    return value


@dataclass(frozen=True)
class FlagDetails:
    """フラグの識別情報。name は正規化済みの検索キー。"""

    name: str
    id: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlagDetails:
        return cls(name=_require(data, "name", str), id=_require(data, "id", str))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "id": self.id}


@dataclass(frozen=True)
class FeatureFlag:
    """フィーチャーフラグ。"""

    enabled: bool
    details: FlagDetails

    @property
    def name(self) -> str:
        return self.details.name

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeatureFlag:
        return cls(
            enabled=_require(data, "enabled", bool),
            details=FlagDetails.from_dict(_require(data, "details", dict)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "details": self.details.to_dict()}


@dataclass
class FlagsResponse:
    """GET /flags のレスポンス。"""

    interval_allowed: int
    flags: list[FeatureFlag] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlagsResponse:
        return cls(
            interval_allowed=_require(data, "intervalAllowed", int),
            flags=[FeatureFlag.from_dict(f) for f in _require(data, "flags", list)],
        )


@dataclass(frozen=True)
class Auth:
    """フラグサービスの認証情報。"""

    project_id: str
    agent_id: str
    environment_id: str
