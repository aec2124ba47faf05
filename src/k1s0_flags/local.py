"""環境変数によるローカルオーバーライド"""

from __future__ import annotations

import os
from collections.abc import Mapping

from .models import FeatureFlag, FlagDetails
from .normalizer import expand

ENV_PREFIX = "FLAGS_"
LOCAL_ID_PREFIX = "local_"


def build_local(environ: Mapping[str, str] | None = None) -> list[FeatureFlag]:
    """FLAGS_ で始まる環境変数からフラグを生成する。

    値が厳密に "true" の場合のみ有効とみなす。それ以外はエラーにせず無効。
    """
    env = os.environ if environ is None else environ
    result: list[FeatureFlag] = []
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        enabled = value == "true"
        for name in expand(key[len(ENV_PREFIX) :]):
            result.append(
                FeatureFlag(
                    enabled=enabled,
                    details=FlagDetails(name=name, id=f"{LOCAL_ID_PREFIX}{name}"),
                )
            )
    return result
