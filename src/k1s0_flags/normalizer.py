"""フラグ名の正規化"""

from __future__ import annotations


def normalize(raw: str) -> str:
    """検索キーに正規化する（小文字化のみ）。"""
    return raw.lower()


def expand(suffix: str) -> list[str]:
    """環境変数サフィックスから名前のバリエーションを列挙する。

    小文字形に加え、"_" を含む場合はハイフン形、"_" か "-" を含む場合は
    スペース形を返す。重複は呼び出し側の辞書キーで吸収される。
    """
    lower = suffix.lower()
    variants = [lower]
    if "_" in lower:
        variants.append(lower.replace("_", "-"))
    if "_" in lower or "-" in lower:
        variants.append(lower.replace("_", " ").replace("-", " "))
    return variants
