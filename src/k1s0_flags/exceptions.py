"""flags ライブラリの例外型定義"""

from __future__ import annotations


class FlagErrorCodes:
    """FlagError のエラーコード定数。"""

    HTTP_ERROR: str = "HTTP_ERROR"
    AUTH_ERROR: str = "AUTH_ERROR"
    CACHE_ERROR: str = "CACHE_ERROR"
    API_ERROR: str = "API_ERROR"
    CONFIG_ERROR: str = "CONFIG_ERROR"


class FlagError(Exception):
    """flags ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class TransportError(FlagError):
    """ネットワーク層・HTTP 層のエラー。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FlagErrorCodes.HTTP_ERROR, message, cause)


class AuthError(FlagError):
    """認証情報が必要なのに存在しない、または不正な場合のエラー。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FlagErrorCodes.AUTH_ERROR, message, cause)


class CacheError(FlagError):
    """キャッシュバックエンド内部のエラー。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FlagErrorCodes.CACHE_ERROR, message, cause)


class ApiError(FlagError):
    """2xx 以外のレスポンス、または不正なレスポンスボディ。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FlagErrorCodes.API_ERROR, message, cause)


class ConfigError(FlagError):
    """クライアント設定の検証エラー。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FlagErrorCodes.CONFIG_ERROR, message, cause)
