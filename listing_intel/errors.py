"""例外定義."""


class ListingIntelError(Exception):
    """本パッケージの例外基底クラス."""


class NetworkError(ListingIntelError):
    """通信レベルの失敗（接続エラー・タイムアウト等）."""


class BlockedError(ListingIntelError):
    """HTTP 503. ボット対策によるブロックを示し、データ欠如とは区別する."""

    def __init__(self, message: str = "Amazon blocked request (503). Try again later."):
        super().__init__(message)


class HttpStatusError(ListingIntelError):
    """503 以外の非 2xx レスポンス."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"Failed to fetch page. Status: {status_code}")


class ParseError(ListingIntelError):
    """HTML が全抽出戦略から外れている. 抽出側ではデフォルト値で吸収する."""


class ValidationError(ListingIntelError):
    """境界での必須入力欠落."""
