"""
Aircraft Roster - 例外定義

  RosterError
   ├── FetchError            1機体の取得失敗（集約層で握りつぶす）
   │    ├── TransportError       通信エラー・タイムアウト
   │    ├── UpstreamStatusError  2xx以外の応答
   │    ├── MalformedResponse    JSONとして解釈できない応答
   │    └── AircraftNotFound     aircraft ペイロードなし（正常な空応答）
   ├── SystemFailure         集約そのものを開始できない
   ├── PoolExhausted         作業セットを組み立てられない
   ├── AccountExists         ユーザー名の重複登録
   └── NotAuthenticated      未ログインでの名簿要求
"""
from typing import Optional


class RosterError(Exception):
    """本パッケージの例外の基底クラス"""


class FetchError(RosterError):
    """1機体分のルックアップ失敗"""

    def __init__(self, identifier: str, message: str):
        super().__init__(f"{identifier}: {message}")
        self.identifier = identifier


class TransportError(FetchError):
    pass


class UpstreamStatusError(FetchError):
    def __init__(self, identifier: str, status: int):
        super().__init__(identifier, f"HTTP {status}")
        self.status = status


class MalformedResponse(FetchError):
    pass


class AircraftNotFound(FetchError):
    def __init__(self, identifier: str, detail: Optional[str] = None):
        super().__init__(identifier, detail or "aircraft payload missing")


class SystemFailure(RosterError):
    """並行実行基盤を起動できなかった（個々の取得失敗とは区別する）"""


class PoolExhausted(RosterError):
    def __init__(self, target: int, produced: int, iterations: int):
        super().__init__(
            f"working set stalled at {produced}/{target} after {iterations} candidates"
        )
        self.target = target
        self.produced = produced
        self.iterations = iterations


class AccountExists(RosterError, ValueError):
    def __init__(self, username: str):
        super().__init__(f"username already registered: {username}")
        self.username = username


class NotAuthenticated(RosterError):
    pass
