"""
Aircraft Roster - インメモリ認証ストア

責務:
  - アカウントの登録（追記のみ。更新・削除はしない）
  - ユーザー名 + パスワードの完全一致による認証

設計方針:
  - 永続化・ハッシュ化は行わない（パスワードは平文比較）
  - 重複ユーザー名の登録は AccountExists で拒否する
  - 登録と認証はロックで直列化する
"""
import logging
import threading
from typing import List, Optional

from roster_errors import AccountExists
from roster_models import Account

logger = logging.getLogger("aircraft_roster.auth")


class CredentialStore:
    def __init__(self):
        self._accounts: List[Account] = []
        self._lock = threading.Lock()

    def register(self, username: str, password: str) -> Account:
        """アカウントを末尾に追加する。同名のユーザーが居れば AccountExists。"""
        account = Account(username=username, password=password)
        with self._lock:
            if any(a.username == username for a in self._accounts):
                raise AccountExists(username)
            self._accounts.append(account)
        logger.info(f"アカウント登録: {username}")
        return account

    def authenticate(self, username: str, password: str) -> Optional[Account]:
        """先頭から走査し、最初に完全一致したアカウントを返す。無ければNone。"""
        with self._lock:
            for account in self._accounts:
                if account.matches(username, password):
                    return account
        logger.info(f"認証失敗: {username}")
        return None

    def usernames(self) -> List[str]:
        with self._lock:
            return [a.username for a in self._accounts]

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
