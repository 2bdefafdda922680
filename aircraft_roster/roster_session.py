"""
Aircraft Roster - セッション状態とフォーム検証

責務:
  - ログイン / 新規登録フォームの入力検証（認証より先に行う）
  - ログイン中アカウントとクリック数の保持
    （グローバルな共有状態にせず、呼び出し側が明示的に受け渡す）
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from credential_store import CredentialStore
from roster_errors import AccountExists
from roster_models import Account

logger = logging.getLogger("aircraft_roster.session")

# ─────────────────────────────────
# エラーメッセージ
# ─────────────────────────────────
USERNAME_REQUIRED = "Username is required"
PASSWORD_REQUIRED = "Password is required"
PASSWORDS_DO_NOT_MATCH = "Passwords do not match"
INVALID_CREDENTIALS = "Invalid username or password"
USERNAME_TAKEN = "Username is already taken"


def validate_login_form(username: str, password: str) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not username:
        errors["username"] = USERNAME_REQUIRED
    if not password:
        errors["password"] = PASSWORD_REQUIRED
    return errors


def validate_registration_form(
    username: str, password: str, confirm_password: str
) -> Dict[str, str]:
    errors = validate_login_form(username, password)
    if password != confirm_password:
        errors["confirm_password"] = PASSWORDS_DO_NOT_MATCH
    return errors


@dataclass
class FormResult:
    """フォーム送信結果。errors が空なら成功。"""
    account: Optional[Account] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors and self.account is not None


class AppSession:
    def __init__(self, store: CredentialStore):
        self._store = store
        self._user: Optional[Account] = None
        self._click_count = 0
        self._lock = threading.Lock()

    @property
    def current_user(self) -> Optional[Account]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def click_count(self) -> int:
        return self._click_count

    def increment_click_count(self) -> int:
        with self._lock:
            self._click_count += 1
            return self._click_count

    # ─────────────────────────────────
    # ログイン / 登録 / ログアウト
    # ─────────────────────────────────
    def login(self, username: str, password: str) -> FormResult:
        """入力検証 → 認証。失敗時は errors["general"] に理由が入る。"""
        errors = validate_login_form(username, password)
        if errors:
            return FormResult(errors=errors)

        account = self._store.authenticate(username, password)
        if account is None:
            return FormResult(errors={"general": INVALID_CREDENTIALS})

        with self._lock:
            self._user = account
        logger.info(f"ログイン: {account.username}")
        return FormResult(account=account)

    def register(self, username: str, password: str, confirm_password: str) -> FormResult:
        """入力検証 → 登録。登録だけではログイン状態にしない。"""
        errors = validate_registration_form(username, password, confirm_password)
        if errors:
            return FormResult(errors=errors)
        try:
            account = self._store.register(username, password)
        except AccountExists:
            return FormResult(errors={"username": USERNAME_TAKEN})
        return FormResult(account=account)

    def logout(self):
        with self._lock:
            if self._user is not None:
                logger.info(f"ログアウト: {self._user.username}")
            self._user = None
