"""
セッション・フォーム検証のテスト

検証項目:
  1. 入力検証は認証より先に行われる
  2. 認証失敗は検証エラーと別のメッセージ
  3. 登録フォーム（パスワード確認・重複ユーザー名）
  4. ログアウト・クリック数
"""
from credential_store import CredentialStore
from roster_session import (
    INVALID_CREDENTIALS,
    PASSWORD_REQUIRED,
    PASSWORDS_DO_NOT_MATCH,
    USERNAME_REQUIRED,
    USERNAME_TAKEN,
    AppSession,
    validate_login_form,
    validate_registration_form,
)


class _SpyStore(CredentialStore):
    """authenticate が呼ばれたかを記録する"""

    def __init__(self):
        super().__init__()
        self.auth_calls = 0

    def authenticate(self, username, password):
        self.auth_calls += 1
        return super().authenticate(username, password)


# ═══════════════════════════════════════
# 1. 入力検証
# ═══════════════════════════════════════
def test_login_form_required_fields():
    assert validate_login_form("", "") == {
        "username": USERNAME_REQUIRED,
        "password": PASSWORD_REQUIRED,
    }
    assert validate_login_form("alice", "pw") == {}

def test_validation_before_authentication():
    """必須項目が欠けていれば認証を試みない"""
    store = _SpyStore()
    result = AppSession(store).login("alice", "")
    assert not result.ok
    assert result.errors == {"password": PASSWORD_REQUIRED}
    assert store.auth_calls == 0


# ═══════════════════════════════════════
# 2. 認証失敗
# ═══════════════════════════════════════
def test_invalid_credentials_message():
    store = CredentialStore()
    store.register("alice", "pw")
    session = AppSession(store)
    result = session.login("alice", "wrong")
    assert result.errors == {"general": INVALID_CREDENTIALS}
    assert result.account is None
    assert not session.is_authenticated

def test_login_success():
    store = CredentialStore()
    store.register("alice", "pw")
    session = AppSession(store)
    result = session.login("alice", "pw")
    assert result.ok
    assert session.current_user.username == "alice"


# ═══════════════════════════════════════
# 3. 登録フォーム
# ═══════════════════════════════════════
def test_registration_password_mismatch():
    errors = validate_registration_form("bob", "pw1", "pw2")
    assert errors == {"confirm_password": PASSWORDS_DO_NOT_MATCH}

def test_register_does_not_log_in():
    store = CredentialStore()
    session = AppSession(store)
    result = session.register("bob", "pw", "pw")
    assert result.ok
    assert not session.is_authenticated
    assert session.login("bob", "pw").ok

def test_register_invalid_form_not_stored():
    store = CredentialStore()
    result = AppSession(store).register("", "pw", "other")
    assert set(result.errors) == {"username", "confirm_password"}
    assert len(store) == 0

def test_register_duplicate_username():
    store = CredentialStore()
    session = AppSession(store)
    session.register("bob", "pw", "pw")
    result = session.register("bob", "other", "other")
    assert result.errors == {"username": USERNAME_TAKEN}
    assert len(store) == 1


# ═══════════════════════════════════════
# 4. ログアウト・クリック数
# ═══════════════════════════════════════
def test_logout():
    store = CredentialStore()
    store.register("alice", "pw")
    session = AppSession(store)
    session.login("alice", "pw")
    session.logout()
    assert session.current_user is None
    session.logout()

def test_click_count():
    session = AppSession(CredentialStore())
    assert session.click_count == 0
    assert session.increment_click_count() == 1
    assert session.increment_click_count() == 2
    assert session.click_count == 2
