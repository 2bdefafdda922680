"""
Aircraft Roster - データモデル定義

各Entityの責務:
  - AircraftRecord: 1回のルックアップ成功で得た機体情報（生成後は不変）
  - Account: 登録済みアカウント（ユーザー名 + 平文パスワード）
"""
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from roster_config import PLACEHOLDER_PHOTO_URL

# 機体記号（例: "JA8089"）。1回の集約の中で一意。
Identifier = str

UNKNOWN = "Unknown"
UNKNOWN_AIRCRAFT = "Unknown Aircraft"


def _new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class AircraftRecord:
    """機体情報（一覧表示用のrecord_idは機体記号とは別に採番する）"""
    identifier: Identifier
    aircraft_type: Optional[str] = None
    manufacturer: Optional[str] = None
    registered_owner: Optional[str] = None
    owner_country: Optional[str] = None
    photo_url: Optional[str] = None
    record_id: str = field(default_factory=_new_record_id)

    def __post_init__(self):
        if not self.identifier or not self.identifier.strip():
            raise ValueError("identifier must not be empty")
        if self.record_id == self.identifier:
            raise ValueError(
                f"record_id must differ from identifier: {self.identifier}"
            )

    @property
    def has_valid_photo(self) -> bool:
        return bool(self.photo_url) and self.photo_url.startswith("http")

    def photo_url_or_placeholder(self) -> str:
        """写真URLが無い・不正な場合はプレースホルダ画像を返す。"""
        return self.photo_url if self.has_valid_photo else PLACEHOLDER_PHOTO_URL

    @property
    def display_type(self) -> str:
        return self.aircraft_type or UNKNOWN_AIRCRAFT

    def detail_fields(self) -> Dict[str, str]:
        """詳細表示用のラベル → 値（欠損は "Unknown"）"""
        return {
            "Manufacturer": self.manufacturer or UNKNOWN,
            "Owner": self.registered_owner or UNKNOWN,
            "Country": self.owner_country or UNKNOWN,
            "Registration": self.identifier,
        }


@dataclass(frozen=True)
class Account:
    """アカウント（パスワードは平文のまま完全一致で比較する）"""
    username: str
    password: str = field(repr=False)

    def matches(self, username: str, password: str) -> bool:
        return self.username == username and self.password == password
