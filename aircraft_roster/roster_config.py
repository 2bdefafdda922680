"""
Aircraft Roster - 設定

責務:
  - 上流API(adsbdb)の接続情報の一元管理
  - 環境変数からの設定読み込み
  - ロガーの初期化
"""
import logging
import os


# ─────────────────────────────────
# 上流API（環境変数 or デフォルト値）
# ─────────────────────────────────
ADSBDB_BASE_URL = os.environ.get(
    "ADSBDB_BASE_URL",
    "https://api.adsbdb.com/v0/aircraft",
)

REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "15"))        # 1リクエストのタイムアウト（秒）
CONCURRENCY_LIMIT = int(os.environ.get("CONCURRENCY_LIMIT", "50"))      # 同時HTTP接続数
ADSBDB_MAX_ATTEMPTS = int(os.environ.get("ADSBDB_MAX_ATTEMPTS", "1"))   # 最大試行回数（初回含む）
RETRY_BASE_DELAY = float(os.environ.get("RETRY_BASE_DELAY", "0.5"))     # リトライ基底遅延（秒）

# ─────────────────────────────────
# 名簿（ロスター）
# ─────────────────────────────────
ROSTER_TARGET = int(os.environ.get("ROSTER_TARGET", "15"))      # 作業セットの件数
ROSTER_CAP = int(os.environ.get("ROSTER_CAP", "15"))            # 返却する最大件数
ROSTER_DEADLINE = float(os.environ.get("ROSTER_DEADLINE", "20"))  # 集約全体の締切（秒）

SEED_REGISTRATIONS = (
    "HB-KDV",  # スイス
    "N271DV",  # アメリカ
    "G-EUUU",  # イギリス
    "VH-EBA",  # オーストラリア
    "JA8089",  # 日本
    "F-GSTC",  # フランス
    "D-ABYT",  # ドイツ
    "C-GEOU",  # カナダ
)

PLACEHOLDER_PHOTO_URL = "https://via.placeholder.com/300x200"

# ─────────────────────────────────
# ロガー
# ─────────────────────────────────
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = LOG_LEVEL):
    """ルートロガーを初期化する。既にハンドラがある場合は何もしない。"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
