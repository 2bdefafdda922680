"""
Aircraft Roster - 名簿取得のオーケストレーション

責務:
  - ログイン済みセッションでのみ名簿を取得する（未ログインは NotAuthenticated）
  - 作業セット生成 → 並列集約 → 表示用の状態（RosterView）への変換
  - 取得中 / 成功 / 空 / エラー を区別して UI に渡す（空やエラーでも落とさない）

処理の流れ:
  AppSession.login → AircraftTracker.load_roster
    └── build_working_set → fetch_roster(AdsbdbClient.lookup)
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional, Sequence, Tuple

from adsbdb_client import AdsbdbClient
from roster_aggregator import fetch_roster
from roster_config import (
    ROSTER_CAP,
    ROSTER_DEADLINE,
    ROSTER_TARGET,
    SEED_REGISTRATIONS,
    configure_logging,
)
from credential_store import CredentialStore
from roster_errors import NotAuthenticated, PoolExhausted, SystemFailure
from identifier_pool import build_working_set
from roster_models import AircraftRecord, Identifier
from roster_session import AppSession

logger = logging.getLogger("aircraft_roster.tracker")

EMPTY_MESSAGE = "No aircraft data available. Pull to refresh."
ERROR_MESSAGE = "Could not load aircraft data. Please try again."


class RosterStatus(Enum):
    IDLE = auto()       # 未取得
    LOADING = auto()    # 取得中
    SUCCESS = auto()    # 1件以上取得
    EMPTY = auto()      # 全件失敗（エラーではない）
    ERROR = auto()      # 集約自体が実行できなかった


@dataclass(frozen=True)
class RosterView:
    status: RosterStatus
    records: Tuple[AircraftRecord, ...] = field(default_factory=tuple)
    message: Optional[str] = None

    @property
    def can_retry(self) -> bool:
        return self.status in (RosterStatus.EMPTY, RosterStatus.ERROR)


class AircraftTracker:
    """
    UI層から呼ばれる窓口。

    client_factory は lookup(identifier) を持つ非同期コンテキストマネージャを返す。
    テストでは上流APIの代わりにスタブを渡せる。
    """

    def __init__(
        self,
        session: AppSession,
        *,
        client_factory: Callable[[], AdsbdbClient] = AdsbdbClient,
        seed: Sequence[Identifier] = SEED_REGISTRATIONS,
        target: int = ROSTER_TARGET,
        cap: int = ROSTER_CAP,
        deadline: Optional[float] = ROSTER_DEADLINE,
        rng: Optional[random.Random] = None,
    ):
        self._session = session
        self._client_factory = client_factory
        self._seed = tuple(seed)
        self._target = target
        self._cap = cap
        self._deadline = deadline
        self._rng = rng or random.Random()
        self._view = RosterView(status=RosterStatus.IDLE)

    @property
    def view(self) -> RosterView:
        return self._view

    async def load_roster(self) -> RosterView:
        """
        名簿を取得して RosterView を返す。取得中は view.status が LOADING になる。

        どのような失敗でも LOADING のまま残さない:
          - 想定内・想定外の例外 → ERROR（再試行可能）
          - キャンセル           → ERROR にしてから CancelledError を再送出
        """
        if not self._session.is_authenticated:
            raise NotAuthenticated("login required before loading the roster")

        self._view = RosterView(status=RosterStatus.LOADING, records=self._view.records)
        try:
            working = build_working_set(self._seed, self._target, rng=self._rng)
            async with self._client_factory() as client:
                records = await fetch_roster(
                    working, client.lookup, self._cap, deadline=self._deadline
                )

            if records:
                self._view = RosterView(status=RosterStatus.SUCCESS, records=tuple(records))
            else:
                logger.warning("名簿が空: 全ルックアップが失敗")
                self._view = RosterView(status=RosterStatus.EMPTY, message=EMPTY_MESSAGE)
        except (SystemFailure, PoolExhausted) as e:
            logger.error(f"名簿の取得に失敗: {e}")
            self._view = RosterView(status=RosterStatus.ERROR, message=ERROR_MESSAGE)
        except Exception as e:
            logger.error(f"名簿の取得中に想定外のエラー: {e}", exc_info=True)
            self._view = RosterView(status=RosterStatus.ERROR, message=ERROR_MESSAGE)
        finally:
            if self._view.status is RosterStatus.LOADING:
                logger.warning("名簿の取得がキャンセルされた")
                self._view = RosterView(status=RosterStatus.ERROR, message=ERROR_MESSAGE)
        return self._view

    async def refresh(self) -> RosterView:
        """作業セットを作り直して再取得する。"""
        return await self.load_roster()


def create_app(**tracker_options) -> Tuple[CredentialStore, AppSession, AircraftTracker]:
    """ロガーを初期化し、ストア・セッション・トラッカーを組み立てて返す。"""
    configure_logging()
    store = CredentialStore()
    session = AppSession(store)
    tracker = AircraftTracker(session, **tracker_options)
    return store, session, tracker
