"""
Aircraft Roster - adsbdb HTTPクライアント

責務:
  - 1機体記号 → AircraftRecord のルックアップ（集約層に注入される取得関数）
  - 非同期HTTP通信（aiohttp）と任意のリトライ制御
  - 失敗はすべて FetchError の派生クラスとして送出する
      通信エラー・タイムアウト → TransportError
      2xx以外                  → UpstreamStatusError
      JSON不正                 → MalformedResponse
      aircraft ペイロードなし  → AircraftNotFound
"""
import asyncio
import json
import logging
import random
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from roster_config import (
    ADSBDB_BASE_URL,
    ADSBDB_MAX_ATTEMPTS,
    CONCURRENCY_LIMIT,
    REQUEST_TIMEOUT,
    RETRY_BASE_DELAY,
)
from roster_errors import MalformedResponse, TransportError, UpstreamStatusError
from roster_models import AircraftRecord, Identifier
from response_parser import parse_aircraft_response

logger = logging.getLogger("aircraft_roster.client")

HEADERS = {
    "User-Agent": "aircraft-roster/0.1 (+aiohttp)",
    "Accept": "application/json",
}


class AdsbdbClient:
    """
    adsbdb の機体情報APIクライアント。

    async with で使うとセッションを自前で生成・解放する。
    外部で生成したセッションを渡した場合は、そのセッションを閉じない。
    """

    def __init__(
        self,
        base_url: str = ADSBDB_BASE_URL,
        *,
        timeout: float = REQUEST_TIMEOUT,
        max_attempts: int = ADSBDB_MAX_ATTEMPTS,
        retry_base_delay: float = RETRY_BASE_DELAY,
        concurrency_limit: int = CONCURRENCY_LIMIT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._base_url = base_url.rstrip('/')
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._max_attempts = max_attempts
        self._retry_base_delay = retry_base_delay
        self._concurrency_limit = concurrency_limit
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "AdsbdbClient":
        if self._session is None:
            connector = aiohttp.TCPConnector(
                limit=self._concurrency_limit,
                ttl_dns_cache=300,
            )
            self._session = aiohttp.ClientSession(
                connector=connector, timeout=self._timeout, headers=HEADERS
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def url_for(self, identifier: Identifier) -> str:
        return f"{self._base_url}/{quote(identifier.strip(), safe='')}"

    # ─────────────────────────────────
    # ルックアップ
    # ─────────────────────────────────
    async def lookup(self, identifier: Identifier) -> AircraftRecord:
        """機体記号1件を問い合わせ、AircraftRecord を返す。"""
        data = await self._fetch_json(identifier)
        return parse_aircraft_response(data, identifier)

    # ─────────────────────────────────
    # HTTP通信（リトライ付き）
    # ─────────────────────────────────
    def _backoff(self, attempt: int) -> float:
        return self._retry_base_delay * (2 ** attempt) + random.uniform(0, 1)

    async def _fetch_json(self, identifier: Identifier) -> Any:
        """
        指数バックオフ + ジッター付きリトライでJSONを取得する。
        - 2xx: デコードしたJSONを返却
        - 429 / 5xx / 通信エラー: 試行回数が残っていれば再試行
        - その他の4xx: 即座に UpstreamStatusError
        試行回数のデフォルトは1回（リトライなし）。
        """
        if self._session is None:
            raise RuntimeError("AdsbdbClient must be used inside 'async with'")

        url = self.url_for(identifier)
        last_error: Optional[Exception] = None

        for attempt in range(self._max_attempts):
            is_last = attempt + 1 >= self._max_attempts
            try:
                async with self._session.get(url, timeout=self._timeout) as resp:
                    if resp.status < 300:
                        try:
                            return json.loads(await resp.text())
                        except ValueError as e:
                            raise MalformedResponse(identifier, f"invalid JSON ({e})") from e

                    if resp.status == 429 or resp.status >= 500:
                        last_error = UpstreamStatusError(identifier, resp.status)
                        if is_last:
                            break
                        delay = self._backoff(attempt)
                        logger.warning(
                            f"{resp.status} 上流エラー: {url} "
                            f"(リトライ {attempt+1}/{self._max_attempts}, {delay:.1f}秒後)"
                        )
                        await asyncio.sleep(delay)
                        continue

                    # 404等 → リトライ不要
                    raise UpstreamStatusError(identifier, resp.status)

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = TransportError(identifier, e.__class__.__name__)
                last_error.__cause__ = e
                if is_last:
                    break
                delay = self._backoff(attempt)
                logger.warning(
                    f"通信エラー: {url} ({e.__class__.__name__}) "
                    f"リトライ {attempt+1}/{self._max_attempts}, {delay:.1f}秒後"
                )
                await asyncio.sleep(delay)

        raise last_error
