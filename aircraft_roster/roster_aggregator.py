"""
Aircraft Roster - 機体情報の並列集約

責務:
  - 作業セットの全機体記号に対してルックアップを同時に発行する（fan-out）
  - 全タスクの完了、または締切まで待ち合わせる（fan-in）
  - 個々の失敗はログに残して除外し、成功分を入力順に最大cap件返す

失敗の扱い:
  - FetchError / 想定外の例外 / None・AircraftRecord以外の返却 → その機体は結果に含めない
  - 締切超過で未完了のタスク → キャンセルして失敗扱い
  - タスクを起動できない → SystemFailure（全件失敗の空リストとは区別する）
"""
import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from roster_errors import FetchError, SystemFailure
from roster_models import AircraftRecord, Identifier

logger = logging.getLogger("aircraft_roster.aggregator")

Lookup = Callable[[Identifier], Awaitable[Optional[AircraftRecord]]]


def dedupe_identifiers(identifiers: Iterable[Identifier]) -> List[Identifier]:
    """空白のみの要素と2回目以降の重複を取り除く（順序は保持）。"""
    unique: List[Identifier] = []
    seen = set()
    for identifier in identifiers:
        if not isinstance(identifier, str) or not identifier.strip():
            logger.warning(f"不正な機体記号を除外: {identifier!r}")
            continue
        if identifier in seen:
            logger.debug(f"重複する機体記号を除外: {identifier}")
            continue
        seen.add(identifier)
        unique.append(identifier)
    return unique


async def _guarded_lookup(lookup: Lookup, identifier: Identifier) -> Optional[AircraftRecord]:
    """1件分のルックアップ。失敗は握りつぶしてNoneを返す。"""
    try:
        record = await lookup(identifier)
    except FetchError as e:
        logger.warning(f"取得失敗: {e}")
        return None
    except Exception as e:
        logger.error(f"取得中の想定外エラー ({identifier}): {e}", exc_info=True)
        return None

    if record is None:
        logger.info(f"機体情報なし: {identifier}")
        return None
    if not isinstance(record, AircraftRecord):
        logger.error(
            f"ルックアップの戻り値が AircraftRecord ではない ({identifier}): "
            f"{type(record).__name__}"
        )
        return None
    return record


def _start_tasks(lookup: Lookup, identifiers: List[Identifier]) -> Dict[Identifier, asyncio.Task]:
    tasks: Dict[Identifier, asyncio.Task] = {}
    try:
        for identifier in identifiers:
            tasks[identifier] = asyncio.create_task(
                _guarded_lookup(lookup, identifier),
                name=f"lookup:{identifier}",
            )
    except (RuntimeError, MemoryError, OSError) as e:
        for task in tasks.values():
            task.cancel()
        raise SystemFailure(
            f"could not start lookups ({len(tasks)}/{len(identifiers)} started): {e}"
        ) from e
    return tasks


async def fetch_roster(
    identifiers: Iterable[Identifier],
    lookup: Lookup,
    cap: int,
    *,
    deadline: Optional[float] = None,
) -> List[AircraftRecord]:
    """
    全機体記号を並列に問い合わせ、成功した AircraftRecord を入力順に最大cap件返す。

    deadline（秒）を過ぎたら未完了のルックアップをキャンセルし、
    その時点までに成功した分だけで結果を組み立てる。
    """
    if cap < 0:
        raise ValueError(f"cap must be >= 0: {cap}")

    working = dedupe_identifiers(identifiers)
    if not working:
        return []

    t0 = time.monotonic()
    tasks = _start_tasks(lookup, working)

    try:
        done, pending = await asyncio.wait(list(tasks.values()), timeout=deadline)
    finally:
        # 締切超過・呼び出し側キャンセルのどちらでもタスクを残さない
        leftover = [t for t in tasks.values() if not t.done()]
        for task in leftover:
            task.cancel()
        if leftover:
            await asyncio.gather(*leftover, return_exceptions=True)

    if pending:
        logger.warning(
            f"締切 {deadline}秒 超過: 未完了 {len(pending)}/{len(working)} 件を失敗扱い"
        )

    # 完了順ではなく入力順で集める
    records: List[AircraftRecord] = []
    for identifier in working:
        task = tasks[identifier]
        if task in done and not task.cancelled():
            record = task.result()
            if record is not None:
                records.append(record)

    elapsed = time.monotonic() - t0
    logger.info(
        f"集約完了: 成功 {len(records)}/{len(working)} 件 | "
        f"返却 {min(len(records), cap)} 件 (上限 {cap}) | {elapsed:.2f}秒"
    )
    return records[:cap]
