"""
Aircraft Roster - 作業セット（機体記号プール）の生成

責務:
  - 固定のシード機体記号に、ランダム生成した機体記号を追加して
    目標件数ぶんの一意な作業セットを組み立てる
  - HTTP通信や並行処理は一切行わない

生成形式:
  <国籍記号1文字><数字4桁><英字1文字>  例: N4821K
"""
import random
import string
from typing import List, Optional, Sequence

from roster_errors import PoolExhausted
from roster_models import Identifier

PREFIX_ALPHABET = "N"                     # 国籍記号（米国籍）
SUFFIX_ALPHABET = string.ascii_uppercase  # 末尾英字 A-Z
DIGIT_MIN = 1000
DIGIT_MAX = 9999


def synthesize_identifier(
    rng: random.Random,
    prefixes: str = PREFIX_ALPHABET,
) -> Identifier:
    """ランダムな機体記号を1件生成する（各要素は一様分布で選ぶ）。"""
    prefix = rng.choice(prefixes)
    digits = rng.randint(DIGIT_MIN, DIGIT_MAX)
    suffix = rng.choice(SUFFIX_ALPHABET)
    return f"{prefix}{digits}{suffix}"


def default_iteration_cap(target: int) -> int:
    return max(1000, target * 100)


def build_working_set(
    seed: Sequence[Identifier],
    target: int,
    *,
    rng: Optional[random.Random] = None,
    prefixes: str = PREFIX_ALPHABET,
    max_iterations: Optional[int] = None,
) -> List[Identifier]:
    """
    シードをコピーし、target件になるまでランダムな機体記号を追加する。

    - target <= len(seed) の場合はシードをそのまま返す（切り詰めは集約側の仕事）
    - 追加する場合はシード内の重複を先に取り除く（順序は保持）
    - 既存要素（シード・生成済みの両方）と重複する候補は捨てる
    - 候補の生成回数が max_iterations に達したら PoolExhausted を送出する
    """
    if target <= len(seed):
        return list(seed)

    working: List[Identifier] = list(dict.fromkeys(seed))
    rng = rng or random.Random()
    cap = max_iterations if max_iterations is not None else default_iteration_cap(target)
    seen = set(working)

    iterations = 0
    while len(working) < target:
        if iterations >= cap:
            raise PoolExhausted(target, len(working), iterations)
        iterations += 1
        candidate = synthesize_identifier(rng, prefixes)
        if candidate in seen:
            continue
        seen.add(candidate)
        working.append(candidate)

    return working
