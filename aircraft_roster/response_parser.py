"""
Aircraft Roster - API応答パース層

責務:
  - adsbdb の JSON 応答から AircraftRecord を組み立てるのみ
  - HTTP通信は一切行わない（疎結合）

応答形式:
  {"response": {"aircraft": {"registration": ..., "type": ..., ...}}}
  未知の機体: {"response": "unknown aircraft"}
"""
import re
from typing import Any, Optional

from roster_errors import AircraftNotFound
from roster_models import AircraftRecord, Identifier


def _clean(value: Any) -> Optional[str]:
    """文字列内の余分な空白・改行を取り除く。空や非文字列はNoneにする。"""
    if not isinstance(value, str):
        return None
    cleaned = re.sub(r'\s+', ' ', value).strip()
    return cleaned or None


def extract_aircraft_payload(data: Any) -> Optional[dict]:
    """response.aircraft を取り出す。存在しない・dictでない場合はNone。"""
    if not isinstance(data, dict):
        return None
    response = data.get("response")
    if not isinstance(response, dict):
        return None
    aircraft = response.get("aircraft")
    if not isinstance(aircraft, dict) or not aircraft:
        return None
    return aircraft


def parse_aircraft_response(data: Any, identifier: Identifier) -> AircraftRecord:
    """
    デコード済みJSONから AircraftRecord を生成する。

    aircraft ペイロードが無い場合は AircraftNotFound を送出する。
    応答側の registration が空なら、要求した機体記号を使う。
    """
    aircraft = extract_aircraft_payload(data)
    if aircraft is None:
        detail = None
        if isinstance(data, dict) and isinstance(data.get("response"), str):
            detail = data["response"]
        raise AircraftNotFound(identifier, detail)

    return AircraftRecord(
        identifier=_clean(aircraft.get("registration")) or identifier.strip(),
        aircraft_type=_clean(aircraft.get("type")),
        manufacturer=_clean(aircraft.get("manufacturer")),
        registered_owner=_clean(aircraft.get("registered_owner")),
        owner_country=_clean(aircraft.get("registered_owner_country_name")),
        photo_url=_clean(aircraft.get("url_photo_thumbnail")),
    )
