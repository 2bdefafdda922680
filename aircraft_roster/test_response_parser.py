"""
API応答パーサー・機体モデルのテスト

検証項目:
  1. aircraft ペイロードから全フィールドを抽出できる
  2. aircraft ペイロードが無い応答は AircraftNotFound
  3. 表示用ヘルパー（プレースホルダ・Unknown）
"""
import pytest

from roster_config import PLACEHOLDER_PHOTO_URL
from roster_errors import AircraftNotFound, FetchError
from roster_models import AircraftRecord
from response_parser import extract_aircraft_payload, parse_aircraft_response

HB_KDV = {
    "response": {
        "aircraft": {
            "type": "A220-300",
            "icao_type": "BCS3",
            "manufacturer": "Airbus",
            "mode_s": "4B1A0B",
            "registration": "HB-JCA",
            "registered_owner_country_iso_name": "CH",
            "registered_owner_country_name": "Switzerland",
            "registered_owner_operator_flag_code": "SWR",
            "registered_owner": "Swiss International Air Lines",
            "url_photo": "https://example.org/photo.jpg",
            "url_photo_thumbnail": "https://example.org/thumb.jpg",
        }
    }
}


# ═══════════════════════════════════════
# 1. 正常系
# ═══════════════════════════════════════
def test_parse_all_fields():
    """全フィールドが正しくマッピングされる"""
    rec = parse_aircraft_response(HB_KDV, "HB-JCA")
    assert rec.identifier == "HB-JCA"
    assert rec.aircraft_type == "A220-300"
    assert rec.manufacturer == "Airbus"
    assert rec.registered_owner == "Swiss International Air Lines"
    assert rec.owner_country == "Switzerland"
    assert rec.photo_url == "https://example.org/thumb.jpg"

def test_record_id_is_generated():
    """record_id は機体記号と別に毎回採番される"""
    a = parse_aircraft_response(HB_KDV, "HB-JCA")
    b = parse_aircraft_response(HB_KDV, "HB-JCA")
    assert a.record_id != a.identifier
    assert a.record_id != b.record_id

def test_missing_registration_falls_back():
    """registration が無ければ要求した機体記号を使う"""
    data = {"response": {"aircraft": {"type": "B737", "registration": "  "}}}
    rec = parse_aircraft_response(data, " N271DV ")
    assert rec.identifier == "N271DV"
    assert rec.manufacturer is None

def test_whitespace_cleaned():
    data = {"response": {"aircraft": {"registration": "G-EUUU", "registered_owner": " British\n  Airways "}}}
    assert parse_aircraft_response(data, "G-EUUU").registered_owner == "British Airways"


# ═══════════════════════════════════════
# 2. aircraft ペイロード無し
# ═══════════════════════════════════════
@pytest.mark.parametrize("data", [
    {"response": "unknown aircraft"},
    {"response": {}},
    {"response": {"aircraft": None}},
    {"response": {"aircraft": {}}},
    {},
    [],
    None,
])
def test_no_payload_raises_not_found(data):
    """ペイロード無しは FetchError の一種として扱われる"""
    assert extract_aircraft_payload(data) is None
    with pytest.raises(AircraftNotFound) as exc_info:
        parse_aircraft_response(data, "N0000X")
    assert isinstance(exc_info.value, FetchError)
    assert exc_info.value.identifier == "N0000X"

def test_unknown_aircraft_message_kept():
    with pytest.raises(AircraftNotFound, match="unknown aircraft"):
        parse_aircraft_response({"response": "unknown aircraft"}, "N0000X")


# ═══════════════════════════════════════
# 3. 表示用ヘルパー
# ═══════════════════════════════════════
def test_placeholder_for_invalid_photo():
    """http で始まらない写真URLはプレースホルダに差し替える"""
    for url in (None, "", "ftp://x/y.jpg", "thumb.jpg"):
        rec = AircraftRecord(identifier="JA8089", photo_url=url)
        assert not rec.has_valid_photo
        assert rec.photo_url_or_placeholder() == PLACEHOLDER_PHOTO_URL

def test_valid_photo_kept():
    rec = AircraftRecord(identifier="JA8089", photo_url="https://example.org/a.jpg")
    assert rec.photo_url_or_placeholder() == "https://example.org/a.jpg"

def test_unknown_labels():
    rec = AircraftRecord(identifier="JA8089")
    assert rec.display_type == "Unknown Aircraft"
    assert rec.detail_fields() == {
        "Manufacturer": "Unknown",
        "Owner": "Unknown",
        "Country": "Unknown",
        "Registration": "JA8089",
    }

def test_empty_identifier_rejected():
    with pytest.raises(ValueError):
        AircraftRecord(identifier="  ")

def test_record_is_immutable():
    rec = AircraftRecord(identifier="JA8089")
    with pytest.raises(AttributeError):
        rec.manufacturer = "Boeing"
