from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from fitsummary.decoder import FIT_EPOCH, decode_fit_file, record_from_message, records_from_messages
from fitsummary.errors import FitDecodeError
from fitsummary.parser import parse_fit_file
from fitsummary.records import (
    PhysiologicalMetrics,
    Session,
    Sport,
    TimeInZone,
    TrackPoint,
    Unrecognized,
    WorkoutSet,
)


class FakeMessage:
    """Stands in for a fitparse DataMessage: a name, a number and iterable fields."""

    def __init__(self, mesg_name, mesg_num, **fields):
        self.name = mesg_name
        self.mesg_num = mesg_num
        self.fields = [_field(k, v) for k, v in fields.items()]

    def __iter__(self):
        return iter(self.fields)


class Decoded:
    """A field whose decoded value differs from its raw value."""

    def __init__(self, raw, value, expanded=False):
        self.raw = raw
        self.value = value
        self.expanded = expanded


# fitparse sets field_def to None on fields expanded from components
DEFINED = object()


def _field(name, value):
    if isinstance(value, Decoded):
        field_def = None if value.expanded else DEFINED
        return SimpleNamespace(name=name, value=value.value, raw_value=value.raw, field_def=field_def)
    return SimpleNamespace(name=name, value=value, raw_value=value, field_def=DEFINED)


def test_session_fields_are_scaled_from_raw_values():
    start = datetime(2024, 3, 1, 6, 0)
    record = record_from_message(FakeMessage(
        "session", 18,
        start_time=Decoded(1014019200, start),
        sport=1,
        sub_sport=0,
        total_timer_time=1800000,
        total_distance=500000,
        enhanced_avg_speed=2778,
        training_load_peak=65536 * 85,
        avg_left_power_phase=[100, 200, 10, 20],
        time_standing=95000,
    ))

    assert isinstance(record, Session)
    assert record.start_time == start.replace(tzinfo=timezone.utc)
    assert record.sport == 1
    assert record.total_timer_time == 1800000
    assert record.total_distance == 500000
    assert record.enhanced_avg_speed == 2.778
    assert record.training_load_peak == 85.0
    assert record.avg_left_power_phase == (100, 200, 10, 20)
    assert record.stand_time == 95000
    assert record.avg_heart_rate is None


def test_speed_falls_back_to_plain_field():
    record = record_from_message(FakeMessage("session", 18, avg_speed=3000, enhanced_max_speed=None, max_speed=4500))

    assert record.enhanced_avg_speed == 3.0
    assert record.enhanced_max_speed == 4.5


def test_unknown_fields_are_matched_by_number():
    record = record_from_message(FakeMessage("session", 18, unknown_178=450, unknown_168=65536 * 2))

    assert record.estimated_sweat_loss == 450
    assert record.training_load_peak == 2.0


def test_vendor_messages_are_matched_by_number():
    record = record_from_message(FakeMessage(
        "unknown_140", 140,
        unknown_4=32,
        unknown_7=65536 * 14,
        unknown_9=1200,
        unknown_20=11,
    ))

    assert record == PhysiologicalMetrics(
        aerobic_effect=3.2,
        anaerobic_effect=1.1,
        met_max=14.0,
        recovery_time=1200,
    )


def test_time_in_zone_array():
    record = record_from_message(FakeMessage(
        "time_in_zone", 216,
        reference_mesg=18,
        reference_index=0,
        time_in_hr_zone=[0, 100000, 200500, None],
    ))

    assert isinstance(record, TimeInZone)
    assert record.reference_message == 18
    assert record.time_in_hr_zone == (0.0, 100.0, 200.5, None)


def test_set_and_sport_messages():
    set_record = record_from_message(FakeMessage(
        "set", 225, duration=45000, repetitions=12, weight=320, set_type=1, message_index=0,
    ))
    sport = record_from_message(FakeMessage("sport", 12, sport=10, sub_sport=20, name=Decoded(b"Strength\x00", "Strength\x00")))

    assert set_record == WorkoutSet(set_type=1, duration=45.0, repetitions=12, weight=20.0, message_index=0)
    assert sport == Sport(sport=10, sub_sport=20, name="Strength")


def test_record_semicircles_and_missing_position():
    point = record_from_message(FakeMessage(
        "record", 20, position_lat=2**30, position_long=-(2**29), heart_rate=150,
    ))
    no_fix = record_from_message(FakeMessage("record", 20, heart_rate=150))

    assert isinstance(point, TrackPoint)
    assert point.latitude == 90.0
    assert point.longitude == -45.0
    assert point.has_location
    assert not no_fix.has_location


def test_datetime_from_raw_seconds():
    record = record_from_message(FakeMessage("lap", 19, start_time=Decoded(3600, None)))

    assert record.start_time == FIT_EPOCH + timedelta(hours=1)


def test_unhandled_message_is_unrecognized():
    record = record_from_message(FakeMessage("file_id", 0, manufacturer="garmin", serial_number=42))

    assert record == Unrecognized(message_name="file_id")
    assert record.fields == {"manufacturer": "garmin", "serial_number": 42}


def test_records_keep_message_order():
    records = records_from_messages([
        FakeMessage("file_id", 0),
        FakeMessage("record", 20),
        FakeMessage("session", 18),
    ])

    assert [type(r) for r in records] == [Unrecognized, TrackPoint, Session]


def test_missing_file_raises_decode_error(tmp_path):
    with pytest.raises(FitDecodeError):
        decode_fit_file(tmp_path / "missing.fit")


def test_garbage_file_raises_decode_error(tmp_path):
    path = tmp_path / "bad.fit"
    path.write_bytes(b"this is not a FIT file at all")

    with pytest.raises(FitDecodeError):
        decode_fit_file(path)


def test_component_expansions_are_not_scaled_twice():
    record = record_from_message(FakeMessage(
        "session", 18,
        avg_speed=2778,
        enhanced_avg_speed=Decoded(2.778, 2.778, expanded=True),
    ))
    point = record_from_message(FakeMessage(
        "record", 20,
        altitude=2600,
        enhanced_altitude=Decoded(20.0, 20.0, expanded=True),
    ))

    assert record.enhanced_avg_speed == 2.778
    assert point.altitude == 20.0


# ---------- real FIT files ----------

ENUM = 0x00
UINT16 = 0x84
UINT32 = 0x86

CRC_TABLE = (
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
)


def _crc(data):
    crc = 0
    for byte in data:
        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[byte & 0xF]
        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[(byte >> 4) & 0xF]
    return crc


def _message(local_num, global_num, fields, values):
    """Definition plus one data message; fields are (def num, base type)."""
    sizes = {ENUM: ("B", 1), UINT16: ("H", 2), UINT32: ("I", 4)}
    out = struct.pack("<BBBHB", 0x40 | local_num, 0, 0, global_num, len(fields))
    fmt = "<B"
    for num, base_type in fields:
        code, size = sizes[base_type]
        out += struct.pack("<BBB", num, size, base_type)
        fmt += code
    return out + struct.pack(fmt, local_num, *values)


def _write_fit(path, *messages):
    body = b"".join(messages)
    header = struct.pack("<BBHI4s", 14, 0x10, 2093, len(body), b".FIT")
    header += struct.pack("<H", _crc(header))
    content = header + body
    path.write_bytes(content + struct.pack("<H", _crc(content)))
    return path


def test_real_fit_file_speed_and_altitude(tmp_path):
    path = _write_fit(
        tmp_path / "run.fit",
        _message(0, 18, [(5, ENUM), (6, ENUM), (14, UINT16), (124, UINT32)], [1, 0, 2778, 2778]),
        _message(1, 20, [(2, UINT16), (6, UINT16)], [2600, 3000]),
    )

    session, point = decode_fit_file(path)

    assert isinstance(session, Session)
    assert session.sport == 1
    assert session.enhanced_avg_speed == 2.778
    assert isinstance(point, TrackPoint)
    assert point.altitude == 20.0
    assert point.speed == 3.0

    summary = parse_fit_file(path)
    assert summary.summary_data["pace_avg_seconds_km"].value == 360


def test_real_fit_file_without_enhanced_speed(tmp_path):
    path = _write_fit(
        tmp_path / "ride.fit",
        _message(0, 18, [(5, ENUM), (6, ENUM), (14, UINT16)], [2, 0, 10000]),
    )

    (session,) = decode_fit_file(path)

    assert session.enhanced_avg_speed == 10.0
    assert parse_fit_file(path).summary_data["speed_avg"].value == 36.0
