import pytest

from pihob.arch_protocols import BDS_PROTOCOL_GUID, arch_protocol_name
from pihob.hob_header import Guid
from pihob.runtime_protocols import (
    RUNTIME_PROTOCOLS,
    SECURITY2_PROTOCOL_GUID,
    SECURITY_PROTOCOL_GUID,
    STATUS_CODE_PROTOCOL_GUID,
    TIMER_PROTOCOL_GUID,
    EfiStatusCodeData,
    protocol_name,
)

SAMPLE_GUID = Guid.from_fields(1, 2, 3, 4, 5, [6, 7, 8, 9, 10, 11])


def test_status_code_data_round_trip():
    record = EfiStatusCodeData(header_size=EfiStatusCodeData.SIZE, size=12, data_type=SAMPLE_GUID)
    encoded = record.to_bytes()
    assert len(encoded) == EfiStatusCodeData.SIZE
    assert EfiStatusCodeData.from_bytes(encoded) == record


def test_status_code_data_layout():
    record = EfiStatusCodeData(header_size=20, size=0, data_type=SAMPLE_GUID)
    encoded = record.to_bytes()
    assert encoded[:4] == b"\x14\x00\x00\x00"
    assert encoded[4:] == SAMPLE_GUID.to_bytes()


def test_status_code_data_ignores_trailing_bytes():
    record = EfiStatusCodeData(header_size=20, size=3, data_type=TIMER_PROTOCOL_GUID)
    decoded = EfiStatusCodeData.from_bytes(record.to_bytes() + b"abc")
    assert decoded == record


def test_status_code_data_too_short():
    with pytest.raises(ValueError):
        EfiStatusCodeData.from_bytes(bytes(EfiStatusCodeData.SIZE - 1))


@pytest.mark.parametrize("field", ["header_size", "size"])
def test_status_code_data_range(field):
    values = {"header_size": 20, "size": 0, "data_type": SAMPLE_GUID}
    values[field] = 1 << 16
    with pytest.raises(ValueError):
        EfiStatusCodeData(**values)


def test_status_code_data_requires_guid():
    with pytest.raises(TypeError):
        EfiStatusCodeData(20, 0, b"\x00" * 16)


def test_timer_guid_text():
    text = "26baccb3-6f42-11d4-bce7-0080c73c8881"
    assert str(TIMER_PROTOCOL_GUID) == text
    assert TIMER_PROTOCOL_GUID == Guid.from_fields(
        0x26BACCB3, 0x6F42, 0x11D4, 0xBC, 0xE7, [0x00, 0x80, 0xC7, 0x3C, 0x88, 0x81]
    )
    assert protocol_name(text) == "EFI_TIMER_ARCH_PROTOCOL"


def test_guids_are_distinct():
    assert len(set(RUNTIME_PROTOCOLS)) == 4
    names = [protocol_name(guid) for guid in RUNTIME_PROTOCOLS]
    assert None not in names
    assert len(set(names)) == 4


@pytest.mark.parametrize(
    "guid, name",
    [
        (SECURITY_PROTOCOL_GUID, "EFI_SECURITY_ARCH_PROTOCOL"),
        (SECURITY2_PROTOCOL_GUID, "EFI_SECURITY2_ARCH_PROTOCOL"),
        (TIMER_PROTOCOL_GUID, "EFI_TIMER_ARCH_PROTOCOL"),
    ],
)
def test_protocol_name_by_guid(guid, name):
    assert protocol_name(guid) == name


@pytest.mark.parametrize("guid", list(RUNTIME_PROTOCOLS))
def test_protocol_name_by_text(guid):
    expected = RUNTIME_PROTOCOLS[guid]
    assert protocol_name(str(guid)) == expected
    assert protocol_name("{" + str(guid).upper() + "}") == expected


def test_protocol_name_status_code_matches_table():
    assert protocol_name(STATUS_CODE_PROTOCOL_GUID) == RUNTIME_PROTOCOLS[STATUS_CODE_PROTOCOL_GUID]


def test_protocol_name_falls_back_to_arch_protocols():
    assert protocol_name(BDS_PROTOCOL_GUID) == arch_protocol_name(BDS_PROTOCOL_GUID)
    assert protocol_name(str(BDS_PROTOCOL_GUID)) == arch_protocol_name(BDS_PROTOCOL_GUID)


def test_protocol_name_unknown():
    assert protocol_name(SAMPLE_GUID) is None
    assert protocol_name(str(SAMPLE_GUID)) is None


def test_protocol_name_rejects_other_types():
    with pytest.raises(TypeError):
        protocol_name(42)