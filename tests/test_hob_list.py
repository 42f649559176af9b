import pytest

from pihob.hob_header import (
    EFI_RESOURCE_ATTRIBUTE_PRESENT,
    EFI_RESOURCE_SYSTEM_MEMORY,
    Guid,
    HobHeader,
    HobType,
    MemoryAllocationHeader,
)
from pihob.hob_list import HobList, HobSizeError, iter_hobs, parse_hob
from pihob.hob_types import (
    Capsule,
    Cpu,
    FirmwareVolume,
    FirmwareVolume2,
    FirmwareVolume3,
    GuidHob,
    MemoryAllocation,
    MemoryAllocationModule,
    MiscHob,
    PhaseHandoffInformationTable,
    ResourceDescriptor,
)

LENGTH = 0x0123456789ABCDEF


def guid():
    return Guid.from_fields(1, 2, 3, 4, 5, [6, 7, 8, 9, 10, 11])


def gen_firmware_volume():
    return FirmwareVolume(0, LENGTH)


def gen_firmware_volume2():
    return FirmwareVolume2(0, LENGTH, guid(), guid())


def gen_firmware_volume3():
    return FirmwareVolume3(0, LENGTH, 0, False, guid(), guid())


def gen_resource_descriptor():
    return ResourceDescriptor(guid(), EFI_RESOURCE_SYSTEM_MEMORY, EFI_RESOURCE_ATTRIBUTE_PRESENT, 0, LENGTH)


def gen_memory_allocation():
    return MemoryAllocation(MemoryAllocationHeader(guid(), 0, LENGTH, 0))


def gen_memory_allocation_module():
    return MemoryAllocationModule(MemoryAllocationHeader(guid(), 0, LENGTH, 0), guid(), 0)


def gen_capsule():
    return Capsule(0, 0x12)


def gen_guid_hob():
    return GuidHob(guid())


def _phit(header):
    return PhaseHandoffInformationTable(
        0x00010000, 0, 0xDEADBEEF, 0xDEADC0DE, 104, 255, 0xDEADDEADC0DEC0DE, header=header
    )


def gen_phase_handoff_information_table():
    return _phit(None)


def gen_end_of_hoblist():
    return _phit(HobHeader(HobType.END_OF_HOB_LIST, PhaseHandoffInformationTable.SIZE))


def gen_cpu():
    return Cpu(0, 0)


def full_list():
    hoblist = HobList()
    for hob in (
        gen_resource_descriptor(),
        gen_phase_handoff_information_table(),
        gen_firmware_volume(),
        gen_firmware_volume2(),
        gen_firmware_volume3(),
        gen_capsule(),
        gen_guid_hob(),
        gen_memory_allocation(),
        gen_memory_allocation_module(),
        gen_cpu(),
        gen_end_of_hoblist(),
    ):
        hoblist.push(hob)
    return hoblist


def check_hob(hob):
    if isinstance(hob, ResourceDescriptor):
        assert hob.resource_type == EFI_RESOURCE_SYSTEM_MEMORY
    elif isinstance(hob, (MemoryAllocation, MemoryAllocationModule)):
        assert hob.alloc_descriptor.memory_length == LENGTH
    elif isinstance(hob, Capsule):
        assert hob.base_address == 0
    elif isinstance(hob, GuidHob):
        assert hob.name == guid()
        assert hob.data == b""
    elif isinstance(hob, (FirmwareVolume, FirmwareVolume2, FirmwareVolume3)):
        assert hob.length == LENGTH
    elif isinstance(hob, PhaseHandoffInformationTable):
        assert hob.memory_top == 0xDEADBEEF
    elif isinstance(hob, Cpu):
        assert hob.size_of_memory_space == 0
    else:
        pytest.fail(f"Unexpected hob type {hob!r}")


def test_hoblist_empty():
    hoblist = HobList()
    assert len(hoblist) == 0
    assert hoblist.is_empty()
    assert hoblist.size() == 0
    assert hoblist.to_bytes() == b""


def test_hoblist_push():
    hoblist = HobList()
    hoblist.push(gen_resource_descriptor())
    assert len(hoblist) == 1
    hoblist.push(gen_firmware_volume())
    assert len(hoblist) == 2
    assert not hoblist.is_empty()


def test_push_rejects_non_records():
    with pytest.raises(TypeError):
        HobList().push(b"not a hob")


def test_hoblist_iterate():
    hoblist = HobList()
    for hob in (
        gen_resource_descriptor(),
        gen_firmware_volume(),
        gen_firmware_volume2(),
        gen_firmware_volume3(),
        gen_capsule(),
        gen_guid_hob(),
        gen_memory_allocation(),
        gen_memory_allocation_module(),
        gen_end_of_hoblist(),
    ):
        hoblist.push(hob)
    count = 0
    for hob in hoblist:
        check_hob(hob)
        count += 1
    assert count == 9


def test_hoblist_discover():
    hoblist = full_list()
    count = 0
    for hob in hoblist:
        check_hob(hob)
        count += 1
    assert count == 11

    discovered = HobList()
    discovered.discover_hobs(hoblist.to_bytes())
    assert len(discovered) == 10
    for hob in discovered:
        check_hob(hob)
    assert list(discovered) == list(hoblist)[:10]


def test_discover_distinguishes_memory_allocation_kinds():
    discovered = HobList()
    discovered.discover_hobs(full_list().to_bytes())
    kinds = [type(hob) for hob in discovered]
    assert MemoryAllocation in kinds
    assert MemoryAllocationModule in kinds
    assert kinds.index(MemoryAllocation) < kinds.index(MemoryAllocationModule)


def test_size_matches_serialized_length():
    hoblist = full_list()
    assert hoblist.size() == len(hoblist.to_bytes())


def test_size_of_single_firmware_volume():
    hoblist = HobList()
    hoblist.push(gen_firmware_volume())
    assert hoblist.size() == 24


def test_hob_iterator():
    data = full_list().to_bytes()
    types = [hob.header.hob_type for hob in iter_hobs(data, 0)]
    assert types == [
        HobType.RESOURCE_DESCRIPTOR,
        HobType.HANDOFF,
        HobType.FV,
        HobType.FV2,
        HobType.FV3,
        HobType.UEFI_CAPSULE,
        HobType.GUID_EXTENSION,
        HobType.MEMORY_ALLOCATION,
        HobType.MEMORY_ALLOCATION,
        HobType.CPU,
    ]


def test_iterator_from_offset():
    first = gen_resource_descriptor()
    data = first.to_bytes() + gen_cpu().to_bytes() + gen_end_of_hoblist().to_bytes()
    assert list(iter_hobs(data, ResourceDescriptor.SIZE)) == [gen_cpu()]


def test_guid_hob_with_data_round_trip():
    hob = GuidHob(guid(), b"\x01\x02\x03")
    data = hob.to_bytes() + gen_cpu().to_bytes() + gen_end_of_hoblist().to_bytes()
    discovered = HobList()
    discovered.discover_hobs(data)
    assert list(discovered) == [hob, gen_cpu()]
    assert discovered[0].data == b"\x01\x02\x03" if False else list(discovered)[0].data == b"\x01\x02\x03"


def test_unknown_type_becomes_misc():
    data = HobHeader(HobType.MEMORY_POOL, 8).to_bytes() + gen_end_of_hoblist().to_bytes()
    discovered = HobList()
    discovered.discover_hobs(data)
    hobs = list(discovered)
    assert hobs == [MiscHob(HobType.MEMORY_POOL)]
    assert hobs[0].header.hob_type == HobType.MEMORY_POOL
    assert hobs[0].header.length == HobHeader.SIZE


def test_discover_rejects_size_mismatch():
    fv = FirmwareVolume(0, LENGTH, header=HobHeader(HobType.FV, 32))
    data = fv.to_bytes() + bytes(8) + gen_end_of_hoblist().to_bytes()
    with pytest.raises(HobSizeError) as excinfo:
        HobList().discover_hobs(data)
    assert excinfo.value.hob_length == 32
    assert excinfo.value.hob_size == 24
    assert "length 32" in str(excinfo.value)


def test_iterator_does_not_check_sizes():
    fv = FirmwareVolume(0, LENGTH, header=HobHeader(HobType.FV, 32))
    data = fv.to_bytes() + bytes(8) + gen_end_of_hoblist().to_bytes()
    hobs = list(iter_hobs(data, 0))
    assert len(hobs) == 1
    assert hobs[0].length == LENGTH


def test_parse_hob_end_of_list_is_none():
    assert parse_hob(gen_end_of_hoblist().to_bytes(), 0) is None


def test_parse_hob_decodes_record():
    assert parse_hob(gen_capsule().to_bytes(), 0) == gen_capsule()


def test_parse_hob_negative_offset():
    with pytest.raises(ValueError):
        parse_hob(gen_capsule().to_bytes(), -1)


def test_missing_end_of_list_raises():
    with pytest.raises(ValueError):
        HobList().discover_hobs(gen_cpu().to_bytes())


def test_zero_length_hob_raises():
    data = HobHeader(HobType.MEMORY_POOL, 0).to_bytes()
    with pytest.raises(ValueError):
        list(iter_hobs(data, 0))