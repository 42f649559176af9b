"""HOB lists: walking a serialized HOB list and collecting its records."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Type

from .hob_header import HobHeader, HobType
from .hob_types import (
    Capsule,
    Cpu,
    FirmwareVolume,
    FirmwareVolume2,
    FirmwareVolume3,
    GuidHob,
    HobRecord,
    MemoryAllocation,
    MemoryAllocationModule,
    MiscHob,
    PhaseHandoffInformationTable,
    ResourceDescriptor,
)


class HobSizeError(ValueError):
    """A HOB's header length does not match the size of its record type."""

    def __init__(self, hob_length: int, hob_size: int) -> None:
        super().__init__(f"Trying to cast hob of length {hob_length} into a pointer of size {hob_size}")
        self.hob_length = hob_length
        self.hob_size = hob_size


_FIXED_RECORDS: Dict[int, Type[HobRecord]] = {
    HobType.HANDOFF: PhaseHandoffInformationTable,
    HobType.RESOURCE_DESCRIPTOR: ResourceDescriptor,
    HobType.GUID_EXTENSION: GuidHob,
    HobType.FV: FirmwareVolume,
    HobType.FV2: FirmwareVolume2,
    HobType.FV3: FirmwareVolume3,
    HobType.CPU: Cpu,
    HobType.UEFI_CAPSULE: Capsule,
}


def _record_class(header: HobHeader) -> Optional[Type[HobRecord]]:
    """The record class a header describes, or None for an unknown type."""
    if header.hob_type == HobType.MEMORY_ALLOCATION:
        if header.length == MemoryAllocationModule.SIZE:
            return MemoryAllocationModule
        return MemoryAllocation
    return _FIXED_RECORDS.get(header.hob_type)


def parse_hob(data: bytes, offset: int = 0) -> Optional[HobRecord]:
    """Decode the HOB starting at ``offset``.

    Returns None when the HOB there marks the end of the HOB list. HOB
    types without a dedicated layout come back as :class:`MiscHob`.
    """
    data = bytes(data)
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")
    header = HobHeader.from_bytes(data[offset:])
    if header.hob_type == HobType.END_OF_HOB_LIST:
        return None
    record_class = _record_class(header)
    if record_class is None:
        return MiscHob(int(header.hob_type))
    return record_class.from_bytes(data[offset:])


def _walk(data: bytes, offset: int, strict: bool) -> Iterator[HobRecord]:
    data = bytes(data)
    while True:
        header = HobHeader.from_bytes(data[offset:])
        if header.hob_type == HobType.END_OF_HOB_LIST:
            return
        if header.length == 0:
            raise ValueError(f"HOB at offset {offset} has zero length")
        if strict:
            record_class = _record_class(header)
            if record_class is not None and record_class is not GuidHob and header.length != record_class.SIZE:
                raise HobSizeError(header.length, record_class.SIZE)
        hob = parse_hob(data, offset)
        assert hob is not None
        yield hob
        offset += header.length


def iter_hobs(data: bytes, offset: int = 0) -> Iterator[HobRecord]:
    """Yield the HOBs of a serialized list from ``offset`` up to the end-of-list HOB.

    Each step advances by the length in the current HOB's header; lengths
    are not checked against the record sizes.
    """
    return _walk(data, offset, strict=False)


class HobList:
    """An ordered collection of HOB records."""

    def __init__(self) -> None:
        self._hobs: List[HobRecord] = []

    def __iter__(self) -> Iterator[HobRecord]:
        return iter(self._hobs)

    def __len__(self) -> int:
        return len(self._hobs)

    def __repr__(self) -> str:
        return f"HobList({self._hobs!r})"

    def is_empty(self) -> bool:
        """True if the list holds no HOBs."""
        return not self._hobs

    def push(self, hob: HobRecord) -> None:
        """Append a HOB record to the list."""
        if not isinstance(hob, HobRecord):
            raise TypeError(f"expected a HOB record, got {type(hob).__name__}")
        self._hobs.append(hob)

    def size(self) -> int:
        """Total size in bytes of the HOBs in the list."""
        return sum(hob.size() for hob in self._hobs)

    def discover_hobs(self, data: bytes) -> None:
        """Parse a serialized HOB list and append its HOBs.

        Parsing stops at the end-of-list HOB, which is not added. A HOB
        whose header length disagrees with its record size raises
        :class:`HobSizeError`.
        """
        self._hobs.extend(_walk(data, 0, strict=True))

    def to_bytes(self) -> bytes:
        """Concatenate the encoded HOBs of the list."""
        return b"".join(hob.to_bytes() for hob in self._hobs)