"""Generic HOB header, GUIDs, HOB type codes and resource attribute constants."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Iterable, Union


def _check_range(name: str, value: int, bits: int) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} bits, got {value!r}")


def _require_length(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")


@dataclass(frozen=True)
class Guid:
    """An EFI GUID, stored in its little-endian on-disk layout."""

    time_low: int
    time_mid: int
    time_hi_and_version: int
    clk_seq_hi_res: int
    clk_seq_low: int
    node: bytes

    SIZE: ClassVar[int] = 16
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IHHBB6s")

    def __post_init__(self) -> None:
        _check_range("time_low", self.time_low, 32)
        _check_range("time_mid", self.time_mid, 16)
        _check_range("time_hi_and_version", self.time_hi_and_version, 16)
        _check_range("clk_seq_hi_res", self.clk_seq_hi_res, 8)
        _check_range("clk_seq_low", self.clk_seq_low, 8)
        node = bytes(self.node)
        if len(node) != 6:
            raise ValueError(f"node must be 6 bytes, got {len(node)}")
        object.__setattr__(self, "node", node)

    @classmethod
    def from_fields(
        cls,
        time_low: int,
        time_mid: int,
        time_hi_and_version: int,
        clk_seq_hi_res: int,
        clk_seq_low: int,
        node: Union[bytes, Iterable[int]],
    ) -> "Guid":
        """Build a GUID from its individual fields."""
        return cls(time_low, time_mid, time_hi_and_version, clk_seq_hi_res, clk_seq_low, bytes(node))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Guid":
        """Decode a GUID from the first 16 bytes of ``data``."""
        _require_length(data, cls.SIZE, "GUID")
        return cls(*cls._FORMAT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the GUID in its 16-byte little-endian layout."""
        return self._FORMAT.pack(
            self.time_low,
            self.time_mid,
            self.time_hi_and_version,
            self.clk_seq_hi_res,
            self.clk_seq_low,
            self.node,
        )

    def __str__(self) -> str:
        return (
            f"{self.time_low:08x}-{self.time_mid:04x}-{self.time_hi_and_version:04x}-"
            f"{self.clk_seq_hi_res:02x}{self.clk_seq_low:02x}-{self.node.hex()}"
        )


class HobType(IntEnum):
    """Values of the HOB header type field."""

    HANDOFF = 0x0001
    MEMORY_ALLOCATION = 0x0002
    RESOURCE_DESCRIPTOR = 0x0003
    GUID_EXTENSION = 0x0004
    FV = 0x0005
    CPU = 0x0006
    MEMORY_POOL = 0x0007
    FV2 = 0x0009
    LOAD_PEIM_UNUSED = 0x000A
    UEFI_CAPSULE = 0x000B
    FV3 = 0x000C
    UNUSED = 0xFFFE
    END_OF_HOB_LIST = 0xFFFF


def _as_hob_type(value: int) -> int:
    try:
        return HobType(value)
    except ValueError:
        return value


@dataclass
class HobHeader:
    """The generic header every HOB starts with."""

    hob_type: int
    length: int
    reserved: int = 0

    SIZE: ClassVar[int] = 8
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<HHI")

    def __post_init__(self) -> None:
        _check_range("hob_type", int(self.hob_type), 16)
        _check_range("length", self.length, 16)
        _check_range("reserved", self.reserved, 32)
        self.hob_type = _as_hob_type(int(self.hob_type))

    @classmethod
    def from_bytes(cls, data: bytes) -> "HobHeader":
        """Decode a header from the first 8 bytes of ``data``."""
        _require_length(data, cls.SIZE, "HOB header")
        return cls(*cls._FORMAT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the header as 8 bytes."""
        return self._FORMAT.pack(int(self.hob_type), self.length, self.reserved)


@dataclass
class MemoryAllocationHeader:
    """Attributes of a logical memory allocation (the allocation descriptor)."""

    name: Guid
    memory_base_address: int
    memory_length: int
    memory_type: int
    reserved: bytes = field(default=bytes(4))

    SIZE: ClassVar[int] = 40
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<16sQQI4s")

    def __post_init__(self) -> None:
        _check_range("memory_base_address", self.memory_base_address, 64)
        _check_range("memory_length", self.memory_length, 64)
        _check_range("memory_type", self.memory_type, 32)
        self.reserved = bytes(self.reserved)
        if len(self.reserved) != 4:
            raise ValueError(f"reserved must be 4 bytes, got {len(self.reserved)}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "MemoryAllocationHeader":
        """Decode an allocation descriptor from the first 40 bytes of ``data``."""
        _require_length(data, cls.SIZE, "memory allocation header")
        name, base, length, memory_type, reserved = cls._FORMAT.unpack_from(data)
        return cls(Guid.from_bytes(name), base, length, memory_type, reserved)

    def to_bytes(self) -> bytes:
        """Encode the allocation descriptor as 40 bytes."""
        return self._FORMAT.pack(
            self.name.to_bytes(),
            self.memory_base_address,
            self.memory_length,
            self.memory_type,
            self.reserved,
        )


@dataclass
class EfiMemoryTypeInformation:
    """One entry of the memory type information GUID extension HOB."""

    memory_type: int
    number_of_pages: int

    SIZE: ClassVar[int] = 8
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<II")

    def __post_init__(self) -> None:
        _check_range("memory_type", self.memory_type, 32)
        _check_range("number_of_pages", self.number_of_pages, 32)

    @classmethod
    def from_bytes(cls, data: bytes) -> "EfiMemoryTypeInformation":
        """Decode an entry from the first 8 bytes of ``data``."""
        _require_length(data, cls.SIZE, "memory type information")
        return cls(*cls._FORMAT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the entry as 8 bytes."""
        return self._FORMAT.pack(self.memory_type, self.number_of_pages)


MEMORY_TYPE_INFO_HOB_GUID = Guid.from_fields(
    0x4C19049F, 0x4137, 0x4DD3, 0x9C, 0x10, (0x8B, 0x97, 0xA8, 0x3F, 0xFD, 0xFA)
)

# Resource types of a resource descriptor HOB.
EFI_RESOURCE_SYSTEM_MEMORY = 0x00000000
EFI_RESOURCE_MEMORY_MAPPED_IO = 0x00000001
EFI_RESOURCE_IO = 0x00000002
EFI_RESOURCE_FIRMWARE_DEVICE = 0x00000003
EFI_RESOURCE_MEMORY_MAPPED_IO_PORT = 0x00000004
EFI_RESOURCE_MEMORY_RESERVED = 0x00000005
EFI_RESOURCE_IO_RESERVED = 0x00000006
EFI_RESOURCE_MAX_MEMORY_TYPE = 0x00000007

# Resource attribute settings.
EFI_RESOURCE_ATTRIBUTE_PRESENT = 0x00000001
EFI_RESOURCE_ATTRIBUTE_INITIALIZED = 0x00000002
EFI_RESOURCE_ATTRIBUTE_TESTED = 0x00000004
EFI_RESOURCE_ATTRIBUTE_READ_PROTECTED = 0x00000080
EFI_RESOURCE_ATTRIBUTE_WRITE_PROTECTED = 0x00000100
EFI_RESOURCE_ATTRIBUTE_EXECUTION_PROTECTED = 0x00000200
EFI_RESOURCE_ATTRIBUTE_PERSISTENT = 0x00800000
EFI_RESOURCE_ATTRIBUTE_MORE_RELIABLE = 0x02000000

# Resource attribute capabilities.
EFI_RESOURCE_ATTRIBUTE_SINGLE_BIT_ECC = 0x00000008
EFI_RESOURCE_ATTRIBUTE_MULTIPLE_BIT_ECC = 0x00000010
EFI_RESOURCE_ATTRIBUTE_ECC_RESERVED_1 = 0x00000020
EFI_RESOURCE_ATTRIBUTE_ECC_RESERVED_2 = 0x00000040
EFI_RESOURCE_ATTRIBUTE_UNCACHEABLE = 0x00000400
EFI_RESOURCE_ATTRIBUTE_WRITE_COMBINEABLE = 0x00000800
EFI_RESOURCE_ATTRIBUTE_WRITE_THROUGH_CACHEABLE = 0x00001000
EFI_RESOURCE_ATTRIBUTE_WRITE_BACK_CACHEABLE = 0x00002000
EFI_RESOURCE_ATTRIBUTE_16_BIT_IO = 0x00004000
EFI_RESOURCE_ATTRIBUTE_32_BIT_IO = 0x00008000
EFI_RESOURCE_ATTRIBUTE_64_BIT_IO = 0x00010000
EFI_RESOURCE_ATTRIBUTE_UNCACHED_EXPORTED = 0x00020000
EFI_RESOURCE_ATTRIBUTE_READ_PROTECTABLE = 0x00100000
EFI_RESOURCE_ATTRIBUTE_WRITE_PROTECTABLE = 0x00200000
EFI_RESOURCE_ATTRIBUTE_EXECUTION_PROTECTABLE = 0x00400000
EFI_RESOURCE_ATTRIBUTE_PERSISTABLE = 0x01000000
EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTED = 0x00040000
EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTABLE = 0x00080000

MEMORY_ATTRIBUTE_MASK = (
    EFI_RESOURCE_ATTRIBUTE_PRESENT
    | EFI_RESOURCE_ATTRIBUTE_INITIALIZED
    | EFI_RESOURCE_ATTRIBUTE_TESTED
    | EFI_RESOURCE_ATTRIBUTE_READ_PROTECTED
    | EFI_RESOURCE_ATTRIBUTE_WRITE_PROTECTED
    | EFI_RESOURCE_ATTRIBUTE_EXECUTION_PROTECTED
    | EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTED
    | EFI_RESOURCE_ATTRIBUTE_16_BIT_IO
    | EFI_RESOURCE_ATTRIBUTE_32_BIT_IO
    | EFI_RESOURCE_ATTRIBUTE_64_BIT_IO
    | EFI_RESOURCE_ATTRIBUTE_PERSISTENT
)

TESTED_MEMORY_ATTRIBUTES = (
    EFI_RESOURCE_ATTRIBUTE_PRESENT | EFI_RESOURCE_ATTRIBUTE_INITIALIZED | EFI_RESOURCE_ATTRIBUTE_TESTED
)
INITIALIZED_MEMORY_ATTRIBUTES = EFI_RESOURCE_ATTRIBUTE_PRESENT | EFI_RESOURCE_ATTRIBUTE_INITIALIZED
PRESENT_MEMORY_ATTRIBUTES = EFI_RESOURCE_ATTRIBUTE_PRESENT

# Attributes for reserved memory before it is promoted to system memory.
EFI_MEMORY_PRESENT = 0x0100_0000_0000_0000
EFI_MEMORY_INITIALIZED = 0x0200_0000_0000_0000
EFI_MEMORY_TESTED = 0x0400_0000_0000_0000
EFI_MEMORY_NV = 0x0000_0000_0000_8000
EFI_MEMORY_MORE_RELIABLE = 0x0000_0000_0001_0000