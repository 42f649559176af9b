"""Typed HOB records: the fixed layouts that follow the generic HOB header."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar, Optional

from .hob_header import (
    EFI_RESOURCE_ATTRIBUTE_EXECUTION_PROTECTABLE,
    EFI_RESOURCE_ATTRIBUTE_EXECUTION_PROTECTED,
    EFI_RESOURCE_ATTRIBUTE_PERSISTABLE,
    EFI_RESOURCE_ATTRIBUTE_PERSISTENT,
    EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTABLE,
    EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTED,
    EFI_RESOURCE_ATTRIBUTE_READ_PROTECTED,
    EFI_RESOURCE_ATTRIBUTE_WRITE_PROTECTABLE,
    EFI_RESOURCE_ATTRIBUTE_WRITE_PROTECTED,
    Guid,
    HobHeader,
    HobType,
    MemoryAllocationHeader,
)


def _check(name: str, value: int, bits: int) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} bits, got {value!r}")


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")


@dataclass
class HobRecord:
    """Common behaviour of every HOB record.

    The header is optional on construction; when omitted it is filled in
    with the record's HOB type and its size.
    """

    header: Optional[HobHeader] = field(default=None, kw_only=True)

    SIZE: ClassVar[int] = HobHeader.SIZE
    HOB_TYPE: ClassVar[int] = HobType.UNUSED

    def __post_init__(self) -> None:
        self._validate()
        if self.header is None:
            self.header = HobHeader(self.HOB_TYPE, self._default_length())

    def _validate(self) -> None:
        """Check field ranges; records with no fields have nothing to check."""

    def _default_length(self) -> int:
        return self.SIZE

    @classmethod
    def from_bytes(cls, data: bytes) -> "HobRecord":
        """Decode a record of this class from the start of ``data``."""
        if cls is HobRecord:
            raise TypeError("HobRecord is a base class; decode a concrete record type")
        data = bytes(data)
        _require(data, cls.SIZE, cls.__name__)
        header = HobHeader.from_bytes(data)
        return cls._decode_body(header, data[HobHeader.SIZE:cls.SIZE])

    @classmethod
    def _decode_body(cls, header: HobHeader, body: bytes) -> "HobRecord":
        raise TypeError(f"{cls.__name__} has no body layout")

    def _encode_body(self) -> bytes:
        raise TypeError(f"{type(self).__name__} has no body layout")

    def to_bytes(self) -> bytes:
        """Encode the record, header first, in its in-memory layout."""
        assert self.header is not None
        return self.header.to_bytes() + self._encode_body()

    def size(self) -> int:
        """Size of the record in bytes."""
        return self.SIZE


@dataclass
class PhaseHandoffInformationTable(HobRecord):
    """General state information of the HOB producer phase (the PHIT HOB)."""

    version: int
    boot_mode: int
    memory_top: int
    memory_bottom: int
    free_memory_top: int
    free_memory_bottom: int
    end_of_hob_list: int

    SIZE: ClassVar[int] = 56
    HOB_TYPE: ClassVar[int] = HobType.HANDOFF
    _BODY: ClassVar[struct.Struct] = struct.Struct("<II5Q")

    def _validate(self) -> None:
        _check("version", self.version, 32)
        _check("boot_mode", int(self.boot_mode), 32)
        for name in ("memory_top", "memory_bottom", "free_memory_top", "free_memory_bottom", "end_of_hob_list"):
            _check(name, getattr(self, name), 64)

    @classmethod
    def _decode_body(cls, header, body):
        return cls(*cls._BODY.unpack(body), header=header)

    def _encode_body(self) -> bytes:
        return self._BODY.pack(
            self.version,
            int(self.boot_mode),
            self.memory_top,
            self.memory_bottom,
            self.free_memory_top,
            self.free_memory_bottom,
            self.end_of_hob_list,
        )


@dataclass
class MemoryAllocation(HobRecord):
    """A memory range used during the HOB producer phase outside the HOB list."""

    alloc_descriptor: MemoryAllocationHeader

    SIZE: ClassVar[int] = HobHeader.SIZE + MemoryAllocationHeader.SIZE
    HOB_TYPE: ClassVar[int] = HobType.MEMORY_ALLOCATION

    @classmethod
    def _decode_body(cls, header, body):
        return cls(MemoryAllocationHeader.from_bytes(body), header=header)

    def _encode_body(self) -> bytes:
        return self.alloc_descriptor.to_bytes()


MemoryAllocationStack = MemoryAllocation
MemoryAllocationBspStore = MemoryAllocation
MemoryPool = HobHeader


@dataclass
class MemoryAllocationModule(HobRecord):
    """Location and entry point of the HOB consumer phase."""

    alloc_descriptor: MemoryAllocationHeader
    module_name: Guid
    entry_point: int

    SIZE: ClassVar[int] = HobHeader.SIZE + MemoryAllocationHeader.SIZE + Guid.SIZE + 8
    HOB_TYPE: ClassVar[int] = HobType.MEMORY_ALLOCATION
    _TAIL: ClassVar[struct.Struct] = struct.Struct("<16sQ")

    def _validate(self) -> None:
        _check("entry_point", self.entry_point, 64)

    @classmethod
    def _decode_body(cls, header, body):
        descriptor = MemoryAllocationHeader.from_bytes(body)
        name, entry_point = cls._TAIL.unpack_from(body, MemoryAllocationHeader.SIZE)
        return cls(descriptor, Guid.from_bytes(name), entry_point, header=header)

    def _encode_body(self) -> bytes:
        return self.alloc_descriptor.to_bytes() + self._TAIL.pack(self.module_name.to_bytes(), self.entry_point)


@dataclass
class ResourceDescriptor(HobRecord):
    """Properties of a fixed, non-relocatable resource range."""

    owner: Guid
    resource_type: int
    resource_attribute: int
    physical_start: int
    resource_length: int

    SIZE: ClassVar[int] = 48
    HOB_TYPE: ClassVar[int] = HobType.RESOURCE_DESCRIPTOR
    _BODY: ClassVar[struct.Struct] = struct.Struct("<16sIIQQ")

    def _validate(self) -> None:
        _check("resource_type", self.resource_type, 32)
        _check("resource_attribute", self.resource_attribute, 32)
        _check("physical_start", self.physical_start, 64)
        _check("resource_length", self.resource_length, 64)

    @classmethod
    def _decode_body(cls, header, body):
        owner, rtype, attribute, start, length = cls._BODY.unpack(body)
        return cls(Guid.from_bytes(owner), rtype, attribute, start, length, header=header)

    def _encode_body(self) -> bytes:
        return self._BODY.pack(
            self.owner.to_bytes(),
            self.resource_type,
            self.resource_attribute,
            self.physical_start,
            self.resource_length,
        )

    def attributes_valid(self) -> bool:
        """True if every protection setting is backed by its matching capability."""
        attributes = self.resource_attribute
        pairs = (
            (EFI_RESOURCE_ATTRIBUTE_READ_PROTECTED, EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTABLE),
            (EFI_RESOURCE_ATTRIBUTE_WRITE_PROTECTED, EFI_RESOURCE_ATTRIBUTE_WRITE_PROTECTABLE),
            (EFI_RESOURCE_ATTRIBUTE_EXECUTION_PROTECTED, EFI_RESOURCE_ATTRIBUTE_EXECUTION_PROTECTABLE),
            (EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTED, EFI_RESOURCE_ATTRIBUTE_READ_ONLY_PROTECTABLE),
            (EFI_RESOURCE_ATTRIBUTE_PERSISTENT, EFI_RESOURCE_ATTRIBUTE_PERSISTABLE),
        )
        return all(not attributes & setting or attributes & capability for setting, capability in pairs)


@dataclass
class GuidHob(HobRecord):
    """A GUID extension HOB: a GUID naming the contents, followed by its data."""

    name: Guid
    data: bytes = b""

    SIZE: ClassVar[int] = HobHeader.SIZE + Guid.SIZE
    HOB_TYPE: ClassVar[int] = HobType.GUID_EXTENSION

    def _validate(self) -> None:
        self.data = bytes(self.data)

    def _default_length(self) -> int:
        return self.SIZE + len(self.data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "GuidHob":
        """Decode a GUID HOB; its data runs to the length in its header."""
        data = bytes(data)
        _require(data, cls.SIZE, cls.__name__)
        header = HobHeader.from_bytes(data)
        if header.length < cls.SIZE:
            raise ValueError(f"GUID HOB length {header.length} is shorter than {cls.SIZE}")
        _require(data, header.length, cls.__name__)
        name = Guid.from_bytes(data[HobHeader.SIZE:cls.SIZE])
        return cls(name, data[cls.SIZE:header.length], header=header)

    def _encode_body(self) -> bytes:
        return self.name.to_bytes() + self.data

    def size(self) -> int:
        """Size as given by the header length, data included."""
        assert self.header is not None
        return self.header.length


@dataclass
class FirmwareVolume(HobRecord):
    """Location of a firmware volume holding firmware files."""

    base_address: int
    length: int

    SIZE: ClassVar[int] = 24
    HOB_TYPE: ClassVar[int] = HobType.FV
    _BODY: ClassVar[struct.Struct] = struct.Struct("<QQ")

    def _validate(self) -> None:
        _check("base_address", self.base_address, 64)
        _check("length", self.length, 64)

    @classmethod
    def _decode_body(cls, header, body):
        return cls(*cls._BODY.unpack(body), header=header)

    def _encode_body(self) -> bytes:
        return self._BODY.pack(self.base_address, self.length)


@dataclass
class FirmwareVolume2(HobRecord):
    """A firmware volume extracted from a file within another firmware volume."""

    base_address: int
    length: int
    fv_name: Guid
    file_name: Guid

    SIZE: ClassVar[int] = 56
    HOB_TYPE: ClassVar[int] = HobType.FV2
    _BODY: ClassVar[struct.Struct] = struct.Struct("<QQ16s16s")

    def _validate(self) -> None:
        _check("base_address", self.base_address, 64)
        _check("length", self.length, 64)

    @classmethod
    def _decode_body(cls, header, body):
        base, length, fv_name, file_name = cls._BODY.unpack(body)
        return cls(base, length, Guid.from_bytes(fv_name), Guid.from_bytes(file_name), header=header)

    def _encode_body(self) -> bytes:
        return self._BODY.pack(self.base_address, self.length, self.fv_name.to_bytes(), self.file_name.to_bytes())


@dataclass
class FirmwareVolume3(HobRecord):
    """A firmware volume with its authentication status and origin."""

    base_address: int
    length: int
    authentication_status: int
    extracted_fv: bool
    fv_name: Guid
    file_name: Guid

    SIZE: ClassVar[int] = 64
    HOB_TYPE: ClassVar[int] = HobType.FV3
    _BODY: ClassVar[struct.Struct] = struct.Struct("<QQIB3x16s16s")

    def _validate(self) -> None:
        _check("base_address", self.base_address, 64)
        _check("length", self.length, 64)
        _check("authentication_status", self.authentication_status, 32)
        self.extracted_fv = bool(self.extracted_fv)

    @classmethod
    def _decode_body(cls, header, body):
        base, length, status, extracted, fv_name, file_name = cls._BODY.unpack(body)
        return cls(
            base,
            length,
            status,
            bool(extracted),
            Guid.from_bytes(fv_name),
            Guid.from_bytes(file_name),
            header=header,
        )

    def _encode_body(self) -> bytes:
        return self._BODY.pack(
            self.base_address,
            self.length,
            self.authentication_status,
            int(self.extracted_fv),
            self.fv_name.to_bytes(),
            self.file_name.to_bytes(),
        )


@dataclass
class Cpu(HobRecord):
    """Processor address space and I/O space capabilities."""

    size_of_memory_space: int
    size_of_io_space: int
    reserved: bytes = bytes(6)

    SIZE: ClassVar[int] = 16
    HOB_TYPE: ClassVar[int] = HobType.CPU
    _BODY: ClassVar[struct.Struct] = struct.Struct("<BB6s")

    def _validate(self) -> None:
        _check("size_of_memory_space", self.size_of_memory_space, 8)
        _check("size_of_io_space", self.size_of_io_space, 8)
        self.reserved = bytes(self.reserved)
        if len(self.reserved) != 6:
            raise ValueError(f"reserved must be 6 bytes, got {len(self.reserved)}")

    @classmethod
    def _decode_body(cls, header, body):
        return cls(*cls._BODY.unpack(body), header=header)

    def _encode_body(self) -> bytes:
        return self._BODY.pack(self.size_of_memory_space, self.size_of_io_space, self.reserved)


@dataclass
class Capsule(HobRecord):
    """Location of a UEFI capsule."""

    base_address: int
    length: int

    SIZE: ClassVar[int] = 12
    HOB_TYPE: ClassVar[int] = HobType.UEFI_CAPSULE
    _BODY: ClassVar[struct.Struct] = struct.Struct("<BB2x")

    def _validate(self) -> None:
        _check("base_address", self.base_address, 8)
        _check("length", self.length, 8)

    @classmethod
    def _decode_body(cls, header, body):
        return cls(*cls._BODY.unpack(body), header=header)

    def _encode_body(self) -> bytes:
        return self._BODY.pack(self.base_address, self.length)


@dataclass
class MiscHob(HobRecord):
    """A HOB of a type with no dedicated layout; only its type is kept."""

    hob_type: int

    SIZE: ClassVar[int] = 2
    _BODY: ClassVar[struct.Struct] = struct.Struct("<H")

    def __post_init__(self) -> None:
        _check("hob_type", int(self.hob_type), 16)
        self.header = HobHeader(int(self.hob_type), HobHeader.SIZE)
        self.hob_type = self.header.hob_type

    @classmethod
    def from_bytes(cls, data: bytes) -> "MiscHob":
        """Read the HOB type from the start of ``data``."""
        data = bytes(data)
        _require(data, cls.SIZE, cls.__name__)
        (hob_type,) = cls._BODY.unpack_from(data)
        return cls(hob_type)

    def to_bytes(self) -> bytes:
        """Encode the HOB type as two bytes."""
        return self._BODY.pack(int(self.hob_type))