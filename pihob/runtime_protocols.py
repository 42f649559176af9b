"""GUIDs and data layouts of the security, status code and timer protocols."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Union

from .arch_protocols import arch_protocol_name
from .hob_header import Guid

SECURITY_PROTOCOL_GUID = Guid.from_fields(
    0xA46423E3, 0x4617, 0x49F1, 0xB9, 0xFF, (0xD1, 0xBF, 0xA9, 0x11, 0x58, 0x39)
)
"""Security architectural protocol."""

SECURITY2_PROTOCOL_GUID = Guid.from_fields(
    0x94AB2F58, 0x1438, 0x4EF1, 0x91, 0x52, (0x18, 0x94, 0x1A, 0x3A, 0x0E, 0x68)
)
"""Security2 architectural protocol."""

STATUS_CODE_PROTOCOL_GUID = Guid.from_fields(
    0xD2B2B828, 0x0826, 0x48A7, 0xB3, 0xDF, (0x98, 0x3C, 0x00, 0x60, 0x24, 0xF0)
)
"""Status code runtime protocol."""

TIMER_PROTOCOL_GUID = Guid.from_fields(
    0x26BACCB3, 0x6F42, 0x11D4, 0xBC, 0xE7, (0x00, 0x80, 0xC7, 0x3C, 0x88, 0x81)
)
"""Timer architectural protocol."""


RUNTIME_PROTOCOLS: Dict[Guid, str] = {
    SECURITY_PROTOCOL_GUID: "EFI_SECURITY_ARCH_PROTOCOL",
    SECURITY2_PROTOCOL_GUID: "EFI_SECURITY2_ARCH_PROTOCOL",
    STATUS_CODE_PROTOCOL_GUID: "EFI_STATUS_CODE_PROTOCOL",
    TIMER_PROTOCOL_GUID: "EFI_TIMER_ARCH_PROTOCOL",
}

_BY_TEXT: Dict[str, str] = {str(guid): name for guid, name in RUNTIME_PROTOCOLS.items()}


def _check(name: str, value: int, bits: int) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} bits, got {value!r}")


@dataclass
class EfiStatusCodeData:
    """Header of the extended data passed with a reported status code.

    The data itself follows ``header_size`` bytes from the start of the
    header and is ``size`` bytes long; ``data_type`` names its format.
    """

    header_size: int
    size: int
    data_type: Guid

    SIZE: ClassVar[int] = 4 + Guid.SIZE
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<HH16s")

    def __post_init__(self) -> None:
        _check("header_size", self.header_size, 16)
        _check("size", self.size, 16)
        if not isinstance(self.data_type, Guid):
            raise TypeError(f"data_type must be a Guid, got {type(self.data_type).__name__}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "EfiStatusCodeData":
        """Decode the header from the first 20 bytes of ``data``."""
        data = bytes(data)
        if len(data) < cls.SIZE:
            raise ValueError(f"status code data needs {cls.SIZE} bytes, got {len(data)}")
        header_size, size, guid = cls._FORMAT.unpack_from(data)
        return cls(header_size, size, Guid.from_bytes(guid))

    def to_bytes(self) -> bytes:
        """Encode the header as 20 bytes."""
        return self._FORMAT.pack(self.header_size, self.size, self.data_type.to_bytes())


def protocol_name(guid: Union[Guid, str]) -> Optional[str]:
    """Name of the protocol a GUID identifies, or None if it is unknown.

    Covers the runtime protocols here as well as the architectural and
    firmware volume protocols. ``guid`` may be a :class:`Guid` or its
    registry-format text, with or without braces and in either case.
    """
    if isinstance(guid, Guid):
        name = RUNTIME_PROTOCOLS.get(guid)
    elif isinstance(guid, str):
        name = _BY_TEXT.get(guid.strip().strip("{}").lower())
    else:
        raise TypeError(f"expected a Guid or str, got {type(guid).__name__}")
    if name is not None:
        return name
    return arch_protocol_name(guid)