"""GUIDs and enumerations of the DXE architectural and firmware volume protocols."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional, Union

from .hob_header import Guid

BDS_PROTOCOL_GUID = Guid.from_fields(
    0x665E3FF6, 0x46CC, 0x11D4, 0x9A, 0x38, (0x00, 0x90, 0x27, 0x3F, 0xC1, 0x4D)
)
"""Boot Device Selection architectural protocol."""

CPU_ARCH_PROTOCOL_GUID = Guid.from_fields(
    0x26BACCB1, 0x6F42, 0x11D4, 0xBC, 0xE7, (0x00, 0x80, 0xC7, 0x3C, 0x88, 0x81)
)
"""CPU architectural protocol."""

FIRMWARE_VOLUME_PROTOCOL_GUID = Guid.from_fields(
    0x220E73B6, 0x6BDB, 0x4413, 0x84, 0x05, (0xB9, 0x74, 0xB1, 0x08, 0x61, 0x9A)
)
"""Firmware volume (file-level access) protocol."""

FIRMWARE_VOLUME_BLOCK_PROTOCOL_GUID = Guid.from_fields(
    0x8F644FA9, 0xE850, 0x4DB1, 0x9C, 0xE2, (0x0B, 0x44, 0x69, 0x8E, 0x8D, 0xA4)
)
"""Firmware volume block (low-level access) protocol."""

METRONOME_PROTOCOL_GUID = Guid.from_fields(
    0x26BACCB2, 0x6F42, 0x11D4, 0xBC, 0xE7, (0x00, 0x80, 0xC7, 0x3C, 0x88, 0x81)
)
"""Metronome architectural protocol."""

RUNTIME_PROTOCOL_GUID = Guid.from_fields(
    0xB7DFB4E1, 0x052F, 0x449F, 0x87, 0xBE, (0x98, 0x18, 0xFC, 0x91, 0xB7, 0x33)
)
"""Runtime architectural protocol."""

WATCHDOG_PROTOCOL_GUID = Guid.from_fields(
    0x665E3FF5, 0x46CC, 0x11D4, 0x9A, 0x38, (0x00, 0x90, 0x27, 0x3F, 0xC1, 0x4D)
)
"""Watchdog timer architectural protocol."""


class CpuFlushType(IntEnum):
    """Kinds of data cache flush the CPU protocol can perform."""

    WRITE_BACK_INVALIDATE = 0
    WRITE_BACK = 1
    INVALIDATE = 2


class CpuInitType(IntEnum):
    """Kinds of INIT the CPU protocol can generate."""

    INIT = 0


ARCH_PROTOCOLS: Dict[Guid, str] = {
    BDS_PROTOCOL_GUID: "EFI_BDS_ARCH_PROTOCOL",
    CPU_ARCH_PROTOCOL_GUID: "EFI_CPU_ARCH_PROTOCOL",
    FIRMWARE_VOLUME_PROTOCOL_GUID: "EFI_FIRMWARE_VOLUME2_PROTOCOL",
    FIRMWARE_VOLUME_BLOCK_PROTOCOL_GUID: "EFI_FIRMWARE_VOLUME_BLOCK2_PROTOCOL",
    METRONOME_PROTOCOL_GUID: "EFI_METRONOME_ARCH_PROTOCOL",
    RUNTIME_PROTOCOL_GUID: "EFI_RUNTIME_ARCH_PROTOCOL",
    WATCHDOG_PROTOCOL_GUID: "EFI_WATCHDOG_TIMER_ARCH_PROTOCOL",
}

_BY_TEXT: Dict[str, str] = {str(guid): name for guid, name in ARCH_PROTOCOLS.items()}


def arch_protocol_name(guid: Union[Guid, str]) -> Optional[str]:
    """Name of the protocol a GUID identifies, or None if it is not one of these.

    ``guid`` may be a :class:`Guid` or its registry-format text, with or
    without surrounding braces and in either case.
    """
    if isinstance(guid, Guid):
        return ARCH_PROTOCOLS.get(guid)
    if isinstance(guid, str):
        return _BY_TEXT.get(guid.strip().strip("{}").lower())
    raise TypeError(f"expected a Guid or str, got {type(guid).__name__}")