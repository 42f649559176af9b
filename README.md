# pihob

Read, build and write Hand Off Block (HOB) lists as the Platform
Initialization (PI) specification defines them. The package needs only the
standard library.

A HOB list is a run of little-endian binary records. Each record starts with
a generic 8-byte header that holds a type, a length and a reserved field. An
end-of-list HOB closes the list. `pihob` decodes such a byte image into
Python objects and encodes those objects back into bytes.

## Installation

```
pip install pihob
```

## Modules

- `pihob.hob_header` holds these classes:
  - `Guid`, with `from_fields`, `from_bytes` and `to_bytes`. `str()` gives
    the registry text form.
  - the `HobType` enumeration.
  - the generic `HobHeader`.
  - `MemoryAllocationHeader`, the allocation descriptor.
  - `EfiMemoryTypeInformation`.

  It also holds `MEMORY_TYPE_INFO_HOB_GUID`, the `EFI_RESOURCE_*` type and
  attribute constants, the attribute masks (`MEMORY_ATTRIBUTE_MASK`,
  `TESTED_MEMORY_ATTRIBUTES` and the others), and the `EFI_MEMORY_*`
  constants.
- `pihob.hob_types` has one record class for each HOB kind:
  - `PhaseHandoffInformationTable`
  - `MemoryAllocation`
  - `MemoryAllocationModule`
  - `ResourceDescriptor`
  - `GuidHob`
  - `FirmwareVolume`
  - `FirmwareVolume2`
  - `FirmwareVolume3`
  - `Cpu`
  - `Capsule`
  - `MiscHob`

  Every one of them is a `HobRecord` with `from_bytes`, `to_bytes` and
  `size()`. If you build a record without a `header=` keyword, it gets a
  header with its own type and size. `ResourceDescriptor.attributes_valid()`
  checks that each protection attribute that is set has its matching
  capability set too. A `GuidHob` carries its trailing `data`, and its size
  is the length in its header.
- `pihob.hob_list` holds three things:
  - `HobList`, which supports `push`, `len()`, iteration, `is_empty`,
    `size`, `discover_hobs` and `to_bytes`.
  - `parse_hob(data, offset)`, which decodes one HOB. It returns `None` at
    the end-of-list HOB.
  - `iter_hobs(data, offset)`, a generator that walks the list up to the
    end-of-list HOB.

  `discover_hobs` raises `HobSizeError` when a HOB's header length differs
  from the size of its record type. `iter_hobs` does not check lengths.
  Both raise `ValueError` on a HOB of zero length.
- `pihob.arch_protocols` holds:
  - the GUIDs of the DXE architectural and firmware volume protocols. These
    are `BDS_PROTOCOL_GUID`, `CPU_ARCH_PROTOCOL_GUID`,
    `FIRMWARE_VOLUME_PROTOCOL_GUID`, `FIRMWARE_VOLUME_BLOCK_PROTOCOL_GUID`,
    `METRONOME_PROTOCOL_GUID`, `RUNTIME_PROTOCOL_GUID` and
    `WATCHDOG_PROTOCOL_GUID`.
  - the `CpuFlushType` and `CpuInitType` enumerations.
  - `arch_protocol_name(guid)`.
- `pihob.runtime_protocols` holds:
  - the GUIDs of the security, security2, status code and timer protocols.
  - the `EfiStatusCodeData` header.
  - `protocol_name(guid)`, which knows both these GUIDs and those in
    `arch_protocols`.

  Both lookup functions accept a `Guid` or its text form, with or without
  braces and in either case. They return `None` for a GUID they do not
  know.

## Example

```python
from pihob.hob_header import Guid, HobHeader, HobType
from pihob.hob_list import HobList, iter_hobs
from pihob.hob_types import FirmwareVolume, GuidHob

hobs = HobList()
hobs.push(FirmwareVolume(0x100000, 0x20000))
hobs.push(GuidHob(Guid.from_fields(1, 2, 3, 4, 5, [6, 7, 8, 9, 10, 11]), b"\x01\x02"))

# to_bytes does not append an end-of-list HOB; add one to get a full image.
image = hobs.to_bytes() + HobHeader(HobType.END_OF_HOB_LIST, HobHeader.SIZE).to_bytes()

parsed = HobList()
parsed.discover_hobs(image)
print(len(parsed), "HOBs,", parsed.size(), "bytes")

for hob in iter_hobs(image, 0):
    print(type(hob).__name__)
```

`discover_hobs` stops at the end-of-list HOB and leaves it out of the list.
A MEMORY_ALLOCATION HOB whose length equals `MemoryAllocationModule.SIZE`
is decoded as a `MemoryAllocationModule`. Any other MEMORY_ALLOCATION HOB is
decoded as a `MemoryAllocation`. A HOB of a type with no record class
becomes a `MiscHob`.

## What it does not do

- A `MiscHob` keeps only the type of its HOB. Its `to_bytes()` gives just
  those two bytes, so a list that holds `MiscHob` entries does not encode
  back into a HOB image that can be parsed again.
- The protocol modules give only GUIDs, enumerations and the status code
  data header. They give no callable protocol interfaces.
- There is no command-line tool and no formatted text dump of a HOB list.