"""String conversions used when rendering a parsed minidump"""

from typing import Optional

from ..minidump.constants import (
    MEMORY_PROTECTION,
    MEMORY_STATE,
    MEMORY_TYPE,
    MINIDUMP_STREAM_TYPE,
    PLATFORM_ID,
    PROCESSOR_ARCHITECTURE,
    PRODUCT_TYPE,
)


def format_hex(value: Optional[int], width: int = 0) -> str:
    if value is None:
        return "N/A"
    return f"0x{value:0{width}x}"


def _enum_name(enum_cls, value: int, default: str = "UNKNOWN") -> str:
    try:
        return enum_cls(value).name
    except ValueError:
        return default


def processor_architecture_to_string(architecture: int) -> str:
    return _enum_name(PROCESSOR_ARCHITECTURE, architecture)


def stream_type_to_string(stream_type: int) -> str:
    return _enum_name(MINIDUMP_STREAM_TYPE, stream_type, f"Unknown({stream_type:#x})")


def product_type_to_string(product_type: int) -> str:
    return _enum_name(PRODUCT_TYPE, product_type)


def platform_id_to_string(platform_id: int) -> str:
    return _enum_name(PLATFORM_ID, platform_id)


def memory_state_to_string(state: int) -> str:
    return _enum_name(MEMORY_STATE, state)


def memory_type_to_string(memory_type: int) -> str:
    if memory_type == 0:
        return "N/A"
    return _enum_name(MEMORY_TYPE, memory_type)


def memory_protection_to_string(protection: int) -> str:
    if protection == 0:
        return "N/A"
    flags = [flag for flag in MEMORY_PROTECTION if flag & protection]
    if sum(flags) != protection:
        return "PAGE_UNKNOWN"
    return "|".join(flag.name for flag in flags)


def guess_operating_system(system_info) -> str:
    """Best guess at the Windows release from the version numbers"""

    major, minor = system_info.MajorVersion, system_info.MinorVersion
    workstation = system_info.ProductType == PRODUCT_TYPE.VER_NT_WORKSTATION

    releases = {
        (10, 0): ("Windows 10", "Windows Server 2016"),
        (6, 3): ("Windows 8.1", "Windows Server 2012 R2"),
        (6, 2): ("Windows 8", "Windows Server 2012"),
        (6, 1): ("Windows 7", "Windows Server 2008 R2"),
        (6, 0): ("Windows Vista", "Windows Server 2008"),
        (5, 1): ("Windows XP", "Windows XP"),
        (5, 0): ("Windows 2000", "Windows 2000"),
    }
    if (major, minor) not in releases:
        return "Unknown"
    client, server = releases[(major, minor)]
    return client if workstation else server


def format_file_version(version_info) -> str:
    """Formats the file version words of a VS_FIXEDFILEINFO as a.b.c.d"""

    if not version_info.dwSignature:
        return ""
    ms, ls = version_info.dwFileVersionMS, version_info.dwFileVersionLS
    return f"{ms >> 16}.{ms & 0xFFFF}.{ls >> 16}.{ls & 0xFFFF}"


def hexdump(data: bytes, address: int = 0, width: int = 16) -> str:
    lines = []
    for offset in range(0, len(data), width):
        chunk = data[offset : offset + width]
        hex_bytes = " ".join(f"{b:02x}" for b in chunk)
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"{address + offset:016x}  {hex_bytes:<{width * 3}} {text}")
    return "\n".join(lines)
