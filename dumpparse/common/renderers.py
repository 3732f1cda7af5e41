from rich.table import Table

from ..minidump import MINIDUMP_TYPE, MinidumpFile
from .formatting import (
    format_file_version,
    format_hex,
    guess_operating_system,
    memory_protection_to_string,
    memory_state_to_string,
    memory_type_to_string,
    platform_id_to_string,
    processor_architecture_to_string,
    product_type_to_string,
    stream_type_to_string,
)
from .output import get_dumpparse_table


def _key_value_table(title: str, rows) -> Table:
    table = get_dumpparse_table(title)
    table.add_column("Field", style="italic #f9c300")
    table.add_column("Value")
    [table.add_row(key, str(value)) for key, value in rows]
    return table


def _flag_names(flags) -> str:
    # MiniDumpNormal is zero, so FlagsEnum always reports it as set
    names = [
        name
        for name, is_set in flags.items()
        if is_set and not name.startswith("_") and MINIDUMP_TYPE[name]
    ]
    return "|".join(names) or MINIDUMP_TYPE.MiniDumpNormal.name


def render_header(minidump: MinidumpFile) -> Table:
    header = minidump.header
    return _key_value_table(
        "MinidumpHeader",
        [
            ("Signature", format_hex(header.Signature)),
            ("Version", header.Version),
            ("ImplementationVersion", header.ImplementationVersion),
            ("NumberOfStreams", header.NumberOfStreams),
            ("StreamDirectoryRva", format_hex(header.StreamDirectoryRva)),
            ("CheckSum", format_hex(header.CheckSum)),
            ("TimeDateStamp", header.TimeDateStamp.format("YYYY-MM-DD HH:mm:ss")),
            ("Flags", _flag_names(header.Flags)),
        ],
    )


def render_streams(minidump: MinidumpFile) -> Table:
    table = get_dumpparse_table("Streams", ["StreamType", "Name", "Rva", "DataSize"])
    for directory in minidump.directories:
        stream_type = int(directory.StreamType)
        table.add_row(
            format_hex(stream_type),
            stream_type_to_string(stream_type),
            format_hex(directory.Location.Rva),
            format_hex(directory.Location.DataSize),
        )
    return table


def render_threads(minidump: MinidumpFile) -> Table:
    table = get_dumpparse_table(
        "ThreadList", ["ThreadId", "SuspendCount", "PriorityClass", "Priority", "Teb"]
    )
    for thread in minidump.threads:
        table.add_row(
            format_hex(thread.ThreadId),
            str(thread.SuspendCount),
            str(thread.PriorityClass),
            str(thread.Priority),
            format_hex(thread.Teb),
        )
    return table


def render_modules(minidump: MinidumpFile) -> Table:
    table = get_dumpparse_table(
        "ModuleList",
        ["Module name", "BaseAddress", "Size", "EndAddress", "Timestamp", "Version"],
    )
    for module in minidump.modules:
        table.add_row(
            module.ModuleName or "",
            format_hex(module.BaseOfImage, 8),
            format_hex(module.SizeOfImage),
            format_hex(module.EndAddress, 8),
            format_hex(module.TimeDateStamp),
            format_file_version(module.VersionInfo),
        )
    return table


def render_segments(minidump: MinidumpFile) -> Table:
    table = get_dumpparse_table("MemorySegments", ["VA Start", "RVA", "Size"])
    for segment in minidump.memory_segments:
        table.add_row(
            format_hex(segment.start_virtual_address),
            format_hex(segment.start_file_address),
            format_hex(segment.size),
        )
    return table


def render_regions(minidump: MinidumpFile) -> Table:
    table = get_dumpparse_table(
        "MemoryInfoList",
        [
            "BaseAddress",
            "AllocationBase",
            "AllocationProtect",
            "RegionSize",
            "State",
            "Protect",
            "Type",
        ],
    )
    for region in minidump.memory_regions:
        table.add_row(
            format_hex(region.BaseAddress),
            format_hex(region.AllocationBase) if region.AllocationBase else "0",
            memory_protection_to_string(region.AllocationProtect),
            format_hex(region.RegionSize),
            memory_state_to_string(region.State),
            memory_protection_to_string(region.Protect),
            memory_type_to_string(region.Type),
        )
    return table


def render_system_info(minidump: MinidumpFile) -> Table:
    system_info = minidump.system_info
    return _key_value_table(
        "SystemInfo",
        [
            (
                "ProcessorArchitecture",
                processor_architecture_to_string(system_info.ProcessorArchitecture),
            ),
            ("OperatingSystem (guess)", guess_operating_system(system_info)),
            ("ProcessorLevel", system_info.ProcessorLevel),
            ("ProcessorRevision", format_hex(system_info.ProcessorRevision)),
            ("NumberOfProcessors", system_info.NumberOfProcessors),
            ("ProductType", product_type_to_string(system_info.ProductType)),
            ("MajorVersion", system_info.MajorVersion),
            ("MinorVersion", system_info.MinorVersion),
            ("BuildNumber", system_info.BuildNumber),
            ("PlatformId", platform_id_to_string(system_info.PlatformId)),
            ("CSDVersion", system_info.CSDVersion or ""),
            ("SuiteMask", format_hex(system_info.SuiteMask)),
            ("VendorId", " ".join(format_hex(word) for word in system_info.VendorId)),
            ("VersionInformation", system_info.VersionInformation),
            ("FeatureInformation", system_info.FeatureInformation),
            ("AMDExtendedCpuFeatures", system_info.AMDExtendedCpuFeatures),
        ],
    )


def render_exception(minidump: MinidumpFile) -> Table:
    exception = minidump.exception
    record = exception.ExceptionRecord
    parameters = record.ExceptionInformation[: min(record.NumberParameters, 15)]
    table = get_dumpparse_table(
        "Exception",
        [
            "ThreadId",
            "ExceptionCode",
            "ExceptionFlags",
            "ExceptionRecord",
            "ExceptionAddress",
            "ExceptionInformation",
        ],
    )
    table.add_row(
        format_hex(exception.ThreadId),
        format_hex(record.ExceptionCode),
        format_hex(record.ExceptionFlags),
        format_hex(record.ExceptionRecord),
        format_hex(record.ExceptionAddress),
        "[" + ", ".join(format_hex(p) for p in parameters) + "]",
    )
    return table


def render_handles(minidump: MinidumpFile) -> Table:
    table = get_dumpparse_table(
        "HandleData",
        [
            "Handle",
            "TypeName",
            "ObjectName",
            "Attributes",
            "GrantedAccess",
            "HandleCount",
            "PointerCount",
        ],
    )
    for handle in minidump.handles:
        table.add_row(
            format_hex(handle.Handle),
            handle.TypeName or "",
            handle.ObjectName or "",
            str(handle.Attributes),
            format_hex(handle.GrantedAccess),
            str(handle.HandleCount),
            str(handle.PointerCount),
        )
    return table


def render_misc_info(minidump: MinidumpFile) -> Table:
    misc_info = minidump.misc_info
    return _key_value_table(
        "MiscInfo",
        [(key, value) for key, value in misc_info.items() if not key.startswith("_")],
    )
