from construct import Computed, Hex, Int32ul, Int64ul, Pass, Struct

from .common import MINIDUMP_LOCATION_DESCRIPTOR

VS_FIXEDFILEINFO = Struct(
    "dwSignature" / Hex(Int32ul),
    "dwStrucVersion" / Hex(Int32ul),
    "dwFileVersionMS" / Hex(Int32ul),
    "dwFileVersionLS" / Hex(Int32ul),
    "dwProductVersionMS" / Hex(Int32ul),
    "dwProductVersionLS" / Hex(Int32ul),
    "dwFileFlagsMask" / Hex(Int32ul),
    "dwFileFlags" / Hex(Int32ul),
    "dwFileOS" / Hex(Int32ul),
    "dwFileType" / Hex(Int32ul),
    "dwFileSubtype" / Hex(Int32ul),
    "dwFileDateMS" / Hex(Int32ul),
    "dwFileDateLS" / Hex(Int32ul),
)

# 108 bytes on disk, the name lives out of line at ModuleNameRva
MINIDUMP_MODULE = Struct(
    "BaseOfImage" / Hex(Int64ul),
    "SizeOfImage" / Hex(Int32ul),
    "CheckSum" / Hex(Int32ul),
    "TimeDateStamp" / Hex(Int32ul),
    "ModuleNameRva" / Hex(Int32ul),
    "VersionInfo" / VS_FIXEDFILEINFO,
    "CvRecord" / MINIDUMP_LOCATION_DESCRIPTOR,
    "MiscRecord" / MINIDUMP_LOCATION_DESCRIPTOR,
    "Reserved0" / Int64ul,
    "Reserved1" / Int64ul,
    "EndAddress" / Computed(lambda this: this.BaseOfImage + this.SizeOfImage),
    "ModuleName" / Pass,  # Placeholder filled in from ModuleNameRva
)

MINIDUMP_MODULE_LIST_HEADER = Struct("NumberOfModules" / Int32ul)
