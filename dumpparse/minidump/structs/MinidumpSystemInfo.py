from construct import Computed, Hex, Int8ul, Int16ul, Int32ul, Int64ul, Pass, Struct

MINIDUMP_SYSTEM_INFO = Struct(
    "ProcessorArchitecture" / Int16ul,
    "ProcessorLevel" / Int16ul,
    "ProcessorRevision" / Hex(Int16ul),
    "NumberOfProcessors" / Int8ul,
    "ProductType" / Int8ul,
    "MajorVersion" / Int32ul,
    "MinorVersion" / Int32ul,
    "BuildNumber" / Int32ul,
    "PlatformId" / Int32ul,
    "CSDVersionRva" / Hex(Int32ul),
    "SuiteMask" / Hex(Int16ul),
    "Reserved2" / Int16ul,
    "ProcessorFeatures" / Hex(Int64ul)[2],
    # CPU information packed into the two feature words
    "VendorId"
    / Computed(
        lambda this: [
            this.ProcessorFeatures[0] & 0xFFFFFFFF,
            (this.ProcessorFeatures[0] >> 32) & 0xFFFFFFFF,
            this.ProcessorFeatures[1] & 0xFFFFFFFF,
        ]
    ),
    "VersionInformation"
    / Computed(lambda this: (this.ProcessorFeatures[1] >> 32) & 0xFFFFFFFF),
    "FeatureInformation" / Computed(lambda this: this.ProcessorFeatures[0] & 0xFFFFFFFF),
    "AMDExtendedCpuFeatures"
    / Computed(lambda this: (this.ProcessorFeatures[0] >> 32) & 0xFFFFFFFF),
    "CSDVersion" / Pass,  # Placeholder filled in from CSDVersionRva
)
