"""Platform Initialization Hand Off Block records and lists, with PI protocol GUIDs."""

__version__ = "0.1.0"

__all__ = [
    "arch_protocols",
    "hob_header",
    "hob_list",
    "hob_types",
    "runtime_protocols",
]