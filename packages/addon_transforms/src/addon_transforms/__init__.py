from addon_transforms.entries import (
    EAGER_IMPORT,
    LAZY_IMPORT,
    LAZY_REQUIRE,
    EntrySpec,
    EntryTypeError,
    generate_entries,
    generate_l10n_entries,
    generate_l10n_settings_entries,
    generate_manifest_entries,
    generate_runtime_entries,
)
from addon_transforms.l10n import MessageCatalogs, list_locales, parse_messages, partition_messages
from addon_transforms.manifest import (
    filter_tags,
    generate_manifest_entry,
    generate_runtime_entry,
    trim_manifest,
)
from addon_transforms.rewrite import copy_imported_libraries, rewrite_script
from addon_transforms.walk import iter_files, walk

__all__ = [
    "EAGER_IMPORT",
    "LAZY_IMPORT",
    "LAZY_REQUIRE",
    "EntrySpec",
    "EntryTypeError",
    "MessageCatalogs",
    "copy_imported_libraries",
    "filter_tags",
    "generate_entries",
    "generate_l10n_entries",
    "generate_l10n_settings_entries",
    "generate_manifest_entries",
    "generate_manifest_entry",
    "generate_runtime_entries",
    "generate_runtime_entry",
    "iter_files",
    "list_locales",
    "parse_messages",
    "partition_messages",
    "rewrite_script",
    "trim_manifest",
    "walk",
]
