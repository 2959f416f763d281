from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

LAZY_IMPORT = "lazy-import"
LAZY_REQUIRE = "lazy-require"
EAGER_IMPORT = "eager-import"
ENTRY_TYPES: frozenset[str] = frozenset({LAZY_IMPORT, LAZY_REQUIRE, EAGER_IMPORT})

DEFAULT_LOCALE = "en"
DEFAULT_ADDON_CHUNK = "addon-default-entry"

GENERATED_BANNER = "/* generated by pull */"

T = TypeVar("T")


class EntryTypeError(ValueError):
    pass


@dataclass(frozen=True)
class EntrySpec:
    """
    How one entry-table item is loaded.

    ``name`` is the bundler chunk name and only affects ``lazy-import`` entries; items
    sharing a name end up in the same chunk.
    """

    src: str
    type: str
    name: str | None = None


def generate_entries(items: Iterable[T], classify: Callable[[T], EntrySpec]) -> str:
    """
    Render an ES module whose default export maps each item to its loader.

    ``eager-import`` items become static imports bound to ``_import<N>``; the two lazy
    kinds become zero-argument arrow functions that load on first call. Raises
    ``EntryTypeError`` for any other type, before anything is returned.
    """

    imports: list[str] = []
    exports: list[str] = ["export default {"]
    for item in items:
        spec = classify(item)
        key = json.dumps(str(item))
        src = json.dumps(spec.src)
        if spec.type == LAZY_IMPORT:
            if spec.name is None:
                exports.append(f"  {key}: () => import({src}),")
            else:
                chunk = json.dumps(spec.name)
                exports.append(f"  {key}: () => import(/* webpackChunkName: {chunk} */ {src}),")
        elif spec.type == LAZY_REQUIRE:
            exports.append(f"  {key}: () => require({src}),")
        elif spec.type == EAGER_IMPORT:
            import_name = f"_import{len(imports)}"
            imports.append(f"import {import_name} from {src};")
            exports.append(f"  {key}: {import_name},")
        else:
            raise EntryTypeError(f"Unknown type: {spec.type}")
    exports.append("};")
    return "\n".join([GENERATED_BANNER, *imports, *exports]) + "\n"


def _translated_locales(locales: Iterable[str]) -> list[str]:
    # The default locale ships inside the main bundle.
    return [locale for locale in locales if locale != DEFAULT_LOCALE]


def generate_l10n_entries(locales: Iterable[str]) -> str:
    return generate_entries(
        _translated_locales(locales),
        lambda locale: EntrySpec(
            src=f"../addons-l10n/{locale}.json",
            type=LAZY_IMPORT,
            name=f"addon-l10n-{locale}",
        ),
    )


def generate_l10n_settings_entries(locales: Iterable[str]) -> str:
    return generate_entries(
        _translated_locales(locales),
        lambda locale: EntrySpec(src=f"../addons-l10n-settings/{locale}.json", type=LAZY_REQUIRE),
    )


def classify_addon(addon_id: str, manifest: Mapping[str, Any]) -> EntrySpec:
    """
    Pick the bundling strategy for one addon's runtime entry.

    Default-on addons that also run outside the editor go in the main bundle. Default-on
    editor-only addons share one chunk; every other addon gets a chunk of its own.
    """

    enabled = bool(manifest.get("enabledByDefault"))
    src = f"../addons/{addon_id}/_runtime_entry.js"
    if enabled and not manifest.get("editorOnly"):
        return EntrySpec(src=src, type=LAZY_REQUIRE)
    name = DEFAULT_ADDON_CHUNK if enabled else f"addon-entry-{addon_id}"
    return EntrySpec(src=src, type=LAZY_IMPORT, name=name)


def generate_runtime_entries(addons: Iterable[str], manifests: Mapping[str, Mapping[str, Any]]) -> str:
    return generate_entries(addons, lambda addon_id: classify_addon(addon_id, manifests[addon_id]))


def generate_manifest_entries(addons: Iterable[str]) -> str:
    return generate_entries(
        addons,
        lambda addon_id: EntrySpec(src=f"../addons/{addon_id}/_manifest_entry.js", type=EAGER_IMPORT),
    )
