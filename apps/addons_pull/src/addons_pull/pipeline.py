from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from addon_transforms.entries import (
    DEFAULT_LOCALE,
    generate_l10n_entries,
    generate_l10n_settings_entries,
    generate_manifest_entries,
    generate_runtime_entries,
)
from addon_transforms.l10n import list_locales, parse_messages
from addon_transforms.manifest import generate_manifest_entry, generate_runtime_entry
from addon_transforms.rewrite import copy_imported_libraries, rewrite_script
from addon_transforms.walk import walk

from addons_pull.config import PullConfig
from addons_pull.contributors import write_translators

logger = logging.getLogger(__name__)

OUTPUT_FOLDERS: tuple[str, ...] = (
    "addons",
    "addons-l10n",
    "addons-l10n-settings",
    "libraries",
    "generated",
)

# Upstream folders the run reads from.
SOURCE_FOLDERS: tuple[str, ...] = ("addons", "addons-l10n", "libraries")

MANIFEST_FILE = "addon.json"
MANIFEST_ENTRY_FILE = "_manifest_entry.js"
RUNTIME_ENTRY_FILE = "_runtime_entry.js"

L10N_ENTRIES_FILE = "l10n-entries.js"
L10N_SETTINGS_ENTRIES_FILE = "l10n-settings-entries.js"
ADDON_ENTRIES_FILE = "addon-entries.js"
ADDON_MANIFESTS_FILE = "addon-manifests.js"
UPSTREAM_META_FILE = "upstream-meta.json"
TRANSLATORS_FILE = "translators.json"

TranslatorsFetcher = Callable[[], list[dict[str, Any]]]


@dataclass(frozen=True)
class PullResult:
    out_dir: Path
    commit: str
    manifests: dict[str, dict[str, Any]]
    locales: list[str]
    libraries: list[str]
    translators_written: bool


def _compact_json(obj: object) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))


def check_disjoint(source_dir: Path, out_dir: Path) -> None:
    """Raise ``ValueError`` if clearing the output folders would touch an upstream folder."""

    source_dir = source_dir.resolve()
    out_dir = out_dir.resolve()
    for src_name in SOURCE_FOLDERS:
        src = source_dir / src_name
        for out_name in OUTPUT_FOLDERS:
            out = out_dir / out_name
            if src.is_relative_to(out) or out.is_relative_to(src):
                raise ValueError(f"Output folder {out} overlaps upstream folder {src}")


def prepare_output_dirs(out_dir: Path) -> None:
    """Delete and recreate every output folder so no file from an earlier run survives."""

    for folder in OUTPUT_FOLDERS:
        path = out_dir / folder
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)


def process_addon(
    addon_id: str,
    src_dir: Path,
    out_dir: Path,
    *,
    libraries_src: Path,
    libraries_out: Path,
    is_new: bool = False,
) -> tuple[dict[str, Any], list[str]]:
    """
    Mirror one addon directory into ``out_dir``.

    ``addon.json`` is replaced by the generated manifest and runtime entries, scripts are
    rewritten, and every other file is copied unchanged. Returns the parsed manifest and
    the library paths the scripts imported.
    """

    manifest: dict[str, Any] | None = None
    libraries: list[str] = []
    for file in walk(src_dir):
        src = src_dir / file
        dst = out_dir / file
        dst.parent.mkdir(parents=True, exist_ok=True)

        if file == MANIFEST_FILE:
            manifest = json.loads(src.read_bytes().decode("utf-8"))
            _write_text(
                out_dir / MANIFEST_ENTRY_FILE,
                generate_manifest_entry(addon_id, manifest, is_new=is_new),
            )
            _write_text(out_dir / RUNTIME_ENTRY_FILE, generate_runtime_entry(manifest))
            continue

        if file.endswith(".js"):
            contents = src.read_bytes().decode("utf-8")
            libraries += copy_imported_libraries(
                contents, libraries_src=libraries_src, libraries_out=libraries_out
            )
            _write_text(dst, rewrite_script(contents, addon_dir=src_dir))
            continue

        shutil.copyfile(src, dst)

    if manifest is None:
        raise FileNotFoundError(src_dir / MANIFEST_FILE)
    return manifest, libraries


def process_addons(
    source_dir: Path, out_dir: Path, config: PullConfig
) -> tuple[dict[str, dict[str, Any]], list[str]]:
    manifests: dict[str, dict[str, Any]] = {}
    libraries: set[str] = set()
    for addon_id in config.addons:
        logger.debug("processing addon %s", addon_id)
        manifest, used = process_addon(
            addon_id,
            source_dir / "addons" / addon_id,
            out_dir / "addons" / addon_id,
            libraries_src=source_dir / "libraries",
            libraries_out=out_dir / "libraries",
            is_new=config.is_new(addon_id),
        )
        manifests[addon_id] = manifest
        libraries.update(used)
    return manifests, sorted(libraries)


def process_locales(l10n_src: Path, out_dir: Path, addons: Iterable[str]) -> list[str]:
    addons = list(addons)
    locales: list[str] = []
    for locale, locale_dir in list_locales(l10n_src):
        locales.append(locale)
        catalogs = parse_messages(locale_dir, addons)
        _write_text(out_dir / "addons-l10n" / f"{locale}.json", _compact_json(catalogs.runtime))
        if locale != DEFAULT_LOCALE:
            _write_text(
                out_dir / "addons-l10n-settings" / f"{locale}.json",
                _compact_json(catalogs.settings),
            )
    return locales


def write_entry_tables(
    out_dir: Path,
    *,
    addons: Iterable[str],
    manifests: Mapping[str, Mapping[str, Any]],
    locales: Iterable[str],
) -> None:
    addons = list(addons)
    locales = list(locales)
    generated = out_dir / "generated"
    _write_text(generated / L10N_ENTRIES_FILE, generate_l10n_entries(locales))
    _write_text(generated / L10N_SETTINGS_ENTRIES_FILE, generate_l10n_settings_entries(locales))
    _write_text(generated / ADDON_ENTRIES_FILE, generate_runtime_entries(addons, manifests))
    _write_text(generated / ADDON_MANIFESTS_FILE, generate_manifest_entries(addons))


def write_upstream_meta(out_dir: Path, commit: str) -> None:
    _write_text(out_dir / "generated" / UPSTREAM_META_FILE, _compact_json({"commit": commit}))


def _finish_translators(future: Future[list[dict[str, Any]]] | None, path: Path) -> bool:
    if future is None:
        return False
    try:
        translators = future.result()
    except Exception as e:  # noqa: BLE001
        logger.warning("could not fetch translators, %s not written: %s", path.name, e)
        return False
    write_translators(path, translators)
    logger.info("wrote %d translators", len(translators))
    return True


def run_pull(
    *,
    source_dir: Path,
    out_dir: Path,
    config: PullConfig,
    commit: str,
    fetch_translators: TranslatorsFetcher | None = None,
) -> PullResult:
    """
    Build the whole output tree from an upstream checkout.

    The translators document is fetched on a worker thread while addons are processed and
    is awaited before returning. A failed fetch is logged and leaves the file unwritten;
    any other error aborts the run. Nothing is deleted when ``out_dir`` overlaps the
    upstream folders of ``source_dir``.
    """

    if not (source_dir / "addons").is_dir():
        raise FileNotFoundError(source_dir / "addons")
    check_disjoint(source_dir, out_dir)

    prepare_output_dirs(out_dir)

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="translators") as pool:
        translators_future = pool.submit(fetch_translators) if fetch_translators else None

        manifests, libraries = process_addons(source_dir, out_dir, config)
        logger.info("processed %d addons, %d libraries", len(manifests), len(libraries))

        locales = process_locales(source_dir / "addons-l10n", out_dir, config.addons)
        logger.info("processed %d locales", len(locales))

        write_entry_tables(out_dir, addons=config.addons, manifests=manifests, locales=locales)
        write_upstream_meta(out_dir, commit)

        translators_written = _finish_translators(
            translators_future, out_dir / "generated" / TRANSLATORS_FILE
        )

    return PullResult(
        out_dir=out_dir,
        commit=commit,
        manifests=manifests,
        locales=locales,
        libraries=libraries,
        translators_written=translators_written,
    )
