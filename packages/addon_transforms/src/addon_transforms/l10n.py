from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

SKIP_MESSAGES: frozenset[str] = frozenset(
    {
        "debugger/feedback-log",
        "debugger/feedback-log-link",
        "debugger/feedback-remove",
        "editor-devtools/help-by",
        "editor-devtools/extension-description-not-for-addon",
        "mediarecorder/added-by",
        "editor-theme3/@settings-name-sa-color",
        "block-switching/@settings-name-sa",
    }
)

SETTINGS_MARKER = "/@"

# Upstream folder name -> name used for every output file and entry key.
LOCALE_RENAMES: dict[str, str] = {"pt-br": "pt"}


@dataclass(frozen=True)
class MessageCatalogs:
    runtime: dict[str, str] = field(default_factory=dict)
    settings: dict[str, str] = field(default_factory=dict)


def partition_messages(
    messages: Mapping[str, str],
    *,
    runtime: dict[str, str] | None = None,
    settings: dict[str, str] | None = None,
) -> MessageCatalogs:
    """
    Split one addon's catalog into runtime and settings groups.

    Ids are visited in sorted order. Ids on ``SKIP_MESSAGES`` are dropped, ids containing
    ``SETTINGS_MARKER`` go to ``settings``, everything else to ``runtime``. Passing existing
    dicts accumulates into them; an id already present is overwritten.
    """

    runtime = {} if runtime is None else runtime
    settings = {} if settings is None else settings
    for message_id in sorted(messages):
        if message_id in SKIP_MESSAGES:
            continue
        if SETTINGS_MARKER in message_id:
            settings[message_id] = messages[message_id]
        else:
            runtime[message_id] = messages[message_id]
    return MessageCatalogs(runtime=runtime, settings=settings)


def _read_catalog(path: Path) -> dict[str, str] | None:
    try:
        parsed = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("skipping %s: %s", path, e)
        return None
    if not isinstance(parsed, dict):
        logger.debug("skipping %s: expected a JSON object", path)
        return None
    return parsed


def parse_messages(locale_dir: Path, addons: Iterable[str]) -> MessageCatalogs:
    """
    Merge the catalogs of every addon for one locale.

    Addons without a translation (missing or unreadable file) are skipped. Ids are not
    namespaced per addon here; on a collision the addon later in ``addons`` wins.
    """

    runtime: dict[str, str] = {}
    settings: dict[str, str] = {}
    for addon in addons:
        messages = _read_catalog(locale_dir / f"{addon}.json")
        if messages is None:
            continue
        partition_messages(messages, runtime=runtime, settings=settings)
    return MessageCatalogs(runtime=runtime, settings=settings)


def normalize_locale(name: str) -> str:
    return LOCALE_RENAMES.get(name, name)


def list_locales(l10n_dir: Path) -> list[tuple[str, Path]]:
    """
    Return ``(output locale, folder)`` pairs sorted by output locale.

    Each output locale appears once. When a renamed folder and a folder already carrying
    the target name both exist (``pt-br`` and ``pt``), the renamed folder is used.
    """

    by_locale: dict[str, Path] = {}
    for child in sorted(l10n_dir.iterdir(), key=lambda p: p.name):
        # Plain files (the upstream README) are not locales.
        if not child.is_dir():
            continue
        locale = normalize_locale(child.name)
        existing = by_locale.get(locale)
        if existing is not None:
            if existing.name in LOCALE_RENAMES:
                logger.warning("ignoring %s: %s also maps to %s", child.name, existing.name, locale)
                continue
            logger.warning("ignoring %s: %s also maps to %s", existing.name, child.name, locale)
        by_locale[locale] = child
    return sorted(by_locale.items())
