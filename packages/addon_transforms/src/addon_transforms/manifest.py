from __future__ import annotations

import copy
import json
from collections.abc import Iterable
from typing import Any

KEEP_TAGS: tuple[str, ...] = ("recommended", "theme", "beta", "danger")
NEW_TAG = "new"

# Fields the bundled client never reads.
PRIVATE_FIELDS: tuple[str, ...] = (
    "versionAdded",
    "libraries",
    "injectAsStyleElt",
    "enabledByDefaultMobile",
    "permissions",
)
PRIVATE_USERSCRIPT_FIELDS: tuple[str, ...] = ("matches", "runAtComplete")
PRIVATE_USERSTYLE_FIELDS: tuple[str, ...] = ("matches",)

ENVIRONMENT_MODULE = "../../environment"
CLIPBOARD_PERMISSION = "clipboardWrite"
MEDIA_RECORDER_ADDON = "mediarecorder"

GENERATED_BANNER = "/* generated by pull */"


def filter_tags(tags: Iterable[str], *, is_new: bool = False) -> list[str]:
    """Keep only allow-listed tags, in their original order, then mark new addons."""

    out = [tag for tag in tags if tag in KEEP_TAGS]
    if is_new:
        out.append(NEW_TAG)
    return out


def trim_manifest(manifest: dict[str, Any], *, is_new: bool = False) -> dict[str, Any]:
    """
    Return the public subset of an addon manifest.

    The input is deep-copied and left untouched.
    """

    trimmed = copy.deepcopy(manifest)
    trimmed["tags"] = filter_tags(manifest.get("tags") or [], is_new=is_new)
    for key in PRIVATE_FIELDS:
        trimmed.pop(key, None)
    for userscript in trimmed.get("userscripts") or []:
        for key in PRIVATE_USERSCRIPT_FIELDS:
            userscript.pop(key, None)
    for userstyle in trimmed.get("userstyles") or []:
        for key in PRIVATE_USERSTYLE_FIELDS:
            userstyle.pop(key, None)
    return trimmed


def _js_bool(value: bool) -> str:
    return "true" if value else "false"


def generate_manifest_entry(addon_id: str, manifest: dict[str, Any], *, is_new: bool = False) -> str:
    trimmed = trim_manifest(manifest, is_new=is_new)
    lines = [
        GENERATED_BANNER,
        f"const manifest = {json.dumps(trimmed, indent=2, ensure_ascii=False)};",
    ]

    mobile = manifest.get("enabledByDefaultMobile")
    if isinstance(mobile, bool):
        lines.append(f'import {{isMobile}} from "{ENVIRONMENT_MODULE}";')
        lines.append(f"if (isMobile) manifest.enabledByDefault = {_js_bool(mobile)};")

    permissions = manifest.get("permissions") or []
    if CLIPBOARD_PERMISSION in permissions:
        lines.append(f'import {{clipboardSupported}} from "{ENVIRONMENT_MODULE}";')
        lines.append("if (!clipboardSupported) manifest.unsupported = true;")

    if addon_id == MEDIA_RECORDER_ADDON:
        lines.append(f'import {{mediaRecorderSupported}} from "{ENVIRONMENT_MODULE}";')
        lines.append("if (!mediaRecorderSupported) manifest.unsupported = true;")

    lines.append("export default manifest;")
    return "\n".join(lines) + "\n"


def generate_runtime_entry(manifest: dict[str, Any]) -> str:
    lines = [GENERATED_BANNER, "export const resources = {"]
    for userscript in manifest.get("userscripts") or []:
        url = userscript["url"]
        lines.append(f"  {json.dumps(url)}: () => require({json.dumps(f'./{url}')}),")
    for userstyle in manifest.get("userstyles") or []:
        url = userstyle["url"]
        lines.append(f"  {json.dumps(url)}: () => require({json.dumps(f'!css-loader!./{url}')}),")
    lines.append("};")
    return "\n".join(lines) + "\n"
