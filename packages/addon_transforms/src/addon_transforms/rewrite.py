from __future__ import annotations

import json
import logging
import re
import shutil
from pathlib import Path

from addon_transforms.walk import walk

logger = logging.getLogger(__name__)

# Matches the two import shapes addon sources use for shared libraries:
#   import { normalizeHex, getHexRegex } from "../../libraries/normalize-color.js";
#   import RateLimiter from "../../libraries/rate-limiter.js";
# Group 1 is the path below libraries/, optionally nested and optionally `.esm.js`.
_LIBRARY_IMPORT_RE = re.compile(
    r"""import +(?:{.*}|.*) +from +["']\.\./\.\./libraries/([\w/-]+(?:\.esm)?\.js)["'];"""
)

POLYFILL_TOKEN = "EventTarget"
POLYFILL_IMPORT = 'import EventTarget from "../../event-target.js"; /* inserted by pull */'

ADDON_PATH_TOKENS: tuple[str, ...] = ("addon.self.dir", "addon.self.lib")
ASSET_EXTENSIONS: tuple[str, ...] = (".svg", ".png")

# `${addon.self.dir + "/" + name + ".svg"}` inside a template literal.
_TEMPLATE_ASSET_RE = re.compile(r"\$\{addon\.self\.(?:dir|lib) *\+ *([^;\n]+)\}")
# el.src = addon.self.dir + "/" + name + ".svg";
#          ^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^  match
#                           ^^^^^^^^^^^^^^^^^^^  group 1
_CONCAT_ASSET_RE = re.compile(r"addon\.self\.(?:dir|lib) *\+ *([^;,\n]+)")

ASSET_RESOLVER = "_twGetAsset"


def find_library_imports(contents: str) -> list[str]:
    return [match.group(1) for match in _LIBRARY_IMPORT_RE.finditer(contents)]


def copy_imported_libraries(contents: str, *, libraries_src: Path, libraries_out: Path) -> list[str]:
    """
    Copy every library a script imports into the shared output library dir.

    The script text is not modified. Copying the same library twice overwrites it with
    identical bytes, so repeated references and repeated runs are harmless.
    """

    copied: list[str] = []
    for library in find_library_imports(contents):
        src = libraries_src / library
        dst = libraries_out / library
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)
        logger.debug("copied library %s", library)
        copied.append(library)
    return copied


def include_polyfills(contents: str) -> str:
    if POLYFILL_TOKEN in contents:
        return f"{POLYFILL_IMPORT}\n\n{contents}"
    return contents


def uses_addon_paths(contents: str) -> bool:
    return any(token in contents for token in ADDON_PATH_TOKENS)


def find_assets(addon_dir: Path) -> list[str]:
    return [file for file in walk(addon_dir) if file.endswith(ASSET_EXTENSIONS)]


def _stringify_path(path: str) -> str:
    return json.dumps(path, ensure_ascii=False).replace("\\\\", "/")


def build_asset_header(assets: list[str]) -> str:
    lines = ["/* inserted by pull */"]
    for index, file in enumerate(assets):
        lines.append(f"import _twAsset{index} from {_stringify_path(f'!url-loader!./{file}')};")
    lines.append(f"const {ASSET_RESOLVER} = (path) => {{")
    for index, file in enumerate(assets):
        lines.append(f"  if (path === {_stringify_path(f'/{file}')}) return _twAsset{index};")
    lines.append("  throw new Error(`Unknown asset: ${path}`);")
    lines.append("};")
    lines.append("")
    return "\n".join(lines) + "\n"


def rewrite_asset_paths(contents: str) -> str:
    contents = _TEMPLATE_ASSET_RE.sub(lambda m: f"${{{ASSET_RESOLVER}({m.group(1)})}}", contents)
    return _CONCAT_ASSET_RE.sub(lambda m: f"{ASSET_RESOLVER}({m.group(1)})", contents)


def include_asset_imports(addon_dir: Path, contents: str) -> str:
    return build_asset_header(find_assets(addon_dir)) + rewrite_asset_paths(contents)


def rewrite_script(contents: str, *, addon_dir: Path) -> str:
    contents = include_polyfills(contents)
    if uses_addon_paths(contents):
        contents = include_asset_imports(addon_dir, contents)
    return contents
