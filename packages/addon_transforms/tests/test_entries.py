from __future__ import annotations

import pytest

from addon_transforms.entries import (
    EAGER_IMPORT,
    LAZY_IMPORT,
    LAZY_REQUIRE,
    EntrySpec,
    EntryTypeError,
    classify_addon,
    generate_entries,
    generate_l10n_entries,
    generate_l10n_settings_entries,
    generate_manifest_entries,
    generate_runtime_entries,
)


def test_generate_entries_mixed_types() -> None:
    specs = {
        "a": EntrySpec(src="./a.js", type=EAGER_IMPORT),
        "b": EntrySpec(src="./b.js", type=LAZY_IMPORT, name="chunk-b"),
        "c": EntrySpec(src="./c.js", type=LAZY_REQUIRE),
        "d": EntrySpec(src="./d.js", type=EAGER_IMPORT),
    }

    out = generate_entries(["a", "b", "c", "d"], specs.__getitem__)

    assert out.splitlines() == [
        "/* generated by pull */",
        'import _import0 from "./a.js";',
        'import _import1 from "./d.js";',
        "export default {",
        '  "a": _import0,',
        '  "b": () => import(/* webpackChunkName: "chunk-b" */ "./b.js"),',
        '  "c": () => require("./c.js"),',
        '  "d": _import1,',
        "};",
    ]


def test_generate_entries_unknown_type_raises() -> None:
    with pytest.raises(EntryTypeError, match="Unknown type: lazy-magic"):
        generate_entries(["x"], lambda _: EntrySpec(src="./x.js", type="lazy-magic"))


def test_generate_entries_lazy_import_without_chunk_name() -> None:
    out = generate_entries(["x"], lambda _: EntrySpec(src="./x.js", type=LAZY_IMPORT))

    assert '  "x": () => import("./x.js"),' in out
    assert "webpackChunkName" not in out


def test_generate_entries_empty() -> None:
    assert generate_entries([], lambda _: EntrySpec(src="", type=EAGER_IMPORT)) == (
        "/* generated by pull */\nexport default {\n};\n"
    )


def test_generate_l10n_entries_excludes_default_locale() -> None:
    out = generate_l10n_entries(["en", "fr"])

    assert '"en"' not in out
    assert "import _import" not in out
    assert out.count("() => import(") == 1
    assert (
        '  "fr": () => import(/* webpackChunkName: "addon-l10n-fr" */ "../addons-l10n/fr.json"),'
        in out.splitlines()
    )


def test_generate_l10n_settings_entries() -> None:
    out = generate_l10n_settings_entries(["de", "en", "pt"])

    assert out.splitlines()[1:] == [
        "export default {",
        '  "de": () => require("../addons-l10n-settings/de.json"),',
        '  "pt": () => require("../addons-l10n-settings/pt.json"),',
        "};",
    ]


def test_classify_addon_strategies() -> None:
    main = classify_addon("main", {"enabledByDefault": True})
    editor = classify_addon("editor", {"enabledByDefault": True, "editorOnly": True})
    optional = classify_addon("optional", {"enabledByDefault": False, "editorOnly": True})

    assert main == EntrySpec(src="../addons/main/_runtime_entry.js", type=LAZY_REQUIRE)
    assert editor == EntrySpec(
        src="../addons/editor/_runtime_entry.js", type=LAZY_IMPORT, name="addon-default-entry"
    )
    assert optional == EntrySpec(
        src="../addons/optional/_runtime_entry.js", type=LAZY_IMPORT, name="addon-entry-optional"
    )


def test_generate_runtime_entries_uses_manifest_map() -> None:
    manifests = {
        "main": {"enabledByDefault": True},
        "editor-a": {"enabledByDefault": True, "editorOnly": True},
        "editor-b": {"enabledByDefault": True, "editorOnly": True},
        "optional": {},
    }

    lines = generate_runtime_entries(["main", "editor-a", "editor-b", "optional"], manifests).splitlines()

    assert lines[2] == '  "main": () => require("../addons/main/_runtime_entry.js"),'
    assert lines[3] == (
        '  "editor-a": () => import(/* webpackChunkName: "addon-default-entry" */ '
        '"../addons/editor-a/_runtime_entry.js"),'
    )
    assert 'webpackChunkName: "addon-default-entry" */ "../addons/editor-b' in lines[4]
    assert 'webpackChunkName: "addon-entry-optional"' in lines[5]


def test_generate_manifest_entries_are_eager() -> None:
    out = generate_manifest_entries(["one", "two"])

    assert out.splitlines() == [
        "/* generated by pull */",
        'import _import0 from "../addons/one/_manifest_entry.js";',
        'import _import1 from "../addons/two/_manifest_entry.js";',
        "export default {",
        '  "one": _import0,',
        '  "two": _import1,',
        "};",
    ]
