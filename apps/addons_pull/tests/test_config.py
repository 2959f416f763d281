from __future__ import annotations

from pathlib import Path

import pytest

from addons_pull.config import ConfigError, load_config, parse_config


def _valid() -> dict[str, object]:
    return {
        "version": 1,
        "upstream_url": "https://example.test/addons.git",
        "contributors_url": "https://example.test/contributors.json",
        "addons": ["alpha", "beta-addon"],
        "new_addons": ["beta-addon"],
    }


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "addons.yaml"
    path.write_text(
        "\n".join(
            [
                "version: 1",
                "upstream_url: https://example.test/addons.git",
                "contributors_url: https://example.test/contributors.json",
                "addons:",
                "  - alpha",
                "  - beta-addon",
                "new_addons:",
                "  - beta-addon",
                "",
            ]
        ),
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.addons == ("alpha", "beta-addon")
    assert cfg.is_new("beta-addon")
    assert not cfg.is_new("alpha")
    assert cfg.source_path == path


def test_new_addons_is_optional() -> None:
    data = _valid()
    del data["new_addons"]
    assert parse_config(data).new_addons == frozenset()


def test_parse_config_reports_every_problem() -> None:
    data = _valid()
    data["addons"] = ["alpha", "alpha", "bad id"]
    data["extra"] = True
    del data["upstream_url"]

    with pytest.raises(ConfigError) as excinfo:
        parse_config(data)

    problems = excinfo.value.problems
    assert any(p.startswith("$.addons:") for p in problems)
    assert any(p.startswith("$.addons[2]:") for p in problems)
    assert any("upstream_url" in p for p in problems)
    assert any("extra" in p for p in problems)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Failed to read"):
        load_config(tmp_path / "nope.yaml")


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "addons.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Expected a YAML mapping"):
        load_config(path)


def test_load_config_rejects_bad_yaml(tmp_path: Path) -> None:
    path = tmp_path / "addons.yaml"
    path.write_text("addons: [unterminated\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse YAML"):
        load_config(path)


def test_repo_config_is_valid() -> None:
    path = Path(__file__).resolve().parents[3] / "configs" / "addons.yaml"
    cfg = load_config(path)
    assert "mediarecorder" in cfg.addons
    assert cfg.new_addons <= set(cfg.addons)
