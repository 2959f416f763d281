#!/usr/bin/env python
from __future__ import annotations

import argparse
import functools
import logging
import sys
from pathlib import Path

from addons_pull.config import ConfigError, PullConfig, load_config
from addons_pull.contributors import fetch_translators, write_translators
from addons_pull.pipeline import TRANSLATORS_FILE, check_disjoint, run_pull
from addons_pull.upstream import clone_upstream, short_commit

DEFAULT_CONFIG_PATH = Path("configs") / "addons.yaml"
DEFAULT_SOURCE_DIRNAME = "upstream"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_config_or_exit(path: Path) -> PullConfig:
    try:
        return load_config(path)
    except ConfigError as e:
        raise SystemExit(str(e)) from e


def _cmd_pull(args: argparse.Namespace) -> int:
    cfg = _load_config_or_exit(args.config)
    out_dir = args.out.resolve()
    source_dir = (args.source or (out_dir / DEFAULT_SOURCE_DIRNAME)).resolve()
    try:
        check_disjoint(source_dir, out_dir)
    except ValueError as e:
        raise SystemExit(str(e)) from e

    if not args.no_clone:
        clone_upstream(cfg.upstream_url, source_dir, ref=args.ref)
    commit = short_commit(source_dir)

    fetcher = None
    if not args.skip_translators:
        fetcher = functools.partial(fetch_translators, cfg.contributors_url, timeout=args.timeout)

    result = run_pull(
        source_dir=source_dir,
        out_dir=out_dir,
        config=cfg,
        commit=commit,
        fetch_translators=fetcher,
    )
    print(
        f"OK: {len(result.manifests)} addons, {len(result.locales)} locales, "
        f"{len(result.libraries)} libraries from {result.commit} -> {result.out_dir}"
    )
    if fetcher is not None and not result.translators_written:
        print(f"WARN: {TRANSLATORS_FILE} was not written", file=sys.stderr)
    return 0


def _cmd_translators(args: argparse.Namespace) -> int:
    cfg = _load_config_or_exit(args.config)
    translators = fetch_translators(cfg.contributors_url, timeout=args.timeout)
    write_translators(args.out, translators)
    print(f"OK: wrote {len(translators)} translators to {args.out}")
    return 0


def _add_common_args(parser: argparse.ArgumentParser, *, with_defaults: bool) -> None:
    # Subcommands repeat these with suppressed defaults so they never mask a value given
    # before the subcommand name.
    def default(value: object) -> object:
        return value if with_defaults else argparse.SUPPRESS

    parser.add_argument(
        "--config", type=Path, default=default(DEFAULT_CONFIG_PATH), help="Addon list YAML."
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", default=default(False), help="Enable debug logging."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=default(30.0),
        help="Timeout in seconds for the contributors request.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="addons-pull",
        description="Mirror the upstream addon repository into a bundler-ready tree.",
    )
    _add_common_args(parser, with_defaults=True)

    sub = parser.add_subparsers(dest="cmd", required=True)

    pull_p = sub.add_parser("pull", help="Clone upstream and regenerate the output tree.")
    _add_common_args(pull_p, with_defaults=False)
    pull_p.add_argument("--out", type=Path, default=Path("."), help="Output root directory.")
    pull_p.add_argument(
        "--source",
        type=Path,
        help=f"Upstream checkout directory (default: <out>/{DEFAULT_SOURCE_DIRNAME}).",
    )
    pull_p.add_argument(
        "--no-clone",
        action="store_true",
        help="Reuse the existing upstream checkout instead of cloning again.",
    )
    pull_p.add_argument("--ref", help="Optional branch or tag to clone.")
    pull_p.add_argument(
        "--skip-translators",
        action="store_true",
        help="Do not fetch the contributors document.",
    )
    pull_p.set_defaults(func=_cmd_pull)

    tr_p = sub.add_parser("translators", help="Only fetch the translators document.")
    _add_common_args(tr_p, with_defaults=False)
    tr_p.add_argument(
        "--out",
        type=Path,
        default=Path("generated") / TRANSLATORS_FILE,
        help="Where to write the translators JSON.",
    )
    tr_p.set_defaults(func=_cmd_translators)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
