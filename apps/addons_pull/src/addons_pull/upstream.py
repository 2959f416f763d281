from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    pass


def _run_git(args: list[str], *, cwd: Path | None = None) -> str:
    argv = ["git", *args] if cwd is None else ["git", "-C", str(cwd), *args]
    proc = subprocess.run(argv, capture_output=True, text=True, check=False)
    if proc.returncode != 0:
        msg = proc.stderr.strip() or proc.stdout.strip()
        if not msg:
            msg = f"git failed (exit {proc.returncode}): {' '.join(args)}"
        raise UpstreamError(msg)
    return proc.stdout.strip()


def clone_upstream(url: str, dest_dir: Path, *, ref: str | None = None) -> Path:
    """
    Replace ``dest_dir`` with a fresh shallow clone of ``url``.

    Any previous checkout is removed first so a stale tree is never reused.
    """

    if dest_dir.exists():
        shutil.rmtree(dest_dir)
    dest_dir.parent.mkdir(parents=True, exist_ok=True)

    args = ["clone", "--depth=1"]
    if ref is not None:
        args += ["--branch", ref]
    args += [url, str(dest_dir)]
    logger.info("cloning %s into %s", url, dest_dir)
    _run_git(args)
    return dest_dir


def short_commit(repo_dir: Path) -> str:
    return _run_git(["rev-parse", "--short", "HEAD"], cwd=repo_dir)
