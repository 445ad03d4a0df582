"""
Unit test and behavior spec runner for markovtext, under coverage.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path


def _repo_root() -> Path:
    """
    Resolve the repository root directory.

    :return: Repository root path.
    :rtype: Path
    """

    return Path(__file__).resolve().parent.parent


def _env_with_src() -> dict[str, str]:
    """
    Build an environment with src/ and the repository root on PYTHONPATH.

    The repository root is needed so behave steps can import ``features.environment``.

    :return: Environment mapping.
    :rtype: dict[str, str]
    """

    repo_root = _repo_root()
    env = dict(os.environ)
    paths = [str(repo_root / "src"), str(repo_root)]
    if env.get("PYTHONPATH"):
        paths.append(env["PYTHONPATH"])
    env["PYTHONPATH"] = os.pathsep.join(paths)
    return env


def _run(command: list[str], *, env: dict[str, str]) -> int:
    return subprocess.call(command, env=env, cwd=str(_repo_root()))


def main() -> int:
    """
    Run pytest and behave under coverage and emit Hypertext Markup Language reports.

    :return: Exit code.
    :rtype: int
    """

    parser = argparse.ArgumentParser(description="Run markovtext tests under coverage.")
    parser.add_argument(
        "--specs-only",
        action="store_true",
        help="Run only the behave specs, skipping the pytest unit tests.",
    )
    args = parser.parse_args()

    repo_root = _repo_root()
    env = _env_with_src()
    htmlcov_dir = repo_root / "reports" / "htmlcov"

    _run([sys.executable, "-m", "coverage", "erase"], env=env)

    unit_rc = 0
    if not args.specs_only:
        unit_rc = _run([sys.executable, "-m", "coverage", "run", "-a", "-m", "pytest"], env=env)
    spec_rc = _run([sys.executable, "-m", "coverage", "run", "-a", "-m", "behave"], env=env)
    _run([sys.executable, "-m", "coverage", "report", "-m"], env=env)
    _run([sys.executable, "-m", "coverage", "html", "-d", str(htmlcov_dir)], env=env)

    print(f"Coverage report in Hypertext Markup Language: {htmlcov_dir / 'index.html'}")
    return int(unit_rc or spec_rc)


if __name__ == "__main__":
    raise SystemExit(main())
