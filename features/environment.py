from __future__ import annotations

import contextlib
import io
import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from markovtext.cli import main as markovtext_main


def before_scenario(context, scenario) -> None:
    """
    Give each scenario its own working directory.

    :param context: Behave context object.
    :type context: object
    :param scenario: Behave scenario.
    :type scenario: object
    :return: None.
    :rtype: None
    """
    context._tmp = tempfile.TemporaryDirectory(prefix="markovtext-bdd-")
    context.workdir = Path(context._tmp.name)
    context.last_result = None


def after_scenario(context, scenario) -> None:
    if hasattr(context, "_tmp"):
        context._tmp.cleanup()


@dataclass
class RunResult:
    """
    Captured command-line interface execution result.

    :ivar returncode: Exit code returned by the command.
    :vartype returncode: int
    :ivar stdout: Captured standard output.
    :vartype stdout: str
    :ivar stderr: Captured standard error.
    :vartype stderr: str
    """

    returncode: int
    stdout: str
    stderr: str


def run_markovtext(
    context, args: Sequence[str], *, input_text: Optional[str] = None
) -> RunResult:
    """
    Run the markovtext command line in-process, inside the scenario working directory.

    :param context: Behave context object.
    :type context: object
    :param args: Command-line interface argument list.
    :type args: Sequence[str]
    :param input_text: Optional standard input content.
    :type input_text: str or None
    :return: Captured execution result, also stored as ``context.last_result``.
    :rtype: RunResult
    """
    out = io.StringIO()
    err = io.StringIO()
    prev_cwd = os.getcwd()
    prev_stdin = sys.stdin
    try:
        os.chdir(str(context.workdir))
        if input_text is not None:
            sys.stdin = io.StringIO(input_text)
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                code = markovtext_main(list(args))
            except SystemExit as exc:
                code = exc.code if isinstance(exc.code, int) else 1
    finally:
        os.chdir(prev_cwd)
        sys.stdin = prev_stdin

    context.last_result = RunResult(returncode=code, stdout=out.getvalue(), stderr=err.getvalue())
    return context.last_result
