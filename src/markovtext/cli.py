"""
Command-line interface for markovtext.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .configuration import build_configuration, parse_overrides
from .constants import DEFAULT_MODEL_PATH
from .errors import MarkovTextError
from .generation import generate_text
from .model import MarkovModel
from .models import GenerationConfiguration, ModelSummary
from .persistence import is_model_bytes, load_input, write_model
from .state_index import available_state_indexes


def _log(arguments: argparse.Namespace, message: str) -> None:
    if getattr(arguments, "quiet", False):
        return
    print(f"[markov] {message}", flush=True, file=sys.stderr)


def _read_input_bytes(raw_path: Optional[str]) -> bytes:
    """
    Read the raw input from a file or from standard input.

    :param raw_path: Input path, ``-`` or None for standard input.
    :type raw_path: str or None
    :return: Input bytes.
    :rtype: bytes
    :raises FileNotFoundError: If the input file does not exist.
    :raises MarkovTextError: If the input file exists but cannot be read.
    """
    if raw_path and raw_path != "-":
        path = Path(raw_path)
        if not path.is_file():
            raise FileNotFoundError(f"Input file not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            reason = exc.strerror or exc.__class__.__name__
            raise MarkovTextError(f"Cannot read input file {path}: {reason}") from exc
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is not None:
        return buffer.read()
    return sys.stdin.read().encode("utf-8")


def _resolve_configuration(arguments: argparse.Namespace) -> GenerationConfiguration:
    """
    Compose configuration files, key=value overrides and explicit flags.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Validated configuration.
    :rtype: GenerationConfiguration
    :raises ValueError: If the composed configuration is invalid.
    """
    overrides = parse_overrides(getattr(arguments, "override", None))
    for flag in ("output_size", "state_size", "state_index", "seed"):
        value = getattr(arguments, flag, None)
        if value is not None:
            overrides[flag] = value
    return build_configuration(getattr(arguments, "configuration", None), overrides)


def _load_model(
    arguments: argparse.Namespace, configuration: GenerationConfiguration
) -> MarkovModel:
    data = _read_input_bytes(getattr(arguments, "input", None))
    if is_model_bytes(data):
        _log(arguments, f"loading saved model ({len(data)} bytes)")
    else:
        _log(arguments, f"training from text with state size {configuration.state_size}")
    model = load_input(
        data,
        state_size=configuration.state_size,
        state_index=configuration.state_index,
        random_source=configuration.seed,
    )
    _log(
        arguments,
        f"model ready: {len(model.states)} states, {model.matrix.nnz} stored transitions",
    )
    return model


def cmd_generate(arguments: argparse.Namespace) -> int:
    """
    Generate text from a training corpus or a saved model.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    configuration = _resolve_configuration(arguments)
    model = _load_model(arguments, configuration)
    text = generate_text(
        model,
        configuration.output_size,
        initial_phrase=arguments.initial_phrase,
    )
    print(text)
    return 0


def cmd_save(arguments: argparse.Namespace) -> int:
    """
    Train or load a model and write it to a model file.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    configuration = _resolve_configuration(arguments)
    model = _load_model(arguments, configuration)
    path = write_model(model, Path(arguments.output))
    _log(arguments, f"saved model to {path}")
    return 0


def cmd_inspect(arguments: argparse.Namespace) -> int:
    """
    Print a summary of a trained or saved model.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    configuration = _resolve_configuration(arguments)
    model = _load_model(arguments, configuration)
    print(ModelSummary.from_model(model).model_dump_json(indent=2))
    return 0


def _add_common_model_args(parser: argparse.ArgumentParser) -> None:
    """
    Add the arguments shared by every model-loading subcommand.

    :param parser: Argument parser to modify.
    :type parser: argparse.ArgumentParser
    :return: None.
    :rtype: None
    """
    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help=(
            "Text file to learn from, or a previously saved model file "
            "(reads standard input when omitted or '-')."
        ),
    )
    parser.add_argument(
        "-t",
        "--state-size",
        type=int,
        default=None,
        dest="state_size",
        help="Number of tokens per state (default: 2). Ignored when loading a saved model.",
    )
    parser.add_argument(
        "--state-index",
        choices=sorted(available_state_indexes()),
        default=None,
        dest="state_index",
        help="State index backend (default: hash).",
    )
    parser.add_argument(
        "--configuration",
        action="append",
        default=None,
        help="Path to a YAML configuration file (repeatable, later files win).",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=None,
        help="Configuration override as key=value (repeatable).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress messages on standard error.",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command-line interface argument parser.

    :return: Argument parser instance.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="markovtext",
        description="Train word-level Markov chains and generate text from them.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_generate = sub.add_parser("generate", help="Generate text from a corpus or saved model.")
    _add_common_model_args(p_generate)
    p_generate.add_argument(
        "initial_phrase",
        nargs="?",
        default=None,
        help="Optional phrase that starts the generated text.",
    )
    p_generate.add_argument(
        "-s",
        "--output-size",
        type=int,
        default=None,
        dest="output_size",
        help="Number of tokens to generate (default: 200).",
    )
    p_generate.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible output.",
    )
    p_generate.set_defaults(func=cmd_generate)

    p_save = sub.add_parser("save", help="Save a trained model to a binary file.")
    _add_common_model_args(p_save)
    p_save.add_argument(
        "--output",
        default=DEFAULT_MODEL_PATH,
        help=f"Destination model file (default: {DEFAULT_MODEL_PATH}).",
    )
    p_save.set_defaults(func=cmd_save)

    p_inspect = sub.add_parser("inspect", help="Summarize a trained or saved model as JSON.")
    _add_common_model_args(p_inspect)
    p_inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argument_list: Optional[List[str]] = None) -> int:
    """
    Entry point for the markovtext command-line interface.

    :param argument_list: Optional command-line interface arguments.
    :type argument_list: list[str] or None
    :return: Exit code.
    :rtype: int
    """
    parser = build_parser()
    arguments = parser.parse_args(argument_list)
    try:
        return int(arguments.func(arguments))
    except (
        KeyError,
        ValueError,
        MarkovTextError,
        ValidationError,
    ) as exception:
        message = exception.args[0] if getattr(exception, "args", None) else str(exception)
        print(str(message), file=sys.stderr)
        return 2
    except OSError as exception:
        print(str(exception), file=sys.stderr)
        return 2
