"""
Command-line interface for restbind.

``restbind generate`` runs the generator over a serialized
``FileDescriptorSet`` (as written by ``protoc --include_imports
--include_source_info --descriptor_set_out=...``) without going through the
protoc plugin protocol.  ``restbind version`` prints the package version.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

from .. import __version__
from ..codegen.generator import PLUGIN_NAME, FileGenerator
from ..codegen.printer import GeneratedFile
from ..config import GeneratorConfig, build_config, load_config_file
from ..descriptors.adapter import DescriptorAdapter
from ..errors import RestBindError
from ..logconfig import configure_logging
from .errors import (
    CLIError,
    CLIFileNotFoundError,
    CLIInputError,
    CLIOutputError,
    handle_cli_exception,
)

logger = logging.getLogger(__name__)

LOG_LEVEL_CHOICES = ["debug", "info", "warn", "warning", "error"]


def load_descriptor_set(path: Path) -> descriptor_pb2.FileDescriptorSet:
    if not path.is_file():
        raise CLIFileNotFoundError(
            f"Descriptor set not found: {path}",
            hint="Create one with protoc --include_imports --include_source_info "
            "--descriptor_set_out=FILE.",
        )
    try:
        return descriptor_pb2.FileDescriptorSet.FromString(path.read_bytes())
    except DecodeError as exc:
        raise CLIInputError(
            f"{path} is not a serialized FileDescriptorSet",
            context={"error": str(exc)},
        ) from exc


def resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    values: Dict[str, Any] = {}
    if args.config:
        values.update(load_config_file(Path(args.config)))
    if args.legacy_streams:
        values["use_generic_streams"] = False
    if args.transport_module:
        values["transport_module"] = args.transport_module
    return build_config(values)


def select_files(
    descriptor_set: descriptor_pb2.FileDescriptorSet, requested: Optional[Sequence[str]]
) -> List[str]:
    """Names of the files to generate; by default every file declaring services."""
    available = [f.name for f in descriptor_set.file]
    if not requested:
        return [f.name for f in descriptor_set.file if f.service]
    missing = [name for name in requested if name not in available]
    if missing:
        raise CLIInputError(
            f"Not in the descriptor set: {', '.join(missing)}",
            hint="Use the file name as passed to protoc, relative to its import path.",
        )
    return list(requested)


def write_outputs(out_dir: Path, outputs: Sequence[GeneratedFile]) -> List[Path]:
    """Write every output or none of them.

    All contents are rendered before the first write; files already written
    are removed again when a later write fails.
    """
    rendered = [(out_dir / generated.filename, generated.content()) for generated in outputs]
    written: List[Path] = []
    for target, content in rendered:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            for path in written:
                path.unlink(missing_ok=True)
            logger.debug("Removed %d files after failed write of %s", len(written), target)
            raise CLIOutputError(f"Could not write {target}: {exc}") from exc
        written.append(target)
    return written


def cmd_generate(args: argparse.Namespace) -> None:
    try:
        descriptor_set = load_descriptor_set(Path(args.descriptor_set))
        config = resolve_config(args)
        names = select_files(descriptor_set, args.file)
        adapter = DescriptorAdapter(descriptor_set.file)
        generator = FileGenerator(config)
        outputs = []
        for name in names:
            generated = generator.generate(adapter.adapt(name))
            if generated is not None:
                outputs.append(generated)
        written = write_outputs(Path(args.out), outputs)
    except (CLIError, RestBindError) as exc:
        handle_cli_exception(exc)
        return
    for path in written:
        print(path)
    logger.info("Wrote %d files to %s", len(written), args.out)


def cmd_version(args: argparse.Namespace) -> None:
    print(f"{PLUGIN_NAME} {__version__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restbind",
        description="Generate REST client and server bindings from protobuf descriptors",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        default=None,
        help="Logging level (or set RESTBIND_LOG_LEVEL)",
    )
    # Also accepted after the subcommand; SUPPRESS keeps the top-level value.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        default=argparse.SUPPRESS,
        help="Logging level (or set RESTBIND_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate *_pb2_rest.py modules from a descriptor set",
        parents=[common],
    )
    generate_parser.add_argument("descriptor_set", help="Serialized FileDescriptorSet")
    generate_parser.add_argument(
        "--out", "-o", default=".", help="Output directory for generated modules"
    )
    generate_parser.add_argument(
        "--file",
        action="append",
        default=None,
        help="Generate only this .proto file (repeatable)",
    )
    generate_parser.add_argument(
        "--legacy-streams",
        action="store_true",
        help="Emit named stream wrapper types instead of the generic stream interfaces",
    )
    generate_parser.add_argument(
        "--transport-module",
        default=None,
        help="Module the generated code imports as 'rest'",
    )
    generate_parser.add_argument(
        "--config", default=None, help="restbind.toml or pyproject.toml with [tool.restbind]"
    )
    generate_parser.set_defaults(func=cmd_generate)

    version_parser = subparsers.add_parser(
        "version", help="Print the generator version", parents=[common]
    )
    version_parser.set_defaults(func=cmd_version)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)
    configure_logging(args.log_level)
    args.func(args)


__all__ = ["main", "build_parser", "load_descriptor_set", "select_files"]
