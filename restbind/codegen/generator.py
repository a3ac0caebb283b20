"""One ``.proto`` file in, one ``*_pb2_rest.py`` module out."""

from __future__ import annotations

import logging
from typing import List, Optional

from .. import __version__
from ..config import GeneratorConfig
from ..descriptors.model import Comments, ProtoFile, Service
from . import naming
from .client import ClientBindingGenerator
from .printer import Declaration, DeclKind, GeneratedFile, comment_lines
from .server import ServerBindingGenerator

logger = logging.getLogger(__name__)

PLUGIN_NAME = "protoc-gen-python_rest"


def _leading_comment_lines(comments: Comments) -> List[str]:
    lines: List[str] = []
    for detached in comments.leading_detached:
        lines.extend(comment_lines(detached))
        lines.append("")
    lines.extend(comment_lines(comments.leading))
    return lines


def transport_import(module: str) -> str:
    package, _, name = module.rpartition(".")
    if package:
        return f"from {package} import {name} as rest"
    return f"import {module} as rest"


def pb2_import(proto_file: str) -> str:
    module = naming.pb2_module_name(proto_file)
    alias = naming.pb2_module_alias(proto_file)
    package, _, name = module.rpartition(".")
    if package:
        return f"from {package} import {name} as {alias}"
    return f"import {name} as {alias}"


def referenced_files(proto_file: ProtoFile) -> List[str]:
    """Files defining the request and response types used by the services."""
    files = set()
    for service in proto_file.services:
        for method in service.methods:
            files.add(method.input.proto_file)
            files.add(method.output.proto_file)
    return sorted(files)


class FileGenerator:
    """Generates the bindings module of a single ``.proto`` file."""

    def __init__(self, config: GeneratorConfig, compiler_version: str = "(unknown)") -> None:
        self.config = config
        self.compiler_version = compiler_version
        self.client = ClientBindingGenerator(config)
        self.server = ServerBindingGenerator(config)

    def generate(self, proto_file: ProtoFile) -> Optional[GeneratedFile]:
        if not proto_file.services:
            logger.debug("Skipping %s: no services", proto_file.name)
            return None
        filename = naming.generated_filename(proto_file.name, self.config.file_suffix)
        out = GeneratedFile(filename)
        scope = naming.SymbolScope(proto_file.name)

        self._header(out, proto_file)
        self._imports(out, proto_file, scope)
        for service in proto_file.services:
            out.emit_all(self._service(service, scope))
        logger.info(
            "Generated %s (%d services, %d declarations)",
            filename,
            len(proto_file.services),
            len(out.declarations),
        )
        return out

    def _header(self, out: GeneratedFile, proto_file: ProtoFile) -> None:
        for line in _leading_comment_lines(proto_file.syntax_comments):
            out.P(line)
        out.P("# Code generated by ", PLUGIN_NAME, ". DO NOT EDIT.")
        out.P("# versions:")
        out.P("# - ", PLUGIN_NAME, " v", __version__)
        out.P("# - protoc             ", self.compiler_version)
        if proto_file.deprecated:
            out.P("# ", proto_file.name, " is a deprecated file.")
        else:
            out.P("# source: ", proto_file.name)
        package_lines = _leading_comment_lines(proto_file.package_comments)
        if package_lines:
            out.P()
            for line in package_lines:
                out.P(line)

    def _imports(self, out: GeneratedFile, proto_file: ProtoFile, scope: naming.SymbolScope) -> None:
        scope.claim("abc", "import")
        scope.claim("rest", "import")
        out.emit(Declaration(name="abc", kind=DeclKind.IMPORT, lines=["import abc"]))
        out.emit(
            Declaration(
                name="rest",
                kind=DeclKind.IMPORT,
                lines=[transport_import(self.config.transport_module)],
            )
        )
        for referenced in referenced_files(proto_file):
            alias = scope.claim(naming.pb2_module_alias(referenced), f"import of {referenced}")
            out.emit(Declaration(name=alias, kind=DeclKind.IMPORT, lines=[pb2_import(referenced)]))

    def _service(self, service: Service, scope: naming.SymbolScope) -> List[Declaration]:
        constants = []
        for method in service.methods:
            symbol = scope.claim(
                naming.full_method_symbol(service.name, method.name),
                f"method {service.name}.{method.name}",
            )
            path = naming.full_method_path(service.full_name, method.name)
            constants.append(f"{symbol} = {path!r}")
        declarations = []
        if constants:
            declarations.append(
                Declaration(
                    name=f"{service.name} full method names",
                    kind=DeclKind.VARIABLE,
                    lines=constants,
                )
            )
        client = self.client.generate(service, scope)
        server = self.server.generate(service, scope)
        declarations.extend(client.declarations())
        declarations.extend(server.declarations())
        return declarations


def generate_file(
    proto_file: ProtoFile,
    config: Optional[GeneratorConfig] = None,
    compiler_version: str = "(unknown)",
) -> Optional[GeneratedFile]:
    """Generate the bindings module for ``proto_file``, or None without services."""
    return FileGenerator(config or GeneratorConfig(), compiler_version).generate(proto_file)


__all__ = [
    "PLUGIN_NAME",
    "FileGenerator",
    "generate_file",
    "pb2_import",
    "referenced_files",
    "transport_import",
]
