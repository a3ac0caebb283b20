"""Builds the generator's model from ``FileDescriptorProto`` records.

The adapter is the only place that looks at raw protobuf descriptors.  It
resolves message references across every supplied file, copies leading
comments out of ``SourceCodeInfo`` and reads ``google.api.http`` bindings
from method options.
"""

from __future__ import annotations

import keyword
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from google.protobuf import descriptor_pb2

from ..errors import DescriptorError, NameCollisionError
from .http import extract_bindings
from .model import Comments, Method, ProtoFile, Service, TypeRef

logger = logging.getLogger(__name__)

# Field numbers inside FileDescriptorProto / ServiceDescriptorProto used in
# SourceCodeInfo location paths.
_FILE_PACKAGE = 2
_FILE_SERVICE = 6
_FILE_SYNTAX = 12
_SERVICE_METHOD = 2

Path = Tuple[int, ...]


def _comments_by_path(file_proto: descriptor_pb2.FileDescriptorProto) -> Dict[Path, Comments]:
    comments: Dict[Path, Comments] = {}
    for location in file_proto.source_code_info.location:
        if not (location.leading_comments or location.leading_detached_comments):
            continue
        comments[tuple(location.path)] = Comments(
            leading=location.leading_comments,
            leading_detached=tuple(location.leading_detached_comments),
        )
    return comments


class TypeIndex:
    """Maps fully-qualified message names to ``TypeRef`` records."""

    def __init__(self) -> None:
        self._types: Dict[str, TypeRef] = {}

    def add_file(self, file_proto: descriptor_pb2.FileDescriptorProto) -> None:
        prefix = f".{file_proto.package}" if file_proto.package else ""
        for message in file_proto.message_type:
            self._add_message(file_proto.name, prefix, (), message)

    def _add_message(
        self,
        proto_file: str,
        prefix: str,
        outer: Tuple[str, ...],
        message: descriptor_pb2.DescriptorProto,
    ) -> None:
        names = outer + (message.name,)
        full_name = f"{prefix}.{'.'.join(names)}"
        self._types[full_name] = TypeRef(
            full_name=full_name.lstrip("."),
            proto_file=proto_file,
            py_name=".".join(names),
        )
        for nested in message.nested_type:
            self._add_message(proto_file, prefix, names, nested)

    def resolve(self, type_name: str, **context) -> TypeRef:
        ref = self._types.get(type_name)
        if ref is None:
            raise DescriptorError(
                f"Unknown message type '{type_name}'",
                hint="Pass every imported file to the generator (protoc --include_imports).",
                **context,
            )
        return ref

    def __len__(self) -> int:
        return len(self._types)


class DescriptorAdapter:
    """Adapts the files of one generator run."""

    def __init__(self, files: Iterable[descriptor_pb2.FileDescriptorProto]) -> None:
        self.files: Dict[str, descriptor_pb2.FileDescriptorProto] = {}
        self.types = TypeIndex()
        for file_proto in files:
            self.files[file_proto.name] = file_proto
            self.types.add_file(file_proto)
        logger.debug("Indexed %d message types from %d files", len(self.types), len(self.files))

    def adapt(self, name: str) -> ProtoFile:
        file_proto = self.files.get(name)
        if file_proto is None:
            raise DescriptorError(f"No descriptor supplied for '{name}'", path=name)
        comments = _comments_by_path(file_proto)
        services: List[Service] = []
        seen: Dict[str, int] = {}
        for index, service_proto in enumerate(file_proto.service):
            if service_proto.name in seen:
                raise NameCollisionError(
                    f"Service '{service_proto.name}' is declared more than once",
                    path=name,
                    service=service_proto.name,
                )
            seen[service_proto.name] = index
            services.append(self._service(file_proto, index, service_proto, comments))
        return ProtoFile(
            name=file_proto.name,
            package=file_proto.package,
            services=services,
            deprecated=file_proto.options.deprecated,
            syntax_comments=comments.get((_FILE_SYNTAX,), Comments()),
            package_comments=comments.get((_FILE_PACKAGE,), Comments()),
        )

    def _service(
        self,
        file_proto: descriptor_pb2.FileDescriptorProto,
        index: int,
        service_proto: descriptor_pb2.ServiceDescriptorProto,
        comments: Dict[Path, Comments],
    ) -> Service:
        full_name = (
            f"{file_proto.package}.{service_proto.name}"
            if file_proto.package
            else service_proto.name
        )
        methods: List[Method] = []
        method_names = set()
        for m_index, method_proto in enumerate(service_proto.method):
            if method_proto.name in method_names:
                raise NameCollisionError(
                    f"Method '{method_proto.name}' is declared more than once",
                    path=file_proto.name,
                    service=service_proto.name,
                    method=method_proto.name,
                )
            if keyword.iskeyword(method_proto.name):
                raise DescriptorError(
                    f"Method name '{method_proto.name}' is a Python keyword",
                    path=file_proto.name,
                    service=service_proto.name,
                    method=method_proto.name,
                    hint="Rename the rpc; generated methods use the rpc name as is.",
                )
            method_names.add(method_proto.name)
            context = {
                "path": file_proto.name,
                "service": service_proto.name,
                "method": method_proto.name,
            }
            methods.append(
                Method(
                    name=method_proto.name,
                    input=self.types.resolve(method_proto.input_type, **context),
                    output=self.types.resolve(method_proto.output_type, **context),
                    client_streaming=method_proto.client_streaming,
                    server_streaming=method_proto.server_streaming,
                    comments=comments.get(
                        (_FILE_SERVICE, index, _SERVICE_METHOD, m_index), Comments()
                    ),
                    deprecated=method_proto.options.deprecated,
                    http_bindings=extract_bindings(method_proto.options, **context),
                )
            )
        return Service(
            name=service_proto.name,
            full_name=full_name,
            methods=methods,
            comments=comments.get((_FILE_SERVICE, index), Comments()),
            deprecated=service_proto.options.deprecated,
        )


def compiler_version_string(version: Optional[object]) -> str:
    """Render a ``google.protobuf.compiler.Version`` as ``vX.Y.Z[-suffix]``."""
    if version is None:
        return "(unknown)"
    text = f"v{version.major}.{version.minor}.{version.patch}"
    if version.suffix:
        text += f"-{version.suffix}"
    return text


__all__ = ["TypeIndex", "DescriptorAdapter", "compiler_version_string"]
