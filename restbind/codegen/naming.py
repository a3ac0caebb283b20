"""Deterministic names for every identifier the generator emits.

All functions here are pure string builders.  The fixed schemes are
injective for distinct ``(service, method)`` pairs as long as service and
method names are unique, which protobuf already guarantees; ``SymbolScope``
catches the remaining underscore ambiguities (``A_B.C`` vs ``A.B_C``).
"""

from __future__ import annotations

from typing import Dict, Optional

from ..errors import NameCollisionError

_PROTO_SUFFIX = ".proto"


def unexport(name: str) -> str:
    """Lower-case the first character of ``name`` and leave the rest alone."""
    return name[:1].lower() + name[1:]


def export(name: str) -> str:
    """Upper-case the first character of ``name`` and leave the rest alone."""
    return name[:1].upper() + name[1:]


def full_method_symbol(service: str, method: str) -> str:
    return f"{service}_{method}_FullMethodName"


def full_method_path(service_full_name: str, method: str) -> str:
    return f"/{service_full_name}/{method}"


def handler_name(service: str, method: str) -> str:
    return f"_{service}_{method}_RestHandler"


def stream_interface_name(service: str, method: str) -> str:
    return f"{service}_{method}Client"


def stream_wrapper_name(service: str, method: str) -> str:
    return unexport(f"{service}{method}Client")


def route_table_name(service: str) -> str:
    return f"{service}RestServiceDesc"


def server_type_name(service: str) -> str:
    return f"{service}Server"


def client_interface_name(service: str) -> str:
    return f"{service}Client"


def client_holder_name(service: str) -> str:
    return unexport(client_interface_name(service))


def client_constructor_name(service: str) -> str:
    return f"New{export(service)}Client"


def _strip_proto(proto_file: str) -> str:
    if proto_file.endswith(_PROTO_SUFFIX):
        return proto_file[: -len(_PROTO_SUFFIX)]
    return proto_file


def pb2_module_name(proto_file: str) -> str:
    """``a/b/c-d.proto`` -> ``a.b.c_d_pb2``"""
    return _strip_proto(proto_file).replace("-", "_").replace("/", ".") + "_pb2"


def pb2_module_alias(proto_file: str) -> str:
    """``a/b/c_d.proto`` -> ``a_dot_b_dot_c__d__pb2``"""
    basename = _strip_proto(proto_file).replace("-", "_")
    basename = basename.replace("_", "__").replace("/", "_dot_")
    return basename + "__pb2"


def qualified_type(proto_file: str, py_name: str) -> str:
    return f"{pb2_module_alias(proto_file)}.{py_name}"


def generated_filename(proto_file: str, suffix: str) -> str:
    return _strip_proto(proto_file) + suffix


class SymbolScope:
    """Tracks the top-level identifiers emitted into one generated module."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self._owners: Dict[str, str] = {}

    def claim(self, name: str, owner: str) -> str:
        previous = self._owners.get(name)
        if previous is not None:
            raise NameCollisionError(
                f"Identifier '{name}' generated for {owner} already defined for {previous}",
                path=self.path,
                hint="Rename one of the services or methods so the generated names differ.",
            )
        self._owners[name] = owner
        return name

    def __contains__(self, name: str) -> bool:
        return name in self._owners

    def __len__(self) -> int:
        return len(self._owners)


__all__ = [
    "unexport",
    "export",
    "full_method_symbol",
    "full_method_path",
    "handler_name",
    "stream_interface_name",
    "stream_wrapper_name",
    "route_table_name",
    "server_type_name",
    "client_interface_name",
    "client_holder_name",
    "client_constructor_name",
    "pb2_module_name",
    "pb2_module_alias",
    "qualified_type",
    "generated_filename",
    "SymbolScope",
]
