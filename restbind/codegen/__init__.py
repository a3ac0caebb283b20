"""Code generation for REST client and server bindings."""

from .client import ClientBindingGenerator, GeneratedClientBinding
from .generator import PLUGIN_NAME, FileGenerator, generate_file
from .printer import Declaration, DeclKind, GeneratedFile
from .routes import RouteEntry, RouteTable, StreamEntry, assemble_route_table
from .server import GeneratedServerBinding, ServerBindingGenerator
from .shapes import StreamShape, classify

__all__ = [
    "ClientBindingGenerator",
    "GeneratedClientBinding",
    "PLUGIN_NAME",
    "FileGenerator",
    "generate_file",
    "Declaration",
    "DeclKind",
    "GeneratedFile",
    "RouteEntry",
    "RouteTable",
    "StreamEntry",
    "assemble_route_table",
    "GeneratedServerBinding",
    "ServerBindingGenerator",
    "StreamShape",
    "classify",
]
