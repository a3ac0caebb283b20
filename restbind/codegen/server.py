"""Server binding generation: service interface, handlers and route table."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..config import GeneratorConfig
from ..descriptors.model import Method, Service
from . import naming
from .client import DEPRECATION_COMMENT
from .printer import Declaration, DeclKind, comment_lines, indent_lines
from .routes import RouteTable, assemble_route_table, render_route_table
from .shapes import StreamShape, method_shape

logger = logging.getLogger(__name__)


@dataclass
class GeneratedServerBinding:
    interface_type: str
    interface: Declaration
    route_table: RouteTable
    route_table_decl: Declaration
    handlers: List[Declaration] = field(default_factory=list)

    def declarations(self) -> List[Declaration]:
        return [self.interface, *self.handlers, self.route_table_decl]


def server_signature(method: Method) -> str:
    shape = method_shape(method)
    if shape is StreamShape.UNARY:
        params = "self, ctx, request"
    elif shape is StreamShape.SERVER_STREAMING:
        params = "self, request, stream"
    else:
        params = "self, stream"
    return f"def {method.name}({params}):"


def _direct_call(method: Method, ctx: str, request: str) -> str:
    shape = method_shape(method)
    if shape is StreamShape.UNARY:
        return f"srv.{method.name}({ctx}, {request})"
    if shape is StreamShape.SERVER_STREAMING:
        return f"srv.{method.name}({request}, {ctx})"
    return f"srv.{method.name}({ctx})"


class ServerBindingGenerator:
    """Emits the server half of a service's bindings."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def generate(self, service: Service, scope: naming.SymbolScope) -> GeneratedServerBinding:
        interface_type = scope.claim(
            naming.server_type_name(service.name), f"service {service.name}"
        )
        handlers = []
        handler_names = []
        for method in service.methods:
            name = scope.claim(
                naming.handler_name(service.name, method.name),
                f"method {service.name}.{method.name}",
            )
            handler_names.append(name)
            handlers.append(self._handler(service, method, name))

        table = assemble_route_table(service, handler_names, interface_type)
        scope.claim(table.variable, f"service {service.name}")
        logger.debug(
            "Route table %s: %d routes, %d streams",
            table.variable,
            len(table.entries),
            len(table.streams),
        )
        return GeneratedServerBinding(
            interface_type=interface_type,
            interface=self._interface(service, interface_type),
            handlers=handlers,
            route_table=table,
            route_table_decl=render_route_table(table),
        )

    def _interface(self, service: Service, interface_type: str) -> Declaration:
        lines = []
        if service.deprecated:
            lines.append(DEPRECATION_COMMENT)
        lines.append(f"class {interface_type}(abc.ABC):")
        lines.append(
            f'    """{interface_type} is the server API for {service.name} service."""'
        )
        for method in service.methods:
            body = [""]
            body.extend(comment_lines(method.comments.leading))
            if method.deprecated:
                body.append(DEPRECATION_COMMENT)
            body.append("@abc.abstractmethod")
            body.append(server_signature(method))
            body.append("    raise NotImplementedError()")
            lines.extend(indent_lines(body))
        return Declaration(name=interface_type, kind=DeclKind.TYPE, lines=lines)

    def _handler(self, service: Service, method: Method, name: str) -> Declaration:
        shape = method_shape(method)
        fm_symbol = naming.full_method_symbol(service.name, method.name)
        lines = [f"def {name}(ctx, srv, interceptor):"]
        if shape is StreamShape.UNARY or shape is StreamShape.SERVER_STREAMING:
            request_type = naming.qualified_type(method.input.proto_file, method.input.py_name)
            read = "read_entity" if shape is StreamShape.UNARY else "recv_msg"
            lines.append(f"    in_ = {request_type}()")
            lines.append(f"    ctx.{read}(in_)")
            request = "in_"
        else:
            request = "None"
        lines.extend(
            [
                "    if interceptor is None:",
                f"        return {_direct_call(method, 'ctx', 'in_')}",
                "    info = rest.UnaryServerInfo(",
                "        server=srv,",
                f"        full_method={fm_symbol},",
                "        protocol=rest.PROTOCOL,",
                "    )",
                "",
                "    def handler(ctx, req):",
                f"        return {_direct_call(method, 'ctx', 'req')}",
                "",
                f"    return interceptor(ctx, {request}, info, handler)",
            ]
        )
        return Declaration(name=name, kind=DeclKind.FUNCTION, lines=lines)


__all__ = ["GeneratedServerBinding", "ServerBindingGenerator", "server_signature"]
