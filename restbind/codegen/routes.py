"""Route table assembly for a service's unary methods."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ..descriptors.model import Service, Verb
from . import naming
from .printer import Declaration, DeclKind, indent_lines
from .shapes import method_shape


@dataclass(frozen=True)
class RouteEntry:
    method_name: str
    verb: Verb
    path: str
    description: str
    handler: str


@dataclass(frozen=True)
class StreamEntry:
    stream_name: str
    handler: str
    client_streams: bool
    server_streams: bool


@dataclass
class RouteTable:
    variable: str
    service_name: str
    handler_type: str
    entries: List[RouteEntry] = field(default_factory=list)
    streams: List[StreamEntry] = field(default_factory=list)

    def entries_for(self, method_name: str) -> List[RouteEntry]:
        return [entry for entry in self.entries if entry.method_name == method_name]

    def stream_index(self, stream_name: str) -> int:
        for index, stream in enumerate(self.streams):
            if stream.stream_name == stream_name:
                return index
        raise KeyError(stream_name)


def describe(leading: str) -> str:
    """Collapse leading method comments into a one-line route description."""
    if not leading.strip():
        return ""
    parts = []
    for line in leading.rstrip("\n").split("\n"):
        if line.startswith(" "):
            line = line[1:]
        parts.append(line.rstrip())
    return ",".join(parts) + "."


def assemble_route_table(
    service: Service, handler_names: Sequence[str], server_type: str
) -> RouteTable:
    """Build the route table of ``service``.

    ``handler_names`` runs parallel to ``service.methods``.  Unary methods
    contribute one entry per HTTP binding, in declaration order; streaming
    methods are dispatched by the transport's stream multiplexer and only
    contribute a stream descriptor.
    """
    table = RouteTable(
        variable=naming.route_table_name(service.name),
        service_name=service.full_name,
        handler_type=server_type,
    )
    for method, handler in zip(service.methods, handler_names):
        shape = method_shape(method)
        if shape.is_streaming:
            table.streams.append(
                StreamEntry(
                    stream_name=method.name,
                    handler=handler,
                    client_streams=shape.client_streams,
                    server_streams=shape.server_streams,
                )
            )
            continue
        description = describe(method.comments.leading)
        for binding in method.http_bindings:
            table.entries.append(
                RouteEntry(
                    method_name=method.name,
                    verb=binding.verb,
                    path=binding.path,
                    description=description,
                    handler=handler,
                )
            )
    return table


def render_route_table(table: RouteTable) -> Declaration:
    lines = [
        f"# {table.variable} is the rest.ServiceDesc for {table.service_name.rsplit('.', 1)[-1]} service.",
        "# It's only intended for direct use with a rest server's add_handler,",
        "# and not to be introspected or modified (even as a copy)",
        f"{table.variable} = rest.ServiceDesc(",
        f"    service_name={table.service_name!r},",
        f"    handler_type={table.handler_type},",
    ]
    if table.entries:
        lines.append("    methods=[")
        for entry in table.entries:
            lines.extend(
                indent_lines(
                    [
                        "rest.MethodDesc(",
                        f"    method_name={entry.method_name!r},",
                        f"    desc={entry.description!r},",
                        f"    method={entry.verb.value!r},",
                        f"    path={entry.path!r},",
                        f"    handler={entry.handler},",
                        "),",
                    ],
                    2,
                )
            )
        lines.append("    ],")
    else:
        lines.append("    methods=[],")
    if table.streams:
        lines.append("    streams=[")
        for stream in table.streams:
            lines.extend(
                indent_lines(
                    [
                        "rest.StreamDesc(",
                        f"    stream_name={stream.stream_name!r},",
                        f"    handler={stream.handler},",
                        f"    server_streams={stream.server_streams!r},",
                        f"    client_streams={stream.client_streams!r},",
                        "),",
                    ],
                    2,
                )
            )
        lines.append("    ],")
    else:
        lines.append("    streams=[],")
    lines.append(")")
    return Declaration(name=table.variable, kind=DeclKind.VARIABLE, lines=lines)


__all__ = [
    "RouteEntry",
    "StreamEntry",
    "RouteTable",
    "describe",
    "assemble_route_table",
    "render_route_table",
]
