"""Output sink collecting generated declarations into module source text."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

INDENT = "    "


class DeclKind(str, Enum):
    IMPORT = "import"
    TYPE = "type"
    FUNCTION = "function"
    VARIABLE = "variable"
    COMMENT = "comment"


@dataclass
class Declaration:
    """A named block of generated source lines, unindented."""

    name: str
    kind: DeclKind
    lines: List[str] = field(default_factory=list)

    def indented(self, depth: int = 1) -> List[str]:
        prefix = INDENT * depth
        return [f"{prefix}{line}" if line else "" for line in self.lines]


def comment_lines(text: str) -> List[str]:
    """Render raw ``.proto`` comment text as ``#`` comment lines."""
    if not text:
        return []
    return ["#" + line.rstrip() for line in text.rstrip("\n").split("\n")]


def indent_lines(lines: Iterable[str], depth: int = 1) -> List[str]:
    prefix = INDENT * depth
    return [f"{prefix}{line}" if line else "" for line in lines]


class GeneratedFile:
    """Ordered declarations of one generated module."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        self.declarations: List[Declaration] = []
        self._header: List[str] = []

    def P(self, *parts: object) -> None:
        """Append one header line built from ``parts``."""
        self._header.append("".join(str(part) for part in parts))

    def emit(self, declaration: Declaration) -> None:
        self.declarations.append(declaration)

    def emit_all(self, declarations: Iterable[Declaration]) -> None:
        for declaration in declarations:
            self.emit(declaration)

    def names(self) -> List[str]:
        return [decl.name for decl in self.declarations]

    def content(self) -> str:
        lines: List[str] = list(self._header)
        previous: Optional[DeclKind] = None
        for decl in self.declarations:
            if lines:
                if previous is None:
                    lines.append("")
                elif not (previous is DeclKind.IMPORT and decl.kind is DeclKind.IMPORT):
                    lines.extend(["", ""])
            lines.extend(decl.lines)
            previous = decl.kind
        return "\n".join(lines).rstrip("\n") + "\n"


__all__ = [
    "INDENT",
    "DeclKind",
    "Declaration",
    "GeneratedFile",
    "comment_lines",
    "indent_lines",
]
