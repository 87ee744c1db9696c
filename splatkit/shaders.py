"""Shader source handling: file loading, ``#include`` expansion and injection."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class ShaderSourceError(OSError):
    """A shader source file could not be read."""


class ShaderLibrary:
    """Holds named include snippets and expands them into shader sources."""

    def __init__(self) -> None:
        self._includes: dict[str, str] = {}

    @property
    def includes(self) -> dict[str, str]:
        """A copy of the registered includes, by name."""
        return dict(self._includes)

    def load_file(self, path: Union[str, Path]) -> str:
        """Read a shader source file as text."""
        try:
            return Path(path).read_text()
        except OSError as exc:
            raise ShaderSourceError(f"failed to open shader file {path}") from exc

    def register_include(self, name: str, content: str) -> None:
        """Make ``content`` available as ``#include "name"`` (or ``<name>``)."""
        self._includes[name] = content

    def _lines(self, source: str) -> list[str]:
        lines = source.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return lines

    def _include_name(self, line: str) -> str | None:
        inc_pos = line.find("#include")
        if inc_pos < 0:
            return None
        starts = [p for p in (line.find('"', inc_pos), line.find("<", inc_pos)) if p >= 0]
        if not starts:
            return None
        start = min(starts)
        ends = [p for p in (line.find('"', start + 1), line.find(">", start + 1)) if p >= 0]
        if not ends:
            return None
        return line[start + 1 : min(ends)]

    def resolve_includes(self, source: str) -> str:
        """Replace each line naming a registered include with its content.

        Lines whose include is unknown are kept as they are. Every output
        line ends with a newline.
        """
        parts: list[str] = []
        for line in self._lines(source):
            name = self._include_name(line)
            if name is not None and name in self._includes:
                parts.append(f"// BEGIN include: {name}\n")
                parts.append(self._includes[name] + "\n")
                parts.append(f"// END include: {name}\n")
            else:
                parts.append(line + "\n")
        return "".join(parts)

    def inject_after_version(self, source: str, text: str) -> str:
        """Insert ``text`` on its own lines right after the first line.

        A source without any newline is returned unchanged.
        """
        pos = source.find("\n")
        if pos < 0:
            return source
        return source[: pos + 1] + "\n" + text + "\n" + source[pos + 1 :]