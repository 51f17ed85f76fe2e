"""
L1 Domain — Server identifiers.

A raw identifier is ``name`` or ``name@version``.
"""

from __future__ import annotations

from dataclasses import dataclass

VERSION_SEPARATOR = "@"


@dataclass(frozen=True)
class ServerIdentifier:
    """Parsed ``(name, version)`` pair.  ``version`` is None when absent."""

    name: str
    version: str | None = None

    def __str__(self) -> str:
        if self.version:
            return f"{self.name}{VERSION_SEPARATOR}{self.version}"
        return self.name


def parse_server_identifier(raw: str) -> ServerIdentifier:
    """Split ``raw`` on the first ``@``.

    ``"rust_analyzer@nightly"`` → ``ServerIdentifier("rust_analyzer", "nightly")``.
    An empty version (``"tsserver@"``) counts as no version.
    """
    name, sep, version = raw.strip().partition(VERSION_SEPARATOR)
    if not sep or not version:
        return ServerIdentifier(name=name)
    return ServerIdentifier(name=name, version=version)
