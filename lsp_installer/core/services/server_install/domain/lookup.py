"""
L1 Domain — Registry lookup results.

``get_server()`` returns one of two shapes instead of an
``(ok, server_or_error)`` tuple::

    match registry.get_server(name):
        case Found(server=server): ...
        case NotFound(reason=reason): ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar, Union

if TYPE_CHECKING:
    from lsp_installer.adapters.base import Server

S = TypeVar("S")


@dataclass(frozen=True)
class Found(Generic[S]):
    server: S

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    name: str
    reason: str

    @property
    def ok(self) -> bool:
        return False


LookupResult = Union[Found["Server"], NotFound]
