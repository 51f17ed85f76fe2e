"""
L2 Resolver — Language alias expansion.

An identifier whose name is a language alias is expanded to a concrete
server.  When the alias offers several servers the user picks one
through the prompt; a declined prompt yields ``None`` and the caller
does nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from lsp_installer.core.services.server_install.data.language_aliases import (
    LANGUAGE_ALIASES,
)
from lsp_installer.core.services.server_install.domain.identifier import (
    ServerIdentifier,
    parse_server_identifier,
)

if TYPE_CHECKING:
    from lsp_installer.adapters.base import Prompt

logger = logging.getLogger(__name__)


def resolve_alias(
    identifier: ServerIdentifier,
    prompt: Prompt,
    aliases: Mapping[str, Sequence[str]] = LANGUAGE_ALIASES,
) -> ServerIdentifier | None:
    """Expand a language alias to a concrete server identifier.

    Args:
        identifier: Parsed identifier, possibly an alias.
        prompt: Asked to pick a candidate when the alias has several.
        aliases: Alias table (defaults to ``LANGUAGE_ALIASES``).

    Returns:
        The chosen alias entry as an identifier (an entry may pin its own
        version as ``name@version``; a version on the alias itself is
        dropped), the identifier unchanged if it is not an alias, or None
        if the user declined to choose.
    """
    candidates = aliases.get(identifier.name)
    if not candidates:
        return identifier

    if len(candidates) == 1:
        return _candidate(identifier, candidates[0])

    choice = prompt.choose(
        f'The following servers were found for language "{identifier.name}", '
        "please select which one you want to install:",
        list(candidates),
    )
    if choice < 1 or choice > len(candidates):
        logger.debug("No server selected for alias %s", identifier.name)
        return None

    return _candidate(identifier, candidates[choice - 1])


def _candidate(alias: ServerIdentifier, entry: str) -> ServerIdentifier:
    if alias.version:
        logger.warning(
            "Ignoring version %s requested for language alias %s", alias.version, alias.name,
        )
    logger.debug("Alias %s → %s", alias.name, entry)
    return parse_server_identifier(entry)


def get_install_completion(
    server_names: Iterable[str],
    aliases: Mapping[str, Sequence[str]] = LANGUAGE_ALIASES,
) -> list[str]:
    """Candidates for completing an ``install`` argument: servers plus aliases."""
    return sorted(set(server_names) | set(aliases))
