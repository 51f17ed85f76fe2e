"""
Tests for identifier parsing and language alias resolution.
"""

import pytest

from lsp_installer.core.services.server_install.domain.identifier import (
    ServerIdentifier,
    parse_server_identifier,
)
from lsp_installer.core.services.server_install.resolver.alias_resolution import (
    get_install_completion,
    resolve_alias,
)

from conftest import RecordingPrompt

ALIASES = {
    "web": ("html-ls", "css-ls"),
    "rust": ("rust_analyzer",),
}


# ── Parsing ──────────────────────────────────────────────────────────


class TestParseServerIdentifier:
    def test_name_only(self):
        assert parse_server_identifier("tsserver") == ServerIdentifier("tsserver", None)

    def test_name_and_version(self):
        ident = parse_server_identifier("rust_analyzer@nightly")
        assert ident.name == "rust_analyzer"
        assert ident.version == "nightly"

    def test_splits_on_first_separator(self):
        ident = parse_server_identifier("tool@1.0@beta")
        assert ident.name == "tool"
        assert ident.version == "1.0@beta"

    def test_empty_version_means_none(self):
        assert parse_server_identifier("tsserver@").version is None

    def test_strips_whitespace(self):
        assert parse_server_identifier("  gopls ").name == "gopls"

    def test_str_round_trips(self):
        assert str(ServerIdentifier("bar", "2.0")) == "bar@2.0"
        assert str(ServerIdentifier("foo")) == "foo"

    def test_identifier_is_immutable(self):
        ident = ServerIdentifier("foo")
        with pytest.raises(AttributeError):
            ident.name = "bar"


# ── Alias resolution ─────────────────────────────────────────────────


class TestResolveAlias:
    def test_non_alias_unchanged(self):
        prompt = RecordingPrompt()
        ident = ServerIdentifier("pyright", "1.1")
        assert resolve_alias(ident, prompt, ALIASES) is ident
        assert prompt.choose_calls == []

    def test_single_candidate_no_prompt(self):
        prompt = RecordingPrompt()
        result = resolve_alias(ServerIdentifier("rust"), prompt, ALIASES)
        assert result == ServerIdentifier("rust_analyzer")
        assert prompt.choose_calls == []

    def test_alias_version_is_dropped(self, caplog):
        result = resolve_alias(ServerIdentifier("rust", "nightly"), RecordingPrompt(), ALIASES)
        assert result == ServerIdentifier("rust_analyzer")
        assert "Ignoring version nightly" in caplog.text

    def test_entry_can_pin_version(self):
        aliases = {"ts": ("tsserver@4.8.4",)}
        result = resolve_alias(ServerIdentifier("ts"), RecordingPrompt(), aliases)
        assert result == ServerIdentifier("tsserver", "4.8.4")

    def test_multiple_candidates_presents_all_choices(self):
        prompt = RecordingPrompt(choice=2)
        result = resolve_alias(ServerIdentifier("web"), prompt, ALIASES)
        assert len(prompt.choose_calls) == 1
        message, choices = prompt.choose_calls[0]
        assert choices == ["html-ls", "css-ls"]
        assert '"web"' in message
        assert result == ServerIdentifier("css-ls", None)

    def test_first_choice(self):
        prompt = RecordingPrompt(choice=1)
        assert resolve_alias(ServerIdentifier("web"), prompt, ALIASES).name == "html-ls"

    def test_declined_returns_none(self):
        prompt = RecordingPrompt(choice=0)
        assert resolve_alias(ServerIdentifier("web"), prompt, ALIASES) is None

    def test_out_of_range_choice_returns_none(self):
        prompt = RecordingPrompt(choice=3)
        assert resolve_alias(ServerIdentifier("web"), prompt, ALIASES) is None

    def test_default_table_has_python(self):
        prompt = RecordingPrompt(choice=1)
        result = resolve_alias(ServerIdentifier("python"), prompt)
        assert result.name == "pyright"


class TestInstallCompletion:
    def test_merges_servers_and_aliases(self):
        result = get_install_completion({"gopls", "html-ls"}, ALIASES)
        assert result == ["gopls", "html-ls", "rust", "web"]

    def test_no_duplicates(self):
        result = get_install_completion({"rust"}, ALIASES)
        assert result.count("rust") == 1
