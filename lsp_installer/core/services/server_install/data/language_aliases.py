"""
L0 Data — Language aliases.

Maps a language name to the servers that can be installed for it, in
the order they are offered to the user.  ``install python`` asks which
of the python servers to install; ``install rust`` goes straight to
``rust_analyzer``.
"""

from __future__ import annotations

LANGUAGE_ALIASES: dict[str, tuple[str, ...]] = {
    "angular": ("angularls",),
    "bash": ("bashls",),
    "c": ("clangd",),
    "c#": ("omnisharp", "csharp_ls"),
    "cmake": ("cmake",),
    "cpp": ("clangd",),
    "css": ("cssls", "tailwindcss", "stylelint_lsp"),
    "docker": ("dockerls",),
    "elixir": ("elixirls",),
    "go": ("gopls", "golangci_lint_ls"),
    "graphql": ("graphql",),
    "haskell": ("hls",),
    "html": ("html", "emmet_ls"),
    "java": ("jdtls",),
    "javascript": ("tsserver", "eslint", "quick_lint_js", "rome"),
    "json": ("jsonls",),
    "kotlin": ("kotlin_language_server",),
    "latex": ("texlab", "ltex"),
    "lua": ("sumneko_lua",),
    "markdown": ("marksman", "prosemd_lsp", "remark_ls", "zk"),
    "php": ("intelephense", "phpactor", "psalm"),
    "python": ("pyright", "pylsp", "jedi_language_server", "sourcery"),
    "ruby": ("solargraph", "sorbet"),
    "rust": ("rust_analyzer",),
    "sql": ("sqlls", "sqls"),
    "terraform": ("terraformls", "tflint"),
    "toml": ("taplo",),
    "typescript": ("tsserver", "eslint", "rome"),
    "vue": ("volar", "vuels"),
    "yaml": ("yamlls",),
    "zig": ("zls",),
}
