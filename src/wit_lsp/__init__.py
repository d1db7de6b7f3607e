"""wit-lsp - language server for WIT (WebAssembly Interface Type) documents."""

__version__ = "0.3.0"
