"""ketplan: cluster plan file engine and CLI."""

__version__ = "0.1.0"
