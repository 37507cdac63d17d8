"""Building blocks for the client side of a frp-style reverse proxy: messages, frames, FTP rewriting and helpers."""

__version__ = "1.0.1"