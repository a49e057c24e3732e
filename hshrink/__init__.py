"""Streaming LZSS compression for low-memory systems, with a command-line front end."""

__version__ = "0.1.0"

__all__ = ["common", "match", "encoder", "decoder", "cli"]