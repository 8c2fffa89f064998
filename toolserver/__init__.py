"""Minimal tool-invocation server with per-client sessions."""

__version__ = "0.1.0"
