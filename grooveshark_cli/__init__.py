"""
Grooveshark CLI - Three-layer architecture for the Grooveshark public API.

Layers:
- core: Raw types and the signed HTTP client
- sdk: High-level GroovesharkClient with typed operations
- cli: Opinionated command-line interface
"""

__version__ = "0.1.0"

from grooveshark_cli.sdk import GroovesharkClient  # noqa: E402

__all__ = ["GroovesharkClient"]
