"""
Core layer - Raw types and the signed HTTP client.

This layer provides:
- Typed dataclasses for envelopes, error reports and results
- Request signing, transport, error classification and result decoding
"""

from grooveshark_cli.core.client import (
    APIClient,
    ConfigurationError,
    DecodeError,
    DomainError,
    GroovesharkError,
    ServiceError,
    TransportError,
    ValidationError,
    build_envelope,
    classify,
    create_signature,
    decode,
)
from grooveshark_cli.core.types import (
    Credentials,
    DeletePlaylistResponse,
    EmptyResponse,
    Envelope,
    ErrorEntry,
    Playlist,
    PlaylistResponse,
    RawResponse,
    ServiceErrorReport,
    Session,
    SessionResponse,
    SongInfo,
    User,
)

__all__ = [
    "APIClient",
    "ConfigurationError",
    "Credentials",
    "DecodeError",
    "DeletePlaylistResponse",
    "DomainError",
    "EmptyResponse",
    "Envelope",
    "ErrorEntry",
    "GroovesharkError",
    "Playlist",
    "PlaylistResponse",
    "RawResponse",
    "ServiceError",
    "ServiceErrorReport",
    "Session",
    "SessionResponse",
    "SongInfo",
    "TransportError",
    "User",
    "ValidationError",
    "build_envelope",
    "classify",
    "create_signature",
    "decode",
]
