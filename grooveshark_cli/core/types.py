"""
Core types for the Grooveshark public API.

Wire-level types describe the request envelope and raw responses; result
types are dataclasses with a ``from_dict`` constructor so the generic
decoder can build them from the ``result`` field of a response.
"""

import json
from dataclasses import dataclass, field
from typing import Any


def _field(data: dict[str, Any], key: str, kind: type, default: Any = None, required: bool = False) -> Any:
    """
    Read one field of a result object, checking its JSON type.

    Absent and null fields take the default. bool is never accepted as int.
    """
    if key not in data and required:
        raise KeyError(key)
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"{key} must not be null")
        return default
    if (kind is int and isinstance(value, bool)) or not isinstance(value, kind):
        raise TypeError(f"{key} must be {kind.__name__}, got {value!r}")
    return value


# =============================================================================
# Wire Types
# =============================================================================


@dataclass(frozen=True)
class Credentials:
    """Public/secret key pair issued to an integrator."""

    public_key: str
    secret_key: str = field(repr=False)


@dataclass
class Session:
    """
    Server-issued session for one client instance.

    Written only by session start; read by every call that builds an envelope.
    """

    session_id: str = ""

    @property
    def present(self) -> bool:
        """Check if a session has been started."""
        return bool(self.session_id)


@dataclass
class Envelope:
    """Outbound request envelope."""

    method: str
    parameters: dict[str, Any] | None = None
    header: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict in wire order."""
        return {
            "method": self.method,
            "parameters": self.parameters,
            "header": self.header,
        }

    def serialize(self) -> bytes:
        """Serialize to the exact bytes that are signed and sent."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


@dataclass(frozen=True)
class RawResponse:
    """HTTP status and body of a single call."""

    status: int
    body: str


@dataclass
class ErrorEntry:
    """A single entry of a response's ``errors`` array."""

    code: int
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorEntry":
        """Create from API response dict."""
        return cls(
            code=_field(data, "code", int, 0),
            message=_field(data, "message", str, ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        return {"code": self.code, "message": self.message}


@dataclass
class ServiceErrorReport:
    """All error entries returned by a rejected call, in response order."""

    errors: list[ErrorEntry] = field(default_factory=list)

    @property
    def message(self) -> str:
        """All error messages, one per line."""
        return "\n".join(e.message for e in self.errors)

    @property
    def codes(self) -> list[int]:
        return [e.code for e in self.errors]


# =============================================================================
# Playlist Types
# =============================================================================


@dataclass
class SongInfo:
    """A song as listed in a playlist."""

    song_id: int
    song_name: str = ""
    artist_id: int = 0
    artist_name: str = ""
    album_id: int = 0
    album_name: str = ""
    cover_art_filename: str = ""
    popularity: str = ""
    is_low_bitrate_available: bool = False
    is_verified: bool = False
    flags: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SongInfo":
        """Create from API response dict."""
        return cls(
            song_id=_field(data, "SongID", int, required=True),
            song_name=_field(data, "SongName", str, ""),
            artist_id=_field(data, "ArtistID", int, 0),
            artist_name=_field(data, "ArtistName", str, ""),
            album_id=_field(data, "AlbumID", int, 0),
            album_name=_field(data, "AlbumName", str, ""),
            # The service is inconsistent about the casing of this field
            cover_art_filename=_field(data, "CoverArtFilename", str, "") or _field(data, "CoverArtFileName", str, ""),
            popularity=_field(data, "Popularity", str, ""),
            is_low_bitrate_available=_field(data, "IsLowBitrateAvailable", bool, False),
            is_verified=_field(data, "IsVerified", bool, False),
            flags=_field(data, "Flags", int, 0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict in API field naming."""
        return {
            "SongID": self.song_id,
            "SongName": self.song_name,
            "ArtistID": self.artist_id,
            "ArtistName": self.artist_name,
            "AlbumID": self.album_id,
            "AlbumName": self.album_name,
            "CoverArtFilename": self.cover_art_filename,
            "Popularity": self.popularity,
            "IsLowBitrateAvailable": self.is_low_bitrate_available,
            "IsVerified": self.is_verified,
            "Flags": self.flags,
        }


@dataclass
class Playlist:
    """A playlist with its songs."""

    playlist_name: str = ""
    ts_modified: int = 0
    user_id: int = 0
    playlist_description: str = ""
    cover_art_filename: str = ""
    songs: list[SongInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Playlist":
        """Create from API response dict."""
        songs = []
        for song_data in _field(data, "Songs", list, []):
            if not isinstance(song_data, dict):
                raise TypeError(f"Songs entries must be objects, got {song_data!r}")
            songs.append(SongInfo.from_dict(song_data))

        return cls(
            playlist_name=_field(data, "PlaylistName", str, ""),
            ts_modified=_field(data, "TSModified", int, 0),
            user_id=_field(data, "UserID", int, 0),
            playlist_description=_field(data, "PlaylistDescription", str, ""),
            cover_art_filename=_field(data, "CoverArtFilename", str, ""),
            songs=songs,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict in API field naming."""
        return {
            "PlaylistName": self.playlist_name,
            "TSModified": self.ts_modified,
            "UserID": self.user_id,
            "PlaylistDescription": self.playlist_description,
            "CoverArtFilename": self.cover_art_filename,
            "Songs": [s.to_dict() for s in self.songs],
        }


@dataclass
class PlaylistResponse:
    """Result of creating a playlist."""

    success: bool
    playlist_id: int = 0
    playlists_ts_modified: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlaylistResponse":
        """Create from API response dict."""
        return cls(
            success=_field(data, "success", bool, False),
            playlist_id=_field(data, "playlistID", int, 0),
            playlists_ts_modified=_field(data, "playlistsTSModified", int, 0),
        )


@dataclass
class DeletePlaylistResponse:
    """Result of deleting a playlist."""

    success: bool
    playlists_ts_modified: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeletePlaylistResponse":
        """Create from API response dict."""
        return cls(
            success=_field(data, "success", bool, False),
            playlists_ts_modified=_field(data, "playlistsTSModified", int, 0),
        )


# =============================================================================
# Session & User Types
# =============================================================================


@dataclass
class SessionResponse:
    """Result of starting a session."""

    success: bool
    session_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionResponse":
        """Create from API response dict."""
        return cls(
            success=_field(data, "success", bool, False),
            session_id=_field(data, "sessionID", str, ""),
        )


@dataclass
class User:
    """An authenticated user."""

    user_id: int = 0
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    is_plus: bool = False
    is_anywhere: bool = False
    is_premium: bool = False
    success: bool = False

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """Create from API response dict."""
        return cls(
            user_id=_field(data, "UserID", int, 0),
            email=_field(data, "Email", str, ""),
            first_name=_field(data, "FName", str, ""),
            last_name=_field(data, "LName", str, ""),
            is_plus=_field(data, "IsPlus", bool, False),
            is_anywhere=_field(data, "IsAnywhere", bool, False),
            is_premium=_field(data, "IsPremium", bool, False),
            success=_field(data, "success", bool, False),
        )


@dataclass
class EmptyResponse:
    """Result of calls that only report a success flag."""

    success: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmptyResponse":
        """Create from API response dict."""
        return cls(success=_field(data, "success", bool, False))
