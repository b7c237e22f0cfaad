"""
Grooveshark SDK - High-level client with typed operations.

Every operation is a thin wrapper over APIClient.call: the service's errors
array is checked first, then the operation's own ``success`` flag.
"""

import hashlib
import logging
from typing import Any

from grooveshark_cli.core.client import APIClient, DomainError
from grooveshark_cli.core.types import (
    DeletePlaylistResponse,
    EmptyResponse,
    Playlist,
    PlaylistResponse,
    SessionResponse,
    User,
)

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hex MD5 of the password, as the authenticate method expects."""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


class GroovesharkClient:
    """
    High-level Grooveshark API client with typed methods.

    Example:
        client = GroovesharkClient()

        # Log in (starts a session if needed)
        user = client.session.authenticate("login", "password")

        # Manage playlists
        created = client.playlists.create("Road trip", [30717514])
        playlist = client.playlists.get(created.playlist_id)

    """

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        api_host: str | None = None,
        timeout: float = 30,
    ):
        """
        Initialize the Grooveshark client.

        Args:
            api_key: Public key (or GROOVESHARK_API_KEY env var)
            api_secret: Secret key (or GROOVESHARK_API_SECRET env var)
            api_host: API host (or GROOVESHARK_API_HOST env var)
            timeout: Request timeout in seconds

        """
        self._client = APIClient(
            api_key=api_key,
            api_secret=api_secret,
            api_host=api_host,
            timeout=timeout,
        )

        # Sub-clients for different domains
        self.session = SessionOperations(self._client)
        self.favorites = FavoriteOperations(self._client)
        self.playlists = PlaylistOperations(self._client)

    @property
    def session_id(self) -> str | None:
        """Get the current session ID, if a session has been started."""
        return self._client.session.session_id or None

    def call(self, method: str, parameters: dict[str, Any] | None = None, secure: bool = False) -> Any:
        """
        Call any remote method and return its undecoded result.

        Args:
            method: Remote method name
            parameters: Method parameters
            secure: Send over https

        Returns:
            The ``result`` field as parsed JSON

        """
        return self._client.call(method, parameters, secure=secure, result_type=object)

    # Aliases named after the remote methods

    def start_session(self) -> str:
        return self.session.start()

    def authenticate(self, login: str, password: str) -> User:
        return self.session.authenticate(login, password)

    def logout(self) -> None:
        self.session.logout()

    def ping_service(self) -> str:
        return self.session.ping()

    def add_user_favorite_song(self, song_id: int) -> None:
        self.favorites.add_song(song_id)

    def get_playlist(self, playlist_id: int | str, limit: int | None = None) -> Playlist:
        return self.playlists.get(playlist_id, limit=limit)

    def create_playlist(self, name: str, song_ids: list[int]) -> PlaylistResponse:
        return self.playlists.create(name, song_ids)

    def delete_playlist(self, playlist_id: int) -> DeletePlaylistResponse:
        return self.playlists.delete(playlist_id)


# =============================================================================
# Session Operations
# =============================================================================


class SessionOperations:
    """Operations for sessions and user authentication."""

    def __init__(self, client: APIClient):
        self._client = client

    @property
    def active(self) -> bool:
        """Check if a session has been started on this client."""
        return self._client.session.present

    def start(self) -> str:
        """
        Start a new session and store its ID on the client.

        Returns:
            The new session ID

        Raises:
            DomainError: If the service did not report success

        """
        response = self._client.call("startSession", secure=True, result_type=SessionResponse)
        if not response.success or not response.session_id:
            raise DomainError("start_session", "Error starting session")

        self._client.session.session_id = response.session_id
        logger.info("Started session %s", response.session_id)
        return response.session_id

    def authenticate(self, login: str, password: str) -> User:
        """
        Authenticate a user, starting a session first if there is none.

        Args:
            login: Username or email address
            password: Plain text password (hashed before sending)

        Returns:
            The authenticated User

        """
        password_hash = hash_password(password)

        if not self.active:
            self.start()

        user = self._client.call(
            "authenticate",
            {"login": login, "password": password_hash},
            secure=True,
            result_type=User,
        )
        if not user.success:
            raise DomainError("authenticate", "Error authenticating user")
        return user

    def logout(self) -> None:
        """
        Log out the current user.

        The stored session ID is left in place; don't rely on it afterwards.
        """
        self._client.call("logout", secure=True)

    def ping(self) -> str:
        """Ping the service, which answers with a greeting."""
        return self._client.call("pingService", secure=True, result_type=str)


# =============================================================================
# Favorite Operations
# =============================================================================


class FavoriteOperations:
    """Operations on the authenticated user's favorites."""

    def __init__(self, client: APIClient):
        self._client = client

    def add_song(self, song_id: int) -> None:
        """Add a song to the user's favorites."""
        response = self._client.call("addUserFavoriteSong", {"songID": song_id}, result_type=EmptyResponse)
        if not response.success:
            raise DomainError("add_user_favorite_song", "Error adding favorite song")


# =============================================================================
# Playlist Operations
# =============================================================================


class PlaylistOperations:
    """Operations for reading and managing playlists."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, playlist_id: int | str, limit: int | None = None) -> Playlist:
        """
        Get a playlist with its songs.

        Args:
            playlist_id: Playlist ID
            limit: Maximum number of songs to return

        Returns:
            Playlist

        """
        params = {"playlistID": playlist_id}
        if limit is not None:
            params["limit"] = limit
        return self._client.call("getPlaylist", params, result_type=Playlist)

    def create(self, name: str, song_ids: list[int]) -> PlaylistResponse:
        """
        Create a playlist for the authenticated user.

        Args:
            name: Playlist name
            song_ids: Songs to add, in order

        Returns:
            PlaylistResponse with the new playlist_id

        """
        response = self._client.call(
            "createPlaylist",
            {"name": name, "songIDs": list(song_ids)},
            result_type=PlaylistResponse,
        )
        if not response.success:
            raise DomainError("create_playlist", "Error creating playlist")
        return response

    def delete(self, playlist_id: int) -> DeletePlaylistResponse:
        """Delete a playlist owned by the authenticated user."""
        response = self._client.call(
            "deletePlaylist",
            {"playlistID": playlist_id},
            result_type=DeletePlaylistResponse,
        )
        if not response.success:
            raise DomainError("delete_playlist", "Error deleting playlist")
        return response
