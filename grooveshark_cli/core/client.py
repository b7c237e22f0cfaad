"""
Core HTTP client for the Grooveshark public API.

Handles request signing, the request envelope, transport, and telling
service errors apart from results. The service answers HTTP 200 for
everything, so the outcome of a call is decided from the JSON body alone.
"""

import hashlib
import hmac
import http.client
import json
import logging
import os
import urllib.error
import urllib.request
from typing import Any, TypeVar

from grooveshark_cli import __version__
from grooveshark_cli.core.types import (
    Credentials,
    Envelope,
    ErrorEntry,
    RawResponse,
    ServiceErrorReport,
    Session,
)

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_API_HOST = "api.grooveshark.com"
API_PATH = "ws3.php"
DEFAULT_TIMEOUT = 30
CONTENT_TYPE = "text/plain; charset=UTF-8"
USER_AGENT = f"grooveshark-cli/{__version__}"

T = TypeVar("T")

PRIMITIVE_TYPES = (str, int, float, bool, dict, list)


# =============================================================================
# Errors
# =============================================================================


class GroovesharkError(Exception):
    """Base error class for all client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(GroovesharkError):
    """Missing API credentials or other client configuration."""


class ValidationError(GroovesharkError):
    """Validation error for local input/data issues (not API errors)."""


class TransportError(GroovesharkError):
    """Network, connection or timeout failure. Never retried."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ServiceError(GroovesharkError):
    """The service rejected the call with one or more error entries."""

    def __init__(self, report: ServiceErrorReport, status: int = 0):
        super().__init__(report.message)
        self.report = report
        self.status = status

    @property
    def errors(self) -> list[ErrorEntry]:
        return self.report.errors

    @property
    def codes(self) -> list[int]:
        return self.report.codes

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        result["errors"] = [e.to_dict() for e in self.errors]
        if self.status:
            result["status"] = self.status
        return result


class DecodeError(GroovesharkError):
    """A successful response did not have the expected result shape."""

    def __init__(self, message: str, body: str | None = None):
        super().__init__(message)
        self.body = body


class DomainError(GroovesharkError):
    """The call went through but the operation reported ``success: false``."""

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        result["operation"] = self.operation
        return result


# =============================================================================
# Pipeline
# =============================================================================


def create_signature(payload: str | bytes, secret_key: str | bytes) -> str:
    """Hex HMAC-MD5 of ``payload`` keyed with ``secret_key``, required on every call."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    if isinstance(secret_key, str):
        secret_key = secret_key.encode("utf-8")
    return hmac.new(secret_key, payload, hashlib.md5).hexdigest()


def build_envelope(
    method: str,
    parameters: dict[str, Any] | None,
    public_key: str,
    session: Session,
) -> Envelope:
    """
    Assemble the request envelope for a method call.

    The session id is only sent once a session has been started. Method names
    and parameters are not validated; the service is the judge of both.
    """
    header = {"wsKey": public_key}
    if session.present:
        header["sessionID"] = session.session_id
    return Envelope(method=method, parameters=parameters, header=header)


def classify(raw: RawResponse) -> ServiceErrorReport | None:
    """
    Return the error report if the body describes a service-level error.

    Bodies that can't be read as ``{"errors": [{code, message}, ...]}``, or
    whose entries all have code 0, count as success. HTTP status is ignored.
    """
    try:
        data = json.loads(raw.body)
    except (json.JSONDecodeError, TypeError):
        return None

    if not isinstance(data, dict) or not isinstance(data.get("errors"), list):
        return None

    try:
        errors = [ErrorEntry.from_dict(item) for item in data["errors"]]
    except (AttributeError, TypeError, ValueError):
        return None

    if not any(e.code != 0 for e in errors):
        return None
    return ServiceErrorReport(errors=errors)


def decode(raw: RawResponse, result_type: type[T]) -> T:
    """
    Decode the ``result`` field of a successful response into ``result_type``.

    ``result_type`` is either a type with a ``from_dict`` classmethod, one of
    the JSON primitive types, or ``object`` to take the result as-is. Only call
    this once :func:`classify` has returned ``None``.

    Raises:
        DecodeError: If the body or its result does not fit ``result_type``

    """
    try:
        data = json.loads(raw.body)
    except (json.JSONDecodeError, TypeError) as e:
        raise DecodeError(f"Invalid JSON response: {e}", body=raw.body) from e

    if not isinstance(data, dict) or "result" not in data:
        raise DecodeError("Response has no result field", body=raw.body)
    result = data["result"]

    from_dict = getattr(result_type, "from_dict", None)
    if from_dict is not None:
        if not isinstance(result, dict):
            raise DecodeError(
                f"Expected an object for {result_type.__name__}, got {type(result).__name__}",
                body=raw.body,
            )
        try:
            return from_dict(result)
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Could not decode {result_type.__name__}: {e!r}", body=raw.body) from e

    if result_type is object:
        return result
    if result_type not in PRIMITIVE_TYPES:
        raise TypeError(f"Unsupported result type: {result_type!r}")

    # bool is an int subclass, but a JSON true is never a number
    if result_type is not bool and isinstance(result, bool):
        matches = False
    elif result_type is float:
        matches = isinstance(result, (int, float))
        result = float(result) if matches else result
    else:
        matches = isinstance(result, result_type)

    if not matches:
        raise DecodeError(
            f"Expected {result_type.__name__} result, got {type(result).__name__}",
            body=raw.body,
        )
    return result


# =============================================================================
# Client
# =============================================================================


class APIClient:
    """
    Low-level HTTP client for the Grooveshark API.

    Handles:
    - Credentials and the per-instance session
    - Signing and sending envelopes
    - Telling service errors apart from results

    A single instance is not safe for concurrent use while a session is being
    started; callers must serialize access themselves.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        api_host: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the API client.

        Args:
            api_key: Public key sent as wsKey (or GROOVESHARK_API_KEY env var)
            api_secret: Secret key used for signing (or GROOVESHARK_API_SECRET env var)
            api_host: API host (or GROOVESHARK_API_HOST env var)
            timeout: Request timeout in seconds

        """
        self.api_key = api_key or os.environ.get("GROOVESHARK_API_KEY")
        self.api_secret = api_secret or os.environ.get("GROOVESHARK_API_SECRET")
        self.api_host = (api_host or os.environ.get("GROOVESHARK_API_HOST") or DEFAULT_API_HOST).strip("/")
        self.timeout = timeout
        self.session = Session()

    def _ensure_credentials(self) -> Credentials:
        """Ensure both keys are configured."""
        if not self.api_key:
            raise ConfigurationError("GROOVESHARK_API_KEY environment variable not set")
        if not self.api_secret:
            raise ConfigurationError("GROOVESHARK_API_SECRET environment variable not set")
        return Credentials(public_key=self.api_key, secret_key=self.api_secret)

    def _build_url(self, signature: str, secure: bool) -> str:
        """Build the signed endpoint URL."""
        scheme = "https" if secure else "http"
        return f"{scheme}://{self.api_host}/{API_PATH}?sig={signature}"

    def send(self, envelope: Envelope, secure: bool = False, credentials: Credentials | None = None) -> RawResponse:
        """
        Sign and POST an envelope, returning the raw response.

        Args:
            envelope: Request envelope
            secure: Use https instead of http
            credentials: Keys to sign with (defaults to the client's own)

        Returns:
            RawResponse with HTTP status and body, whatever the status

        Raises:
            TransportError: On connection, timeout or read failures

        """
        credentials = credentials or self._ensure_credentials()

        payload = envelope.serialize()
        signature = create_signature(payload, credentials.secret_key)
        url = self._build_url(signature, secure)
        headers = {
            "Content-Type": CONTENT_TYPE,
            "User-Agent": USER_AGENT,
        }

        logger.debug(
            "POST %s | method=%s | secure=%s",
            url.split("?", 1)[0],
            envelope.method,
            secure,
        )

        try:
            req = urllib.request.Request(url, data=payload, headers=headers, method="POST")
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                raw = RawResponse(
                    status=response.status,
                    body=response.read().decode("utf-8", errors="replace"),
                )

        except urllib.error.HTTPError as e:
            # Status never decides the outcome, so keep the body
            try:
                body = e.read().decode("utf-8", errors="replace")
            except (OSError, http.client.HTTPException) as read_error:
                raise TransportError(f"Failed to read response body: {read_error}", cause=read_error) from read_error
            raw = RawResponse(status=e.code, body=body)

        except urllib.error.URLError as e:
            raise TransportError(f"Connection error: {e.reason}", cause=e) from e

        except TimeoutError as e:
            raise TransportError(f"Request timed out after {self.timeout} seconds", cause=e) from e

        except (OSError, http.client.HTTPException) as e:
            raise TransportError(f"Request failed: {e}", cause=e) from e

        logger.debug("Response %s | %d bytes | method=%s", raw.status, len(raw.body), envelope.method)
        return raw

    def call(
        self,
        method: str,
        parameters: dict[str, Any] | None = None,
        secure: bool = False,
        result_type: type[T] | None = None,
    ) -> T | None:
        """
        Call a remote method and decode its result.

        Args:
            method: Remote method name (e.g., getPlaylist)
            parameters: Method parameters
            secure: Send over https
            result_type: Type to decode the result into, or None to skip decoding

        Returns:
            Decoded result, or None if no result_type was given

        Raises:
            TransportError: On network failures
            ServiceError: If the service returned error entries
            DecodeError: If the result does not fit result_type

        """
        credentials = self._ensure_credentials()
        envelope = build_envelope(method, parameters, credentials.public_key, self.session)
        raw = self.send(envelope, secure=secure, credentials=credentials)

        report = classify(raw)
        if report is not None:
            logger.debug("Service error for %s: codes=%s", method, report.codes)
            raise ServiceError(report, status=raw.status)

        if result_type is None:
            return None
        return decode(raw, result_type)
