"""
Exception hierarchy for nnsresolver.

All package-specific exceptions inherit from NNSError for easy catching.

A name that simply has no address record is NOT an exception: resolution
methods return None for that case. Only the conditions below are raised.
"""

from __future__ import annotations

from typing import Any


class NNSError(Exception):
    """
    Base exception for all nnsresolver errors.

    Example:
        >>> try:
        ...     await client.resolve("nex:alice.nex")
        ... except NNSError as e:
        ...     print(f"Resolution failed: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(NNSError):
    """
    Configuration is missing or invalid.

    Raised when:
    - No RPC endpoint is configured
    - A contract address in the configuration is not an address literal
    - A registrar query is made without a registrar address
    """

    pass


class InvalidNameError(NNSError):
    """
    Input name or address is malformed.

    Raised when:
    - A name does not carry the naming-protocol suffix
    - A name is empty after stripping the suffix
    - A value passed as an address is not an address literal

    Never recovered inside the resolution pipeline.
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.name = name


class TransportError(NNSError):
    """
    The RPC endpoint could not be reached.

    Raised when:
    - The HTTP request fails (connection error, timeout)
    - The endpoint answers with a non-2xx status

    Inside the fallback pipeline this is treated as a zero result.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code

    def is_timeout(self) -> bool:
        """Check if this error came from a transport timeout."""
        return bool(self.details.get("timeout"))

    def is_server_error(self) -> bool:
        """Check if this is a server-side error."""
        return self.status_code is not None and 500 <= self.status_code < 600


class RemoteError(NNSError):
    """
    The endpoint answered with a JSON-RPC error payload.

    Raised when:
    - The call reverted
    - The node rejected the request (bad params, rate limit, ...)

    Inside the fallback pipeline this is treated as a zero result.
    """

    def __init__(
        self,
        message: str,
        code: int | None = None,
        data: Any = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.code = code
        self.data = data
        self.url = url

    def __str__(self) -> str:
        if self.code is not None:
            return f"[rpc:{self.code}] {self.message}"
        return f"[rpc] {self.message}"


class MalformedResponseError(NNSError):
    """
    Response bytes do not fit the expected shape.

    Raised when:
    - The result is not valid hex
    - A word is shorter than 32 bytes
    - A dynamic string offset or length points outside the payload
    - The HTTP body is not a JSON-RPC envelope

    Never recovered inside the resolution pipeline: it signals a protocol
    mismatch, not a transient condition.
    """

    def __init__(
        self,
        message: str,
        raw: str | bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.raw = raw
