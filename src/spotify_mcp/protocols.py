"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol


class TokenProvider(Protocol):
    """Protocol for access token providers."""

    async def get_valid_token(self) -> str:
        """Get a valid access token.

        Returns:
            Valid bearer token string.

        Raises:
            CredentialRenewalError: If a new token cannot be obtained.
        """
        ...
