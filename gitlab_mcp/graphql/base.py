"""Abstract base for GraphQL client handles."""

from abc import ABC, abstractmethod


class ClientHandle(ABC):
    """A reusable GraphQL client bound to exactly one credential.

    Handles are built by the client cache and shared by every caller using
    the same credential identity. Building one must not touch the network.
    """

    endpoint: str

    @abstractmethod
    async def request(self, query: str, variables: dict | None = None) -> dict:
        """Run a query or mutation.

        Args:
            query: GraphQL document text.
            variables: Optional variables for the document.

        Returns:
            The decoded ``data`` object of the GraphQL response.

        Raises:
            RequestError: On transport, timeout, HTTP or GraphQL errors.
        """
        ...

    async def close(self) -> None:
        """Cleanup resources. Override if the handle holds connections."""
        pass
