import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from .error_handling import RemoteCommandError

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

class CommandChannel(ABC):
    """Sends one named command to the remote authority and returns its result"""
    @abstractmethod
    async def issue(self, route: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...

class HttpCommandChannel(CommandChannel):
    """
    POSTs commands as JSON to {base_url}/{route}.

    Replies use the envelope {"type": "success", "data": {...}} or
    {"type": "error", "message": ..., "details": {...}}; the data part is
    returned, errors are raised as RemoteCommandError.
    """
    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: "Settings", client: Optional[httpx.AsyncClient] = None) -> "HttpCommandChannel":
        return cls(settings.base_url, timeout=settings.timeout, client=client)

    async def issue(self, route: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{route}"
        logger.debug("Issuing %s", url)

        try:
            response = await self.client.post(url, json=body)
        except httpx.HTTPError as e:
            raise RemoteCommandError(f"Request to {route} failed: {e}", {"route": route}) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("type") == "error":
            raise RemoteCommandError(
                payload.get("message", f"Command {route} failed"),
                {"route": route, "status": response.status_code, **payload.get("details", {})}
            )

        if response.is_error or not isinstance(payload, dict):
            raise RemoteCommandError(
                f"Command {route} failed with status {response.status_code}",
                {"route": route, "status": response.status_code}
            )

        return payload.get("data", {})

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
