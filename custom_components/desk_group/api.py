"""API client for the desk group server."""

from __future__ import annotations

from http import HTTPStatus
import logging
import math
from typing import Any

from aiohttp import BasicAuth, ClientResponse, ClientSession, ClientTimeout
from aiohttp.client_exceptions import ClientError

from homeassistant.exceptions import HomeAssistantError

from .const import REQUEST_TIMEOUT

_LOGGER = logging.getLogger(__name__)

# API endpoints
ENDPOINT_GROUPS = "/groups"
ENDPOINT_DESKS = "/desks"
ENDPOINT_DESK_HEIGHT = "/desks/{desk_id}/height"


class DeskGroupApiError(HomeAssistantError):
    """Exception to indicate an API error occurred."""


class DeskGroupAuthError(DeskGroupApiError):
    """Exception to indicate the server rejected the credentials."""


class DeskGroupConnectionError(HomeAssistantError):
    """Exception to indicate a connection error occurred."""


class DeskGroupApiClient:
    """API client for the desk group server."""

    def __init__(
        self, session: ClientSession, base_url: str, username: str, password: str
    ) -> None:
        """Initialize the API client.

        Args:
            session: aiohttp session shared with Home Assistant
            base_url: Base URL of the desk group server
            username: Basic auth user name
            password: Basic auth password

        """
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._auth = BasicAuth(username, password)
        self._timeout = ClientTimeout(total=REQUEST_TIMEOUT)

    async def async_validate_connection(self) -> bool:
        """Test if we can reach the server with the configured credentials.

        Raises:
            DeskGroupAuthError: If the credentials are rejected
            DeskGroupConnectionError: If connection fails

        """
        await self.async_get_groups()
        return True

    async def async_get_groups(self) -> dict[str, list[str]]:
        """Get all desk groups.

        Returns:
            Member desk ids keyed by group id

        Raises:
            DeskGroupApiError: If API returns an error
            DeskGroupConnectionError: If connection fails

        """
        data = await self._async_get_json(ENDPOINT_GROUPS)
        if not isinstance(data, dict):
            raise DeskGroupApiError(f"Unexpected groups payload: {data!r}")
        groups: dict[str, list[str]] = {}
        for group_id, members in data.items():
            if not isinstance(members, list):
                raise DeskGroupApiError(
                    f"Unexpected members of group {group_id}: {members!r}"
                )
            groups[str(group_id)] = [str(desk_id) for desk_id in members]
        return groups

    async def async_get_desks(self) -> list[dict[str, Any]]:
        """Get all desks known to the server.

        Raises:
            DeskGroupApiError: If API returns an error
            DeskGroupConnectionError: If connection fails

        """
        data = await self._async_get_json(ENDPOINT_DESKS)
        if not isinstance(data, list) or not all(
            isinstance(desk, dict) for desk in data
        ):
            raise DeskGroupApiError(f"Unexpected desks payload: {data!r}")
        return data

    async def async_get_height(self, desk_id: str) -> float:
        """Get the current height of a desk.

        Raises:
            DeskGroupApiError: If API returns an error
            DeskGroupConnectionError: If connection fails

        """
        path = ENDPOINT_DESK_HEIGHT.format(desk_id=desk_id)
        data = await self._async_get_json(path)
        if (
            isinstance(data, bool)
            or not isinstance(data, (int, float))
            or not math.isfinite(data)
        ):
            raise DeskGroupApiError(f"Unexpected height for desk {desk_id}: {data!r}")
        return data

    async def async_set_height(self, path: str, height: int) -> None:
        """Ask the server to move a desk or group to a height.

        The server only accepts the command; the desk keeps moving after
        this returns.

        Args:
            path: Height endpoint of the desk or group
            height: Target height in server units

        Raises:
            DeskGroupApiError: If API returns an error
            DeskGroupConnectionError: If connection fails

        """
        _LOGGER.debug("Setting height of %s to %s", path, height)
        try:
            async with self._session.post(
                f"{self.base_url}{path}",
                data=str(height),
                auth=self._auth,
                timeout=self._timeout,
            ) as response:
                self._raise_for_status(response, path)
                if response.status != HTTPStatus.ACCEPTED:
                    raise DeskGroupApiError(
                        f"Height request for {path} returned status {response.status}"
                    )
        except (ClientError, TimeoutError) as err:
            raise DeskGroupConnectionError(
                f"Failed to connect to desk server: {err}"
            ) from err

    async def _async_get_json(self, path: str) -> Any:
        """Send a GET request and decode the JSON body."""
        try:
            async with self._session.get(
                f"{self.base_url}{path}",
                auth=self._auth,
                timeout=self._timeout,
            ) as response:
                self._raise_for_status(response, path)
                data = await response.json(content_type=None)
        except (ClientError, TimeoutError) as err:
            raise DeskGroupConnectionError(
                f"Failed to connect to desk server: {err}"
            ) from err
        except ValueError as err:
            raise DeskGroupApiError(
                f"Invalid response from desk server: {err}"
            ) from err
        else:
            return data

    @staticmethod
    def _raise_for_status(response: ClientResponse, path: str) -> None:
        """Map error statuses to API errors."""
        if response.status == HTTPStatus.UNAUTHORIZED:
            raise DeskGroupAuthError("Desk server rejected the credentials")
        if response.status >= HTTPStatus.BAD_REQUEST:
            raise DeskGroupApiError(
                f"Desk server returned status {response.status} for {path}"
            )
