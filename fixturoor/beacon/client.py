"""Remote Beacon API client used to collect light-client data."""

import logging
from typing import Optional, Type

import aiohttp

from .exceptions import BeaconAPIError, BlockNotFoundError, StateNotFoundError

logger = logging.getLogger(__name__)

CONSENSUS_VERSION_HEADER = "Eth-Consensus-Version"


class RemoteBeaconClient:
    """Client for a remote Beacon API (any conformant client)."""

    def __init__(self, base_url: str, timeout: float = 60.0, state_timeout: float = 300.0):
        self.base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._state_timeout = aiohttp.ClientTimeout(total=state_timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _get_json(
        self,
        path: str,
        params: Optional[dict] = None,
        not_found: Optional[Type[BeaconAPIError]] = None,
    ):
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} params={params}")

        async with session.get(
            url,
            params=params,
            headers={"Accept": "application/json"},
        ) as response:
            if response.status == 404 and not_found is not None:
                raise not_found(f"Not found: {path}")
            if response.status != 200:
                text = await response.text()
                raise BeaconAPIError(response.status, text)
            return await response.json()

    async def _get_ssz(
        self,
        path: str,
        not_found: Type[BeaconAPIError],
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> tuple[str, bytes]:
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} (ssz)")

        async with session.get(
            url,
            headers={"Accept": "application/octet-stream"},
            timeout=timeout or self._timeout,
        ) as response:
            if response.status == 404:
                raise not_found(f"Not found: {path}")
            if response.status != 200:
                text = await response.text()
                raise BeaconAPIError(response.status, text)
            fork = response.headers.get(CONSENSUS_VERSION_HEADER, "").lower()
            return fork, await response.read()

    async def get_block(self, block_id: str) -> tuple[str, bytes]:
        """Fetch a signed block as SSZ bytes, with its fork name."""
        return await self._get_ssz(f"/eth/v2/beacon/blocks/{block_id}", BlockNotFoundError)

    async def get_state(self, state_id: str) -> tuple[str, bytes]:
        """Fetch beacon state as SSZ bytes, with its fork name."""
        return await self._get_ssz(
            f"/eth/v2/debug/beacon/states/{state_id}",
            StateNotFoundError,
            timeout=self._state_timeout,
        )

    async def get_finality_checkpoints(self, state_id: str) -> dict:
        """Get finality checkpoints for a state."""
        data = await self._get_json(
            f"/eth/v1/beacon/states/{state_id}/finality_checkpoints",
            not_found=StateNotFoundError,
        )
        return data.get("data", {})

    async def get_genesis(self) -> dict:
        """Get genesis information."""
        data = await self._get_json("/eth/v1/beacon/genesis")
        return data.get("data", {})

    async def get_light_client_bootstrap(self, block_root: str) -> dict:
        data = await self._get_json(
            f"/eth/v1/beacon/light_client/bootstrap/{block_root}",
            not_found=BlockNotFoundError,
        )
        return data.get("data", {})

    async def get_light_client_updates(self, start_period: int, count: int = 1) -> list[dict]:
        """Get sync committee period updates, oldest first."""
        data = await self._get_json(
            "/eth/v1/beacon/light_client/updates",
            params={"start_period": str(start_period), "count": str(count)},
        )
        return [item.get("data", {}) for item in data]

    async def get_light_client_finality_update(self) -> dict:
        data = await self._get_json("/eth/v1/beacon/light_client/finality_update")
        return data.get("data", {})

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
