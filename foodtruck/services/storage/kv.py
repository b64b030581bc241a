"""
Vercel KV / Upstash REST Order Store

Production store. Talks to the Upstash Redis REST API that backs Vercel
KV, keeping the full order collection as one JSON array under a single
key. Data written by the original @vercel/kv deployment is read as is.

Requirements:
    - KV_REST_API_URL and KV_REST_API_TOKEN, or
    - KV_URL (rediss://default:<token>@<host>:<port>)

API Documentation:
    https://upstash.com/docs/redis/features/restapi
"""

import json
import logging
from typing import Any, Optional

import httpx

from foodtruck.services.storage.base import (
    CollectionOrderStore,
    Order,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(__name__)


class KVRestOrderStore(CollectionOrderStore):
    """
    Whole-collection store on the Upstash REST API.

    Commands map to single HTTP calls:
        GET  /get/<key>   -> {"result": "<json array>" | null}
        POST /set/<key>   body is the JSON array -> {"result": "OK"}
        GET  /ping        -> {"result": "PONG"}

    Example:
        >>> store = KVRestOrderStore("https://eu1-example.upstash.io", "token")
        >>> orders = await store.list_orders()
    """

    def __init__(
        self,
        rest_url: str,
        token: str,
        key: str = "food-truck-orders",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the REST client.

        Args:
            rest_url: KV REST endpoint
            token: Bearer token for the endpoint
            key: Key holding the order collection
            timeout: Per-request timeout in seconds
            transport: Alternative httpx transport (tests)
        """
        self.key = key
        self._client = httpx.AsyncClient(
            base_url=rest_url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

        logger.info(f"KVRestOrderStore initialized (key={key})")

    @property
    def provider_name(self) -> str:
        return "kv"

    @property
    def display_name(self) -> str:
        return "Vercel KV"

    async def close(self) -> None:
        await self._client.aclose()

    async def _command(self, method: str, path: str, content: Optional[str] = None) -> Any:
        """
        Run one REST command and return its result field.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx answers
            ValueError: If the answer is not a JSON object with a result
        """
        response = await self._client.request(method, path, content=content)
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, dict) or "result" not in body:
            raise ValueError(f"Unexpected KV response: {body!r}")
        return body["result"]

    async def read_collection(self) -> list[Order]:
        try:
            result = await self._command("GET", f"/get/{self.key}")
            if result is None:
                return []
            orders = json.loads(result) if isinstance(result, str) else result
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error reading orders from KV: {e}")
            raise StoreReadError("Failed to read orders from KV", e)

        if not isinstance(orders, list):
            raise StoreReadError(f"KV key {self.key!r} does not hold a list")
        return orders

    async def write_collection(self, orders: list[Order]) -> None:
        try:
            await self._command("POST", f"/set/{self.key}", content=json.dumps(orders))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error writing orders to KV: {e}")
            raise StoreWriteError("Failed to write orders to KV", e)

    async def health_check(self) -> bool:
        try:
            return await self._command("GET", "/ping") == "PONG"
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"KV health check failed: {e}")
            return False
