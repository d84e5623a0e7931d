"""IOTA JSON-RPC ledger client using aiohttp."""

import asyncio
import itertools
import logging
from typing import Any

import aiohttp

from config.config_loader import LedgerConfig
from src.ledger.base import LedgerClient, LedgerQueryError, ObjectNotFoundError
from src.models import LedgerEvent, ObjectSnapshot

logger = logging.getLogger(__name__)

_MISSING_OBJECT_CODES = {"notExists", "deleted"}


class IotaRpcClient(LedgerClient):
    """Read-only client for an IOTA full node.

    Usage:
        async with IotaRpcClient(config) as client:
            events = await client.query_events(event_type, limit=50)
    """

    def __init__(self, config: LedgerConfig, session: aiohttp.ClientSession | None = None) -> None:
        self._config = config
        self._session = session
        self._owns_session = session is None
        self._request_ids = itertools.count(1)

    async def start(self) -> None:
        """Open the HTTP session (no-op when one was injected)."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._config.request_timeout_sec)
            )

    async def stop(self) -> None:
        """Close the HTTP session if this client opened it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "IotaRpcClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def _call(self, method: str, params: list[Any]) -> Any:
        if self._session is None:
            await self.start()
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        try:
            async with self._session.post(self._config.rpc_url, json=payload) as response:
                if response.status != 200:
                    raise LedgerQueryError(f"{method} failed: HTTP {response.status}")
                body = await response.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise LedgerQueryError(
                f"{method} timed out after {self._config.request_timeout_sec}s"
            ) from exc
        except aiohttp.ClientError as exc:
            raise LedgerQueryError(f"{method} transport error: {exc}") from exc
        except ValueError as exc:
            raise LedgerQueryError(f"{method} returned invalid JSON: {exc}") from exc

        if not isinstance(body, dict):
            raise LedgerQueryError(f"{method} returned a non-object body")
        if "error" in body:
            error = body["error"] or {}
            raise LedgerQueryError(f"{method} RPC error {error.get('code')}: {error.get('message')}")
        return body.get("result")

    async def query_events(self, event_type: str, limit: int) -> list[LedgerEvent]:
        result = await self._call(
            "iotax_queryEvents",
            [{"MoveEventType": event_type}, None, limit, False],
        )
        data = (result or {}).get("data") or []
        events = []
        for item in data:
            if not isinstance(item, dict):
                continue
            payload = item.get("parsedJson")
            if not isinstance(payload, dict):
                # Indexer drops the empty payload, not the whole query
                payload = {}
            events.append(LedgerEvent(event_type=event_type, payload=dict(payload)))
        logger.debug("Queried %d %s events", len(events), event_type)
        return events

    async def get_object(self, object_id: str) -> ObjectSnapshot:
        result = await self._call(
            "iota_getObject",
            [object_id, {"showContent": True, "showOwner": True}],
        )
        result = result or {}
        error = result.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else str(error)
            if code in _MISSING_OBJECT_CODES:
                raise ObjectNotFoundError(object_id, f"object {code}")
            raise LedgerQueryError(f"iota_getObject {object_id} error: {code}")

        data = result.get("data")
        if not data:
            raise ObjectNotFoundError(object_id)

        content = data.get("content") or {}
        if content.get("dataType") != "moveObject":
            return ObjectSnapshot(object_id=data.get("objectId", object_id), is_move_object=False)
        return ObjectSnapshot(
            object_id=data.get("objectId", object_id),
            fields=dict(content.get("fields") or {}),
        )
