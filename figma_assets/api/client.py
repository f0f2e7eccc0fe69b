"""
Async client for the Figma REST API, used to list the image assets of a file.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import aiohttp

from figma_assets.exceptions import AuthenticationError, ListingError
from figma_assets.models.assets import AssetRecord

log = logging.getLogger(__name__)

# Node types whose rendered image is worth exporting from a page
EXPORTABLE_NODE_TYPES = frozenset(
    {"FRAME", "COMPONENT", "COMPONENT_SET", "INSTANCE", "GROUP", "SECTION"}
)


class FigmaAPIClient:
    """
    Async client for the Figma REST API (v1).

    Only the read endpoints needed to enumerate nodes and request PNG renders
    are implemented.
    """

    BASE_URL = "https://api.figma.com/v1/"

    def __init__(self, token: str, file_key: str, scale: float = 1.0):
        """
        Initializes the API client.

        Args:
            token: Figma personal access token.
            file_key: Key of the design file, as found in its URL.
            scale: Render scale requested for every image (0.01 - 4).
        """
        self.token = token
        self.file_key = file_key
        self.scale = scale
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "X-Figma-Token": self.token,
                    "Accept-Encoding": "gzip, deflate, br",
                },
                timeout=aiohttp.ClientTimeout(total=120, connect=15, sock_read=90),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def api_call(self, endpoint: str, **params: Any) -> Dict[str, Any]:
        """
        Makes an authenticated GET request and returns the decoded JSON body.

        Raises:
            AuthenticationError: If the token is rejected.
            ListingError: For any other HTTP, transport or API-level failure.
        """
        await self._initialize_session()
        start_time = time.monotonic()
        try:
            async with self._session.get(self.BASE_URL + endpoint, params=params) as r:
                duration_ms = (time.monotonic() - start_time) * 1000
                log.debug(f"GET {endpoint} -> {r.status} ({duration_ms:.0f} ms)")

                if r.status == 403:
                    raise AuthenticationError(
                        "The Figma token was rejected or lacks access to this file."
                    )
                if r.status == 404:
                    raise ListingError(f"Figma file '{self.file_key}' was not found.")
                if r.status == 429:
                    retry_after = r.headers.get("Retry-After", "a while")
                    raise ListingError(
                        f"Figma API rate limit hit. Try again in {retry_after} seconds."
                    )

                r.raise_for_status()
                body = await r.json()
        except aiohttp.ClientResponseError as e:
            raise ListingError(
                f"Figma API request to '{endpoint}' failed: HTTP {e.status} {e.message}"
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ListingError(
                f"Could not reach the Figma API: {e or type(e).__name__}"
            ) from e
        except ValueError as e:
            raise ListingError(
                f"Figma API returned an unreadable response for '{endpoint}': {e}"
            ) from e

        if not isinstance(body, dict):
            raise ListingError("Unexpected response from the Figma API.")
        if body.get("err"):
            raise ListingError(f"Figma API error: {body['err']}")
        return body

    async def fetch_node_names(self, node_ids: List[str]) -> Dict[str, str]:
        """Resolves display names for explicit node ids, skipping unknown ids."""
        response = await self.api_call(
            f"files/{self.file_key}/nodes", ids=",".join(node_ids)
        )
        names = {}
        for node_id, node in (response.get("nodes") or {}).items():
            if not node:
                log.warning(f"[yellow]Node '{node_id}' does not exist in file.[/yellow]")
                continue
            document = node.get("document", {})
            names[node_id] = document.get("name") or node_id
        return names

    async def fetch_top_level_frames(self) -> Dict[str, str]:
        """Collects the top-level frames of every page in the file."""
        response = await self.api_call(f"files/{self.file_key}", depth=2)
        names = {}
        for page in response.get("document", {}).get("children", []):
            for child in page.get("children", []):
                if child.get("type") in EXPORTABLE_NODE_TYPES:
                    names[child["id"]] = child.get("name") or child["id"]
        return names

    async def fetch_image_urls(
        self, node_ids: List[str]
    ) -> Optional[Dict[str, Optional[str]]]:
        """Requests PNG renders; returns the id -> URL map (URL may be null)."""
        response = await self.api_call(
            f"images/{self.file_key}",
            ids=",".join(node_ids),
            format="png",
            scale=str(self.scale),
        )
        return response.get("images")

    async def fetch_assets(
        self, node_ids: Optional[List[str]] = None
    ) -> Optional[List[AssetRecord]]:
        """
        Lists the image assets of the file.

        Returns:
            One AssetRecord per node, or None if the file has nothing to render.
        """
        if node_ids:
            names = await self.fetch_node_names(node_ids)
        else:
            names = await self.fetch_top_level_frames()

        if not names:
            return None

        log.debug(f"Requesting renders for {len(names)} nodes.")
        images = await self.fetch_image_urls(list(names))
        if images is None:
            return None

        return [
            AssetRecord(id=node_id, name=name, url=images.get(node_id))
            for node_id, name in names.items()
        ]
