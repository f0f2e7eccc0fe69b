"""
Handles the low-level downloading of rendered images over HTTP.
"""

import asyncio
import logging
import os

import aiofiles
import aiohttp

from figma_assets.exceptions import TransportError

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool() -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for downloads.

    This function ensures that only one connection pool is created for the
    lifetime of the application run. The connector is left unbounded so that
    every download in a batch can be in flight at once.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=0,
            ttl_dns_cache=600,  # 10 minutes
            keepalive_timeout=30,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        _connection_pool = aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={
                "Accept-Encoding": "gzip, deflate, br",
            },
        )
        log.debug("Created unbounded download pool.")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


class Downloader:
    """A low-level file downloader. Failed transfers are not retried."""

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(self, session: aiohttp.ClientSession | None = None):
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None:
            return self._session
        return await get_connection_pool()

    async def download_file(self, url: str, destination_path: str) -> int:
        """
        Streams `url` into `destination_path`, creating or truncating the file.

        Returns:
            The number of bytes written.

        Raises:
            TransportError: If the request fails or the file cannot be written.
        """
        name = os.path.basename(destination_path)
        try:
            session = await self._get_session()
            async with session.get(url, allow_redirects=True) as response:
                response.raise_for_status()
                bytes_written = 0
                async with aiofiles.open(destination_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
                        bytes_written += len(chunk)
        except aiohttp.ClientResponseError as e:
            raise TransportError(
                f"HTTP {e.status} while fetching '{name}': {e.message}"
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(
                f"Network error while fetching '{name}': {e or type(e).__name__}"
            ) from e
        except OSError as e:
            raise TransportError(f"Could not write '{destination_path}': {e}") from e

        log.debug(f"Wrote {bytes_written} bytes to '{name}'.")
        return bytes_written
