from abc import ABC, abstractmethod
import logging
from typing import Any
import httpx
from consonant.errors import TransportError

logger = logging.getLogger(__name__)

class Transport(ABC):
    """Interface for talking to a Consonant service over the network.

    Implementations raise `TransportError` for anything that goes wrong, including timeouts.
    """
    @abstractmethod
    async def fetch_json(self, url:str) -> Any:
        pass

    @abstractmethod
    async def submit(self, url:str, body:str|bytes, content_type:str) -> Any:
        pass

    async def close(self) -> None:  # noqa: B027
        pass

class HttpTransport(Transport):
    """Transport that uses an httpx.AsyncClient. A client can be passed in, otherwise one is created."""
    def __init__(self, timeout:float=10.0, headers:dict[str, str]|None=None, client:httpx.AsyncClient|None=None):
        super().__init__()
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=timeout, headers=headers)
        self._client = client

    async def fetch_json(self, url:str) -> Any:
        logger.debug(f"GET {url}")
        try:
            response = await self._client.get(url, headers={'Accept': 'application/json'})
        except httpx.HTTPError as e:
            logger.error(f"GET {url} failed: {e}")
            raise TransportError(f"GET {url} failed: {e}", url) from e
        return self._read_json(response, "GET", url)

    async def submit(self, url:str, body:str|bytes, content_type:str) -> Any:
        logger.debug(f"POST {url} ({content_type})")
        if isinstance(body, str):
            body = body.encode('utf-8')
        try:
            response = await self._client.post(url, content=body, headers={'Content-Type': content_type, 'Accept': 'application/json'})
        except httpx.HTTPError as e:
            logger.error(f"POST {url} failed: {e}")
            raise TransportError(f"POST {url} failed: {e}", url) from e
        return self._read_json(response, "POST", url)

    def _read_json(self, response:httpx.Response, method:str, url:str) -> Any:
        if response.is_error:
            logger.error(f"{method} {url} failed with status {response.status_code}")
            raise TransportError(f"{method} {url} failed with status {response.status_code}: {response.text}", url, response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{method} {url} did not return valid JSON", url, response.status_code) from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
