from __future__ import annotations
import logging
import re
from typing import Any
from async_lru import alru_cache
from consonant.model import *
from consonant.transaction import CONTENT_TYPE
from . transport import Transport, HttpTransport

logger = logging.getLogger(__name__)

# Read access to a Consonant service, and submission of transactions.
#
# All methods are coroutines and all requests go through the service's Transport.
# Commits returned by a service remember the url of the service in 'service_url'.

_SLASHES_RE = re.compile(r"(^[\s/]+)|([\s/]+$)")

def urljoin(*segments:str) -> str:
    '''Joins url segments with single slashes, stripping whitespace and slashes around each segment.'''
    return "/".join(_SLASHES_RE.sub("", segment) for segment in segments)

def _sha1(commit:Commit|str) -> str:
    if isinstance(commit, Commit):
        return commit.sha1
    return commit

class Service:
    def __init__(self, url:str, transport:Transport|None=None):
        self.url = url
        self.transport = transport if transport is not None else HttpTransport()
        #commits are immutable, so is the schema of a commit. The raw JSON is cached per service and
        #parsed on every call, so callers never share a Schema.
        self._fetch_schema_json = alru_cache(maxsize=32)(self._load_schema_json)

    def _url(self, *segments:str) -> str:
        return urljoin(self.url, *segments)

    async def refs(self) -> dict[str, Ref]:
        data = await self.transport.fetch_json(self._url('refs'))
        return refs_from_json(data, self.url)

    async def ref(self, name:str) -> Ref:
        data = await self.transport.fetch_json(self._url('refs', name))
        return ref_from_json(data, self.url)

    async def commit(self, sha1:str) -> Commit:
        data = await self.transport.fetch_json(self._url('commits', sha1))
        return commit_from_json(data, self.url)

    async def name(self, commit:Commit|str) -> str:
        '''Name of the service as recorded in the given commit.'''
        return await self.transport.fetch_json(self._url('commits', _sha1(commit), 'name'))

    async def services(self, commit:Commit|str) -> list[str]:
        '''Service aliases recorded in the given commit.'''
        return await self.transport.fetch_json(self._url('commits', _sha1(commit), 'services'))

    async def schema(self, commit:Commit|str) -> Schema:
        data = await self._fetch_schema_json(_sha1(commit))
        return schema_from_json(data)

    async def _load_schema_json(self, sha1:str) -> Any:
        return await self.transport.fetch_json(self._url('commits', sha1, 'schema'))

    async def objects(self, commit:Commit|str, klass:str|None=None) -> dict[str, list[TypedObject]] | list[TypedObject]:
        '''All objects of a commit grouped by class name, or, if 'klass' is given, only the objects of that class.'''
        if klass is None:
            data = await self.transport.fetch_json(self._url('commits', _sha1(commit), 'objects'))
        else:
            data = await self.transport.fetch_json(self._url('commits', _sha1(commit), 'classes', klass, 'objects'))
        return objects_from_json(data, klass)

    async def object(self, commit:Commit|str, uuid:str) -> TypedObject:
        data = await self.transport.fetch_json(self._url('commits', _sha1(commit), 'objects', uuid))
        return object_from_json(data)

    async def submit_transaction(self, payload:str, content_type:str=CONTENT_TYPE) -> Any:
        return await self.transport.submit(self._url('transactions'), payload, content_type)

    async def close(self) -> None:
        self._fetch_schema_json.cache_clear()
        await self.transport.close()

    async def __aenter__(self) -> Service:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()
