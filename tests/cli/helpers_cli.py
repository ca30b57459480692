import copy
from typing import Any
from consonant.errors import TransportError
from consonant.service import Service, Transport, urljoin

SERVICE_URL = "http://consonant.test"
SHA1 = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"

COMMIT = {
    'sha1': SHA1,
    'author': 'Ada',
    'author-date': '1418205011 +0000',
    'committer': 'Ada',
    'committer-date': '1418205011 +0000',
    'parents': [],
    'subject': 'Initial commit',
}

def default_documents() -> dict[str, Any]:
    return {
        'refs': {'master': {'type': 'branch', 'url-aliases': [], 'head': copy.deepcopy(COMMIT)}},
        f'commits/{SHA1}': copy.deepcopy(COMMIT),
        f'commits/{SHA1}/schema': {'name': 'people', 'classes': {'Person': {'properties': {
            'name': {'type': 'text'},
            'friends': {'type': 'list', 'elements': {'type': 'reference', 'class': 'Person'}, 'optional': True},
        }}}},
        f'commits/{SHA1}/objects': {'Person': [{'uuid': 'p-1', 'properties': {'name': 'Ada'}}]},
        f'commits/{SHA1}/classes/Person/objects': [{'uuid': 'p-1', 'properties': {'name': 'Ada'}}],
    }

class MemoryTransport(Transport):
    """Serves JSON documents keyed by url path and records submissions."""
    def __init__(self, documents:dict[str, Any]|None=None):
        self.documents = documents if documents is not None else default_documents()
        self.submissions:list[tuple[str, str, str]] = []

    async def fetch_json(self, url:str) -> Any:
        path = url[len(SERVICE_URL) + 1:]
        if path not in self.documents:
            raise TransportError(f"GET {url} failed with status 404", url, 404)
        return copy.deepcopy(self.documents[path])

    async def submit(self, url:str, body:str|bytes, content_type:str) -> Any:
        self.submissions.append((url, body, content_type))
        return {'sha1': 'f00d'}

def patch_service(monkeypatch, transport:MemoryTransport) -> None:
    import consonant.cli.cli as cli_module
    monkeypatch.setattr(cli_module, "create_service", lambda url: Service(url, transport))
