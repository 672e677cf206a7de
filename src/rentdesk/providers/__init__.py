"""Remote backend providers module."""

from rentdesk.providers.api_client import PropertyApiClient
from rentdesk.providers.http_client import HttpPropertyApiClient
from rentdesk.providers.stub_provider import StubPropertyApiClient
from rentdesk.providers.token_store import TokenStore, MemoryTokenStore, FileTokenStore

__all__ = [
    "PropertyApiClient",
    "HttpPropertyApiClient",
    "StubPropertyApiClient",
    "TokenStore",
    "MemoryTokenStore",
    "FileTokenStore",
]
