import pytest

from crag_info.core.clients import graphql
from crag_info.core.scales import reset_scales


@pytest.fixture(autouse=True)
def _clean_state():
    yield
    reset_scales()
    graphql.set_client(None)


class FakeClient:
    """In-memory stand-in for the GraphQL client."""

    def __init__(self, data=None, error=None, fragments=None, fragment_error=None):
        self.data = data
        self.error = error
        self.fragments = fragments or {}
        self.fragment_error = fragment_error
        self.calls = []
        self.reads = []

    async def query(self, query, variables=None, fetch_policy="cache-first"):
        self.calls.append({"query": query, "variables": variables, "fetch_policy": fetch_policy})
        if self.error is not None:
            raise self.error
        return self.data

    def read_fragment(self, id):
        self.reads.append(id)
        if self.fragment_error is not None:
            raise self.fragment_error
        return self.fragments.get(id)


@pytest.fixture
def fake_client_factory():
    return FakeClient
