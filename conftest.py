import pytest
from prometheus_client import CollectorRegistry

# Import lazily inside fixtures so collection does not depend on the
# package being importable from a particular working directory.


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    from filetrie.metrics import create_metrics

    return create_metrics(registry)


@pytest.fixture
def make_trie(tmp_path, metrics):
    """Factory for stores below tmp_path sharing one private registry."""
    from filetrie.store import FileTrie

    opened = []

    def _make(name="store", **kwargs):
        kwargs.setdefault("metrics", metrics)
        trie = FileTrie(tmp_path / name, **kwargs)
        opened.append(trie)
        return trie

    yield _make
    for trie in opened:
        trie.close()


@pytest.fixture
def trie(make_trie):
    return make_trie()


@pytest.fixture
def contacts(trie):
    """The sample contact list used throughout the docs."""
    trie.insert("John Doe", "john@doe.com")
    trie.insert("JohnDoe", "aasdf@acme.com")
    trie.insert("John Smith", "j0hn@smith.com")
    trie.insert("John Smith", "j0hn@smith.com")
    trie.insert("Jane", "j4ne@acme.com")
    trie.insert("Ihave Novalue", None)
    trie.insert("Little-Bobby-Tables", "xkcd@bobbytables.com")
    trie.insert("Harry S. Truman", "trumanh@whitehouse.gov")
    return trie
