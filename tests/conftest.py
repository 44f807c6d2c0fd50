import logfire
import pytest

from webidcrawl.storage.corpus import CorpusStore


logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def corpus(tmp_path) -> CorpusStore:
    store = CorpusStore(tmp_path / "webids")
    store.ensure_directory()
    return store
