import asyncio

import pytest

from webidcrawl.exceptions import CorpusEntryNotFound, CorpusReadError, CorpusUnavailableError, CorpusWriteError
from webidcrawl.storage.corpus import CorpusStore


def test_key_matches_encode_uri_component(corpus):
    identifier = "https://a.example/profile#me"
    key = corpus.key_for(identifier)

    assert key == "https%3A%2F%2Fa.example%2Fprofile%23me.ttl"
    assert corpus.identifier_for(key) == identifier


def test_key_keeps_unreserved_marks(corpus):
    identifier = "https://a.example/~bob/(card)!*'#i"
    assert corpus.key_for(identifier).startswith("https%3A%2F%2Fa.example%2F~bob%2F(card)!*'%23i")
    assert corpus.identifier_for(corpus.key_for(identifier)) == identifier


def test_list_identifiers_only_reads_suffix_files(corpus):
    (corpus.directory / corpus.key_for("https://b.example/#me")).write_text("b")
    (corpus.directory / corpus.key_for("https://a.example/#me")).write_text("a")
    (corpus.directory / "README.md").write_text("not a profile")

    assert corpus.list_identifiers() == ["https://a.example/#me", "https://b.example/#me"]


def test_list_identifiers_missing_directory(tmp_path):
    store = CorpusStore(tmp_path / "missing")
    with pytest.raises(CorpusUnavailableError):
        store.list_identifiers()


def test_write_overwrites_and_read_returns_bytes(corpus):
    identifier = "https://a.example/profile#me"

    asyncio.run(corpus.write(identifier, b"first"))
    path = asyncio.run(corpus.write(identifier, b"second"))

    assert path.read_bytes() == b"second"
    assert asyncio.run(corpus.read(identifier)) == b"second"
    assert identifier in corpus
    # No temp files left behind
    assert sorted(p.name for p in corpus.directory.iterdir()) == [corpus.key_for(identifier)]


def test_read_missing_entry(corpus):
    with pytest.raises(CorpusEntryNotFound):
        asyncio.run(corpus.read("https://nobody.example/#me"))


def test_unreadable_entry_raises_corpus_error(corpus):
    identifier = "https://dir.example/#me"
    corpus.path_for(identifier).mkdir()

    assert corpus.list_identifiers() == [identifier]
    with pytest.raises(CorpusReadError):
        asyncio.run(corpus.read(identifier))


def test_write_into_missing_directory(tmp_path):
    store = CorpusStore(tmp_path / "missing")
    with pytest.raises(CorpusWriteError):
        asyncio.run(store.write("https://a.example/#me", b"body"))
