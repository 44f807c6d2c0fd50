import asyncio

import pytest

from webidcrawl.core.worker import ProfileWorker, next_depth
from webidcrawl.exceptions import CorpusWriteError
from webidcrawl.models.frontier_model import DepthResetPolicy, FrontierItem, ItemOutcome
from webidcrawl.storage.corpus import CorpusStore

from helpers import ISSUER, FakeFetcher, profile_ttl, webid


class ReadOnlyCorpus(CorpusStore):
    async def write(self, identifier, body):
        raise CorpusWriteError(f"read-only corpus: {identifier}")


@pytest.mark.parametrize(
    "depth, accepted, policy, expected",
    [
        (2, True, DepthResetPolicy.ACCEPTED_ONLY, 0),
        (0, False, DepthResetPolicy.ACCEPTED_ONLY, 1),
        (2, False, DepthResetPolicy.ACCEPTED_ONLY, 3),
        (2, False, DepthResetPolicy.ALWAYS, 0),
        (1, True, DepthResetPolicy.ALWAYS, 0),
    ],
)
def test_next_depth(depth, accepted, policy, expected):
    assert next_depth(depth, accepted, policy) == expected


def test_accepted_profile_is_persisted_and_resets_depth(corpus):
    me = webid("a")
    body = profile_ttl(issuer=ISSUER, knows=[webid("b"), webid("c")])
    worker = ProfileWorker(FakeFetcher({me: body}), corpus)

    result = asyncio.run(worker.process(FrontierItem(identifier=me, depth=2)))

    assert result.outcome == ItemOutcome.ACCEPTED
    assert result.persisted
    assert corpus.path_for(me).read_text() == body
    assert [(n.identifier, n.depth) for n in result.neighbors] == [
        (webid("b"), 0),
        (webid("c"), 0),
    ]


def test_ignored_profile_deepens_neighbors(corpus):
    me = webid("a")
    worker = ProfileWorker(FakeFetcher({me: profile_ttl(knows=[webid("b")])}), corpus)

    result = asyncio.run(worker.process(FrontierItem(identifier=me, depth=1)))

    assert result.outcome == ItemOutcome.IGNORED
    assert not result.persisted
    assert corpus.list_identifiers() == []
    assert [(n.identifier, n.depth) for n in result.neighbors] == [(webid("b"), 2)]


@pytest.mark.parametrize("issuer", [None, ISSUER])
def test_no_expansion_at_depth_ceiling(corpus, issuer):
    me = webid("a")
    worker = ProfileWorker(FakeFetcher({me: profile_ttl(issuer=issuer, knows=[webid("b")])}), corpus)

    result = asyncio.run(worker.process(FrontierItem(identifier=me, depth=3)))

    assert result.neighbors == []


def test_fetch_failure_is_local(corpus):
    worker = ProfileWorker(FakeFetcher({}), corpus)

    result = asyncio.run(worker.process(FrontierItem(identifier=webid("gone"))))

    assert result.outcome == ItemOutcome.FETCH_FAILED
    assert result.neighbors == []


def test_parse_failure_is_local(corpus):
    me = webid("a")
    worker = ProfileWorker(FakeFetcher({me: "<#me> not turtle at all"}), corpus)

    result = asyncio.run(worker.process(FrontierItem(identifier=me)))

    assert result.outcome == ItemOutcome.PARSE_FAILED
    assert result.neighbors == []
    assert corpus.list_identifiers() == []


def test_write_failure_still_counts_as_accepted(tmp_path):
    me = webid("a")
    corpus = ReadOnlyCorpus(tmp_path)
    worker = ProfileWorker(
        FakeFetcher({me: profile_ttl(issuer=ISSUER, knows=[webid("b")])}),
        corpus
    )

    result = asyncio.run(worker.process(FrontierItem(identifier=me, depth=1)))

    assert result.outcome == ItemOutcome.ACCEPTED
    assert not result.persisted
    assert [(n.identifier, n.depth) for n in result.neighbors] == [(webid("b"), 0)]


def test_custom_depth_ceiling(corpus):
    me = webid("a")
    worker = ProfileWorker(FakeFetcher({me: profile_ttl(knows=[webid("b")])}), corpus, max_depth=1)

    result = asyncio.run(worker.process(FrontierItem(identifier=me, depth=1)))

    assert result.neighbors == []
