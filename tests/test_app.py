import asyncio
import json

import pytest

from webidcrawl.config.settings import Settings
from webidcrawl.core.catalog import CatalogClient
from webidcrawl.exceptions import CorpusUnavailableError
from webidcrawl.main import CrawlerApp

from helpers import ISSUER, FakeFetcher, profile_ttl, webid


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    settings = Settings()
    settings.corpus.directory = tmp_path / "webids"
    settings.export.output_dir = tmp_path / "public"
    return settings


def run_app(app_settings, documents, seeds=()):
    fetcher = FakeFetcher(documents)
    app = CrawlerApp(
        settings=app_settings,
        seeds=seeds,
        fetcher=fetcher,
        catalog=CatalogClient(None),
    )
    summary = asyncio.run(app.run())
    return app, summary, fetcher


def test_cli_seed_crawl_persists_only_accepted(app_settings):
    a, b, c = webid("a"), webid("b"), webid("c")
    documents = {
        a: profile_ttl(knows=[b]),
        b: profile_ttl(issuer=ISSUER, knows=[a, c]),
    }

    app, summary, _ = run_app(app_settings, documents, seeds=[a])

    assert app.corpus.list_identifiers() == [b]
    assert summary.accepted == 1
    assert app.summary is summary


def test_resume_from_existing_corpus(app_settings):
    x = webid("x")
    body = profile_ttl(issuer=ISSUER)
    directory = app_settings.corpus.directory
    directory.mkdir(parents=True)
    entry = directory / "https%3A%2F%2Fx.example%2Fprofile%23me.ttl"
    entry.write_text(body)

    app, summary, fetcher = run_app(app_settings, {x: body})

    assert fetcher.calls == [x]
    assert entry.read_text() == body
    assert summary.accepted == 1
    assert app.corpus.list_identifiers() == [x]


def test_corpus_only_grows(app_settings):
    x, y, z = webid("x"), webid("y"), webid("z")
    documents = {
        x: profile_ttl(issuer=ISSUER, knows=[y]),
        y: profile_ttl(issuer=ISSUER, knows=[z]),
        z: profile_ttl(),
    }

    app, first, _ = run_app(app_settings, documents, seeds=[x])
    assert app.corpus.list_identifiers() == [x, y]

    # Same remote graph: nothing new, nothing removed
    app, second, fetcher = run_app(app_settings, documents)
    assert app.corpus.list_identifiers() == [x, y]
    assert second.accepted == first.accepted == 2
    assert sorted(fetcher.calls) == [x, y, z]

    # y disappears remotely but stays in the corpus
    del documents[y]
    app, third, _ = run_app(app_settings, documents)
    assert app.corpus.list_identifiers() == [x, y]
    assert third.accepted == 1
    assert third.fetch_failed == 1


def test_yaml_seeds_and_cli_seeds_are_combined(app_settings):
    app_settings.crawler_config.seeds = [webid("from-yaml")]
    documents = {
        webid("from-yaml"): profile_ttl(issuer=ISSUER),
        webid("from-cli"): profile_ttl(issuer=ISSUER),
    }

    _, summary, fetcher = run_app(app_settings, documents, seeds=[webid("from-cli")])

    assert fetcher.calls == [webid("from-yaml"), webid("from-cli")]
    assert summary.accepted == 2


def test_missing_corpus_aborts_when_not_created(app_settings):
    app_settings.corpus.create_if_missing = False
    with pytest.raises(CorpusUnavailableError):
        run_app(app_settings, {}, seeds=[webid("a")])


def test_export_after_crawl(app_settings):
    a = webid("a")
    documents = {a: profile_ttl(issuer=ISSUER, name="Alice")}
    app, _, _ = run_app(app_settings, documents, seeds=[a])

    report = asyncio.run(app.export())

    assert report.exported == 1
    document = json.loads(report.json_path.read_text())
    assert document["@graph"] == [
        {"@id": a, "foaf:name": ["Alice"], "solid:oidcIssuer": [ISSUER]}
    ]
    assert report.turtle_path.exists()
