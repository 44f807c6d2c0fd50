# src/webidcrawl/export/profiles.py
"""Compact the corpus into profiles.json (JSON-LD) and profiles.ttl."""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional
import logfire
from pydantic import BaseModel
from rdflib import Graph, URIRef
from rdflib.namespace import FOAF

from ..exceptions import WebIdCrawlError
from ..storage.corpus import CorpusStore
from ..core.parser import PIM, SCHEMA, SOLID, extract_profile, parse_graph

PREFIXES = {
    'foaf': str(FOAF),
    'solid': str(SOLID),
    'pim': str(PIM),
    'schema': str(SCHEMA),
    'xsd': 'http://www.w3.org/2001/XMLSchema#',
}

CONTEXT: Dict[str, Any] = {
    **PREFIXES,
    'foaf:name': {'@id': str(FOAF.name), '@type': 'xsd:string'},
    'schema:name': {'@id': str(SCHEMA.name), '@type': 'xsd:string'},
    'foaf:knows': {'@id': str(FOAF.knows), '@type': '@id'},
    'solid:oidcIssuer': {'@id': str(SOLID.oidcIssuer), '@type': '@id'},
    'pim:storage': {'@id': str(PIM.storage), '@type': '@id'},
    'foaf:img': {'@id': str(FOAF.img), '@type': '@id'},
}


class ExportReport(BaseModel):
    exported: int = 0
    skipped: int = 0
    errors: int = 0
    json_path: Optional[Path] = None
    turtle_path: Optional[Path] = None


def profile_entry(graph: Graph, identifier: str) -> Dict[str, Any]:
    """Compact JSON-LD node for one profile; only `@id` when nothing conforms."""
    profile = extract_profile(graph, identifier)
    entry: Dict[str, Any] = {'@id': identifier}

    if profile.names:
        entry['foaf:name'] = profile.names
    if profile.schema_names:
        entry['schema:name'] = profile.schema_names
    if profile.issuers:
        entry['solid:oidcIssuer'] = profile.issuers
    if profile.storage:
        entry['pim:storage'] = profile.storage

    # Images are kept only when every value is an IRI
    images = list(graph.objects(URIRef(identifier), FOAF.img))
    if images and all(isinstance(image, URIRef) for image in images):
        entry['foaf:img'] = profile.images

    return entry


class ProfileExporter:
    """Reads every corpus entry and writes the compacted profile collection."""

    def __init__(self, corpus: CorpusStore, output_dir: Path):
        self.corpus = corpus
        self.output_dir = Path(output_dir)
        self.logger = logfire

    async def collect(self, report: ExportReport) -> List[Dict[str, Any]]:
        identifiers = self.corpus.list_identifiers()
        self.logger.info("Found WebID profiles to process", count=len(identifiers))

        profiles = []
        for identifier in identifiers:
            try:
                body = await self.corpus.read(identifier)
                graph = parse_graph(body, base_uri=identifier)
                entry = profile_entry(graph, identifier)
            except WebIdCrawlError as e:
                report.errors += 1
                self.logger.error("Error processing profile", url=identifier, error=str(e))
                continue

            if len(entry) > 1:
                profiles.append(entry)
                report.exported += 1
            else:
                report.skipped += 1
        return profiles

    async def export(self) -> ExportReport:
        """
        Write profiles.json and profiles.ttl into the output directory.

        Returns:
            ExportReport with counts and output paths
        """
        with logfire.span('export'):
            report = ExportReport()
            document = {'@context': CONTEXT, '@graph': await self.collect(report)}

            self.output_dir.mkdir(parents=True, exist_ok=True)
            report.json_path = self.output_dir / 'profiles.json'
            report.json_path.write_text(json.dumps(document, indent=2), encoding='utf-8')

            graph = Graph()
            for prefix, namespace in PREFIXES.items():
                graph.bind(prefix, namespace, replace=True)
            graph.parse(data=json.dumps(document), format='json-ld')
            report.turtle_path = self.output_dir / 'profiles.ttl'
            report.turtle_path.write_text(graph.serialize(format='turtle'), encoding='utf-8')

            self.logger.info(
                "Data preparation complete",
                exported=report.exported,
                skipped=report.skipped,
                errors=report.errors,
                output=str(report.json_path)
            )
            return report
