# src/webidcrawl/core/parser.py
from typing import List, Optional, Type, Union
from rdflib import Graph, Literal, Namespace, URIRef
from rdflib.namespace import FOAF
from rdflib.term import Node

from ..exceptions import ParseError
from ..models.profile_model import ProfileDocument

SOLID = Namespace("http://www.w3.org/ns/solid/terms#")
PIM = Namespace("http://www.w3.org/ns/pim/space#")
SCHEMA = Namespace("https://schema.org/")

DEFAULT_FORMAT = "turtle"

# Media type -> rdflib parser name
RDF_FORMATS = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/ld+json": "json-ld",
    "application/json": "json-ld",
    "application/rdf+xml": "xml",
    "application/n-triples": "nt",
    "text/n3": "n3",
    "application/trig": "trig",
}


def _media_type(content_type: Optional[str]) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def _charset(content_type: Optional[str]) -> str:
    if content_type:
        for param in content_type.split(";")[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "charset" and value.strip():
                return value.strip().strip('"')
    return "utf-8"


def rdf_format_for(content_type: Optional[str]) -> str:
    """Pick the rdflib parser for a Content-Type, defaulting to Turtle."""
    return RDF_FORMATS.get(_media_type(content_type), DEFAULT_FORMAT)


def _values(graph: Graph, subject: URIRef, predicate: URIRef, kind: Type[Node]) -> List[str]:
    return sorted({str(o) for o in graph.objects(subject, predicate) if isinstance(o, kind)})


def parse_graph(
    body: Union[bytes, str],
    base_uri: str,
    content_type: Optional[str] = None
) -> Graph:
    """
    Parse a raw RDF document.

    Args:
        body: Document bytes (decoded with the Content-Type charset) or text
        base_uri: Base for resolving relative references
        content_type: Response Content-Type, selects the RDF syntax

    Returns:
        Parsed rdflib Graph

    Raises:
        ParseError: if the body cannot be decoded or parsed
    """
    try:
        text = body.decode(_charset(content_type)) if isinstance(body, bytes) else body
    except (LookupError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot decode document from {base_uri}: {e}") from e

    graph = Graph()
    try:
        graph.parse(data=text, format=rdf_format_for(content_type), publicID=base_uri)
    except Exception as e:
        raise ParseError(f"Cannot parse document from {base_uri}: {e}") from e
    return graph


def extract_profile(graph: Graph, subject: str) -> ProfileDocument:
    """Read the Solid profile shape of `subject` out of a parsed graph."""
    node = URIRef(subject)
    return ProfileDocument(
        identifier=subject,
        issuers=_values(graph, node, SOLID.oidcIssuer, URIRef),
        knows=_values(graph, node, FOAF.knows, URIRef),
        names=_values(graph, node, FOAF.name, Literal),
        schema_names=_values(graph, node, SCHEMA.name, Literal),
        storage=_values(graph, node, PIM.storage, URIRef),
        images=_values(graph, node, FOAF.img, URIRef),
    )


def parse_profile(
    body: Union[bytes, str],
    base_uri: str,
    subject: Optional[str] = None,
    content_type: Optional[str] = None
) -> ProfileDocument:
    """
    Parse a profile document and extract its shape-conformant fields.

    Args:
        body: Raw document
        base_uri: Base for relative references (final fetched URL)
        subject: WebID whose properties are read, defaults to base_uri
        content_type: Response Content-Type

    Returns:
        ProfileDocument for the subject
    """
    graph = parse_graph(body, base_uri, content_type)
    return extract_profile(graph, subject or base_uri)


def to_turtle(body: bytes, graph: Graph, content_type: Optional[str] = None) -> bytes:
    """
    Corpus form of a fetched document.

    UTF-8 Turtle is kept byte for byte; any other syntax or charset is
    re-serialized from the parsed graph as UTF-8 Turtle.
    """
    if rdf_format_for(content_type) == DEFAULT_FORMAT and _charset(content_type).lower() in ("utf-8", "utf8"):
        return body
    return graph.serialize(format="turtle", encoding="utf-8")
