# src/webidcrawl/models/profile_model.py
from typing import List
from pydantic import BaseModel, Field


class ProfileDocument(BaseModel):
    """
    Shape-conformant view over one parsed WebID profile.

    Only IRI-valued issuers, knows, storage and images and literal names
    are kept; anything else in the document is ignored.
    """

    identifier: str = Field(..., min_length=1)
    issuers: List[str] = Field(default_factory=list)
    knows: List[str] = Field(default_factory=list)
    names: List[str] = Field(default_factory=list)
    schema_names: List[str] = Field(default_factory=list)
    storage: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    @property
    def has_issuer(self) -> bool:
        """A profile is accepted iff it names at least one OIDC issuer."""
        return len(self.issuers) > 0

    @property
    def has_neighbors(self) -> bool:
        return len(self.knows) > 0
