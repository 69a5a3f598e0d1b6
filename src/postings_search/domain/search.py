"""Domain models describing an evaluated AND query.

Value objects are immutable (frozen=True) so a response handed to one caller
can be shared safely with others reading the same index.
"""

from pydantic import BaseModel, ConfigDict, Field


class AnalyzedQuery(BaseModel):
    """Value object for a query after tokenization and index lookup.

    ``terms`` keeps the distinct query terms in the order the analyzer
    produced them; every term lands in exactly one of ``matched_terms`` or
    ``missing_terms``.
    """

    model_config = ConfigDict(frozen=True)

    original_text: str
    terms: list[str] = Field(default_factory=list)
    matched_terms: list[str] = Field(default_factory=list)
    missing_terms: list[str] = Field(default_factory=list)

    @property
    def has_missing_terms(self) -> bool:
        return bool(self.missing_terms)


class SearchStats(BaseModel):
    """Performance and debug information for one query evaluation."""

    model_config = ConfigDict(frozen=True)

    missing_term_policy: str
    postings_sizes: list[int] = Field(default_factory=list, description="Postings lengths in evaluation order")
    result_count: int
    search_time: float


class SearchResponse(BaseModel):
    """Ascending document ids matching every query term, plus how they were found."""

    model_config = ConfigDict(frozen=True)

    query: AnalyzedQuery
    doc_ids: list[int]
    stats: SearchStats | None = None

    @property
    def is_empty(self) -> bool:
        return not self.doc_ids
