"""Search index construction and querying."""

from .index import SearchIndex
from .indexer import SearchIndexBuilder, tokenize

__all__ = ["SearchIndex", "SearchIndexBuilder", "tokenize"]
