"""Domain types and pure helpers for path handling and search patterns."""

from .models import FileSpec
from .paths import normalize_path
from .search_criteria import GlobPattern, SearchCriteria, get_search_criteria

__all__ = [
    "FileSpec",
    "GlobPattern",
    "SearchCriteria",
    "get_search_criteria",
    "normalize_path",
]
