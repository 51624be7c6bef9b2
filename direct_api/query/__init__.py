"""Challenge query core: filter parsing, validation, compilation, enrichment.

Pipeline:
    parse_filter → FilterValidator → FilterCompiler → ChallengeBoundary
    → ResultEnricher
"""

from direct_api.query.filter_compiler import FilterCompiler, FilterRule
from direct_api.query.filter_parser import parse_filter
from direct_api.query.filter_validator import FilterValidator
from direct_api.query.lookup_resolver import LookupResolver
from direct_api.query.result_enricher import ResultEnricher

__all__ = [
    "FilterCompiler",
    "FilterRule",
    "FilterValidator",
    "LookupResolver",
    "ResultEnricher",
    "parse_filter",
]
