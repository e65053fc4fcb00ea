"""
SkiLookup: monthly snow-condition rankings for alpine ski regions.

Pipeline:
- data: CSV ingestion, column normalisation and date/season/region filters
- snow: daily new-snow derivation from snow-depth readings
- scoring: metric registry, weight resolution and weighted min-max scoring
- reporting: monthly overview, ranking, leaderboards and region details
"""

__version__ = "0.3.0"
