"""
Processing components for CineShelf.

Stateless workers applied to collection snapshots:
- Query Engine (search, genre filter, sort, pagination)
- Review Aggregator (review count and average rating)
- CSV Exporter
"""
