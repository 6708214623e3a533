"""
Field Extractors

One module per entity type. Each extractor is an ordered chain of pure
strategies over a parsed ``Document``; import them from their modules, e.g.:

    from fixture_crawler.data_collection.extractors.fixtures import extract_matches
"""

__all__ = []
