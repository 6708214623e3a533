"""
Fixture Crawler
Staged crawler for league search, team selection and draw/roster extraction
"""

__version__ = "1.0.0"

# NOTE:
# Avoid importing heavy modules (playwright, configuration) at package import
# time so that "import fixture_crawler" stays side-effect free for unit tests
# that only need the extractors or the normalizer.

__all__ = []
