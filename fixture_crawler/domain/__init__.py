"""Record contracts shared across stages."""
