"""Shared helpers: parsing, logging and the Playwright renderer."""
