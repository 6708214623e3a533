"""
Applications Package

Command-line entry points for the crawler.
"""
