"""Selector resolution."""

from skyscrape.core.extraction.resolver import SelectorResolver, parse_html

__all__ = ['SelectorResolver', 'parse_html']
