"""Fetcher factory and exports."""

from skyscrape.core.fetcher.base import HTMLFetcher
from skyscrape.core.fetcher.simple import SimpleFetcher
from skyscrape.core.fetcher.source import SourceFetcher, classify_error


def create_fetcher(fetcher_type: str = 'simple', **kwargs) -> HTMLFetcher:
    """Create an HTML fetcher.

    Args:
        fetcher_type: Type of fetcher. Only 'simple' ships with Skyscrape.
        **kwargs: Additional arguments for the fetcher

    Returns:
        HTMLFetcher instance

    """
    fetchers: dict[str, type[HTMLFetcher]] = {
        'simple': SimpleFetcher,
    }

    if fetcher_type not in fetchers:
        raise ValueError(f'Unknown fetcher type: {fetcher_type}. Choose from: {list(fetchers.keys())}')

    return fetchers[fetcher_type](**kwargs)


__all__ = ['HTMLFetcher', 'SimpleFetcher', 'SourceFetcher', 'classify_error', 'create_fetcher']
