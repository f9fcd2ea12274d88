"""Resolves logical weather fields to text using configured selectors."""

import logging

from bs4 import BeautifulSoup
from bs4.element import Tag

from skyscrape.models import SelectorConfig

HTML_PARSER = 'lxml'


def parse_html(html: str) -> BeautifulSoup:
    """Parse markup once so every field can be resolved against the same tree."""
    return BeautifulSoup(html, HTML_PARSER)


class SelectorResolver:
    """Extracts field text by trying each configured selector in order.

    Candidates come from ``FieldSelectors.as_tuples()``, so adding another
    tier only means adding a selector to the model.

    Attributes:
        config: Immutable selector configuration
        logger: Logger instance

    """

    def __init__(self, config: SelectorConfig):
        """Initialize the resolver.

        Args:
            config: Selector configuration shared with the health monitor

        """
        self.config = config
        self.logger = logging.getLogger(__name__)

    def resolve(self, field_name: str, soup: BeautifulSoup) -> str | None:
        """Resolve one logical field.

        Args:
            field_name: Logical field, e.g. 'temperature'
            soup: Parsed page

        Returns:
            Trimmed text of the first candidate that matches, or None.
            Never raises.

        """
        try:
            candidates = self.config[field_name].as_tuples()
        except KeyError:
            self.logger.warning(f'No selectors configured for {field_name}')
            return None

        # The first candidate that matches anything wins, even if its text is empty
        for level, selector in candidates:
            elements = self._select(soup, selector)
            if elements:
                self.logger.debug(f'{field_name}: resolved using {level} selector ({selector})')
                return self._element_text(elements)

        self.logger.info(f'{field_name}: no content found with any selector')
        return None

    def resolve_all(self, soup: BeautifulSoup) -> dict[str, str | None]:
        """Resolve every configured field against the same page."""
        return {field_name: self.resolve(field_name, soup) for field_name, _ in self.config.items()}

    @staticmethod
    def _element_text(elements: list[Tag]) -> str | None:
        """Join the trimmed text of all matched elements."""
        text = ' '.join(element.get_text(' ', strip=True) for element in elements).strip()
        return text or None

    def matches(self, soup: BeautifulSoup, selector: str | None) -> bool:
        """Check whether ``selector`` matches at least one element."""
        return bool(self._select(soup, selector))

    def _select(self, soup: BeautifulSoup, selector: str | None) -> list[Tag]:
        if not selector:
            return []
        try:
            return list(soup.select(selector))
        except Exception as e:
            # soupsieve raises SelectorSyntaxError (a ValueError subclass) and friends
            self.logger.warning(f'Invalid selector {selector!r}: {e}')
            return []
