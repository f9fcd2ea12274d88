"""Pydantic models for the selector configuration."""

from pydantic import BaseModel, ConfigDict, Field

# Logical fields, in extraction order
FIELD_NAMES: tuple[str, ...] = (
    'temperature',
    'min_max_temperature',
    'humidity_pressure',
    'condition',
    'date',
)

REQUIRED_FIELDS: tuple[str, ...] = ('temperature', 'condition')

DEFAULT_FALLBACK_SELECTORS: dict[str, str] = {
    'temperature': '.temp-fallback',
    'min_max_temperature': '.min-max-temp-fallback',
    'humidity_pressure': '.humidity-pressure-fallback',
    'condition': '.condition-fallback',
    'date': '.date-fallback',
}


class FieldSelectors(BaseModel):
    """Selectors for a single field with a fallback option.

    Attributes:
        primary: Selector configured for the current upstream markup
        fallback: Generic selector tried when the primary matches nothing

    """

    model_config = ConfigDict(frozen=True)

    primary: str = Field(description='Selector for the current upstream markup')
    fallback: str | None = Field(default=None, description='Generic fallback selector')

    def as_tuples(self) -> list[tuple[str, str | None]]:
        """Return selectors as an ordered list of (level, selector) candidates."""
        return [
            ('primary', self.primary),
            ('fallback', self.fallback),
        ]


class SelectorConfig(BaseModel):
    """Complete, immutable set of selectors for the weather page.

    Attributes:
        temperature: Selectors for the current temperature
        min_max_temperature: Selectors for the combined min/max temperature blob
        humidity_pressure: Selectors for the combined humidity/pressure blob
        condition: Selectors for the condition text (e.g. "Sunny")
        date: Selectors for the observation date

    """

    model_config = ConfigDict(frozen=True)

    temperature: FieldSelectors
    min_max_temperature: FieldSelectors
    humidity_pressure: FieldSelectors
    condition: FieldSelectors
    date: FieldSelectors

    def __getitem__(self, field_name: str) -> FieldSelectors:
        if field_name not in FIELD_NAMES:
            raise KeyError(field_name)
        return getattr(self, field_name)

    def items(self) -> list[tuple[str, FieldSelectors]]:
        """Return (field name, selectors) pairs in extraction order."""
        return [(name, self[name]) for name in FIELD_NAMES]

    @classmethod
    def from_primary(cls, primary: dict[str, str], fallback: dict[str, str] | None = None) -> 'SelectorConfig':
        """Build a config from primary selectors, filling in default fallbacks.

        Args:
            primary: Field name to primary selector
            fallback: Optional field name to fallback selector overrides

        Returns:
            A frozen SelectorConfig

        """
        fallbacks = {**DEFAULT_FALLBACK_SELECTORS, **(fallback or {})}
        return cls(
            **{name: FieldSelectors(primary=primary[name], fallback=fallbacks.get(name)) for name in FIELD_NAMES}
        )
