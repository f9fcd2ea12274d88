from skyscrape.core.extraction import SelectorResolver, parse_html
from skyscrape.models import SelectorConfig


def make_resolver(**primary_overrides):
    primary = {
        'temperature': '.temp',
        'min_max_temperature': '.minmax',
        'humidity_pressure': '.hp',
        'condition': '.cond',
        'date': '.date',
        **primary_overrides,
    }
    return SelectorResolver(SelectorConfig.from_primary(primary))


def test_primary_selector_wins():
    soup = parse_html('<div class="cond"> Cloudy </div><div class="condition-fallback">Sunny</div>')
    assert make_resolver().resolve('condition', soup) == 'Cloudy'


def test_falls_back_when_primary_matches_nothing():
    soup = parse_html('<div class="condition-fallback">Sunny</div>')
    assert make_resolver().resolve('condition', soup) == 'Sunny'


def test_absent_when_nothing_matches():
    soup = parse_html('<div class="other">Sunny</div>')
    assert make_resolver().resolve('condition', soup) is None


def test_primary_match_with_empty_text_is_absent():
    soup = parse_html('<div class="cond">   </div><div class="condition-fallback">Sunny</div>')
    assert make_resolver().resolve('condition', soup) is None


def test_text_of_all_matches_is_joined():
    soup = parse_html('<span class="minmax">15°C</span><span class="minmax">25°C</span>')
    assert make_resolver().resolve('min_max_temperature', soup) == '15°C 25°C'


def test_invalid_selector_never_raises():
    soup = parse_html('<div class="condition-fallback">Sunny</div>')
    resolver = make_resolver(condition='div[[[')
    assert resolver.resolve('condition', soup) == 'Sunny'


def test_unknown_field_is_absent():
    soup = parse_html('<div>anything</div>')
    assert make_resolver().resolve('wind', soup) is None


def test_resolve_all(weather_html, settings):
    resolved = SelectorResolver(settings.selectors).resolve_all(parse_html(weather_html))
    assert resolved == {
        'temperature': '20°C',
        'min_max_temperature': '15°C / 25°C',
        'humidity_pressure': '70% Humidity, 1010 hPa',
        'condition': 'Sunny',
        'date': '2025-07-23',
    }


def test_matches():
    resolver = make_resolver()
    soup = parse_html('<p class="x">hi</p>')
    assert resolver.matches(soup, '.x')
    assert not resolver.matches(soup, '.y')
    assert not resolver.matches(soup, None)
