import pytest
import requests

from skyscrape.core import create_pipeline
from skyscrape.exceptions import DataNotFoundError, InvalidCityError, ParsingError, UpstreamUnavailable
from skyscrape.models import NOT_AVAILABLE


@pytest.fixture
def pipeline(settings, source_fetcher):
    return create_pipeline(settings, source_fetcher=source_fetcher)


def test_full_record(pipeline, fake_fetcher, primary_url, weather_html):
    fake_fetcher.outcomes = {primary_url: [weather_html]}

    record = pipeline.get_weather('London')

    assert record.to_response() == {
        'date': 'July 23, 2025',
        'temperature': '20.0 °C',
        'condition': 'Sunny',
        'minTemperature': '15.0 °C',
        'maxTemperature': '25.0 °C',
        'humidity': '70%',
        'pressure': '1010.0 hPa',
    }
    assert record.missing_fields == []


def test_city_is_normalized_into_url(pipeline, fake_fetcher, settings, weather_html):
    fake_fetcher.default = weather_html

    pipeline.get_weather('São Paulo')

    assert fake_fetcher.calls == [settings.sources.primary_url('sao-paulo')]


def test_fallback_selectors_fill_in(pipeline, fake_fetcher, primary_url):
    html = """
    <div class="wtr_tmp_rhs">18°C</div>
    <div class="condition-fallback">Light rain</div>
    <div class="date-fallback">23 July 2025</div>
    """
    fake_fetcher.outcomes = {primary_url: [html]}

    record = pipeline.get_weather('London')

    assert record.temperature == '18.0 °C'
    assert record.condition == 'Light rain'
    assert record.date == 'July 23, 2025'
    assert record.min_temperature == NOT_AVAILABLE
    assert record.humidity == NOT_AVAILABLE
    assert set(record.missing_fields) == {'min_temperature', 'max_temperature', 'humidity', 'pressure'}


def test_missing_condition(pipeline, fake_fetcher, primary_url):
    fake_fetcher.outcomes = {primary_url: ['<div class="wtr_tmp_rhs">20°C</div>']}

    with pytest.raises(DataNotFoundError) as exc_info:
        pipeline.get_weather('London')

    assert exc_info.value.fields == ['condition']
    assert exc_info.value.status_code == 404


def test_missing_temperature_and_condition(pipeline, fake_fetcher):
    fake_fetcher.default = '<html><body>Nothing here</body></html>'

    with pytest.raises(DataNotFoundError) as exc_info:
        pipeline.get_weather('London')

    assert exc_info.value.fields == ['temperature', 'condition']


def test_implausible_temperature(pipeline, fake_fetcher, primary_url):
    fake_fetcher.outcomes = {primary_url: ['<div class="wtr_tmp_rhs">250°C</div><div class="wtr_tmp_lhs">Hot</div>']}

    with pytest.raises(ParsingError) as exc_info:
        pipeline.get_weather('London')

    assert exc_info.value.field_name == 'temperature'
    assert exc_info.value.code == 'PARSING_ERROR'


def test_invalid_city_makes_no_request(pipeline, fake_fetcher):
    with pytest.raises(InvalidCityError):
        pipeline.get_weather('X')

    assert fake_fetcher.calls == []


def test_upstream_errors_propagate(pipeline, fake_fetcher):
    fake_fetcher.default = requests.ConnectionError('down')

    with pytest.raises(UpstreamUnavailable):
        pipeline.get_weather('London')


def test_assemble_keeps_unparseable_optional_fields(pipeline):
    record = pipeline.assemble(
        {
            'temperature': '21 °C',
            'condition': 'Clear',
            'min_max_temperature': 'n/a',
            'humidity_pressure': None,
            'date': None,
        }
    )

    assert record.temperature == '21.0 °C'
    assert record.min_temperature == NOT_AVAILABLE
    assert record.max_temperature == NOT_AVAILABLE
    assert record.date == NOT_AVAILABLE
