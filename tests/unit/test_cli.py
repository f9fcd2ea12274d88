import pytest

from skyscrape import cli
from skyscrape.exceptions import ConfigurationError, UpstreamNotFound
from skyscrape.models import SelectorHealthReport, WeatherRecord


@pytest.fixture(autouse=True)
def quiet_setup(mocker, settings):
    mocker.patch.object(cli, 'load_settings', return_value=settings)
    mocker.patch.object(cli, 'setup_local_logging')
    mocker.patch.object(cli, 'configure_logfire')


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_weather_prints_table(mocker, capsys):
    pipeline = mocker.Mock()
    pipeline.get_weather.return_value = WeatherRecord(temperature='20.0 °C', condition='Sunny')
    mocker.patch.object(cli, 'create_pipeline', return_value=pipeline)

    assert cli.main(['weather', 'London']) == 0

    pipeline.get_weather.assert_called_once_with('London')
    out = capsys.readouterr().out
    assert 'Sunny' in out
    assert 'minTemperature' in out


def test_weather_reports_errors(mocker, capsys):
    pipeline = mocker.Mock()
    pipeline.get_weather.side_effect = UpstreamNotFound('https://weather.example.com/atlantis')
    mocker.patch.object(cli, 'create_pipeline', return_value=pipeline)

    assert cli.main(['weather', 'Atlantis']) == 1
    assert 'CITY_NOT_FOUND' in capsys.readouterr().out


def test_check_selectors(mocker, capsys):
    monitor = mocker.Mock()
    monitor.check.return_value = SelectorHealthReport(reference_city='delhi', url='u', failed_fields=['date'])
    mocker.patch.object(cli, 'create_monitor', return_value=monitor)

    assert cli.main(['check-selectors']) == 1
    assert '.date-fallback' in capsys.readouterr().out


def test_check_selectors_healthy(mocker):
    monitor = mocker.Mock()
    monitor.check.return_value = SelectorHealthReport(reference_city='delhi', url='u')
    mocker.patch.object(cli, 'create_monitor', return_value=monitor)

    assert cli.main(['check-selectors']) == 0


def test_serve_uses_configured_port(mocker, settings):
    run = mocker.patch.object(cli.uvicorn, 'run')
    mocker.patch('skyscrape.api.create_app', return_value='app')

    assert cli.main(['serve']) == 0

    run.assert_called_once_with('app', host='0.0.0.0', port=settings.port, log_config=None)


def test_missing_configuration(mocker, capsys):
    mocker.patch.object(cli, 'load_settings', side_effect=ConfigurationError(['SCRAPE_API_FIRST']))

    assert cli.main(['weather', 'London']) == 1
    assert 'SCRAPE_API_FIRST' in capsys.readouterr().out
