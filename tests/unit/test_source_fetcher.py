import pytest
import requests

from conftest import http_error
from skyscrape.core.fetcher import SimpleFetcher, classify_error, create_fetcher
from skyscrape.exceptions import BotDetectionError, UpstreamNotFound, UpstreamTimeout, UpstreamUnavailable
from skyscrape.utils.retry import get_retryer


class TestSourceFetcher:
    def test_primary_success_uses_one_request(self, source_fetcher, fake_fetcher, primary_url):
        fake_fetcher.outcomes = {primary_url: ['<html>ok</html>']}

        result = source_fetcher.fetch('london')

        assert fake_fetcher.calls == [primary_url]
        assert result.source == 'primary'
        assert result.attempts == 1
        assert result.html == '<html>ok</html>'

    def test_primary_retried_before_succeeding(self, source_fetcher, fake_fetcher, primary_url):
        fake_fetcher.outcomes = {primary_url: [requests.ConnectionError('reset'), '<html>ok</html>']}

        result = source_fetcher.fetch('london')

        assert fake_fetcher.calls == [primary_url, primary_url]
        assert result.source == 'primary'
        assert result.attempts == 2

    def test_fallback_after_primary_exhausted(self, source_fetcher, fake_fetcher, primary_url, fallback_url):
        fake_fetcher.outcomes = {
            primary_url: [http_error(500)],
            fallback_url: ['<html>backup</html>'],
        }

        result = source_fetcher.fetch('london')

        assert fake_fetcher.calls == [primary_url] * 3 + [fallback_url]
        assert result.source == 'fallback'
        assert result.url == fallback_url
        assert result.attempts == 4

    def test_bot_detection_is_retried(self, source_fetcher, fake_fetcher, primary_url):
        fake_fetcher.outcomes = {
            primary_url: [BotDetectionError(primary_url, 200, ['Cloudflare challenge']), '<html>ok</html>'],
        }

        result = source_fetcher.fetch('london')

        assert result.attempts == 2

    def test_timeout_on_both_sources(self, source_fetcher, fake_fetcher):
        fake_fetcher.default = requests.Timeout('read timed out')

        with pytest.raises(UpstreamTimeout) as exc_info:
            source_fetcher.fetch('london')

        assert exc_info.value.status_code == 504
        assert exc_info.value.code == 'TIMEOUT'
        assert len(fake_fetcher.calls) == 6

    def test_not_found_on_both_sources(self, source_fetcher, fake_fetcher):
        fake_fetcher.default = http_error(404)

        with pytest.raises(UpstreamNotFound) as exc_info:
            source_fetcher.fetch('london')

        assert exc_info.value.code == 'CITY_NOT_FOUND'

    def test_other_failure_on_both_sources(self, source_fetcher, fake_fetcher):
        fake_fetcher.default = requests.ConnectionError('connection refused')

        with pytest.raises(UpstreamUnavailable) as exc_info:
            source_fetcher.fetch('london')

        assert exc_info.value.status_code == 503
        assert exc_info.value.code == 'SERVICE_UNAVAILABLE'

    def test_classification_uses_fallback_error(self, source_fetcher, fake_fetcher, primary_url, fallback_url):
        fake_fetcher.outcomes = {
            primary_url: [requests.Timeout('slow')],
            fallback_url: [http_error(404)],
        }

        with pytest.raises(UpstreamNotFound):
            source_fetcher.fetch('london')

    def test_unexpected_errors_are_not_retried(self, source_fetcher, fake_fetcher):
        fake_fetcher.default = RuntimeError('bug')

        with pytest.raises(RuntimeError):
            source_fetcher.fetch('london')

        assert len(fake_fetcher.calls) == 1

    def test_probe_is_single_request(self, source_fetcher, fake_fetcher, primary_url):
        fake_fetcher.default = requests.ConnectionError('down')

        with pytest.raises(UpstreamUnavailable):
            source_fetcher.probe('london')

        assert fake_fetcher.calls == [primary_url]

    def test_linear_backoff_between_attempts(self, mocker):
        retryer = get_retryer(max_attempts=3, backoff=0.3)

        waits = [retryer.wait(mocker.Mock(attempt_number=n)) for n in (1, 2, 3)]

        assert waits == pytest.approx([0.3, 0.6, 0.9])


class TestClassifyError:
    def test_timeout(self):
        assert isinstance(classify_error('u', requests.ConnectTimeout('x')), UpstreamTimeout)

    def test_http_404(self):
        assert isinstance(classify_error('u', http_error(404)), UpstreamNotFound)

    def test_not_found_message(self):
        assert isinstance(classify_error('u', requests.RequestException('Page Not Found')), UpstreamNotFound)

    def test_everything_else(self):
        assert isinstance(classify_error('u', http_error(502)), UpstreamUnavailable)
        assert isinstance(classify_error('u', BotDetectionError('u', 200, ['Rate limit'])), UpstreamUnavailable)


class TestSimpleFetcher:
    def _response(self, mocker, text='<html>weather</html>', status_code=200):
        response = mocker.Mock()
        response.text = text
        response.status_code = status_code
        response.raise_for_status.return_value = None
        return response

    def test_fetch_returns_result(self, mocker):
        fetcher = SimpleFetcher(timeout=2.5)
        get = mocker.patch.object(fetcher.session, 'get', return_value=self._response(mocker))

        result = fetcher.fetch('https://weather.example.com/london')

        assert result.html == '<html>weather</html>'
        assert result.status_code == 200
        _, kwargs = get.call_args
        assert kwargs['timeout'] == 2.5
        assert 'User-Agent' in kwargs['headers']

    def test_http_errors_propagate(self, mocker):
        fetcher = SimpleFetcher()
        response = self._response(mocker, status_code=404)
        response.raise_for_status.side_effect = http_error(404)
        mocker.patch.object(fetcher.session, 'get', return_value=response)

        with pytest.raises(requests.HTTPError):
            fetcher.fetch('https://weather.example.com/nowhere')

    def test_block_page_raises(self, mocker):
        fetcher = SimpleFetcher()
        html = '<html><head><title>Access Denied</title></head></html>'
        mocker.patch.object(fetcher.session, 'get', return_value=self._response(mocker, text=html))

        with pytest.raises(BotDetectionError) as exc_info:
            fetcher.fetch('https://weather.example.com/london')

        assert 'Access denied page' in exc_info.value.indicators

    def test_context_manager_closes_session(self, mocker):
        fetcher = SimpleFetcher()
        close = mocker.patch.object(fetcher.session, 'close')

        with fetcher:
            pass

        close.assert_called_once()


def test_create_fetcher():
    assert isinstance(create_fetcher('simple', timeout=1), SimpleFetcher)
    with pytest.raises(ValueError):
        create_fetcher('playwright')
