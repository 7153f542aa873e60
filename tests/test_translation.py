"""
Tests for the translation client (providers stubbed at the requests layer).
"""

import pytest
import requests

from app.errors import TranslationUnavailable
from app.services import translation
from app.services.translation import TranslationClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload


class RecordingPost:
    """Stand-in for requests.post returning canned responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def google_ok(text):
    return FakeResponse(200, {'data': {'translations': [
        {'translatedText': text, 'detectedSourceLanguage': 'en'}
    ]}})


@pytest.fixture
def fake_post(monkeypatch):
    def install(*responses):
        post = RecordingPost(*responses)
        monkeypatch.setattr(translation.requests, 'post', post)
        return post
    return install


class TestEmptyInput:

    @pytest.mark.parametrize('text', ['', '   ', None])
    def test_no_external_call(self, fake_post, text):
        post = fake_post(google_ok('x'))
        client = TranslationClient(api_key='key')

        assert client.translate(text, 'pt') == text
        assert post.calls == []

    def test_empty_text_without_api_key(self):
        assert TranslationClient(api_key='').translate('', 'pt') == ''


class TestGoogle:

    def test_translate(self, fake_post):
        post = fake_post(google_ok('molho de soja'))
        client = TranslationClient(service='google', api_key='key', timeout=2.5)

        assert client.translate('soy sauce', 'pt') == 'molho de soja'

        url, kwargs = post.calls[0]
        assert url == translation.GOOGLE_TRANSLATE_URL
        assert kwargs['data']['q'] == 'soy sauce'
        assert kwargs['data']['target'] == 'pt'
        assert kwargs['data']['format'] == 'text'
        assert kwargs['timeout'] == 2.5

    def test_not_configured(self, fake_post):
        post = fake_post(google_ok('x'))

        with pytest.raises(TranslationUnavailable):
            TranslationClient(api_key='').translate('soy sauce', 'pt')
        assert post.calls == []

    def test_timeout(self, fake_post):
        fake_post(requests.Timeout('slow'))

        with pytest.raises(TranslationUnavailable):
            TranslationClient(api_key='key').translate('soy sauce', 'pt')

    def test_connection_error(self, fake_post):
        fake_post(requests.ConnectionError('refused'))

        with pytest.raises(TranslationUnavailable):
            TranslationClient(api_key='key').translate('soy sauce', 'pt')

    def test_provider_error_body(self, fake_post):
        fake_post(FakeResponse(500, {'error': {'code': 500, 'message': 'backend error'}}))

        with pytest.raises(TranslationUnavailable):
            TranslationClient(api_key='key').translate('soy sauce', 'pt')

    def test_non_json_body(self, fake_post):
        fake_post(FakeResponse(502, None, text='<html>Bad gateway</html>'))

        with pytest.raises(TranslationUnavailable):
            TranslationClient(api_key='key').translate('soy sauce', 'pt')

    def test_invalid_key_disables_client(self, fake_post):
        post = fake_post(FakeResponse(400, {'error': {
            'code': 400,
            'status': 'INVALID_ARGUMENT',
            'message': 'API key not valid.',
            'details': [{'reason': 'API_KEY_INVALID'}],
        }}))
        client = TranslationClient(api_key='bad')

        with pytest.raises(TranslationUnavailable):
            client.translate('soy sauce', 'pt')
        with pytest.raises(TranslationUnavailable):
            client.translate('chicken', 'pt')

        assert len(post.calls) == 1

    @pytest.mark.parametrize('body', [
        {'error': {'code': 400, 'details': 'oops'}},
        {'error': {'code': 400, 'details': ['API_KEY_INVALID', None]}},
        {'error': 'quota exceeded'},
        {'data': 'unavailable'},
    ])
    def test_malformed_error_body_counts_as_failure(self, fake_post, body):
        post = fake_post(FakeResponse(400, body))
        client = TranslationClient(api_key='key', max_consecutive_failures=3, cooldown_seconds=60)

        for _ in range(4):
            with pytest.raises(TranslationUnavailable):
                client.translate('soy sauce', 'pt')

        assert len(post.calls) == 3


class TestCircuitBreaker:

    def test_opens_after_consecutive_failures(self, fake_post):
        post = fake_post(requests.ConnectionError('refused'))
        client = TranslationClient(api_key='key', max_consecutive_failures=3, cooldown_seconds=60)

        for _ in range(3):
            with pytest.raises(TranslationUnavailable):
                client.translate('soy sauce', 'pt')
        with pytest.raises(TranslationUnavailable):
            client.translate('soy sauce', 'pt')

        assert len(post.calls) == 3

    def test_resets_after_cooldown(self, fake_post, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(translation.time, 'time', lambda: now[0])
        fake_post(requests.ConnectionError('refused'), requests.ConnectionError('refused'), google_ok('frango'))
        client = TranslationClient(api_key='key', max_consecutive_failures=2, cooldown_seconds=60)

        for _ in range(2):
            with pytest.raises(TranslationUnavailable):
                client.translate('chicken', 'pt')

        now[0] += 61
        assert client.translate('chicken', 'pt') == 'frango'

    def test_success_resets_failure_count(self, fake_post):
        fake_post(requests.ConnectionError('refused'), google_ok('frango'), requests.ConnectionError('refused'))
        client = TranslationClient(api_key='key', max_consecutive_failures=2)

        with pytest.raises(TranslationUnavailable):
            client.translate('chicken', 'pt')
        assert client.translate('chicken', 'pt') == 'frango'
        with pytest.raises(TranslationUnavailable):
            client.translate('chicken', 'pt')

        assert client._is_circuit_open() is False


class TestDeepL:

    def test_translate_maps_target_code(self, fake_post):
        post = fake_post(FakeResponse(200, {'translations': [
            {'detected_source_language': 'EN', 'text': 'frango'}
        ]}))
        client = TranslationClient(service='deepl', api_key='key')

        assert client.translate('chicken', 'pt') == 'frango'

        url, kwargs = post.calls[0]
        assert url == translation.DEEPL_TRANSLATE_URL
        assert kwargs['data']['target_lang'] == 'PT-BR'
        assert kwargs['headers']['Authorization'] == 'DeepL-Auth-Key key'

    def test_forbidden_disables_client(self, fake_post):
        post = fake_post(FakeResponse(403, None))
        client = TranslationClient(service='deepl', api_key='bad')

        with pytest.raises(TranslationUnavailable):
            client.translate('chicken', 'pt')
        with pytest.raises(TranslationUnavailable):
            client.translate('chicken', 'pt')

        assert len(post.calls) == 1

    def test_quota_exceeded(self, fake_post):
        fake_post(FakeResponse(456, {'message': 'Quota exceeded'}))

        with pytest.raises(TranslationUnavailable):
            TranslationClient(service='deepl', api_key='key').translate('chicken', 'pt')


def test_unknown_service():
    with pytest.raises(ValueError):
        TranslationClient(service='babelfish')
