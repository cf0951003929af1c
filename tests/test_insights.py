"""
Generative-text calls: request shape, fallbacks and the insight routes.
"""
from unittest import mock

import pytest
import requests

from clinic.services.insight_service import INSIGHTS_FALLBACK, REPLY_FALLBACK, InsightService


def _generated(text):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {'candidates': [{'content': {'parts': [{'text': text}]}}]}
    return response


def _service(api_key='key-123'):
    return InsightService(api_key, 'gemini-3-flash-preview', 'https://generativelanguage.googleapis.com/v1beta/')


class TestInsightService:

    def test_generate_content_request(self):
        with mock.patch('clinic.services.insight_service.requests.post', return_value=_generated('Três ações')) as post:
            text = _service().get_smart_insights('Funil com 2 oportunidades.')

        assert text == 'Três ações'
        url = post.call_args[0][0]
        assert url == 'https://generativelanguage.googleapis.com/v1beta/models/gemini-3-flash-preview:generateContent'
        assert post.call_args[1]['params'] == {'key': 'key-123'}
        prompt = post.call_args[1]['json']['contents'][0]['parts'][0]['text']
        assert 'Funil com 2 oportunidades.' in prompt
        assert '3 ações estratégicas' in prompt

    def test_insights_fallback_on_transport_error(self):
        with mock.patch('clinic.services.insight_service.requests.post',
                        side_effect=requests.exceptions.ConnectionError('offline')):
            assert _service().get_smart_insights('ctx') == INSIGHTS_FALLBACK

    def test_fallback_without_api_key(self):
        with mock.patch('clinic.services.insight_service.requests.post') as post:
            assert _service(api_key=None).get_smart_insights('ctx') == INSIGHTS_FALLBACK
        post.assert_not_called()

    def test_reply_fallback_on_empty_response(self):
        response = mock.Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = {'candidates': []}
        with mock.patch('clinic.services.insight_service.requests.post', return_value=response):
            assert _service().suggest_reply('Qual o valor do botox?') == REPLY_FALLBACK

    @pytest.mark.parametrize('payload', [None, [], 'text'])
    def test_fallback_on_malformed_response(self, payload):
        response = mock.Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = payload
        with mock.patch('clinic.services.insight_service.requests.post', return_value=response):
            assert _service().get_smart_insights('ctx') == INSIGHTS_FALLBACK
            assert _service().suggest_reply('Oi') == REPLY_FALLBACK

    def test_suggest_reply_quotes_customer_message(self):
        with mock.patch('clinic.services.insight_service.requests.post', return_value=_generated('Olá!')) as post:
            assert _service().suggest_reply('Qual o valor do botox?') == 'Olá!'
        prompt = post.call_args[1]['json']['contents'][0]['parts'][0]['text']
        assert '"Qual o valor do botox?"' in prompt


class TestInsightRoutes:

    def test_funnel_insights(self, auth_client):
        auth_client.post('/funnel/deals', json={'title': 'Harmonização', 'value': 3500})
        with mock.patch('clinic.services.insight_service.requests.post', return_value=_generated('Foque em propostas')) as post:
            response = auth_client.post('/funnel/insights')

        assert response.status_code == 200
        assert response.get_json() == {'insight': 'Foque em propostas'}
        prompt = post.call_args[1]['json']['contents'][0]['parts'][0]['text']
        assert 'Funil com 1 oportunidades. Valor total: R$ 3.500.' in prompt

    def test_analytics_and_reports_fall_back(self, auth_client):
        with mock.patch('clinic.services.insight_service.requests.post',
                        side_effect=requests.exceptions.Timeout('slow')):
            analytics = auth_client.post('/analytics/insights')
            reports = auth_client.post('/reports/insights')

        assert analytics.get_json()['insight'] == INSIGHTS_FALLBACK
        assert reports.get_json()['insight'] == INSIGHTS_FALLBACK

    def test_suggest_reply_route(self, auth_client):
        with mock.patch('clinic.services.insight_service.requests.post', return_value=_generated('Claro!')):
            response = auth_client.post('/chat/suggest-reply', json={'message': 'Vocês abrem sábado?'})
        assert response.get_json() == {'reply': 'Claro!'}

        assert auth_client.post('/chat/suggest-reply', json={}).status_code == 400
