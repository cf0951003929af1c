# services/insight_service.py
"""
Generative-text collaborator. Two prompts, one request each, no caching.
Any failure is logged and answered with a fixed fallback text.
"""
import requests
from flask import current_app

from clinic import logger

INSIGHTS_FALLBACK = "Não foi possível gerar insights no momento. Verifique sua chave de API."
REPLY_FALLBACK = "Olá! Como posso ajudar você hoje?"


class InsightService:

    def __init__(self, api_key, model, base_url, timeout=30):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    @classmethod
    def from_config(cls, config=None):
        config = config or current_app.config
        return cls(
            config.get('GEMINI_API_KEY'),
            config.get('GEMINI_MODEL'),
            config.get('GEMINI_API_URL'),
            timeout=config.get('GEMINI_TIMEOUT', 30)
        )

    def generate(self, prompt):
        """
        Send one prompt and return the generated text.

        Raises:
            RuntimeError: no API key configured
            requests.RequestException: transport or HTTP error
            KeyError, IndexError: response without a text candidate
        """
        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is not configured")

        response = requests.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            params={'key': self.api_key},
            json={'contents': [{'parts': [{'text': prompt}]}]},
            timeout=self.timeout
        )
        response.raise_for_status()
        data = response.json()
        return data['candidates'][0]['content']['parts'][0]['text']

    def get_smart_insights(self, context):
        prompt = (
            "Como assistente sênior de uma clínica de estética, analise os seguintes dados e "
            f"sugira 3 ações estratégicas de marketing ou vendas: {context}. "
            "Responda em Português de forma concisa."
        )
        try:
            return self.generate(prompt)
        except (requests.exceptions.RequestException, RuntimeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Insight generation failed: {str(e)}")
            return INSIGHTS_FALLBACK

    def suggest_reply(self, message):
        prompt = (
            f"Um cliente da clínica de estética enviou a seguinte mensagem: \"{message}\". "
            "Sugira uma resposta profissional, amigável e persuasiva em Português."
        )
        try:
            return self.generate(prompt)
        except (requests.exceptions.RequestException, RuntimeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Reply suggestion failed: {str(e)}")
            return REPLY_FALLBACK
