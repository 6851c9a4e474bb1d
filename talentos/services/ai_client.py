"""
AI Assistant Client

The provider exposes an OpenAI-compatible API, so we use the openai library
against a configurable base URL.

The dashboard sends a question plus a JSON context (aggregated stats and a
simplified employee list). This client never raises: every failure becomes a
descriptive answer string for the UI.
"""
import logging

from openai import APIStatusError, AuthenticationError, OpenAI

from talentos.core.config import get_settings

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "AI Service is not configured."
INVALID_KEY = "Error: API Key is invalid or expired. Please check configuration."
GENERIC_FAILURE = "An error occurred while communicating with the AI service."
NO_ANSWER = "No answer generated."

SYSTEM_PROMPT = """You are the HR assistant of TalentosPlus.
1. Answer the user's question based strictly on the provided Context Data.
2. If the user asks in Spanish, answer in Spanish. If they ask in English, answer in English.
3. Be professional, concise, and helpful.
4. If the answer is not found in the data, state clearly that you don't have that information.
5. Do not make up data."""


class AiClient:
    """
    Wrapper around the chat completions endpoint.
    """

    def __init__(self, api_key: str = None, base_url: str = None, model: str = None):
        settings = get_settings()
        self.api_key = settings.ai_api_key if api_key is None else api_key
        self.base_url = base_url or settings.ai_base_url
        self.model = model or settings.ai_model
        self._client = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 800) -> str:
        """
        Internal method to call the chat API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=0.2
        )
        return response.choices[0].message.content

    def ask_question(self, question: str, context_json: str) -> str:
        """Answer `question` from `context_json`. Always returns a string."""
        if not self.api_key:
            return NOT_CONFIGURED

        user_content = f"Context Data (JSON format):\n{context_json}\n\nUser Question:\n{question}"
        try:
            answer = self._call_api(SYSTEM_PROMPT, user_content)
        except AuthenticationError:
            logger.exception("AI authentication failed")
            return INVALID_KEY
        except APIStatusError as e:
            logger.exception("AI API error")
            return f"Error connecting to AI Assistant ({e.status_code}). Please try again later."
        except Exception:
            logger.exception("AI request failed")
            return GENERIC_FAILURE

        return (answer or "").strip() or NO_ANSWER


# Singleton instance
_ai_client: AiClient = None


def get_ai_client() -> AiClient:
    """Get or create AI client (singleton pattern)"""
    global _ai_client
    if _ai_client is None:
        _ai_client = AiClient()
    return _ai_client
