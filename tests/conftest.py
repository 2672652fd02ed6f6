import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.services.ai_service import AIService, get_ai_service
from src.services.circuit_breaker import CircuitBreaker
from src.services.llm_client import LLMClient


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def rules_only_ai_service():
    """AIService with no LLM key, so every request takes the rule-based path."""
    service = AIService(llm_client=LLMClient(api_key=""), circuit_breaker=CircuitBreaker("test_rules"))
    app.dependency_overrides[get_ai_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_ai_service, None)
