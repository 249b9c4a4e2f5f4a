"""Pytest fixtures and configuration for Governance Proposal Agent tests."""

import os
import pytest
from typing import Any, Callable, Dict, Generator
from unittest.mock import AsyncMock, patch

import httpx
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("LANGFLOW_API_KEY", "test-key")
os.environ.setdefault("LANGFLOW_BASE_URL", "https://langflow.test")
os.environ.setdefault("DEBUG", "true")


# ===========================================
# Sample Data Fixtures
# ===========================================

@pytest.fixture
def direct_response() -> str:
    """Generator output in the common single-quoted key style."""
    return (
        "'proposal_title':'Community Builder Grants',"
        "'proposal_summary':'Fund open source builders from the treasury',"
        "'problem':'Builders leave for better funded ecosystems',"
        "'solution':['Create a grants council','Publish quarterly reports'],"
        "'milestones':['Q1 council elected','Q2 first grants'],"
        "'risks':['Low turnout'],"
        "'references':['[Forum discussion on grants]', '[Treasury report 2024]']"
    )


@pytest.fixture
def json_response() -> str:
    """Generator output that is valid JSON inside a code fence."""
    return (
        "```json\n"
        '{"proposal_title": "Validator Rewards Update", '
        '"proposal_summary": "Rebalance validator rewards", '
        '"problem": "Rewards favour large validators", '
        '"solution": ["Cap rewards per validator", "Add a small-validator bonus"], '
        '"Success Metrics": ["Validator count"], '
        '"metrics": ["Nakamoto coefficient"], '
        '"references": ["[Validator economics paper]"]}\n'
        "```"
    )


@pytest.fixture
def markdown_response() -> str:
    """Generator output written as markdown sections."""
    return (
        "# Title\nOpen Governance Digest\n\n"
        "## Problem Statement\nVoters lack information.\n\n"
        "## Solution\n- Publish digests\n- Host calls\n\n"
        "## Outcomes\nHigher turnout. Better decisions\n\n"
        "## References\n1. [Forum thread]\n"
    )


# ===========================================
# Mock Fixtures
# ===========================================

def _langflow_body(text: str) -> Dict[str, Any]:
    return {"outputs": [{"outputs": [{"results": {"message": {"text": text}}}]}]}


@pytest.fixture
def langflow_response() -> Callable[..., httpx.Response]:
    """Factory for Langflow run responses carrying the given text."""
    def _make(text: str = "", status_code: int = 200, body: Any = None) -> httpx.Response:
        return httpx.Response(
            status_code,
            json=_langflow_body(text) if body is None else body,
            request=httpx.Request("POST", "https://langflow.test/api/v1/run/flow"),
        )
    return _make


@pytest.fixture
def mock_langflow(langflow_response, direct_response):
    """Mock Langflow HTTP client; set post.return_value per test."""
    with patch("governance_agent.integrations.langflow.httpx.AsyncClient") as mock:
        mock_instance = AsyncMock()
        mock_instance.post.return_value = langflow_response(direct_response)
        mock.return_value.__aenter__.return_value = mock_instance
        mock.return_value.__aexit__.return_value = None
        yield mock_instance


# ===========================================
# Client Fixtures
# ===========================================

@pytest.fixture
def client(mock_langflow) -> Generator[TestClient, None, None]:
    """Test client with Langflow mocked."""
    from governance_agent.main import app
    with TestClient(app) as test_client:
        yield test_client


# ===========================================
# Pytest Configuration
# ===========================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset singleton instances between tests."""
    yield
    from governance_agent.services.proposal_store import proposal_store
    proposal_store.clear()
