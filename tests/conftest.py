"""Shared fixtures for the chart pipeline tests."""
import struct

import pytest
from fastapi.testclient import TestClient

from chart_llm_pipeline.app.config import Settings
from chart_llm_pipeline.app.llm_client import LLMClient
from chart_llm_pipeline.app.main import app, get_llm_client

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class StubLLMClient(LLMClient):
    """LLM client that returns a canned reply (text or LLMFailure) without any I/O."""

    def __init__(self, reply):
        super().__init__(Settings(api_key="test-key"))
        self.reply = reply
        self.prompts = []

    async def send(self, prompt):
        self.prompts.append(prompt)
        return self.reply


def png_size(data: bytes):
    """Read (width, height) from the PNG IHDR chunk."""
    assert data[:8] == PNG_SIGNATURE
    return struct.unpack(">II", data[16:24])


@pytest.fixture
def stub_llm():
    """Factory for StubLLMClient instances."""
    return StubLLMClient


@pytest.fixture(name="png_size")
def png_size_fixture():
    return png_size


@pytest.fixture
def unconfigured_client():
    return LLMClient(Settings(api_key=None))


@pytest.fixture
def api_client():
    """TestClient whose LLM dependency is replaced via `api_client.use(llm)`."""
    client = TestClient(app)

    def use(llm):
        app.dependency_overrides[get_llm_client] = lambda: llm
        return client

    client.use = use
    yield client
    app.dependency_overrides.clear()
