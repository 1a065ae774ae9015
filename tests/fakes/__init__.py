"""In-memory stand-ins for the remote parser and the generative language API."""

from .parser import FakeParserClient, not_found, server_error
from .llm import FakeLLMClient

__all__ = ["FakeParserClient", "FakeLLMClient", "not_found", "server_error"]
