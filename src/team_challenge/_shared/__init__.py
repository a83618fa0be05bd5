# Area: Shared
"""
Shared utilities - logging and LLM access used by every layer.
"""

from .logging_config import (
    setup_logging,
    log_engine_error,
    TerminalFormatter,
    JSONFormatter,
)
from .llm_client import (
    BaseLLMClient,
    AnthropicClient,
    MockLLMClient,
    strip_code_fences,
)

__all__ = [
    "setup_logging",
    "log_engine_error",
    "TerminalFormatter",
    "JSONFormatter",
    "BaseLLMClient",
    "AnthropicClient",
    "MockLLMClient",
    "strip_code_fences",
]
