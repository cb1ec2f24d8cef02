"""
Adapters package - External service connections.
"""

from adapters.llm_adapter import TextGenerationClient

__all__ = ["TextGenerationClient"]
