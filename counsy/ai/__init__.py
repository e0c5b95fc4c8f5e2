"""AI completion client and prompts"""

from counsy.ai.completion_client import CompletionClient

__all__ = ["CompletionClient"]
