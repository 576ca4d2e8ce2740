# src/gptsession/providers/__init__.py
"""
Transport providers for the gptsession library.
"""

from .openai_provider import OpenAIProvider

__all__ = ["OpenAIProvider"]
