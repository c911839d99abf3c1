"""Prompt content: models, provider contract and selection."""

from .models import Category, Option, Prompt
from .provider import ContentProvider, InMemoryContentProvider
from .selector import PromptSelector

__all__ = [
    "Category",
    "Option",
    "Prompt",
    "ContentProvider",
    "InMemoryContentProvider",
    "PromptSelector",
]
