from __future__ import annotations


class AutoTagError(Exception):
    """Base class for auto tagging failures."""


class NoProviderConfiguredError(AutoTagError):
    """None of the supported model providers has a complete configuration."""

    def __init__(self, message: str = "No AI provider configured") -> None:
        super().__init__(message)


class TagGenerationError(AutoTagError):
    """The provider answered, but not with a usable list of tags."""
