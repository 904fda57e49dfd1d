from __future__ import annotations


class PricerSetterError(Exception):
    """Base class for errors raised by the quotation pipeline."""


class ClassifierResponseError(PricerSetterError):
    """The classifier replied with something that is not a usable module list."""


class ProviderNotConfiguredError(PricerSetterError):
    """An LLM provider was selected but its credentials or settings are missing."""


__all__ = ["ClassifierResponseError", "PricerSetterError", "ProviderNotConfiguredError"]
