"""Run logging for scans and AI requests."""

from .logger import RunLogger

__all__ = ["RunLogger"]
