"""Telemetry and observability helpers.

This package emits step-level trace events for normalization runs.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
