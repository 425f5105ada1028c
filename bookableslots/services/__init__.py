"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_preview import AvailabilityPreviewService, BusyBlockProvider, build_preview

__all__ = ["AvailabilityPreviewService", "BusyBlockProvider", "build_preview"]
