"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .schedule_editor import ScheduleEditorService

__all__ = ["ScheduleEditorService"]
