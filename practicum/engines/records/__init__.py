"""
Owner-side record writes and the competency catalog.
"""

from practicum.engines.records.catalog import CompetencyCatalog
from practicum.engines.records.record_service import EDITABLE_FIELDS, RecordService

__all__ = ["CompetencyCatalog", "EDITABLE_FIELDS", "RecordService"]
