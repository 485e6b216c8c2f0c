"""
Sitechat Data Boundary
======================

Runtime settings and the storage row models exchanged with the
ingestion / storage side.
"""

from .config import Settings, get_settings, load_settings, reset_settings
from .records import TrainingMaterialRow, rows_to_materials

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "TrainingMaterialRow",
    "rows_to_materials",
]
