from __future__ import annotations

from paceplan.config import Settings, get_settings
from paceplan.services.reference_tables import ReferenceTables, load_reference_tables


def get_app_settings() -> Settings:
    return get_settings()


def get_tables() -> ReferenceTables:
    return load_reference_tables(get_settings().reference_tables_path)
