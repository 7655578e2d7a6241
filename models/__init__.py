"""
SQLAlchemy ORM models for the inscription store.

Models:
    base: Declarative base and shared enums (HarvestStatus)
    inscription: Harvested inscriptions, one row per inscription id
    harvest_run: Per-block harvest audit trail

Usage:
    from models.inscription import Inscription
    from models.harvest_run import HarvestRun
    from models.base import Base, HarvestStatus
"""

__all__ = [
    "Base",
    "HarvestStatus",
    "Inscription",
    "HarvestRun",
]
