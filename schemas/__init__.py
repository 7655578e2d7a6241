"""
Pydantic schemas for data validation and serialization.

Schemas:
    ord: Payloads served by the ord source (block listing pages, inscription detail)
    api: Read API request/response models

Usage:
    from schemas.ord import BlockPage, InscriptionDetail
    from schemas.api import InscriptionResponse, HealthCheckResponse
"""

__all__ = [
    "BlockPage",
    "InscriptionDetail",
    "Charm",
    "InscriptionResponse",
    "BlockInscriptionsResponse",
    "HealthCheckResponse",
    "StatsResponse",
]
