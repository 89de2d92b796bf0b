"""
Pydantic Schemas - Data Validation Layer
"""

from database.schemas.ahp_history import (
    AHPComparison,
    AHPHistoryCreate,
    AHPHistoryFilter
)

from database.schemas.request import (
    RequestFind,
    ComplexityItem
)

__all__ = [
    # AHP history schemas
    "AHPComparison",
    "AHPHistoryCreate",
    "AHPHistoryFilter",

    # Request schemas
    "RequestFind",
    "ComplexityItem",
]
