"""
数据访问层
"""
from database.repositories.ahp_history import AHPHistoryRepository
from database.repositories.request import RequestRepository, EventTypeRepository

__all__ = [
    "AHPHistoryRepository",
    "RequestRepository",
    "EventTypeRepository",
]
