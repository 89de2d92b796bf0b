"""
数据库模型包初始化
"""
from database.models.base import Base, BaseModel, CreatedAtMixin, TimestampMixin

# 申请与活动类型
from database.models.event_type import EventType
from database.models.request import Request

# AHP 计算历史
from database.models.ahp_history import AHPHistory

__all__ = [
    # 基础类
    "Base",
    "BaseModel",
    "CreatedAtMixin",
    "TimestampMixin",

    # 申请
    "EventType",
    "Request",

    # AHP
    "AHPHistory",
]
