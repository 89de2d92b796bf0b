"""
活动类型模型
"""
from sqlalchemy import Column, String, Integer, Boolean
from sqlalchemy.orm import relationship
from database.models.base import BaseModel


class EventType(BaseModel):
    """活动类型表"""
    __tablename__ = "event_types"

    name = Column(String(100), nullable=False, comment="类型名称")
    priority = Column(Integer, nullable=False, default=1, comment="优先级（数值越小越重要）")
    is_delete = Column(Boolean, nullable=False, default=False, comment="软删除标记")

    # 关系定义
    requests = relationship("Request", back_populates="event_type")

    __table_args__ = (
        {'comment': '活动类型表'},
    )

    def __repr__(self):
        return f"<EventType(id={self.id}, name='{self.name}', priority={self.priority})>"
