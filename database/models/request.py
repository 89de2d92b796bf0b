"""
场地使用申请模型
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from database.models.base import BaseModel, TimestampMixin


class Request(BaseModel, TimestampMixin):
    """场地使用申请表"""
    __tablename__ = "requests"

    # 外键
    event_type_id = Column(
        Integer,
        ForeignKey("event_types.id"),
        nullable=False,
        comment="活动类型ID"
    )

    # 申请信息
    requester = Column(String(100), comment="申请人")
    event_name = Column(String(255), nullable=False, comment="活动名称")
    event_location = Column(String(255), comment="活动地点")
    event_date_start = Column(DateTime, nullable=False, comment="活动开始时间")
    event_date_end = Column(DateTime, comment="活动结束时间")
    description = Column(Text, comment="活动描述")
    count_participant = Column(Integer, nullable=False, default=0, comment="参与人数")
    is_delete = Column(Boolean, nullable=False, default=False, comment="软删除标记")

    # 关系定义
    event_type = relationship("EventType", back_populates="requests", lazy="joined")
    ahp_histories = relationship("AHPHistory", back_populates="request")

    # 索引
    __table_args__ = (
        Index('idx_request_event_type', 'event_type_id'),
        {'comment': '场地使用申请表'},
    )

    def __repr__(self):
        return f"<Request(id={self.id}, event_name='{self.event_name}')>"
