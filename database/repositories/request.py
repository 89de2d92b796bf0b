"""
申请与活动类型数据访问

查找不存在的记录返回 None，不抛出异常。
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from database.models import EventType, Request


class RequestRepository:
    """申请仓储"""

    def find_by_id(self, session: Session, request_id: int, include_deleted: bool = False) -> Optional[Request]:
        stmt = select(Request).where(Request.id == request_id)
        if not include_deleted:
            stmt = stmt.where(Request.is_delete.is_(False))
        return session.execute(stmt).unique().scalar_one_or_none()

    def find_all(self, session: Session) -> List[Request]:
        """按创建时间倒序列出未删除的申请"""
        stmt = (
            select(Request)
            .where(Request.is_delete.is_(False))
            .order_by(Request.created_at.desc(), Request.id.desc())
        )
        return list(session.execute(stmt).unique().scalars().all())

    def count(self, session: Session) -> int:
        stmt = select(func.count(Request.id)).where(Request.is_delete.is_(False))
        return session.execute(stmt).scalar_one()

    def create(
        self,
        session: Session,
        event_name: str,
        event_type_id: int,
        event_date_start: datetime,
        count_participant: int = 0,
        requester: str = None,
        event_location: str = None,
        event_date_end: datetime = None,
        description: str = None,
        created_at: datetime = None
    ) -> Request:
        request = Request(
            event_name=event_name,
            event_type_id=event_type_id,
            event_date_start=event_date_start,
            event_date_end=event_date_end,
            count_participant=count_participant,
            requester=requester,
            event_location=event_location,
            description=description
        )
        if created_at is not None:
            request.created_at = created_at
        session.add(request)
        session.flush()
        return request


class EventTypeRepository:
    """活动类型仓储"""

    def find_by_id(self, session: Session, event_type_id: int) -> Optional[EventType]:
        stmt = select(EventType).where(EventType.id == event_type_id, EventType.is_delete.is_(False))
        return session.execute(stmt).scalar_one_or_none()

    def find_all(self, session: Session) -> List[EventType]:
        stmt = select(EventType).where(EventType.is_delete.is_(False)).order_by(EventType.priority, EventType.id)
        return list(session.execute(stmt).scalars().all())

    def create(self, session: Session, name: str, priority: int = 1) -> EventType:
        event_type = EventType(name=name, priority=priority)
        session.add(event_type)
        session.flush()
        return event_type
