"""
测试公共夹具：内存 SQLite 数据库与示例申请
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.engine import init_database, make_session_scope
from database.repositories import RequestRepository

BASE_TIME = datetime(2025, 3, 1, 9, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_scope(engine):
    """已建表并写入默认活动类型的会话上下文"""
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    scope = make_session_scope(factory)
    init_database(bind=engine, session_scope=scope)
    return scope


@pytest.fixture
def seeded_requests(session_scope):
    """
    三条申请（默认活动类型 id: Academic=1, Organizational=2, Social=3）

    Returns:
        {活动名称: 申请ID}
    """
    repo = RequestRepository()
    with session_scope() as session:
        seminar = repo.create(
            session,
            event_name="Seminar",
            event_type_id=1,
            event_date_start=BASE_TIME + timedelta(days=2),
            count_participant=120,
            requester="alice",
            description="AI seminar",
            created_at=BASE_TIME
        )
        party = repo.create(
            session,
            event_name="Party",
            event_type_id=3,
            event_date_start=BASE_TIME + timedelta(days=60),
            count_participant=30,
            requester="bob",
            created_at=BASE_TIME + timedelta(hours=1)
        )
        meeting = repo.create(
            session,
            event_name="Meeting",
            event_type_id=2,
            event_date_start=BASE_TIME + timedelta(days=10),
            count_participant=15,
            requester="carol",
            created_at=BASE_TIME + timedelta(hours=2)
        )
        ids = {
            "Seminar": seminar.id,
            "Party": party.id,
            "Meeting": meeting.id,
        }
    return ids


def make_history_payload(reference_request, **overrides):
    """构造一个合法的AHP历史创建请求"""
    payload = {
        "criteria": ["Urgency", "Importance", "Participants"],
        "criteria_comparison": [
            {"item1": "Urgency", "item2": "Importance", "value": 3},
            {"item1": "Urgency", "item2": "Participants", "value": 5},
            {"item1": "Importance", "item2": "Participants", "value": 2},
        ],
        "alternatives": ["Seminar", "Party"],
        "alternative_comparison": {
            "Urgency": [{"item1": "Seminar", "item2": "Party", "value": 5}],
            "Importance": [{"item1": "Seminar", "item2": "Party", "value": 3}],
            "Participants": [{"item1": "Party", "item2": "Seminar", "value": 2}],
        },
        "reference_request": reference_request,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def history_payload():
    return make_history_payload
