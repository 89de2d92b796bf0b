"""
数据库引擎和会话管理
"""
import logging
import sqlite3
from contextlib import contextmanager
from typing import Generator
from sqlalchemy import create_engine, event, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.engine import Engine
from database.config import DATABASE_URL, SQLALCHEMY_CONFIG, DEFAULT_EVENT_TYPES

logger = logging.getLogger(__name__)


# 创建数据库引擎
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {},
    **SQLALCHEMY_CONFIG
)


# 启用SQLite外键约束
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """为SQLite启用外键约束"""
    if isinstance(dbapi_conn, sqlite3.Connection):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# 创建会话工厂
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def make_session_scope(session_factory):
    """
    基于任意 sessionmaker 创建会话上下文管理器

    正常退出时提交，异常时回滚并原样抛出。
    """
    @contextmanager
    def session_scope() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return session_scope


# 默认会话上下文: with get_db_session() as session: ...
get_db_session = make_session_scope(SessionLocal)


def init_database(bind: Engine = None, session_scope=None):
    """
    初始化数据库
    - 创建所有表
    - 写入默认活动类型（如果为空）
    """
    from database.models import Base, EventType

    bind = bind or engine
    session_scope = session_scope or get_db_session

    # 创建所有表
    Base.metadata.create_all(bind=bind)
    logger.info(f"数据库初始化完成: {bind.url}")

    with session_scope() as session:
        existing = session.execute(select(EventType.id)).first()
        if existing is None:
            for name, priority in DEFAULT_EVENT_TYPES:
                session.add(EventType(name=name, priority=priority))
            logger.info(f"写入默认活动类型: {len(DEFAULT_EVENT_TYPES)} 条")


def close_database():
    """关闭数据库连接"""
    engine.dispose()
    logger.info("数据库连接已关闭")


# 健康检查函数
def check_database_connection() -> bool:
    """
    检查数据库连接是否正常

    Returns:
        bool: 连接正常返回True，否则返回False
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"数据库连接失败: {e}")
        return False
