"""
HTTP 接口层 - Flask Blueprints

服务实例的会话上下文可通过 app.config['AHP_SESSION_SCOPE'] 注入，
默认使用 database.engine.get_db_session。
"""

from flask import Flask

from api.ahp_history import ahp_history_bp
from api.requests import requests_bp


def register_blueprints(server: Flask) -> Flask:
    """在 Flask 服务器上注册所有接口"""
    server.register_blueprint(ahp_history_bp)
    server.register_blueprint(requests_bp)
    return server


__all__ = [
    "ahp_history_bp",
    "requests_bp",
    "register_blueprints",
]
