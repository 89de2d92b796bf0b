"""
接口错误响应

- pydantic.ValidationError → 400，附带字段错误列表
- AHPServiceError → 异常自带的状态码
- SQLAlchemyError → 500 server_error
"""

import logging

from flask import Blueprint, jsonify
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from utils.errors import AHPServiceError
from utils.validation_helpers import format_validation_error

logger = logging.getLogger(__name__)


def register_error_handlers(blueprint: Blueprint) -> Blueprint:
    """为 Blueprint 注册统一的错误处理"""

    @blueprint.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({
            'error': "bad_request",
            'message': format_validation_error(error),
        }), 400

    @blueprint.errorhandler(AHPServiceError)
    def handle_service_error(error):
        return jsonify(error.to_dict()), error.status_code

    @blueprint.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        logger.error(f"数据库操作失败: {error}")
        return jsonify({
            'error': "server_error",
            'message': str(error),
        }), 500

    return blueprint
