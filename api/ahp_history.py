"""
AHP历史接口

POST   /api/ahp-history           计算并保存
GET    /api/ahp-history           列表（reference_request, limit, offset）
GET    /api/ahp-history/<id>      详情
DELETE /api/ahp-history/<id>      软删除
"""

from flask import Blueprint, current_app, jsonify, request

from api.errors import register_error_handlers
from database.schemas import AHPHistoryCreate, AHPHistoryFilter
from utils.ahp_history_service import AHPHistoryService

ahp_history_bp = register_error_handlers(
    Blueprint('ahp_history', __name__, url_prefix='/api/ahp-history')
)


def get_service() -> AHPHistoryService:
    return AHPHistoryService(session_scope=current_app.config.get('AHP_SESSION_SCOPE'))


@ahp_history_bp.route('', methods=['POST'])
def create_history():
    payload = AHPHistoryCreate.model_validate(request.get_json(silent=True) or {})
    return jsonify(get_service().create(payload))


@ahp_history_bp.route('', methods=['GET'])
def find_histories():
    filters = AHPHistoryFilter.model_validate(request.args.to_dict())
    return jsonify(get_service().find(filters))


@ahp_history_bp.route('/<int:history_id>', methods=['GET'])
def find_history(history_id):
    return jsonify(get_service().find_by_id(history_id))


@ahp_history_bp.route('/<int:history_id>', methods=['DELETE'])
def delete_history(history_id):
    return jsonify(get_service().delete(history_id))
