"""
申请列表接口

GET /api/requests?use_ahp=yes&event_complexity=[{"id":1,"complexity":3}]
"""

from flask import Blueprint, current_app, jsonify, request

from api.errors import register_error_handlers
from database.schemas import RequestFind
from utils.request_service import RequestService

requests_bp = register_error_handlers(
    Blueprint('requests', __name__, url_prefix='/api/requests')
)


@requests_bp.route('', methods=['GET'])
def find_requests():
    payload = RequestFind.model_validate(request.args.to_dict())
    service = RequestService(session_scope=current_app.config.get('AHP_SESSION_SCOPE'))
    return jsonify(service.find(payload))
