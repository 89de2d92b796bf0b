"""
业务异常定义

校验失败使用 pydantic.ValidationError，持久化失败使用
sqlalchemy.exc.SQLAlchemyError，两者都原样抛给调用方。
"""


class AHPServiceError(Exception):
    """业务层异常基类"""
    status_code = 400
    message = "bad_request"

    def __init__(self, detail: str = None):
        self.detail = detail or self.message
        super().__init__(self.detail)

    def to_dict(self):
        return {'error': self.message, 'message': self.detail}


class RequestNotFoundError(AHPServiceError):
    """关联的申请不存在"""

    def __init__(self, request_id: int):
        self.request_id = request_id
        super().__init__("request not found")


class HistoryNotFoundError(AHPServiceError):
    """AHP历史不存在或已删除"""

    def __init__(self, history_id: int):
        self.history_id = history_id
        super().__init__("ahp history not found")
