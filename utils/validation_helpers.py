"""
Pydantic 验证错误处理工具

提供友好的错误消息格式化，供 Flask 接口返回 400 响应，
以及 Dash Alert 组件生成，供页面展示。
"""
from typing import List, Dict, Any
from pydantic import ValidationError
import dash_bootstrap_components as dbc
from dash import html


def format_validation_error(error: ValidationError) -> List[Dict[str, Any]]:
    """
    格式化 Pydantic 验证错误为用户友好的消息列表

    Args:
        error: Pydantic ValidationError 对象

    Returns:
        格式化的错误消息列表，每个错误包含 field、message 和 type

    Example:
        >>> from database.schemas import AHPHistoryCreate
        >>> try:
        ...     AHPHistoryCreate(criteria=[], alternatives=["A"], reference_request=0)
        ... except ValidationError as e:
        ...     errors = format_validation_error(e)
        ...     # [{'field': 'criteria', 'message': '至少需要 1 项', ...},
        ...     #  {'field': 'reference_request', 'message': '值必须大于或等于 1', ...}]
    """
    formatted_errors = []

    for err in error.errors():
        field_path = " → ".join(str(loc) for loc in err['loc'])
        error_type = err['type']
        error_msg = err['msg']
        ctx = err.get('ctx', {}) or {}

        # 根据错误类型生成友好的中文消息
        if error_type == 'string_too_short':
            message = "字段不能为空"
        elif error_type == 'too_short':
            message = f"至少需要 {ctx.get('min_length', 1)} 项"
        elif error_type == 'greater_than_equal':
            message = f"值必须大于或等于 {ctx.get('ge', '未知')}"
        elif error_type == 'greater_than':
            message = f"值必须大于 {ctx.get('gt', '未知')}"
        elif error_type == 'less_than_equal':
            message = f"值必须小于或等于 {ctx.get('le', '未知')}"
        elif error_type == 'finite_number':
            message = "值必须是有限数"
        elif error_type == 'value_error':
            # 自定义验证错误（准则名称、重复项等）
            message = error_msg.replace('Value error, ', '')
        elif error_type == 'missing':
            message = "此字段为必填项"
        elif error_type in ('int_parsing', 'float_parsing', 'list_type', 'dict_type', 'string_type'):
            message = f"字段类型错误: {error_msg}"
        else:
            # 其他错误，使用原始消息
            message = error_msg

        formatted_errors.append({
            'field': field_path,
            'message': message,
            'type': error_type
        })

    return formatted_errors


def create_validation_alert(
    errors: List[Dict[str, Any]],
    color: str = "danger",
    dismissible: bool = True
) -> dbc.Alert:
    """
    创建 Dash Bootstrap Alert 组件显示验证错误

    Args:
        errors: 格式化的错误消息列表（来自 format_validation_error）
        color: Alert 颜色（danger, warning, info, success）
        dismissible: 是否可关闭

    Returns:
        dbc.Alert 组件
    """
    if not errors:
        return dbc.Alert(
            "没有验证错误",
            color="success",
            dismissable=dismissible
        )

    error_items = [
        html.Li([
            html.Strong(f"{err['field']}: "),
            html.Span(err['message'])
        ])
        for err in errors
    ]

    return dbc.Alert(
        [
            html.H5("❌ 数据验证失败", className="alert-heading"),
            html.P("请检查以下字段："),
            html.Ul(error_items, className="mb-0")
        ],
        color=color,
        dismissable=dismissible,
        className="mb-3"
    )


def create_success_alert(message: str = "✅ 保存成功！") -> dbc.Alert:
    """创建成功提示 Alert（3秒后自动消失）"""
    return dbc.Alert(
        message,
        color="success",
        dismissable=True,
        duration=3000,
        className="mb-3"
    )


def validate_and_create_alert(
    schema_class,
    data: Dict[str, Any]
) -> tuple[Any, dbc.Alert]:
    """
    验证数据并返回 Schema 实例和 Alert 组件

    Returns:
        (schema_instance, alert) 元组
        - 如果验证成功，返回 (实例, 成功Alert)
        - 如果验证失败，返回 (None, 错误Alert)
    """
    try:
        instance = schema_class(**data)
    except ValidationError as e:
        return None, create_validation_alert(format_validation_error(e))

    return instance, create_success_alert("✅ 数据验证通过")
