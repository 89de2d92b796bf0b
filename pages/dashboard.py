"""
仪表盘 - 申请列表与AHP实时排序
"""

import json
import logging

from dash import html, dcc, callback, Input, Output, State, ALL
import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from flask import current_app
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from database.schemas import ComplexityItem
from utils.request_service import RequestService
from utils.validation_helpers import create_validation_alert, format_validation_error

logger = logging.getLogger(__name__)

layout = dbc.Container([
    dcc.Interval(id='dashboard-autoloader', interval=500, max_intervals=1),
    html.H2([
        html.I(className="fas fa-list-ol me-2 text-primary"),
        "申请排序"
    ], className="mb-4"),

    dbc.Row([
        # 复杂度评分
        dbc.Col([
            dbc.Card([
                dbc.CardHeader(html.H5("活动复杂度评分（1-5）", className="mb-0")),
                dbc.CardBody([
                    html.Div(id="dashboard-complexity-editor"),
                    dbc.Switch(
                        id="switch-use-ahp",
                        label="按AHP得分排序",
                        value=True,
                        className="mt-3"
                    ),
                    dbc.Button([
                        html.I(className="fas fa-play-circle me-2"),
                        "计算排序"
                    ], id="btn-rank-requests", color="success", className="mt-3 w-100")
                ])
            ], className="shadow-sm mb-4")
        ], md=4),

        # 排序结果
        dbc.Col([
            html.Div(id="dashboard-alert"),
            dbc.Card([
                dbc.CardHeader(html.H5("申请列表", className="mb-0")),
                dbc.CardBody(html.Div(id="dashboard-request-table"))
            ], className="shadow-sm mb-4"),
            dbc.Card([
                dbc.CardHeader(html.H5("AHP得分占比", className="mb-0")),
                dbc.CardBody(dcc.Graph(id="dashboard-score-chart"))
            ], className="shadow-sm")
        ], md=8)
    ])
], fluid=True)


def get_request_service() -> RequestService:
    return RequestService(session_scope=current_app.config.get('AHP_SESSION_SCOPE'))


def build_complexity_payload(ids, values, names=None) -> str:
    """
    将复杂度输入框的值整理为 event_complexity JSON

    空输入框跳过（计算时按默认评分 1 处理）。

    Raises:
        ValidationError: 评分超出 1-5 范围
    """
    names = names or {}
    items = []
    for component_id, value in zip(ids, values):
        if value in (None, ""):
            continue
        request_id = component_id['index']
        item = ComplexityItem(id=request_id, event_name=names.get(request_id), complexity=value)
        items.append(item.model_dump())
    return json.dumps(items)


def build_complexity_editor(data):
    """每条申请一个复杂度输入框"""
    if not data:
        return html.P("暂无申请", className="text-muted")

    rows = []
    for item in data:
        rows.append(dbc.InputGroup([
            dbc.InputGroupText(f"#{item['id']} {item['event_name']}", style={'minWidth': '60%'}),
            dbc.Input(
                id={'type': 'complexity-input', 'index': item['id']},
                type="number",
                min=1,
                max=5,
                step=1,
                placeholder="1"
            )
        ], size="sm", className="mb-2"))
    return html.Div(rows)


def build_request_table(data) -> dbc.Table:
    """申请列表表格；有 ahp_score 时显示得分与占比"""
    with_score = any('ahp_score' in item for item in data)

    header = ["ID", "申请人", "活动", "类型", "开始时间", "参与人数"]
    if with_score:
        header += ["AHP得分", "占比"]

    body = []
    for item in data:
        event_type = item.get('event_type') or {}
        cells = [
            item['id'],
            item.get('user') or "-",
            item['event_name'],
            event_type.get('name', "-"),
            item.get('event_date_start') or "-",
            item.get('count_participant', 0),
        ]
        if with_score:
            score = item.get('ahp_score')
            cells += [f"{score['raw']:.6f}", score['percent']] if score else ["-", "-"]
        body.append(html.Tr([html.Td(cell) for cell in cells]))

    return dbc.Table([
        html.Thead(html.Tr([html.Th(h) for h in header])),
        html.Tbody(body)
    ], striped=True, bordered=True, hover=True, size="sm")


def build_score_figure(data) -> go.Figure:
    """AHP得分条形图（按当前排序）"""
    scored = [item for item in data if 'ahp_score' in item]
    fig = go.Figure()
    if scored:
        fig.add_trace(go.Bar(
            x=[item['event_name'] for item in scored],
            y=[item['ahp_score']['raw'] for item in scored],
            text=[item['ahp_score']['percent'] for item in scored],
            textposition='auto',
            marker=dict(color='lightgreen', line=dict(color='darkgreen', width=1))
        ))
    fig.update_layout(
        xaxis_title="活动",
        yaxis_title="AHP得分",
        height=400,
        margin=dict(t=30)
    )
    return fig


@callback(
    Output('dashboard-complexity-editor', 'children'),
    Input('dashboard-autoloader', 'n_intervals')
)
def load_complexity_editor(n_intervals):
    """加载申请列表，生成复杂度输入框"""
    try:
        result = get_request_service().find()
    except SQLAlchemyError as e:
        logger.error(f"读取申请列表失败: {e}")
        return dbc.Alert("读取申请列表失败", color="danger")
    return build_complexity_editor(result['data'])


@callback(
    [Output('dashboard-request-table', 'children'),
     Output('dashboard-score-chart', 'figure'),
     Output('dashboard-alert', 'children')],
    [Input('btn-rank-requests', 'n_clicks')],
    [State('switch-use-ahp', 'value'),
     State({'type': 'complexity-input', 'index': ALL}, 'id'),
     State({'type': 'complexity-input', 'index': ALL}, 'value')]
)
def update_request_ranking(n_clicks, use_ahp, ids, values):
    """按复杂度评分计算AHP排序并刷新列表"""
    try:
        event_complexity = build_complexity_payload(ids or [], values or [])
    except ValidationError as e:
        return html.Div(), build_score_figure([]), create_validation_alert(format_validation_error(e))

    try:
        result = get_request_service().find({
            'use_ahp': bool(use_ahp),
            'event_complexity': event_complexity,
        })
    except SQLAlchemyError as e:
        logger.error(f"申请排序失败: {e}")
        return html.Div(), build_score_figure([]), dbc.Alert("申请排序失败", color="danger")

    data = result['data']
    return build_request_table(data), build_score_figure(data), None
