"""
AHP历史 - 列表、详情（准则矩阵热图、权重、全局排序）与删除
"""

import logging

from dash import html, dcc, callback, Input, Output, State, no_update
import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from utils.ahp_history_service import AHPHistoryService
from utils.errors import AHPServiceError
from utils.validation_helpers import create_success_alert

logger = logging.getLogger(__name__)

layout = dbc.Container([
    dcc.Interval(id='history-autoloader', interval=500, max_intervals=1),
    dcc.Store(id='history-refresh-store', data=0),
    html.H2([
        html.I(className="fas fa-history me-2 text-info"),
        "AHP历史"
    ], className="mb-4"),

    html.Div(id="history-alert"),

    dbc.Card([
        dbc.CardHeader(html.H5("历史记录", className="mb-0")),
        dbc.CardBody(html.Div(id="history-list-table"))
    ], className="shadow-sm mb-4"),

    dbc.Card([
        dbc.CardHeader([
            html.H5("记录详情", className="mb-0 d-inline"),
            dbc.Button([
                html.I(className="fas fa-trash me-1"),
                "删除"
            ], id="btn-delete-history", color="danger", size="sm", outline=True, className="float-end")
        ]),
        dbc.CardBody([
            dcc.Dropdown(id="select-ahp-history", options=[], placeholder="选择一条历史记录", className="mb-3"),
            html.Div(id="history-detail")
        ])
    ], className="shadow-sm")
], fluid=True)


def get_history_service() -> AHPHistoryService:
    return AHPHistoryService(session_scope=current_app.config.get('AHP_SESSION_SCOPE'))


def build_history_options(data):
    return [
        {
            'label': f"#{item['id']} {item['reference_request']['event_name']} ({item['created_at']})",
            'value': item['id'],
        }
        for item in data
    ]


def build_history_table(data):
    if not data:
        return html.P("暂无历史记录", className="text-muted")

    body = []
    for item in data:
        top = item['priority'][0]['name'] if item['priority'] else "-"
        body.append(html.Tr([
            html.Td(item['id']),
            html.Td(item['reference_request']['event_name']),
            html.Td(item['reference_request'].get('user') or "-"),
            html.Td(", ".join(item['criteria'])),
            html.Td(len(item['alternatives'])),
            html.Td(top),
            html.Td(item['created_at']),
        ]))

    return dbc.Table([
        html.Thead(html.Tr([html.Th(h) for h in ["ID", "关联活动", "申请人", "准则", "方案数", "首选方案", "创建时间"]])),
        html.Tbody(body)
    ], striped=True, bordered=True, hover=True, size="sm")


def build_matrix_heatmap(matrix, labels, title="准则比较矩阵") -> go.Figure:
    """成对比较矩阵热图"""
    matrix = matrix or []
    labels = list(labels or [])
    text = [[f"{val:.3f}" for val in row] for row in matrix]

    fig = go.Figure(data=go.Heatmap(
        z=matrix,
        x=labels,
        y=labels,
        colorscale='RdYlGn',
        text=text,
        texttemplate='%{text}',
        textfont={"size": 14},
        colorbar=dict(title="重要度"),
        hovertemplate='%{y} 相对 %{x}: %{z}<extra></extra>'
    ))
    fig.update_layout(
        title=title,
        yaxis=dict(autorange='reversed'),
        height=max(400, 60 * len(labels) + 150)
    )
    return fig


def build_weight_figure(weights) -> go.Figure:
    """准则权重条形图；weights 为 [{name, weight}]"""
    fig = go.Figure(data=go.Bar(
        x=[item['name'] for item in weights],
        y=[float(item['weight']) for item in weights],
        text=[item['weight'] for item in weights],
        textposition='auto',
        marker=dict(color='lightblue', line=dict(color='darkblue', width=1))
    ))
    fig.update_layout(title="准则权重", yaxis_title="权重", height=400)
    return fig


def build_priority_table(global_priority):
    return dbc.Table([
        html.Thead(html.Tr([html.Th("排名"), html.Th("方案"), html.Th("得分")])),
        html.Tbody([
            html.Tr([html.Td(item['rank']), html.Td(item['name']), html.Td(item['score'])])
            for item in global_priority
        ])
    ], striped=True, bordered=True, hover=True, size="sm")


def build_alternative_cards(alternative_summary, alternatives):
    """各准则下的方案权重与 CR"""
    cards = []
    for item in alternative_summary:
        cr = item['cr']
        weights = ", ".join(
            f"{name}: {weight:.4f}" for name, weight in zip(alternatives, item['weights'])
        )
        cards.append(dbc.ListGroupItem([
            html.Strong(item['criterion']),
            dbc.Badge(f"CR {cr:.4f}", color="success" if cr < 0.1 else "warning", className="ms-2"),
            html.Div(weights, className="small text-muted")
        ]))
    return dbc.ListGroup(cards, className="mb-3")


def build_history_detail(detail):
    """组装详情视图"""
    if detail is None:
        return dbc.Alert("记录不存在或已删除", color="warning")

    criteria = detail['criteria_summary']
    reference = detail['reference_request']
    cr = criteria['cr']

    children = [
        html.P([
            html.Strong(f"#{detail['id']} "),
            f"{reference['event_name']}（{reference.get('user') or '-'}） · {detail['created_at']}"
        ]),
    ]
    if cr is not None:
        children.append(dbc.Alert(
            f"准则一致性比率 CR = {cr:.4f}",
            color="success" if cr < 0.1 else "warning"
        ))
        children.append(dbc.Row([
            dbc.Col(dcc.Graph(figure=build_matrix_heatmap(criteria['matrix'], criteria['labels'])), md=6),
            dbc.Col(dcc.Graph(figure=build_weight_figure(criteria['weights'])), md=6),
        ]))

    children.append(html.H6("各准则下方案权重", className="mt-3"))
    children.append(build_alternative_cards(detail['alternative_summary'], detail['alternatives']))
    children.append(html.H6("全局排序"))
    children.append(build_priority_table(detail['global_priority']))
    return html.Div(children)


@callback(
    [Output('history-list-table', 'children'),
     Output('select-ahp-history', 'options')],
    [Input('history-autoloader', 'n_intervals'),
     Input('history-refresh-store', 'data')]
)
def load_history_list(n_intervals, refresh):
    try:
        result = get_history_service().find()
    except SQLAlchemyError as e:
        logger.error(f"读取AHP历史失败: {e}")
        return dbc.Alert("读取AHP历史失败", color="danger"), []
    return build_history_table(result['data']), build_history_options(result['data'])


@callback(
    Output('history-detail', 'children'),
    Input('select-ahp-history', 'value')
)
def show_history_detail(history_id):
    if history_id is None:
        return html.P("请选择一条历史记录", className="text-muted")
    try:
        result = get_history_service().find_by_id(history_id)
    except (AHPServiceError, SQLAlchemyError) as e:
        logger.error(f"读取AHP历史 {history_id} 失败: {e}")
        return dbc.Alert("读取记录失败", color="danger")
    return build_history_detail(result['data'])


@callback(
    [Output('history-alert', 'children'),
     Output('history-refresh-store', 'data'),
     Output('select-ahp-history', 'value')],
    Input('btn-delete-history', 'n_clicks'),
    [State('select-ahp-history', 'value'),
     State('history-refresh-store', 'data')],
    prevent_initial_call=True
)
def delete_history(n_clicks, history_id, refresh):
    if not n_clicks or history_id is None:
        return no_update, no_update, no_update
    try:
        get_history_service().delete(history_id)
    except AHPServiceError as e:
        return dbc.Alert(e.detail, color="warning", dismissable=True), no_update, no_update
    except SQLAlchemyError as e:
        logger.error(f"删除AHP历史 {history_id} 失败: {e}")
        return dbc.Alert("删除失败", color="danger", dismissable=True), no_update, no_update
    return create_success_alert(f"✅ 已删除记录 #{history_id}"), (refresh or 0) + 1, None
