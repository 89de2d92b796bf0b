"""
申请排序决策平台 - Web界面主应用
Request Ranking Decision Platform - Web Application

Flask 服务器同时承载 JSON 接口（/api/...）与 Dash 页面：
- /         申请列表与AHP实时排序
- /history  AHP历史记录
"""

import logging

import dash
from dash import dcc, html, Input, Output
import dash_bootstrap_components as dbc
from flask import Flask

from api import register_blueprints
from database.engine import init_database

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# 创建Flask服务器并注册接口
server = Flask(__name__)
register_blueprints(server)

# 创建Dash应用
app = dash.Dash(
    __name__,
    server=server,
    external_stylesheets=[dbc.themes.BOOTSTRAP, dbc.icons.FONT_AWESOME],
    suppress_callback_exceptions=True,
    title="申请排序决策平台",
    update_title="加载中...",
)

# 导入页面模块（必须在app创建后导入，以便注册回调）
from pages import dashboard, ahp_history

PAGES = {
    '/': dashboard,
    '/history': ahp_history,
}

# 应用布局
app.layout = dbc.Container([
    # 页面标题栏
    dbc.Navbar(
        dbc.Container([
            dbc.Row([
                dbc.Col([
                    html.Div([
                        html.I(className="fas fa-balance-scale fa-2x text-primary me-3"),
                        html.Span("申请排序决策平台", className="h3 mb-0 fw-bold")
                    ], className="d-flex align-items-center")
                ], width="auto"),
                dbc.Col([
                    html.Div([
                        dbc.Badge("AHP", color="success", className="me-2"),
                        dbc.Badge("Web界面", color="info")
                    ], className="d-flex justify-content-end align-items-center")
                ], width="auto")
            ], justify="between", className="w-100")
        ], fluid=True),
        color="light",
        className="mb-4 shadow-sm"
    ),

    dcc.Location(id='url', refresh=False),

    dbc.Row([
        # 左侧导航
        dbc.Col([
            dbc.Card([
                dbc.CardHeader(html.H5("导航", className="mb-0")),
                dbc.CardBody([
                    dbc.Nav([
                        dbc.NavLink([
                            html.I(className="fas fa-list-ol me-2"),
                            "申请排序"
                        ], href="/", id="nav-dashboard", active=True),

                        dbc.NavLink([
                            html.I(className="fas fa-history me-2"),
                            "AHP历史"
                        ], href="/history", id="nav-history"),
                    ], vertical=True, pills=True)
                ], className="p-0")
            ], className="shadow-sm")
        ], md=3, className="mb-4"),

        # 右侧内容区
        dbc.Col([
            html.Div(id='page-content')
        ], md=9)
    ]),

    html.Footer([
        html.Hr(),
        html.P("申请排序决策平台 © 2025", className="text-muted text-center mb-0")
    ], className="mt-5")

], fluid=True, className="px-4 py-3")


# 路由回调
@app.callback(
    Output('page-content', 'children'),
    [Input('url', 'pathname')]
)
def display_page(pathname):
    """根据URL路径显示对应页面"""
    page = PAGES.get(pathname or '/')
    if page is not None:
        return page.layout
    return html.Div([
        html.H1("404: 页面未找到", className="text-danger"),
        html.P("您访问的页面不存在"),
        dbc.Button("返回首页", href="/", color="primary")
    ], className="text-center mt-5")


# 导航激活状态回调
@app.callback(
    [Output('nav-dashboard', 'active'),
     Output('nav-history', 'active')],
    [Input('url', 'pathname')]
)
def update_nav_active(pathname):
    """更新导航栏激活状态"""
    return [pathname in ('/', None), pathname == '/history']


if __name__ == '__main__':
    init_database()
    app.run(debug=True, host='127.0.0.1', port=8050)
