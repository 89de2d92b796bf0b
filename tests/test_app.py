from dash import html

import app as web_app
from pages import ahp_history, dashboard


def test_routes_to_pages():
    assert web_app.display_page('/') is dashboard.layout
    assert web_app.display_page(None) is dashboard.layout
    assert web_app.display_page('/history') is ahp_history.layout


def test_unknown_route_shows_404():
    page = web_app.display_page('/nowhere')

    assert isinstance(page, html.Div)
    assert "404" in page.children[0].children


def test_nav_active_state():
    assert web_app.update_nav_active('/') == [True, False]
    assert web_app.update_nav_active('/history') == [False, True]


def test_api_is_registered_on_server():
    rules = {rule.rule for rule in web_app.server.url_map.iter_rules()}

    assert "/api/ahp-history" in rules
    assert "/api/ahp-history/<int:history_id>" in rules
    assert "/api/requests" in rules
