import json

import pytest
from flask import Flask

from api import register_blueprints
from database.models import AHPHistory


@pytest.fixture
def client(session_scope):
    server = Flask(__name__)
    server.config.update(TESTING=True, AHP_SESSION_SCOPE=session_scope)
    register_blueprints(server)
    return server.test_client()


def test_create_and_read_history(client, seeded_requests, history_payload):
    response = client.post("/api/ahp-history", json=history_payload(seeded_requests["Seminar"]))

    assert response.status_code == 200
    history_id = response.get_json()['id']

    detail = client.get(f"/api/ahp-history/{history_id}").get_json()['data']
    assert detail['global_priority'][0]['name'] == "Seminar"
    assert detail['criteria_summary']['count'] == 3

    listing = client.get("/api/ahp-history").get_json()
    assert listing['count'] == 1
    assert listing['data'][0]['id'] == history_id


def test_validation_error_returns_400(client, seeded_requests, history_payload):
    payload = history_payload(seeded_requests["Seminar"], criteria=["Urgency", "Budget"])
    response = client.post("/api/ahp-history", json=payload)

    assert response.status_code == 400
    body = response.get_json()
    assert body['error'] == "bad_request"
    assert any(err['field'].startswith("criteria") for err in body['message'])


def test_empty_body_returns_400(client, session_scope):
    response = client.post("/api/ahp-history", data="not json", content_type="text/plain")

    assert response.status_code == 400
    fields = {err['field'] for err in response.get_json()['message']}
    assert {"criteria", "alternatives", "reference_request"} <= fields


def test_missing_reference_request_returns_400(client, seeded_requests, history_payload):
    response = client.post("/api/ahp-history", json=history_payload(999))

    assert response.status_code == 400
    assert response.get_json() == {'error': "bad_request", 'message': "request not found"}


def test_list_filters(client, seeded_requests, history_payload):
    client.post("/api/ahp-history", json=history_payload(seeded_requests["Seminar"]))
    client.post("/api/ahp-history", json=history_payload(seeded_requests["Party"]))

    body = client.get(f"/api/ahp-history?reference_request={seeded_requests['Party']}").get_json()
    assert body['count'] == 1

    assert client.get("/api/ahp-history?limit=0").status_code == 400


def test_missing_history_detail_is_null(client, session_scope):
    response = client.get("/api/ahp-history/77")

    assert response.status_code == 200
    assert response.get_json() == {'data': None}


def test_delete_history(client, seeded_requests, history_payload):
    history_id = client.post("/api/ahp-history", json=history_payload(seeded_requests["Seminar"])).get_json()['id']

    response = client.delete(f"/api/ahp-history/{history_id}")
    assert response.status_code == 200
    assert response.get_json() == {'message': "success delete!"}

    assert client.get(f"/api/ahp-history/{history_id}").get_json() == {'data': None}

    again = client.delete(f"/api/ahp-history/{history_id}")
    assert again.status_code == 400
    assert again.get_json()['message'] == "ahp history not found"


def test_requests_listing(client, seeded_requests):
    plain = client.get("/api/requests").get_json()
    assert plain['count'] == 3
    assert all('ahp_score' not in item for item in plain['data'])

    complexity = json.dumps([{'id': seeded_requests["Party"], 'complexity': 5}])
    ranked = client.get("/api/requests", query_string={'use_ahp': 'yes', 'event_complexity': complexity}).get_json()
    assert all('ahp_score' in item for item in ranked['data'])
    scores = [item['ahp_score']['raw'] for item in ranked['data']]
    assert scores == sorted(scores, reverse=True)


def test_database_error_returns_500(client, engine, seeded_requests, history_payload):
    AHPHistory.__table__.drop(engine)

    response = client.post("/api/ahp-history", json=history_payload(seeded_requests["Seminar"]))

    assert response.status_code == 500
    assert response.get_json()['error'] == "server_error"
