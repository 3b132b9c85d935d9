"""
Tests for the JSON API: health checks, publication ingestion and flat file
downloads.
"""

import json
from datetime import datetime, timedelta

import pytest

from cath.core.security import create_access_token, create_publisher_token
from cath.db.models import Artefact
from cath.services import file_storage
from helpers import make_artefact

HEARING = {
    "date": "02/01/2025",
    "caseName": "A Vs B",
    "hearingLength": "1 day",
    "hearingType": "Substantive hearing",
    "venue": "Remote - Teams",
    "additionalInformation": "Open to the public",
}


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {create_publisher_token('publisher')}"}


def _publication(**overrides):
    now = datetime.utcnow()
    body = {
        "locationId": "9",
        "listTypeId": 9,
        "contentDate": "2025-01-06T00:00:00",
        "displayFrom": now.isoformat(),
        "displayTo": (now + timedelta(days=2)).isoformat(),
        "payload": [HEARING],
    }
    body.update(overrides)
    return body


class TestHealth:
    def test_should_report_healthy(self, client):
        assert client.get("/api/v1/health").json() == {"status": "healthy"}

    def test_should_echo_correlation_id(self, client):
        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "corr-1"})
        assert response.headers["x-correlation-id"] == "corr-1"

    def test_should_check_database_and_storage(self, client):
        body = client.get("/api/v1/health/ready").json()
        assert body["status"] == "healthy"
        assert body["database"]["status"] == "ok"
        assert body["storage"]["status"] == "ok"


class TestPublicationApi:
    def test_should_store_publication(self, client, reference_data, auth_headers):
        response = client.post("/api/v1/publication", json=_publication(), headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["noMatch"] is False
        artefact = reference_data.query(Artefact).one()
        assert str(artefact.artefact_id) == body["artefactId"]
        stored, _ = file_storage.get_file(body["artefactId"], ".json")
        assert json.loads(stored) == [HEARING]

    def test_should_flag_unknown_location(self, client, reference_data, auth_headers):
        response = client.post("/api/v1/publication", json=_publication(locationId="999"), headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["noMatch"] is True

    def test_should_supersede_same_list(self, client, reference_data, auth_headers):
        first = client.post("/api/v1/publication", json=_publication(), headers=auth_headers).json()
        second = client.post("/api/v1/publication", json=_publication(), headers=auth_headers).json()
        assert first["artefactId"] == second["artefactId"]
        assert reference_data.query(Artefact).one().superseded_count == 1

    def test_should_reject_unknown_list_type(self, client, reference_data, auth_headers):
        response = client.post("/api/v1/publication", json=_publication(listTypeId=99), headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid list type: 99"

    def test_should_reject_payload_that_fails_schema(self, client, reference_data, auth_headers):
        bad = dict(HEARING, date="2025-01-02")
        response = client.post("/api/v1/publication", json=_publication(payload=[bad]), headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"]["errors"]

    def test_should_reject_inverted_display_window(self, client, reference_data, auth_headers):
        body = _publication(displayFrom="2025-01-10T00:00:00", displayTo="2025-01-01T00:00:00")
        assert client.post("/api/v1/publication", json=body, headers=auth_headers).status_code == 422

    def test_should_require_payload_unless_flat_file(self, client, reference_data, auth_headers):
        assert client.post(
            "/api/v1/publication", json=_publication(payload=None), headers=auth_headers
        ).status_code == 422
        assert client.post(
            "/api/v1/publication", json=_publication(payload=None, isFlatFile=True), headers=auth_headers
        ).status_code == 201

    def test_should_require_bearer_token(self, client, reference_data):
        assert client.post("/api/v1/publication", json=_publication()).status_code in (401, 403)

    def test_should_reject_invalid_token(self, client, reference_data):
        headers = {"Authorization": "Bearer not-a-token"}
        response = client.post("/api/v1/publication", json=_publication(), headers=headers)
        assert response.status_code == 401

    def test_should_reject_expired_token(self, client, reference_data):
        token = create_publisher_token("publisher", expires_delta=timedelta(minutes=-1))
        response = client.post(
            "/api/v1/publication", json=_publication(), headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Token expired"

    def test_should_reject_sign_in_token(self, client, reference_data):
        token = create_access_token({"sub": "verified-user", "role": "VERIFIED"})
        response = client.post(
            "/api/v1/publication", json=_publication(), headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert reference_data.query(Artefact).count() == 0

    def test_should_require_publisher_role(self, client, reference_data):
        token = create_publisher_token("other-app", roles=["api.reader.user"])
        response = client.post(
            "/api/v1/publication", json=_publication(), headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions. Required role: api.publisher.user"
        assert reference_data.query(Artefact).count() == 0

    def test_should_not_accept_publisher_token_at_sign_in(self, client, db):
        response = client.get(f"/login/callback?token={create_publisher_token('publisher')}")
        assert response.status_code == 401


class TestFlatFileDownload:
    def test_should_stream_stored_file(self, client, reference_data):
        artefact_id = make_artefact(reference_data, is_flat_file=True, file_name="list.pdf", file_data=b"%PDF")
        response = client.get(f"/api/flat-file/{artefact_id}/download")

        assert response.status_code == 200
        assert response.content == b"%PDF"
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == f'inline; filename="{artefact_id}.pdf"'
        assert response.headers["cache-control"] == "public, max-age=3600"

    @pytest.mark.parametrize(
        "kwargs, status_code, error",
        [
            ({"is_flat_file": False}, 400, "Not a flat file"),
            ({"is_flat_file": True, "live": False}, 410, "File has expired"),
            ({"is_flat_file": True}, 404, "File not found in storage"),
        ],
    )
    def test_should_map_errors_to_status(self, client, reference_data, kwargs, status_code, error):
        artefact_id = make_artefact(reference_data, **kwargs)
        response = client.get(f"/api/flat-file/{artefact_id}/download")
        assert response.status_code == status_code
        assert response.json() == {"error": error}

    def test_should_404_unknown_artefact(self, client, reference_data):
        response = client.get("/api/flat-file/not-a-uuid/download")
        assert response.status_code == 404
        assert response.json() == {"error": "Artefact not found"}
