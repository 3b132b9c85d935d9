"""
Builders shared by the test modules.
"""

from datetime import datetime, timedelta
from io import BytesIO
from typing import Iterable, Optional

from fastapi.testclient import TestClient
from openpyxl import Workbook

from cath.core.security import create_access_token
from cath.services.artefact_service import create_artefact
from cath.services import file_storage

CST_HEADERS = ["Date", "Case name", "Hearing length", "Hearing type", "Venue", "Additional information"]
CST_ROW = ["02/01/2025", "A Vs B", "1 day", "Substantive hearing", "Remote - Teams", "Open to the public"]

CSV_HEADER = "LOCATION_ID,LOCATION_NAME,WELSH_LOCATION_NAME,EMAIL,CONTACT_NO,SUB_JURISDICTION_NAME,REGION_NAME"


def sign_in(client: TestClient, role: str = "SYSTEM_ADMIN", sub: Optional[str] = None,
            email: Optional[str] = None, provenance: Optional[str] = None) -> dict:
    """Sign in through the SSO/IDAM callback; returns the claims used."""
    sub = sub or f"{role.lower().replace('_', '-')}-user"
    claims = {
        "sub": sub,
        "email": email or f"{sub}@example.com",
        "role": role,
        "given_name": "Test",
        "family_name": "User",
    }
    if provenance:
        claims["provenance"] = provenance
    response = client.get(f"/login/callback?token={create_access_token(claims)}", follow_redirects=False)
    assert response.status_code == 303
    use_csrf_token(client)
    return claims


def use_csrf_token(client: TestClient) -> str:
    """Send the session's CSRF token with every later request."""
    token = client.get("/csrf-token").json()["csrfToken"]
    client.headers["X-CSRF-Token"] = token
    return token


def build_xlsx(rows: Iterable[Iterable]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def cst_workbook(*rows) -> bytes:
    return build_xlsx([CST_HEADERS, *(rows or [CST_ROW])])


def build_csv(*rows: str) -> bytes:
    return "\n".join([CSV_HEADER, *rows]).encode("utf-8")


def make_artefact(
    db,
    location_id="9",
    list_type_id=9,
    content_date: Optional[datetime] = None,
    language="ENGLISH",
    sensitivity="PUBLIC",
    is_flat_file=False,
    live=True,
    file_name: Optional[str] = None,
    file_data: Optional[bytes] = None,
) -> str:
    """Artefact row plus (optionally) its stored file; returns the artefact id."""
    now = datetime.utcnow()
    window = (now - timedelta(days=1), now + timedelta(days=1)) if live else (
        now - timedelta(days=10), now - timedelta(days=5)
    )
    artefact_id = create_artefact(db, {
        "locationId": location_id,
        "listTypeId": list_type_id,
        "contentDate": content_date or datetime(2025, 1, 6),
        "sensitivity": sensitivity,
        "language": language,
        "displayFrom": window[0],
        "displayTo": window[1],
        "isFlatFile": is_flat_file,
        "sourceFileName": file_name,
    })
    if file_name and file_data is not None:
        file_storage.save_file(artefact_id, file_name, file_data)
    return artefact_id


def sjp_hearing(forename="John", surname="Smith", urn="TVL1234", postcode="SW1A 1AA",
                prosecutor="TV Licensing", date_of_birth=None, offence="Use a TV without a licence"):
    individual = {
        "forename": forename,
        "surname": surname,
        "address": {"line": ["1 High Street"], "postCode": postcode},
    }
    if date_of_birth:
        individual["dateOfBirth"] = date_of_birth
    return {
        "case": [{"caseUrn": urn}],
        "party": [
            {"partyRole": "ACCUSED", "individualDetails": individual},
            {"partyRole": "PROSECUTOR", "organisationDetails": {"name": prosecutor}},
        ],
        "offence": [{"offenceTitle": offence, "reportingRestriction": False}],
    }


def sjp_payload(*hearings) -> dict:
    sittings = [{"hearing": list(hearings or [sjp_hearing()])}]
    return {
        "document": {"publicationDate": "2025-01-06T09:00:00Z"},
        "courtLists": [{"courtHouse": {"courtRoom": [{"session": [{"sittings": sittings}]}]}}],
    }
