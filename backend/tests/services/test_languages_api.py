"""Language API tests — public lookups, authenticated listing, admin CRUD.

Invariants:
    - Public lookups only see active languages; shortcodes are case-insensitive
    - Listing requires a bearer token; writes require the admin role
    - Duplicate shortcodes are 409 on create and skipped on bulk import
"""

import pytest

from app.services.catalog_service import seed_master_data
from app.services.master_data import LANGUAGES


@pytest.fixture
async def seeded(test_db):
    return await seed_master_data(test_db)


def _lang(shortcode: str = "xx-yy", name: str = "Testish", country: str = "Testland") -> dict:
    return {"shortcode": shortcode, "name": name, "country": country}


# -- public -------------------------------------------------------------------

async def test_active_languages(client, seeded):
    resp = await client.get("/api/languages/active")
    body = resp.json()
    assert body["count"] == len(LANGUAGES)
    names = [lang["name"] for lang in body["data"]]
    assert names == sorted(names)


async def test_lookup_by_shortcode_ignores_case(client, seeded):
    resp = await client.get("/api/languages/hi")
    assert resp.json()["data"]["name"] == "Hindi"
    assert (await client.get("/api/languages/zz")).status_code == 404


async def test_search(client, seeded):
    resp = await client.get("/api/languages/search", params={"q": "portug"})
    codes = {lang["shortcode"] for lang in resp.json()["data"]}
    assert codes == {"PT", "PT-BR"}
    assert (await client.get("/api/languages/search")).status_code == 400


async def test_validate(client):
    good = await client.post("/api/languages/validate", json=_lang())
    assert good.json()["data"] == {"valid": True, "errors": []}
    bad = await client.post("/api/languages/validate", json={"shortcode": "1", "name": "X"})
    assert bad.json()["data"]["valid"] is False
    assert len(bad.json()["data"]["errors"]) == 3


# -- authenticated ------------------------------------------------------------

async def test_list_requires_token(client, seeded):
    resp = await client.get("/api/languages")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Access token required"


async def test_list_paginates(client, seeded, auth_headers):
    resp = await client.get(
        "/api/languages", params={"page": 2, "limit": 10, "sortBy": "shortcode"},
        headers=auth_headers,
    )
    body = resp.json()
    assert len(body["data"]) == 10
    assert body["pagination"]["page"] == 2
    assert body["pagination"]["total"] == len(LANGUAGES)
    assert body["pagination"]["hasPrev"] is True
    codes = [lang["shortcode"] for lang in body["data"]]
    assert codes == sorted(codes)


# -- admin --------------------------------------------------------------------

async def test_create_requires_admin(client, auth_headers):
    resp = await client.post("/api/languages", json=_lang(), headers=auth_headers)
    assert resp.status_code == 403
    assert resp.json()["message"] == "Insufficient permissions"


async def test_admin_crud(client, admin_headers):
    created = await client.post("/api/languages", json=_lang(), headers=admin_headers)
    assert created.status_code == 201
    lang = created.json()["data"]
    assert lang["shortcode"] == "XX-YY"

    dup = await client.post("/api/languages", json=_lang(), headers=admin_headers)
    assert dup.status_code == 409

    updated = await client.put(
        f"/api/languages/{lang['id']}", json={"name": "Testese"}, headers=admin_headers,
    )
    assert updated.json()["data"]["name"] == "Testese"

    toggled = await client.patch(f"/api/languages/{lang['id']}/toggle", headers=admin_headers)
    assert toggled.json()["message"] == "Language deactivated successfully"
    assert (await client.get("/api/languages/XX-YY")).status_code == 404

    by_id = await client.get(f"/api/languages/id/{lang['id']}", headers=admin_headers)
    assert by_id.json()["data"]["isActive"] is False

    deleted = await client.delete(f"/api/languages/{lang['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    gone = await client.get(f"/api/languages/id/{lang['id']}", headers=admin_headers)
    assert gone.status_code == 404


async def test_bulk_create_skips_duplicates(client, seeded, admin_headers):
    resp = await client.post("/api/languages/bulk", json={"languages": [
        _lang("XA", "Alpha"), _lang("xa", "Alpha again"), _lang("HI", "Hindi"),
    ]}, headers=admin_headers)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert [lang["shortcode"] for lang in data["created"]] == ["XA"]
    assert [s["shortcode"] for s in data["skipped"]] == ["XA", "HI"]
