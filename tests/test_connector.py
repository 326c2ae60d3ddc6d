import pytest
import requests
import responses

from baton_onelogin.connector.connector import ConnectorMetadata, OneLogin
from baton_onelogin.connector.resources import ConnectorError
from baton_onelogin.onelogin.client import Client, RequestError

SUB = "acme"
API = f"https://{SUB}.onelogin.com/api/2/"
API_V1 = f"https://{SUB}.onelogin.com/api/1/"
TOKEN_URL = f"https://{SUB}.onelogin.com/auth/oauth2/v2/token"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


def _connector():
    return OneLogin(Client(requests.Session(), "token", SUB))


USERS = [
    {
        "id": 1,
        "email": "ada@example.com",
        "username": "ada",
        "firstname": "Ada",
        "lastname": "Lovelace",
        "status": 1,
        "manager_user_id": 2,
    },
    {
        "id": 2,
        "email": "bob@example.com",
        "username": "bob",
        "firstname": "Bob",
        "lastname": "Smith",
        "status": 0,
    },
]


def _register(rsps, apps_pages=None, roles_status=200):
    rsps.add(responses.GET, API + "users", json=USERS)
    for user in USERS:
        rsps.add(responses.GET, API + f"users/{user['id']}", json=user)
    if roles_status == 200:
        rsps.add(responses.GET, API + "roles", json=[{"id": 20, "name": "Ops"}])
    else:
        rsps.add(responses.GET, API + "roles", status=roles_status)
    rsps.add(responses.GET, API + "roles/20/users", json=[{"id": 1}])
    rsps.add(responses.GET, API + "roles/20/admins", json=[{"id": 2}])
    rsps.add(responses.GET, API + "roles/20/apps", json=[{"id": 10, "name": "Wiki"}])
    for items, cursor in apps_pages or [([{"id": 10, "name": "Wiki"}], "")]:
        headers = {"after-cursor": cursor} if cursor else {}
        rsps.add(responses.GET, API + "apps", json=items, headers=headers)
    rsps.add(responses.GET, API + "apps/10/users", json=[{"id": 1}])
    rsps.add(responses.GET, API + "apps/11/users", json=[])
    rsps.add(
        responses.GET,
        API_V1 + "groups",
        json={"data": [{"id": 30, "name": "Staff"}], "pagination": {"after_cursor": None}},
    )


def test_metadata_names_onelogin():
    meta = _connector().metadata()
    assert meta == ConnectorMetadata(
        display_name="OneLogin",
        description="Connector syncing OneLogin users, roles, groups and applications to Baton.",
    )


def test_resource_syncers_order():
    ids = [s.resource_type.id for s in _connector().resource_syncers()]
    assert ids == ["user", "role", "app", "group"]


def test_validate_sends_limit_one(rsps):
    rsps.add(responses.GET, API + "connectors", json=[])
    assert _connector().validate() is None
    assert "limit=1" in rsps.calls[0].request.url


def test_validate_unauthorized(rsps):
    rsps.add(responses.GET, API + "connectors", status=401)
    with pytest.raises(ConnectorError, match="unauthorized"):
        _connector().validate()


def test_create_uses_generated_token(rsps):
    rsps.add(responses.POST, TOKEN_URL, json={"access_token": "token"})
    rsps.add(responses.GET, API + "connectors", json=[])
    connector = OneLogin.create("id", "secret", SUB)
    ids = [s.resource_type.id for s in connector.resource_syncers()]
    assert ids == ["user", "role", "app", "group"]
    assert connector.validate() is None
    assert len(rsps.calls) == 2
    assert rsps.calls[1].request.headers["Authorization"] == "Bearer token"


def test_create_fails_on_rejected_credentials(rsps):
    rsps.add(responses.POST, TOKEN_URL, status=401)
    with pytest.raises(RequestError) as info:
        OneLogin.create("id", "secret", SUB)
    assert info.value.status_code == 401


def test_sync_collects_resources(rsps):
    _register(rsps)
    result = _connector().sync()
    ids = {(r.id.resource_type, r.id.resource) for r in result.resources}
    assert ids == {("user", "1"), ("user", "2"), ("role", "20"), ("app", "10"), ("group", "30")}


def test_sync_fills_manager_email(rsps):
    _register(rsps)
    result = _connector().sync()
    ada = next(r for r in result.resources if r.id == result.resources[0].id)
    assert ada.profile["manager_email"] == "bob@example.com"


def test_sync_entitlements_and_grants(rsps):
    _register(rsps)
    result = _connector().sync()
    ents = {(e.resource.id.resource_type, e.resource.id.resource, e.slug) for e in result.entitlements}
    assert ents == {
        ("role", "20", "member"),
        ("role", "20", "admin"),
        ("app", "10", "member"),
        ("group", "30", "member"),
    }
    grants = {
        (
            g.entitlement.resource.id.resource_type,
            g.entitlement.resource.id.resource,
            g.entitlement.slug,
            g.principal.id.resource_type,
            g.principal.id.resource,
        )
        for g in result.grants
    }
    assert grants == {
        ("role", "20", "member", "user", "1"),
        ("role", "20", "admin", "user", "2"),
        ("role", "20", "admin", "app", "10"),
        ("app", "10", "member", "user", "1"),
        ("group", "30", "member", "user", "1"),
        ("group", "30", "member", "user", "2"),
    }


def test_sync_follows_cursors(rsps):
    _register(
        rsps,
        apps_pages=[([{"id": 10, "name": "Wiki"}], "c2"), ([{"id": 11, "name": "Mail"}], "")],
    )
    result = _connector().sync()
    apps = {r.id.resource for r in result.resources if r.id.resource_type == "app"}
    assert apps == {"10", "11"}
    app_calls = [c.request.url for c in rsps.calls if c.request.url.startswith(API + "apps?")]
    assert "cursor=c2" in app_calls[1]
    assert "limit=" not in app_calls[1]


def test_sync_reports_failure(rsps):
    _register(rsps, roles_status=500)
    with pytest.raises(ConnectorError, match="failed to list roles"):
        _connector().sync()


def test_sync_result_to_dict_round_trip(rsps):
    _register(rsps)
    result = _connector().sync()
    data = result.to_dict()
    assert len(data["resources"]) == len(result.resources)
    assert {g["id"] for g in data["grants"]} == {g.id for g in result.grants}
    assert {e["id"] for e in data["entitlements"]} == {e.id for e in result.entitlements}