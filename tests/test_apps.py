from urllib.parse import parse_qs, urlsplit

import pytest
import requests
import responses

from baton_onelogin.connector.apps import AppSyncer, app_resource
from baton_onelogin.connector.pagination import Bag
from baton_onelogin.connector.resources import (
    RESOURCE_TYPE_USER,
    ConnectorError,
    ResourceId,
    Trait,
)
from baton_onelogin.onelogin.client import Client, RequestError
from baton_onelogin.onelogin.models import App

APPS = "https://acme.onelogin.com/api/2/apps"


@pytest.fixture
def rsps():
    with responses.RequestsMock() as mock:
        yield mock


@pytest.fixture
def syncer():
    return AppSyncer(Client(requests.Session(), "token", "acme"))


def _query(call):
    return parse_qs(urlsplit(call.request.url).query)


def test_app_resource():
    res = app_resource(App(id=12, name="Mail"))
    assert res.id == ResourceId("app", "12")
    assert res.display_name == "Mail"
    assert res.trait is Trait.APP
    assert res.profile == {"app_id": 12, "app_name": "Mail"}


def test_list_first_page(rsps, syncer):
    rsps.add(
        responses.GET,
        APPS,
        json=[{"id": 1, "name": "One"}, {"id": 2, "name": "Two"}],
        headers={"after-cursor": "next"},
    )
    resources, token = syncer.list(None, "")
    assert [r.display_name for r in resources] == ["One", "Two"]
    assert [r.id.resource for r in resources] == ["1", "2"]
    assert Bag.from_token(token).page_token() == "next"
    query = _query(rsps.calls[0])
    assert query["limit"] == ["50"]
    assert "cursor" not in query


def test_list_follows_cursor(rsps, syncer):
    rsps.add(responses.GET, APPS, json=[], headers={"after-cursor": "next"})
    rsps.add(responses.GET, APPS, json=[{"id": 3, "name": "Three"}])
    _, token = syncer.list(None, "")
    resources, final = syncer.list(None, token)
    assert [r.display_name for r in resources] == ["Three"]
    assert final == ""
    query = _query(rsps.calls[1])
    assert query["cursor"] == ["next"]
    assert "limit" not in query


def test_list_error_is_wrapped(rsps, syncer):
    rsps.add(responses.GET, APPS, status=500)
    with pytest.raises(ConnectorError) as info:
        syncer.list(None, "")
    assert isinstance(info.value.__cause__, RequestError)
    assert info.value.__cause__.status_code == 500


def test_entitlements(syncer):
    resource = app_resource(App(id=5, name="Acme"))
    entitlements, token = syncer.entitlements(resource, "")
    assert token == ""
    assert len(entitlements) == 1
    ent = entitlements[0]
    assert ent.slug == "member"
    assert ent.resource is resource
    assert ent.display_name == "Acme App member"
    assert ent.description == "Access to Acme app in OneLogin"
    assert ent.grantable_to == (RESOURCE_TYPE_USER,)


def test_grants(rsps, syncer):
    rsps.add(
        responses.GET,
        "https://acme.onelogin.com/api/2/apps/5/users",
        json=[{"id": 10}, {"id": 11}],
        headers={"after-cursor": "more"},
    )
    resource = app_resource(App(id=5, name="Acme"))
    grants, token = syncer.grants(resource, "")
    assert [g.principal.id for g in grants] == [
        ResourceId("user", "10"),
        ResourceId("user", "11"),
    ]
    assert all(g.entitlement.slug == "member" for g in grants)
    assert all(g.entitlement.resource is resource for g in grants)
    bag = Bag.from_token(token)
    assert bag.page_token() == "more"
    assert bag.current().resource_id == "5"


def test_grants_error_is_wrapped(rsps, syncer):
    rsps.add(responses.GET, "https://acme.onelogin.com/api/2/apps/5/users", status=403)
    with pytest.raises(ConnectorError):
        syncer.grants(app_resource(App(id=5, name="Acme")), "")