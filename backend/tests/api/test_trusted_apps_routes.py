"""Trusted Apps Routes — handler behaviour against a mocked exception list client.

Tests cover:
    - Every handler pulls the list client from request context
    - The trusted apps list is created before any read/write/delete
    - List query parameters reach the client with fixed namespace and sort
    - List returns the client's page as stored, whatever the entry shapes
    - Create maps the payload to an exception list item and returns the trusted app
    - Delete maps None → 404, record → 200
    - Any client failure → exactly one "trusted_apps" error log and a generic 500
"""

import logging

import pytest

from trustgate.api.routes.trusted_apps import (
    TRUSTED_APPS_CREATE_API,
    TRUSTED_APPS_DELETE_API,
    TRUSTED_APPS_LIST_API,
    TRUSTED_APPS_SUMMARY_API,
)
from trustgate.core.domain_types import (
    ENDPOINT_TRUSTED_APPS_LIST_ID,
    NamespaceType,
    SortOrder,
)
from trustgate.schemas.exception_list import (
    DeleteExceptionListItemOptions,
    FindExceptionListItemOptions,
    FoundExceptionListItems,
)

from tests.api.mock_list_client import get_exception_list_item_mock


def _trusted_apps_errors(caplog) -> list[logging.LogRecord]:
    return [
        r for r in caplog.records
        if r.name == "trusted_apps" and r.levelno == logging.ERROR
    ]


def _new_trusted_app_body() -> dict:
    return {
        "name": "Some Anti-Virus App",
        "description": "this one is ok",
        "os": "windows",
        "entries": [
            {
                "field": "process.path",
                "type": "match",
                "operator": "included",
                "value": "c:/programs files/Anti-Virus",
            },
        ],
    }


def _delete_path(item_id: str) -> str:
    return TRUSTED_APPS_DELETE_API.replace("{app_id}", item_id)


# --- List ---------------------------------------------------------------------

async def test_list_uses_list_client_from_request_context(client, client_requests):
    await client.get(TRUSTED_APPS_LIST_API)
    assert len(client_requests) == 1


async def test_list_creates_trusted_apps_list_first(client, list_client):
    res = await client.get(TRUSTED_APPS_LIST_API)

    assert res.status_code == 200
    assert [call[0] for call in list_client.mock_calls] == [
        "create_trusted_apps_list", "find_exception_list_item",
    ]


async def test_list_passes_pagination_to_exception_list_service(client, list_client):
    empty = FoundExceptionListItems(data=[], page=10, per_page=100, total=0)
    list_client.find_exception_list_item.return_value = empty

    res = await client.get(TRUSTED_APPS_LIST_API, params={"page": 10, "per_page": 100})

    assert res.status_code == 200
    assert res.json() == {"data": [], "page": 10, "per_page": 100, "total": 0}
    list_client.find_exception_list_item.assert_awaited_once_with(
        FindExceptionListItemOptions(
            list_id=ENDPOINT_TRUSTED_APPS_LIST_ID,
            page=10,
            per_page=100,
            filter=None,
            namespace_type=NamespaceType.AGNOSTIC,
            sort_field="name",
            sort_order=SortOrder.ASC,
        ),
    )


async def test_list_defaults_to_first_page_of_twenty(client, list_client):
    await client.get(TRUSTED_APPS_LIST_API)

    options = list_client.find_exception_list_item.await_args.args[0]
    assert (options.page, options.per_page) == (1, 20)


async def test_list_passes_filter_through(client, list_client):
    await client.get(TRUSTED_APPS_LIST_API, params={"filter": "anti-virus"})

    options = list_client.find_exception_list_item.await_args.args[0]
    assert options.filter == "anti-virus"


async def test_list_returns_found_items_as_stored(client, list_client):
    found = FoundExceptionListItems(
        data=[get_exception_list_item_mock(_tags=["os:linux"])],
        page=1, per_page=20, total=1,
    )
    list_client.find_exception_list_item.return_value = found

    res = await client.get(TRUSTED_APPS_LIST_API)

    assert res.status_code == 200
    assert res.json() == found.model_dump(mode="json", by_alias=True)
    assert res.json()["data"][0]["_tags"] == ["os:linux"]


async def test_list_passes_through_items_with_other_entry_shapes(
    client, list_client, caplog,
):
    found = FoundExceptionListItems(
        data=[
            get_exception_list_item_mock(entries=[{
                "field": "process.name",
                "type": "match_any",
                "operator": "included",
                "value": ["a.exe", "b.exe"],
            }]),
            get_exception_list_item_mock(id="2", _tags=[], entries=[{
                "field": "file.signature",
                "type": "nested",
                "entries": [{
                    "field": "signer",
                    "type": "match",
                    "operator": "included",
                    "value": "Acme",
                }],
            }]),
        ],
        page=1, per_page=20, total=2,
    )
    list_client.find_exception_list_item.return_value = found

    res = await client.get(TRUSTED_APPS_LIST_API)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data[0]["entries"][0]["value"] == ["a.exe", "b.exe"]
    assert data[1]["entries"][0]["type"] == "nested"
    assert _trusted_apps_errors(caplog) == []


async def test_list_returns_empty_page_when_list_is_missing(client, list_client):
    list_client.find_exception_list_item.return_value = None

    res = await client.get(TRUSTED_APPS_LIST_API, params={"page": 3, "per_page": 5})

    assert res.json() == {"data": [], "page": 3, "per_page": 5, "total": 0}


async def test_list_twice_yields_identical_responses(client):
    first = await client.get(TRUSTED_APPS_LIST_API, params={"page": 2})
    second = await client.get(TRUSTED_APPS_LIST_API, params={"page": 2})
    assert first.json() == second.json()


@pytest.mark.parametrize("params", [{"page": 0}, {"per_page": 0}, {"page": "abc"}])
async def test_list_rejects_invalid_pagination(client, list_client, params):
    res = await client.get(TRUSTED_APPS_LIST_API, params=params)

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    list_client.find_exception_list_item.assert_not_awaited()


async def test_list_logs_unexpected_error(client, list_client, caplog):
    list_client.find_exception_list_item.side_effect = RuntimeError("expected error")

    res = await client.get(TRUSTED_APPS_LIST_API, params={"page": 10, "per_page": 100})

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "expected error" not in res.text
    assert len(_trusted_apps_errors(caplog)) == 1


async def test_list_logs_list_creation_failure(client, list_client, caplog):
    list_client.create_trusted_apps_list.side_effect = RuntimeError("no index")

    res = await client.get(TRUSTED_APPS_LIST_API)

    assert res.status_code == 500
    assert len(_trusted_apps_errors(caplog)) == 1
    list_client.find_exception_list_item.assert_not_awaited()


# --- Create -------------------------------------------------------------------

async def test_create_uses_list_client_from_request_context(client, client_requests):
    await client.post(TRUSTED_APPS_CREATE_API, json=_new_trusted_app_body())
    assert len(client_requests) == 1


async def test_create_creates_trusted_apps_list_first(client, list_client):
    res = await client.post(TRUSTED_APPS_CREATE_API, json=_new_trusted_app_body())

    assert res.status_code == 200
    assert [call[0] for call in list_client.mock_calls] == [
        "create_trusted_apps_list", "create_exception_list_item",
    ]


async def test_create_maps_trusted_app_to_exception_list_item(client, list_client):
    await client.post(TRUSTED_APPS_CREATE_API, json=_new_trusted_app_body())

    options = list_client.create_exception_list_item.await_args.args[0]
    sent = options.model_dump(mode="json", by_alias=True)
    assert sent.pop("item_id")
    assert sent == {
        "_tags": ["os:windows"],
        "comments": [],
        "description": "this one is ok",
        "entries": [
            {
                "field": "process.path",
                "operator": "included",
                "type": "match",
                "value": "c:/programs files/Anti-Virus",
            },
        ],
        "list_id": "endpoint_trusted_apps",
        "meta": None,
        "name": "Some Anti-Virus App",
        "namespace_type": "agnostic",
        "tags": [],
        "type": "simple",
    }


async def test_create_returns_new_trusted_app(client):
    res = await client.post(TRUSTED_APPS_CREATE_API, json=_new_trusted_app_body())

    assert res.json() == {
        "data": {
            "created_at": "2020-04-20T15:25:31.830Z",
            "created_by": "some user",
            "description": "this one is ok",
            "entries": [
                {
                    "field": "process.path",
                    "operator": "included",
                    "type": "match",
                    "value": "c:/programs files/Anti-Virus",
                },
            ],
            "id": "1",
            "name": "Some Anti-Virus App",
            "os": "windows",
        },
    }


async def test_create_generates_distinct_item_ids(client, list_client):
    await client.post(TRUSTED_APPS_CREATE_API, json=_new_trusted_app_body())
    await client.post(TRUSTED_APPS_CREATE_API, json=_new_trusted_app_body())

    first, second = list_client.create_exception_list_item.await_args_list
    assert first.args[0].item_id != second.args[0].item_id


@pytest.mark.parametrize("field,value", [
    ("name", ""),
    ("os", "solaris"),
    ("entries", [{"field": "process.path", "type": "match", "operator": "included"}]),
    ("description", "x" * 257),
    ("entries", [{
        "field": "process.name",
        "type": "match_any",
        "operator": "included",
        "value": ["a.exe"],
    }]),
])
async def test_create_rejects_invalid_payload(client, list_client, field, value):
    body = _new_trusted_app_body()
    body[field] = value

    res = await client.post(TRUSTED_APPS_CREATE_API, json=body)

    assert res.status_code == 400
    list_client.create_exception_list_item.assert_not_awaited()


async def test_create_logs_unexpected_error(client, list_client, caplog):
    list_client.create_exception_list_item.side_effect = RuntimeError(
        "expected error for create",
    )

    res = await client.post(TRUSTED_APPS_CREATE_API, json=_new_trusted_app_body())

    assert res.status_code == 500
    assert len(_trusted_apps_errors(caplog)) == 1


# --- Delete -------------------------------------------------------------------

async def test_delete_uses_list_client_from_request_context(client, client_requests):
    await client.delete(_delete_path("123"))
    assert len(client_requests) == 1


async def test_delete_returns_200_on_successful_delete(client, list_client):
    res = await client.delete(_delete_path("123"))

    assert res.status_code == 200
    list_client.delete_exception_list_item.assert_awaited_once_with(
        DeleteExceptionListItemOptions(
            id="123", item_id=None, namespace_type=NamespaceType.AGNOSTIC,
        ),
    )


async def test_delete_creates_trusted_apps_list_first(client, list_client):
    await client.delete(_delete_path("123"))

    assert [call[0] for call in list_client.mock_calls] == [
        "create_trusted_apps_list", "delete_exception_list_item",
    ]


async def test_delete_returns_404_if_item_does_not_exist(client, list_client, caplog):
    list_client.delete_exception_list_item.return_value = None

    res = await client.delete(_delete_path("123"))

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert _trusted_apps_errors(caplog) == []


async def test_delete_logs_unexpected_error(client, list_client, caplog):
    list_client.delete_exception_list_item.side_effect = RuntimeError(
        "expected error for delete",
    )

    res = await client.delete(_delete_path("123"))

    assert res.status_code == 500
    assert len(_trusted_apps_errors(caplog)) == 1


# --- Summary ------------------------------------------------------------------

async def test_summary_counts_trusted_apps_per_os(client, list_client):
    list_client.find_exception_list_item.return_value = FoundExceptionListItems(
        data=[
            get_exception_list_item_mock(id="1", _tags=["os:windows"]),
            get_exception_list_item_mock(id="2", _tags=["os:windows"]),
            get_exception_list_item_mock(id="3", _tags=["os:macos"]),
            get_exception_list_item_mock(id="4", _tags=[]),
        ],
        page=1, per_page=100, total=4,
    )

    res = await client.get(TRUSTED_APPS_SUMMARY_API)

    assert res.status_code == 200
    assert res.json() == {"total": 4, "windows": 2, "macos": 1, "linux": 0}


async def test_summary_logs_unexpected_error(client, list_client, caplog):
    list_client.find_exception_list_item.side_effect = RuntimeError("boom")

    res = await client.get(TRUSTED_APPS_SUMMARY_API)

    assert res.status_code == 500
    assert len(_trusted_apps_errors(caplog)) == 1
