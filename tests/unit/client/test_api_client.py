from __future__ import annotations

import pytest
import requests

from obravista.client.api_client import ApiClient
from obravista.client.resources import DealGateway
from obravista.core.enums import DealStage
from obravista.core.exceptions import ApiFailure


class FakeResponse:
    def __init__(self, body=None, status_code=200, raw=False):
        self.body = body
        self.status_code = status_code
        self.raw = raw

    def json(self):
        if self.raw:
            raise ValueError("not json")
        return self.body


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(*responses):
    session = FakeSession(*responses)
    return ApiClient(base_url="http://api.test/", prefix="/api/v1", timeout=5, session=session), session


def test_unwraps_envelope_and_sends_token():
    client, session = _client(
        FakeResponse({"success": True, "data": {"access_token": "tok-1", "token_type": "bearer"}}),
        FakeResponse({"success": True, "data": [{"id": 1}]}),
    )

    client.login("admin@obra.test", "secret123")
    assert client.get("/sites") == [{"id": 1}]

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "http://api.test/api/v1/auth/login")
    assert "Authorization" not in kwargs["headers"]
    method, url, kwargs = session.calls[1]
    assert (method, url) == ("GET", "http://api.test/api/v1/sites")
    assert kwargs["headers"]["Authorization"] == "Bearer tok-1"
    assert kwargs["timeout"] == 5


def test_failure_envelope_raises_with_status():
    client, _ = _client(FakeResponse({"success": False, "message": "Deal 9 not found."}, status_code=404))

    with pytest.raises(ApiFailure) as excinfo:
        client.get("/crm/deals/9")
    assert str(excinfo.value) == "Deal 9 not found."
    assert excinfo.value.status_code == 404


def test_non_json_and_transport_errors():
    client, _ = _client(
        FakeResponse(raw=True, status_code=502),
        requests.exceptions.ConnectionError("refused"),
    )

    with pytest.raises(ApiFailure) as excinfo:
        client.get("/health")
    assert excinfo.value.status_code == 502

    with pytest.raises(ApiFailure) as excinfo:
        client.get("/health")
    assert excinfo.value.status_code is None


def test_gateway_validates_payloads():
    client, session = _client(
        FakeResponse(
            {"success": True, "data": [{"id": 3, "lead_id": 1, "title": "Reforma", "stage": "proposta"}]}
        ),
        FakeResponse({"success": True, "data": {"id": 3, "lead_id": 1, "title": "Reforma", "stage": "negociacao"}}),
    )
    gateway = DealGateway(client)

    deals = gateway.list_deals()
    assert deals[0].stage is DealStage.PROPOSAL

    moved = gateway.change_stage(3, DealStage.NEGOTIATING)
    assert moved.stage is DealStage.NEGOTIATING
    assert session.calls[1][2]["json"] == {"stage": "negociacao"}
