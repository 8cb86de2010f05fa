"""Unit tests for the metrics API client (HTTP session stubbed)."""

from datetime import date
from typing import Any

import pytest
import requests

from growthlens.api_client import MetricsAPIError, MetricsClient


class _FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = str(payload)

    def json(self) -> Any:
        return self._payload


class _FakeGet:
    """Records calls and replays canned responses in order."""

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def __call__(self, url: str, params: dict[str, Any], timeout: int) -> Any:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


_ROW = {"date": "2024-01-01", "platform": "instagram", "followers": 10}


def _client(monkeypatch: pytest.MonkeyPatch, fake: _FakeGet) -> MetricsClient:
    client = MetricsClient(base_url="https://api.example.com/", token="secret", timeout=5)
    monkeypatch.setattr(client._session, "get", fake)
    return client


class TestMetricsClient:
    def test_requires_token(self) -> None:
        with pytest.raises(ValueError):
            MetricsClient(base_url="https://api.example.com", token="")

    def test_bearer_header(self) -> None:
        client = MetricsClient(base_url="https://api.example.com", token="secret")
        assert client._session.headers["Authorization"] == "Bearer secret"

    def test_fetch_with_filters(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(_FakeResponse(payload=[_ROW]))
        client = _client(monkeypatch, fake)
        records = client.fetch_metrics(
            platform="instagram", start=date(2024, 1, 1), end=date(2024, 1, 31)
        )
        assert len(records) == 1
        assert records[0].followers == 10
        call = fake.calls[0]
        assert call["url"] == "https://api.example.com/api/metrics"
        assert call["params"] == {
            "platform": "instagram",
            "startDate": "2024-01-01",
            "endDate": "2024-01-31",
        }
        assert call["timeout"] == 5

    def test_no_filters_sends_no_params(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(_FakeResponse(payload=[]))
        assert _client(monkeypatch, fake).fetch_metrics() == []
        assert fake.calls[0]["params"] == {}

    def test_retries_after_rate_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        slept: list[int] = []
        monkeypatch.setattr("growthlens.api_client.time.sleep", slept.append)
        fake = _FakeGet(
            _FakeResponse(status_code=429, headers={"Retry-After": "2"}),
            _FakeResponse(payload=[_ROW]),
        )
        records = _client(monkeypatch, fake).fetch_metrics()
        assert len(records) == 1
        assert slept == [2]
        assert len(fake.calls) == 2

    def test_error_status(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(_FakeResponse(status_code=401, payload={"error": "Unauthorized"}))
        with pytest.raises(MetricsAPIError, match="401"):
            _client(monkeypatch, fake).fetch_metrics()

    def test_non_list_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(_FakeResponse(payload={"metrics": []}))
        with pytest.raises(MetricsAPIError):
            _client(monkeypatch, fake).fetch_metrics()

    def test_invalid_record(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(_FakeResponse(payload=[{"date": "2024-01-01", "platform": "x"}]))
        with pytest.raises(MetricsAPIError, match="#0"):
            _client(monkeypatch, fake).fetch_metrics()

    def test_http_date_retry_after_uses_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        slept: list[int] = []
        monkeypatch.setattr("growthlens.api_client.time.sleep", slept.append)
        fake = _FakeGet(
            _FakeResponse(
                status_code=429,
                headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"},
            ),
            _FakeResponse(payload=[_ROW]),
        )
        assert len(_client(monkeypatch, fake).fetch_metrics()) == 1
        assert slept == [60]

    def test_non_json_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        resp = requests.Response()
        resp.status_code = 200
        resp._content = b"<html>login</html>"
        with pytest.raises(MetricsAPIError, match="non-JSON"):
            _client(monkeypatch, _FakeGet(resp)).fetch_metrics()

    def test_connection_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(requests.ConnectionError("connection refused"))
        with pytest.raises(MetricsAPIError, match="connection refused"):
            _client(monkeypatch, fake).fetch_metrics()
