from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from rightnow.integrations.google_calendar import (
    EVENT_FIELDS,
    GoogleCalendarClient,
    parse_event,
    to_rfc3339,
)

START = datetime(2026, 3, 2, 9, 0)
END = datetime(2026, 3, 2, 23, 0)


def _client_with_service(service):
    with patch("rightnow.integrations.google_calendar.build", return_value=service):
        return GoogleCalendarClient(credentials=MagicMock(), calendar_id="primary")


def _service_returning(*pages):
    service = MagicMock()
    req = MagicMock()
    req.execute.side_effect = list(pages)
    service.events.return_value.list.return_value = req
    return service


def test_list_events_in_range_passes_fields_param_to_google_api():
    service = MagicMock()
    events_resource = service.events.return_value

    req = MagicMock()
    req.execute.return_value = {"items": [], "nextPageToken": None}
    # If code accidentally calls req.fields(...), this will record the call.
    req.fields = MagicMock()
    events_resource.list.return_value = req

    client = _client_with_service(service)
    client.list_events_in_range(
        time_min_rfc3339="2026-01-01T00:00:00Z",
        time_max_rfc3339="2026-01-02T00:00:00Z",
        fields=EVENT_FIELDS,
    )

    events_resource.list.assert_called_once()
    _, kwargs = events_resource.list.call_args
    assert kwargs.get("calendarId") == "primary"
    assert kwargs.get("timeMin") == "2026-01-01T00:00:00Z"
    assert kwargs.get("timeMax") == "2026-01-02T00:00:00Z"
    assert kwargs.get("singleEvents") is True
    assert kwargs.get("fields") == EVENT_FIELDS
    assert "pageToken" not in kwargs
    assert req.fields.call_count == 0


def test_list_events_in_range_follows_pagination():
    service = _service_returning(
        {"items": [{"id": "a"}], "nextPageToken": "page-2"},
        {"items": [{"id": "b"}]},
    )

    client = _client_with_service(service)
    items = client.list_events_in_range("2026-01-01T00:00:00Z", "2026-01-02T00:00:00Z")

    assert [item["id"] for item in items] == ["a", "b"]
    _, kwargs = service.events.return_value.list.call_args
    assert kwargs.get("pageToken") == "page-2"


def test_fetch_events_parses_timed_and_all_day_events():
    service = _service_returning({
        "items": [
            {
                "id": "standup",
                "summary": "Standup",
                "status": "confirmed",
                "start": {"dateTime": "2026-03-02T10:00:00+01:00"},
                "end": {"dateTime": "2026-03-02T10:30:00+01:00"},
            },
            {
                "id": "holiday",
                "summary": "Holiday",
                "start": {"date": "2026-03-02"},
                "end": {"date": "2026-03-03"},
            },
            {"id": "gone", "status": "cancelled"},
            {"id": "broken", "start": {}, "end": {}},
        ]
    })

    client = _client_with_service(service)
    result = client.fetch_events(START, END)

    assert result.access_granted is True
    assert [event.id for event in result.events] == ["standup", "holiday"]
    standup, holiday = result.events
    assert standup.start == datetime(2026, 3, 2, 9, 0)
    assert standup.end == datetime(2026, 3, 2, 9, 30)
    assert standup.all_day is False
    assert holiday.all_day is True

    _, kwargs = service.events.return_value.list.call_args
    assert kwargs.get("timeMin") == "2026-03-02T09:00:00Z"
    assert kwargs.get("timeMax") == "2026-03-02T23:00:00Z"


def test_fetch_events_http_error_degrades_to_empty():
    resp = MagicMock(status=500, reason="Backend Error")
    service = _service_returning(HttpError(resp, b"boom"))

    client = _client_with_service(service)
    result = client.fetch_events(START, END)

    assert result.access_granted is True
    assert result.events == []


def test_fetch_events_permission_denied_reports_no_access():
    resp = MagicMock(status=403, reason="Forbidden")
    service = _service_returning(HttpError(resp, b"denied"))

    client = _client_with_service(service)
    result = client.fetch_events(START, END)

    assert result.access_granted is False
    assert result.events == []


def test_fetch_events_revoked_token_reports_no_access():
    service = _service_returning(RefreshError("token revoked"))

    client = _client_with_service(service)
    result = client.fetch_events(START, END)

    assert result.access_granted is False
    assert result.events == []


def test_fetch_events_network_failure_degrades_to_empty():
    service = _service_returning(TimeoutError("network"))

    client = _client_with_service(service)
    result = client.fetch_events(START, END)

    assert result.access_granted is True
    assert result.events == []


def test_missing_token_means_no_access(tmp_path):
    with patch("rightnow.integrations.google_calendar.build") as build:
        client = GoogleCalendarClient(token_path=str(tmp_path / "token.json"))

    build.assert_not_called()
    assert client.has_access() is False
    result = client.fetch_events(START, END)
    assert result.access_granted is False
    assert result.events == []


def test_request_access_without_client_secrets(tmp_path):
    client = GoogleCalendarClient(
        token_path=str(tmp_path / "token.json"),
        credentials_path=str(tmp_path / "credentials.json"),
    )

    assert client.request_access() is False
    assert client.has_access() is False


def test_to_rfc3339_normalizes_to_utc():
    assert to_rfc3339(datetime(2026, 3, 2, 9, 0)) == "2026-03-02T09:00:00Z"
    aware = datetime(2026, 3, 2, 10, 0, tzinfo=timezone(timedelta(hours=1)))
    assert to_rfc3339(aware) == "2026-03-02T09:00:00Z"


def test_parse_event_handles_utc_suffix():
    event = parse_event({
        "id": "x",
        "start": {"dateTime": "2026-03-02T09:00:00Z"},
        "end": {"dateTime": "2026-03-02T09:45:00Z"},
    })

    assert event.start == datetime(2026, 3, 2, 9, 0)
    assert event.end == datetime(2026, 3, 2, 9, 45)
    assert event.title == ""
