"""Google Calendar integration for rightnow.

Reads busy events from a Google Calendar. All failures degrade to "no
events" so callers can treat the whole window as free.
"""

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from rightnow.config import (
    get_google_calendar_credentials_path,
    get_google_calendar_id,
    get_google_calendar_token_path,
)
from rightnow.integrations.calendar_source import CalendarSource
from rightnow.models.calendar import CalendarEvent, CalendarFetchResult

logger = logging.getLogger(__name__)

# Read-only access is enough to find busy time
SCOPES = ['https://www.googleapis.com/auth/calendar.readonly']

EVENT_FIELDS = "items(id,summary,status,start,end),nextPageToken"


def to_rfc3339(dt: datetime) -> str:
    """Format a timestamp for the Calendar API (naive values are UTC)."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat() + 'Z'


def _parse_event_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_event(item: dict) -> Optional[CalendarEvent]:
    """Convert a Calendar API event item to a CalendarEvent.

    Returns:
        CalendarEvent, or None for cancelled events
    """
    if item.get('status') == 'cancelled':
        return None

    start = item['start']
    end = item['end']
    if 'dateTime' in start:
        return CalendarEvent(
            id=item.get('id'),
            title=item.get('summary', ''),
            start=_parse_event_time(start['dateTime']),
            end=_parse_event_time(end['dateTime']),
            all_day=False,
        )

    # All-day events carry a bare date
    return CalendarEvent(
        id=item.get('id'),
        title=item.get('summary', ''),
        start=datetime.fromisoformat(start['date']),
        end=datetime.fromisoformat(end['date']),
        all_day=True,
    )


class GoogleCalendarClient(CalendarSource):
    """Client for reading busy events from Google Calendar."""

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        calendar_id: Optional[str] = None,
        token_path: Optional[str] = None,
        credentials_path: Optional[str] = None,
    ):
        """Initialize Google Calendar client.

        Args:
            credentials: Ready-made OAuth2 credentials. If None, loads them from token_path.
            calendar_id: Calendar to read. If None, reads GOOGLE_CALENDAR_ID (defaults to 'primary').
            token_path: Stored OAuth2 token. If None, reads GOOGLE_CALENDAR_TOKEN_PATH.
            credentials_path: OAuth2 client secrets used by request_access().
                              If None, reads GOOGLE_CALENDAR_CREDENTIALS_PATH.
        """
        self.calendar_id = calendar_id or get_google_calendar_id()
        self.token_path = token_path or get_google_calendar_token_path()
        self.credentials_path = credentials_path or get_google_calendar_credentials_path()
        self.creds = credentials if credentials is not None else self._load_credentials()
        self.service = build('calendar', 'v3', credentials=self.creds) if self.creds else None

    def _load_credentials(self) -> Optional[Credentials]:
        """Load stored credentials, refreshing them if expired."""
        if not os.path.exists(self.token_path):
            return None

        try:
            creds = Credentials.from_authorized_user_file(self.token_path, SCOPES)
            if not creds.valid and creds.expired and creds.refresh_token:
                creds.refresh(Request())
                self._save_credentials(creds)
        except (GoogleAuthError, ValueError, OSError) as e:
            logger.warning(f"Could not load Google Calendar credentials: {type(e).__name__}: {str(e)}")
            return None

        return creds if creds.valid else None

    def _save_credentials(self, creds: Credentials) -> None:
        with open(self.token_path, 'w') as token:
            token.write(creds.to_json())

    def has_access(self) -> bool:
        return self.service is not None

    def request_access(self) -> bool:
        """Run the OAuth consent flow.

        Returns:
            True if access was granted, False otherwise (never raises)
        """
        if not os.path.exists(self.credentials_path):
            logger.warning(f"Google Calendar credentials not found at {self.credentials_path}")
            return False

        try:
            flow = InstalledAppFlow.from_client_secrets_file(self.credentials_path, SCOPES)
            creds = flow.run_local_server(port=0)
            self._save_credentials(creds)
        except Exception as e:
            logger.error(f"Google Calendar authorization failed: {type(e).__name__}: {str(e)}")
            return False

        self.creds = creds
        self.service = build('calendar', 'v3', credentials=creds)
        return True

    def list_events_in_range(
        self,
        time_min_rfc3339: str,
        time_max_rfc3339: str,
        fields: Optional[str] = None,
    ) -> List[dict]:
        """List raw event items in a range, following pagination.

        Raises:
            HttpError: If API call fails
        """
        items: List[dict] = []
        page_token = None
        while True:
            params = {
                'calendarId': self.calendar_id,
                'timeMin': time_min_rfc3339,
                'timeMax': time_max_rfc3339,
                'singleEvents': True,
                'orderBy': 'startTime',
            }
            if fields:
                params['fields'] = fields
            if page_token:
                params['pageToken'] = page_token

            response = self.service.events().list(**params).execute()
            items.extend(response.get('items', []))
            page_token = response.get('nextPageToken')
            if not page_token:
                return items

    def fetch_events(self, start: datetime, end: datetime) -> CalendarFetchResult:
        """Fetch busy events intersecting [start, end]."""
        if not self.has_access():
            logger.warning("Google Calendar access not granted; treating calendar as empty")
            return CalendarFetchResult(access_granted=False, events=[])

        try:
            items = self.list_events_in_range(to_rfc3339(start), to_rfc3339(end), fields=EVENT_FIELDS)
        except HttpError as error:
            logger.error(f"Failed to fetch calendar events: {error}")
            denied = getattr(error.resp, 'status', None) in (401, 403)
            return CalendarFetchResult(access_granted=not denied, events=[])
        except GoogleAuthError as e:
            # Expired or revoked token (RefreshError) surfaces from execute()
            logger.error(f"Google Calendar authorization failed: {type(e).__name__}: {str(e)}")
            return CalendarFetchResult(access_granted=False, events=[])
        except OSError as e:
            logger.error(f"Could not reach Google Calendar: {type(e).__name__}: {str(e)}")
            return CalendarFetchResult(access_granted=True, events=[])

        events: List[CalendarEvent] = []
        for item in items:
            try:
                event = parse_event(item)
            except (KeyError, ValueError) as e:
                logger.warning(f"Error parsing calendar event (continuing with next event): {type(e).__name__}: {str(e)[:100]}")
                continue
            if event is not None:
                events.append(event)

        return CalendarFetchResult(access_granted=True, events=events)
