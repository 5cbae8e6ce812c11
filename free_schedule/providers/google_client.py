import datetime as dt
import logging
from pathlib import Path
from typing import Dict, List

import httplib2
from fastapi.concurrency import run_in_threadpool
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow, InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from ..config import Settings
from ..errors import AuthRequired, UpstreamError
from ..intervals import BusyInterval

logger = logging.getLogger(__name__)

GOOGLE_SCOPES = ["https://www.googleapis.com/auth/calendar.events.freebusy"]
OAUTH_STATE = "free-schedule"


def parse_busy(raw: List[Dict]) -> List[BusyInterval]:
    try:
        busy = [BusyInterval(dt.datetime.fromisoformat(b["start"]), dt.datetime.fromisoformat(b["end"])) for b in raw]
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamError(f"malformed busy interval: {e}") from e
    busy.sort(key=lambda b: b.start)
    return busy


class GoogleClient:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.token_path = Path(settings.token_file)

    # --- OAuth (web redirect) ---
    def _flow(self):
        flow = Flow.from_client_secrets_file(
            self.settings.client_secrets_file,
            scopes=GOOGLE_SCOPES,
            redirect_uri=f"{self.settings.base_url}/oauth/callback",
            state=OAUTH_STATE,
        )
        # start and callback build separate flows, so no PKCE verifier to carry over
        flow.autogenerate_code_verifier = False
        return flow

    def auth_url(self) -> str:
        auth_url, _ = self._flow().authorization_url(access_type="offline", include_granted_scopes="true", prompt="consent")
        return auth_url

    def fetch_token(self, authorization_response: str):
        flow = self._flow()
        try:
            flow.fetch_token(authorization_response=authorization_response)
        except (OAuth2Error, ValueError) as e:
            logger.warning("Google token exchange failed: %s", e)
            raise AuthRequired(f"Google authorization failed: {e}") from e
        self._save(flow.credentials)

    # --- OAuth (installed app, used by the CLI) ---
    def authorize_interactive(self) -> Credentials:
        if self.token_path.exists():
            try:
                return self._credentials()
            except AuthRequired:
                logger.info("Stored token unusable, starting a new consent flow")
        flow = InstalledAppFlow.from_client_secrets_file(self.settings.client_secrets_file, GOOGLE_SCOPES)
        creds = flow.run_local_server(port=0)
        self._save(creds)
        return creds

    def _save(self, creds: Credentials):
        self.token_path.write_text(creds.to_json(), encoding="utf-8")
        logger.info("Google token saved to %s", self.token_path)

    def _credentials(self) -> Credentials:
        if not self.token_path.exists():
            raise AuthRequired("Google Calendar not authorized.")
        try:
            creds = Credentials.from_authorized_user_file(str(self.token_path), GOOGLE_SCOPES)
        except ValueError as e:
            raise AuthRequired(f"Stored Google token is unreadable: {e}") from e

        if not creds.valid:
            if not (creds.expired and creds.refresh_token):
                raise AuthRequired("Stored Google token is invalid.")
            try:
                creds.refresh(Request())
            except RefreshError as e:
                raise AuthRequired(f"Google token refresh rejected: {e}") from e
            except TransportError as e:
                raise UpstreamError(f"Google token refresh failed: {e}") from e
            self._save(creds)
        return creds

    # --- Calendar source ---
    def freebusy(self, time_min: dt.datetime, time_max: dt.datetime, timezone: str) -> List[BusyInterval]:
        creds = self._credentials()
        calendar_id = self.settings.calendar_id
        try:
            svc = build("calendar", "v3", credentials=creds, cache_discovery=False)
            fb = svc.freebusy().query(body={
                "timeMin": time_min.isoformat(), "timeMax": time_max.isoformat(),
                "timeZone": timezone,
                "items": [{"id": calendar_id}],
            }).execute()
        except HttpError as e:
            logger.warning("Google freebusy error: status=%s", e.resp.status)
            raise UpstreamError(f"Google freebusy error: {e.resp.status}") from e
        except RefreshError as e:
            raise AuthRequired(f"Google token refresh rejected: {e}") from e
        except (TransportError, httplib2.HttpLib2Error, OSError) as e:
            logger.warning("Google freebusy unreachable: %s", e)
            raise UpstreamError(f"Google Calendar unreachable: {e}") from e

        try:
            calendar = fb["calendars"][calendar_id]
        except (KeyError, TypeError) as e:
            raise UpstreamError("Google freebusy response is missing the calendar") from e
        if calendar.get("errors"):
            raise UpstreamError(f"Google freebusy error for {calendar_id}: {calendar['errors']}")
        return parse_busy(calendar.get("busy", []))

    async def get_busy(self, time_min: dt.datetime, time_max: dt.datetime, timezone: str) -> List[BusyInterval]:
        return await run_in_threadpool(self.freebusy, time_min, time_max, timezone)
