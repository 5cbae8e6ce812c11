import os
from typing import List
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _int_list(raw: str) -> List[int]:
    return [int(x) for x in raw.split(",") if x.strip()]


class Settings(BaseModel):
    timezone: str = "Europe/Warsaw"
    locale: str = "pl_PL"
    calendar_id: str = "primary"
    client_secrets_file: str = "credentials.json"
    token_file: str = "token.json"
    base_url: str = "http://localhost:8000"
    cors_origins: str = "*"

    # Initial state of the schedule picker: Mon-Fri, 8-20, one hour meetings
    default_days: List[int] = [1, 2, 3, 4, 5]
    default_hours: List[int] = [8, 20]
    default_meeting_length: int = 60

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            timezone=os.getenv("TIMEZONE", "Europe/Warsaw"),
            locale=os.getenv("LOCALE", "pl_PL"),
            calendar_id=os.getenv("CALENDAR_ID", "primary"),
            client_secrets_file=os.getenv("GOOGLE_CLIENT_SECRETS_FILE", "credentials.json"),
            token_file=os.getenv("TOKEN_FILE", "token.json"),
            base_url=os.getenv("BASE_URL", "http://localhost:8000"),
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
            default_days=_int_list(os.getenv("DEFAULT_DAYS", "1,2,3,4,5")),
            default_hours=_int_list(os.getenv("DEFAULT_HOURS", "8,20")),
            default_meeting_length=int(os.getenv("DEFAULT_MEETING_LENGTH", "60")),
        )
