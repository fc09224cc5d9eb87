from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class NotificationConfig:
    enabled: bool = os.getenv("PUSH_NOTIFICATIONS_ENABLED", "1") not in ("0", "false", "False")
    workers: int = int(os.getenv("NOTIFICATION_WORKERS", "4"))
    match_title: str = "New match!"
    match_body: str = "You just got a new match!"
    match_category: str = "dating_match"


DEFAULT_NOTIFICATION_CONFIG = NotificationConfig()
