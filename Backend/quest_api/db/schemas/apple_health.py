from datetime import datetime
from pydantic import BaseModel

from quest_api.db.schemas.steps import StepRead


class SyncStatus(BaseModel):
    enabled: bool
    has_api_key: bool
    last_sync_at: datetime | None
    api_key_created_at: datetime | None


class GeneratedKey(BaseModel):
    api_key: str
    created_at: datetime


class WebhookResponse(BaseModel):
    step: StepRead
    action: str
