"""Employee portal schemas"""

from typing import Literal, Optional

from pydantic import AliasChoices, Field

from ...schemas import CamelModel

ResponseAction = Literal["accept", "decline"]


class RespondToVisitorInput(CamelModel):
    token: str
    action: ResponseAction
    note: Optional[str] = None


class RespondFromDashboardInput(CamelModel):
    visitor_id: int
    action: ResponseAction
    note: Optional[str] = None


class RespondResult(CamelModel):
    success: bool = True
    already_responded: bool = False
    previous_response: Optional[str] = None
    status: Optional[str] = None
    message: str


class PreferencesInput(CamelModel):
    notify_email: Optional[bool] = None
    notify_sms: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("notifySMS", "notifySms", "notify_sms")
    )
    notify_on_visitor_arrival: Optional[bool] = None
