"""
GPIO schemas - Pydantic models for the action endpoint

Every reply uses the same envelope:

    {"error": false, "data": {...}}
    {"error": true, "message": "...", "data": {...optional context}}
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional


class ActionRequest(BaseModel):
    """One action, as query parameters (GET) or a JSON body (POST)"""
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={"example": {"verb": "SET", "name": "desk_lamp", "value": 1, "time": 1500}},
    )

    verb: str = Field(
        min_length=1,
        validation_alias=AliasChoices("verb", "action"),
        description="Action verb (SET, TOGGLE, SET_SCENE, START, ...) or GET / GET_ALL"
    )
    name: Optional[str] = Field(None, description="Target resource, scene, animation or button")
    value: Optional[float] = None
    time: Optional[float] = Field(None, description="Fade duration or blink on-time (ms)")
    off_time: Optional[float] = Field(None, validation_alias=AliasChoices("off_time", "offTime"))
    master_value: Optional[float] = Field(None, validation_alias=AliasChoices("master_value", "masterValue"))
    delay: Optional[float] = Field(None, description="Milliseconds to wait before executing")
    notification: Optional[str] = None
    payload: Any = None

    def to_raw(self) -> Dict[str, Any]:
        """Mapping in configuration shape, for the action validator"""
        return self.model_dump(exclude_none=True)


class NotificationRequest(BaseModel):
    """Inbound host notification, matched against triggers"""
    notification: str = Field(min_length=1)
    sender: Any = None
    payload: Any = None


class Reply(BaseModel):
    """Standard response envelope"""
    error: bool = Field(description="True when the request was not handled")
    message: Optional[str] = None
    data: Any = None
