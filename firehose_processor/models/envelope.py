"""
Pydantic models for CloudWatch Logs subscription envelopes
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageType(str, Enum):
    """Envelope message types sent by CloudWatch Logs subscription filters"""
    DATA = "DATA_MESSAGE"
    CONTROL = "CONTROL_MESSAGE"
    UNKNOWN = "UNKNOWN"


class LogEvent(BaseModel):
    """A single log event inside an envelope"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Log event identifier")
    timestamp: int = Field(default=0, description="Event time in epoch milliseconds")
    message: str = Field(default="", description="Raw log message")


class LogEnvelope(BaseModel):
    """Decoded bundle of log events and routing metadata from one record"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message_type: MessageType = Field(default=MessageType.UNKNOWN, alias="messageType")
    owner: str = Field(default="", description="AWS account that owns the log group")
    log_group: str = Field(default="", alias="logGroup")
    log_stream: str = Field(default="", alias="logStream")
    subscription_filters: List[str] = Field(default_factory=list, alias="subscriptionFilters")
    log_events: List[LogEvent] = Field(default_factory=list, alias="logEvents")

    @field_validator('message_type', mode='before')
    @classmethod
    def coerce_message_type(cls, v):
        """Map unrecognised message types to UNKNOWN instead of rejecting the envelope"""
        if isinstance(v, MessageType):
            return v
        try:
            return MessageType(v)
        except ValueError:
            return MessageType.UNKNOWN

    @field_validator('owner', 'log_group', 'log_stream', mode='before')
    @classmethod
    def null_to_empty(cls, v):
        """Treat JSON null routing fields as empty strings"""
        return "" if v is None else v
