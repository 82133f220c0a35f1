"""
Workflow Actions

Actions are what a workflow rule is meant to do once triggered. Each action
type has a typed config, and every action can be delayed by a number of
minutes after the trigger fires.

Action types:
- send_email
- create_task
- update_field
- send_notification
- create_activity
- assign_user
- webhook
"""

import logging
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class ActionType(str, Enum):
    """Types of workflow actions."""
    SEND_EMAIL = "send_email"
    CREATE_TASK = "create_task"
    UPDATE_FIELD = "update_field"
    SEND_NOTIFICATION = "send_notification"
    CREATE_ACTIVITY = "create_activity"
    ASSIGN_USER = "assign_user"
    WEBHOOK = "webhook"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class NotificationChannel(str, Enum):
    IN_APP = "in_app"
    EMAIL = "email"
    SLACK = "slack"


class _ActionConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _required(value: str, what: str) -> str:
    if not value.strip():
        raise ValueError(f"{what} is required")
    return value


class SendEmailConfig(_ActionConfig):
    to: str
    subject: str = ""
    template: Optional[str] = None
    body: str = ""

    @field_validator("to")
    @classmethod
    def _to_required(cls, value: str) -> str:
        return _required(value, "Recipient")


class CreateTaskConfig(_ActionConfig):
    title: str
    assignee: Optional[str] = None
    due_in_days: Optional[int] = Field(default=None, ge=0)

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        return _required(value, "Task title")


class UpdateFieldConfig(_ActionConfig):
    field: str
    value: Optional[str] = None

    @field_validator("field")
    @classmethod
    def _field_required(cls, value: str) -> str:
        return _required(value, "Field")


class SendNotificationConfig(_ActionConfig):
    recipient: str
    message: str
    channel: NotificationChannel = NotificationChannel.IN_APP

    @field_validator("message")
    @classmethod
    def _message_required(cls, value: str) -> str:
        return _required(value, "Notification message")


class CreateActivityConfig(_ActionConfig):
    activity_type: str
    description: str = ""


class AssignUserConfig(_ActionConfig):
    user_id: str

    @field_validator("user_id")
    @classmethod
    def _user_required(cls, value: str) -> str:
        return _required(value, "User")


class WebhookConfig(_ActionConfig):
    url: str
    method: Literal["GET", "POST", "PUT", "PATCH"] = "POST"
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("Webhook URL must start with http:// or https://")
        return value


class _Action(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    delay: int = Field(default=0, ge=0, description="Minutes to wait after the trigger")

    @property
    def action_type(self) -> ActionType:
        return ActionType(self.type)

    def to_api(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SendEmailAction(_Action):
    type: Literal["send_email"] = "send_email"
    config: SendEmailConfig


class CreateTaskAction(_Action):
    type: Literal["create_task"] = "create_task"
    config: CreateTaskConfig


class UpdateFieldAction(_Action):
    type: Literal["update_field"] = "update_field"
    config: UpdateFieldConfig


class SendNotificationAction(_Action):
    type: Literal["send_notification"] = "send_notification"
    config: SendNotificationConfig


class CreateActivityAction(_Action):
    type: Literal["create_activity"] = "create_activity"
    config: CreateActivityConfig


class AssignUserAction(_Action):
    type: Literal["assign_user"] = "assign_user"
    config: AssignUserConfig


class WebhookAction(_Action):
    type: Literal["webhook"] = "webhook"
    config: WebhookConfig


Action = Annotated[
    Union[
        SendEmailAction,
        CreateTaskAction,
        UpdateFieldAction,
        SendNotificationAction,
        CreateActivityAction,
        AssignUserAction,
        WebhookAction
    ],
    Field(discriminator="type")
]

_action_adapter = TypeAdapter(Action)


def build_action(action_type: Union[ActionType, str], config: dict, delay: int = 0):
    """Build a typed action from its type tag and config payload."""
    return _action_adapter.validate_python({
        "type": ActionType(action_type).value,
        "config": config,
        "delay": delay
    })


def parse_action(data: dict):
    """Parse a stored action record; a missing delay means no delay."""
    payload = dict(data)
    if payload.get("delay") is None:
        payload["delay"] = 0
    return _action_adapter.validate_python(payload)


class UnvalidatedAction(BaseModel):
    """Stored action whose config does not fit its type; kept as stored."""
    type: ActionType
    raw_config: dict = Field(default_factory=dict)
    delay: int = 0

    @property
    def action_type(self) -> ActionType:
        return self.type

    def to_api(self) -> dict:
        return {"type": self.type.value, "config": dict(self.raw_config), "delay": self.delay}


def _stored_action_tag(value) -> Optional[str]:
    if isinstance(value, dict):
        return "unvalidated" if "raw_config" in value else value.get("type")
    if isinstance(value, UnvalidatedAction):
        return "unvalidated"
    return getattr(value, "type", None)


StoredAction = Annotated[
    Union[
        Annotated[SendEmailAction, Tag("send_email")],
        Annotated[CreateTaskAction, Tag("create_task")],
        Annotated[UpdateFieldAction, Tag("update_field")],
        Annotated[SendNotificationAction, Tag("send_notification")],
        Annotated[CreateActivityAction, Tag("create_activity")],
        Annotated[AssignUserAction, Tag("assign_user")],
        Annotated[WebhookAction, Tag("webhook")],
        Annotated[UnvalidatedAction, Tag("unvalidated")]
    ],
    Discriminator(_stored_action_tag)
]


def load_action(data: dict):
    """
    Rebuild a stored action record.

    Like parse_action, but a config that does not fit its action type is kept
    as an UnvalidatedAction instead of failing. Unknown action types still raise.
    """
    payload = dict(data)
    if payload.get("delay") is None:
        payload["delay"] = 0
    try:
        return _action_adapter.validate_python(payload)
    except ValidationError:
        logger.warning("Stored %s action does not fit its type; keeping it unvalidated", payload.get("type"))
        return UnvalidatedAction(
            type=payload.get("type"),
            raw_config=payload.get("config") or {},
            delay=payload["delay"]
        )
