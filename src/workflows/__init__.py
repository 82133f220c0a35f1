"""
Workflow automation rules.

Triggers:
- Stage change, field update, time based, manual

Actions:
- Email, task, field update, notification, activity, assignment, webhook

Rules are authored and stored only. No code here evaluates triggers or
executes actions.
"""

from .triggers import (
    TriggerType,
    WatchedField,
    ConditionOperator,
    Schedule,
    StageChangeTrigger,
    FieldUpdateTrigger,
    TimeBasedTrigger,
    ManualTrigger,
    Trigger,
    UnvalidatedTrigger,
    StoredTrigger,
    build_trigger,
    load_trigger
)
from .actions import (
    ActionType,
    NotificationChannel,
    SendEmailAction,
    CreateTaskAction,
    UpdateFieldAction,
    SendNotificationAction,
    CreateActivityAction,
    AssignUserAction,
    WebhookAction,
    Action,
    UnvalidatedAction,
    StoredAction,
    build_action,
    parse_action,
    load_action
)
from .rules import WorkflowRule

__all__ = [
    "TriggerType",
    "WatchedField",
    "ConditionOperator",
    "Schedule",
    "StageChangeTrigger",
    "FieldUpdateTrigger",
    "TimeBasedTrigger",
    "ManualTrigger",
    "Trigger",
    "UnvalidatedTrigger",
    "StoredTrigger",
    "build_trigger",
    "load_trigger",
    "ActionType",
    "NotificationChannel",
    "SendEmailAction",
    "CreateTaskAction",
    "UpdateFieldAction",
    "SendNotificationAction",
    "CreateActivityAction",
    "AssignUserAction",
    "WebhookAction",
    "Action",
    "build_action",
    "UnvalidatedAction",
    "StoredAction",
    "parse_action",
    "load_action",
    "WorkflowRule"
]
