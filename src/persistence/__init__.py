"""
Persistence through the external configuration API.

Each save is a single round trip carrying the whole structure as JSON.
"""

from .client import APIClient, extract_error_message
from .pipelines import PipelineConfigAPI
from .workflows import WorkflowRuleAPI

__all__ = [
    "APIClient",
    "extract_error_message",
    "PipelineConfigAPI",
    "WorkflowRuleAPI"
]
