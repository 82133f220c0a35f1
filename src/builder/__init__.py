"""
Builder sessions behind the pipeline and workflow editing screens.

- PipelineBuilder: edit and save one pipeline configuration
- WorkflowEditor: manage an organization's workflow rules
- Preview: left-to-right summary and statistics
"""

from .pipeline_builder import PipelineBuilder
from .workflow_editor import WorkflowEditor
from .preview import PipelineSummary, summarize, render_text

__all__ = [
    "PipelineBuilder",
    "WorkflowEditor",
    "PipelineSummary",
    "summarize",
    "render_text"
]
