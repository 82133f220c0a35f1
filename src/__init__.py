"""
Pipeline Workflow Config

Pipeline stage and workflow rule configuration model for a sales CRM:
ordered stages with win probabilities, pipeline configurations scoped to an
organization, branch or role, and declarative workflow automation rules.
"""

__version__ = "0.1.0"
