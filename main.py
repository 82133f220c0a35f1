#!/usr/bin/env python3
"""
Pipeline Workflow Config - Demo

Walks through the configuration model end to end:
1. Build a pipeline from the PEAK template and edit its stages
2. Preview the pipeline and its statistics
3. Author workflow rules that reference the pipeline's stages
4. Save both through the configuration API (when --save is given)
"""

import argparse
import json
import logging

from src.builder import PipelineBuilder, render_text
from src.config import configure_logging, get_settings
from src.core import PersistenceError, StageColor
from src.persistence import PipelineConfigAPI, WorkflowRuleAPI
from src.workflows import (
    FieldUpdateTrigger,
    SendNotificationAction,
    StageChangeTrigger,
    WorkflowRule,
    build_action
)

logger = logging.getLogger(__name__)


def run_pipeline_demo(builder: PipelineBuilder) -> None:
    """Build and edit a pipeline from the PEAK template."""
    print("=" * 60)
    print("PIPELINE BUILDER")
    print("=" * 60)
    print()

    print(f"Can save empty configuration: {builder.can_save()}")
    builder.load_template(get_settings().default_template)
    print(f"Loaded template: {len(builder.config.stages)} stages, can save: {builder.can_save()}")

    builder.set_name("Enterprise Pipeline")
    print(f"Named '{builder.config.name}', can save: {builder.can_save()}")

    builder.add_new_stage("Closed Won", color=StageColor.GREEN, probability=100)
    builder.reorder_stages(0, 2)
    print()
    print(render_text(builder.config))
    print()

    builder.reorder_stages(2, 0)
    print("Reordered back:")
    print("  " + ", ".join(f"{s.order}. {s.name}" for s in builder.config.stages))
    print()


def run_workflow_demo(builder: PipelineBuilder) -> list[WorkflowRule]:
    """Author workflow rules against the pipeline's stages."""
    print("=" * 60)
    print("WORKFLOW RULES")
    print("=" * 60)
    print()

    config = builder.config
    key_decision = config.find_stage("key_decision")

    handoff = WorkflowRule(
        name="Key decision handoff",
        description="Alert the deal desk when a deal reaches the key decision stage",
        trigger=StageChangeTrigger(stage=key_decision.id),
        organization_id=builder.organization_id,
        created_by=builder.user_id
    )
    handoff = handoff.add_action(SendNotificationAction(
        config={"recipient": "deal-desk", "message": "Deal entered Key Decision"}
    ))
    handoff = handoff.add_action(build_action(
        "create_task", {"title": "Prepare paper process", "dueInDays": 3}, delay=60
    ))

    score_drop = WorkflowRule(
        name="MEDDPICC score drop",
        trigger=FieldUpdateTrigger(field="meddpicc_score", operator="less_than", value="40"),
        organization_id=builder.organization_id,
        created_by=builder.user_id
    ).add_action(build_action("assign_user", {"userId": "sales-manager"}))

    rules = [handoff, score_drop]
    for rule in rules:
        print(f"{rule.name}: {rule.trigger_type.value}")
        print(json.dumps(rule.to_api(exclude={"id", "created_at", "updated_at"}), indent=2))
        print()

    trimmed = config.delete_stage(3)
    print(f"Dangling references after deleting '{key_decision.name}': "
          f"{handoff.dangling_stage_references(trimmed)}")
    print()
    return rules


def run_save_demo(builder: PipelineBuilder, rules: list[WorkflowRule]) -> None:
    """Persist the pipeline and rules through the configuration API."""
    print("=" * 60)
    print("SAVE")
    print("=" * 60)
    print()

    saved = builder.save()
    if saved is None:
        print(f"Pipeline not saved: {builder.error}")
        return
    print(f"Pipeline saved with id {saved.id}")

    with WorkflowRuleAPI() as api:
        for rule in rules:
            try:
                stored = api.save_rule(rule)
                print(f"Workflow '{stored.name}' saved with id {stored.id}")
            except PersistenceError as e:
                print(f"Workflow '{rule.name}' not saved: {e.message}")


def main():
    parser = argparse.ArgumentParser(description="Pipeline and workflow configuration demo")
    parser.add_argument("--organization", default="demo-org")
    parser.add_argument("--user", default="demo-user")
    parser.add_argument("--save", action="store_true", help="persist through the configuration API")
    args = parser.parse_args()

    configure_logging()

    api = PipelineConfigAPI() if args.save else None
    builder = PipelineBuilder(args.organization, args.user, api=api)

    run_pipeline_demo(builder)
    rules = run_workflow_demo(builder)

    if args.save:
        try:
            run_save_demo(builder, rules)
        finally:
            api.close()


if __name__ == "__main__":
    main()
