"""Tests for the pipeline builder and workflow editor sessions."""
import pytest

from src.builder import PipelineBuilder, WorkflowEditor
from src.core.entities import Stage
from src.workflows import StageChangeTrigger


@pytest.fixture
def builder(pipeline_api):
    return PipelineBuilder("org-1", "user-1", api=pipeline_api)


class TestPipelineBuilder:
    def test_starts_empty_and_scoped(self, builder):
        assert builder.config.organization_id == "org-1"
        assert builder.config.created_by == "user-1"
        assert builder.is_new
        assert builder.can_save() is False

    def test_add_new_stage_ignores_blank_names(self, builder):
        assert builder.add_new_stage("  ") is None
        stage = builder.add_new_stage("Discovery", probability=20)
        assert stage.order == 1
        assert builder.config.stages[0].probability == 20

    def test_stage_operations_keep_order(self, builder):
        for name in ["A", "B", "C"]:
            builder.add_new_stage(name)
        builder.reorder_stages(2, 0)
        assert [s.name for s in builder.config.stages] == ["C", "A", "B"]
        builder.delete_stage(1)
        assert [(s.name, s.order) for s in builder.config.stages] == [("C", 1), ("B", 2)]
        builder.update_stage(0, builder.config.stages[0].model_copy(update={"name": "C2"}))
        assert builder.config.stages[0].name == "C2"

    def test_same_stage_cannot_be_added_twice(self, builder):
        stage = Stage(name="Lead")
        builder.add_stage(stage)
        with pytest.raises(ValueError):
            builder.add_stage(stage)
        assert [s.id for s in builder.config.stages] == [stage.id]

    def test_update_with_fresh_stage_keeps_identity(self, builder):
        builder.load_template("peak")
        builder.update_stage(2, Stage(name="Renamed"))
        assert [(s.id, s.order) for s in builder.config.stages] == [
            ("prospecting", 1), ("engaging", 2), ("advancing", 3), ("key_decision", 4)
        ]
        assert builder.config.stages[2].name == "Renamed"

    def test_header_fields(self, builder):
        builder.set_name("Field Sales")
        builder.set_description("Regional team")
        builder.set_branch(True, "North")
        builder.set_role(True, "AE")
        builder.set_default(True)
        config = builder.config
        assert (config.name, config.description) == ("Field Sales", "Regional team")
        assert config.branch_name == "North" and config.role_name == "AE"
        assert config.is_default is True

    def test_example_scenario(self, builder):
        assert builder.can_save() is False
        assert builder.load_template("peak")
        assert builder.can_save() is False
        builder.set_name("Enterprise Pipeline")
        assert builder.can_save() is True
        for _ in range(4):
            builder.delete_stage(0)
        assert builder.config.stages == []
        assert builder.can_save() is False

    def test_unknown_template_sets_error(self, builder):
        assert builder.load_template("bant") is False
        assert "bant" in builder.error

    def test_save_blocked_locally(self, builder, service):
        builder.add_new_stage("Lead")
        assert builder.save() is None
        assert builder.error == "Pipeline name is required"
        assert service.requests == []

        builder.set_name("Named")
        builder.delete_stage(0)
        assert builder.save() is None
        assert builder.error == "At least one stage is required"
        assert service.requests == []

    def test_save_creates_then_updates(self, builder, service):
        saved_callbacks = []
        builder.on_save = saved_callbacks.append
        builder.load_template("peak")
        builder.set_name("Enterprise Pipeline")

        created = builder.save()
        assert created.id == "id-1"
        assert builder.config.id == "id-1"
        assert builder.error is None
        assert builder.is_loading is False

        builder.reorder_stages(0, 3)
        updated = builder.save()
        assert updated.id == "id-1"
        assert updated.stages[3].id == "prospecting"
        assert [r.method for r in service.requests] == ["POST", "PUT"]
        assert saved_callbacks == [created, updated]

    def test_persistence_failure_keeps_state(self, builder, service):
        builder.load_template("peak")
        builder.set_name("Enterprise Pipeline")
        before = builder.config
        service.fail_with = (422, {"error": "Stage probabilities must increase"})

        assert builder.save() is None
        assert builder.error == "Stage probabilities must increase"
        assert builder.config == before
        assert builder.is_loading is False

    def test_transport_failure_generic_message(self, builder, service):
        builder.load_template("peak")
        builder.set_name("Enterprise Pipeline")
        service.transport_error = True
        assert builder.save() is None
        assert builder.error == "Unable to reach the configuration service"

    def test_save_without_api(self):
        builder = PipelineBuilder("org-1", "user-1")
        builder.set_name("Offline")
        builder.add_stage(Stage(name="Lead"))
        with pytest.raises(RuntimeError):
            builder.save()


@pytest.fixture
def editor(workflow_api, stages):
    return WorkflowEditor("org-1", "user-1", api=workflow_api, stages=stages)


class TestWorkflowEditor:
    def test_stage_options(self, editor):
        assert editor.stage_options()[0] == ("s1", "Lead")

    def test_create_prepends(self, editor):
        first = editor.create(editor.new_rule(name="First"))
        second = editor.create(editor.new_rule(name="Second"))
        assert [r.id for r in editor.rules] == [second.id, first.id]
        assert first.organization_id == "org-1"

    def test_create_rejects_blank_name(self, editor, service):
        assert editor.create(editor.new_rule(name="")) is None
        assert editor.error == "Workflow name is required"
        assert service.requests == []

    def test_update_replaces_in_list(self, editor):
        created = editor.create(editor.new_rule(name="Draft"))
        updated = editor.update(created.with_updates(name="Final"))
        assert updated.name == "Final"
        assert [r.name for r in editor.rules] == ["Final"]

    def test_toggle_and_delete(self, editor):
        created = editor.create(editor.new_rule(name="Rule"))
        assert editor.toggle(created.id, False)
        assert editor.rules[0].is_active is False
        assert editor.delete(created.id)
        assert editor.rules == []

    def test_load_only_active(self, editor, workflow_api):
        workflow_api.create_rule(editor.new_rule(name="On"))
        workflow_api.create_rule(editor.new_rule(name="Off", is_active=False))
        assert editor.load()
        assert [r.name for r in editor.rules] == ["On"]

    def test_failures_set_error(self, editor, service):
        service.fail_with = (403, {"message": "Not allowed"})
        assert editor.load() is False
        assert editor.error == "Not allowed"
        assert editor.delete("w1") is False

    def test_dangling_references(self, editor, config):
        rule = editor.create(editor.new_rule(name="Proposal sent", trigger=StageChangeTrigger(stage="s3")))
        editor.create(editor.new_rule(name="Manual"))
        assert editor.dangling_references(config) == {}
        assert editor.dangling_references(config.delete_stage(2)) == {rule.id: ["s3"]}

    def test_load_keeps_rules_saved_without_full_conditions(self, editor, service):
        service.records["workflow-automations"]["w-legacy"] = {
            "id": "w-legacy",
            "name": "Welcome",
            "triggerType": "stage_change",
            "triggerConditions": {},
            "actions": [{"type": "send_email", "config": {"template": "welcome"}}],
            "isActive": True,
            "organizationId": "org-1",
        }
        assert editor.load()
        assert editor.error is None
        [rule] = editor.rules
        assert rule.is_complete is False
        assert rule.to_api()["triggerConditions"] == {}
        assert rule.to_api()["actions"] == [{"type": "send_email", "config": {"template": "welcome"}, "delay": 0}]

        assert editor.toggle("w-legacy", False)
        assert editor.rules[0].is_active is False

    def test_unreadable_record_sets_error(self, editor, service):
        service.records["workflow-automations"]["w-bad"] = {
            "id": "w-bad",
            "name": "Broken",
            "triggerType": "on_full_moon",
            "isActive": True,
            "organizationId": "org-1",
        }
        assert editor.load() is False
        assert editor.error == "Received an unreadable workflow automation"
        assert editor.rules == []

    def test_error_cleared_by_next_success(self, editor, service):
        service.fail_with = (500, {"message": "Temporarily unavailable"})
        assert editor.load() is False
        assert editor.error == "Temporarily unavailable"
        service.fail_with = None
        assert editor.load()
        assert editor.error is None
