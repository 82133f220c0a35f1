"""Tests for starter templates."""
import pytest

from src.core.entities import PipelineConfiguration, Stage
from src.core.errors import UnknownTemplateError
from src.core.templates import TemplateKind, default_peak_configuration, load_template, peak_stages

PEAK_NAMES = ["Prospecting", "Engaging", "Advancing", "Key Decision"]


class TestLoadTemplate:
    def test_peak_replaces_existing_stages(self, config):
        loaded = load_template(config, TemplateKind.PEAK)
        assert [s.name for s in loaded.stages] == PEAK_NAMES
        assert [s.order for s in loaded.stages] == [1, 2, 3, 4]
        assert not set(config.stage_ids()) & set(loaded.stage_ids())

    def test_peak_is_full_overwrite(self, config):
        scoped = config.with_updates(branch_specific=True, branch_name="North", is_default=True)
        loaded = load_template(scoped, "peak")
        assert loaded.branch_specific is False
        assert loaded.branch_name is None
        assert loaded.is_default is False
        assert loaded.description == "Standard PEAK methodology pipeline configuration"

    def test_keeps_identity_and_ownership(self, config):
        saved = config.model_copy(update={"id": "p-9"})
        loaded = load_template(saved, "peak")
        assert loaded.id == "p-9"
        assert loaded.name == "Enterprise Pipeline"
        assert loaded.organization_id == "org-1"
        assert loaded.created_by == "user-1"

    def test_custom_resets_to_empty(self, config):
        loaded = load_template(config, "custom")
        assert loaded.stages == []
        assert loaded.name == "Enterprise Pipeline"
        assert loaded.can_save() is False

    def test_loading_twice_gives_same_stage_list(self):
        first = load_template(PipelineConfiguration(), "peak")
        second = load_template(first.add_stage(Stage(name="Extra")), "peak")
        assert [s.name for s in second.stages] == PEAK_NAMES

    def test_unknown_template(self, config):
        with pytest.raises(UnknownTemplateError, match="bant"):
            load_template(config, "bant")


class TestPeakPreset:
    def test_fresh_copies(self):
        first = peak_stages()
        first[0].requirements.append("mutated")
        assert "mutated" not in peak_stages()[0].requirements

    def test_probabilities_increase(self):
        probabilities = [s.probability for s in peak_stages()]
        assert probabilities == sorted(probabilities)

    def test_default_configuration(self):
        config = default_peak_configuration("org-1", "user-1")
        assert config.is_default is True
        assert config.name == "Default PEAK Pipeline"
        assert config.can_save() is True
