"""
Tests for editor settings and the JSON exchange models.
"""
import pytest
from pydantic import ValidationError

from blockslides.config import EditorSettings, JSONContent, ValidationMode, load_settings


class TestEditorSettings:
    """Tests for EditorSettings."""

    def test_defaults(self):
        settings = EditorSettings()

        assert settings.editable is True
        assert settings.enable_core_extensions is True
        assert settings.enable_input_rules is True
        assert settings.validation_mode is ValidationMode.LENIENT
        assert settings.auto_focus is False

    def test_from_mapping(self):
        settings = load_settings({"validation_mode": "strict", "enable_input_rules": ["heading"]})

        assert settings.validation_mode is ValidationMode.STRICT
        assert settings.enable_input_rules == ["heading"]

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            load_settings({"editabel": False})

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            EditorSettings(validation_mode="paranoid")

    def test_instance_passes_through(self):
        settings = EditorSettings(editable=False)
        assert load_settings(settings) is settings

    def test_none_gives_defaults(self):
        assert load_settings(None) == EditorSettings()


class TestJSONContent:
    """Tests for the exchange shape model."""

    def test_nested_content(self):
        content = JSONContent.model_validate(
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": "Hi", "marks": [{"type": "bold"}]}],
            }
        )

        assert content.content[0].marks[0].type == "bold"

    def test_to_dict_drops_unset_keys(self):
        content = JSONContent.model_validate({"type": "text", "text": "Hi"})
        assert content.to_dict() == {"type": "text", "text": "Hi"}

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError):
            JSONContent.model_validate({"type": "text", "text": ""})

    def test_text_on_non_text_node_rejected(self):
        with pytest.raises(ValidationError):
            JSONContent.model_validate({"type": "paragraph", "text": "Hi"})

    def test_missing_type_rejected(self):
        with pytest.raises(ValidationError):
            JSONContent.model_validate({"content": []})

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            JSONContent.model_validate({"type": "paragraph", "children": []})
