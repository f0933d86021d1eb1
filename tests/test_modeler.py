"""Tests for CharacterModeler, the modeler prompt and ModelerConfig."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from digital_twin import CharacterModeler, ModelerConfig, ProposedUpdate
from digital_twin.prompts import CLOSING_RULES, RESPONSE_FORMAT, build_modeler_prompt
from digital_twin.schema import build as s
from tests.conftest import ScriptedLLMClient, UPDATES_REPLY

CHARACTER = {
    "name": "Sam",
    "bio": ["Lives in Leeds"],
    "topics": ["tea"],
}


# ---------------------------------------------------------------------------
# ModelerConfig
# ---------------------------------------------------------------------------


class TestModelerConfig:

    def test_defaults(self):
        config = ModelerConfig()
        assert config.max_retries == 3
        assert config.required_fields == ("updates",)
        assert config.reasoning_tag == "think"
        assert config.steer_on_retry is False
        assert config.chat_kwargs() == {"model": None, "temperature": None, "max_tokens": None}

    def test_frozen(self):
        config = ModelerConfig()
        with pytest.raises(ValidationError):
            config.max_retries = 5

    def test_max_retries_at_least_one(self):
        with pytest.raises(ValidationError):
            ModelerConfig(max_retries=0)


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class TestModelerPrompt:

    def test_sections(self):
        prompt = build_modeler_prompt(s.object_({"name": s.string()}), CHARACTER, "Sam: hi")
        assert prompt.startswith("<task>")
        assert "<character_structure>\nSchema:\n- name (string, required)\n</character_structure>" in prompt
        assert "<conversation>\nSam: hi\n</conversation>" in prompt
        assert RESPONSE_FORMAT in prompt
        assert prompt.rstrip().endswith(f"{CLOSING_RULES}\n</output>")

    def test_character_rendered_as_json(self):
        prompt = build_modeler_prompt(s.object_({}), CHARACTER)
        start = prompt.index("<character>\n") + len("<character>\n")
        end = prompt.index("\n</character>")
        assert json.loads(prompt[start:end]) == CHARACTER

    def test_conversation_omitted_when_blank(self):
        prompt = build_modeler_prompt(s.object_({}), CHARACTER, "   ")
        assert "<conversation>" not in prompt

    def test_missing_character(self):
        prompt = build_modeler_prompt(s.object_({}), None)
        assert "<character>\n{}\n</character>" in prompt

    def test_default_schema_is_character(self):
        prompt = CharacterModeler(ScriptedLLMClient([""])).build_prompt(CHARACTER)
        assert "Schema: Complete character definition" in prompt
        assert "- messageExamples (" in prompt


# ---------------------------------------------------------------------------
# CharacterModeler
# ---------------------------------------------------------------------------


class TestCharacterModeler:

    def test_propose_updates(self):
        client = ScriptedLLMClient([UPDATES_REPLY])
        modeler = CharacterModeler(client, system_prompt="You model users.")

        updates = modeler.propose_updates(CHARACTER, "Sam: I'm a nurse")

        assert all(isinstance(u, ProposedUpdate) for u in updates)
        assert [u.field for u in updates] == ["bio", "topics"]
        messages = client.calls[0]["messages"]
        assert messages[0] == {"role": "system", "content": "You model users."}
        assert "Sam: I'm a nurse" in messages[1]["content"]

    def test_no_updates(self):
        client = ScriptedLLMClient(["<response><updates></updates></response>"])
        assert CharacterModeler(client).propose_updates(CHARACTER) == []

    def test_unusable_reply_gives_empty_list(self):
        client = ScriptedLLMClient(["no xml here"])
        modeler = CharacterModeler(client, ModelerConfig(max_retries=2))
        assert modeler.propose_updates(CHARACTER) == []
        assert len(client.calls) == 2

    def test_custom_schema(self):
        client = ScriptedLLMClient([UPDATES_REPLY])
        schema = s.object_({"mood": s.enum("calm", "busy")}).describe("Profile")
        modeler = CharacterModeler(client, schema=schema)
        modeler.propose_updates({"mood": "calm"})
        assert "Schema: Profile\n- mood (enum<calm | busy>, required)" in (
            client.calls[0]["messages"][0]["content"]
        )

    def test_config_exposed(self):
        config = ModelerConfig(model="m")
        assert CharacterModeler(ScriptedLLMClient([""]), config).config is config
