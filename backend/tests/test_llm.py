"""Tests for the LLM reviewer and its template fallback."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from metasupervisor.supervisor.llm_client import (
    ChatClient,
    LLMConfig,
    LLMResponse,
    build_prompt,
    is_llm_available,
    parse_review,
    review_code,
    template_review,
)


def _client() -> ChatClient:
    return ChatClient(LLMConfig(api_base="http://llm.local/v1", api_key="k", model="m"))


class TestTemplateReview:
    def test_clean_file(self):
        result = template_review("const a = 1;\n", "a.ts")
        assert result.summary == "a.ts looks clean, no significant issues detected"
        assert result.source == "template"
        assert result.issues == []

    def test_deep_nesting_and_any(self):
        code = "function f(x: any) {\n" + " " * 20 + "return x;\n}\n"
        result = template_review(code, "f.ts")
        assert any("Deep nesting detected (10 levels)" in i.description for i in result.issues)
        assert any("1 uses of 'any' type" in s for s in result.suggestions)
        assert result.summary == "Found 1 issue(s) and 1 suggestion(s) in f.ts"

    def test_long_function(self):
        code = "function big() {\n" + "  step();\n" * 60 + "}\n"
        result = template_review(code, "big.js")
        issue = next(i for i in result.issues if i.description.startswith("Long function"))
        assert issue.location == "line 1"
        assert issue.severity.value == "info"

    def test_many_functions_and_imports(self):
        code = "\n".join(f'import m{i} from "m{i}";' for i in range(16))
        code += "\n" + "\n".join(f"function f{i}() {{}}" for i in range(11))
        result = template_review(code, "x.js")
        assert any("11 functions" in s for s in result.suggestions)
        assert any("16 modules" in n for n in result.architectural_notes)


class TestParseReview:
    def test_json_reply(self):
        reply = "Here you go:\n" + json.dumps({
            "summary": "Mostly fine",
            "issues": [{"severity": "critical", "description": "eval", "location": "line 3", "fix": "remove"}],
            "suggestions": ["add tests"],
            "architecturalNotes": ["split module"],
        })
        result = parse_review(reply)
        assert result.source == "llm"
        assert result.summary == "Mostly fine"
        assert result.issues[0].severity.value == "critical"
        assert result.architectural_notes == ["split module"]

    def test_unknown_severity_becomes_info(self):
        result = parse_review('{"issues": [{"severity": "fatal", "description": "d"}]}')
        assert result.issues[0].severity.value == "info"
        assert result.summary == "LLM analysis complete"

    def test_plain_text_reply(self):
        result = parse_review("Looks good to me.")
        assert result.summary == "Looks good to me."
        assert result.suggestions == ["Looks good to me."]


class TestChatClient:
    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            ChatClient(LLMConfig(api_key=None))

    def test_chat_posts_to_completions(self):
        response = MagicMock()
        response.json.return_value = {
            "choices": [{"message": {"content": " hi "}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
        }
        with patch("metasupervisor.supervisor.llm_client.requests.post", return_value=response) as post:
            result = _client().chat("system", "user")

        assert result.content == "hi"
        assert result.usage["total_tokens"] == 4
        url = post.call_args.args[0]
        assert url == "http://llm.local/v1/chat/completions"
        payload = post.call_args.kwargs["json"]
        assert [m["role"] for m in payload["messages"]] == ["system", "user"]
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer k"

    def test_network_error_is_reported(self):
        with patch(
            "metasupervisor.supervisor.llm_client.requests.post",
            side_effect=requests.ConnectionError("down"),
        ):
            result = _client().chat("system", "user")
        assert result.content is None
        assert result.finish_reason == "error"
        assert "down" in result.error


class TestReviewCode:
    def test_unconfigured_uses_template(self):
        assert not is_llm_available()
        assert review_code("const a = 1;\n", "a.ts").source == "template"

    def test_failed_call_falls_back(self):
        client = MagicMock()
        client.chat.return_value = LLMResponse(finish_reason="error", time_taken=0.1, error="boom")
        assert review_code("const a = 1;\n", "a.ts", client=client).source == "template"

    def test_llm_reply_used(self):
        client = MagicMock()
        client.chat.return_value = LLMResponse(
            content='{"summary": "ok", "issues": []}', finish_reason="stop", time_taken=0.1
        )
        result = review_code("x" * 9000, "a.ts", client=client)
        assert result.summary == "ok"
        prompt = client.chat.call_args.args[1]
        assert prompt == build_prompt("x" * 9000, "a.ts")
        assert "x" * 8001 not in prompt

    def test_available_from_environment(self, monkeypatch):
        monkeypatch.setenv("LLM_API_KEY", "secret")
        assert is_llm_available()
