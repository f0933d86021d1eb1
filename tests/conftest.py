"""Shared test fixtures for digital_twin.

Provides canned chat responses and a scripted LLM client that records
the messages it was sent.
"""

from __future__ import annotations


# ------------------------------------------------------------------
# Shared test helpers (used by test_ask.py, test_modeler.py)
# ------------------------------------------------------------------

def chat_response(content: str, **message_fields) -> dict:
    """Build a minimal OpenAI chat completion response dict."""
    message = {"role": "assistant", "content": content, **message_fields}
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": message, "finish_reason": "stop"}],
    }


class ScriptedLLMClient:
    """LLM client that replays a list of reply texts.

    The last reply is repeated once the script runs out.
    """

    def __init__(self, replies: list[str]):
        self.replies = replies
        self.calls: list[dict] = []

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs,
    ) -> dict:
        self.calls.append({
            "messages": [dict(m) for m in messages],
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        idx = min(len(self.calls) - 1, len(self.replies) - 1)
        return chat_response(self.replies[idx])

    def close(self) -> None:
        pass


UPDATES_REPLY = """<response>
  <updates>
    <update>
      <field>bio</field>
      <reason>User mentioned they work as a nurse</reason>
      <confidence>85</confidence>
      <weight>70</weight>
      <new>Works night shifts as a nurse</new>
      <old></old>
    </update>
    <update>
      <field>topics</field>
      <reason>Talks about climbing</reason>
      <confidence>60</confidence>
      <weight>40</weight>
      <new>climbing</new>
    </update>
  </updates>
</response>"""
