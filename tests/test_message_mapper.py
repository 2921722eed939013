"""Tests for minimax_lm.llm.message_mapper."""

from __future__ import annotations

import json
from dataclasses import dataclass

from minimax_lm.llm.message_mapper import (
    is_thinking_part,
    render_tool_result,
    to_wire_messages,
)
from minimax_lm.types import (
    DataPart,
    HostMessage,
    TextPart,
    ThinkingPart,
    ToolCallPart,
    ToolResultPart,
)


@dataclass
class ThinkingWithFormat:
    """A host-defined reasoning part type the mapper has never seen."""

    value: str
    id: str | None = None
    format: str | None = None
    metadata: dict | None = None


class TestSystemMessages:
    """System and unknown roles collapse to text."""

    def test_concatenates_text_parts(self):
        msgs = to_wire_messages(
            [HostMessage("system", [TextPart("You are "), TextPart("helpful.")])]
        )
        assert [m.to_dict() for m in msgs] == [
            {"role": "system", "content": "You are helpful."}
        ]

    def test_ignores_non_text_parts(self):
        msgs = to_wire_messages(
            [HostMessage("system", [TextPart("a"), ToolCallPart("c1", "x", {})])]
        )
        assert msgs[0].content == "a"

    def test_plain_string_content(self):
        msgs = to_wire_messages([HostMessage("system", "be brief")])
        assert msgs[0].to_dict() == {"role": "system", "content": "be brief"}

    def test_unknown_role_maps_to_system(self):
        msgs = to_wire_messages([HostMessage("developer", [TextPart("x")])])
        assert msgs[0].role == "system"


class TestAssistantMessages:
    """Assistant text, tool calls and reasoning details."""

    def test_text_only_omits_optional_arrays(self):
        msgs = to_wire_messages([HostMessage("assistant", [TextPart("Hi")])])
        assert len(msgs) == 1
        assert msgs[0].to_dict() == {"role": "assistant", "content": "Hi"}

    def test_tool_calls_serialized(self):
        msgs = to_wire_messages(
            [
                HostMessage(
                    "assistant",
                    [
                        TextPart("Let me check."),
                        ToolCallPart("call_1", "read_file", {"path": "/etc/hosts"}),
                        ToolCallPart("call_2", "ping", None),
                    ],
                )
            ]
        )
        d = msgs[0].to_dict()
        assert d["content"] == "Let me check."
        assert d["tool_calls"] == [
            {
                "id": "call_1",
                "type": "function",
                "function": {
                    "name": "read_file",
                    "arguments": json.dumps({"path": "/etc/hosts"}),
                },
            },
            {
                "id": "call_2",
                "type": "function",
                "function": {"name": "ping", "arguments": "{}"},
            },
        ]
        assert "reasoning_details" not in d

    def test_reasoning_details_indexed_by_emission_order(self):
        msgs = to_wire_messages(
            [
                HostMessage(
                    "assistant",
                    [
                        ThinkingPart("first"),
                        TextPart("answer"),
                        ThinkingPart("   "),  # blank: skipped, takes no index
                        ThinkingPart(["sec", "ond"], id="r2"),
                    ],
                )
            ]
        )
        details = msgs[0].to_dict()["reasoning_details"]
        assert details == [
            {"type": "reasoning.text", "index": 0, "text": "first"},
            {"type": "reasoning.text", "index": 1, "text": "second", "id": "r2"},
        ]

    def test_reasoning_optional_fields_and_metadata(self):
        part = ThinkingWithFormat(
            value="hmm",
            id="  ",
            format=" anthropic-v1 ",
            metadata={"signature": "sig", "extra": 1},
        )
        details = to_wire_messages([HostMessage("assistant", [part])])[0].reasoning_details
        assert details == [
            {
                "type": "reasoning.text",
                "index": 0,
                "text": "hmm",
                "format": "anthropic-v1",
                "signature": "sig",
                "extra": 1,
            }
        ]

    def test_host_thinking_part_carries_format(self):
        part = ThinkingPart("plan", id="r1", metadata={"signature": "s"}, format="anthropic-v1")
        details = to_wire_messages([HostMessage("assistant", [part])])[0].reasoning_details
        assert details == [
            {
                "type": "reasoning.text",
                "index": 0,
                "text": "plan",
                "id": "r1",
                "format": "anthropic-v1",
                "signature": "s",
            }
        ]

    def test_mapping_parts_are_thinking_candidates(self):
        details = to_wire_messages(
            [HostMessage("assistant", [{"value": "from a dict", "id": "d1"}])]
        )[0].reasoning_details
        assert details == [
            {"type": "reasoning.text", "index": 0, "text": "from a dict", "id": "d1"}
        ]


class TestThinkingPredicate:
    """Reasoning parts are recognised by shape."""

    def test_known_parts_are_not_thinking(self):
        assert not is_thinking_part(TextPart("x"))
        assert not is_thinking_part(ToolCallPart("c", "n", {}))
        assert not is_thinking_part(ToolResultPart("c", []))
        assert not is_thinking_part(DataPart(b"x", "text/plain"))

    def test_string_or_string_list_value(self):
        assert is_thinking_part(ThinkingPart("x"))
        assert is_thinking_part(ThinkingPart(["a", "b"]))
        assert is_thinking_part({"value": []})

    def test_mixed_list_rejected(self):
        assert not is_thinking_part({"value": ["a", 1]})
        assert not is_thinking_part({"value": 3})
        assert not is_thinking_part(None)
        assert not is_thinking_part("bare string")


class TestUserMessages:
    """User text and tool results split into messages."""

    def test_plain_user_text(self):
        msgs = to_wire_messages([HostMessage("user", [TextPart("hello")])])
        assert [m.to_dict() for m in msgs] == [{"role": "user", "content": "hello"}]

    def test_tool_results_only_emit_no_user_message(self):
        msgs = to_wire_messages(
            [
                HostMessage(
                    "user",
                    [
                        ToolResultPart("call_1", [TextPart("ok")]),
                        ToolResultPart("call_2", [TextPart("done")]),
                    ],
                )
            ]
        )
        assert [m.to_dict() for m in msgs] == [
            {"role": "tool", "tool_call_id": "call_1", "content": "ok"},
            {"role": "tool", "tool_call_id": "call_2", "content": "done"},
        ]

    def test_whitespace_text_with_tool_results_drops_user_message(self):
        msgs = to_wire_messages(
            [HostMessage("user", [TextPart("  "), ToolResultPart("c", [TextPart("r")])])]
        )
        assert [m.role for m in msgs] == ["tool"]

    def test_whitespace_only_turn_still_emits_user_message(self):
        msgs = to_wire_messages([HostMessage("user", [TextPart("   ")])])
        assert [m.to_dict() for m in msgs] == [{"role": "user", "content": "   "}]

    def test_empty_turn_emits_empty_user_message(self):
        msgs = to_wire_messages([HostMessage("user", [])])
        assert [m.to_dict() for m in msgs] == [{"role": "user", "content": ""}]

    def test_text_precedes_tool_messages(self):
        msgs = to_wire_messages(
            [
                HostMessage(
                    "user",
                    [ToolResultPart("c1", [TextPart("r1")]), TextPart("and then?")],
                )
            ]
        )
        assert [(m.role, m.content) for m in msgs] == [
            ("user", "and then?"),
            ("tool", "r1"),
        ]

    def test_tool_call_ids_follow_result_order(self):
        ids = ["z", "a", "m"]
        msgs = to_wire_messages(
            [HostMessage("user", [ToolResultPart(i, [TextPart(i)]) for i in ids])]
        )
        assert [m.tool_call_id for m in msgs] == ids


class TestToolResultRendering:
    """Tool result content flattened to a string."""

    def test_text_and_data_parts(self):
        rendered = render_tool_result(
            [TextPart("image: "), DataPart(b"\x89PNG", "image/png")]
        )
        assert rendered == "image: [data:image/png;base64,iVBORw==]"

    def test_generic_value_object(self):
        assert render_tool_result([{"value": "from value"}]) == "from value"

    def test_other_objects_json_serialized(self):
        assert render_tool_result([{"a": 1}]) == '{"a": 1}'

    def test_unserializable_falls_back_to_str(self):
        class Opaque:
            def __str__(self):
                return "opaque!"

        assert render_tool_result([Opaque()]) == "opaque!"

    def test_trimmed(self):
        assert render_tool_result([TextPart("  padded \n")]) == "padded"

    def test_empty_becomes_braces(self):
        assert render_tool_result([]) == "{}"
        assert render_tool_result([TextPart("   ")]) == "{}"


class TestConversation:
    """A full multi-turn exchange."""

    def test_multi_turn_order_preserved(self):
        msgs = to_wire_messages(
            [
                HostMessage("system", [TextPart("sys")]),
                HostMessage("user", [TextPart("q")]),
                HostMessage("assistant", [ToolCallPart("c1", "run", {"a": 1})]),
                HostMessage("user", [ToolResultPart("c1", [TextPart("42")])]),
            ]
        )
        assert [m.role for m in msgs] == ["system", "user", "assistant", "tool"]
        assert msgs[3].tool_call_id == "c1"
