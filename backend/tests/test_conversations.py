"""Unit tests for conversation thread reconstruction."""

import json

import pytest

from conftest import T0, dm_text, make_record
from inboxlens.errors import MalformedResponseError
from inboxlens.services.conversations import build_threads, decode_response


class TestBuildThreads:
    """Test grouping interactions into threads."""

    def test_record_without_response_yields_single_user_message(self):
        """A row with no response becomes one user message."""
        threads = build_threads([make_record("A", "R1", "hello", None)])

        assert len(threads) == 1
        thread = threads[0]
        assert (thread.sender_id, thread.receiver_id) == ("A", "R1")
        assert len(thread.conversation) == 1
        msg = thread.conversation[0]
        assert msg.role == "user"
        assert msg.ts == T0
        assert msg.payload["input_query"] == "hello"
        assert "response" not in msg.payload

    def test_record_with_response_yields_user_then_assistant(self):
        """A row with a response adds an assistant message at the same time."""
        threads = build_threads([make_record("A", "R1", "hello", [dm_text("hi")])])

        messages = threads[0].conversation
        assert [m.role for m in messages] == ["user", "assistant"]
        assert messages[0].ts == messages[1].ts
        assert messages[1].payload == [dm_text("hi")]
        assert messages[1].view.text == "hi"
        assert messages[0].view is None

    def test_message_count_per_thread(self, sample_records):
        """Messages = rows for the pair + rows with a response."""
        threads = build_threads(sample_records)

        for thread in threads:
            rows = [
                r for r in sample_records
                if (r.sender_id, r.receiver_id) == (thread.sender_id, thread.receiver_id)
            ]
            expected = len(rows) + sum(1 for r in rows if r.response is not None)
            assert len(thread.conversation) == expected

    def test_messages_sorted_by_time_with_user_first_on_ties(self):
        """Out-of-order rows are sorted; ties put the user message first."""
        records = [
            make_record("A", "R1", "second", [dm_text("two")], minutes=10),
            make_record("A", "R1", "first", [dm_text("one")], minutes=0),
            make_record("A", "R1", "third", None, minutes=20),
        ]

        messages = build_threads(records)[0].conversation

        timestamps = [m.ts for m in messages]
        assert timestamps == sorted(timestamps)
        assert [m.role for m in messages] == ["user", "assistant", "user", "assistant", "user"]
        assert messages[0].payload["input_query"] == "first"
        assert messages[2].payload["input_query"] == "second"

    def test_threads_grouped_by_pair_and_ordered_by_sender(self, sample_records):
        """One thread per (sender, receiver), sorted by sender."""
        threads = build_threads(sample_records)

        keys = [(t.sender_id, t.receiver_id) for t in threads]
        assert keys == [("alice", "R1"), ("bob", "R1"), ("bob", "R2"), ("carol", "R2")]

    def test_receiver_filter_is_exact_match(self, sample_records):
        """Only threads for the exact receiver ID survive."""
        threads = build_threads(sample_records, receiver_id="R2")
        assert {t.receiver_id for t in threads} == {"R2"}

        assert build_threads(sample_records, receiver_id="r2") == []

    def test_extra_columns_flow_into_user_payload(self):
        """Columns beyond the declared ones are kept on the user message."""
        record = make_record("A", "R1", "hi", None, id=42, media_id="m-9")

        payload = build_threads([record])[0].conversation[0].payload

        assert payload["id"] == 42
        assert payload["media_id"] == "m-9"
        assert payload["sender_id"] == "A"

    def test_idempotent_and_does_not_mutate_input(self, sample_records):
        """Building twice gives equal threads and leaves records untouched."""
        before = [r.model_dump() for r in sample_records]

        first = build_threads(sample_records)
        first[0].conversation[1].payload.append({"channel": "dm_text"})
        second = build_threads(sample_records)

        assert [r.model_dump() for r in sample_records] == before
        assert second == build_threads(sample_records)
        assert len(second[0].conversation[1].payload) == 1

    def test_empty_input(self):
        assert build_threads([]) == []

    def test_numeric_ids_are_grouped_as_strings(self):
        """Integer sender and receiver IDs are accepted and compared as strings."""
        records = [
            make_record(17841400000000001, 9001, "hi"),
            make_record("17841400000000001", "9001", "again", minutes=1),
        ]

        threads = build_threads(records)

        assert len(threads) == 1
        assert (threads[0].sender_id, threads[0].receiver_id) == ("17841400000000001", "9001")
        assert len(threads[0].conversation) == 2


class TestDecodeResponse:
    """Test decoding of stored response values."""

    def test_decodes_json_text(self):
        """Responses stored as text are parsed."""
        record = make_record(response=json.dumps([dm_text("hi")]))
        assert decode_response(record) == [dm_text("hi")]

    def test_decodes_bytes(self):
        record = make_record(response=json.dumps([dm_text("hi")]).encode())
        assert decode_response(record) == [dm_text("hi")]

    def test_already_decoded_value_is_copied(self):
        """Decoded values are returned as copies."""
        raw = [dm_text("hi")]
        record = make_record(response=raw)

        decoded = decode_response(record)

        assert decoded == raw
        assert decoded is not raw

    def test_invalid_utf8_bytes_raise(self):
        """Byte responses that are not valid UTF-8 are rejected, not patched up."""
        record = make_record("A", "R1", response=b"\xff\xfe[]")

        with pytest.raises(MalformedResponseError, match="sender_id=A"):
            decode_response(record)

    def test_invalid_json_raises(self):
        """Undecodable responses fail loudly, naming the row."""
        record = make_record("A", "R1", response="{not json")

        with pytest.raises(MalformedResponseError, match="sender_id=A") as exc_info:
            build_threads([record])

        assert exc_info.value.status_code == 500
