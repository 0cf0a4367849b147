"""Unit tests for reply ingestion and interpretation."""

import pytest
from conftest import image_wire_part, make_png, reply, text_wire_part

from landscaper.core.reply import (
    NO_IMAGE_MESSAGE,
    NO_REFINED_IMAGE_MESSAGE,
    InterpretedReply,
    RawMultimodalReply,
    interpret_redesign_reply,
    interpret_refinement_reply,
    interpret_text_reply,
    truncate_image_data_for_log,
)
from landscaper.utils.exceptions import APIError, ErrorKind, Failure

IMAGE_A = make_png((255, 0, 0))
IMAGE_B = make_png((0, 0, 255))
BAD_IMAGE_PART = {"inlineData": {"mimeType": "image/png", "data": "@@not-base64@@"}}


@pytest.mark.unit
class TestFromWire:
    def test_parts_tagged(self):
        r = reply(image_wire_part(IMAGE_A, "image/jpeg"), text_wire_part("hello"))
        parts = r.candidates[0].parts
        assert parts[0].image is not None
        assert parts[0].image.data == IMAGE_A
        assert parts[0].image.media_type == "image/jpeg"
        assert parts[1].text == "hello"
        assert parts[1].image is None

    def test_block_reason_read(self):
        r = RawMultimodalReply.from_wire(
            {"promptFeedback": {"blockReason": "SAFETY", "blockReasonMessage": "nope"}}
        )
        assert r.block_reason == "SAFETY"
        assert r.block_reason_message == "nope"
        assert r.candidates == ()

    def test_candidate_without_content_has_no_parts(self):
        r = RawMultimodalReply.from_wire({"candidates": [{"finishReason": "SAFETY"}]})
        assert len(r.candidates) == 1
        assert r.candidates[0].parts == ()
        assert r.candidates[0].finish_reason == "SAFETY"

    def test_unknown_keys_ignored(self):
        r = RawMultimodalReply.from_wire(
            {"candidates": [], "usageMetadata": {"totalTokenCount": 5}, "modelVersion": "x"}
        )
        assert r.candidates == ()

    def test_non_object_raises_api_error(self):
        with pytest.raises(APIError) as exc_info:
            RawMultimodalReply.from_wire(["not", "an", "object"])
        assert "Unrecognized reply shape" in str(exc_info.value)

    def test_wrong_field_types_raise_api_error(self):
        with pytest.raises(APIError):
            RawMultimodalReply.from_wire({"candidates": "many"})

    def test_invalid_base64_accepted_at_ingestion(self):
        r = RawMultimodalReply.from_wire(
            {"candidates": [{"content": {"parts": [BAD_IMAGE_PART]}}]}
        )
        part = r.candidates[0].parts[0]
        assert part.has_image
        assert part.image is None


@pytest.mark.unit
class TestInterpretRedesignReply:
    def test_blocked(self):
        r = RawMultimodalReply.from_wire({"promptFeedback": {"blockReason": "SAFETY"}})
        outcome = interpret_redesign_reply(r)
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.CONTENT_BLOCKED
        assert outcome.block_reason == "SAFETY"
        assert outcome.block_reason_message == "No additional details provided."
        assert "SAFETY" in outcome.message

    def test_block_checked_before_candidates(self):
        r = RawMultimodalReply.from_wire(
            {
                "promptFeedback": {"blockReason": "OTHER"},
                "candidates": [{"content": {"parts": [image_wire_part(IMAGE_A)]}}],
            }
        )
        outcome = interpret_redesign_reply(r)
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.CONTENT_BLOCKED

    def test_no_candidates(self):
        outcome = interpret_redesign_reply(RawMultimodalReply.from_wire({"candidates": []}))
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NO_CANDIDATES

    def test_missing_candidates_key(self):
        outcome = interpret_redesign_reply(RawMultimodalReply.from_wire({}))
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NO_CANDIDATES

    def test_text_only_is_no_image(self):
        outcome = interpret_redesign_reply(reply(text_wire_part("hi")))
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NO_IMAGE_RETURNED
        assert outcome.message == NO_IMAGE_MESSAGE

    def test_first_image_wins_and_all_text_concatenated(self):
        r = reply(
            image_wire_part(IMAGE_A),
            text_wire_part("t1"),
            image_wire_part(IMAGE_B),
            text_wire_part("t2"),
        )
        outcome = interpret_redesign_reply(r)
        assert isinstance(outcome, InterpretedReply)
        assert outcome.image.data == IMAGE_A
        assert outcome.text == "t1t2"

    def test_bad_later_image_part_discarded(self):
        outcome = interpret_redesign_reply(
            reply(image_wire_part(IMAGE_A), text_wire_part("{}"), BAD_IMAGE_PART)
        )
        assert isinstance(outcome, InterpretedReply)
        assert outcome.image.data == IMAGE_A
        assert outcome.text == "{}"

    def test_bad_first_image_part_skipped(self):
        outcome = interpret_redesign_reply(reply(BAD_IMAGE_PART, image_wire_part(IMAGE_B)))
        assert isinstance(outcome, InterpretedReply)
        assert outcome.image.data == IMAGE_B

    def test_only_bad_image_is_no_image(self):
        outcome = interpret_redesign_reply(reply(BAD_IMAGE_PART, text_wire_part("t")))
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NO_IMAGE_RETURNED

    def test_bad_image_in_later_candidate_ignored(self):
        r = RawMultimodalReply.from_wire(
            {
                "candidates": [
                    {"content": {"parts": [image_wire_part(IMAGE_A)]}},
                    {"content": {"parts": [BAD_IMAGE_PART]}},
                ]
            }
        )
        outcome = interpret_redesign_reply(r)
        assert isinstance(outcome, InterpretedReply)
        assert outcome.image.data == IMAGE_A

    def test_text_before_image_kept(self):
        outcome = interpret_redesign_reply(reply(text_wire_part("a"), image_wire_part(IMAGE_A)))
        assert isinstance(outcome, InterpretedReply)
        assert outcome.text == "a"

    def test_only_first_candidate_used(self):
        r = RawMultimodalReply.from_wire(
            {
                "candidates": [
                    {"content": {"parts": [text_wire_part("first")]}},
                    {"content": {"parts": [image_wire_part(IMAGE_A)]}},
                ]
            }
        )
        outcome = interpret_redesign_reply(r)
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NO_IMAGE_RETURNED


@pytest.mark.unit
class TestInterpretRefinementReply:
    def test_image_returned_text_ignored(self):
        outcome = interpret_refinement_reply(
            reply(text_wire_part("ignored"), image_wire_part(IMAGE_B), image_wire_part(IMAGE_A))
        )
        assert not isinstance(outcome, Failure)
        assert outcome.data == IMAGE_B

    def test_bad_image_part_skipped(self):
        outcome = interpret_refinement_reply(reply(BAD_IMAGE_PART, image_wire_part(IMAGE_A)))
        assert not isinstance(outcome, Failure)
        assert outcome.data == IMAGE_A

    def test_no_image_is_refined_kind(self):
        outcome = interpret_refinement_reply(reply(text_wire_part("sorry")))
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NO_REFINED_IMAGE_RETURNED
        assert outcome.message == NO_REFINED_IMAGE_MESSAGE

    def test_no_candidates(self):
        outcome = interpret_refinement_reply(RawMultimodalReply.from_wire({"candidates": []}))
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NO_CANDIDATES
        assert "refinement" in outcome.message


@pytest.mark.unit
class TestInterpretTextReply:
    def test_concatenates_text(self):
        assert interpret_text_reply(reply(text_wire_part("a"), text_wire_part("b"))) == "ab"

    def test_blocked(self):
        outcome = interpret_text_reply(
            RawMultimodalReply.from_wire({"promptFeedback": {"blockReason": "SAFETY"}})
        )
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.CONTENT_BLOCKED


@pytest.mark.unit
class TestTruncateForLog:
    def test_long_strings_replaced(self):
        payload = {"inlineData": {"data": "A" * 500}, "text": "B" * 500}
        out = truncate_image_data_for_log(payload)
        assert out["inlineData"]["data"] == "<string, 500 chars>"
        assert out["text"] == "B" * 500

    def test_data_url_placeholder(self):
        url = "data:image/png;base64," + "A" * 300
        assert truncate_image_data_for_log([url]) == [f"<data URL, {len(url)} chars>"]
