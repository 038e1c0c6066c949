import json
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from oapi_codec.errors import ErrorCode, PayloadDecodeError
from oapi_codec.response.base import ResponseRule
from oapi_codec.response.dispatch import dispatch, select_rule


class Pet(BaseModel):
    id: int
    name: str


class Error(BaseModel):
    code: int
    message: str


RULES = [
    ResponseRule(name="JSON200", status=200, content_type="json", model=Pet),
    ResponseRule(name="XML200", status=200, content_type="xml", model=str),
    ResponseRule(name="JSONDefault", status="default", content_type="json", model=Error),
]

PET_BODY = json.dumps({"id": 1, "name": "rex"}).encode()
ERROR_BODY = json.dumps({"code": 404, "message": "not found"}).encode()


class TestSelectRule:
    def test_status_and_content_type_pick_the_rule(self):
        assert select_rule(200, "application/json", RULES).name == "JSON200"
        assert select_rule(200, "application/xml", RULES).name == "XML200"
        assert select_rule(404, "application/json", RULES).name == "JSONDefault"

    def test_no_match(self):
        assert select_rule(404, "text/plain", RULES) is None

    def test_exact_code_beats_earlier_default(self):
        rules = [
            ResponseRule(name="JSONDefault", status="default", content_type="json"),
            ResponseRule(name="JSON200", status=200, content_type="json"),
        ]
        assert select_rule(200, "application/json", rules).name == "JSON200"

    def test_range_beats_default(self):
        rules = [
            ResponseRule(name="JSONDefault", status="default", content_type="json"),
            ResponseRule(name="JSON4XX", status="4XX", content_type="json"),
        ]
        assert select_rule(404, "application/json", rules).name == "JSON4XX"
        assert select_rule(500, "application/json", rules).name == "JSONDefault"

    def test_ties_go_to_declaration_order(self):
        rules = [
            ResponseRule(name="First", status=200, content_type="json"),
            ResponseRule(name="Second", status=200, content_type="application/json"),
        ]
        assert select_rule(200, "application/json", rules).name == "First"

    def test_missing_content_type_fails_closed(self):
        assert select_rule(200, "", RULES) is None
        assert select_rule(200, None, RULES) is None

    def test_content_type_parameters_and_case(self):
        assert select_rule(200, "Application/JSON; charset=utf-8", RULES).name == "JSON200"


class TestDispatch:
    def test_json_payload(self):
        response = dispatch(200, "application/json", PET_BODY, RULES)
        assert response.rule == "JSON200"
        assert response.payload == Pet(id=1, name="rex")
        assert response.get("JSON200") == Pet(id=1, name="rex")
        assert response.get("JSONDefault") is None

    def test_default_rule_payload(self):
        response = dispatch(404, "application/json", ERROR_BODY, RULES)
        assert response.rule == "JSONDefault"
        assert response.payload.message == "not found"
        assert response.status_code == 404

    def test_unmatched_keeps_raw_response(self):
        response = dispatch(404, "text/plain", b"nope", RULES, headers={"X-Trace": "1"})
        assert not response.matched
        assert response.payload is None
        assert response.body == b"nope"
        assert response.headers == {"X-Trace": "1"}

    def test_text_body(self):
        rules = [ResponseRule(name="Text4XX", status="4XX", content_type="text/plain", model=str)]
        response = dispatch(400, "text/plain; charset=utf-8", "bad input".encode(), rules)
        assert response.payload == "bad input"

    def test_rule_without_model_has_no_payload(self):
        rules = [ResponseRule(name="Empty204", status=204)]
        response = dispatch(204, None, b"", rules)
        assert response.rule == "Empty204"
        assert response.payload is None

    def test_raw_body_does_not_satisfy_other_models(self):
        with pytest.raises(PayloadDecodeError) as exc_info:
            dispatch(200, "application/xml", b"<pet/>", RULES)
        assert exc_info.value.rule == "XML200"
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_text_body_is_validated_against_its_model(self):
        rules = [ResponseRule(name="Text200", status=200, content_type="text/plain", model=int)]
        assert dispatch(200, "text/plain", b"42", rules).payload == 42

    def test_other_media_types_stay_bytes(self):
        rules = [ResponseRule(name="Body200", status=200, content_type="application/octet-stream", model=bytes)]
        response = dispatch(200, "application/octet-stream", b"\x00\x01", rules)
        assert response.payload == b"\x00\x01"

    def test_dispatch_is_repeatable(self):
        first = dispatch(200, "application/json", PET_BODY, RULES)
        second = dispatch(200, "application/json", PET_BODY, RULES)
        assert first == second


class TestPayloadDecodeError:
    def test_invalid_json_raises_with_raw_response(self):
        with pytest.raises(PayloadDecodeError) as exc_info:
            dispatch(200, "application/json", b"{not json", RULES)

        error = exc_info.value
        assert error.error_code == ErrorCode.PAYLOAD_DECODE_ERROR
        assert error.rule == "JSON200"
        assert error.response.status_code == 200
        assert error.response.body == b"{not json"
        assert error.response.payload is None
        assert error.context["body_preview"] == "{not json"

    def test_body_not_matching_model(self):
        with pytest.raises(PayloadDecodeError) as exc_info:
            dispatch(200, "application/json", b'{"id": "x"}', RULES)
        assert exc_info.value.__cause__ is not None


class TestCustomUnmarshaler:
    def test_unmarshaler_receives_matched_rule(self):
        unmarshal = MagicMock(return_value="decoded")
        response = dispatch(200, "application/xml", b"<pet/>", RULES, unmarshal=unmarshal)

        assert response.payload == "decoded"
        body, content_type, rule = unmarshal.call_args.args
        assert body == b"<pet/>"
        assert content_type == "application/xml"
        assert rule.name == "XML200"

    def test_unmarshaler_not_called_without_match(self):
        unmarshal = MagicMock()
        dispatch(500, "text/html", b"", RULES, unmarshal=unmarshal)
        unmarshal.assert_not_called()

    def test_unmarshaler_failure_is_wrapped(self):
        unmarshal = MagicMock(side_effect=ValueError("bad xml"))
        with pytest.raises(PayloadDecodeError) as exc_info:
            dispatch(200, "application/xml", b"<pet", RULES, unmarshal=unmarshal)
        assert "bad xml" in str(exc_info.value)
