"""Tests for perch.codecs.state: StateCodec."""

import json
from dataclasses import asdict, dataclass

import pytest

from perch import param
from perch.codecs.state import StateCodec, state
from perch.errors import BuildError, DecodeError


@dataclass(frozen=True)
class Draft:
    title: str
    body: str = ""


def _draft_codec() -> StateCodec:
    return state(lambda d: json.dumps(asdict(d)), lambda raw: Draft(**json.loads(raw)))


class TestStateCodec:
    def test_round_trip(self) -> None:
        codec = _draft_codec()
        raw = codec.build(Draft("hello"))
        assert json.loads(raw) == {"title": "hello", "body": ""}
        assert codec.parse(raw) == Draft("hello")

    def test_opaque_payload_passes_through(self) -> None:
        codec = StateCodec(param.custom(dict, dict))
        assert codec.build({"from": "/home"}) == {"from": "/home"}
        assert codec.parse({"from": "/home"}) == {"from": "/home"}

    def test_none_stays_none(self) -> None:
        codec = _draft_codec()
        assert codec.build(None) is None
        assert codec.parse(None) is None

    def test_optional_fallback_when_absent(self) -> None:
        codec = StateCodec(param.custom(str, str).optional("fresh"))
        assert codec.parse(None) == "fresh"

    def test_decode_failure_named(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            _draft_codec().parse("not json")
        assert exc_info.value.parameter == "state"

    def test_encode_failure_named(self) -> None:
        with pytest.raises(BuildError) as exc_info:
            _draft_codec().build("not a draft")
        assert exc_info.value.parameter == "state"


class TestUnusedStateCodec:
    def test_parses_none(self) -> None:
        assert StateCodec().parse({"anything": 1}) is None

    def test_build_none(self) -> None:
        assert StateCodec().build(None) is None

    def test_rejects_values(self) -> None:
        with pytest.raises(BuildError, match="state codec"):
            StateCodec().build({"a": 1})
