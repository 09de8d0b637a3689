import pytest
from jsonschema import ValidationError, validate

from navigator.navigator_io import (
    load_schema, validate_request, validate_recommendation_set, error_to_string,
    InvalidRequest,
    REQUEST_SCHEMA, RESULT_SCHEMA,
)


def test_load_schemas():
    assert load_schema(REQUEST_SCHEMA)["title"] == "RecommendRequest"
    assert load_schema(RESULT_SCHEMA)["title"] == "RecommendationSet"


def test_load_schema_missing():
    with pytest.raises(FileNotFoundError):
        load_schema("schemas/nope.schema.json")


def test_validate_request_accepts_minimal():
    validate_request({"assets": []})
    validate_request({"assets": [{"token": "0xabc", "symbol": "USDC", "valueUSD": 1}], "risk_level": "balanced"})


@pytest.mark.parametrize("bad", [
    {},
    {"assets": "USDC"},
    {"assets": [], "risk_level": "yolo"},
    {"assets": [], "stablecoin_only": "yes"},
])
def test_validate_request_rejects(bad):
    with pytest.raises(InvalidRequest) as e:
        validate_request(bad)
    assert isinstance(e.value, ValueError)
    assert isinstance(e.value.__cause__, ValidationError)


def test_validate_recommendation_set_rejects_bad_status():
    bad = {"status": "weird", "message": "", "posture": "neutral", "recommendations": [],
           "summary": {}, "top_pools": []}
    with pytest.raises(ValidationError):
        validate_recommendation_set(bad)


def test_invalid_request_message_names_the_field():
    with pytest.raises(InvalidRequest) as e:
        validate_request({"assets": [], "chain_id": "base"})
    assert str(e.value).endswith("at $.chain_id")


def test_error_to_string_validationerror_path():
    schema = {"type": "object", "properties": {"x": {"type": "array", "items": {"type": "number"}}}}
    with pytest.raises(ValidationError) as e:
        validate({"x": [1, "two"]}, schema)
    assert error_to_string(e.value).endswith("at $.x[1]")
    assert error_to_string(ValueError("nope")) == "ValueError: nope"
