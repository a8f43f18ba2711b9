import json

import pytest
from pydantic import ValidationError

from archivist.exceptions import MalformedJobError
from archivist.jobs.descriptor import JobDescriptor, decode


def test_decode_valid_message():
    descriptor = decode('{"className":"ExportJob","options":{"format":"csv"}}')

    assert descriptor.class_name == "ExportJob"
    assert descriptor.options == {"format": "csv"}
    assert descriptor.created_by is None


def test_decode_with_creator():
    descriptor = decode('{"className":"ExportJob","options":{},"createdBy":42}')
    assert descriptor.created_by == 42


def test_decode_accepts_bytes():
    assert decode(b'{"className":"ExportJob","options":{}}').class_name == "ExportJob"


@pytest.mark.parametrize("raw", [
    "",
    "{}",
    "[]",
    "null",
    "not json",
    '{"className": "ExportJob"',
    '{"options": {}}',
    '{"className": "ExportJob"}',
    '["ExportJob", {}]',
    '{"className": "ExportJob", "options": ["csv"]}',
    '{"className": "ExportJob", "options": {}, "createdBy": "someone"}',
])
def test_decode_rejects_malformed_messages(raw):
    with pytest.raises(MalformedJobError):
        decode(raw)


def test_decode_allows_null_options():
    assert decode('{"className":"ExportJob","options":null}').options is None


def test_descriptor_is_immutable():
    descriptor = decode('{"className":"ExportJob","options":{}}')
    with pytest.raises(ValidationError):
        descriptor.class_name = "Other"


def test_to_message_round_trips_wire_names():
    descriptor = JobDescriptor(class_name="ExportJob", options={"format": "csv"}, created_by=7)

    assert json.loads(descriptor.to_message()) == {
        "className": "ExportJob",
        "options": {"format": "csv"},
        "createdBy": 7,
    }
    assert decode(descriptor.to_message()) == descriptor


def test_to_message_omits_missing_creator():
    message = JobDescriptor(class_name="ExportJob", options={}).to_message()
    assert "createdBy" not in json.loads(message)


def test_decode_accepts_non_string_class_name():
    assert decode('{"className": 12, "options": {}}').class_name == "12"
