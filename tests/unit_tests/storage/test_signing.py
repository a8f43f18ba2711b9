import base64
import hashlib
import hmac
from urllib.parse import parse_qs, urlsplit

from archivist.storage import signing
from tests.consts import TEST_ACCESS_KEY_ID, TEST_SECRET_ACCESS_KEY


def test_urlencode_matches_form_encoding():
    assert signing.urlencode("bucket/files/a b~c.jpg") == "bucket%2Ffiles%2Fa+b%7Ec.jpg"
    assert signing.urlencode("plain-name_1.txt") == "plain-name_1.txt"
    assert signing.urlencode("a+b=c") == "a%2Bb%3Dc"


def test_expiry_timestamp_truncates_now():
    assert signing.expiry_timestamp(1700000000.9, 10) == 1700000600
    assert signing.expiry_timestamp(1700000000, 1) == 1700000060


def test_string_to_sign_layout():
    assert signing.string_to_sign(1700000600, "bucket%2Fkey.jpg") == "GET\n\n\n1700000600\n/bucket%2Fkey.jpg"


def test_compute_signature_is_base64_hmac_sha1():
    canonical = "GET\n\n\n1700000600\n/bucket%2Fkey.jpg"
    expected = base64.b64encode(
        hmac.new(TEST_SECRET_ACCESS_KEY.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha1).digest()
    ).decode("ascii")

    assert signing.compute_signature(TEST_SECRET_ACCESS_KEY, canonical) == expected
    # Same inputs, same signature.
    assert signing.compute_signature(TEST_SECRET_ACCESS_KEY, canonical) == expected


def test_sign_url_appends_query_in_order():
    url = signing.sign_url(
        "https://s3.amazonaws.com/bucket%2Fkey.jpg",
        "bucket%2Fkey.jpg",
        TEST_ACCESS_KEY_ID,
        TEST_SECRET_ACCESS_KEY,
        1700000600,
    )

    parts = urlsplit(url)
    assert parts.path == "/bucket%2Fkey.jpg"
    assert [pair.split("=")[0] for pair in parts.query.split("&")] == ["AWSAccessKeyId", "Expires", "Signature"]

    query = parse_qs(parts.query)
    assert query["AWSAccessKeyId"] == [TEST_ACCESS_KEY_ID]
    assert query["Expires"] == ["1700000600"]
    assert query["Signature"] == [
        signing.compute_signature(TEST_SECRET_ACCESS_KEY, "GET\n\n\n1700000600\n/bucket%2Fkey.jpg")
    ]
