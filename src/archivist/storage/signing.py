"""
Query-string request authentication for S3 URLs.

Implements the legacy (signature version 2) query-string scheme:
http://docs.aws.amazon.com/AmazonS3/latest/dev/RESTAuthentication.html#RESTAuthenticationQueryStringAuth

URLs produced here must stay byte-identical to those issued for existing
stored content, so encoding follows form-style percent encoding where
``/`` becomes ``%2F``, space becomes ``+`` and ``~`` is escaped.
"""

import base64
import hashlib
import hmac
from urllib.parse import quote_plus


def urlencode(value) -> str:
    """Form-encode a single value, escaping everything but ``A-Za-z0-9-_.``."""
    return quote_plus(str(value), safe="").replace("~", "%7E")


def expiry_timestamp(now: float, expiration_minutes: int) -> int:
    """Epoch seconds at which a URL signed at *now* stops being valid."""
    return int(now) + expiration_minutes * 60


def string_to_sign(expires: int, resource: str) -> str:
    """Canonical string for a GET with no Content-MD5 and no Content-Type."""
    return f"GET\n\n\n{expires}\n/{resource}"


def compute_signature(secret_key: str, canonical: str) -> str:
    """Base64-encoded HMAC-SHA1 of *canonical* keyed with *secret_key*."""
    digest = hmac.new(
        secret_key.encode("utf-8"),
        canonical.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def signed_query(access_key_id: str, expires: int, signature: str) -> str:
    params = (
        ("AWSAccessKeyId", access_key_id),
        ("Expires", expires),
        ("Signature", signature),
    )
    return "&".join(f"{name}={urlencode(value)}" for name, value in params)


def sign_url(base_url: str, resource: str, access_key_id: str, secret_key: str, expires: int) -> str:
    """Append authentication parameters to *base_url*.

    :param base_url: ``{endpoint}/{resource}``.
    :param resource: The already url-encoded object identifier.
    :param expires: Epoch seconds the signature is valid until.
    """
    signature = compute_signature(secret_key, string_to_sign(expires, resource))
    return f"{base_url}?{signed_query(access_key_id, expires, signature)}"
