"""Header-based request signing for OSS.

The string to sign is::

    VERB
    Content-MD5
    Content-Type
    Date
    CanonicalizedOSSHeaders + CanonicalizedResource

and the signature is ``base64(HMAC-SHA1(secret, string_to_sign))``.

Example:
    from oss_lite.auth import build_request
    from oss_lite.config import BucketIdentity, Credentials
    from oss_lite.request import RequestConfig

    url, headers = build_request(
        Credentials("AKID", "SECRET"),
        BucketIdentity("oss-cn-hangzhou.aliyuncs.com", "my-bucket"),
        "/path/to/file.txt",
        RequestConfig(),
    )
"""

import hashlib
import hmac
import logging
import re

from .exceptions import InvalidHeaderValue, SigningError
from .request import DATE
from .utils import (
    b64encode_as_string,
    format_key,
    http_date,
    key_urlencode,
    split_endpoint,
    urlencode_value,
)

logger = logging.getLogger(__name__)

OSS_HEADER_PREFIX = "x-oss-"
AUTHORIZATION = "Authorization"

_INVALID_HEADER_CHARS = re.compile(r"[\r\n\x00]")


def canonical_resource(bucket, key):
    """Return ``/bucket/key``; an empty bucket signs as ``/``."""
    if not bucket:
        return "/"
    return "/%s%s" % (bucket, key)


def extension_headers(oss_headers):
    """Return the ``x-oss-`` headers with their values stripped.

    These are exactly the headers that are signed and sent; other keys are
    dropped.
    """
    return {
        name: value.strip() if isinstance(value, str) else value
        for name, value in oss_headers.items()
        if name.lower().startswith(OSS_HEADER_PREFIX)
    }


def canonical_oss_headers(oss_headers):
    """Build the CanonicalizedOSSHeaders block.

    A single header is followed by a newline; zero or several headers are
    not. The service verifies against this exact layout.
    """
    items = sorted(
        (name.lower(), str(value)) for name, value in extension_headers(oss_headers).items()
    )
    canonical = "\n".join("%s:%s" % item for item in items)
    if len(items) == 1:
        canonical += "\n"
    return canonical


def canonical_query(parameters):
    if not parameters:
        return ""
    return "?" + "&".join(
        "%s=%s" % (k, parameters[k]) for k in sorted(parameters)
    )


def canonical_string(verb, key, bucket, config):
    """Return the exact string that gets signed for ``config``.

    ``config`` must carry a ``Date`` header; every caller sets one first.
    """
    date = config.date
    if date is None:
        raise SigningError("Date header is required")
    return "%s\n%s\n%s\n%s\n%s%s%s" % (
        verb,
        config.content_md5 or "",
        config.content_type or "",
        date,
        canonical_oss_headers(config.oss_headers),
        canonical_resource(bucket, key),
        canonical_query(config.parameters),
    )


def sign(string_to_sign, secret):
    """Return base64(HMAC-SHA1(secret, string_to_sign))."""
    logger.debug("Make signature: string to be signed = %r", string_to_sign)
    h = hmac.new(
        secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha1,
    )
    return b64encode_as_string(h.digest())


def signature(credentials, bucket, key, config):
    return sign(
        canonical_string(config.method, key, bucket, config),
        credentials.key_secret,
    )


def authorization(credentials, bucket, key, config):
    """Return the ``OSS <id>:<signature>`` Authorization header value."""
    return "OSS %s:%s" % (
        credentials.key_id,
        signature(credentials, bucket, key, config),
    )


def format_host(bucket_identity, key, config):
    """Return the request URL for ``key`` (CDN first, then bucket host)."""
    key = format_key(key)
    if config.cdn:
        return "%s%s" % (config.cdn, key)
    scheme, host = split_endpoint(bucket_identity.endpoint)
    if scheme is None:
        scheme = "https" if config.https else "http"
    return "%s://%s.%s%s" % (scheme, bucket_identity.bucket, host, key)


def check_header_value(name, value):
    """Raise InvalidHeaderValue unless ``value`` is a legal header value."""
    if not isinstance(value, str) or _INVALID_HEADER_CHARS.search(value):
        raise InvalidHeaderValue(name, value)
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        raise InvalidHeaderValue(name, value) from None


def build_request(credentials, bucket_identity, key, config, now=None):
    """Sign a direct API call.

    Returns ``(url, headers)`` where headers carry ``Date``,
    ``Authorization``, the extension headers and, when configured,
    ``Content-Type`` and ``Content-MD5``. The caller's config is untouched.
    """
    config = config.copy()
    key = format_key(key)
    date = http_date(now)
    config.headers[DATE] = date

    headers = {DATE: date}
    if config.content_type:
        headers["Content-Type"] = config.content_type
    if config.content_md5:
        headers["Content-MD5"] = config.content_md5
    headers.update(extension_headers(config.oss_headers))
    headers[AUTHORIZATION] = authorization(
        credentials, bucket_identity.bucket, key, config
    )
    for name, value in headers.items():
        check_header_value(name, value)

    url = format_host(bucket_identity, key_urlencode(key), config)
    if config.parameters:
        url += "?" + "&".join(
            "%s=%s" % (k, urlencode_value(config.parameters[k]))
            for k in sorted(config.parameters)
        )
    return url, headers
