"""Pre-signed URLs: time-limited access without sending credentials.

The signer is the header signer with the expiry timestamp in place of
``Date``; the signature then travels in the query string.

Example:
    from oss_lite.request import RequestConfig
    from oss_lite.url import sign_download_url

    url = sign_download_url(
        credentials,
        bucket_identity,
        "/ipas/cn/app.ipa",
        RequestConfig().with_expire(60).oss_download_speed_limit(30),
    )
"""

import logging
import time

from .auth import signature
from .request import DATE, PUT, SOURCE_IP_PARAMETER
from .utils import format_key, key_urlencode, split_endpoint, urlencode_value

logger = logging.getLogger(__name__)

# signed but never placed on the URL
_UNLISTED_PARAMETERS = frozenset([SOURCE_IP_PARAMETER])


def expiration_time(expire, now=None):
    if now is None:
        now = time.time()
    return int(now) + int(expire)


def sign_url(credentials, bucket_identity, key, config, now=None):
    """Return ``{encoded_key}?{query}`` for ``key``.

    The query holds ``Expires``, ``OSSAccessKeyId``, ``Signature`` and every
    caller parameter except the source-IP restriction, sorted by name.
    """
    config = config.copy()
    key = format_key(key)
    expires = str(expiration_time(config.expire, now))
    config.headers[DATE] = expires

    sig = signature(credentials, bucket_identity.bucket, key, config)
    logger.debug("signature: %s", sig)

    query = {
        "Expires": expires,
        "OSSAccessKeyId": credentials.key_id,
        "Signature": urlencode_value(sig),
    }
    for name, value in config.parameters.items():
        query[name] = urlencode_value(value)
    for name in _UNLISTED_PARAMETERS:
        query.pop(name, None)

    return "%s?%s" % (
        key_urlencode(key),
        "&".join("%s=%s" % (k, query[k]) for k in sorted(query)),
    )


def _with_host(bucket_identity, config, signed):
    if config.cdn:
        return "%s%s" % (config.cdn, signed)
    scheme, host = split_endpoint(bucket_identity.endpoint)
    url = "%s.%s%s" % (bucket_identity.bucket, host, signed)
    if scheme:
        url = "%s://%s" % (scheme, url)
    return url


def sign_download_url(credentials, bucket_identity, key, config, now=None):
    """Return a pre-signed URL using the configured method."""
    signed = sign_url(credentials, bucket_identity, key, config, now)
    url = _with_host(bucket_identity, config, signed)
    logger.debug("download_url: %s", url)
    return url


def sign_upload_url(credentials, bucket_identity, key, config, now=None):
    """Return a pre-signed PUT URL, whatever method ``config`` holds."""
    config = config.copy()
    config.method = PUT
    signed = sign_url(credentials, bucket_identity, key, config, now)
    url = _with_host(bucket_identity, config, signed)
    logger.debug("upload_url: %s", url)
    return url
