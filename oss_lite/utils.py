"""Small helpers shared by the signers."""

import base64
import email.utils
from urllib.parse import quote


def format_key(key):
    """Return ``key`` with exactly the leading slash the signer expects."""
    if key.startswith("/"):
        return key
    return "/" + key


def key_urlencode(key):
    """Percent-encode each ``/``-separated segment of an object key."""
    return "/".join(quote(segment, safe="") for segment in key.split("/"))


def urlencode_value(value):
    return quote(str(value), safe="")


def split_endpoint(endpoint):
    """Split ``https://host`` into ``("https", "host")``; bare hosts get ``None``."""
    for scheme in ("https", "http"):
        prefix = scheme + "://"
        if endpoint.startswith(prefix):
            return scheme, endpoint[len(prefix):]
    return None, endpoint


def http_date(timestamp=None):
    """Return ``timestamp`` (default: now) as an RFC 1123 GMT date."""
    return email.utils.formatdate(timestamp, usegmt=True)


def b64encode_as_string(data):
    return base64.b64encode(data).decode("utf-8")
