"""Object metadata parsed from HEAD/GET response headers."""

import email.utils
import logging

logger = logging.getLogger(__name__)

USER_METADATA_PREFIX = "x-oss-meta-"


def _parse_http_date(value, name):
    if value is None:
        logger.debug("Can't find <%s>.", name)
        return None
    try:
        return email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError) as e:
        logger.debug("%s parsed failed. %s", name, e)
        return None


class ObjectMetadata:
    """Standard and user metadata of one object.

    Header names are lower-cased. ``x-oss-meta-*`` headers go to
    ``user_metadata`` without their prefix, and the ETag loses its quotes.
    """

    def __init__(self, headers=None):
        self.metadata = {}
        self.user_metadata = {}
        for key, value in (headers or {}).items():
            key = key.lower()
            if key.startswith(USER_METADATA_PREFIX):
                self.user_metadata[key[len(USER_METADATA_PREFIX):]] = value
            elif key == "etag":
                self.metadata["etag"] = value.strip('"')
            else:
                self.metadata[key] = value

    def __repr__(self):
        return "ObjectMetadata(metadata=%r, user_metadata=%r)" % (
            self.metadata,
            self.user_metadata,
        )

    @property
    def last_modified(self):
        return _parse_http_date(self.metadata.get("last-modified"), "Last-Modified")

    @property
    def expiration_time(self):
        return _parse_http_date(
            self.metadata.get("x-oss-expiration"), "x-oss-expiration"
        )

    def set_expiration_time(self, moment):
        self.metadata["x-oss-expiration"] = email.utils.format_datetime(
            moment, usegmt=True
        )

    @property
    def content_md5(self):
        return self.metadata.get("content-md5")

    def set_content_md5(self, md5):
        self.metadata["content-md5"] = md5

    @property
    def etag(self):
        return self.metadata.get("etag")

    def set_etag(self, etag):
        self.metadata["etag"] = etag

    @property
    def content_length(self):
        value = self.metadata.get("content-length")
        return int(value) if value is not None else None

    def set_content_length(self, length):
        self.metadata["content-length"] = str(length)

    @property
    def content_type(self):
        return self.metadata.get("content-type")

    def set_content_type(self, content_type):
        if not content_type:
            return
        self.metadata["content-type"] = content_type

    @property
    def content_encoding(self):
        return self.metadata.get("content-encoding")

    def set_content_encoding(self, content_encoding):
        self.metadata["content-encoding"] = content_encoding

    @property
    def content_disposition(self):
        return self.metadata.get("content-disposition")

    def set_content_disposition(self, content_disposition):
        self.metadata["content-disposition"] = content_disposition

    @property
    def cache_control(self):
        return self.metadata.get("cache-control")

    def set_cache_control(self, cache_control):
        self.metadata["cache-control"] = cache_control

    @property
    def crc64(self):
        return self.metadata.get("x-oss-hash-crc64ecma")

    def set_crc64(self, crc64):
        self.metadata["x-oss-hash-crc64ecma"] = crc64

    @property
    def server_side_encryption(self):
        return self.metadata.get("x-oss-server-side-encryption")

    def set_server_side_encryption(self, server_side_encryption):
        self.metadata["x-oss-server-side-encryption"] = server_side_encryption

    @property
    def object_type(self):
        return self.metadata.get("x-oss-object-type")
