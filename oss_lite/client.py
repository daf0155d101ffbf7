"""Object operations against one bucket, signed with OSS header auth.

Only ``requests`` is needed for the transport.

Example:
    from oss_lite import OSS, RequestConfig

    oss = OSS.from_env()
    oss.put_object("/path/to/file.txt", b"hello")
    content = oss.get_object("/path/to/file.txt")
    url = oss.sign_download_url("/path/to/file.txt", RequestConfig().with_expire(60))
"""

import base64
import hashlib
import logging

import requests

from . import auth, policy, url
from .config import BucketIdentity, Credentials, load_from_environment
from .exceptions import OssHTTPError
from .metadata import ObjectMetadata
from .request import DELETE, GET, HEAD, PUT, RequestConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


def content_md5(data):
    """Return the base64 MD5 digest used in the Content-MD5 header."""
    return base64.b64encode(hashlib.md5(data).digest()).decode("utf-8")


class OSS:
    """Signing and object access for one bucket.

    Credentials and bucket identity are fixed at construction and only read
    afterwards, so one instance may be shared between threads.
    """

    def __init__(self, key_id, key_secret, endpoint, bucket, timeout=DEFAULT_TIMEOUT):
        self.credentials = Credentials(key_id, key_secret)
        self.bucket_identity = BucketIdentity(endpoint, bucket)
        self.timeout = timeout

    @classmethod
    def from_env(cls, environ=None, dotenv_path=None, **kwargs):
        """Build from OSS_KEY_ID, OSS_KEY_SECRET, OSS_ENDPOINT and OSS_BUCKET."""
        credentials, bucket_identity = load_from_environment(environ, dotenv_path)
        return cls(
            credentials.key_id,
            credentials.key_secret,
            bucket_identity.endpoint,
            bucket_identity.bucket,
            **kwargs
        )

    def __repr__(self):
        return "OSS(key_id=%r, endpoint=%r, bucket=%r)" % (
            self.key_id,
            self.endpoint,
            self.bucket,
        )

    @property
    def key_id(self):
        return self.credentials.key_id

    @property
    def endpoint(self):
        return self.bucket_identity.endpoint

    @property
    def bucket(self):
        return self.bucket_identity.bucket

    def open_debug(self):
        """Log signing details of this package to stderr."""
        package_logger = logging.getLogger(__package__)
        if not package_logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(name)s:%(lineno)d %(levelname)s %(message)s")
            )
            package_logger.addHandler(handler)
        package_logger.setLevel(logging.DEBUG)

    # signing

    def canonical_string(self, key, config):
        return auth.canonical_string(config.method, key, self.bucket, config)

    def sign(self, key, config):
        return auth.signature(self.credentials, self.bucket, key, config)

    def build_request(self, key, config=None, now=None):
        return auth.build_request(
            self.credentials, self.bucket_identity, key, config or RequestConfig(), now
        )

    def sign_url(self, key, config=None, now=None):
        return url.sign_url(
            self.credentials, self.bucket_identity, key, config or RequestConfig(), now
        )

    def sign_download_url(self, key, config=None, now=None):
        return url.sign_download_url(
            self.credentials, self.bucket_identity, key, config or RequestConfig(), now
        )

    def sign_upload_url(self, key, config=None, now=None):
        return url.sign_upload_url(
            self.credentials, self.bucket_identity, key, config or RequestConfig(), now
        )

    def get_upload_object_policy(self, config=None, now=None):
        return policy.build_policy(
            self.credentials, self.bucket_identity, config or policy.PolicyConfig(), now
        )

    # transport

    def _send(self, method, operation, key, config, data=None):
        config = (config or RequestConfig()).copy()
        config.method = method
        request_url, headers = self.build_request(key, config)
        logger.debug("%s url: %s headers: %s", operation, request_url, headers)
        kwargs = {"headers": headers, "timeout": self.timeout}
        if data is not None:
            kwargs["data"] = data
        resp = getattr(requests, method.lower())(request_url, **kwargs)
        if not 200 <= resp.status_code < 300:
            logger.debug("%s status: %d error: %s", operation, resp.status_code, resp.text)
            raise OssHTTPError(operation, resp.status_code, resp.text)
        return resp

    def get_object(self, key, config=None):
        """Download object bytes via GET.

        Raises OssHTTPError on non-2xx responses.
        """
        return self._send(GET, "get object", key, config).content

    def put_object(self, key, data, config=None):
        """Upload bytes via PUT, filling Content-MD5 from ``data`` if unset."""
        config = (config or RequestConfig()).copy()
        if not config.content_md5:
            config.content_md5 = content_md5(data)
        self._send(PUT, "put object", key, config, data=data)

    def put_object_from_file(self, key, file_path, config=None):
        """Upload a local file via PUT. OSError propagates."""
        with open(file_path, "rb") as f:
            data = f.read()
        self.put_object(key, data, config)

    def delete_object(self, key, config=None):
        self._send(DELETE, "delete object", key, config)

    def get_object_metadata(self, key, config=None):
        """HEAD the object and parse its headers."""
        resp = self._send(HEAD, "get object metadata", key, config)
        return ObjectMetadata(resp.headers)
