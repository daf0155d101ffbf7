"""Signed upload policies for browser form uploads.

The browser POSTs the file straight to the bucket with the multipart fields
``OSSAccessKeyId, policy, signature, success_action_status, key, file``;
the secret never leaves the server.

Example:
    from oss_lite.policy import PolicyConfig, build_policy

    policy = build_policy(
        credentials,
        bucket_identity,
        PolicyConfig()
        .with_expire(60 * 60)
        .with_upload_dir("upload/mydir/")
        .with_content_type("text/plain")
        .with_max_upload_size(100 * 1024 * 1024),
    )
"""

import base64
import datetime as _dt
import json
import logging
import time

from .auth import sign
from .utils import b64encode_as_string, split_endpoint

logger = logging.getLogger(__name__)

SUCCESS_ACTION_STATUS = 200
DEFAULT_MAX_UPLOAD_SIZE = 100 * 1024 * 1024


class PolicyConfig:
    """What the browser is allowed to upload, and for how long."""

    def __init__(
        self,
        expire=60,
        upload_dir="",
        content_type="text/plain",
        max_upload_size=DEFAULT_MAX_UPLOAD_SIZE,
    ):
        self.expire = expire
        self.upload_dir = upload_dir
        self.content_type = content_type
        self.max_upload_size = max_upload_size

    def with_expire(self, expire):
        self.expire = int(expire)
        return self

    def with_upload_dir(self, upload_dir):
        self.upload_dir = upload_dir
        return self

    def with_content_type(self, content_type):
        self.content_type = content_type
        return self

    def with_max_upload_size(self, max_upload_size):
        self.max_upload_size = int(max_upload_size)
        return self


class PolicyResponse:
    """Signed policy, ready to be embedded in an upload form."""

    def __init__(self, access_id, host, policy, signature,
                 success_action_status=SUCCESS_ACTION_STATUS):
        self.access_id = access_id
        self.host = host
        self.policy = policy
        self.signature = signature
        self.success_action_status = success_action_status

    def __repr__(self):
        return "PolicyResponse(access_id=%r, host=%r, policy=%r, signature=%r)" % (
            self.access_id,
            self.host,
            self.policy,
            self.signature,
        )

    def __eq__(self, other):
        if not isinstance(other, PolicyResponse):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self):
        return {
            "access_id": self.access_id,
            "host": self.host,
            "policy": self.policy,
            "signature": self.signature,
            "success_action_status": self.success_action_status,
        }

    def form_fields(self, key):
        """Multipart fields for uploading ``key``; the caller adds ``file``."""
        return {
            "OSSAccessKeyId": self.access_id,
            "policy": self.policy,
            "signature": self.signature,
            "success_action_status": str(self.success_action_status),
            "key": key,
        }

    def decoded_policy(self):
        return json.loads(base64.b64decode(self.policy).decode("utf-8"))


def expiration_string(expire, now=None):
    """Return local time + ``expire`` as ``YYYY-MM-DDTHH:MM:SS.sssZ``.

    The value is local wall-clock time carrying a ``Z`` suffix, matching the
    existing provider contract.
    """
    if now is None:
        now = time.time()
    moment = _dt.datetime.fromtimestamp(now) + _dt.timedelta(seconds=expire)
    return "%s.%03dZ" % (
        moment.strftime("%Y-%m-%dT%H:%M:%S"),
        moment.microsecond // 1000,
    )


def policy_document(bucket, config, now=None):
    return {
        "expiration": expiration_string(config.expire, now),
        "conditions": [
            {"bucket": bucket},
            ["content-length-range", 1, config.max_upload_size],
            ["eq", "$success_action_status", str(SUCCESS_ACTION_STATUS)],
            ["starts-with", "$key", config.upload_dir],
            ["in", "$content-type", [config.content_type]],
        ],
    }


def sign_policy(encoded_policy, secret):
    """Return base64(HMAC-SHA1(secret, encoded_policy))."""
    return sign(encoded_policy, secret)


def build_policy(credentials, bucket_identity, config, now=None):
    """Build and sign a fresh upload policy for ``config``."""
    document = json.dumps(policy_document(bucket_identity.bucket, config, now))
    logger.debug("policy json: %s", document)
    encoded = b64encode_as_string(document.encode("utf-8"))
    _, host = split_endpoint(bucket_identity.endpoint)
    return PolicyResponse(
        access_id=credentials.key_id,
        host="https://%s.%s" % (bucket_identity.bucket, host),
        policy=encoded,
        signature=sign_policy(encoded, credentials.key_secret),
        success_action_status=SUCCESS_ACTION_STATUS,
    )
