"""Credential and bucket settings, loaded once at startup."""

import logging
import os
from collections import namedtuple

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_KEY_ID = "OSS_KEY_ID"
ENV_KEY_SECRET = "OSS_KEY_SECRET"
ENV_ENDPOINT = "OSS_ENDPOINT"
ENV_BUCKET = "OSS_BUCKET"

REQUIRED_VARIABLES = (ENV_KEY_ID, ENV_KEY_SECRET, ENV_ENDPOINT, ENV_BUCKET)


class Credentials(namedtuple("Credentials", ["key_id", "key_secret"])):
    """Account identity. The secret never appears in repr or logs."""

    __slots__ = ()

    def __repr__(self):
        return "Credentials(key_id=%r, key_secret='******')" % self.key_id


BucketIdentity = namedtuple("BucketIdentity", ["endpoint", "bucket"])


def load_from_environment(environ=None, dotenv_path=None):
    """Return ``(Credentials, BucketIdentity)`` read from the environment.

    When ``environ`` is not given, a ``.env`` file (``dotenv_path`` or the one
    found from the working directory) is loaded first. Variables already set
    in the process environment win over the file.

    Raises ConfigError listing every missing variable.
    """
    if environ is None:
        path = dotenv_path or find_dotenv(usecwd=True)
        if path and load_dotenv(path):
            logger.debug("Loaded .env from %s", path)
        environ = os.environ

    values = {}
    missing = []
    for name in REQUIRED_VARIABLES:
        value = environ.get(name, "").strip()
        if not value:
            missing.append(name)
        values[name] = value
    if missing:
        raise ConfigError(missing)

    logger.debug(
        "Init OSS config: key_id: %s, key_secret: ******, endpoint: %s, bucket: %s",
        values[ENV_KEY_ID],
        values[ENV_ENDPOINT],
        values[ENV_BUCKET],
    )
    return (
        Credentials(values[ENV_KEY_ID], values[ENV_KEY_SECRET]),
        BucketIdentity(values[ENV_ENDPOINT], values[ENV_BUCKET]),
    )
