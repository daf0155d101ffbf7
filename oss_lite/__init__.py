"""Minimal Aliyun OSS client: request signing, pre-signed URLs and upload policies."""

from .client import OSS
from .config import BucketIdentity, Credentials, load_from_environment
from .exceptions import (
    ConfigError,
    InvalidHeaderValue,
    OssError,
    OssHTTPError,
    SigningError,
)
from .metadata import ObjectMetadata
from .policy import PolicyConfig, PolicyResponse
from .request import RequestConfig

__version__ = "0.1.0"

__all__ = [
    "OSS",
    "BucketIdentity",
    "Credentials",
    "load_from_environment",
    "ConfigError",
    "InvalidHeaderValue",
    "OssError",
    "OssHTTPError",
    "SigningError",
    "ObjectMetadata",
    "PolicyConfig",
    "PolicyResponse",
    "RequestConfig",
]
