"""Errors raised by oss_lite."""


class OssError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(OssError):
    """Required credential or bucket settings are missing."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__("Missing OSS config: set %s" % "/".join(self.missing))


class OssHTTPError(OssError):
    """The service answered with a non-2xx status."""

    def __init__(self, operation, status_code, body):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(
            "%s status: %d error: %s" % (operation, status_code, body)
        )


class InvalidHeaderValue(OssError):
    """A value cannot be sent as an HTTP header."""

    def __init__(self, name, value):
        self.name = name
        self.value = value
        super().__init__("invalid value for header %s: %r" % (name, value))


class SigningError(OssError):
    """A request reached the signer without the fields it needs."""
