"""Per-request options threaded into the signers.

Example:
    from oss_lite.request import RequestConfig

    config = (
        RequestConfig()
        .with_expire(60)
        .with_cdn("https://cdn.example.com")
        .oss_download_speed_limit(30)
    )
"""

import copy

GET = "GET"
PUT = "PUT"
POST = "POST"
DELETE = "DELETE"
HEAD = "HEAD"

METHODS = (GET, PUT, POST, DELETE, HEAD)

DATE = "Date"

SOURCE_IP_PARAMETER = "x-oss-ac-source-ip"
SUBNET_MASK_PARAMETER = "x-oss-ac-subnet-mask"
FORWARDED_FOR_PARAMETER = "x-oss-ac-forwarded-for"
TRAFFIC_LIMIT_PARAMETER = "x-oss-traffic-limit"

MIN_SPEED_LIMIT_KB = 30


class RequestConfig:
    """Mutable option bag for one request.

    Keys of ``headers``, ``parameters`` and ``oss_headers`` keep the case
    they were inserted with; the signer lower-cases extension headers.
    """

    def __init__(self, method=GET, expire=60):
        self.cdn = None
        self.https = True
        self.method = method
        self.expire = expire
        self.headers = {}
        self.parameters = {}
        self.content_type = None
        self.content_md5 = None
        self.oss_headers = {}

    def __repr__(self):
        return "RequestConfig(method=%r, expire=%r, cdn=%r, parameters=%r)" % (
            self.method,
            self.expire,
            self.cdn,
            self.parameters,
        )

    def copy(self):
        return copy.deepcopy(self)

    @property
    def date(self):
        return self.headers.get(DATE)

    def with_method(self, method):
        method = method.upper()
        if method not in METHODS:
            raise ValueError("unsupported method: %s" % method)
        self.method = method
        return self

    def with_http(self):
        self.https = False
        return self

    def with_cdn(self, cdn):
        self.cdn = cdn
        return self

    def with_content_type(self, content_type):
        self.content_type = content_type
        return self

    def with_content_md5(self, content_md5):
        self.content_md5 = content_md5
        return self

    def with_expire(self, expire):
        self.expire = int(expire)
        return self

    def response_content_disposition(self, file_name):
        self.parameters["response-content-disposition"] = (
            "attachment;filename=%s" % file_name
        )
        return self

    def response_content_encoding(self, encoding):
        self.parameters["response-content-encoding"] = encoding
        return self

    def oss_signature_version2(self):
        self.parameters["x-oss-signature-version"] = "OSS2"
        return self

    def oss_download_speed_limit(self, speed):
        """Limit download speed, in KB/s. The service floor is 30 KB/s."""
        speed = int(speed)
        if speed < MIN_SPEED_LIMIT_KB:
            raise ValueError(
                "speed must be at least %dkb, got %d" % (MIN_SPEED_LIMIT_KB, speed)
            )
        self.parameters[TRAFFIC_LIMIT_PARAMETER] = str(speed * 1024 * 8)
        return self

    def oss_download_allow_ip(self, ip, mask):
        """Only serve the URL to clients inside ``ip``/``mask``."""
        self.parameters[SOURCE_IP_PARAMETER] = ip
        self.parameters[SUBNET_MASK_PARAMETER] = str(int(mask))
        return self

    def oss_ac_forward_allow(self):
        self.parameters[FORWARDED_FOR_PARAMETER] = "true"
        return self

    def oss_header_put(self, key, value):
        self.oss_headers[key] = value
        return self

    def parameters_put(self, key, value):
        self.parameters[key] = value
        return self
