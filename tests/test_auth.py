import pytest

from oss_lite import auth
from oss_lite.config import BucketIdentity
from oss_lite.exceptions import InvalidHeaderValue, SigningError
from oss_lite.request import DATE, PUT, RequestConfig
from tests.conftest import FIXED_DATE, FIXED_NOW, TEST_KEY_ID, TEST_KEY_SECRET


def _dated(config=None, date=FIXED_DATE):
    config = config or RequestConfig()
    config.headers[DATE] = date
    return config


class TestCanonicalResource:
    def test_bucket_and_key(self):
        assert auth.canonical_resource("examplebucket", "/a/b.txt") == "/examplebucket/a/b.txt"

    def test_empty_bucket_signs_root(self):
        assert auth.canonical_resource("", "/a/b.txt") == "/"


class TestCanonicalOssHeaders:
    def test_no_headers(self):
        assert auth.canonical_oss_headers({}) == ""

    def test_single_header_gets_trailing_newline(self):
        assert auth.canonical_oss_headers({"X-OSS-Meta-A": "1"}) == "x-oss-meta-a:1\n"

    def test_several_headers_have_no_trailing_newline(self):
        headers = {"x-oss-meta-b": "2", "X-Oss-Meta-A": "1", "x-oss-acl": "private"}
        assert auth.canonical_oss_headers(headers) == (
            "x-oss-acl:private\nx-oss-meta-a:1\nx-oss-meta-b:2"
        )

    def test_sorted_regardless_of_insertion_order(self):
        first = auth.canonical_oss_headers({"x-oss-b": "2", "x-oss-a": "1"})
        second = auth.canonical_oss_headers({"x-oss-a": "1", "x-oss-b": "2"})
        assert first == second == "x-oss-a:1\nx-oss-b:2"

    def test_values_stripped(self):
        assert auth.canonical_oss_headers({"x-oss-meta-a": "  1 "}) == "x-oss-meta-a:1\n"

    def test_non_provider_keys_ignored(self):
        headers = {"Cache-Control": "no-cache", "X-OSS-Meta-A": "1"}
        assert auth.canonical_oss_headers(headers) == "x-oss-meta-a:1\n"


class TestCanonicalString:
    def test_plain_get(self):
        config = _dated()
        assert auth.canonical_string("GET", "/hello.txt", "examplebucket", config) == (
            "GET\n\n\n%s\n/examplebucket/hello.txt" % FIXED_DATE
        )

    def test_content_fields(self):
        config = _dated(
            RequestConfig().with_content_type("text/plain").with_content_md5("eB5eJF1ptWaXm4bijSPyxw==")
        )
        assert auth.canonical_string(PUT, "/hello.txt", "examplebucket", config) == (
            "PUT\neB5eJF1ptWaXm4bijSPyxw==\ntext/plain\n%s\n/examplebucket/hello.txt" % FIXED_DATE
        )

    def test_one_extension_header(self):
        config = _dated(RequestConfig().oss_header_put("X-OSS-Meta-Author", "alice"))
        assert auth.canonical_string("GET", "/k", "b", config) == (
            "GET\n\n\n%s\nx-oss-meta-author:alice\n/b/k" % FIXED_DATE
        )

    def test_two_extension_headers_run_into_resource(self):
        config = _dated(
            RequestConfig().oss_header_put("x-oss-meta-b", "2").oss_header_put("x-oss-meta-a", "1")
        )
        assert auth.canonical_string("GET", "/k", "b", config) == (
            "GET\n\n\n%s\nx-oss-meta-a:1\nx-oss-meta-b:2/b/k" % FIXED_DATE
        )

    def test_query_sorted_and_not_encoded(self):
        config = _dated(
            RequestConfig()
            .parameters_put("response-content-disposition", "attachment;filename=a b.txt")
            .parameters_put("acl", "")
            .parameters_put("x-oss-traffic-limit", "245760")
        )
        assert auth.canonical_string("GET", "/k", "b", config).endswith(
            "/b/k?acl=&response-content-disposition=attachment;filename=a b.txt"
            "&x-oss-traffic-limit=245760"
        )

    def test_missing_date_is_fatal(self):
        with pytest.raises(SigningError):
            auth.canonical_string("GET", "/k", "b", RequestConfig())


class TestSign:
    def test_known_vector(self):
        string_to_sign = "GET\n\n\n%s\n/examplebucket/hello.txt" % FIXED_DATE
        assert auth.sign(string_to_sign, TEST_KEY_SECRET) == "v4AEJ0ltCLDvpQh3+0YApQ2JRDI="

    def test_deterministic(self):
        assert auth.sign("abc", "secret") == auth.sign("abc", "secret")
        assert auth.sign("abc", "secret") != auth.sign("abd", "secret")

    def test_string_to_sign_logged_at_debug_only(self, caplog):
        with caplog.at_level("INFO", logger="oss_lite"):
            auth.sign("hidden", "secret")
        assert "hidden" not in caplog.text
        with caplog.at_level("DEBUG", logger="oss_lite"):
            auth.sign("visible", "secret")
        assert "visible" in caplog.text
        assert "secret" not in caplog.text


class TestAuthorization:
    def test_matches_hand_computed_reference(self, credentials):
        config = _dated()
        assert auth.authorization(credentials, "examplebucket", "/hello.txt", config) == (
            "OSS %s:v4AEJ0ltCLDvpQh3+0YApQ2JRDI=" % TEST_KEY_ID
        )

    def test_extension_header_changes_signature(self, credentials):
        config = _dated(RequestConfig().oss_header_put("x-oss-meta-a", "1"))
        assert auth.authorization(credentials, "examplebucket", "/hello.txt", config) == (
            "OSS %s:q5vdORrcAXJ6RIhMHK+lNbVWUag=" % TEST_KEY_ID
        )


class TestFormatHost:
    def test_bare_endpoint_uses_https(self, bucket_identity):
        assert auth.format_host(bucket_identity, "/a.txt", RequestConfig()) == (
            "https://examplebucket.oss-cn-hangzhou.aliyuncs.com/a.txt"
        )

    def test_with_http(self, bucket_identity):
        assert auth.format_host(bucket_identity, "a.txt", RequestConfig().with_http()) == (
            "http://examplebucket.oss-cn-hangzhou.aliyuncs.com/a.txt"
        )

    def test_endpoint_scheme_wins(self):
        identity = BucketIdentity("http://oss-cn-x.com", "b")
        assert auth.format_host(identity, "/a.txt", RequestConfig()) == "http://b.oss-cn-x.com/a.txt"

    def test_cdn_ignores_bucket(self, bucket_identity):
        config = RequestConfig().with_cdn("https://cdn.example.com")
        assert auth.format_host(bucket_identity, "/a.txt", config) == "https://cdn.example.com/a.txt"


class TestBuildRequest:
    def test_headers_and_url(self, credentials, bucket_identity):
        url, headers = auth.build_request(
            credentials, bucket_identity, "hello.txt", RequestConfig(), now=FIXED_NOW
        )
        assert url == "https://examplebucket.oss-cn-hangzhou.aliyuncs.com/hello.txt"
        assert headers == {
            "Date": FIXED_DATE,
            "Authorization": "OSS %s:v4AEJ0ltCLDvpQh3+0YApQ2JRDI=" % TEST_KEY_ID,
        }

    def test_deterministic_with_fixed_clock(self, credentials, bucket_identity):
        config = RequestConfig().oss_header_put("x-oss-meta-a", "1").parameters_put("acl", "")
        first = auth.build_request(credentials, bucket_identity, "/k", config, now=FIXED_NOW)
        second = auth.build_request(credentials, bucket_identity, "/k", config, now=FIXED_NOW)
        assert first == second

    def test_caller_config_untouched(self, credentials, bucket_identity):
        config = RequestConfig()
        auth.build_request(credentials, bucket_identity, "/k", config, now=FIXED_NOW)
        assert config.date is None

    def test_cdn_host_keeps_bucket_in_signature(self, credentials, bucket_identity):
        config = RequestConfig().with_cdn("https://cdn.example.com")
        url, headers = auth.build_request(
            credentials, bucket_identity, "/hello.txt", config, now=FIXED_NOW
        )
        assert url == "https://cdn.example.com/hello.txt"
        assert headers["Authorization"] == "OSS %s:v4AEJ0ltCLDvpQh3+0YApQ2JRDI=" % TEST_KEY_ID

    def test_content_and_extension_headers_sent(self, credentials, bucket_identity):
        config = (
            RequestConfig()
            .with_content_type("text/plain")
            .with_content_md5("md5==")
            .oss_header_put("x-oss-meta-a", "1")
        )
        _, headers = auth.build_request(credentials, bucket_identity, "/k", config, now=FIXED_NOW)
        assert headers["Content-Type"] == "text/plain"
        assert headers["Content-MD5"] == "md5=="
        assert headers["x-oss-meta-a"] == "1"

    def test_key_and_query_encoded_in_url(self, credentials, bucket_identity):
        config = RequestConfig().response_content_disposition("a b.txt")
        url, _ = auth.build_request(
            credentials, bucket_identity, "/dir/a b#.txt", config, now=FIXED_NOW
        )
        assert url == (
            "https://examplebucket.oss-cn-hangzhou.aliyuncs.com/dir/a%20b%23.txt"
            "?response-content-disposition=attachment%3Bfilename%3Da%20b.txt"
        )

    @pytest.mark.parametrize("value", ["line\nbreak", "café中", "nul\x00"])
    def test_invalid_header_value(self, credentials, bucket_identity, value):
        config = RequestConfig().oss_header_put("x-oss-meta-a", value)
        with pytest.raises(InvalidHeaderValue) as excinfo:
            auth.build_request(credentials, bucket_identity, "/k", config, now=FIXED_NOW)
        assert excinfo.value.name == "x-oss-meta-a"

    @pytest.mark.parametrize("value", [" v", "v ", "\tv\t"])
    def test_padded_extension_value_sent_as_signed(self, credentials, bucket_identity, value):
        config = RequestConfig().oss_header_put("x-oss-meta-a", value)
        _, headers = auth.build_request(credentials, bucket_identity, "/k", config, now=FIXED_NOW)
        assert headers["x-oss-meta-a"] == "v"

        expected = _dated(RequestConfig().oss_header_put("x-oss-meta-a", "v"))
        assert headers["Authorization"] == auth.authorization(
            credentials, "examplebucket", "/k", expected
        )

    def test_non_provider_keys_not_sent(self, credentials, bucket_identity):
        config = RequestConfig().oss_header_put("Cache-Control", "no-cache")
        _, headers = auth.build_request(credentials, bucket_identity, "hello.txt", config, now=FIXED_NOW)
        assert "Cache-Control" not in headers
        assert headers["Authorization"] == "OSS %s:v4AEJ0ltCLDvpQh3+0YApQ2JRDI=" % TEST_KEY_ID
