import pytest

from oss_lite import OSS, BucketIdentity, Credentials

# 2015-10-21 07:28:00 UTC
FIXED_NOW = 1445412480
FIXED_DATE = "Wed, 21 Oct 2015 07:28:00 GMT"

TEST_KEY_ID = "44CF9590006BF252F707"
TEST_KEY_SECRET = "OtxrzxIsfpFjA7SwPzILwy8Bw21TLhquhboDYROV"


@pytest.fixture
def credentials():
    return Credentials(TEST_KEY_ID, TEST_KEY_SECRET)


@pytest.fixture
def bucket_identity():
    return BucketIdentity("oss-cn-hangzhou.aliyuncs.com", "examplebucket")


@pytest.fixture
def oss():
    return OSS(TEST_KEY_ID, TEST_KEY_SECRET, "oss-cn-hangzhou.aliyuncs.com", "examplebucket")
