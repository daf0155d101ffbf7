"""Command line access to one bucket.

Credentials come from OSS_KEY_ID, OSS_KEY_SECRET, OSS_ENDPOINT and
OSS_BUCKET, or from a ``.env`` file in the working directory.

    oss-lite put /hello.txt ./hello.txt
    oss-lite get /hello.txt -o hello.txt
    oss-lite sign-url /hello.txt --expire 300
    oss-lite policy --upload-dir upload/ --content-type text/plain
"""

import argparse
import json
import sys

from .client import OSS
from .exceptions import ConfigError, OssHTTPError
from .policy import DEFAULT_MAX_UPLOAD_SIZE, PolicyConfig
from .request import RequestConfig

EXIT_HTTP_ERROR = 1
EXIT_CONFIG_ERROR = 2


def cmd_get(oss, args):
    content = oss.get_object(args.key)
    if args.output:
        with open(args.output, "wb") as f:
            f.write(content)
    else:
        sys.stdout.buffer.write(content)
        sys.stdout.flush()
    return 0


def cmd_put(oss, args):
    config = RequestConfig()
    if args.content_type:
        config.with_content_type(args.content_type)
    oss.put_object_from_file(args.key, args.file, config)
    print("Uploaded: %s" % args.key)
    return 0


def cmd_delete(oss, args):
    oss.delete_object(args.key)
    print("Deleted: %s" % args.key)
    return 0


def cmd_head(oss, args):
    metadata = oss.get_object_metadata(args.key)
    print(json.dumps(
        {"metadata": metadata.metadata, "user_metadata": metadata.user_metadata},
        indent=2,
        sort_keys=True,
    ))
    return 0


def cmd_sign_url(oss, args):
    config = RequestConfig().with_expire(args.expire)
    if args.cdn:
        config.with_cdn(args.cdn)
    if args.upload:
        print(oss.sign_upload_url(args.key, config))
    else:
        print(oss.sign_download_url(args.key, config))
    return 0


def cmd_policy(oss, args):
    config = (
        PolicyConfig()
        .with_expire(args.expire)
        .with_upload_dir(args.upload_dir)
        .with_content_type(args.content_type)
        .with_max_upload_size(args.max_size)
    )
    print(json.dumps(oss.get_upload_object_policy(config).to_dict(), indent=2))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="oss-lite",
        description="Signed object access for one OSS bucket",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log strings to sign and request details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Download an object")
    get_parser.add_argument("key")
    get_parser.add_argument("-o", "--output", help="File to write (default: stdout)")
    get_parser.set_defaults(func=cmd_get)

    put_parser = subparsers.add_parser("put", help="Upload a local file")
    put_parser.add_argument("key")
    put_parser.add_argument("file")
    put_parser.add_argument("--content-type")
    put_parser.set_defaults(func=cmd_put)

    delete_parser = subparsers.add_parser("delete", help="Delete an object")
    delete_parser.add_argument("key")
    delete_parser.set_defaults(func=cmd_delete)

    head_parser = subparsers.add_parser("head", help="Show object metadata")
    head_parser.add_argument("key")
    head_parser.set_defaults(func=cmd_head)

    url_parser = subparsers.add_parser("sign-url", help="Print a pre-signed URL")
    url_parser.add_argument("key")
    url_parser.add_argument(
        "--expire",
        type=int,
        default=60,
        help="Seconds the URL stays valid (default: 60)",
    )
    url_parser.add_argument(
        "--upload",
        action="store_true",
        help="Sign a PUT URL instead of a download URL",
    )
    url_parser.add_argument("--cdn", help="CDN origin to use instead of the bucket host")
    url_parser.set_defaults(func=cmd_sign_url)

    policy_parser = subparsers.add_parser("policy", help="Print a browser upload policy")
    policy_parser.add_argument("--expire", type=int, default=60)
    policy_parser.add_argument("--upload-dir", default="")
    policy_parser.add_argument("--content-type", default="text/plain")
    policy_parser.add_argument(
        "--max-size",
        type=int,
        default=DEFAULT_MAX_UPLOAD_SIZE,
        help="Largest accepted upload in bytes (default: 100 MiB)",
    )
    policy_parser.set_defaults(func=cmd_policy)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        oss = OSS.from_env()
    except ConfigError as e:
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR
    if args.debug:
        oss.open_debug()
    try:
        return args.func(oss, args)
    except OssHTTPError as e:
        print(e, file=sys.stderr)
        return EXIT_HTTP_ERROR


if __name__ == "__main__":
    sys.exit(main())
