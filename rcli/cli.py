#!/usr/bin/env python3
import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .b64 import FORMATS as BASE64_FORMATS, process_decode, process_encode
from .csv_convert import OUTPUT_FORMATS, process_csv
from .errors import CryptoError, IoError, RcliError
from .genpass import process_genpass
from .jwt_tool import ALGORITHMS, DEFAULT_AUDIENCE, parse_duration, process_jwt_sign, process_jwt_verify
from .text import (
    TextSignFormat,
    process_text_decrypt,
    process_text_encrypt,
    process_text_key_generate,
    process_text_sign,
    process_text_verify,
)
from .utils import STDIN, get_reader, read_all, read_file, verify_input_file, verify_path, write_file

logger = logging.getLogger(__name__)

SIGN_FORMATS = [f.value for f in TextSignFormat]


# ---------- Helpers ----------
def setup_logging(verbose: int = 0):
    if verbose:
        level = logging.DEBUG if verbose > 1 else logging.INFO
    else:
        name = os.environ.get("RCLI_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, name, None)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def str2bool(s: str) -> bool:
    v = s.strip().lower()
    if v in ('true', 'yes', '1', 'on'):
        return True
    if v in ('false', 'no', '0', 'off'):
        return False
    raise argparse.ArgumentTypeError(f"expected true/false, got {s!r}")


def single_char(s: str) -> str:
    if len(s) != 1:
        raise argparse.ArgumentTypeError(f"delimiter must be a single character, got {s!r}")
    return s


def duration(s: str) -> int:
    try:
        return parse_duration(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def jwt_key(args) -> bytes:
    path = args.key or os.environ.get("RCLI_JWT_KEY")
    if not path:
        raise IoError("no JWT key given: pass --key or set RCLI_JWT_KEY")
    return read_file(path)


# ---------- CLI commands ----------
def cmd_csv(args):
    output = args.output or f"output.{args.format}"
    count = process_csv(args.input, output, args.format, delimiter=args.delimiter, header=args.header)
    print(f"{count} records written to {output}")


def cmd_genpass(args):
    try:
        password = process_genpass(args.length, args.uppercase, args.lowercase, args.number, args.symbol)
    except ValueError as e:
        raise SystemExit(f"Error: {e}")
    print(password)


def cmd_base64(args):
    data = read_all(args.input)
    if args.action == 'encode':
        print(process_encode(data, args.format))
    else:
        out = sys.stdout.buffer
        out.write(process_decode(data, args.format))
        out.flush()


def cmd_text(args):
    if args.sub == 'sign':
        fmt = TextSignFormat.parse(args.format)
        print(process_text_sign(get_reader(args.input), read_file(args.key), fmt))
    elif args.sub == 'verify':
        fmt = TextSignFormat.parse(args.format)
        if process_text_verify(get_reader(args.input), read_file(args.key), args.sig, fmt):
            print("✓ Signature verified")
        else:
            print("⚠ Signature not verified")
    elif args.sub == 'generate':
        fmt = TextSignFormat.parse(args.format)
        for name, key in process_text_key_generate(fmt):
            write_file(args.output_path / name, key)
            print(f"wrote {args.output_path / name}")
    elif args.sub == 'encrypt':
        print(process_text_encrypt(get_reader(args.input), read_file(args.key)))
    elif args.sub == 'decrypt':
        decrypted = process_text_decrypt(read_all(args.input), read_file(args.key))
        print(decrypted.decode('utf-8', errors='replace'))


def cmd_http(args):
    # heavy import, only this command needs it
    from .http_serve import process_http_serve
    process_http_serve(args.dir, args.port)


def cmd_jwt(args):
    if args.sub == 'sign':
        print(process_jwt_sign(args.sub_claim, args.exp, args.aud, args.alg, jwt_key(args)))
        return 0
    try:
        claims = process_jwt_verify(args.token, args.aud, args.alg, jwt_key(args))
    except CryptoError as e:
        print(f"JWT token is invalid: {e}")
        return 1
    print("JWT token is valid")
    for k, v in claims.items():
        print(f"- {k}: {v}")
    return 0


# ---------- Argument parser ----------
def build_parser():
    p = argparse.ArgumentParser(prog="rcli", description="Command-line toolbox: csv, genpass, base64, text, http, jwt")
    p.add_argument('-V', '--version', action='version', version=f"%(prog)s {__version__}")
    p.add_argument('-v', '--verbose', action='count', default=0, help="INFO with -v, DEBUG with -vv (logs go to stderr)")
    sub = p.add_subparsers(dest='cmd', required=True)

    # csv
    c = sub.add_parser('csv', help="Convert CSV to JSON or YAML")
    c.add_argument('-i', '--input', required=True, type=verify_input_file, help="Input file path")
    c.add_argument('-o', '--output', help="Output file path (default output.<format>)")
    c.add_argument('--format', default='json', type=str.lower, choices=OUTPUT_FORMATS, help="Output format")
    c.add_argument('-d', '--delimiter', default=',', type=single_char, help="Delimiter character")
    c.add_argument('--no-header', dest='header', action='store_false', help="First row is data, not a header")
    c.set_defaults(func=cmd_csv)

    # genpass
    g = sub.add_parser('genpass', help="Generate a random password")
    g.add_argument('-l', '--length', type=int, default=16, help="Password length")
    g.add_argument('--uppercase', type=str2bool, default=True, help="Include uppercase letters")
    g.add_argument('--lowercase', type=str2bool, default=True, help="Include lowercase letters")
    g.add_argument('--number', type=str2bool, default=True, help="Include numbers")
    g.add_argument('--symbol', type=str2bool, default=True, help="Include symbols")
    g.set_defaults(func=cmd_genpass)

    # base64
    b = sub.add_parser('base64', help="Base64 encode/decode")
    bs = b.add_subparsers(dest='action', required=True)
    for action, about in (('encode', "Encode input to base64"), ('decode', "Decode base64 input")):
        ba = bs.add_parser(action, help=about)
        ba.add_argument('-i', '--input', default=STDIN, type=verify_input_file, help="Input file path, - for stdin")
        ba.add_argument('--format', default='standard', type=str.lower, choices=BASE64_FORMATS)
        ba.set_defaults(func=cmd_base64)

    # text
    t = sub.add_parser('text', help="Text sign/verify/encrypt/decrypt")
    ts = t.add_subparsers(dest='sub', required=True)
    t_sign = ts.add_parser('sign', help="Sign a text with a private/session key and output the signature")
    t_sign.add_argument('-i', '--input', default=STDIN, type=verify_input_file)
    t_sign.add_argument('-k', '--key', required=True, type=verify_input_file)
    t_sign.add_argument('--format', default='blake3', type=str.lower, choices=SIGN_FORMATS)
    t_sign.set_defaults(func=cmd_text)
    t_ver = ts.add_parser('verify', help="Verify a text with a public/session key")
    t_ver.add_argument('-i', '--input', default=STDIN, type=verify_input_file)
    t_ver.add_argument('-k', '--key', required=True, type=verify_input_file)
    t_ver.add_argument('--sig', required=True, help="Signature, URL-safe base64 without padding")
    t_ver.add_argument('--format', default='blake3', type=str.lower, choices=SIGN_FORMATS)
    t_ver.set_defaults(func=cmd_text)
    t_gen = ts.add_parser('generate', help="Generate a random blake3 key or ed25519 key pair")
    t_gen.add_argument('--format', default='blake3', type=str.lower, choices=SIGN_FORMATS)
    t_gen.add_argument('-o', '--output-path', required=True, type=verify_path)
    t_gen.set_defaults(func=cmd_text)
    t_enc = ts.add_parser('encrypt', help="Encrypt a text with a 32-byte key")
    t_enc.add_argument('-i', '--input', default=STDIN, type=verify_input_file)
    t_enc.add_argument('-k', '--key', required=True, type=verify_input_file)
    t_enc.set_defaults(func=cmd_text)
    t_dec = ts.add_parser('decrypt', help="Decrypt base64 ciphertext with a 32-byte key")
    t_dec.add_argument('-i', '--input', default=STDIN, type=verify_input_file)
    t_dec.add_argument('-k', '--key', required=True, type=verify_input_file)
    t_dec.set_defaults(func=cmd_text)

    # http
    h = sub.add_parser('http', help="HTTP server")
    hs = h.add_subparsers(dest='sub', required=True)
    h_serve = hs.add_parser('serve', help="Serve a directory over HTTP")
    h_serve.add_argument('-d', '--dir', default=Path('.'), type=verify_path, help="Path to serve")
    h_serve.add_argument('-p', '--port', type=int, default=8080, help="Port to listen on")
    h_serve.set_defaults(func=cmd_http)

    # jwt
    j = sub.add_parser('jwt', help="JWT sign/verify")
    js = j.add_subparsers(dest='sub', required=True)
    j_sign = js.add_parser('sign', help="Sign a JWT token")
    j_sign.add_argument('--sub', dest='sub_claim', required=True, help="Subject claim")
    j_sign.add_argument('--aud', default=DEFAULT_AUDIENCE, help="Audience claim")
    j_sign.add_argument('--exp', default='1d', type=duration, help="Lifetime, e.g. 30s, 15m, 2h, 1d")
    j_sign.add_argument('--alg', default='HS256', type=str.upper, choices=ALGORITHMS)
    j_sign.add_argument('-k', '--key', type=verify_input_file, help="Secret key file (default $RCLI_JWT_KEY)")
    j_sign.set_defaults(func=cmd_jwt)
    j_ver = js.add_parser('verify', help="Verify a JWT token")
    j_ver.add_argument('-t', '--token', required=True)
    j_ver.add_argument('--aud', default=DEFAULT_AUDIENCE)
    j_ver.add_argument('--alg', default='HS256', type=str.upper, choices=ALGORITHMS)
    j_ver.add_argument('-k', '--key', type=verify_input_file, help="Secret key file (default $RCLI_JWT_KEY)")
    j_ver.set_defaults(func=cmd_jwt)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        return args.func(args) or 0
    except RcliError as e:
        logger.debug("%s failed", args.cmd, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
