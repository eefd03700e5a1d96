import argparse
import logging
import sys
from typing import List, Optional

from sexpfmt.core.errors import SExprError
from sexpfmt.io.config import SExprConfig
from sexpfmt.io.loader import canonical_bytes
from sexpfmt.syntax.parser import parse_all

logger = logging.getLogger("sexpfmt.cli")

EXIT_OK = 0
EXIT_NOT_CANONICAL = 1
EXIT_PARSE_ERROR = 2


def _read(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sexpfmt",
        description="Rewrite S-expression files in canonical form.",
    )
    parser.add_argument("files", nargs="*", default=["-"], help="Input files ('-' for stdin)")
    parser.add_argument("--check", action="store_true", help="Only report files that are not canonical")
    parser.add_argument("--config", default=None, help="YAML file with parser settings")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    cfg = SExprConfig.from_yaml(args.config) if args.config else SExprConfig()

    status = EXIT_OK
    out = sys.stdout.buffer
    for path in args.files:
        data = _read(path)
        try:
            nodes = parse_all(data, config=cfg)
        except SExprError as e:
            print(f"{path}:{e.offset}: {e}", file=sys.stderr)
            status = EXIT_PARSE_ERROR
            continue

        canon = canonical_bytes(nodes, config=cfg)
        if args.check:
            if canon != data:
                print(f"{path}: not canonical", file=sys.stderr)
                status = max(status, EXIT_NOT_CANONICAL)
            else:
                logger.info(f"{path}: ok")
        else:
            out.write(canon)
    out.flush()
    return status


if __name__ == "__main__":
    sys.exit(main())
