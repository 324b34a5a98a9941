"""pixelsort command line — load, sort, save."""

import argparse
import logging
import os
import sys

import sentry_sdk

from _version import __version__
from diagnostics import init_diagnostics
from imaging import load_image, save_image
from sorting.engine import sort
from sorting.errors import SortError
from sorting.options import PARAMS, SortOptions

logger = logging.getLogger(__name__)


def _init_sentry():
    """Sentry stays disabled unless SENTRY_DSN is set."""
    sentry_sdk.init(
        dsn=os.environ.get("SENTRY_DSN", ""),
        release=f"pixelsort@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        max_breadcrumbs=50,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelsort", description="Sort runs of pixels along rows or columns"
    )
    parser.add_argument("-f", "--file", required=True, help="Input image")
    parser.add_argument("-o", "--output", required=True, help="Output image")
    parser.add_argument("--by", choices=PARAMS["by"]["choices"])
    parser.add_argument("-i", "--interval", type=int)
    parser.add_argument("-r", "--reverse", action="store_true", default=None)
    parser.add_argument("-d", "--discretize", type=int)
    parser.add_argument("-p", "--progressive-amount", type=int)
    parser.add_argument("--direction", choices=PARAMS["direction"]["choices"])
    parser.add_argument("--shuffle", action="store_true", default=None)
    parser.add_argument("--channel", choices=PARAMS["channel"]["choices"])
    parser.add_argument("--red", type=float, help="Red coefficient")
    parser.add_argument("--green", type=float, help="Green coefficient")
    parser.add_argument("--blue", type=float, help="Blue coefficient")
    parser.add_argument("--seed", type=int, help="Seed for reproducible output")
    parser.add_argument("--workers", type=int, help="Worker threads")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    params = {k: v for k, v in vars(args).items() if k in PARAMS and v is not None}

    try:
        options = SortOptions.from_params(params)
        image = load_image(args.file)
        sort(image, options, seed=args.seed, workers=args.workers)
        save_image(image, args.output)
    except SortError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        logger.error("I/O failed: %s", type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.info("Wrote %s", args.output)
    return 0


def main():
    init_diagnostics()
    _init_sentry()
    sys.exit(run())


if __name__ == "__main__":
    main()
