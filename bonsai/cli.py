"""
Command-line entry points.

    bonsai        grow a bonsai tree in the terminal
    bonsai-fetch  grow a tree, then show system information under it
"""

import argparse
import sys

from pydantic import ValidationError

from bonsai.fetch import load_settings, run_fetch
from bonsai.persistence import default_cache_path
from bonsai.session import SessionOptions, run_session

DEFAULT_PATH = "default"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bonsai", description="bonsai is a beautifully random bonsai tree generator."
    )
    parser.add_argument("-l", "--live", action="store_true", help="live mode: show each step of growth")
    parser.add_argument(
        "-t",
        "--time",
        type=float,
        default=0.03,
        help="in live mode, wait TIME secs between steps of growth (must be larger than 0) [default: 0.03]",
    )
    parser.add_argument("-i", "--infinite", action="store_true", help="infinite mode: keep growing trees")
    parser.add_argument("-n", "--noir", action="store_true", help="noir mode: outputs in black and white")
    parser.add_argument(
        "-w",
        "--wait",
        type=float,
        default=4.0,
        help="in infinite mode, wait TIME between each tree generation [default: 4.00]",
    )
    parser.add_argument(
        "-S",
        "--screensaver",
        action="store_true",
        help="screensaver mode; equivalent to -li and quit on any keypress",
    )
    parser.add_argument("-m", "--message", help="attach message next to the tree")
    parser.add_argument("-b", "--base", type=int, default=1, help="ascii-art plant base to use, 0 is none")
    parser.add_argument(
        "-c", "--leaf", help="list of comma-delimited strings randomly chosen for leaves"
    )
    parser.add_argument(
        "-M",
        "--multiplier",
        type=int,
        default=5,
        help="branch multiplier; higher -> more branching (0-20) [default: 5]",
    )
    parser.add_argument(
        "-L", "--life", type=int, default=32, help="life; higher -> more growth (0-200) [default: 32]"
    )
    parser.add_argument("-p", "--print", action="store_true", help="print tree to terminal when finished")
    parser.add_argument("-s", "--seed", type=int, help="seed random number generator")
    parser.add_argument(
        "-W",
        "--save",
        nargs="?",
        const=DEFAULT_PATH,
        metavar="FILE",
        help=f"save progress to file [default: {default_cache_path()}]",
    )
    parser.add_argument(
        "-C",
        "--load",
        nargs="?",
        const=DEFAULT_PATH,
        metavar="FILE",
        help=f"load progress from file [default: {default_cache_path()}]",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="increase output verbosity"
    )
    return parser


def _resolve_path(value: str | None) -> str | None:
    if value == DEFAULT_PATH:
        return str(default_cache_path())
    return value


def options_from_args(args: argparse.Namespace) -> SessionOptions:
    return SessionOptions(
        live=args.live,
        time_step=args.time,
        infinite=args.infinite,
        wait=args.wait,
        screensaver=args.screensaver,
        noir=args.noir,
        message=args.message,
        base=args.base,
        leaves=args.leaf,
        multiplier=args.multiplier,
        life=args.life,
        print_tree=args.print,
        seed=args.seed,
        save_path=_resolve_path(args.save),
        load_path=_resolve_path(args.load),
        verbosity=args.verbose,
    )


def describe_error(error: Exception) -> str:
    """One-line message for a configuration error."""
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'options'}: {err['msg']}"
            for err in error.errors()
        )
    return str(error)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        options = options_from_args(args)
        options.growth_config()
    except (ValidationError, ValueError) as e:
        print(f"error: {describe_error(e)}", file=sys.stderr)
        return 1

    result = run_session(options)
    if options.verbosity > 1 and result.trees:
        result.trees[-1].print_summary()
    return 0


def build_fetch_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bonsai-fetch", description="Display system info with a bonsai tree."
    )
    parser.add_argument("-o", "--owner", help="set owner name in welcome message")
    parser.add_argument("-L", "--location", help="set location")
    parser.add_argument("-s", "--support", help="set support contact info")
    parser.add_argument("-d", "--docs", metavar="URL", help="set documentation URL")
    parser.add_argument("-S", "--no-support", action="store_true", help="hide support/docs section")
    parser.add_argument("-I", "--hide-ip", action="store_true", help="hide NODE IP field")
    parser.add_argument("-n", "--noir", action="store_true", help="noir mode: no colors, bold labels")
    parser.add_argument(
        "-p", "--print", action="store_true", help="print mode: no animation, instant display"
    )
    return parser


def fetch_main(argv: list[str] | None = None) -> int:
    args = build_fetch_parser().parse_args(argv)
    settings = load_settings(
        overrides={
            "owner": args.owner,
            "location": args.location,
            "support": args.support,
            "docs": args.docs,
        },
        hide_support=args.no_support,
        hide_ip=args.hide_ip,
        noir=args.noir,
    )
    run_fetch(settings, print_only=args.print)
    return 0


if __name__ == "__main__":
    sys.exit(main())
