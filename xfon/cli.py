"""Command line interface: ``xfon show`` and ``xfon tree``."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from xfon.hierarchy import LinkedCertificate, compute_hierarchy
from xfon.journal import journal
from xfon.load import LoadError, load_certificates
from xfon.render import print_cert, print_tree

_PACKAGE_STRING = "xfon 1.0.0"

_USAGE = (
    "usage: xfon <command> [<args>]\n"
    "       xfon -h | --help\n"
    "       xfon -V | --version\n"
    "\n"
    "Display information about x509 certificates\n"
    "\n"
    "Supported commands:\n"
    "  diff    Compare two certificates\n"
    "  show    Show contents of certificates\n"
    "  tree    Print a tree of certificates\n"
    "\n"
    "See 'xfon <command> -h' to read about a specific <command>.\n"
)


def usage() -> str:
    """Return the top-level usage text."""
    return _USAGE


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Be verbose (repeat for more verbosity)",
    )


def _show_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xfon show",
        description="Show x509 certificates.",
        epilog="Certificates can be bundles of several concatenated certificates.",
    )
    parser.add_argument("-f", "--format", metavar="FORMAT", default="text",
                        help="text|json (default: text)")
    parser.add_argument("--style", metavar="STYLE", default="tree",
                        help="tree|list (default: tree)")
    parser.add_argument("-p", "--properties", metavar="PROP[,PROP]...",
                        help="Properties to show")
    _add_verbose(parser)
    parser.add_argument("certificates", nargs="*", metavar="CERT")
    return parser


def _tree_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xfon tree",
        description="Print a tree x509 certificates.",
        epilog="Certificates can be bundles of several concatenated certificates (DER or PEM).",
    )
    parser.add_argument("-m", "--minimal", action="store_true", help="Print a minimal tree")
    parser.add_argument("-p", "--properties", metavar="PROP[,PROP]...",
                        help="Properties to show (implies not minimal)")
    _add_verbose(parser)
    parser.add_argument("certificates", nargs="*", metavar="CERT")
    return parser


def _parse(parser: argparse.ArgumentParser, argv: Sequence[str] | None) -> argparse.Namespace:
    args = parser.parse_intermixed_args(list(argv) if argv is not None else [])
    for _ in range(args.verbose):
        journal.increase_verbosity()
    return args


def _load(paths: list[str]) -> list[LinkedCertificate] | None:
    try:
        return load_certificates(paths)
    except LoadError as exc:
        journal.error(str(exc))
        return None


def cmd_show(argv: Sequence[str] | None = None) -> int:
    """Print the properties of every certificate given; return the exit status."""
    args = _parse(_show_parser(), argv)
    certificates = _load(args.certificates)
    if certificates is None:
        return 1
    single = len(certificates) == 1
    for cert in certificates:
        print_cert(cert, single)
    return 0


def cmd_tree(argv: Sequence[str] | None = None) -> int:
    """Print the issuer hierarchy of the certificates given; return the exit status."""
    args = _parse(_tree_parser(), argv)
    certificates = _load(args.certificates)
    if certificates is None:
        return 1
    compute_hierarchy(certificates)
    print_tree(certificates, args.minimal)
    return 0


_COMMANDS = {
    "show": cmd_show,
    "tree": cmd_tree,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Dispatch to a sub-command and return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stdout.write(usage())
        return 1

    first = args[0]
    if first in ("-h", "--help"):
        sys.stdout.write(usage())
        return 0
    if first in ("-V", "--version"):
        print(_PACKAGE_STRING)
        return 0

    command = _COMMANDS.get(first)
    if command is None:
        print(
            f"xfon: unrecognized command '{first}' (valid commands are: diff, show, tree)",
            file=sys.stderr,
        )
        return 1
    return command(args[1:])


if __name__ == "__main__":
    sys.exit(main())