"""Deploy AI rules to the Cursor rules directory structure and combined instruction files."""

import argparse
import sys
from collections.abc import Sequence

from .deployer import COMBINED_OUTPUTS, CURSOR_RULES_DIR, RULE_FILENAME, RuleDeployer
from .exceptions import RuleDeployError, UsageError


USAGE_LINES = (
    "Usage: deploy-rules <filename> [filename2] [filename3] ...",
    "Example: deploy-rules nextjs",
    "Example: deploy-rules nextjs python",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="deploy-rules", description=__doc__)
    parser.add_argument(
        "names",
        nargs="*",
        metavar="filename",
        help="rule names, without the .md extension",
    )
    parser.add_argument("--rules-dir", default="rules", help="directory holding the rule files")
    parser.add_argument("--dist-dir", default="dist", help="output directory, rebuilt on every run")
    parser.add_argument("--list", action="store_true", help="list the available rules and exit")
    parser.add_argument(
        "--check",
        action="store_true",
        help="only verify the output directory is up to date",
    )
    return parser


def _print_summary(deployer: RuleDeployer, names: Sequence[str]) -> None:
    print()
    print("✓ Successfully deployed rules to:")
    print(f"  - {deployer.dist_dir / CURSOR_RULES_DIR}/ (Cursor rules directory structure)")
    for name in names:
        print(f"    - {name}/{RULE_FILENAME}")
    for target in COMBINED_OUTPUTS:
        print(f"  - {deployer.dist_dir / target}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if not args.names and not args.list:
            msg = "No filename provided"
            raise UsageError(msg)

        deployer = RuleDeployer(args.rules_dir, args.dist_dir)

        if args.list:
            for name in deployer.list_rules():
                print(name)
            return 0

        if args.check:
            problems = deployer.check(args.names)
            for problem in problems:
                print(problem)
            if problems:
                return 1
            print(f"{deployer.dist_dir} is up to date.")
            return 0

        deployer.deploy(args.names, echo=print)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        for line in USAGE_LINES:
            print(line, file=sys.stderr)
        return 1
    except (RuleDeployError, NotADirectoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_summary(deployer, args.names)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
