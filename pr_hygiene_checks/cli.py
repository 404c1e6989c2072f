"""CLI commands for PR hygiene status checks."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .errors import HygieneError
from .models import HygieneConfig, load_config

EXIT_CONFIG_ERROR = 2


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with hygiene config (camelCase keys, e.g. changedFileCountLimit)",
    )
    parser.add_argument(
        "--branch",
        default=None,
        help="Branch name (default: $BRANCH_NAME)",
    )
    parser.add_argument(
        "--credentials-id",
        default=None,
        help="Credentials id used to look up the GitHub token",
    )
    parser.add_argument(
        "--changed-file-count-limit",
        type=int,
        default=None,
        help="Maximum number of changed files (default: 10)",
    )
    parser.add_argument(
        "--changed-line-count-limit",
        type=int,
        default=None,
        help="Maximum number of changed lines (default: 300)",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATH",
        help="Ignore files whose path contains PATH (repeatable)",
    )
    parser.add_argument(
        "--line-count-strategy",
        choices=["per_file", "additions_deletions"],
        default=None,
        help="How changed lines are counted (default: per_file)",
    )


def build_config(args: argparse.Namespace) -> HygieneConfig:
    """Merge the config file with command line overrides."""
    base = load_config(args.config)
    data = base.model_dump()
    overrides = {
        "github_credentials_id": args.credentials_id,
        "changed_file_count_limit": args.changed_file_count_limit,
        "changed_line_count_limit": args.changed_line_count_limit,
        "line_count_strategy": args.line_count_strategy,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    if getattr(args, "disable_status_check", False):
        data["disable_status_check"] = True
    if args.ignore:
        data["list_of_file_paths_to_be_ignored"] = [*data["list_of_file_paths_to_be_ignored"], *args.ignore]
    return HygieneConfig.from_mapping(data)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("github").setLevel(logging.ERROR)
    logging.getLogger("urllib3").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Report PR hygiene status checks (files and lines changed) to GitHub",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Count changed files and lines and publish both status checks",
    )
    _add_config_arguments(check_parser)
    check_parser.add_argument(
        "--disable-status-check",
        action="store_true",
        help="Skip all checks",
    )

    # count subcommand
    count_parser = subparsers.add_parser(
        "count",
        help="Print changed file and line counts as JSON without publishing",
    )
    _add_config_arguments(count_parser)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = build_config(args)
    except HygieneError as e:
        print(f"prHygiene: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.command == "check":
        from .checker import run_hygiene_checks

        report = run_hygiene_checks(config, branch_name=args.branch)
        print(f"prHygiene: run {report.state.value}" + (f" ({report.reason})" if report.reason else ""))
        for result in report.results:
            print(f"  {result.context}: {result.status.value} - {result.description}")
        # Checks are advisory: the build never fails because of them
        return 0

    elif args.command == "count":
        from .checker import HygieneChecker
        from .credentials import EnvCredentialProvider
        from .gate import build_context
        from .settings import get_settings

        settings = get_settings()
        context = build_context(settings, args.branch)
        if not context.owner or not context.repo or context.pr_number is None:
            print("prHygiene: OWNER_NAME, REPO_NAME and a PR-<n> branch are required", file=sys.stderr)
            return EXIT_CONFIG_ERROR

        credentials = EnvCredentialProvider()
        checker = HygieneChecker(config, credentials, api_url=settings.github_api_url)
        try:
            with credentials.acquire(config.github_credentials_id) as credential:
                counts = checker.collect_counts(context, credential)
        except HygieneError as e:
            print(f"prHygiene: {e}", file=sys.stderr)
            return 1
        json.dump(
            {
                "pr": f"{context.full_name}#{context.pr_number}",
                "changed_file_count": counts.changed_file_count,
                "changed_line_count": counts.changed_line_count,
            },
            sys.stdout,
            indent=2,
        )
        sys.stdout.write("\n")
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
