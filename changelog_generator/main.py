#!/usr/bin/env python3
"""
Command-line interface for the changelog generator.

Runs the same pipeline as the HTTP API, or starts the API server.

Usage (examples):
    python -m changelog_generator.main generate --content-file notes.txt --format markdown
    python -m changelog_generator.main generate --owner octocat --repo Hello-World \
        --from-tag v1.0.0 --to-tag v1.1.0 --output CHANGELOG_ENTRY.md
    python -m changelog_generator.main tags --owner octocat --repo Hello-World
    python -m changelog_generator.main serve --port 5000
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import get_settings
from .errors import ChangelogError, ValidationError
from .fetcher import GitHubFetcher
from .generator import ChangelogWriter
from .models import OutputFormat, SourceType, Template
from .pipeline import ChangelogPipeline
from .schemas import parse_generation_request

logger = logging.getLogger("changelog-generator")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a changelog from notes or GitHub commits.")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a changelog entry")
    manual = gen.add_argument_group("manual input")
    manual.add_argument("--content", "-c", help="Raw notes to turn into a changelog")
    manual.add_argument("--content-file", help="Read raw notes from a file ('-' for stdin)")
    github = gen.add_argument_group("GitHub input")
    github.add_argument("--owner", "-u", help="GitHub owner/username")
    github.add_argument("--repo", "-r", help="Repository name")
    github.add_argument("--token", "-t", help="GitHub token (recommended to avoid rate limits)")
    github.add_argument("--from-tag", help="Start of the commit range (needs --to-tag)")
    github.add_argument("--to-tag", help="End of the commit range (needs --from-tag)")
    gen.add_argument("--format", "-f", choices=[f.value for f in OutputFormat], default=OutputFormat.MARKDOWN.value)
    gen.add_argument("--template", choices=[t.value for t in Template], default=Template.STANDARD.value)
    gen.add_argument("--instructions", "-i", help="Custom instructions replacing the default cleanup directive")
    gen.add_argument("--output", "-o", help="Write the changelog to this file instead of stdout")

    tags = sub.add_parser("tags", help="List tags of a GitHub repository")
    tags.add_argument("--owner", "-u", required=True, help="GitHub owner/username")
    tags.add_argument("--repo", "-r", required=True, help="Repository name")
    tags.add_argument("--token", "-t", help="GitHub token")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address (default from settings)")
    serve.add_argument("--port", type=int, help="Port (default from settings)")
    return parser


def _read_content(args: argparse.Namespace) -> Optional[str]:
    if args.content_file == "-":
        return sys.stdin.read()
    if args.content_file:
        with open(args.content_file, "r", encoding="utf-8") as f:
            return f.read()
    return args.content


def _request_payload(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build a generation request body from the command-line options.

    Notes given together with a repository are passed along so the request
    parser rejects the mix.
    """
    payload: Dict[str, Any] = {
        "format": args.format,
        "template": args.template,
        "instructions": args.instructions,
        "content": _read_content(args),
    }
    if args.owner or args.repo:
        payload["sourceType"] = SourceType.GITHUB.value
        payload["githubConfig"] = {
            "owner": args.owner,
            "repo": args.repo,
            "token": args.token,
            "fromTag": args.from_tag,
            "toTag": args.to_tag,
        }
    else:
        payload["sourceType"] = SourceType.MANUAL.value
    return payload


def _generate(args: argparse.Namespace) -> None:
    settings = get_settings()
    request = parse_generation_request(_request_payload(args))
    pipeline = ChangelogPipeline(
        ChangelogWriter(settings=settings),
        fetcher_factory=lambda token: GitHubFetcher(token=token, settings=settings),
    )
    result = pipeline.generate(request)

    if args.output:
        logger.info("Writing changelog to %s", args.output)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result.changelog)
        print(f"{result.title} written to {args.output}")
    else:
        print(f"# {result.title}\n")
        print(result.changelog)


def _tags(args: argparse.Namespace) -> None:
    names = GitHubFetcher(token=args.token).fetch_tags(args.owner, args.repo)
    for name in names:
        print(name)


def _serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the changelog generator CLI.

    Exits with status 1 on any failure, after logging it.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {"generate": _generate, "tags": _tags, "serve": _serve}
    try:
        commands[args.command](args)
    except ValidationError as e:
        field = f" ({e.field})" if e.field else ""
        logger.error("Invalid request%s: %s", field, e.message)
        print(f"Error: {e.message}{field}", file=sys.stderr)
        sys.exit(1)
    except ChangelogError as e:
        logger.error("Changelog generation failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.error("Command %s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
