"""
Command-line interface for text cleaning.

Runs a file (or stdin) through a RevisionSession and prints the result.

Usage:
    # Clean a file and show the inline diff
    python -m textify.cli.clean draft.md

    # Pick cleanup options
    python -m textify.cli.clean draft.md --remove-emojis --remove-urls --normalize-quotes

    # Local regex replace only (no model call)
    python -m textify.cli.clean draft.md --regex "\\s+$" --replace "" --replace-only

    # Export and share
    python -m textify.cli.clean draft.md --export md --output-dir out/ --share-url https://textify.app/

    # Open a share link
    python -m textify.cli.clean --decode-share "https://textify.app/#/s/SGVsbG8"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import structlog

from textify.cleaning.cleaner import LLMTextCleaner
from textify.exceptions import ShareTokenError
from textify.logging_config import setup_logging
from textify.models.cleaning import CLEANING_FLAGS, CleaningConfig, RegexOptions
from textify.revision import share_codec
from textify.revision.diff_engine import render_inline, summarize_diff
from textify.revision.exporter import write_export
from textify.revision.session import RevisionSession, RunOutcome


# Setup logging
setup_logging()
logger = structlog.get_logger(__name__)


# ============================================================================
# CLI FUNCTIONS
# ============================================================================

def build_config(args: argparse.Namespace) -> CleaningConfig:
    """Translate parsed arguments into a CleaningConfig."""
    flags = {name: bool(getattr(args, name)) for name in CLEANING_FLAGS}
    regex = RegexOptions(
        enabled=bool(args.regex),
        pattern=args.regex or "",
        replacement=args.replace,
        case_sensitive=args.case_sensitive,
    )
    return CleaningConfig(regex=regex, **flags)


def read_input(source: str) -> str:
    """Read text from a file path, or from stdin when ``source`` is ``-``."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


async def run_revision(
    text: str,
    config: CleaningConfig,
    model_override: Optional[str] = None,
    replace_only: bool = False,
) -> RevisionSession:
    """
    Run one clean (or replace-all) pass over ``text``.

    Args:
        text: Original text
        config: Cleaning configuration
        model_override: Optional LLM model string (e.g., "ollama/llama3.1:8b")
        replace_only: Apply the regex locally instead of calling the model

    Returns:
        The session after the pass, holding cleaned text and diff

    Raises:
        RuntimeError: If the pass did not complete
    """
    cleaner = None if replace_only else LLMTextCleaner(model_override=model_override)

    async with RevisionSession(cleaner, config=config, auto_clean=False) as session:
        session.set_original_text(text)

        if replace_only:
            outcome = await session.replace_all()
        else:
            outcome = await session.clean()

        if outcome is not RunOutcome.COMPLETED:
            raise RuntimeError(f"Revision {outcome.value}")

        return session


def print_result(session: RevisionSession, output_format: str) -> None:
    """Print the session result to stdout."""
    if output_format == "text":
        print(session.cleaned_text)
    elif output_format == "json":
        payload = {
            "cleanedText": session.cleaned_text,
            "diff": [s.model_dump(by_alias=True) for s in session.diff],
            "stats": summarize_diff(session.diff).model_dump(by_alias=True),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(render_inline(session.diff))
        stats = summarize_diff(session.diff)
        print(
            f"\n-{stats.removed_chars} +{stats.added_chars} "
            f"={stats.unchanged_chars} chars",
            file=sys.stderr,
        )


def decode_share(value: str) -> int:
    """Print the text embedded in a share link, token or fragment."""
    token = share_codec.parse_share_fragment(value) or value
    try:
        print(share_codec.decode(token))
    except ShareTokenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


# ============================================================================
# MAIN CLI
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Textify CLI - Clean AI-generated text and show what changed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s draft.md --remove-emojis --trim-trailing-spaces
  cat draft.md | %(prog)s - --format text
  %(prog)s draft.md --model openai/gpt-4o-mini
  %(prog)s --decode-share "#/s/SGVsbG8"

Supported models:
  - ollama/<model>:<tag>  (e.g., ollama/llama3.1:8b)
  - openai/<model>        (e.g., openai/gpt-4o-mini) - requires LLM_API_KEY
  - deepseek/<model>      (e.g., deepseek/deepseek-chat) - requires LLM_API_KEY
        """
    )

    parser.add_argument("input", nargs="?", help="Text file to clean, or - for stdin")

    options = parser.add_argument_group("cleanup options")
    for name in CLEANING_FLAGS:
        options.add_argument(
            f"--{name.replace('_', '-')}",
            dest=name,
            action="store_true",
        )

    regex = parser.add_argument_group("regex find/replace")
    regex.add_argument("--regex", default=None, help="Regex pattern to replace")
    regex.add_argument("--replace", default="", help="Replacement template (default: empty)")
    regex.add_argument("--case-sensitive", action="store_true", help="Case-sensitive matching")
    regex.add_argument(
        "--replace-only",
        action="store_true",
        help="Apply the regex locally without calling the model",
    )

    parser.add_argument("--model", "-m", default=None, help="Override LLM model (provider/model-name)")
    parser.add_argument(
        "--format", "-f",
        choices=["diff", "text", "json"],
        default="diff",
        help="Output format (default: diff)",
    )
    parser.add_argument("--export", choices=["txt", "md"], default=None, help="Also export the cleaned text")
    parser.add_argument("--output-dir", "-o", default=".", help="Directory for --export (default: .)")
    parser.add_argument("--share-url", default=None, help="Print a share link based on this page URL")
    parser.add_argument("--decode-share", default=None, help="Print the text of a share link and exit")

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.decode_share:
        return decode_share(args.decode_share)

    if not args.input:
        parser.error("input is required unless --decode-share is given")

    if args.replace_only and not args.regex:
        parser.error("--replace-only requires --regex")

    try:
        text = read_input(args.input)
        session = asyncio.run(
            run_revision(
                text,
                build_config(args),
                model_override=args.model,
                replace_only=args.replace_only,
            )
        )

        print_result(session, args.format)

        if args.export:
            path = write_export(session.export(args.export), args.output_dir)
            print(f"Exported {path}", file=sys.stderr)

        if args.share_url:
            share_url = session.share_url(args.share_url)
            if share_url:
                print(share_url, file=sys.stderr)
            else:
                print("Nothing to share: the cleaned text is empty", file=sys.stderr)

    except Exception as e:
        logger.error("cli_failed", error=str(e), exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
