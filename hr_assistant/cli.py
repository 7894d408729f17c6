"""
Command-line interface for the HR assistant.

Usage:
    python -m hr_assistant analyze FILE [--offline]
"""

import argparse
import asyncio
import json
import os
import sys

from pydantic import ValidationError

from hr_assistant.config import get_settings
from hr_assistant.models.document_analysis import DocumentAnalysisRequest
from hr_assistant.services.document_analyzer import analyze_document, analyze_document_fallback
from hr_assistant.services.errors import LLMProviderError, ProviderNotConfiguredError


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="hr-assistant",
        description="HR Assistant CLI - analyze HR documents locally"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a plain-text HR document"
    )
    analyze_parser.add_argument(
        "file",
        type=str,
        help="Path to a UTF-8 text file"
    )
    analyze_parser.add_argument(
        "--offline",
        action="store_true",
        help="Use keyword heuristics only (no API key required)"
    )
    analyze_parser.add_argument(
        "--file-type",
        type=str,
        default="text/plain",
        help="MIME type hint (default: text/plain)"
    )

    return parser


async def analyze_command(args: argparse.Namespace) -> int:
    """
    Execute the analyze command.

    Args:
        args: Parsed command-line arguments

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    if not os.path.isfile(args.file):
        print(f"Error: File not found: {args.file}")
        return 1

    with open(args.file, "r", encoding="utf-8", errors="replace") as f:
        content = f.read()

    filename = os.path.basename(args.file)

    if args.offline:
        result = analyze_document_fallback(filename, content)
    else:
        try:
            get_settings()
        except ValidationError as e:
            print(f"Configuration error: {e}")
            print("\nMake sure you have a .env file with:")
            print("  SUPABASE_URL=https://your-project.supabase.co")
            print("  SUPABASE_KEY=your_anon_key")
            print("  OPENAI_API_KEY=your_api_key")
            print("\nOr pass --offline to use keyword analysis only.")
            return 1

        request = DocumentAnalysisRequest(
            filename=filename, content=content, file_type=args.file_type
        )
        try:
            result = await analyze_document(request)
        except (ProviderNotConfiguredError, LLMProviderError) as e:
            print(f"Error: {e}")
            return 1

    print(json.dumps(result.model_dump(by_alias=True), indent=2))
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "analyze":
        return asyncio.run(analyze_command(args))
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
