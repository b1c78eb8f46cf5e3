"""
CLI tool for running the profile engine on conversation text.
Usage: python -m cli.analyze_profile <text_file>
"""

import sys
import json
import argparse
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError

from lifequote.config import get_settings
from lifequote.pipeline.engine import (
    build_quote_request,
    estimate_coverage,
    extract_profile,
    is_ready_for_quotes,
    score_completeness,
)
from lifequote.pipeline.models import Profile
from lifequote.pipeline.steps import QuoteGenerationStep, QuoteReadinessStep


# ANSI color codes for terminal output
class Colors:
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def analyze(text: str, current_profile: Profile, with_quotes: bool = False) -> dict:
    """Run every engine operation over the text and collect the results."""
    profile = extract_profile(text, current_profile)
    ready = is_ready_for_quotes(profile)

    result = {
        "user_profile": profile.snapshot(),
        "coverage_amount": estimate_coverage(profile),
        "profile_completeness": score_completeness(profile),
        "ready_for_quotes": ready,
        "missing_fields": QuoteReadinessStep().missing_fields(profile),
        "quotes": [],
    }

    if with_quotes and ready:
        settings = get_settings()
        request = build_quote_request(profile, settings.quote_term_years)
        quotes = QuoteGenerationStep(include_sbli=settings.sbli_enabled).execute(request)
        result["quotes"] = [quote.model_dump(mode="json") for quote in quotes]

    return result


def print_result(result: dict):
    """Print the analysis in a formatted way."""
    print("\n" + "=" * 60)
    print(f"{Colors.BOLD}{Colors.BLUE}        PROFILE ANALYSIS{Colors.ENDC}")
    print("=" * 60)

    print(f"\n{Colors.BOLD}Profile:{Colors.ENDC}")
    if not result["user_profile"]:
        print("  (nothing extracted)")
    for field, value in result["user_profile"].items():
        print(f"  {field.replace('_', ' ').title():<16} {value}")

    print(f"\n{Colors.BOLD}Recommended coverage:{Colors.ENDC} ${result['coverage_amount']:,}")
    print(f"{Colors.BOLD}Completeness:{Colors.ENDC} {result['profile_completeness']}%")

    if result["ready_for_quotes"]:
        print(f"{Colors.GREEN}Ready for quotes{Colors.ENDC}")
    else:
        missing = ", ".join(result["missing_fields"])
        print(f"{Colors.YELLOW}Not ready for quotes (missing: {missing}){Colors.ENDC}")

    if result["quotes"]:
        print(f"\n{Colors.BOLD}Quotes:{Colors.ENDC}")
        for quote in result["quotes"]:
            print(
                f"  - {quote['carrier']:<22} ${quote['monthly_premium']:>5}/mo "
                f"(${quote['annual_premium']:,}/yr) {quote['product_name']}"
            )


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Extract a life insurance profile from conversation text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cli.analyze_profile chat.txt
  python -m cli.analyze_profile --text "I'm 29, married with 2 kids, making 75k" --quotes
  python -m cli.analyze_profile chat.txt --profile '{"state": "CA"}' --json
        """
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Path to a text file with the user's messages"
    )
    parser.add_argument(
        "--text", "-t",
        help="Conversation text (alternative to file)"
    )
    parser.add_argument(
        "--profile", "-p",
        help="Existing profile as JSON to merge into"
    )
    parser.add_argument(
        "--quotes", "-q",
        action="store_true",
        help="Also price mock quotes when the profile is ready"
    )
    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output result as JSON only"
    )

    args = parser.parse_args()

    # Get conversation text
    text = None

    if args.text:
        text = args.text
    elif args.file:
        file_path = Path(args.file)
        try:
            text = file_path.read_text()
        except OSError as e:
            print(f"{Colors.RED}Error: Cannot read {args.file}: {e}{Colors.ENDC}")
            sys.exit(1)
    else:
        # Try reading from stdin
        if not sys.stdin.isatty():
            text = sys.stdin.read()
        else:
            parser.print_help()
            sys.exit(1)

    if not text or not text.strip():
        print(f"{Colors.RED}Error: No conversation text given{Colors.ENDC}")
        sys.exit(1)

    try:
        current = Profile.model_validate_json(args.profile) if args.profile else Profile()
    except ValidationError as e:
        print(f"{Colors.RED}Error: Invalid --profile JSON: {e}{Colors.ENDC}")
        sys.exit(1)

    result = analyze(text, current, with_quotes=args.quotes)

    if args.json:
        print(json.dumps(result, indent=2, default=str))
    else:
        print_result(result)


if __name__ == "__main__":
    main()
