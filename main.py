#!/usr/bin/env python3
"""
Student Job Assistant - Main Entry Point
========================================

This is the main entry point for the Student Job Assistant.
It provides a command-line interface for running the assistant
in various modes.

Usage:
    python main.py --web                  # Start web UI
    python main.py --tui                  # Start terminal UI
    python main.py --ask "How do I apply?"
    python main.py --explain "help me"    # Show every matching rule
    python main.py --export-rules rules.yaml
    python main.py --help                 # Show help
"""

import sys
import argparse
from pathlib import Path
from typing import Optional, List

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from core.config import load_config, Config
from core.logging import setup_logging, get_logger
from core.exceptions import AssistantError

logger = get_logger("main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Student Job Assistant - FAQ chat and interview prep for the job board",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --web                     Start web UI on default port
  python main.py --web --port 9000         Start web UI on port 9000
  python main.py --tui                     Start terminal UI
  python main.py --ask "what's the pay"    Print a single reply
  python main.py --explain "help me"       Show which rules match and which wins
  python main.py --export-rules faq.yaml   Write the built-in rules to YAML
        """
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--web",
        action="store_true",
        help="Start web UI server"
    )
    mode_group.add_argument(
        "--tui",
        action="store_true",
        help="Start terminal UI"
    )
    mode_group.add_argument(
        "--ask",
        type=str,
        metavar="MESSAGE",
        help="Print the assistant's reply to a message"
    )
    mode_group.add_argument(
        "--explain",
        type=str,
        metavar="MESSAGE",
        help="List every rule matching a message in evaluation order"
    )
    mode_group.add_argument(
        "--export-rules",
        type=str,
        metavar="PATH",
        help="Write the built-in rule table to a YAML file"
    )

    # Optional arguments
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--rules",
        type=str,
        metavar="PATH",
        help="YAML rules file replacing the built-in FAQ rules"
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for web UI (default: from config, 8080)"
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Host for web UI (default: from config, 127.0.0.1)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    return parser.parse_args(argv)


def _build_matcher(config: Config):
    from assistant.engine import IntentMatcher
    from assistant.faq import rule_table_from_config

    return IntentMatcher(
        table=rule_table_from_config(config),
        max_input_length=config.assistant.max_input_length,
    )


def run_ask(config: Config, message: str) -> None:
    """Print a single reply, without the typing delay."""
    matcher = _build_matcher(config)
    print(matcher.respond(message))


def run_explain(config: Config, message: str) -> None:
    """Show which rules match a message and which one wins."""
    matcher = _build_matcher(config)
    matches = matcher.match_all(message)

    print(f"\nMessage: {message}")
    print("-" * 50)

    if not matches:
        print("No rule matched, a fallback reply is used:")
        for fallback in matcher.fallbacks:
            print(f"  • {fallback}")
        return

    for index, match in enumerate(matches):
        rule = match.rule
        normalized = matcher.normalize(message)
        hits = [t for t in rule.triggers if t in normalized]
        status = "✓ wins" if index == 0 else "  shadowed"
        print(f"{status}  {rule.name}  (triggers: {', '.join(hits)})")

    print(f"\nReply:\n{matches[0].response}")


def run_export_rules(path: str) -> None:
    """Write the built-in rule table to YAML."""
    from assistant.faq import default_rule_table, save_rule_table

    table = default_rule_table()
    save_rule_table(table, path)
    print(f"✓ Wrote {len(table.rules)} rules to {path}")


def run_web_ui(config: Config, host: str, port: int, debug: bool) -> None:
    """Run the web UI server."""
    from ui.web.app import run_app

    print(f"\nStarting Web UI on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")

    run_app(host=host, port=port, debug=debug, config=config)


def run_terminal_ui(config: Config) -> None:
    """Run the terminal UI."""
    from ui.terminal.app import run_tui

    print("\nStarting Terminal UI...")
    print("Press Ctrl+Q to exit\n")

    run_tui(config=config)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except AssistantError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    if args.rules:
        config.assistant.rules_file = args.rules
    if args.debug:
        config.debug = True

    # Web mode sets up logging itself
    if not args.web:
        setup_logging(
            log_dir=config.log_dir or None,
            log_level="DEBUG" if config.debug else "WARNING",
            console_output=not args.tui
        )

    try:
        if args.web:
            run_web_ui(
                config,
                host=args.host or config.ui.web_host,
                port=args.port or config.ui.web_port,
                debug=config.debug
            )
        elif args.tui:
            run_terminal_ui(config)
        elif args.ask is not None:
            run_ask(config, args.ask)
        elif args.explain is not None:
            run_explain(config, args.explain)
        elif args.export_rules:
            run_export_rules(args.export_rules)
        else:
            run_terminal_ui(config)
    except AssistantError as e:
        logger.error(f"Fatal error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")

    return 0


if __name__ == "__main__":
    sys.exit(main())
