#!/usr/bin/env python3
"""
mindhooks CLI - Unified command-line interface

Usage:
    mindhooks init [--global]     Register the hooks (project or global settings)
    mindhooks status              Show memory store statistics and configuration
    mindhooks recent [--limit N]  List the most recent memories
    mindhooks version             Show version information
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path


def _open_mind():
    from mindhooks.config import load_config
    from mindhooks.hook_lib import project_dir
    from mindhooks.mind import Mind

    project = project_dir()
    config = load_config(project)
    return Mind.open(config, project=project), config


def cmd_init(args):
    """Register mindhooks in Claude Code settings."""
    from mindhooks.installer import main as installer_main
    installer_main(global_install=args.global_install)


def cmd_status(args):
    """Show memory store statistics and configuration."""
    from mindhooks.context_builder import format_file_size
    from mindhooks.hook_lib import count_tokens, tokenizer_name

    mind, config = _open_mind()
    stats = mind.stats()

    print("mindhooks Status")
    print("=" * 50)
    print(f"Memory file: {mind.memory_path}")
    print(f"Size: {format_file_size(stats.file_size)}")
    print(f"Memories: {stats.total_observations}")
    print(f"Sessions: {stats.total_sessions}")

    if stats.total_observations:
        oldest = datetime.fromtimestamp(stats.oldest_memory / 1000).strftime("%Y-%m-%d %H:%M")
        newest = datetime.fromtimestamp(stats.newest_memory / 1000).strftime("%Y-%m-%d %H:%M")
        print(f"Span: {oldest} .. {newest}")

    if stats.top_types:
        print("\nBy type:")
        for obs_type, count in sorted(stats.top_types.items(), key=lambda x: -x[1]):
            print(f"  {obs_type:<12} {count}")

    context = mind.get_context()
    recent_text = "\n".join(f"[{o.type.value}] {o.summary}" for o in context.recent_observations)
    print("\nSession-start context:")
    print(f"  Window: {len(context.recent_observations)} of max {config.max_context_observations}")
    print(f"  Budget: {context.token_count}/{config.max_context_tokens} (4 chars/token estimate)")
    print(f"  Tokenizer count of window: {count_tokens(recent_text)} ({tokenizer_name()})")

    print("\nConfiguration:")
    print(f"  auto_compress: {config.auto_compress}")
    print(f"  debug: {config.debug}")


def cmd_recent(args):
    """List the most recent memories."""
    from mindhooks.context_builder import format_timestamp

    mind, _ = _open_mind()
    observations = mind.recent(args.limit)
    if not observations:
        print("No memories yet.")
        return
    for obs in observations:
        tool = f" ({obs.tool})" if obs.tool else ""
        print(f"{format_timestamp(obs.timestamp):>10}  [{obs.type.value}] {obs.summary}{tool}")


def cmd_version(args):
    """Show version information."""
    from mindhooks import __version__
    from mindhooks.hook_lib import tokenizer_name

    print(f"mindhooks version {__version__}")
    print(f"Python {sys.version.split()[0]}")
    print(f"Tokenizer: {tokenizer_name()}")


def main():
    parser = argparse.ArgumentParser(
        prog="mindhooks",
        description="Persistent memory hooks for Claude Code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mindhooks init              Register hooks for current project
  mindhooks init --global     Register hooks for every project
  mindhooks status            Show memory statistics
  mindhooks recent --limit 5  Show the five newest memories
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init command
    init_parser = subparsers.add_parser("init", help="Register hooks for current project")
    init_parser.add_argument("--global", dest="global_install", action="store_true",
                             help="Install globally instead of project-local")

    # status command
    subparsers.add_parser("status", help="Show memory statistics and configuration")

    # recent command
    recent_parser = subparsers.add_parser("recent", help="List the most recent memories")
    recent_parser.add_argument("--limit", type=int, default=20, help="Number of memories to show")

    # version command
    subparsers.add_parser("version", help="Show version information")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    # Dispatch to command handlers
    commands = {
        "init": cmd_init,
        "status": cmd_status,
        "recent": cmd_recent,
        "version": cmd_version,
    }

    handler = commands.get(args.command)
    if handler:
        try:
            handler(args)
        except KeyboardInterrupt:
            print("\nAborted.")
            sys.exit(1)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
