#!/usr/bin/env python3
"""
CLI tool for managing feature flags through the REST backend.

Usage:
    flagctl list                            # List all flags
    flagctl get <flag_name>                 # Show one flag
    flagctl set <flag_name> <true|false>    # Enable/disable an existing flag
    flagctl create <flag_name> [true|false] # Create a new flag
    flagctl delete <flag_name> [--yes]      # Delete a flag
"""

import sys
import argparse
from typing import List, Optional

from ..services import FeatureFlag, FlagsApiClient, FlagsApiError

TRUE_VALUES = ('true', 'on', 'yes', '1')
FALSE_VALUES = ('false', 'off', 'no', '0')


def parse_bool(value: str) -> bool:
    """
    Parse a CLI boolean.

    Raises:
        ValueError: Value is not one of the accepted spellings
    """
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value '{value}' (use true or false)")


def print_section(title: str):
    """Print section header."""
    print(f"\n{'=' * 70}")
    print(f" {title}")
    print('=' * 70)


def _status(enabled: bool) -> str:
    return "✓ ENABLED" if enabled else "✗ DISABLED"


def _find(client: FlagsApiClient, flag_name: str) -> Optional[FeatureFlag]:
    for flag in client.list_flags():
        if flag.name == flag_name:
            return flag
    return None


def list_flags(client: FlagsApiClient) -> bool:
    flags = client.list_flags()

    if not flags:
        print("\nNo feature flags found")
        print("Use 'create' command to add new flags")
        return True

    print_section("Feature Flags")

    width = max(len(flag.name) for flag in flags)
    for flag in flags:
        print(f"  {flag.name.ljust(width)}  {_status(flag.is_enabled)}")

    print(f"\n  {len(flags)} flags, {sum(1 for f in flags if f.is_enabled)} enabled\n")
    return True


def get_flag(client: FlagsApiClient, flag_name: str) -> bool:
    flag = _find(client, flag_name)

    if flag is None:
        print(f"\nFeature flag '{flag_name}' not found")
        print("Use 'list' to see all available flags")
        return False

    print_section(f"Feature Flag: {flag_name}")
    print(f"  Status: {_status(flag.is_enabled)}")
    print()
    return True


def set_flag(client: FlagsApiClient, flag_name: str, value: str) -> bool:
    enabled = parse_bool(value)

    if _find(client, flag_name) is None:
        print(f"\nFeature flag '{flag_name}' not found")
        print("Use 'create' command to create new flags")
        return False

    client.update_flag(flag_name, enabled)

    print(f"\n✓ Updated feature flag '{flag_name}'")
    print(f"  Status: {'ENABLED' if enabled else 'DISABLED'}")
    print()
    return True


def create_flag(client: FlagsApiClient, flag_name: str, value: Optional[str] = None) -> bool:
    enabled = parse_bool(value) if value is not None else False

    if _find(client, flag_name) is not None:
        print(f"\nFeature flag '{flag_name}' already exists")
        print("Use 'set' command to update it")
        return False

    client.create_flag(FeatureFlag(name=flag_name, is_enabled=enabled))

    print(f"\n✓ Created feature flag '{flag_name}'")
    print(f"  Status: {'ENABLED' if enabled else 'DISABLED'}")
    print()
    return True


def delete_flag(client: FlagsApiClient, flag_name: str, confirm: bool = False) -> bool:
    if not confirm:
        response = input(f"\nAre you sure you want to delete flag '{flag_name}'? (yes/no): ")
        if response.lower() != 'yes':
            print("Aborted")
            return False

    client.delete_flag(flag_name)

    print(f"\n✓ Deleted feature flag '{flag_name}'")
    print()
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='flagctl',
        description="Feature flags management tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  list                                List all feature flags
  get <flag_name>                     Show one flag
  set <flag_name> <true|false>        Enable or disable a flag
  create <flag_name> [true|false]     Create new flag (disabled by default)
  delete <flag_name>                  Delete flag (requires confirmation)

Examples:
  flagctl list
  flagctl get dark_mode
  flagctl set dark_mode true
  flagctl create new_checkout false
  flagctl delete old_feature --yes
  flagctl --api-url http://flags.internal:3000/flags list
        """
    )

    parser.add_argument(
        'command',
        choices=['list', 'get', 'set', 'create', 'delete'],
        help='Command to execute'
    )

    parser.add_argument(
        'flag_name',
        nargs='?',
        help='Feature flag name'
    )

    parser.add_argument(
        'value',
        nargs='?',
        help='true or false (for set/create commands)'
    )

    parser.add_argument(
        '--api-url',
        type=str,
        help='Flags endpoint URL (default: FLAGS_API_URL setting)'
    )

    parser.add_argument(
        '--yes',
        action='store_true',
        help='Skip confirmation prompt (for delete command)'
    )

    return parser


def main(argv: Optional[List[str]] = None, client: Optional[FlagsApiClient] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != 'list' and not args.flag_name:
        print(f"Error: flag_name is required for '{args.command}' command", file=sys.stderr)
        parser.print_help()
        return 1

    if args.command == 'set' and not args.value:
        print("Error: flag_name and value are required for 'set' command", file=sys.stderr)
        parser.print_help()
        return 1

    if client is None:
        client = FlagsApiClient(base_url=args.api_url)

    try:
        if args.command == 'list':
            ok = list_flags(client)
        elif args.command == 'get':
            ok = get_flag(client, args.flag_name)
        elif args.command == 'set':
            ok = set_flag(client, args.flag_name, args.value)
        elif args.command == 'create':
            ok = create_flag(client, args.flag_name, args.value)
        else:
            ok = delete_flag(client, args.flag_name, confirm=args.yes)

    except (FlagsApiError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
