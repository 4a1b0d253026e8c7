#!/usr/bin/env python3
"""
Basic better-debug Usage Example

This example demonstrates:
- Hiding secrets and renaming fields on a dataclass
- Custom formatters, by callable and by registered name
- Excluding noisy fields
- Rendering undecorated classes with format_record

Usage:
    python examples/basic_usage.py
"""

from dataclasses import dataclass, field

from better_debug import ConfigError, better_debug, debug_field, format_record, formatter


@formatter("masked_email")
def masked_email(record):
    """Show only the domain of an email address."""
    if not record.email:
        return None
    return "***@" + record.email.partition("@")[2]


def flag_admin(record):
    return "ADMIN" if record.role == "admin" else None


@better_debug
@dataclass
class User:
    username: str
    email: str = debug_field(cust_formatter="masked_email", default="")
    role: str = debug_field(cust_formatter=flag_admin, cust_formatter_skip_if_none=True, default="")
    password: str = debug_field(secret=True, rename_to="Pwd", default="")
    history: list = debug_field(exclude=True, default_factory=list)


@dataclass
class Point:
    x: int
    y: int
    tags: list = field(default_factory=list)


def main():
    print("=" * 70)
    print("better-debug - Basic Usage Example")
    print("=" * 70)

    print("\n[Example 1] Decorated record")
    print("-" * 70)
    admin = User("alice", "alice@example.org", "admin", "hunter2", ["login"] * 100)
    print(repr(admin))

    print("\n[Example 2] Formatter returning None with skip_if_none")
    print("-" * 70)
    print(repr(User("bob", "", "viewer", "pa55")))

    print("\n[Example 3] Undecorated dataclass")
    print("-" * 70)
    print(format_record(Point(1, 2, ["origin"])))

    print("\n[Example 4] Invalid directives fail at definition time")
    print("-" * 70)
    try:

        @better_debug
        @dataclass
        class Broken:
            name: str = debug_field(cust_formatter_skip_if_none=True)

    except ConfigError as e:
        print(f"ConfigError: {e}")


if __name__ == "__main__":
    main()
