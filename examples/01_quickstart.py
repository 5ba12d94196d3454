#!/usr/bin/env python3
"""Example: Quickstart — roba

Minimal working example: declare collectives, derive actors, and check
permissions on collections and owned instances.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install roba
"""
from __future__ import annotations

import roba
from roba import Actor, Collective, Permission, Resource


def main() -> None:
    print(f"roba version: {roba.__version__}")

    # Step 1: Declare resources and collectives
    accounts = Resource.collection("accounts")
    posts = Resource.collection("posts")
    users = Collective("users", [Permission.protected(accounts), Permission.protected(posts)])
    admins = Collective.inherit_from(users, "admins", [Permission.all(accounts)])

    # Step 2: Derive actors and their resources
    bob = Actor.derived_from(users, "bob")
    billy = Actor.derived_from(admins, "billy-admin")
    bob_account = Resource.instance_of(accounts, "abcde", bob)
    billy_account = Resource.instance_of(accounts, "12345", billy)

    # Step 3: Check permissions
    checks = [
        ("users create accounts", users.can.create(accounts)),
        ("admins create accounts", admins.can.create(accounts)),
        ("bob update own account", bob.can.update(bob_account)),
        ("bob update billy's account", bob.can.update(billy_account)),
        ("bob read posts unless flagged", bob.can.read(posts, lambda *_: True)),
    ]
    print("\nPermission checks:")
    for label, allowed in checks:
        print(f"  [{'ALLOW' if allowed else 'DENY'}] {label}")

    # Step 4: Encode and decode the policy
    encoded = bob.permissions_list
    print(f"\nEncoded permissions ({len(encoded)} scope strings):")
    for scope_string in encoded:
        print(f"  {scope_string}")
    assert roba.parse_permissions_list(encoded) == bob.permissions


if __name__ == "__main__":
    main()
