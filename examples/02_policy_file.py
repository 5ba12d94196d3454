#!/usr/bin/env python3
"""Example: YAML policy files

Loads collectives and actors from a YAML policy document and checks
permissions, including scoped collectives.

Usage:
    python examples/02_policy_file.py

Requirements:
    pip install roba
"""
from __future__ import annotations

import textwrap

from roba import PolicyConfigError, PolicyLoader, Resource

_POLICY = textwrap.dedent(
    """
    version: "1.0"
    description: Multi-tenant invoicing
    collectives:
      - name: staff
        scope: tenant-a
        permissions:
          - {resource: invoices, preset: private}
        scopes:
          - reports.read.any
      - name: managers
        inherits: staff
        permissions:
          - {resource: invoices, preset: all}
    actors:
      - {id: alice, collective: staff}
      - {id: mona, collective: managers}
    """
)


def main() -> None:
    loader = PolicyLoader(strict=True)
    policy = loader.load_from_yaml_string(_POLICY)
    print(f"Loaded policy: {policy.description}")

    alice = policy.actor("alice")
    mona = policy.actor("mona")
    assert alice is not None and mona is not None

    alice_invoice = Resource.instance("invoices", "inv-1", "alice", "tenant-a")
    other_tenant = Resource.instance("invoices", "inv-2", "alice", "tenant-b")

    print(f"  alice update own invoice:       {alice.can.update(alice_invoice)}")
    print(f"  alice update other tenant:      {alice.can.update(other_tenant)}")
    print(f"  mona delete alice's invoice:    {mona.can.delete(alice_invoice)}")

    # Step 2: Invalid policies fail at load time, never at check time
    try:
        loader.load_from_yaml_string("collectives:\n  - {name: x, scopes: [reports.read]}\n")
    except PolicyConfigError as exc:
        print(f"\nRejected policy: {exc}")


if __name__ == "__main__":
    main()
