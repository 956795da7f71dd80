"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the presale program.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Tokens and payments are moved, never created
2. atomicity.py - A rejected operation changes nothing
3. idempotency.py - Duplicate and stale submissions are refused
4. invariants.py - Hardcap, stage order and one-time finalization

These tests use hypothesis for property-based testing.
"""
