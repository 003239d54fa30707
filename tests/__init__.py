"""Test package marker for the emailbox suites.

What:
  Marks ``tests`` as a package so pytest can import ``tests.unit`` and
  ``tests.e2e`` modules explicitly.

Invariants & Safety:
  - The file must remain side-effect free.
"""
