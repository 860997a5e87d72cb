"""Ordered legal rule pipeline.

Responsibilities:
  - Define rule steps and their canonical precedence order.
  - Must not resolve catalog entries; the calculator supplies them.
"""
