"""Deadline computation orchestration.

Responsibilities:
  - Provide the calculator, batch outcomes and result verification.
  - Must not read holiday storage directly; goes through the calendar oracle.
"""
