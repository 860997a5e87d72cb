"""Calendar oracle and holiday cache.

Responsibilities:
  - Answer business-day questions from holiday snapshots and recess windows.
  - Must not apply deadline rules; the pipeline owns those.
"""
