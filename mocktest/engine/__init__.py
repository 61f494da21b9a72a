"""Pure scoring core: no I/O, no framework imports.

Everything here takes and returns plain dataclasses so that the same code
scores a live submission, re-scores a stored attempt, or runs in a test.
"""
