"""
Known-bad reference implementations.

These modules are deliberately vulnerable and exist so tests (and static
analysis tools) can detect the flaws. Never import them from application code.
"""
