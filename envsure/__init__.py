"""
envsure — Validate and compare .env files.

Architecture: Parser (text → ParsedEnvFile) → Comparator (check / diff / explain)
Philosophy:  The example file is the source of truth. Report every anomaly, never hide one.
"""

__version__ = "1.0.0"
