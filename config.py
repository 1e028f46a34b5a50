import os
import sys

from dotenv import load_dotenv

# Load .env but don't override existing environment variables
# This allows test runs to set values before import
load_dotenv(".env", override=False)


def _parse_bool(name: str, default: bool) -> bool:
    """
    Read a boolean environment variable.

    Accepts true/false, 1/0, yes/no (case-insensitive). Exits with a clear
    message on anything else, so misconfiguration is caught at startup.
    """
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    normalized = raw.strip().lower()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Valid values: true, false, 1, 0, yes, no", file=sys.stderr)
    print(f"Current value: {raw}\n", file=sys.stderr)
    sys.exit(1)


def _parse_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
        print(f"Expected an integer, got: {raw}\n", file=sys.stderr)
        sys.exit(1)


# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_DIR = os.environ.get("LOG_DIR", "logs")
LOG_RETENTION_DAYS = _parse_int("LOG_RETENTION_DAYS", 7)
LOG_MASK_CLIENT_IDS = _parse_bool("LOG_MASK_CLIENT_IDS", False)

# Discount engine
# Per-rule/per-condition trace events (DEBUG level)
DISCOUNT_TRACE_ENABLED = _parse_bool("DISCOUNT_TRACE_ENABLED", True)
# Stacked rules are not bounded by default, final subtotal may go negative
DISCOUNT_CLAMP_FINAL_SUBTOTAL = _parse_bool("DISCOUNT_CLAMP_FINAL_SUBTOTAL", False)
# Decimal places for display helpers only, the engine never rounds
DISCOUNT_AMOUNT_PRECISION = _parse_int("DISCOUNT_AMOUNT_PRECISION", 2)
