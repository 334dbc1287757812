import hashlib
import logging

# Create the library logger
logger = logging.getLogger("pagerstate")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())


def redact_keyword(keyword: str | None) -> str:
    """
    Redacts a search keyword for logging.
    hashes the value to allow correlation without revealing what users typed.
    """
    if keyword is None:
        return "<none>"
    try:
        return hashlib.sha256(str(keyword).encode("utf-8")).hexdigest()[:8]
    except Exception:
        return "<redaction_failed>"
