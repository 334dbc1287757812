from collections.abc import Generator
from contextlib import contextmanager

from botocore.exceptions import BotoCoreError, ClientError


class PagerError(Exception):
    """Base exception for all pagerstate errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class PagerConfigurationError(PagerError):
    """Raised when a pager is configured with invalid options."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, original_error)


class ContractError(PagerError):
    """Base for failures of the caller-supplied load/search/delete functions."""

    operation = "contract"

    def __init__(
        self, subject: str, message: str | None = None, original_error: Exception | None = None
    ) -> None:
        msg = message or f"{self.operation.capitalize()} failed for '{subject}'"
        super().__init__(msg, original_error)
        self.subject = subject


class LoadError(ContractError):
    """Raised when the load function fails."""

    operation = "load"


class SearchError(ContractError):
    """Raised when the search function fails."""

    operation = "search"


class DeleteError(ContractError):
    """Raised when the delete function fails."""

    operation = "delete"


class CacheStoreError(PagerError):
    """Raised when the backing session store is unavailable."""

    def __init__(
        self, message: str = "Session store unavailable", original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)


@contextmanager
def handle_contract_errors(
    error_cls: type[ContractError], subject: str
) -> Generator[None, None, None]:
    """
    Context manager that catches any failure raised by a caller-supplied
    contract and raises the matching ContractError subclass. An error already
    of that subclass passes through; one of another contract kind is wrapped.

    Args:
        error_cls: LoadError, SearchError or DeleteError
        subject: The pager subject, for better error messages

    Usage:
        with handle_contract_errors(LoadError, subject="images"):
            result = await backend.load(config)
    """
    try:
        yield
    except error_cls:
        raise
    except Exception as e:
        raise error_cls(
            subject=subject,
            message=f"{error_cls.operation.capitalize()} failed for '{subject}': {e!s}",
            original_error=e,
        ) from e


@contextmanager
def handle_store_errors(store_name: str | None = None) -> Generator[None, None, None]:
    """
    Context manager that catches botocore errors raised by a session store
    backend and raises CacheStoreError.

    Args:
        store_name: Optional store/table name for better error messages
    """
    try:
        yield
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        error_message = e.response.get("Error", {}).get("Message", str(e))
        raise CacheStoreError(
            message=f"Session store '{store_name or 'unknown'}' error ({error_code}): {error_message}",
            original_error=e,
        ) from e
    except BotoCoreError as e:
        raise CacheStoreError(
            message=f"Session store '{store_name or 'unknown'}' unreachable: {e!s}",
            original_error=e,
        ) from e
