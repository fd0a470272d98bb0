"""
Exceptions raised by the extraction pipeline.

ResolutionFailure and HeaderNotFound are recovered per section.
PageValidationFailure is surfaced to the caller once the run has finished.
"""


class ExtractionError(Exception):
    """Base class for section extraction errors."""


class ConfigError(ExtractionError):
    """Provider configuration is missing or malformed."""


class ResolutionFailure(ExtractionError):
    """A configured title has no matching ToC entry."""

    def __init__(self, title: str):
        super().__init__(f"Section {title!r} not found in ToC")
        self.title = title


class HeaderNotFound(ExtractionError):
    """A ToC-resolved section header never appears in the page text."""

    def __init__(self, title: str, nominal_page: int):
        super().__init__(f"Section {title!r} header not found starting from page {nominal_page}")
        self.title = title
        self.nominal_page = nominal_page


class PageValidationFailure(ExtractionError):
    """Assembled text does not open with the expected page numbers."""

    def __init__(self, key: str, title: str, expected_page: int, reason: str):
        super().__init__(f"Page number validation failed for {title!r}: {reason}")
        self.key = key
        self.title = title
        self.expected_page = expected_page
        self.reason = reason


class SectionValidationError(PageValidationFailure):
    """One or more sections failed page validation; carries the full result."""

    def __init__(self, failures: list[PageValidationFailure], result: dict):
        first = failures[0]
        super().__init__(first.key, first.title, first.expected_page, first.reason)
        self.failures = failures
        self.result = result

    def __str__(self) -> str:
        keys = ", ".join(f.key for f in self.failures)
        return f"{len(self.failures)} section(s) failed page validation: {keys}"
