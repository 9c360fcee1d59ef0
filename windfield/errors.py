# ABOUTME: Exception taxonomy for the wind-field resolution pipeline
# ABOUTME: Fetch, parse, and all-samples-failed errors share one base class

from typing import Optional


class WindFieldError(Exception):
    """Base class for recoverable pipeline failures."""


class UpstreamError(WindFieldError):
    """Raised when the forecast API call fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedDataError(WindFieldError):
    """Raised when required hourly arrays are absent, misaligned, or null."""


class NoSamplesError(WindFieldError):
    """Raised when every spatial sample for a site failed."""

    def __init__(self, site, failures=()):
        self.site = site
        self.failures = tuple(failures)
        super().__init__(f"All {len(self.failures)} samples failed for {site.name}")
