class ScraperError(Exception):
    """Base class for every failure the scraper reports to a caller."""


class FetchError(ScraperError):
    """Transport failure: timeout, DNS, refused connection or non-2xx status."""

    def __init__(self, message, url=None, status=None):
        super().__init__(message)
        self.url = url
        self.status = status


class InvalidRegisterResponse(ScraperError):
    """The page came back but does not look like an FMCSA Register."""


class NoEntriesFound(ScraperError):
    """The register was parsed but yielded no entries."""


class MissingDateError(ScraperError):
    pass


class CarrierNotFound(ScraperError):
    pass
