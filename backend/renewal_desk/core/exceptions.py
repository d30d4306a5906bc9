"""Domain errors raised by the services and mapped to HTTP responses by the API."""


class RenewalDeskError(Exception):
    """Base class for errors raised by renewal desk services."""


class MalformedUploadError(RenewalDeskError):
    """The uploaded file could not be read as a delimited text file with a header row."""
