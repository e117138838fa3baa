class LinkValidationError(ValueError):
    """A shortcut is missing one of its required fields"""

class LinkNotFoundError(LookupError):
    """No shortcut with the requested id"""

class ExternalServiceError(Exception):
    """The completion service failed or replied with something unusable.

    Never surfaced to API callers: the resolvers log it and return their
    fallback value instead.
    """

class CompletionServiceError(ExternalServiceError):
    pass

class CompletionParseError(ExternalServiceError):
    pass
