"""Exceptions for the few failures that are not handled by lenient fallbacks."""


class SmartFinanceError(Exception):
    """Base exception for dashboard errors"""
    pass


class UnsupportedFileError(SmartFinanceError, ValueError):
    """Uploaded file kind cannot be imported"""
    pass


class QueryServiceError(SmartFinanceError):
    """Hosted question-answering service failed or is not configured"""
    pass
