"""Domain-specific exceptions for the revenue aggregation engine.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from RevenueAPIError for easy catching.
"""


class RevenueAPIError(Exception):
    """Base exception for all revenue_core errors.

    Users can catch this exception to handle any error raised by the
    package, whether it comes from validation, the store or the aggregator.
    """

    pass


class ConfigError(RevenueAPIError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Required configuration is missing
    """

    pass


class ValidationError(RevenueAPIError, ValueError):
    """Raised when a query filter or store input is rejected.

    This exception is raised when:
    - The granularity is not one of yearly, monthly, weekly, daily
    - A date cannot be parsed, or start_date is after end_date
    - Product ids are not integers
    - A product or sale is created with invalid values
    """

    pass


class DataQualityError(RevenueAPIError):
    """Raised when rows handed to the aggregator are malformed.

    This exception is raised when:
    - Required columns are missing from the input frame
    - An amount is negative or not a finite number
    """

    pass


class StoreError(RevenueAPIError):
    """Raised when the sales store cannot be read or written."""

    pass


class ProductNotFoundError(StoreError):
    """Raised when a sale references a product that does not exist."""

    pass
