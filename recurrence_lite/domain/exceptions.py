"""Exception hierarchy for the Recurrence Lite outer surfaces.

The expansion engine itself never raises for well-formed values; these
exceptions cover the edges that read untrusted input: config files and
command-line arguments.
"""


class RecurrenceLiteError(Exception):
    """Base exception for all Recurrence Lite errors.

    The CLI catches this base class and exits with status 2.
    """


class RecurrenceConfigError(RecurrenceLiteError):
    """Configuration could not be loaded.

    Raised when:
    - The config file is not valid YAML/JSON
    - The top level of the config file is not a mapping
    """


class RecurrenceInputError(RecurrenceLiteError):
    """User-supplied rule or range input could not be parsed.

    Raised when:
    - A weekday name or index is not recognized
    - A date string is not ISO 8601
    - A recurrence type or monthly pattern name is unknown
    """
