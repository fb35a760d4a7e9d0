"""Exception hierarchy for json_merge."""


class JsonMergeError(Exception):
    """Base class for all json_merge errors."""


class ConfigurationError(JsonMergeError):
    """Filter configuration is invalid. Raised at construction time only."""


class FieldReferenceError(JsonMergeError, ValueError):
    """A field reference string could not be parsed."""


class TimestampParserError(JsonMergeError, ValueError):
    """A value could not be parsed into a Timestamp."""
