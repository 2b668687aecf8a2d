"""Exceptions raised by FastSQS."""


class FastSQSException(Exception):
    """Base exception for every FastSQS error."""


class ConfigurationError(FastSQSException):
    """Raised when the consumer cannot be built from the given configuration."""


class ConfigurationNotSetError(ConfigurationError):
    """Raised when no configuration object is given."""


class QueueNotSetError(ConfigurationError):
    """Raised when the queue url is empty."""


class AWSConfigurationError(ConfigurationError):
    """Raised when the AWS credentials or region cannot be resolved."""


class QueueTransportError(FastSQSException):
    """Raised when a receive or delete call against the queue fails."""


class FastSQSCLIException(FastSQSException):
    pass
