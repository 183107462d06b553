class EmptyQueryError(Exception):
    """Raise if GraphQL Query returns no results, or returns errors instead of data"""

    pass


class TooManyLoopsError(Exception):
    """Raise if a loop runs too many times"""

    pass


class BadConfigException(Exception):
    pass


class MissingEnvironmentVariableException(Exception):
    pass


class InvalidPeriodError(Exception):
    """Raise if a distribution period ends before it starts"""

    pass


class GaugeDistributionError(Exception):
    """Raise if a gauge's distribution pipeline fails and the run is set to fail fast"""

    pass
