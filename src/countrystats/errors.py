"""Error taxonomy for country stats."""


class CountryStatsError(Exception):
    """Base class for countrystats errors."""


class DataSourceUnavailable(CountryStatsError):
    """The stats row set could not be produced or fetched.

    Always covers the whole row set: callers never receive partial results.
    """

    user_message = "Failed to load country stats."


class StaleResponseDiscarded(CountryStatsError):
    """A superseded fetch finished after a newer one was started."""


class MalformedValue(CountryStatsError, ValueError):
    """A single cell value cannot be read under its column kind."""
