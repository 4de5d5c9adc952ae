"""Rating aggregation and ranking engine — process-wide service registry."""

_service_instance = None


def get_rating_service():
    """Return the process-wide RatingService (singleton).

    Built from the process-wide settings on first access.
    """
    global _service_instance
    if _service_instance is None:
        from rankings.engine.service import RatingService

        _service_instance = RatingService()
    return _service_instance


def reset_rating_service():
    """Reset the service singleton (useful for testing)."""
    global _service_instance
    _service_instance = None
