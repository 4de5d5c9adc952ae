"""Forum thread activity — process-wide tracker registry."""

_tracker_instance = None


def get_activity_tracker():
    """Return the process-wide ThreadActivityTracker (singleton)."""
    global _tracker_instance
    if _tracker_instance is None:
        from forum.activity.tracker import ThreadActivityTracker

        _tracker_instance = ThreadActivityTracker()
    return _tracker_instance


def reset_activity_tracker():
    """Reset the tracker singleton (useful for testing)."""
    global _tracker_instance
    _tracker_instance = None
