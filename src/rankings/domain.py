"""Rankings bounded context — RPG catalogue ratings, reviews and rankings.

Maintains per-item rating aggregates under concurrent review writes, derives
Bayesian-adjusted scores, and serves ranked views per genre and overall. The
Protean layer (RpgItem aggregate, review commands) is the entry point; the
engine package holds the concurrency-safe core.
"""

from protean.domain import Domain
from shared.logging_config import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
rankings = Domain(name="rankings")
