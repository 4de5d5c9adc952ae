"""In-memory aggregate repository — default backend for development and tests.

A single internal lock makes each call atomic; per-item serialization is the
AggregateStore's job, not this adapter's.
"""

import threading
from collections import Counter

from shared.errors import Conflict, NotFound

from rankings.engine.port import Aggregate, AggregateRepository, ReviewEntry


class InMemoryAggregateRepository(AggregateRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._aggregates: dict[str, Aggregate] = {}
        self._reviews: dict[tuple[str, str], ReviewEntry] = {}
        self._reviews_by_item: dict[str, set[str]] = {}
        self._authors: Counter = Counter()

    def load(self, item_id):
        aggregate = self._aggregates.get(item_id)
        if aggregate is None:
            raise NotFound({"item_id": [f"Item {item_id} not found"]})
        return aggregate

    def insert(self, aggregate):
        with self._lock:
            if aggregate.item_id in self._aggregates:
                raise Conflict({"item_id": [f"Item {aggregate.item_id} already exists"]})
            self._aggregates[aggregate.item_id] = aggregate
            self._reviews_by_item[aggregate.item_id] = set()

    def commit(self, aggregate, expected_version, review_key=None, review=None):
        with self._lock:
            stored = self._aggregates.get(aggregate.item_id)
            if stored is None:
                raise Conflict({"item_id": [f"Item {aggregate.item_id} was removed during the update"]})
            if stored.version != expected_version:
                raise Conflict(
                    {"version": [f"Expected version {expected_version}, found {stored.version}"]}
                )

            if review_key is not None:
                self._write_review(review_key, review)
            self._aggregates[aggregate.item_id] = aggregate

    def _write_review(self, review_key, review):
        author_id, item_id = review_key
        existing = self._reviews.pop(review_key, None)
        if existing is not None:
            self._reviews_by_item[item_id].discard(author_id)
            self._authors[author_id] -= 1
            if self._authors[author_id] <= 0:
                del self._authors[author_id]

        if review is not None:
            self._reviews[review_key] = review
            self._reviews_by_item[item_id].add(author_id)
            self._authors[author_id] += 1

    def delete(self, item_id, expected_version):
        with self._lock:
            stored = self._aggregates.get(item_id)
            if stored is None or stored.version != expected_version:
                raise Conflict({"item_id": [f"Item {item_id} changed during removal"]})

            for author_id in list(self._reviews_by_item.get(item_id, ())):
                self._write_review((author_id, item_id), None)
            del self._aggregates[item_id]
            self._reviews_by_item.pop(item_id, None)

    def active_review(self, author_id, item_id):
        return self._reviews.get((author_id, item_id))

    def reviews_for(self, item_id):
        with self._lock:
            authors = sorted(self._reviews_by_item.get(item_id, ()))
            return [self._reviews[(author_id, item_id)] for author_id in authors]

    def recent_reviews(self, limit):
        with self._lock:
            rows = sorted(self._reviews.values(), key=lambda r: (r.created_at, r.review_id), reverse=True)
        return rows[:limit]

    def item_ids(self):
        with self._lock:
            return sorted(self._aggregates)

    def review_count(self):
        with self._lock:
            return len(self._reviews)

    def distinct_author_count(self):
        with self._lock:
            return len(self._authors)
