import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def forum_bed():
    from forum.domain import forum

    bed = DomainFixture(forum)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(forum_bed):
    with forum_bed.domain_context():
        yield
