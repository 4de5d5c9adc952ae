import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def rankings_bed():
    from rankings.domain import rankings

    bed = DomainFixture(rankings)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(rankings_bed):
    with rankings_bed.domain_context():
        yield
