import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.install("-e", ".[test]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer and engine tests only."""
    _install(session)
    session.run(
        "pytest",
        "tests/shared/",
        "tests/rankings/domain/",
        "tests/forum/domain/",
        "tests/stats/",
    )


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_concurrency(session: nox.Session) -> None:
    """Run the multi-threaded integration tests."""
    _install(session)
    session.run("pytest", "-m", "integration", "tests/rankings/integration/", "tests/forum/integration/")
