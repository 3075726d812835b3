import io
import logging

import pytest

from gitsource.source import GitSource

from .fakes import COMMIT_A, COMMIT_B, REPO_URL, FakeGitRunner
from .repos import make_upstream_repo


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gitsource")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture
def runner():
    """Fake git runner serving one repository with main and dev branches."""
    return FakeGitRunner(
        {REPO_URL: {"HEAD": COMMIT_A, "main": COMMIT_A, "dev": COMMIT_B}}
    )


@pytest.fixture
def source(tmp_path, runner):
    return GitSource(cache_root=tmp_path / "git", runner=runner)


@pytest.fixture
def upstream_repo(tmp_path):
    """
    Create a local upstream repository with two commits.

    The first commit is tagged ``v1``; HEAD points at the second one.
    """
    return make_upstream_repo(tmp_path / "upstream")
