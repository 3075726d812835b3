"""Tests for ref resolution against a mirror."""

import pytest

from gitsource.errors import RevisionNotFoundError
from gitsource.git.mirror import MirrorCache
from gitsource.git.revision import (
    DEFAULT_REF,
    effective_ref,
    has_commit,
    resolve_revision,
)
from gitsource.model.description import BareDescription, GitDescription

from ..fakes import COMMIT_A, COMMIT_B, REPO_URL


@pytest.fixture
def mirror_path(tmp_path, runner):
    return MirrorCache(tmp_path / "git", runner).ensure_mirror(
        "pkg", BareDescription(url=REPO_URL)
    )


class TestEffectiveRef:
    @pytest.mark.short
    def test_bare_description_uses_head(self):
        assert effective_ref(BareDescription(url=REPO_URL)) == DEFAULT_REF

    @pytest.mark.short
    def test_mapping_without_ref_uses_head(self):
        assert effective_ref(GitDescription(url=REPO_URL)) == "HEAD"

    @pytest.mark.short
    def test_requested_ref(self):
        assert effective_ref(GitDescription(url=REPO_URL, ref="dev")) == "dev"

    @pytest.mark.short
    def test_resolved_ref_wins(self):
        description = GitDescription(url=REPO_URL, ref="dev", resolved_ref=COMMIT_A)
        assert effective_ref(description) == COMMIT_A


class TestResolveRevision:
    @pytest.mark.short
    def test_resolves_head(self, runner, mirror_path):
        commit = resolve_revision(runner, mirror_path, BareDescription(url=REPO_URL))
        assert commit == COMMIT_A

    @pytest.mark.short
    def test_resolves_branch(self, runner, mirror_path):
        description = GitDescription(url=REPO_URL, ref="dev")
        assert resolve_revision(runner, mirror_path, description) == COMMIT_B

    @pytest.mark.short
    def test_issues_verify_query(self, runner, mirror_path):
        resolve_revision(runner, mirror_path, GitDescription(url=REPO_URL, ref="dev"))
        args, working_dir = runner.calls[-1]
        assert args == ["rev-parse", "--verify", "dev^{commit}"]
        assert working_dir == mirror_path

    @pytest.mark.short
    def test_pinned_description_does_not_touch_mirror(self, runner, tmp_path):
        description = GitDescription(url=REPO_URL, ref="dev", resolved_ref="1234abc")

        commit = resolve_revision(runner, tmp_path / "nowhere", description)

        assert commit == "1234abc"
        assert runner.calls == []

    @pytest.mark.short
    def test_unknown_ref(self, runner, mirror_path):
        description = GitDescription(url=REPO_URL, ref="nope")
        with pytest.raises(RevisionNotFoundError) as excinfo:
            resolve_revision(runner, mirror_path, description)
        assert excinfo.value.ref == "nope"
        assert excinfo.value.url == REPO_URL

    @pytest.mark.short
    def test_missing_mirror(self, runner, tmp_path):
        with pytest.raises(RevisionNotFoundError):
            resolve_revision(
                runner, tmp_path / "nowhere", BareDescription(url=REPO_URL)
            )


class TestHasCommit:
    @pytest.mark.short
    def test_known_commit(self, runner, mirror_path):
        assert has_commit(runner, mirror_path, COMMIT_B)

    @pytest.mark.short
    def test_unknown_commit(self, runner, mirror_path):
        assert not has_commit(runner, mirror_path, "f" * 40)
