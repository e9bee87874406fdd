"""
test_descriptor.py - Per-run descriptor derivation against scripted queries.
"""

import re
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from repostamp_core.errors import DescriptorIncompleteError
from repostamp_core.models import DescriptorBuilder, RepoDescriptor
from repostamp_core.vcs.base import VcsQuery
from repostamp_ops.descriptor import RepoQueries, derive_descriptor

from conftest import ScriptedExecutor, make_config, scripted_repo

SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+")


def _derive(executor, tmp_path: Path, environ=None, **fallbacks) -> RepoDescriptor:
    return derive_descriptor(tmp_path, executor, make_config(**fallbacks), environ=environ or {})


class TestDescribeShapes:
    def test_untagged_clean(self, tmp_path: Path):
        """Untagged output is rebuilt as <tag>-<count>-g<hash>, not kept as the bare hash."""
        descriptor = _derive(scripted_repo(describe="d844df9", commit="d844df9", count="12"), tmp_path)

        assert descriptor.version == "NOTAG-12-gd844df9"
        assert descriptor.semver == "0.0.0"
        assert descriptor.is_dirty == "false"

    def test_untagged_dirty(self, tmp_path: Path):
        """The rebuilt untagged version carries the dirty suffix."""
        executor = scripted_repo(describe="b4a3a83-DIRTY", commit="b4a3a83", count="3", status=" M setup.py")
        descriptor = _derive(executor, tmp_path)

        assert descriptor.version == "NOTAG-3-gb4a3a83-DIRTY"
        assert descriptor.semver == "0.0.0"
        assert descriptor.is_dirty == "true"

    def test_tagged_clean(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(describe="0.1.5-42-g652c397"), tmp_path)

        assert descriptor.version == "0.1.5-42-g652c397"
        assert descriptor.semver == "0.1.5"
        assert descriptor.is_dirty == "false"

    def test_tagged_dirty(self, tmp_path: Path):
        executor = scripted_repo(describe="0.1.5-42-g652c397-DIRTY", status="?? notes.txt")
        descriptor = _derive(executor, tmp_path)

        assert descriptor.version == "0.1.5-42-g652c397-DIRTY"
        assert descriptor.semver == "0.1.5"
        assert descriptor.is_dirty == "true"

    def test_four_part_tag_keeps_version_and_falls_back_for_semver(self, tmp_path: Path):
        executor = scripted_repo(describe="1.2.3.4-5-gabc1234")
        descriptor = _derive(executor, tmp_path)

        assert descriptor.version == "1.2.3.4-5-gabc1234"
        assert descriptor.semver == "0.0.0"
        assert [d.field for d in descriptor.diagnostics] == ["semver"]
        assert VcsQuery.COMMIT_COUNT not in executor.calls

    def test_tagged_output_does_not_query_commit_count(self, tmp_path: Path):
        executor = scripted_repo(describe="0.1.5-42-g652c397")
        _derive(executor, tmp_path)
        assert VcsQuery.COMMIT_COUNT not in executor.calls

    def test_describe_failure_uses_version_and_semver_fallbacks(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(describe=None), tmp_path)

        assert descriptor.version == "NOVERSION"
        assert descriptor.semver == "0.0.0"
        assert {d.field for d in descriptor.diagnostics} == {"version", "semver"}

    def test_describe_failure_does_not_block_other_fields(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(describe=None), tmp_path)

        assert descriptor.branch == "develop"
        assert descriptor.commit == "652c397"
        assert descriptor.remote == "git@example.com:acme/app.git"

    def test_describe_receives_configured_dirty_string(self, tmp_path: Path):
        executor = scripted_repo()
        _derive(executor, tmp_path, dirty_string="+dirty")
        index = executor.calls.index(VcsQuery.DESCRIBE)
        assert executor.dirty_strings[index] == "+dirty"


class TestBranchPrecedence:
    def test_release_branch_semver_beats_describe(self, tmp_path: Path):
        executor = scripted_repo(branch="release/2.3.0", describe="1.9.9-5-gabc123")
        descriptor = _derive(executor, tmp_path)

        assert descriptor.stage == "release"
        assert descriptor.semver == "2.3.0"
        assert descriptor.version == "1.9.9-5-gabc123"

    def test_release_branch_semver_survives_describe_failure(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(branch="release/2.3.0", describe=None), tmp_path)

        assert descriptor.semver == "2.3.0"
        assert descriptor.version == "NOVERSION"
        assert "semver" not in {d.field for d in descriptor.diagnostics}

    def test_release_branch_semver_survives_untagged_describe(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(branch="release/2.3.0", describe="d844df9"), tmp_path)
        assert descriptor.semver == "2.3.0"

    def test_non_semver_release_branch_defers_to_describe(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(branch="release/next", describe="1.9.9-5-gabc123"), tmp_path)

        assert descriptor.stage == "release"
        assert descriptor.semver == "1.9.9"

    def test_ci_override_can_produce_release_stage(self, tmp_path: Path):
        descriptor = _derive(
            scripted_repo(branch="HEAD"),
            tmp_path,
            environ={"CI_COMMIT_REF_NAME": "release/4.0.1"},
        )

        assert descriptor.branch == "release/4.0.1"
        assert descriptor.stage == "release"
        assert descriptor.semver == "4.0.1"


class TestFallbacks:
    def test_branch_failure_forces_stage_fallback(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(branch=None), tmp_path)

        assert descriptor.branch == "NOBRANCH"
        assert descriptor.stage == "NOSTAGE"

    def test_branch_fallback_that_looks_like_a_stage_is_not_classified(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(branch=None), tmp_path, branch="master")

        assert descriptor.branch == "master"
        assert descriptor.stage == "NOSTAGE"

    def test_everything_fails(self, tmp_path: Path):
        descriptor = _derive(ScriptedExecutor(), tmp_path)

        assert descriptor.branch == "NOBRANCH"
        assert descriptor.commit == "NOCOMMIT"
        assert descriptor.is_dirty == "NOSTATUS"
        assert descriptor.remote == "NOREMOTE"
        assert descriptor.semver == "0.0.0"
        assert descriptor.stage == "NOSTAGE"
        assert descriptor.version == "NOVERSION"

    def test_failures_are_recorded_with_original_error(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(remote=None), tmp_path)

        [diagnostic] = descriptor.diagnostics
        assert diagnostic.field == "remote"
        assert diagnostic.error == "fatal: remote-url not available"
        assert diagnostic.fallback == "NOREMOTE"

    def test_commit_count_failure_in_reconstruction(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(describe="d844df9", commit="d844df9", count=None), tmp_path)
        assert descriptor.version == "NOTAG-NOCOUNT-gd844df9"

    def test_unexpected_branch_uses_stage_fallback(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(branch="hotfix/login"), tmp_path)

        assert descriptor.branch == "hotfix/login"
        assert descriptor.stage == "NOSTAGE"
        assert [d.field for d in descriptor.diagnostics] == ["stage"]


class TestLifecycle:
    def test_no_semver_leak_between_runs(self, tmp_path: Path):
        tagged = tmp_path / "tagged"
        untagged = tmp_path / "untagged"
        tagged.mkdir()
        untagged.mkdir()
        config = make_config()

        first = derive_descriptor(tagged, scripted_repo(describe="3.1.4-1-gaaaaaaa"), config, environ={})
        second = derive_descriptor(untagged, scripted_repo(describe="bbbbbbb", commit="bbbbbbb"), config, environ={})

        assert first.semver == "3.1.4"
        assert second.semver == "0.0.0"
        assert second.version == "NOTAG-42-gbbbbbbb"

    def test_no_semver_leak_after_release_branch_run(self, tmp_path: Path):
        config = make_config()
        derive_descriptor(tmp_path, scripted_repo(branch="release/9.9.9"), config, environ={})
        later = derive_descriptor(tmp_path, scripted_repo(describe="ccccccc"), config, environ={})
        assert later.semver == "0.0.0"

    def test_location_is_absolute(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "repo").mkdir()
        descriptor = derive_descriptor("repo", scripted_repo(), make_config(), environ={})
        assert descriptor.location == str((tmp_path / "repo").resolve())

    def test_descriptor_is_immutable(self, tmp_path: Path):
        descriptor = _derive(scripted_repo(), tmp_path)
        with pytest.raises(Exception):
            descriptor.semver = "9.9.9"  # type: ignore[misc]

    def test_builder_refuses_incomplete_descriptor(self):
        builder = DescriptorBuilder()
        builder.set("location", "/tmp/repo")
        with pytest.raises(DescriptorIncompleteError) as excinfo:
            builder.build()
        assert "semver" in excinfo.value.missing
        assert "location" not in excinfo.value.missing


def test_repo_queries_bind_repository(tmp_path: Path):
    executor = scripted_repo()
    queries = RepoQueries(executor, tmp_path, "-DIRTY")

    assert queries.current_branch().value == "develop"
    assert queries.commit_count().value == "42"
    assert executor.calls == [VcsQuery.CURRENT_BRANCH, VcsQuery.COMMIT_COUNT]


_maybe = lambda strategy: st.one_of(st.none(), strategy)  # noqa: E731
_hashes = st.text(alphabet="0123456789abcdef", min_size=7, max_size=10)
_semvers = st.tuples(*(st.integers(0, 99) for _ in range(3))).map(lambda t: "%d.%d.%d" % t)
_describes = st.one_of(
    _hashes,
    _hashes.map(lambda h: h + "-DIRTY"),
    st.tuples(_semvers, st.integers(0, 500), _hashes).map(lambda t: f"{t[0]}-{t[1]}-g{t[2]}"),
    st.tuples(_semvers, st.integers(0, 500), _hashes).map(lambda t: f"{t[0]}-{t[1]}-g{t[2]}-DIRTY"),
    st.text(max_size=20),
)
_branches = st.one_of(
    st.sampled_from(["develop", "master", "HEAD", "feature/x", "release/2.3.0", "release/rc", "main"]),
    st.text(max_size=20),
)


class TestProperties:
    @given(
        branch=_maybe(_branches),
        describe=_maybe(_describes),
        status=_maybe(st.sampled_from(["", " M a.py", "?? b"])),
        count=_maybe(st.integers(0, 1000).map(str)),
        commit=_maybe(_hashes),
    )
    def test_invariants_hold_for_any_query_results(self, branch, describe, status, count, commit):
        executor = scripted_repo(branch=branch, describe=describe, status=status, count=count, commit=commit)
        descriptor = derive_descriptor(Path("."), executor, make_config(), environ={})

        assert descriptor.version
        assert descriptor.semver
        assert SEMVER_RE.match(descriptor.semver) or descriptor.semver == "0.0.0"
        assert descriptor.is_dirty in {"true", "false", "NOSTATUS"}
        if branch is None:
            assert descriptor.stage == "NOSTAGE"
        assert descriptor.stage in {"feature", "develop", "master", "release", "NOSTAGE"}

    @given(branch_semver=_semvers, describe_semver=_semvers, distance=st.integers(0, 50), commit=_hashes)
    def test_release_branch_always_wins(self, branch_semver, describe_semver, distance, commit):
        executor = scripted_repo(
            branch=f"release/{branch_semver}",
            describe=f"{describe_semver}-{distance}-g{commit}",
        )
        descriptor = derive_descriptor(Path("."), executor, make_config(), environ={})
        assert descriptor.semver == branch_semver

    @given(describe=_maybe(_describes))
    def test_semver_fallback_is_exact(self, describe):
        config = make_config(semver="none")
        descriptor = derive_descriptor(Path("."), scripted_repo(describe=describe), config, environ={})
        assert descriptor.semver == "none" or re.fullmatch(r"\d+\.\d+\.\d+", descriptor.semver)
