"""Tests for MatrixRepository commit, checkout, log, fork and tag."""

from __future__ import annotations

import pytest

from pughrepo.constants import RefType
from pughrepo.events.projection import project_events
from pughrepo.repositories.matrix_repo import MatrixRepository
from pughrepo.resilience.errors import (
    ImmutableRefError,
    ReferenceNotFoundError,
)
from tests.conftest import criterion_added, score_set, tool_added


class TestCommit:
    async def test_first_commit_is_root(self, repo: MatrixRepository) -> None:
        commit = await repo.commit("main", [criterion_added("c1")], "u")
        assert commit.parent_ids == []
        ref = await repo.resolve("main")
        assert ref.commit_id == commit.id
        assert ref.type == RefType.BRANCH

    async def test_second_commit_links_parent(
        self, repo: MatrixRepository
    ) -> None:
        first = await repo.commit("main", [criterion_added("c1")], "u")
        second = await repo.commit(
            "main", [tool_added("t1")], "u", "add tool"
        )
        assert second.parent_ids == [first.id]
        assert second.comment == "add tool"

    async def test_empty_commit_allowed(self, repo: MatrixRepository) -> None:
        commit = await repo.commit("main", [], "u", "Initial commit")
        assert commit.event_ids == []
        assert await repo.checkout("main") == []

    async def test_commit_onto_tag_rejected(
        self, repo: MatrixRepository
    ) -> None:
        await repo.commit("main", [criterion_added("c1")], "u")
        await repo.tag("v1", "main")
        event = tool_added("t1")
        with pytest.raises(ImmutableRefError):
            await repo.commit("v1", [event], "u")
        assert await repo.objects.get_event(event.id) is None


class TestCheckout:
    async def test_events_in_commit_order(
        self, repo: MatrixRepository
    ) -> None:
        e1 = criterion_added("c1")
        e2 = tool_added("t1")
        e3 = score_set("t1", "c1", 7)
        await repo.commit("main", [e1, e2], "u")
        await repo.commit("main", [e3], "u")
        assert await repo.checkout("main") == [e1, e2, e3]

    async def test_unknown_branch_is_empty(
        self, repo: MatrixRepository
    ) -> None:
        assert await repo.checkout("nope") == []

    async def test_checkout_tag(self, repo: MatrixRepository) -> None:
        e1 = criterion_added("c1")
        await repo.commit("main", [e1], "u")
        await repo.tag("v1", "main")
        await repo.commit("main", [tool_added("t1")], "u")
        assert await repo.checkout("v1") == [e1]


class TestLog:
    async def test_newest_first_with_limit(
        self, repo: MatrixRepository
    ) -> None:
        commits = [
            await repo.commit("main", [criterion_added(f"c{i}")], "u")
            for i in range(4)
        ]
        log = await repo.log("main")
        assert [c.id for c in log] == [c.id for c in reversed(commits)]

        limited = await repo.log("main", limit=2)
        assert [c.id for c in limited] == [commits[3].id, commits[2].id]

    async def test_unknown_branch(self, repo: MatrixRepository) -> None:
        assert await repo.log("nope") == []

    async def test_merge_commit_ancestors_listed_once(
        self, repo: MatrixRepository
    ) -> None:
        await repo.commit("main", [criterion_added("c1")], "u")
        await repo.fork("feature", "main")
        await repo.commit("feature", [tool_added("t1")], "u")
        await repo.commit("main", [tool_added("t2")], "u")
        await repo.merge("feature", "main", "theirs", "u")

        log = await repo.log("main")
        ids = [c.id for c in log]
        assert len(ids) == len(set(ids)) == 4
        assert log[0].is_merge


class TestForkAndRefs:
    async def test_fork_shares_tip_without_copying(
        self, repo: MatrixRepository
    ) -> None:
        await repo.commit("main", [criterion_added("c1")], "u")
        ref = await repo.fork("feature", "main")
        main = await repo.resolve("main")
        assert ref.commit_id == main.commit_id

    async def test_fork_missing_source(self, repo: MatrixRepository) -> None:
        with pytest.raises(ReferenceNotFoundError) as exc_info:
            await repo.fork("feature", "nope")
        assert exc_info.value.name == "nope"
        assert "does not exist" in str(exc_info.value)

    async def test_branches_are_isolated(
        self, repo: MatrixRepository
    ) -> None:
        await repo.commit("main", [criterion_added("c1")], "u")
        await repo.fork("feature", "main")
        await repo.commit("feature", [criterion_added("c2")], "u")

        main_state = project_events(await repo.checkout("main"))
        feature_state = project_events(await repo.checkout("feature"))
        assert [c.id for c in main_state.criteria] == ["c1"]
        assert [c.id for c in feature_state.criteria] == ["c1", "c2"]

    async def test_list_branches_excludes_tags(
        self, repo: MatrixRepository
    ) -> None:
        await repo.commit("main", [], "u")
        await repo.fork("zeta", "main")
        await repo.fork("alpha", "main")
        await repo.tag("v1", "main")
        assert await repo.list_branches() == ["alpha", "main", "zeta"]

    async def test_delete_ref_keeps_commits(
        self, repo: MatrixRepository
    ) -> None:
        commit = await repo.commit("main", [criterion_added("c1")], "u")
        await repo.fork("feature", "main")
        await repo.delete_ref("feature")
        assert await repo.list_branches() == ["main"]
        assert await repo.objects.get_commit(commit.id) == commit
