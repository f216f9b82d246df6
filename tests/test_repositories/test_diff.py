"""Tests for LCA lookup and branch diffs."""

from __future__ import annotations

import pytest

from pughrepo.repositories.diff import find_lca
from pughrepo.repositories.matrix_repo import MatrixRepository
from pughrepo.resilience.errors import ReferenceNotFoundError
from tests.conftest import criterion_added, tool_added


async def test_lca_of_fork_is_fork_point(repo: MatrixRepository) -> None:
    fork_point = await repo.commit("main", [criterion_added("c1")], "u")
    await repo.fork("feature", "main")
    feature_tip = await repo.commit("feature", [criterion_added("c2")], "u")
    main_tip = await repo.commit("main", [tool_added("t9")], "u")

    lca = await find_lca(feature_tip.id, main_tip.id, repo.objects)
    assert lca == fork_point.id
    # Symmetric
    assert (
        await find_lca(main_tip.id, feature_tip.id, repo.objects)
        == fork_point.id
    )


async def test_lca_of_ancestor_is_ancestor(repo: MatrixRepository) -> None:
    first = await repo.commit("main", [criterion_added("c1")], "u")
    second = await repo.commit("main", [criterion_added("c2")], "u")
    assert await find_lca(first.id, second.id, repo.objects) == first.id


async def test_diff_scenario(repo: MatrixRepository) -> None:
    """main{c1, o1} -> fork feature -> feature{c2}."""
    c1, o1 = criterion_added("c1"), tool_added("o1")
    fork_point = await repo.commit("main", [c1, o1], "u")
    await repo.fork("feature", "main")
    c2 = criterion_added("c2")
    await repo.commit("feature", [c2], "u")

    diff = await repo.diff("feature", "main")

    assert diff.common_ancestor_id == fork_point.id
    assert diff.source_events == [c2]
    assert diff.target_events == []
    assert [c.id for c in diff.source_state.criteria] == ["c1", "c2"]
    assert [c.id for c in diff.target_state.criteria] == ["c1"]
    assert diff.source_branch == "feature"
    assert diff.target_branch == "main"


async def test_diff_disjoint_histories(repo: MatrixRepository) -> None:
    a = criterion_added("a")
    b = criterion_added("b")
    await repo.commit("left", [a], "u")
    await repo.commit("right", [b], "u")

    diff = await repo.diff("left", "right")

    assert diff.common_ancestor_id is None
    assert diff.source_events == [a]
    assert diff.target_events == [b]


async def test_diff_missing_branch(repo: MatrixRepository) -> None:
    await repo.commit("main", [], "u")
    with pytest.raises(ReferenceNotFoundError):
        await repo.diff("ghost", "main")
