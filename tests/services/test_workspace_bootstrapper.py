"""Workspace Bootstrapper — at most one default workspace per actor."""

import asyncio

import pytest

from worksync.core.errors import RemoteUnavailableError
from worksync.services.workspace_bootstrapper import WorkspaceBootstrapper


async def test_creates_default_workspace_for_new_actor(remote, actor):
    bootstrapper = WorkspaceBootstrapper(remote.workspaces)
    workspaces = await bootstrapper.ensure_workspaces(actor)
    assert len(workspaces) == 1
    assert workspaces[0].name == "Ada's Workspace"
    assert workspaces[0].color == "#4f46e5"


async def test_bootstrapping_twice_creates_one_workspace(remote, actor):
    bootstrapper = WorkspaceBootstrapper(remote.workspaces)
    first = await bootstrapper.ensure_workspaces(actor)
    second = await bootstrapper.ensure_workspaces(actor)
    assert [w.id for w in first] == [w.id for w in second]
    assert len(await remote.workspaces.select({"owner_id": actor.id})) == 1


async def test_overlapping_calls_create_one_workspace(remote, actor):
    bootstrapper = WorkspaceBootstrapper(remote.workspaces)
    await asyncio.gather(
        bootstrapper.ensure_workspaces(actor),
        bootstrapper.ensure_workspaces(actor),
    )
    assert len(await remote.workspaces.select({"owner_id": actor.id})) == 1


async def test_existing_workspaces_are_returned_oldest_first(remote, actor):
    await remote.workspaces.insert({"name": "First", "owner_id": actor.id})
    await remote.workspaces.insert({"name": "Second", "owner_id": actor.id})
    workspaces = await WorkspaceBootstrapper(remote.workspaces).ensure_workspaces(actor)
    assert [w.name for w in workspaces] == ["First", "Second"]


async def test_other_actors_workspaces_are_ignored(remote, actor, other_actor):
    await remote.workspaces.insert({"name": "Grace's", "owner_id": other_actor.id})
    workspaces = await WorkspaceBootstrapper(remote.workspaces).ensure_workspaces(actor)
    assert [w.name for w in workspaces] == ["Ada's Workspace"]


async def test_uses_configured_color(remote, actor):
    bootstrapper = WorkspaceBootstrapper(remote.workspaces, default_color="#000000")
    [workspace] = await bootstrapper.ensure_workspaces(actor)
    assert workspace.color == "#000000"


async def test_locks_are_dropped_once_no_call_is_in_flight(remote, actor, other_actor):
    bootstrapper = WorkspaceBootstrapper(remote.workspaces)
    await asyncio.gather(
        bootstrapper.ensure_workspaces(actor),
        bootstrapper.ensure_workspaces(actor),
        bootstrapper.ensure_workspaces(other_actor),
    )
    await bootstrapper.ensure_workspaces(actor)
    assert bootstrapper._locks == {}
    assert bootstrapper._waiters == {}


async def test_failed_call_releases_its_lock(flaky_remote, actor):
    bootstrapper = WorkspaceBootstrapper(flaky_remote.workspaces)
    flaky_remote.workspaces.failing.add("select")
    with pytest.raises(RemoteUnavailableError):
        await bootstrapper.ensure_workspaces(actor)
    assert bootstrapper._locks == {}

    flaky_remote.workspaces.failing.clear()
    [workspace] = await bootstrapper.ensure_workspaces(actor)
    assert workspace.name == "Ada's Workspace"
