"""Activity Logger — insert + refetch, bounded newest-first feed, swallowed failures."""

from worksync.core.domain_types import EntityType
from worksync.services.activity_logger import ActivityLogger


async def test_log_inserts_and_refreshes_feed(remote):
    logger = ActivityLogger(remote.activities, limit=20)
    await logger.log("user-ada", "created project", EntityType.PROJECT, "p1", "Apollo")
    assert len(logger.feed) == 1
    activity = logger.feed[0]
    assert activity.action == "created project"
    assert activity.entity_type == "project"
    assert activity.entity_name == "Apollo"


async def test_feed_is_newest_first_and_bounded(remote):
    logger = ActivityLogger(remote.activities, limit=3)
    for i in range(5):
        await logger.log("user-ada", "updated task", EntityType.TASK, f"t{i}")
    assert [a.entity_id for a in logger.feed] == ["t4", "t3", "t2"]


async def test_feed_is_scoped_to_actor(remote):
    logger = ActivityLogger(remote.activities)
    await logger.log("user-grace", "created project", EntityType.PROJECT, "p9")
    await logger.log("user-ada", "created project", EntityType.PROJECT, "p1")
    assert [a.user_id for a in logger.feed] == ["user-ada"]


async def test_failed_insert_is_swallowed_and_feed_kept(flaky_remote, caplog):
    logger = ActivityLogger(flaky_remote.activities)
    await logger.log("user-ada", "created project", EntityType.PROJECT, "p1")
    flaky_remote.activities.failing.add("insert")

    await logger.log("user-ada", "deleted project", EntityType.PROJECT, "p1")

    assert [a.action for a in logger.feed] == ["created project"]
    assert "Activity logging failed" in caplog.text


async def test_failed_refetch_is_swallowed(flaky_remote):
    logger = ActivityLogger(flaky_remote.activities)
    flaky_remote.activities.failing.add("select")
    await logger.log("user-ada", "created project", EntityType.PROJECT, "p1")
    assert logger.feed == ()


async def test_reset_clears_feed(remote):
    logger = ActivityLogger(remote.activities)
    await logger.log("user-ada", "created project", EntityType.PROJECT, "p1")
    logger.reset()
    assert logger.feed == ()


async def test_row_for_a_past_session_is_kept_out_of_the_feed(remote):
    logger = ActivityLogger(remote.activities)
    await logger.log("user-grace", "created project", EntityType.PROJECT, "p9")

    await logger.log(
        "user-ada", "created project", EntityType.PROJECT, "p1",
        is_current=lambda: False,
    )

    assert [a.user_id for a in logger.feed] == ["user-grace"]
    [row] = await remote.activities.select({"entity_id": "p1"})
    assert row["user_id"] == "user-ada"
