from markshelf.backend.feed import ACTION_INSERT, ChangeEvent, ChangeFeed


def _event(owner, action=ACTION_INSERT, collection="bookmarks"):
    return ChangeEvent(collection, action, {"id": 1, "owner": owner})


def test_publish_only_reaches_matching_filters():
    feed = ChangeFeed()
    mine, theirs = [], []
    feed.subscribe("bookmarks", {"owner": 1}, mine.append)
    feed.subscribe("bookmarks", {"owner": 2}, theirs.append)

    delivered = feed.publish(_event(1))

    assert delivered == 1
    assert len(mine) == 1 and theirs == []


def test_other_collections_are_ignored():
    feed = ChangeFeed()
    seen = []
    feed.subscribe("bookmarks", {}, seen.append)

    feed.publish(_event(1, collection="users"))

    assert seen == []


def test_close_is_idempotent_and_stops_delivery():
    feed = ChangeFeed()
    seen = []
    subscription = feed.subscribe("bookmarks", {"owner": 1}, seen.append)

    subscription.close()
    subscription.close()
    feed.publish(_event(1))

    assert subscription.closed
    assert seen == []
    assert feed.subscriber_count() == 0


def test_subscription_as_context_manager():
    feed = ChangeFeed()
    with feed.subscribe("bookmarks", {}, lambda event: None):
        assert feed.subscriber_count("bookmarks") == 1
    assert feed.subscriber_count("bookmarks") == 0


def test_failing_callback_does_not_stop_delivery(caplog):
    feed = ChangeFeed()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    feed.subscribe("bookmarks", {}, broken)
    feed.subscribe("bookmarks", {}, seen.append)

    assert feed.publish(_event(1)) == 1
    assert len(seen) == 1
    assert "Change callback failed" in caplog.text
