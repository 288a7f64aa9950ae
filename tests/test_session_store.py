from datetime import timedelta

from src.adapters.outbound.in_memory_session_store import InMemorySessionStore
from src.domain.jira import JiraSession


def test_saved_session_is_returned(session_store, jira_session):
    session_store.save("sid", jira_session)

    assert session_store.get("sid") == jira_session
    assert session_store.get("other") is None


def test_session_expires_at_fixed_ttl_despite_activity(clock, jira_session):
    store = InMemorySessionStore(ttl_minutes=60, clock=clock)
    start = clock.now
    store.save("sid", jira_session)

    # 조회(활동)해도 만료 시각은 연장되지 않음
    clock.now = start + timedelta(minutes=30)
    assert store.get("sid") is not None
    clock.now = start + timedelta(minutes=59)
    assert store.get("sid") is not None
    clock.now = start + timedelta(minutes=60)
    assert store.get("sid") is None


def test_sessions_are_isolated(session_store, jira_session):
    other = JiraSession(
        base_url="https://other.atlassian.net", auth_header="Basic x", project_key="XYZ"
    )
    session_store.save("a", jira_session)
    session_store.save("b", other)

    session_store.delete("a")

    assert session_store.get("a") is None
    assert session_store.get("b") == other


def test_cleanup_expired(clock, jira_session):
    store = InMemorySessionStore(ttl_minutes=10, clock=clock)
    store.save("old", jira_session)
    clock.now = clock.now + timedelta(minutes=5)
    store.save("new", jira_session)
    clock.now = clock.now + timedelta(minutes=6)

    assert store.cleanup_expired() == 1
    assert store.get("new") == jira_session


def test_expiry_listeners_receive_expired_session_ids(clock, jira_session):
    store = InMemorySessionStore(ttl_minutes=60, clock=clock)
    expired: list[str] = []
    store.add_expiry_listener(expired.append)
    store.save("a", jira_session)
    store.save("b", jira_session)

    clock.now = clock.now + timedelta(minutes=60)
    assert store.get("a") is None
    assert store.cleanup_expired() == 1

    assert expired == ["a", "b"]


def test_delete_does_not_notify_expiry_listeners(session_store, jira_session):
    expired: list[str] = []
    session_store.add_expiry_listener(expired.append)
    session_store.save("a", jira_session)

    session_store.delete("a")

    assert expired == []
