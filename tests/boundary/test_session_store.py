"""
Test suite for SessionStore CRUD operations.

Uses the in-memory handle from conftest for behavioral checks and a
MagicMock handle where request details are asserted.

System role: Verification of session persistence layer
"""

from unittest.mock import MagicMock, patch

import pytest
from borneo import Consistency, PutOption, RequestTimeoutException, Version

from session_manager.boundary.nosql.load_fixtures import FixtureLoadError, load_fixtures
from session_manager.boundary.nosql.session_store import SessionStore
from session_manager.core.exceptions import (
    ConcurrentUpdateError,
    InvalidPatchError,
    NotFoundError,
    RequestTimeoutError,
)


@pytest.fixture
def store(fake_handle) -> SessionStore:
    return SessionStore(fake_handle)


class TestCreateAndGet:
    """Test suite for create() and get_by_key()."""

    def test_create_then_get_should_return_user_name(self, store) -> None:
        user_id = store.create(100, "alice")

        assert store.get_by_key(100, user_id) == {"userName": "alice"}

    def test_create_should_assign_fresh_ids(self, store) -> None:
        first = store.create(100, "alice")
        second = store.create(100, "alice")

        assert first != second

    def test_get_missing_key_should_raise_not_found(self, store) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            store.get_by_key(100, 999)

        assert exc_info.value.details == {"account_number": 100, "user_id": 999}

    def test_create_should_not_send_user_id(self) -> None:
        handle = MagicMock()
        handle.put.return_value.get_generated_value.return_value = 7

        user_id = SessionStore(handle).create(100, "alice")

        assert user_id == 7
        request = handle.put.call_args.args[0]
        assert request.get_table_name() == "persistent_session"
        assert request.get_value() == {
            "account_number": 100,
            "session_info": {"userName": "alice"},
        }

    def test_get_should_use_eventual_consistency(self) -> None:
        handle = MagicMock()
        handle.get.return_value.get_value.return_value = {
            "account_number": 1,
            "user_id": 2,
            "session_info": {"userName": "bob"},
        }

        SessionStore(handle).get_by_key(1, 2)

        request = handle.get.call_args.args[0]
        assert request.get_key() == {"account_number": 1, "user_id": 2}
        assert request.get_consistency() == Consistency.EVENTUAL

    def test_timeout_should_raise_request_timeout_error(self) -> None:
        handle = MagicMock()
        handle.get.side_effect = RequestTimeoutException("timed out")

        with pytest.raises(RequestTimeoutError) as exc_info:
            SessionStore(handle).get_by_key(1, 2)

        assert exc_info.value.details["operation"] == "get"


class TestListUsers:
    """Test suite for list_users_in_account()."""

    def test_should_return_users_of_one_account(self, store) -> None:
        alice = store.create(100, "alice")
        bob = store.create(100, "bob")
        store.create(200, "carol")

        users = store.list_users_in_account(100)

        assert len(users) == 2
        assert {"userName": "alice", "userID": alice} in users
        assert {"userName": "bob", "userID": bob} in users

    def test_empty_account_should_return_empty_list(self, store) -> None:
        assert store.list_users_in_account(404) == []

    def test_should_collect_every_page(self) -> None:
        handle = MagicMock()
        handle.query.side_effect = [
            MagicMock(get_results=MagicMock(return_value=[{"userName": "a", "userID": 1}])),
            MagicMock(get_results=MagicMock(return_value=[{"userName": "b", "userID": 2}])),
        ]

        with patch(
            "session_manager.boundary.nosql.session_store.QueryRequest.is_done",
            side_effect=[False, True],
        ):
            users = SessionStore(handle).list_users_in_account(100)

        assert users == [{"userName": "a", "userID": 1}, {"userName": "b", "userID": 2}]
        statement = handle.query.call_args.args[0].get_statement()
        assert "WHERE p.account_number = 100" in statement


class TestUpdate:
    """Test suite for update() merge-patch semantics."""

    def test_null_should_delete_and_new_key_should_insert(self, store) -> None:
        user_id = store.create(100, "alice")

        merged = store.update(100, user_id, {"userName": None, "favoriteColor": "blue"})

        assert merged == {"favoriteColor": "blue"}
        assert store.get_by_key(100, user_id) == {"favoriteColor": "blue"}

    def test_should_accept_raw_json_patch(self, store) -> None:
        user_id = store.create(100, "alice")

        merged = store.update(100, user_id, b'{"cart": {"items": [1, 2]}}')

        assert merged == {"userName": "alice", "cart": {"items": [1, 2]}}

    def test_invalid_patch_should_not_touch_store(self, store, fake_handle) -> None:
        user_id = store.create(100, "alice")

        with pytest.raises(InvalidPatchError):
            store.update(100, user_id, "{not json")

        assert store.get_by_key(100, user_id) == {"userName": "alice"}

    def test_missing_session_should_raise_not_found(self, store) -> None:
        with pytest.raises(NotFoundError):
            store.update(100, 1, {"a": 1})

    def test_write_should_be_conditional_on_read_version(self) -> None:
        handle = MagicMock()
        handle.get.return_value.get_value.return_value = {"session_info": {"a": 1}}
        read_version = MagicMock(spec=Version)
        handle.get.return_value.get_version.return_value = read_version

        SessionStore(handle).update(5, 6, {"b": 2})

        request = handle.put.call_args.args[0]
        assert request.get_option() == PutOption.IF_VERSION
        assert request.get_match_version() is read_version
        assert request.get_value() == {
            "account_number": 5,
            "user_id": 6,
            "session_info": {"a": 1, "b": 2},
        }

    def test_lost_race_should_retry_on_fresh_read(self, store, fake_handle) -> None:
        user_id = store.create(100, "alice")
        raced = []

        def concurrent_writer(handle, request):
            if not raced:
                raced.append(True)
                document, _ = handle.rows[(100, user_id)]
                handle.rows[(100, user_id)] = (
                    {**document, "theme": "dark"},
                    handle._new_version(),
                )

        fake_handle.before_put = concurrent_writer

        merged = store.update(100, user_id, {"favoriteColor": "blue"})

        assert merged == {"userName": "alice", "theme": "dark", "favoriteColor": "blue"}
        assert store.get_by_key(100, user_id) == merged

    def test_should_give_up_after_max_attempts(self, fake_handle) -> None:
        store = SessionStore(fake_handle, update_max_attempts=2)
        user_id = store.create(100, "alice")

        def always_race(handle, request):
            document, _ = handle.rows[(100, user_id)]
            handle.rows[(100, user_id)] = (document, handle._new_version())

        fake_handle.before_put = always_race

        with pytest.raises(ConcurrentUpdateError) as exc_info:
            store.update(100, user_id, {"favoriteColor": "blue"})

        assert exc_info.value.details["attempts"] == 2


class TestPutByKey:
    """Test suite for put_by_key()."""

    def test_should_replace_document(self, store) -> None:
        user_id = store.create(100, "alice")

        store.put_by_key(100, user_id, {"userName": "alice2"})

        assert store.get_by_key(100, user_id) == {"userName": "alice2"}


class TestLoadFixtures:
    """Test suite for load_fixtures()."""

    def test_should_write_one_row_per_file(self, store, tmp_path) -> None:
        (tmp_path / "a.json").write_text(
            '{"account_number": 3, "user_id": 2001, "session_info": {"userName": "julie"}}'
        )
        (tmp_path / "b.json").write_text(
            '{"account_number": 3, "session_info": {"userName": "sam"}}'
        )

        written = load_fixtures(store, tmp_path)

        assert len(written) == 2
        assert (3, 2001) in written
        assert store.get_by_key(3, 2001) == {"userName": "julie"}
        names = {user["userName"] for user in store.list_users_in_account(3)}
        assert names == {"julie", "sam"}

    def test_should_reject_invalid_file(self, store, tmp_path) -> None:
        (tmp_path / "broken.json").write_text("{")

        with pytest.raises(FixtureLoadError):
            load_fixtures(store, tmp_path)

    def test_should_require_existing_directory(self, store, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_fixtures(store, tmp_path / "missing")
