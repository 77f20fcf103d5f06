"""
Unit tests for the Supabase client and stores. No network access: the
stores get a fake session and the client gets patched ``requests``.
"""

import pytest
import requests

from models import Point, Size, Transform, Sticker, Task, TaskStatus
from services.stores import StoreError
from services.supabase_client import SupabaseSession, SupabaseError, AuthError
from services.supabase_store import (
    SupabaseStickerStore, SupabaseTaskStore, sticker_to_row, sticker_from_row, task_to_row,
    STICKERS_TABLE, TASKS_TABLE,
)


class FakeSession:
    """Stands in for SupabaseSession; records calls and returns canned rows."""

    def __init__(self):
        self.calls = []
        self.rows = []
        self.fail = False
        self.next_id = 7

    def _call(self, *args):
        self.calls.append(args)
        if self.fail:
            raise SupabaseError("HTTP 500: boom")

    def select(self, table, order="inserted_at.asc"):
        self._call("select", table)
        return self.rows

    def insert(self, table, row):
        self._call("insert", table, row)
        return {**row, "id": self.next_id, "inserted_at": "2026-01-01T10:00:00Z"}

    def update(self, table, row_id, fields):
        self._call("update", table, row_id, fields)
        return {**fields, "id": row_id, "inserted_at": "2026-01-01T10:00:00Z"}

    def delete(self, table, row_id):
        self._call("delete", table, row_id)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


class TestRowConversion:
    """Tests for row conversion helpers."""

    def test_sticker_to_row_rounds(self):
        sticker = Sticker(
            url="u", id="3",
            transform=Transform(position=Point(100.4, 99.6), size=Size(210.6, 140.2), rotation=45),
            aspect_ratio=1.5,
        )
        row = sticker_to_row(sticker)
        assert row == {
            "url": "u", "position_x": 100, "position_y": 100,
            "rotation": 45, "scale": 1.0, "width": 211, "height": 140,
        }

    def test_sticker_from_row_derives_aspect(self):
        sticker = sticker_from_row({
            "id": 9, "url": "u", "position_x": 10, "position_y": 20,
            "rotation": 30, "scale": 1, "width": 200, "height": 100,
        })
        assert sticker.id == "9"
        assert sticker.position == Point(10, 20)
        assert sticker.aspect_ratio == 2.0
        assert sticker.rotation == 30

    def test_task_to_row(self):
        task = Task(description="Buy milk", status=TaskStatus.COMPLETED)
        assert task_to_row(task) == {
            "description": "Buy milk", "deadline": None,
            "status": "completed", "photo": None,
        }


class TestSupabaseStickerStore:
    """Tests for SupabaseStickerStore."""

    def test_insert_uses_server_id(self, session, sample_sticker):
        stored = SupabaseStickerStore(session).insert(sample_sticker)
        assert stored.id == "7"
        assert stored.transform == sample_sticker.transform

    def test_save_updates_transform_only(self, session, sample_sticker):
        SupabaseStickerStore(session).save(sample_sticker)
        op, table, row_id, fields = session.calls[0]
        assert (op, table, row_id) == ("update", STICKERS_TABLE, "s1")
        assert "url" not in fields
        assert fields["width"] == 150

    def test_load_all(self, session):
        session.rows = [{
            "id": 1, "url": "u", "position_x": 0, "position_y": 0,
            "rotation": 0, "scale": 1, "width": 150, "height": 100,
        }]
        stickers = SupabaseStickerStore(session).load_all()
        assert [s.id for s in stickers] == ["1"]

    def test_ratio_column_survives_rounding(self, session):
        session.rows = [{
            "id": 1, "url": "u", "position_x": 0, "position_y": 0,
            "rotation": 0, "scale": 1, "width": 211, "height": 140,
            "aspect_ratio": 1.5,
        }]
        store = SupabaseStickerStore(session)
        sticker = store.load_all()[0]
        assert sticker.aspect_ratio == 1.5

        store.save(sticker)
        assert session.calls[-1][3]["aspect_ratio"] == 1.5

    def test_no_ratio_column_written_without_one(self, session, sample_sticker):
        session.rows = [{
            "id": 1, "url": "u", "position_x": 0, "position_y": 0,
            "rotation": 0, "scale": 1, "width": 150, "height": 100,
        }]
        store = SupabaseStickerStore(session)
        store.load_all()
        store.insert(sample_sticker)
        store.save(sample_sticker)
        assert "aspect_ratio" not in session.calls[1][2]
        assert "aspect_ratio" not in session.calls[2][3]

    def test_malformed_row(self, session):
        session.rows = [{"id": 1}]
        with pytest.raises(StoreError):
            SupabaseStickerStore(session).load_all()

    def test_errors_become_store_errors(self, session, sample_sticker):
        session.fail = True
        store = SupabaseStickerStore(session)
        with pytest.raises(StoreError):
            store.save(sample_sticker)
        with pytest.raises(StoreError):
            store.delete("s1")


class TestSupabaseTaskStore:
    """Tests for SupabaseTaskStore."""

    def test_insert_returns_stored_task(self, session):
        task = SupabaseTaskStore(session).insert(Task(description="Buy milk"))
        assert task.id == "7"
        assert task.inserted_at.year == 2026
        assert session.calls[0][1] == TASKS_TABLE

    def test_update(self, session):
        task = Task(id="5", description="Buy milk", status=TaskStatus.COMPLETED)
        stored = SupabaseTaskStore(session).update(task)
        assert stored.status is TaskStatus.COMPLETED
        assert session.calls[0][:3] == ("update", TASKS_TABLE, "5")

    def test_load_failure(self, session):
        session.fail = True
        with pytest.raises(StoreError):
            SupabaseTaskStore(session).load_all()


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no JSON")
        return self._body


class TestSupabaseSession:
    """Tests for the REST client."""

    def test_sign_in(self, monkeypatch):
        def fake_post(url, headers=None, json=None, timeout=None):
            assert url.endswith("/auth/v1/token?grant_type=password")
            assert headers["apikey"] == "anon"
            return FakeResponse(200, {"access_token": "tok", "user": {"id": "u1", "email": "a@b.c"}})

        monkeypatch.setattr(requests, "post", fake_post)
        session = SupabaseSession("https://demo.supabase.co/", "anon")
        assert session.sign_in("a@b.c", "pw") == "u1"
        assert session.signed_in
        assert session.email == "a@b.c"

    def test_sign_in_rejected(self, monkeypatch):
        monkeypatch.setattr(
            requests, "post",
            lambda *a, **kw: FakeResponse(400, {"error_description": "Invalid login credentials"}),
        )
        session = SupabaseSession("https://demo.supabase.co", "anon")
        with pytest.raises(AuthError, match="Invalid login credentials"):
            session.sign_in("a@b.c", "bad")
        assert not session.signed_in

    def test_requests_need_a_session(self):
        session = SupabaseSession("https://demo.supabase.co", "anon")
        with pytest.raises(AuthError):
            session.select("todos")

    def test_select_sends_token_and_order(self, monkeypatch):
        seen = {}

        def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
            seen.update(method=method, url=url, headers=headers, params=params)
            return FakeResponse(200, [{"id": 1}])

        monkeypatch.setattr(requests, "request", fake_request)
        session = SupabaseSession("https://demo.supabase.co", "anon")
        session.access_token, session.user_id = "tok", "u1"

        assert session.select("todos") == [{"id": 1}]
        assert seen["url"] == "https://demo.supabase.co/rest/v1/todos"
        assert seen["headers"]["Authorization"] == "Bearer tok"
        assert seen["params"]["order"] == "inserted_at.asc"

    def test_update_filters_by_id(self, monkeypatch):
        seen = {}

        def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
            seen.update(method=method, params=params, headers=headers)
            return FakeResponse(200, [{"id": 3, "rotation": 15}])

        monkeypatch.setattr(requests, "request", fake_request)
        session = SupabaseSession("https://demo.supabase.co", "anon")
        session.access_token, session.user_id = "tok", "u1"

        assert session.update("stickers", "3", {"rotation": 15})["rotation"] == 15
        assert seen["method"] == "patch"
        assert seen["params"] == {"id": "eq.3"}
        assert seen["headers"]["Prefer"] == "return=representation"

    def test_sign_out_clears_session_on_failure(self, monkeypatch):
        def fake_post(*args, **kwargs):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(requests, "post", fake_post)
        session = SupabaseSession("https://demo.supabase.co", "anon")
        session.access_token, session.user_id = "tok", "u1"
        session.sign_out()
        assert not session.signed_in
