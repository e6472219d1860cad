"""会话状态测试"""

import os
from datetime import datetime, timezone

import pytest

from replayt.core.exceptions import EmptyCollectionError, ParseError
from replayt.core.filetime import datetime_to_ns
from replayt.core.models import UNNAMED_COLLECTION
from replayt.core.session import Session, SessionOptions

UTC = timezone.utc


@pytest.fixture
def folder(tmp_path):
    root = tmp_path / "album"
    (root / "sub").mkdir(parents=True)
    for name in ("a.jpg", "sub/b.jpg"):
        path = root / name
        path.write_text(name)
        ns = datetime_to_ns(datetime(2015, 6, 1, tzinfo=UTC))
        os.utime(path, ns=(ns, ns))
    return root


class TestSession:

    def test_new_session_is_empty(self):
        session = Session()
        assert session.is_empty
        assert session.status() == {
            "collection_name": UNNAMED_COLLECTION,
            "collected_count": 0,
            "replayed_count": 0,
        }

    def test_collect_updates_status(self, folder):
        session = Session(options=SessionOptions(recursive=True))
        assert session.collect(folder) == 2
        assert session.status()["collection_name"] == "album"
        assert session.status()["collected_count"] == 2

    def test_collect_replaces_previous_snapshot(self, folder):
        session = Session(options=SessionOptions(recursive=True))
        session.collect(folder)
        session.options.recursive = False
        session.collect(folder)
        assert list(session.snapshot) == ["a.jpg"]

    def test_failed_open_keeps_previous_snapshot(self, folder, tmp_path):
        session = Session()
        session.collect(folder)
        broken = tmp_path / "broken.tsv"
        broken.write_text("a.jpg\t2021-01-01T00:00:00Z\t2021-01-02T00:00:00Z\nbad line\n", encoding="utf-8")

        with pytest.raises(ParseError):
            session.open(broken)

        assert session.name == "album"
        assert list(session.snapshot) == ["a.jpg"]

    def test_save_open_replay(self, folder, tmp_path):
        session = Session(options=SessionOptions(recursive=True))
        session.collect(folder)
        session.save(tmp_path / "album.tsv")

        other = Session(options=SessionOptions(recursive=True))
        assert other.open(tmp_path / "album.tsv") == 2
        assert other.name == "album"

        result = other.replay(folder)
        assert result.replayed == 2
        assert other.status()["replayed_count"] == 2

    def test_replay_uses_rewrite_options(self, folder, tmp_path):
        session = Session(options=SessionOptions(recursive=True))
        session.collect(folder)

        target = tmp_path / "converted"
        (target / "sub").mkdir(parents=True)
        (target / "a.png").write_text("a")
        (target / "sub" / "b.png").write_text("b")

        session.options.pattern = r"\.png$"
        session.options.replacement = ".jpg"
        assert session.replay(target).replayed == 2

    def test_replay_empty_session(self, tmp_path):
        with pytest.raises(EmptyCollectionError):
            Session().replay(tmp_path)

    def test_reset(self, folder):
        session = Session(options=SessionOptions(pattern="a", replacement="b"))
        session.collect(folder)
        session.replayed = 3

        session.reset()

        assert session.is_empty
        assert session.name == UNNAMED_COLLECTION
        assert session.replayed == 0
        assert session.options.rewrite is None
