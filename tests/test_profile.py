import json
from pathlib import Path

from core.models import AchievementKey, Geography, QuizMode, SessionSummary
from core.profile import ProfileStore


def _summary(**overrides) -> SessionSummary:
    values = dict(
        created_at=1.0,
        mode=QuizMode.COUNTRY,
        regions=("Europe",),
        count=3,
        correct=3,
        errors=0,
        skipped=0,
        duration_ms=4200,
    )
    values.update(overrides)
    return SessionSummary(**values)


def test_new_profile_is_empty(tmp_path: Path) -> None:
    store = ProfileStore(tmp_path / "nobody.json")
    assert store.unlocked() == frozenset()
    assert store.sessions() == []


def test_unlock_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / "ada.json"
    store = ProfileStore(path, display_name="Ada")
    key = AchievementKey(QuizMode.COUNTRY, Geography.EUROPE)
    assert store.unlock(key) is True
    assert store.unlock(key) is True
    assert store.unlocked() == {key}

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["achievements"] == ["country:Europe"]
    assert payload["display_name"] == "Ada"


def test_sessions_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "ada.json"
    ProfileStore(path).record_session(_summary(errors=2))
    reloaded = ProfileStore(path)
    assert reloaded.sessions()[0]["errors"] == 2
    assert reloaded.sessions()[0]["mode"] == "country"
    assert reloaded.sessions()[0]["regions"] == ["Europe"]


def test_malformed_fields_normalized(tmp_path: Path) -> None:
    path = tmp_path / "odd.json"
    path.write_text(
        json.dumps(
            {
                "achievements": ["flag:World", "bogus", "country:Atlantis", 7],
                "sessions": [{"errors": 0}, "junk"],
            }
        ),
        encoding="utf-8",
    )
    store = ProfileStore(path)
    assert store.unlocked() == {AchievementKey(QuizMode.FLAG, Geography.WORLD)}
    assert store.sessions() == [{"errors": 0}]


def test_achievements_not_a_list(tmp_path: Path) -> None:
    path = tmp_path / "odd.json"
    path.write_text(json.dumps({"achievements": {"flag:World": True}, "sessions": "nope"}), encoding="utf-8")
    store = ProfileStore(path)
    assert store.unlocked() == frozenset()
    assert store.sessions() == []


def test_corrupt_file_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{{{", encoding="utf-8")
    store = ProfileStore(path)
    assert store.unlocked() == frozenset()
    assert store.unlock(AchievementKey(QuizMode.CAPITAL, Geography.ASIA)) is True
    assert ProfileStore(path).unlocked() == {AchievementKey(QuizMode.CAPITAL, Geography.ASIA)}


def test_write_failure_reports_false(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = ProfileStore(blocker / "ada.json")
    key = AchievementKey(QuizMode.COUNTRY, Geography.AFRICA)
    assert store.record_session(_summary()) is False
    assert store.unlock(key) is False
    assert key in store.unlocked()


def test_failed_replace_leaves_no_temp_file(tmp_path: Path, monkeypatch) -> None:
    def refuse(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("core.profile.os.replace", refuse)
    store = ProfileStore(tmp_path / "ada.json")
    assert store.record_session(_summary()) is False
    assert list(tmp_path.glob("*.tmp")) == []
    assert not (tmp_path / "ada.json").exists()
