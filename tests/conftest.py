"""Shared fixtures: an in-memory device transport and a scripted prompter."""

import json
import posixpath
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pytest

from questsync.config import Config
from questsync.core.device import Device
from questsync.exceptions import NotFoundError, StoreIOError

QUEST_PLAYERDATA = "/sdcard/quest/PlayerData.dat"
QUEST_PLAYLISTS = "/sdcard/quest/Playlists"


def player_data_bytes(favorites: Iterable[str], players: int = 1) -> bytes:
    """PlayerData.dat content with extra fields that must round-trip."""
    local_players = [
        {
            "playerId": str(index),
            "playerName": f"player{index}",
            "favoritesLevelIds": list(favorites) if index == 0 else [],
            "playerAllOverallStatsData": {
                "campaignOverallStatsData": {"goodCutsCount": 3}
            },
        }
        for index in range(players)
    ]
    document = {
        "version": "2.0.24",
        "localPlayers": local_players,
        "guestPlayers": [],
    }
    # The game pads the file
    return (json.dumps(document) + "\n  ").encode("utf-8")


def playlist_bytes(title: str, songs: Optional[List[Dict[str, Any]]] = None) -> bytes:
    """A .bplist document."""
    document = {
        "playlistTitle": title,
        "playlistAuthor": "tester",
        "songs": songs if songs is not None else [{"hash": f"{title}-hash"}],
        "image": "",
    }
    return json.dumps(document).encode("utf-8")


def favorites_of(raw: bytes) -> List[str]:
    """Favourites of the first player in PlayerData content."""
    return json.loads(raw.decode("utf-8"))["localPlayers"][0]["favoritesLevelIds"]


class FakeTransport:
    """In-memory stand-in for a device transport."""

    def __init__(
        self,
        files: Optional[Dict[str, bytes]] = None,
        directories: Iterable[str] = (),
    ) -> None:
        self.files: Dict[str, bytes] = dict(files or {})
        self.directories = set(directories)
        for path in self.files:
            self.directories.add(posixpath.dirname(path))
        self.closed = False
        self.close_calls = 0
        self.calls: List[str] = []
        self.fail_push = False

    def _check_open(self) -> None:
        if self.closed:
            raise StoreIOError("transport closed")

    def pull(self, remote_path: str) -> bytes:
        self._check_open()
        self.calls.append(f"pull {remote_path}")
        if remote_path not in self.files:
            raise NotFoundError(remote_path)
        return self.files[remote_path]

    def push(self, data: bytes, remote_path: str) -> None:
        self._check_open()
        self.calls.append(f"push {remote_path}")
        if self.fail_push:
            raise StoreIOError(f"push to {remote_path} failed")
        self.files[remote_path] = data
        self.directories.add(posixpath.dirname(remote_path))

    def list_directory(self, remote_path: str) -> List[str]:
        self._check_open()
        self.calls.append(f"ls {remote_path}")
        if remote_path not in self.directories:
            raise NotFoundError(remote_path)
        return [
            posixpath.basename(path)
            for path in self.files
            if posixpath.dirname(path) == remote_path
        ]

    def remove(self, remote_path: str) -> None:
        self._check_open()
        self.calls.append(f"rm {remote_path}")
        self.files.pop(remote_path, None)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class ScriptedPrompter:
    """Answers questions by option label, in order."""

    def __init__(self, answers: Sequence[str] = ()) -> None:
        self.answers = list(answers)
        self.questions: List[str] = []
        self.offered: List[List[str]] = []

    def ask(self, question: str, options: Sequence[Any]) -> Any:
        self.questions.append(question)
        labels = [option.label for option in options]
        self.offered.append(labels)
        assert self.answers, f"Unexpected question: {question}"
        answer = self.answers.pop(0)
        for option in options:
            if option.label == answer:
                return option.value
        raise AssertionError(f"{answer!r} not offered, options were {labels}")


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Config pointing at temporary PC folders and fake Quest paths."""
    config_dir = tmp_path / "config"
    game_dir = tmp_path / "game"
    (game_dir / "Playlists").mkdir(parents=True)
    config_dir.mkdir()
    monkeypatch.setenv("QUEST_SYNC_CONFIG_PATH", str(config_dir))
    monkeypatch.setenv("QUEST_SYNC_GAME_PATH", str(game_dir))
    monkeypatch.setenv("QUEST_SYNC_SETTINGS_FILE", str(tmp_path / "settings.json"))
    monkeypatch.setenv("QUEST_SYNC_QUEST_PLAYERDATA_PATH", QUEST_PLAYERDATA)
    monkeypatch.setenv("QUEST_SYNC_QUEST_PLAYLISTS_PATH", QUEST_PLAYLISTS)
    return Config()


@pytest.fixture
def ready_device():
    """An authorized device."""
    return Device(serial="1WMHH000000000", state="device")
