"""Tests for SyncOrchestrator."""

import json
from unittest.mock import Mock, patch

import pytest
from conftest import (
    QUEST_PLAYERDATA,
    QUEST_PLAYLISTS,
    FakeTransport,
    ScriptedPrompter,
    favorites_of,
    player_data_bytes,
    playlist_bytes,
)

from questsync.core.device import Device
from questsync.core.sync import SyncOrchestrator, SyncResult, SyncStage
from questsync.exceptions import DeviceNotReadyError, NoPlayerError, NotFoundError


@pytest.fixture
def pc(config):
    """Helpers to set up and inspect the PC side."""

    class PC:
        playerdata = config.pc_playerdata_path
        playlists = config.pc_playlists_path

        def set_favorites(self, favorites):
            self.playerdata.write_bytes(player_data_bytes(favorites))

        def favorites(self):
            return favorites_of(self.playerdata.read_bytes())

        def add_playlist(self, title, name=None, songs=None):
            path = self.playlists / (name or f"{title}.bplist")
            path.write_bytes(playlist_bytes(title, songs))

        def playlist_titles(self):
            return sorted(
                json.loads(p.read_text())["playlistTitle"]
                for p in self.playlists.iterdir()
            )

    return PC()


@pytest.fixture
def quest():
    """The device side."""
    return FakeTransport(directories=[QUEST_PLAYLISTS])


def set_quest_favorites(transport, favorites):
    """Store PlayerData on the fake device."""
    transport.files[QUEST_PLAYERDATA] = player_data_bytes(favorites)


def quest_playlist_titles(transport):
    """Titles of the playlists on the fake device."""
    return sorted(
        json.loads(data)["playlistTitle"]
        for path, data in transport.files.items()
        if path.startswith(QUEST_PLAYLISTS + "/")
    )


def make_orchestrator(config, transport, answers=()):
    """Orchestrator wired to a fake transport and scripted answers."""
    prompter = ScriptedPrompter(answers)
    factory = Mock(return_value=transport)
    orchestrator = SyncOrchestrator(
        config=config, transport_factory=factory, prompter=prompter
    )
    return orchestrator, prompter, factory


class TestSyncResult:
    """Test SyncResult dataclass."""

    def test_init(self):
        """Test SyncResult initialization."""
        result = SyncResult()

        assert result.errors == []
        assert result.warnings == []
        assert result.divergences == {}
        assert result.in_sync

    def test_add_error(self):
        """Test adding errors."""
        result = SyncResult()
        result.add_error("Error 1")

        summary = result.get_summary()
        assert summary["success"] is False
        assert summary["errors"] == 1

    def test_stage_order(self):
        """Test stages are ordered init to closed."""
        assert SyncStage.ordered() == [
            SyncStage.INIT,
            SyncStage.FAVORITES,
            SyncStage.PLAYLISTS,
            SyncStage.CLOSED,
        ]


class TestFavoritesSync:
    """Test favourites through a full session."""

    def test_copy_local_only_to_remote(self, config, pc, quest, ready_device):
        """Test local {a,b} vs remote {b,c}, copying a to the Quest."""
        pc.set_favorites(["a", "b"])
        set_quest_favorites(quest, ["b", "c"])
        orchestrator, prompter, _ = make_orchestrator(
            config, quest, ["Add to PC", "Add to Quest"]
        )

        result = orchestrator.run(ready_device)

        divergence = result.divergences["favorites"]
        assert divergence.only_on_a == ("a",)
        assert divergence.only_on_b == ("c",)
        assert favorites_of(quest.files[QUEST_PLAYERDATA]) == ["b", "c", "a"]
        assert pc.favorites() == ["a", "b", "c"]

    def test_copy_to_remote_leaves_local_unchanged(
        self, config, pc, quest, ready_device
    ):
        """Test choosing add to Quest for PC-only ids only writes the Quest."""
        pc.set_favorites(["a", "b"])
        set_quest_favorites(quest, ["b", "c"])
        orchestrator, _, _ = make_orchestrator(
            config, quest, ["Remove from Quest", "Add to Quest"]
        )
        before = pc.playerdata.read_bytes()

        orchestrator.run(ready_device)

        assert sorted(favorites_of(quest.files[QUEST_PLAYERDATA])) == ["a", "b"]
        assert pc.playerdata.read_bytes() == before

    def test_remove_keeps_shared_ids(self, config, pc, quest, ready_device):
        """Test removing divergent ids keeps the ids both sides share."""
        pc.set_favorites(["a", "b", "shared"])
        set_quest_favorites(quest, ["shared"])
        orchestrator, _, _ = make_orchestrator(config, quest, ["Remove from PC"])

        orchestrator.run(ready_device)

        assert pc.favorites() == ["shared"]

    def test_questions_quest_first(self, config, pc, quest, ready_device):
        """Test Quest-only ids are asked about before PC-only ids."""
        pc.set_favorites(["a"])
        set_quest_favorites(quest, ["c"])
        orchestrator, prompter, _ = make_orchestrator(
            config, quest, ["Add to PC", "Add to Quest"]
        )

        orchestrator.run(ready_device)

        assert prompter.offered == [
            ["Add to PC", "Remove from Quest"],
            ["Add to Quest", "Remove from PC"],
        ]

    def test_each_side_written_once(self, config, pc, quest, ready_device):
        """Test two decisions touching the Quest push it once."""
        pc.set_favorites(["a"])
        set_quest_favorites(quest, ["c"])
        orchestrator, _, _ = make_orchestrator(
            config, quest, ["Remove from Quest", "Add to Quest"]
        )

        orchestrator.run(ready_device)

        assert quest.calls.count(f"push {QUEST_PLAYERDATA}") == 1
        assert favorites_of(quest.files[QUEST_PLAYERDATA]) == ["a"]

    def test_second_sync_finds_nothing(self, config, pc, quest, ready_device):
        """Test syncing twice in a row converges."""
        pc.set_favorites(["a", "b"])
        set_quest_favorites(quest, ["b", "c"])
        pc.add_playlist("Rock")
        orchestrator, _, _ = make_orchestrator(
            config, quest, ["Add to PC", "Add to Quest", "Add to Quest"]
        )
        orchestrator.run(ready_device)

        second, prompter, _ = make_orchestrator(config, FakeTransport(quest.files))
        result = second.run(ready_device)

        assert prompter.questions == []
        assert result.in_sync
        assert all(d.is_empty for d in result.divergences.values())

    def test_already_in_sync_asks_nothing(self, config, pc, quest, ready_device):
        """Test identical sides need no prompt and no write."""
        pc.set_favorites(["a", "b"])
        set_quest_favorites(quest, ["b", "a"])
        orchestrator, prompter, _ = make_orchestrator(config, quest)

        result = orchestrator.run(ready_device)

        assert prompter.questions == []
        assert not [c for c in quest.calls if c.startswith("push")]
        assert result.in_sync


class TestPlaylistsSync:
    """Test playlists through a full session."""

    def test_remove_local_only_playlist(self, config, pc, quest, ready_device):
        """Test local [Rock] vs remote [], removing from the PC."""
        pc.set_favorites([])
        set_quest_favorites(quest, [])
        pc.add_playlist("Rock")
        orchestrator, _, _ = make_orchestrator(config, quest, ["Remove from PC"])

        result = orchestrator.run(ready_device)

        assert [p.title for p in result.divergences["playlists"].only_on_a] == [
            "Rock"
        ]
        assert pc.playlist_titles() == []
        assert quest_playlist_titles(quest) == []

    def test_copy_remote_playlist_to_pc(self, config, pc, quest, ready_device):
        """Test a Quest-only playlist is copied verbatim to the PC."""
        pc.set_favorites([])
        set_quest_favorites(quest, [])
        songs = [{"hash": "abc", "levelid": "custom_level_abc"}]
        quest.files[f"{QUEST_PLAYLISTS}/jazz.bplist"] = playlist_bytes("Jazz", songs)
        orchestrator, _, _ = make_orchestrator(config, quest, ["Add to PC"])

        orchestrator.run(ready_device)

        document = json.loads((pc.playlists / "jazz.bplist").read_text())
        assert document["songs"] == songs

    def test_same_title_is_not_divergent(self, config, pc, quest, ready_device):
        """Test differing songs under one title raise no prompt."""
        pc.set_favorites([])
        set_quest_favorites(quest, [])
        pc.add_playlist("Rock", songs=[{"hash": "1"}])
        quest.files[f"{QUEST_PLAYLISTS}/rock.bplist"] = playlist_bytes(
            "Rock", [{"hash": "2"}]
        )
        orchestrator, prompter, _ = make_orchestrator(config, quest)

        result = orchestrator.run(ready_device)

        assert prompter.questions == []
        assert result.divergences["playlists"].is_empty

    def test_malformed_remote_entry_is_a_warning(
        self, config, pc, quest, ready_device
    ):
        """Test a broken Quest playlist is skipped and reported."""
        pc.set_favorites([])
        set_quest_favorites(quest, [])
        pc.add_playlist("Rock")
        quest.files[f"{QUEST_PLAYLISTS}/rock.bplist"] = playlist_bytes("Rock")
        quest.files[f"{QUEST_PLAYLISTS}/broken.bplist"] = b"garbage"
        orchestrator, _, _ = make_orchestrator(config, quest)

        result = orchestrator.run(ready_device)

        assert result.errors == []
        assert len(result.warnings) == 1
        assert "broken.bplist" in result.warnings[0]


    def test_malformed_local_entry_is_kept(self, config, pc, quest, ready_device):
        """Test adopting a playlist never replaces a skipped PC file."""
        set_quest_favorites(quest, [])
        pc.set_favorites([])
        broken = pc.playlists / "Rock.bplist"
        broken.write_bytes(b"{ not json")
        quest.files[f"{QUEST_PLAYLISTS}/Rock.bplist"] = playlist_bytes("Rock")
        orchestrator, _, _ = make_orchestrator(config, quest, ["Add to PC"])

        result = orchestrator.run(ready_device)

        assert len(result.warnings) == 1
        assert broken.read_bytes() == b"{ not json"
        assert (pc.playlists / "Rock_2.bplist").exists()


class TestSessionLifecycle:
    """Test device checks, error policy and transport release."""

    def test_device_not_ready_fails_before_io(self, config, quest):
        """Test an unauthorized device is rejected without opening a transport."""
        orchestrator, _, factory = make_orchestrator(config, quest)

        with pytest.raises(DeviceNotReadyError):
            orchestrator.run(Device(serial="x", state="unauthorized"))
        factory.assert_not_called()
        assert quest.calls == []

    def test_transport_closed_once(self, config, pc, quest, ready_device):
        """Test the transport is released at the end."""
        pc.set_favorites([])
        set_quest_favorites(quest, [])
        orchestrator, _, factory = make_orchestrator(config, quest)

        result = orchestrator.run(ready_device)

        factory.assert_called_once_with(ready_device)
        assert quest.close_calls == 1
        assert result.stages == SyncStage.ordered()

    def test_missing_player_data_is_fatal(self, config, pc, quest, ready_device):
        """Test a missing Quest PlayerData ends the session and closes."""
        pc.set_favorites(["a"])
        orchestrator, prompter, _ = make_orchestrator(config, quest)

        with pytest.raises(NotFoundError):
            orchestrator.run(ready_device)
        assert quest.close_calls == 1
        assert prompter.questions == []

    def test_missing_playlist_document_aborts_only_playlists(
        self, config, pc, quest, ready_device
    ):
        """Test a missing document outside the profile is not fatal."""
        pc.set_favorites([])
        set_quest_favorites(quest, [])
        orchestrator, _, _ = make_orchestrator(config, quest)

        with patch(
            "questsync.core.sync.orchestrator.PlaylistsCategory.load",
            side_effect=NotFoundError(f"{QUEST_PLAYLISTS}/gone.bplist"),
        ):
            result = orchestrator.run(ready_device)

        assert len(result.errors) == 1
        assert "Playlists sync aborted" in result.errors[0]
        assert "favorites" in result.divergences
        assert result.stages == SyncStage.ordered()
        assert quest.close_calls == 1

    def test_no_player_is_fatal(self, config, pc, quest, ready_device):
        """Test PlayerData without players ends the session."""
        pc.playerdata.write_bytes(player_data_bytes([], players=0))
        set_quest_favorites(quest, [])
        orchestrator, _, _ = make_orchestrator(config, quest)

        with pytest.raises(NoPlayerError):
            orchestrator.run(ready_device)
        assert quest.close_calls == 1

    def test_parse_error_aborts_only_favorites(self, config, pc, quest, ready_device):
        """Test a corrupt PlayerData skips favourites but still syncs playlists."""
        pc.playerdata.write_text("{corrupt")
        set_quest_favorites(quest, ["a"])
        quest.files[f"{QUEST_PLAYLISTS}/jazz.bplist"] = playlist_bytes("Jazz")
        orchestrator, _, _ = make_orchestrator(config, quest, ["Add to PC"])

        result = orchestrator.run(ready_device)

        assert len(result.errors) == 1
        assert "Favorites sync aborted" in result.errors[0]
        assert "favorites" not in result.divergences
        assert pc.playlist_titles() == ["Jazz"]
        assert quest.close_calls == 1

    def test_write_failure_aborts_category(self, config, pc, quest, ready_device):
        """Test a failed push is reported and the PC copy stays intact."""
        pc.set_favorites(["a"])
        set_quest_favorites(quest, [])
        quest.fail_push = True
        orchestrator, _, _ = make_orchestrator(config, quest, ["Add to Quest"])

        result = orchestrator.run(ready_device)

        assert len(result.errors) == 1
        assert pc.favorites() == ["a"]
        assert favorites_of(quest.files[QUEST_PLAYERDATA]) == []

    def test_close_failure_is_not_raised(self, config, pc, ready_device):
        """Test a failing release is only logged."""
        pc.set_favorites([])
        transport = FakeTransport({QUEST_PLAYERDATA: player_data_bytes([])})
        transport.close = Mock(side_effect=RuntimeError("gone"))
        orchestrator, _, _ = make_orchestrator(config, transport)

        result = orchestrator.run(ready_device)

        transport.close.assert_called_once()
        assert result.stages[-1] is SyncStage.CLOSED

    def test_run_requires_prompter(self, config, quest, ready_device):
        """Test run refuses to start without a way to ask the user."""
        orchestrator = SyncOrchestrator(config=config, transport_factory=Mock())

        with pytest.raises(ValueError):
            orchestrator.run(ready_device)


class TestDiff:
    """Test the read-only diff."""

    def test_diff_writes_nothing(self, config, pc, quest, ready_device):
        """Test diff reports divergences without asking or writing."""
        pc.set_favorites(["a", "b"])
        set_quest_favorites(quest, ["b", "c"])
        pc.add_playlist("Rock")
        orchestrator = SyncOrchestrator(
            config=config, transport_factory=Mock(return_value=quest)
        )

        divergences = orchestrator.diff(ready_device)

        assert divergences["favorites"].only_on_a == ("a",)
        assert divergences["favorites"].only_on_b == ("c",)
        assert [p.title for p in divergences["playlists"].only_on_a] == ["Rock"]
        assert not [c for c in quest.calls if c.startswith(("push", "rm"))]
        assert quest.close_calls == 1

    def test_diff_checks_device(self, config, quest):
        """Test diff rejects devices that are not ready."""
        orchestrator = SyncOrchestrator(
            config=config, transport_factory=Mock(return_value=quest)
        )

        with pytest.raises(DeviceNotReadyError):
            orchestrator.diff(Device(serial="x", state="offline"))
