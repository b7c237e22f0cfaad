"""
CLI tests - run main() in-process against the faked HTTP layer.

stdout is captured, so the CLI is always in pipe mode and prints JSON.
"""

import io
import json

import pytest

from grooveshark_cli.cli import create_parser, main

SESSION_OK = {"result": {"success": True, "sessionID": "sess-1"}}
USER_OK = {"result": {"UserID": 42, "Email": "a@b.c", "FName": "A", "LName": "B", "success": True}}


@pytest.fixture
def cli_env(monkeypatch, fake_http):
    monkeypatch.setenv("GROOVESHARK_API_KEY", "pub")
    monkeypatch.setenv("GROOVESHARK_API_SECRET", "secrets")
    return fake_http


def run(capsys, *args: str) -> tuple[int, dict]:
    """Run the CLI and return (exit code, parsed JSON stdout)."""
    try:
        main(list(args))
        code = 0
    except SystemExit as e:
        code = e.code or 0
    out = capsys.readouterr().out
    return code, json.loads(out)


# =============================================================================
# Help & Parsing
# =============================================================================


class TestHelp:
    def test_no_command_prints_help(self, capsys, clean_env):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "grooveshark" in capsys.readouterr().out

    @pytest.mark.parametrize("command", ["playlist", "session", "favorite"])
    def test_group_without_subcommand(self, capsys, cli_env, command):
        main([command])
        assert "usage:" in capsys.readouterr().out
        assert cli_env.requests == []

    def test_create_requires_song_ids(self, clean_env):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["playlist", "create", "name"])

    def test_login_defaults_from_env(self, monkeypatch, clean_env):
        monkeypatch.setenv("GROOVESHARK_LOGIN", "me")
        args = create_parser().parse_args(["ping"])
        assert args.login == "me"
        assert args.password is None


# =============================================================================
# Commands
# =============================================================================


class TestCommands:
    def test_ping(self, capsys, cli_env):
        cli_env.queue({"header": {}, "result": "Hello World"})
        code, out = run(capsys, "ping")
        assert code == 0
        assert out == {"result": "Hello World"}

    def test_session_start(self, capsys, cli_env):
        cli_env.queue(SESSION_OK)
        code, out = run(capsys, "session", "start")
        assert out == {"session_id": "sess-1"}

    def test_session_start_ignores_login(self, capsys, cli_env):
        cli_env.queue(SESSION_OK)
        code, out = run(capsys, "--login", "me", "--password", "pw", "session", "start")
        assert code == 0
        assert out == {"session_id": "sess-1"}
        assert cli_env.methods == ["startSession"]

    def test_auth(self, capsys, cli_env):
        cli_env.queue(SESSION_OK)
        cli_env.queue(USER_OK)
        code, out = run(capsys, "--login", "me", "--password", "pw", "auth")
        assert code == 0
        assert out["user_id"] == 42
        assert out["name"] == "A B"
        assert out["session_id"] == "sess-1"
        assert cli_env.methods == ["startSession", "authenticate"]

    def test_auth_without_credentials(self, capsys, cli_env):
        code, out = run(capsys, "auth")
        assert code == 1
        assert "--login" in out["error"]
        assert cli_env.requests == []

    def test_playlist_create_logs_in_first(self, capsys, cli_env):
        cli_env.queue(SESSION_OK)
        cli_env.queue(USER_OK)
        cli_env.queue({"result": {"success": True, "playlistID": 80882182, "playlistsTSModified": 123456}})

        code, out = run(capsys, "--login", "me", "--password", "pw", "playlist", "create", "_TEST_PLAYLIST_", "30717514")

        assert code == 0
        assert out == {"success": True, "playlist_id": 80882182, "playlists_ts_modified": 123456}
        assert cli_env.methods == ["startSession", "authenticate", "createPlaylist"]
        assert cli_env.last.envelope["parameters"] == {"name": "_TEST_PLAYLIST_", "songIDs": [30717514]}

    def test_playlist_create_unsuccessful(self, capsys, cli_env):
        cli_env.queue({"result": {"success": False}})
        code, out = run(capsys, "playlist", "create", "_TEST_PLAYLIST_", "30717514")
        assert code == 1
        assert out == {"error": "Error creating playlist", "operation": "create_playlist"}

    def test_playlist_get(self, capsys, cli_env):
        cli_env.queue({"result": {"PlaylistName": "Mix", "UserID": 7, "Songs": [{"SongID": 1, "SongName": "One"}]}})
        code, out = run(capsys, "playlist", "get", "52262304", "--limit", "1")
        assert code == 0
        assert out["PlaylistName"] == "Mix"
        assert out["Songs"][0]["SongID"] == 1
        assert cli_env.last.envelope["parameters"] == {"playlistID": "52262304", "limit": 1}

    def test_playlist_delete(self, capsys, cli_env):
        cli_env.queue({"result": {"success": True, "playlistsTSModified": 5}})
        code, out = run(capsys, "playlist", "delete", "80882182")
        assert out["success"] is True
        assert cli_env.last.envelope["parameters"] == {"playlistID": 80882182}

    def test_favorite_add(self, capsys, cli_env):
        cli_env.queue({"result": {"success": True}})
        code, out = run(capsys, "favorite", "add", "30717514")
        assert code == 0
        assert out["success"] is True

    def test_service_error_output(self, capsys, cli_env):
        cli_env.queue({"errors": [{"code": 102, "message": "Invalid method"}]})
        code, out = run(capsys, "call", "pingServiceNOTAMETHOD")
        assert code == 1
        assert out["errors"] == [{"code": 102, "message": "Invalid method"}]
        assert out["status"] == 200

    def test_login_failure_stops_command(self, capsys, cli_env):
        cli_env.queue(SESSION_OK)
        cli_env.queue({"result": {"success": False}})
        code, out = run(capsys, "--login", "me", "--password", "wrong", "playlist", "delete", "1")
        assert code == 1
        assert out["operation"] == "authenticate"
        assert "deletePlaylist" not in cli_env.methods

    def test_missing_api_key(self, capsys, fake_http):
        code, out = run(capsys, "ping")
        assert code == 1
        assert "GROOVESHARK_API_KEY" in out["error"]


# =============================================================================
# Raw call
# =============================================================================


class TestCall:
    def test_params(self, capsys, cli_env):
        cli_env.queue({"result": [1, 2]})
        code, out = run(capsys, "call", "getSongsInfo", "--params", '{"songIDs": [1, 2]}', "--secure")
        assert out == {"result": [1, 2]}
        assert cli_env.last.envelope["parameters"] == {"songIDs": [1, 2]}
        assert cli_env.last.scheme == "https"

    def test_params_from_stdin(self, capsys, monkeypatch, cli_env):
        monkeypatch.setattr("sys.stdin", io.StringIO('{"playlistID": 3}'))
        cli_env.queue({"result": {}})
        run(capsys, "call", "getPlaylist", "--params", "-")
        assert cli_env.last.envelope["parameters"] == {"playlistID": 3}

    @pytest.mark.parametrize("params", ["{not json", "[1, 2]"])
    def test_invalid_params(self, capsys, cli_env, params):
        code, out = run(capsys, "call", "getPlaylist", "--params", params)
        assert code == 1
        assert "--params" in out["error"]
        assert cli_env.requests == []
