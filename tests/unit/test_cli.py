"""Unit tests for the roster CLI."""

import json
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from roster.cli import main

PATH = "/api/students"
AMY = {"id": 7, "name": "Amy", "email": "a@x.com", "age": 21}
BOB = {"id": 8, "name": "Bob", "email": "bob@y.org", "age": 30}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def routed_http(fake_api, monkeypatch: pytest.MonkeyPatch) -> None:
    """Send every client the CLI creates to the fake API."""
    real_client = httpx.AsyncClient

    def client(**kwargs):
        return real_client(transport=fake_api.transport(), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client)


@pytest.fixture
def session_file(tmp_path: Path) -> Path:
    return tmp_path / "session.json"


@pytest.fixture
def config_path(tmp_path: Path, session_file: Path) -> Path:
    path = tmp_path / "roster.yaml"
    path.write_text(
        f"api:\n  base_url: http://api.test\nsession:\n  file: {session_file}\n"
        f"logging:\n  dir: {tmp_path / 'logs'}\n"
    )
    return path


@pytest.fixture
def logged_in(session_file: Path) -> None:
    session_file.write_text(
        json.dumps({"token": "test-token", "user": {"id": 1, "username": "admin"}})
    )


def invoke(runner: CliRunner, config_path: Path, *args: str, **kwargs):
    return runner.invoke(main, ["-c", str(config_path), *args], **kwargs)


@pytest.mark.unit
class TestAuthCommands:
    """Tests for login, register and logout."""

    def test_login(self, runner, config_path, fake_api, session_file) -> None:
        fake_api.on(
            "POST",
            "/api/auth/login",
            (200, {"token": "jwt-1", "id": 1, "username": "amy", "fullName": "Amy Pond"}),
        )

        result = invoke(runner, config_path, "login", "-u", "amy", "-p", "secret")

        assert result.exit_code == 0, result.output
        assert "Welcome, Amy Pond!" in result.output
        assert json.loads(session_file.read_text())["token"] == "jwt-1"

    def test_login_rejected(self, runner, config_path, fake_api, session_file) -> None:
        fake_api.on("POST", "/api/auth/login", (401, {"message": "Invalid username or password"}))

        result = invoke(runner, config_path, "login", "-u", "amy", "-p", "wrong")

        assert result.exit_code == 1
        assert "Invalid username or password" in result.output
        assert not session_file.exists()

    def test_register(self, runner, config_path, fake_api) -> None:
        fake_api.on(
            "POST", "/api/auth/register", (201, {"token": "jwt-2", "id": 2, "username": "bob"})
        )

        result = invoke(
            runner,
            config_path,
            "register",
            "-u", "bob", "-e", "bob@y.org", "-n", "", "-p", "pw",
        )

        assert result.exit_code == 0, result.output
        assert "Welcome, bob!" in result.output

    @pytest.mark.usefixtures("logged_in")
    def test_logout(self, runner, config_path, session_file) -> None:
        result = invoke(runner, config_path, "logout")

        assert result.exit_code == 0
        assert "Logged out" in result.output
        assert not session_file.exists()


@pytest.mark.unit
@pytest.mark.usefixtures("logged_in")
class TestListCommand:
    """Tests for list."""

    def test_list(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, [AMY, BOB]))

        result = invoke(runner, config_path, "list")

        assert result.exit_code == 0, result.output
        assert "Welcome, admin!" in result.output
        assert "Amy" in result.output
        assert "bob@y.org" in result.output
        assert "Total Students: 2" in result.output
        assert fake_api.requests[0].headers["Authorization"] == "Bearer test-token"

    def test_list_search(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, [AMY, BOB]))

        result = invoke(runner, config_path, "list", "--search", "amy")

        assert "Amy" in result.output
        assert "Bob" not in result.output
        assert "Total Students: 1" in result.output

    def test_list_empty(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, []))

        result = invoke(runner, config_path, "list")

        assert "No students found" in result.output
        assert "Total Students: 0" in result.output

    def test_list_server_down(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (500, None))

        result = invoke(runner, config_path, "list")

        assert result.exit_code == 1
        assert "Failed to load students" in result.output
        assert "http://api.test" in result.output

    def test_list_expired_session(self, runner, config_path, fake_api, session_file) -> None:
        fake_api.on("GET", PATH, (401, None))

        result = invoke(runner, config_path, "list")

        assert result.exit_code == 1
        assert "roster login" in result.output
        assert "Failed" not in result.output
        assert not session_file.exists()


@pytest.mark.unit
class TestNotLoggedIn:
    """Commands without a saved session."""

    def test_list_requires_login(self, runner, config_path, fake_api) -> None:
        result = invoke(runner, config_path, "list")

        assert result.exit_code == 1
        assert "roster login" in result.output
        assert fake_api.requests == []


@pytest.mark.unit
@pytest.mark.usefixtures("logged_in")
class TestMutatingCommands:
    """Tests for add, edit and delete."""

    def test_add(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, []), (200, [AMY]))
        fake_api.on("POST", PATH, (201, AMY))

        result = invoke(
            runner, config_path, "add", "--name", "Amy", "--email", "a@x.com", "--age", "21"
        )

        assert result.exit_code == 0, result.output
        (post,) = fake_api.calls("POST", PATH)
        assert fake_api.body(post) == {"name": "Amy", "email": "a@x.com", "age": 21}
        assert "Total Students: 1" in result.output

    def test_add_with_empty_field(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, []))

        result = invoke(
            runner, config_path, "add", "--name", "Amy", "--email", "a@x.com", "--age", ""
        )

        assert result.exit_code == 1
        assert "Please fill in all fields" in result.output
        assert fake_api.calls("POST") == []

    def test_edit(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, [AMY]), (200, [{**AMY, "age": 22}]))
        fake_api.on("PUT", f"{PATH}/7", (200, {**AMY, "age": 22}))

        result = invoke(runner, config_path, "edit", "7", "--age", "22")

        assert result.exit_code == 0, result.output
        (put,) = fake_api.calls("PUT", f"{PATH}/7")
        assert fake_api.body(put) == {"name": "Amy", "email": "a@x.com", "age": 22}

    def test_edit_unknown_student(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, [AMY]))

        result = invoke(runner, config_path, "edit", "99", "--age", "22")

        assert result.exit_code == 1
        assert "Student 99 not found" in result.output
        assert fake_api.calls("PUT") == []

    def test_edit_failure_shows_banner(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, [AMY]))
        fake_api.on("PUT", f"{PATH}/7", (500, None))

        result = invoke(runner, config_path, "edit", "7", "--name", "Amelia")

        assert result.exit_code == 1
        assert "Failed to update student" in result.output

    def test_delete_declined(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, [AMY]))

        result = invoke(runner, config_path, "delete", "7", input="n\n")

        assert result.exit_code == 0, result.output
        assert "Are you sure you want to delete this student?" in result.output
        assert "Student not deleted" in result.output
        assert fake_api.calls("DELETE") == []

    def test_delete_with_yes(self, runner, config_path, fake_api) -> None:
        fake_api.on("GET", PATH, (200, [AMY]), (200, []))
        fake_api.on("DELETE", f"{PATH}/7", (204, None))

        result = invoke(runner, config_path, "delete", "7", "--yes")

        assert result.exit_code == 0, result.output
        assert len(fake_api.calls("DELETE", f"{PATH}/7")) == 1
        assert "Total Students: 0" in result.output
