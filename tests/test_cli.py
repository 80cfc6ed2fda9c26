"""Tests for the gh-fetch command line."""

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx
from click.testing import CliRunner

from gh_fetch import __version__
from gh_fetch.cli import main

API = "https://api.github.com"

RawFactory = Callable[..., dict[str, Any]]


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo the logging setup every command performs."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a config file that disables pacing."""
    path = tmp_path / "config.yaml"
    path.write_text("rate_limit:\n  delay_between_requests_ms: 0\n  max_retries: 0\n")
    return path


@pytest.fixture
def invoke(runner: CliRunner, config_file: Path, token: str) -> Callable[..., Any]:
    """Run the CLI with a token and the zero-delay config."""

    def _invoke(*args: str) -> Any:
        return runner.invoke(main, ["--config", str(config_file), "--token", token, *args])

    return _invoke


class TestMain:
    """Tests for the command group."""

    def test_version(self, runner: CliRunner) -> None:
        """Test --version prints the package version."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        """Test every command is registered."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("issues", "issue", "pr", "review", "discussion", "rate-limit", "check"):
            assert command in result.output

    def test_invalid_config(self, runner: CliRunner, tmp_path: Path, token: str) -> None:
        """Test an invalid config file aborts with exit code 1."""
        path = tmp_path / "config.yaml"
        path.write_text("rate_limit:\n  max_pages: 0\n")

        result = runner.invoke(main, ["--config", str(path), "--token", token, "check"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_missing_token(
        self, runner: CliRunner, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a missing token aborts with exit code 1."""
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        result = runner.invoke(main, ["--config", str(config_file), "check"])

        assert result.exit_code == 1
        assert "GITHUB_TOKEN" in result.output


class TestConnectionCommands:
    """Tests for check and rate-limit."""

    @respx.mock
    def test_check(self, invoke: Callable[..., Any]) -> None:
        """Test a working token."""
        respx.get(f"{API}/rate_limit").mock(return_value=httpx.Response(200, json={}))

        result = invoke("check")

        assert result.exit_code == 0
        assert "Connected to GitHub" in result.output

    @respx.mock
    def test_check_rejected_token(self, invoke: Callable[..., Any]) -> None:
        """Test a rejected token exits 1 with an error."""
        respx.get(f"{API}/rate_limit").mock(return_value=httpx.Response(401))

        result = invoke("check")

        assert result.exit_code == 1
        assert "Error:" in result.output

    @respx.mock
    def test_rate_limit(self, invoke: Callable[..., Any]) -> None:
        """Test the quota summary line."""
        respx.get(f"{API}/rate_limit").mock(
            return_value=httpx.Response(
                200,
                json={"resources": {"core": {"limit": 5000, "remaining": 4990, "reset": 0}}},
            )
        )

        result = invoke("rate-limit")

        assert result.exit_code == 0
        assert "Rate limit: 4990/5000 remaining" in result.output


class TestIssuesCommand:
    """Tests for the issues command."""

    @respx.mock
    def test_json_output(self, invoke: Callable[..., Any], make_raw_issue: RawFactory) -> None:
        """Test --json prints the collection result."""
        respx.get(f"{API}/repos/rust-lang/rust/issues").mock(
            side_effect=[
                httpx.Response(200, json=[make_raw_issue(1), make_raw_issue(2)]),
                httpx.Response(200, json=[]),
            ]
        )

        result = invoke("issues", "rust-lang/rust", "--json")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["repository"]["full_name"] == "rust-lang/rust"
        assert [item["number"] for item in data["issues"]] == [1, 2]
        assert data["total_collected"] == 2

    @respx.mock
    def test_limit_and_options(
        self, invoke: Callable[..., Any], make_raw_issue: RawFactory
    ) -> None:
        """Test filters and the limit reach the request and the result."""
        route = respx.get(f"{API}/repos/rust-lang/rust/issues").mock(
            return_value=httpx.Response(200, json=[make_raw_issue(n) for n in range(1, 6)])
        )

        result = invoke(
            "issues",
            "rust-lang/rust",
            "--state",
            "open",
            "--label",
            "C-bug",
            "--limit",
            "2",
            "--json",
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["issues"]) == 2
        assert "include_labels: ['C-bug']" in data["filters_applied"]
        request = route.calls[0].request
        assert request.url.params["state"] == "open"
        assert request.url.params["per_page"] == "100"

    @respx.mock
    def test_table_output(self, invoke: Callable[..., Any], make_raw_issue: RawFactory) -> None:
        """Test the default table view and summary."""
        respx.get(f"{API}/repos/rust-lang/rust/issues").mock(
            side_effect=[
                httpx.Response(200, json=[make_raw_issue(3, title="[bold]x[/bold]")]),
                httpx.Response(200, json=[]),
            ]
        )

        result = invoke("issues", "rust-lang/rust")

        assert result.exit_code == 0
        assert "Collected 1 issues" in result.output
        assert "[bold]x[/bold]" in result.output

    def test_invalid_repository(self, invoke: Callable[..., Any]) -> None:
        """Test a malformed repository exits 1 without any request."""
        result = invoke("issues", "not-a-repo")

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_date_range(self, invoke: Callable[..., Any]) -> None:
        """Test an inverted date range is rejected."""
        result = invoke(
            "issues", "rust-lang/rust", "--since", "2024-02-01", "--until", "2024-01-01"
        )

        assert result.exit_code == 1
        assert "Invalid filters" in result.output


class TestSingleItemCommands:
    """Tests for issue, pr and review."""

    @respx.mock
    def test_issue_with_comments(
        self, invoke: Callable[..., Any], make_raw_issue: RawFactory, make_raw_user: RawFactory
    ) -> None:
        """Test an issue is shown with its comments."""
        respx.get(f"{API}/repos/rust-lang/rust/issues/9").mock(
            return_value=httpx.Response(200, json=make_raw_issue(9))
        )
        respx.get(f"{API}/repos/rust-lang/rust/issues/9/comments").mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=[
                        {
                            "id": 1,
                            "user": make_raw_user(5, "commenter"),
                            "body": "Same here",
                            "created_at": "2024-03-05T00:00:00Z",
                        }
                    ],
                ),
                httpx.Response(200, json=[]),
            ]
        )

        result = invoke("issue", "rust-lang/rust", "9", "--comments")

        assert result.exit_code == 0
        assert "Issue #9" in result.output
        assert "Comments (1)" in result.output
        assert "commenter" in result.output

    @respx.mock
    def test_issue_not_found(self, invoke: Callable[..., Any]) -> None:
        """Test a missing issue exits 1."""
        respx.get(f"{API}/repos/rust-lang/rust/issues/404").mock(
            return_value=httpx.Response(404, json={"message": "Not Found"})
        )

        result = invoke("issue", "rust-lang/rust", "404")

        assert result.exit_code == 1
        assert "Error:" in result.output

    @respx.mock
    def test_pr_with_files(self, invoke: Callable[..., Any], make_raw_issue: RawFactory) -> None:
        """Test a pull request and its files table."""
        raw = make_raw_issue(5, merged_at="2024-03-04T00:00:00Z")
        respx.get(f"{API}/repos/rust-lang/rust/pulls/5").mock(
            return_value=httpx.Response(200, json=raw)
        )
        respx.get(f"{API}/repos/rust-lang/rust/pulls/5/files").mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=[{"filename": "lib.rs", "status": "modified", "additions": 3}],
                ),
                httpx.Response(200, json=[]),
            ]
        )

        result = invoke("pr", "rust-lang/rust", "5")

        assert result.exit_code == 0
        assert "PR #5" in result.output
        assert "Merged:   2024-03-04 00:00" in result.output
        assert "lib.rs" in result.output

    @respx.mock
    def test_review(
        self,
        invoke: Callable[..., Any],
        make_raw_user: RawFactory,
        make_raw_review_comment: RawFactory,
    ) -> None:
        """Test reviews and inline comments are listed."""
        respx.get(f"{API}/repos/rust-lang/rust/pulls/5/reviews").mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=[{"id": 1, "user": make_raw_user(), "state": "APPROVED"}],
                ),
                httpx.Response(200, json=[]),
            ]
        )
        respx.get(f"{API}/repos/rust-lang/rust/pulls/5/comments").mock(
            side_effect=[
                httpx.Response(200, json=[make_raw_review_comment(1)]),
                httpx.Response(200, json=[]),
            ]
        )

        result = invoke("review", "rust-lang/rust", "5")

        assert result.exit_code == 0
        assert "Reviews (1)" in result.output
        assert "APPROVED" in result.output
        assert "src/lib.rs:42" in result.output


class TestDiscussionCommand:
    """Tests for the discussion command."""

    @respx.mock
    def test_json_output(
        self, invoke: Callable[..., Any], make_discussion_payload: RawFactory
    ) -> None:
        """Test a discussion fetched by URL."""
        route = respx.post(f"{API}/graphql").mock(
            return_value=httpx.Response(200, json=make_discussion_payload())
        )

        result = invoke("discussion", "https://github.com/owner/repo/discussions/7", "--json")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["number"] == 7
        assert data["author"]["login"] == "asker"
        assert len(data["comments"]) == 1
        variables = json.loads(route.calls[0].request.content)["variables"]
        assert variables == {"owner": "owner", "name": "repo", "number": 7}

    def test_invalid_url(self, invoke: Callable[..., Any]) -> None:
        """Test a URL that is not a discussion exits 1."""
        result = invoke("discussion", "https://github.com/owner/repo/issues/7")

        assert result.exit_code == 1
        assert "Error:" in result.output
