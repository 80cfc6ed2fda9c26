"""CLI entry point for gh-fetch.

Commands:
- issues: list filtered issues of a repository
- issue / pr: show a single issue or pull request
- review: show the reviews and inline comments of a pull request
- discussion: show a discussion from its URL
- rate-limit / check: inspect the token and API quota
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gh_fetch import __version__
from gh_fetch.config import FetchConfig, load_config
from gh_fetch.errors import GitHubFetchError
from gh_fetch.fetcher import GitHubFetcher
from gh_fetch.filters.options import DateRange, IssueFilters, IssueState
from gh_fetch.logging import setup_logging
from gh_fetch.models import Issue

console = Console()

T = TypeVar("T")


@click.group()
@click.version_option(version=__version__, prog_name="gh-fetch")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to config.yaml file",
)
@click.option("--token", default=None, help="GitHub token (overrides the env var)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None, token: str | None) -> None:
    """Fetch GitHub issues, pull requests and discussions.

    REPO arguments accept either "owner/name" or a repository URL.

    \b
    Examples:
        gh-fetch issues rust-lang/rust --rust-errors --limit 20
        gh-fetch pr https://github.com/rust-lang/rust 12345
        gh-fetch discussion https://github.com/owner/repo/discussions/7
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["token"] = token
    setup_logging(verbose=verbose)

    if config_path is None:
        ctx.obj["config"] = FetchConfig()
        return

    try:
        ctx.obj["config"] = load_config(config_path)
    except GitHubFetchError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise click.Abort() from e


def _run(ctx: click.Context, action: Callable[[GitHubFetcher], Awaitable[T]]) -> T:
    """Run one fetcher action, turning package errors into a red message and exit 1."""

    async def runner() -> T:
        async with GitHubFetcher(ctx.obj["config"], token=ctx.obj["token"]) as fetcher:
            return await action(fetcher)

    try:
        return asyncio.run(runner())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise click.Abort() from None
    except GitHubFetchError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if ctx.obj.get("verbose"):
            console.print_exception()
        raise click.Abort() from e


def _format_time(moment: datetime | None) -> str:
    return moment.strftime("%Y-%m-%d %H:%M") if moment else "-"


def _print_issue(issue: Issue) -> None:
    kind = "PR" if issue.is_pull_request else "Issue"
    console.print(f"[bold]{kind} #{issue.number}:[/bold] {escape(issue.title)}")
    console.print(f"  State:    {issue.state}")
    console.print(f"  Author:   {issue.user.login}")
    console.print(f"  Created:  {_format_time(issue.created_at)}")
    console.print(f"  Closed:   {_format_time(issue.closed_at)}")
    if issue.is_pull_request:
        console.print(f"  Merged:   {_format_time(issue.merged_at)}")
    if issue.labels:
        console.print(f"  Labels:   {', '.join(label.name for label in issue.labels)}")
    console.print(f"  Comments: {issue.comments}")
    console.print(f"  URL:      {issue.html_url}")
    if issue.body:
        console.print()
        console.print(issue.body, markup=False)


def _build_filters(
    state: str,
    labels: tuple[str, ...],
    exclude_labels: tuple[str, ...],
    permissive: bool,
    include_prs: bool,
    min_body: int | None,
    min_comments: int | None,
    keywords: tuple[str, ...],
    rust_errors: bool,
    code_blocks: bool,
    since: datetime | None,
    until: datetime | None,
) -> IssueFilters:
    base = IssueFilters.permissive() if permissive else IssueFilters()

    updates: dict[str, Any] = {"state": IssueState(state)}
    if labels:
        updates["include_labels"] = list(labels)
    if exclude_labels:
        updates["exclude_labels"] = list(exclude_labels)
    if include_prs:
        updates["include_pull_requests"] = True
    if min_body is not None:
        updates["min_body_length"] = min_body
    if min_comments is not None:
        updates["min_comments"] = min_comments
    if keywords:
        updates["required_keywords"] = list(keywords)
    if rust_errors:
        updates["rust_errors_only"] = True
    if code_blocks:
        updates["code_blocks_only"] = True
    if since or until:
        updates["date_range"] = DateRange(start=since, end=until)

    return IssueFilters.model_validate({**base.model_dump(), **updates})


@main.command()
@click.argument("repo")
@click.option(
    "--state",
    type=click.Choice([s.value for s in IssueState]),
    default=IssueState.ALL.value,
    show_default=True,
    help="Issue state to keep",
)
@click.option("--label", "labels", multiple=True, help="Require one of these labels")
@click.option("--exclude-label", "exclude_labels", multiple=True, help="Drop these labels")
@click.option("--permissive", is_flag=True, default=False, help="Start from no default filters")
@click.option("--include-prs", is_flag=True, default=False, help="Keep pull requests")
@click.option("--min-body", type=click.IntRange(min=0), default=None, help="Minimum body bytes")
@click.option("--min-comments", type=click.IntRange(min=0), default=None, help="Minimum comments")
@click.option("--keyword", "keywords", multiple=True, help="Require one of these keywords")
@click.option("--rust-errors", is_flag=True, default=False, help="Require a rustc error code")
@click.option("--code-blocks", is_flag=True, default=False, help="Require a code block")
@click.option("--since", type=click.DateTime(), default=None, help="Created on or after")
@click.option("--until", type=click.DateTime(), default=None, help="Created on or before")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Maximum matching issues")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON")
@click.pass_context
def issues(
    ctx: click.Context,
    repo: str,
    state: str,
    labels: tuple[str, ...],
    exclude_labels: tuple[str, ...],
    permissive: bool,
    include_prs: bool,
    min_body: int | None,
    min_comments: int | None,
    keywords: tuple[str, ...],
    rust_errors: bool,
    code_blocks: bool,
    since: datetime | None,
    until: datetime | None,
    limit: int | None,
    as_json: bool,
) -> None:
    """List issues of REPO that pass the filters."""
    try:
        filters = _build_filters(
            state,
            labels,
            exclude_labels,
            permissive,
            include_prs,
            min_body,
            min_comments,
            keywords,
            rust_errors,
            code_blocks,
            since,
            until,
        )
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] Invalid filters: {escape(str(e))}")
        raise click.Abort() from e

    result = _run(ctx, lambda fetcher: fetcher.collect_issues(repo, filters, max_issues=limit))

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    table = Table(title=f"Issues in {result.repository.full_name}")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("State")
    table.add_column("Title")
    table.add_column("Labels", style="magenta")
    table.add_column("Comments", justify="right")
    for issue in result.issues:
        table.add_row(
            str(issue.number),
            issue.state,
            escape(issue.title),
            escape(", ".join(label.name for label in issue.labels)),
            str(issue.comments),
        )
    console.print(table)

    console.print(f"[bold green]Collected {result.total_collected} issues[/bold green]")
    if result.filters_applied:
        console.print("[dim]Filters:[/dim]")
        for line in result.filters_applied:
            console.print(f"  {line}", style="dim", markup=False)


@main.command()
@click.argument("repo")
@click.argument("number", type=int)
@click.option("--comments", "with_comments", is_flag=True, default=False, help="Show comments")
@click.pass_context
def issue(ctx: click.Context, repo: str, number: int, with_comments: bool) -> None:
    """Show issue NUMBER of REPO."""

    async def fetch(fetcher: GitHubFetcher) -> tuple[Issue, list[Any]]:
        fetched = await fetcher.fetch_issue(repo, number)
        comments = await fetcher.fetch_comments(repo, number) if with_comments else []
        return fetched, comments

    fetched, comments = _run(ctx, fetch)
    _print_issue(fetched)

    if with_comments:
        console.print()
        console.print(f"[bold]Comments ({len(comments)})[/bold]")
        for comment in comments:
            when = _format_time(comment.created_at)
            console.print(f"[cyan]{comment.user.login}[/cyan] at {when}")
            console.print(comment.body, markup=False)
            console.print()


@main.command()
@click.argument("repo")
@click.argument("number", type=int)
@click.pass_context
def pr(ctx: click.Context, repo: str, number: int) -> None:
    """Show pull request NUMBER of REPO and its changed files."""

    async def fetch(fetcher: GitHubFetcher) -> tuple[Issue, list[Any]]:
        pull = await fetcher.fetch_pr(repo, number)
        files = await fetcher.fetch_pr_files(repo, number)
        return pull, files

    pull, files = _run(ctx, fetch)
    _print_issue(pull)

    console.print()
    table = Table(title=f"Files ({len(files)})")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    for changed in files:
        table.add_row(
            escape(changed.filename),
            changed.status,
            str(changed.additions),
            str(changed.deletions),
        )
    console.print(table)


@main.command()
@click.argument("repo")
@click.argument("number", type=int)
@click.pass_context
def review(ctx: click.Context, repo: str, number: int) -> None:
    """Show reviews and inline review comments of pull request NUMBER."""

    async def fetch(fetcher: GitHubFetcher) -> tuple[list[Any], list[Any]]:
        reviews = await fetcher.fetch_pr_reviews(repo, number)
        comments = await fetcher.fetch_pr_review_comments(repo, number)
        return reviews, comments

    reviews, comments = _run(ctx, fetch)

    console.print(f"[bold]Reviews ({len(reviews)})[/bold]")
    for item in reviews:
        console.print(
            f"  [cyan]{item.user.login}[/cyan] {item.state} at {_format_time(item.submitted_at)}"
        )

    console.print()
    console.print(f"[bold]Inline comments ({len(comments)})[/bold]")
    for comment in comments:
        location = f"{comment.path}:{comment.line}" if comment.line is not None else comment.path
        console.print(f"[cyan]{comment.user.login}[/cyan] on {location}")
        console.print(comment.body, markup=False)
        console.print()


@main.command()
@click.argument("url")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON")
@click.pass_context
def discussion(ctx: click.Context, url: str, as_json: bool) -> None:
    """Show the discussion at URL with its first 100 comments."""
    fetched = _run(ctx, lambda fetcher: fetcher.fetch_discussion_by_url(url))

    if as_json:
        click.echo(fetched.model_dump_json(indent=2))
        return

    console.print(f"[bold]Discussion #{fetched.number}:[/bold] {escape(fetched.title)}")
    console.print(f"  Author:  {fetched.author.login}")
    console.print(f"  Created: {_format_time(fetched.created_at)}")
    console.print(f"  URL:     {fetched.url}")
    if fetched.body:
        console.print()
        console.print(fetched.body, markup=False)

    console.print()
    console.print(f"[bold]Comments ({len(fetched.comments)})[/bold]")
    for comment in fetched.comments:
        console.print(f"[cyan]{comment.author.login}[/cyan] at {_format_time(comment.created_at)}")
        console.print(comment.body, markup=False)
        console.print()


@main.command(name="rate-limit")
@click.pass_context
def rate_limit(ctx: click.Context) -> None:
    """Show the remaining core API quota."""
    status = _run(ctx, lambda fetcher: fetcher.get_rate_limit())
    console.print(status)


@main.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check that the token works against the GitHub API."""
    _run(ctx, lambda fetcher: fetcher.test_connection())
    console.print("[bold green]✓ Connected to GitHub[/bold green]")


if __name__ == "__main__":
    main()
