"""Command-line interface for Folio.

This module defines the CLI commands using Click framework.

Commands:
- check: Load and validate all content, reporting every problem.
- list: List posts newest first.
- new: Create a new blog post interactively.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .collections import DocumentCollection, resolve_author
from .documents import ContentDocument, DocumentType
from .errors import ContentError, ContentLoadError
from .frontmatter import dump_document
from .store import ContentStore, load_config
from .utils import slugify

root_option = click.option(
    "--root",
    "root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (defaults to the current directory)",
)


@click.group()
@click.version_option(version=__version__, prog_name="folio")
def cli():
    """Folio content loader and validator."""


@cli.command()
@root_option
@click.option("--watch", is_flag=True, help="Re-check whenever content changes")
def check(root: Path | None, watch: bool):
    """Load and validate all content."""
    project_root = root or Path.cwd()
    ok = _run_check(project_root)
    if watch:
        from .watcher import ContentWatcher

        try:
            content_dir = project_root / load_config(project_root)["content_dir"]
        except ContentError as exc:
            _echo_error(exc, project_root)
            raise SystemExit(1) from None
        click.echo(f"Watching {content_dir} for changes (Ctrl+C to stop)")
        ContentWatcher(project_root, content_dir, lambda: _run_check(project_root)).start()
        return
    if not ok:
        raise SystemExit(1)


@cli.command(name="list")
@root_option
@click.option("--drafts", is_flag=True, help="Include draft posts")
@click.option("--tag", default=None, help="Only posts with this tag")
@click.option("--category", default=None, help="Only posts in this category")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Show at most N posts")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array")
def list_posts(
    root: Path | None,
    drafts: bool,
    tag: str | None,
    category: str | None,
    limit: int | None,
    as_json: bool,
):
    """List posts newest first."""
    project_root = root or Path.cwd()
    documents = _load_or_exit(project_root)
    posts = documents.posts()
    if not drafts:
        posts = posts.published()
    if tag:
        posts = posts.with_tag(tag)
    if category:
        posts = posts.in_category(category)
    posts = posts.sorted_by_date()
    if limit is not None:
        posts = posts[:limit]

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in posts], indent=2))
        return
    for post in posts:
        date = post.date.strftime("%Y-%m-%d") if post.date else "----------"
        marker = click.style(" [draft]", fg="yellow") if post.draft else ""
        click.echo(f"{date}  {post.path}  {post.title}{marker}")


@cli.command()
@root_option
def new(root: Path | None):
    """Create a new blog post interactively."""
    project_root = root or Path.cwd()
    try:
        config = load_config(project_root)
    except ContentError as exc:
        raise click.ClickException(str(exc)) from None
    content_dir = project_root / config["content_dir"]
    if not content_dir.exists():
        raise click.ClickException(
            f"No {config['content_dir']}/ directory found. Run this command from a Folio project root."
        )

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    authors = _author_names(content_dir, config)
    if authors:
        author = questionary.select(
            "Author:", choices=authors, style=_questionary_style()
        ).ask()
    else:
        author = questionary.text(
            "Author:",
            validate=lambda x: len(x.strip()) > 0 or "Author cannot be empty",
            style=_questionary_style(),
        ).ask()
    if author is None:
        raise click.Abort()

    tags_answer = questionary.text(
        "Tags (comma separated):", style=_questionary_style()
    ).ask()
    if tags_answer is None:
        raise click.Abort()

    draft = questionary.confirm(
        "Start as a draft?", default=True, style=_questionary_style()
    ).ask()
    if draft is None:
        raise click.Abort()

    today = datetime.now().date()
    slug = slugify(title)
    posts_dir = content_dir / config["posts_dir"]
    target_path = posts_dir / f"{today.isoformat()}-{slug}.md"

    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )
    conflicting = [
        f for f in posts_dir.glob("*.md") if slugify(f.stem) == slug
    ]
    if conflicting:
        raise click.ClickException(
            f"A post with slug '{slug}' already exists: {conflicting[0].name}"
        )

    document = ContentDocument(
        path=f"{config['posts_dir']}/{target_path.stem}",
        type=DocumentType.POST,
        metadata={
            "title": title,
            "date": today,
            "author": author.strip(),
            "tags": [t.strip() for t in tags_answer.split(",") if t.strip()],
            "categories": [],
            "draft": bool(draft),
        },
        body="",
    )
    posts_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(dump_document(document), encoding="utf-8")
    click.echo(f"Created {target_path.relative_to(project_root)}")


def main():
    """Entry point for the CLI application."""
    cli()


def _run_check(project_root: Path) -> bool:
    """Load and validate content, printing a report.

    Returns:
        True if every document loaded cleanly.
    """
    try:
        documents = ContentStore.from_project(project_root).load_all()
    except ContentLoadError as exc:
        click.echo(click.style("Check failed:", fg="red", bold=True), err=True)
        for error in exc.errors:
            _echo_error(error, project_root)
        return False
    except ContentError as exc:
        click.echo(click.style("Check failed:", fg="red", bold=True), err=True)
        _echo_error(exc, project_root)
        return False
    except FileNotFoundError as exc:
        click.echo(click.style(f"Check failed: {exc}", fg="red", bold=True), err=True)
        return False

    counts = ", ".join(
        f"{len(documents.of_type(t))} {t.value}" for t in DocumentType
    )
    click.echo(f"Loaded {len(documents)} documents ({counts})")
    for warning in _author_warnings(documents):
        click.echo(click.style(f"Warning: {warning}", fg="yellow"), err=True)
    return True


def _author_warnings(documents: DocumentCollection) -> list[str]:
    warnings = []
    for document in documents.posts():
        if document.author and resolve_author(document, documents) is None:
            warnings.append(f"{document.path}: author '{document.author}' has no profile")
    return warnings


def _author_names(content_dir: Path, config: dict) -> list[str]:
    """Titles of author profiles, or empty if the content does not load."""
    try:
        documents = ContentStore(content_dir, config).load_all()
    except ContentError:
        return []
    return [d.title for d in documents.of_type(DocumentType.AUTHOR)]


def _load_or_exit(project_root: Path) -> DocumentCollection:
    try:
        return ContentStore.from_project(project_root).load_all()
    except ContentLoadError as exc:
        click.echo(click.style("Load failed:", fg="red", bold=True), err=True)
        for error in exc.errors:
            _echo_error(error, project_root)
    except ContentError as exc:
        click.echo(click.style("Load failed:", fg="red", bold=True), err=True)
        _echo_error(exc, project_root)
    except FileNotFoundError as exc:
        click.echo(click.style(f"Load failed: {exc}", fg="red", bold=True), err=True)
    raise SystemExit(1)


def _echo_error(error: ContentError, project_root: Path) -> None:
    if error.source_path is not None:
        try:
            shown = error.source_path.relative_to(project_root)
        except ValueError:
            shown = error.source_path
        click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {error.message}", fg="white"), err=True)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )
