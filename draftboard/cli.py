"""
Draftboard CLI Tool

Command-line client for managing posts and their images through the
Draftboard HTTP API.

Usage:
    draftboard serve              - Start the API server
    draftboard token EMAIL        - Get a dev access token
    draftboard list               - List your posts
    draftboard add TITLE          - Create a post
    draftboard edit ID            - Update a post
    draftboard delete ID          - Delete a post and its image
    draftboard download ID        - Save a post's image to disk
"""

import mimetypes
import os
import sys
from pathlib import Path

import click
import httpx
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from draftboard import __version__

load_dotenv()

console = Console()

API_BASE = os.getenv("DRAFTBOARD_API_URL", "http://localhost:8000").rstrip("/")

CATEGORY_CHOICES = [
    "Email Marketing",
    "SEO & Analytics",
    "Web Development",
    "E-commerce",
    "uncategorized",
]


def api_client() -> httpx.Client:
    """HTTP client bound to the API base URL with the bearer token."""
    headers = {}
    token = os.getenv("DRAFTBOARD_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.Client(base_url=f"{API_BASE}/api/v1", headers=headers, timeout=30.0)


def fail(response: httpx.Response) -> None:
    """Print the API error for a failed response and exit."""
    try:
        body = response.json()
        message = body.get("detail") or body.get("error") or response.text
    except ValueError:
        message = response.text
    console.print(f"[red]✗ {response.status_code}: {message}[/red]")
    sys.exit(1)


def image_part(path: Path) -> tuple[str, bytes, str]:
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return (path.name, path.read_bytes(), content_type)


def print_post(post: dict) -> None:
    lines = [
        f"[bold]{post['title']}[/bold]",
        post.get("description") or "[dim]No description[/dim]",
        "",
        f"Category: {post.get('category') or 'uncategorized'}",
        f"Used: {'yes' if post.get('used') else 'no'}",
        f"Image: {post.get('image_path') or '-'}",
    ]
    console.print(Panel("\n".join(lines), title=post["id"], border_style="cyan"))


@click.group()
@click.version_option(version=__version__, prog_name="Draftboard")
def cli():
    """Draftboard - posts with managed image attachments."""


@cli.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind")
@click.option("--port", default=8000, help="Port to run server on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Start the Draftboard API server."""
    import uvicorn

    console.print(Panel(
        f"[bold green]Starting Draftboard[/bold green]\n\n"
        f"API: [cyan]http://{host}:{port}/api/v1[/cyan]\n"
        f"[dim]Press Ctrl+C to stop[/dim]",
        border_style="green",
    ))
    uvicorn.run("draftboard.main:app", host=host, port=port, reload=reload)


@cli.command()
@click.argument("email")
@click.option("--admin-key", envvar="ADMIN_API_KEY", required=True, help="Server admin key")
def token(email: str, admin_key: str):
    """Get a dev access token for EMAIL.

    Example:
        export DRAFTBOARD_TOKEN=$(draftboard token me@example.com)
    """
    response = httpx.post(
        f"{API_BASE}/api/v1/auth/dev/token",
        json={"email": email},
        headers={"X-Admin-Key": admin_key},
        timeout=10.0,
    )
    if response.is_error:
        fail(response)
    click.echo(response.json()["access_token"])


@cli.command(name="list")
@click.option("--sort", type=click.Choice(["desc", "asc"]), default="desc", help="Creation order")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES[:-1]), default=None)
@click.option("--used", type=click.Choice(["all", "used", "unused"]), default="all")
def list_posts(sort: str, category: str | None, used: str):
    """List your posts."""
    params = {"sort": sort, "used": used}
    if category:
        params["category"] = category

    with api_client() as client:
        response = client.get("/posts", params=params)
    if response.is_error:
        fail(response)

    data = response.json()
    posts = data["items"]
    if not posts:
        console.print("[yellow]No posts found. Create one with:[/yellow]")
        console.print('[cyan]draftboard add "My first post"[/cyan]')
        return

    table = Table(title=f"Posts ({data['total']} total)", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    table.add_column("Used", justify="center")
    table.add_column("Image")
    table.add_column("Created")

    for post in posts:
        table.add_row(
            post["id"],
            post["title"][:50] + "..." if len(post["title"]) > 50 else post["title"],
            post.get("category") or "-",
            "✓" if post.get("used") else "",
            post.get("image_path") or "-",
            post["created_at"][:19],
        )
    console.print(table)


@cli.command()
@click.argument("title")
@click.option("--description", default="", help="Post body")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), default=None)
@click.option("--used", is_flag=True, help="Mark the post as used")
@click.option("--image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def add(title: str, description: str, category: str | None, used: bool, image: Path | None):
    """Create a post, optionally with an image.

    Example:
        draftboard add "Spring launch" --category "Email Marketing" --image hero.png
    """
    data = {"title": title, "description": description, "used": str(used).lower()}
    if category:
        data["category"] = category
    files = {"image": image_part(image)} if image else None

    with api_client() as client:
        response = client.post("/posts", data=data, files=files)
    if response.is_error:
        fail(response)

    console.print("[green]✓ Post created[/green]")
    print_post(response.json())


@cli.command()
@click.argument("post_id")
@click.option("--title", default=None)
@click.option("--description", default=None)
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), default=None)
@click.option("--used/--unused", default=None, help="Mark the post used or unused")
@click.option("--image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--remove-image", is_flag=True, help="Delete the current image")
def edit(
    post_id: str,
    title: str | None,
    description: str | None,
    category: str | None,
    used: bool | None,
    image: Path | None,
    remove_image: bool,
):
    """Update a post. Only the given options change."""
    data = {}
    if title is not None:
        data["title"] = title
    if description is not None:
        data["description"] = description
    if category is not None:
        data["category"] = category
    if used is not None:
        data["used"] = str(used).lower()
    if remove_image:
        data["remove_image"] = "true"
    files = {"image": image_part(image)} if image else None

    with api_client() as client:
        response = client.put(f"/posts/{post_id}", data=data, files=files)
    if response.is_error:
        fail(response)

    console.print("[green]✓ Post updated[/green]")
    print_post(response.json())


@cli.command()
@click.argument("post_id")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
def delete(post_id: str, yes: bool):
    """Delete a post and its image."""
    if not yes:
        click.confirm("Are you sure you want to delete this post?", abort=True)

    with api_client() as client:
        response = client.delete(f"/posts/{post_id}")
    if response.is_error:
        fail(response)
    console.print(f"[green]✓ Post {post_id} deleted[/green]")


@cli.command()
@click.argument("post_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
def download(post_id: str, output: Path | None):
    """Save a post's image. Defaults to the image key as the filename."""
    with api_client() as client:
        response = client.get(f"/posts/{post_id}/image")
    if response.is_error:
        fail(response)

    if output is None:
        disposition = response.headers.get("content-disposition", "")
        name = disposition.partition("filename=")[2].strip('"') or f"{post_id}.bin"
        output = Path(name)
    output.write_bytes(response.content)
    console.print(f"[green]✓ Saved {len(response.content)} bytes to {output}[/green]")


if __name__ == "__main__":
    cli()
