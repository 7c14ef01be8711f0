"""
Command-line front end for the snippet store.

Usage:
  snipdesk new "Docker prune" --body "docker system prune -af" --tag docker
  snipdesk list
  snipdesk search docker --tag devops --lang bash
  snipdesk copy docker
  snipdesk exec docker
  snipdesk edit docker
  snipdesk config show | set data_directory ~/snips | bootstrap
  snipdesk serve --port 8000

Env:
  SNIPDESK_DATA_DIR (overrides data_directory from the config file)
  STORE_BACKEND     (local | http)
  EDITOR            (used by `edit`, default vi)
"""
from __future__ import annotations

import argparse
import asyncio
import os
import shlex
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from snipdesk.core import settings as settings_module
from snipdesk.core.exceptions import DomainError
from snipdesk.core.models import Snippet
from snipdesk.core.settings import get_settings
from snipdesk.logging import setup_logging
from snipdesk.session import SessionController, build_controller
from snipdesk.storage import parse_frontmatter, render_frontmatter


def _notice(message: str) -> None:
    print(message, file=sys.stderr)


def _controller() -> SessionController:
    return build_controller(get_settings(), notify=_notice)


async def _close(controller: SessionController) -> None:
    aclose = getattr(controller.bridge, "aclose", None)
    if aclose is not None:
        await aclose()


def _filter(snippets: Iterable[Snippet], tags: Sequence[str], language: str) -> List[Snippet]:
    """Keep snippets carrying every tag in ``tags`` and, if given, ``language``."""
    wanted = {t.lower() for t in tags}
    language = language.strip().lower()
    out = []
    for s in snippets:
        if not wanted.issubset({t.lower() for t in s.tags}):
            continue
        if language and s.language.lower() != language:
            continue
        out.append(s)
    return out


def _print_table(snippets: Sequence[Snippet]) -> None:
    rows = [("ID", "Title", "Tags", "Language", "Favorite")]
    for s in snippets:
        rows.append(
            (
                s.id[:8],
                s.title,
                ", ".join(s.tags) or "-",
                s.language or "-",
                "Yes" if s.is_favorite else "No",
            )
        )
    widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]))]
    for row in rows:
        print("   ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())


async def _top_match(controller: SessionController, query: str) -> Snippet:
    await controller.start()
    await controller.search(query)
    if controller.list_query.error is not None:
        raise controller.list_query.error
    if not controller.list_query.items:
        raise DomainError(f"no snippets found for query: {query}")
    target = controller.list_query.items[0]
    await controller.select(target)
    return target


# ---------------------------------------------------------------------------
# Commands


async def cmd_new(args: argparse.Namespace) -> int:
    body = args.body if args.body is not None else input("Command> ")
    if not args.title.strip():
        raise DomainError("description cannot be empty")
    controller = _controller()
    try:
        created = await controller.create(args.title.strip())
        if created is None:
            return 1
        controller.edit_body(body)
        if args.language:
            controller.edit_language(args.language)
        for tag in args.tag or []:
            await controller.add_tag(tag)
        saved = await controller.save()
    finally:
        await _close(controller)
    print(f"Snippet saved: {saved.title}")
    return 0


async def cmd_list(args: argparse.Namespace) -> int:
    controller = _controller()
    try:
        await controller.start()
        if controller.list_query.error is not None:
            raise controller.list_query.error
        snippets = list(controller.list_query.items)
    finally:
        await _close(controller)
    if not snippets:
        print("No snippets found.")
        return 0
    _print_table(snippets)
    return 0


async def cmd_search(args: argparse.Namespace) -> int:
    controller = _controller()
    try:
        await controller.start()
        await controller.search(args.query or "")
        if controller.list_query.error is not None:
            raise controller.list_query.error
        found = _filter(controller.list_query.items, args.tag or [], args.lang or "")
    finally:
        await _close(controller)
    if not found:
        print("No snippets found.")
        return 0
    _print_table(found)
    return 0


async def cmd_copy(args: argparse.Namespace) -> int:
    controller = _controller()
    try:
        await _top_match(controller, args.query)
        await controller.copy_body()
    finally:
        await _close(controller)
    return 0


async def cmd_exec(args: argparse.Namespace) -> int:
    controller = _controller()
    try:
        target = await _top_match(controller, args.query)
    finally:
        await _close(controller)
    print(f"Executing: {target.title}", file=sys.stderr)
    return subprocess.run(["sh", "-c", target.body]).returncode


def _run_editor(text: str) -> str:
    editor = os.environ.get("EDITOR") or "vi"
    fd, name = tempfile.mkstemp(prefix="snipdesk-edit-", suffix=".md")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        result = subprocess.run([*shlex.split(editor), str(path)])
        if result.returncode != 0:
            raise DomainError(f"editor exited with status {result.returncode}")
        return path.read_text(encoding="utf-8")
    finally:
        path.unlink(missing_ok=True)


async def cmd_edit(args: argparse.Namespace) -> int:
    controller = _controller()
    try:
        await _top_match(controller, args.query)
        current = controller.session.draft.to_snippet()
        original = render_frontmatter(current)
        edited_text = _run_editor(original)
        if edited_text == original:
            print("No changes made, edit cancelled.")
            return 1
        edited = parse_frontmatter(edited_text)

        # id and created_at always come from the stored snippet
        controller.edit_title(edited.title)
        controller.edit_body(edited.body)
        controller.edit_language(edited.language)
        for tag in [t for t in current.tags if t not in edited.tags]:
            await controller.remove_tag(tag)
        for tag in edited.tags:
            await controller.add_tag(tag)
        if edited.is_favorite != current.is_favorite:
            await controller.toggle_favorite()
        saved = await controller.save()
    finally:
        await _close(controller)
    print(f"Snippet '{saved.title}' updated successfully")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    if args.action == "set":
        data = settings_module.load_config_file()
        data[args.key] = args.value
        settings_module.save_config(data)
        print(f"Configuration updated: {args.key} = {args.value}")
        return 0
    if args.action == "bootstrap":
        path = settings_module.bootstrap_config()
        print(f"Configuration bootstrapped: {path}")
    get_settings.cache_clear()
    print("Current configuration:")
    print(f"  Config File: {settings_module.config_file_path()}")
    print(f"  Data Directory: {get_settings().data_dir}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("apps.api.main:app", host=args.host, port=args.port)
    return 0


# ---------------------------------------------------------------------------
# Entry points


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snipdesk", description="Local-first snippet manager")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="Create a new snippet")
    p.add_argument("title", help="Snippet title (description)")
    p.add_argument("--body", help="Snippet body; prompted for when omitted")
    p.add_argument("--language", "-L", default="", help="Snippet language")
    p.add_argument("--tag", "-t", action="append", help="Tag (repeatable)")
    p.set_defaults(handler=cmd_new)

    p = sub.add_parser("list", help="List all snippets")
    p.set_defaults(handler=cmd_list)

    p = sub.add_parser("search", help="Search snippets")
    p.add_argument("query", nargs="?", default="", help="Fuzzy query")
    p.add_argument("--tag", "-t", action="append", help="Filter by tag (repeatable, AND logic)")
    p.add_argument("--lang", "--language", "-L", default="", help="Filter by language")
    p.set_defaults(handler=cmd_search)

    p = sub.add_parser("copy", help="Copy the best match's body to the clipboard")
    p.add_argument("query")
    p.set_defaults(handler=cmd_copy)

    p = sub.add_parser("exec", help="Run the best match's body with sh")
    p.add_argument("query")
    p.set_defaults(handler=cmd_exec)

    p = sub.add_parser("edit", help="Edit the best match in $EDITOR")
    p.add_argument("query")
    p.set_defaults(handler=cmd_edit)

    p = sub.add_parser("config", help="Show or change configuration")
    actions = p.add_subparsers(dest="action", required=True)
    actions.add_parser("show", help="Show current configuration")
    setter = actions.add_parser("set", help="Set a configuration value")
    setter.add_argument("key", choices=settings_module.CONFIG_KEYS)
    setter.add_argument("value")
    actions.add_parser("bootstrap", help="Write the default configuration file")
    p.set_defaults(handler=cmd_config)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.set_defaults(handler=cmd_serve)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        outcome = args.handler(args)
        if asyncio.iscoroutine(outcome):
            outcome = asyncio.run(outcome)
        return int(outcome)
    except (DomainError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def run() -> None:
    setup_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
