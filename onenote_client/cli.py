"""Command-line front end for the OneNote client.

Usage:
    onenote-client notebooks
    onenote-client resolve <container-id>
    onenote-client children [<container-id>]
    onenote-client groups [<container-id>]
    onenote-client tree [<container-id>]
    onenote-client create-section [--in <container-id>] <name>
    onenote-client create-group [--in <container-id>] <name>

When no container ID is given, the notebook named by
ONENOTE_DEFAULT_NOTEBOOK is used. Settings come from the environment
(see onenote_client.config).

"children" prints sections then section groups. If the section groups
cannot be listed, the sections are still printed and a warning is logged.
"tree" prints the whole outline below a notebook or section group as nested
{type, id, name, children} objects; the same rule applies at every level.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .client import OneNoteClient
from .config import ClientConfig
from .errors import OneNoteError

logger = logging.getLogger("onenote_client.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onenote-client",
        description="List and create OneNote sections and section groups",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("notebooks", help="List notebooks")

    resolve = commands.add_parser("resolve", help="Show the kind of a container ID")
    resolve.add_argument("container_id")

    children = commands.add_parser("children", help="List sections and section groups")
    children.add_argument("container_id", nargs="?")

    groups = commands.add_parser("groups", help="List section groups")
    groups.add_argument("container_id", nargs="?")

    tree = commands.add_parser("tree", help="Outline all sections and section groups")
    tree.add_argument("container_id", nargs="?")

    for name, help_text in (
        ("create-section", "Create a section"),
        ("create-group", "Create a section group"),
    ):
        create = commands.add_parser(name, help=help_text)
        create.add_argument("--in", dest="container_id", default=None,
                            help="Notebook or section group ID")
        create.add_argument("name", help="Display name")

    return parser


def run(client: OneNoteClient, args: argparse.Namespace):
    """Dispatch one parsed command; returns a JSON-serializable result."""
    if args.command == "notebooks":
        return [n.to_dict() for n in client.list_notebooks()]

    if args.command == "resolve":
        kind = client.resolve_container(args.container_id)
        return {"id": args.container_id.strip(), "kind": kind.value}

    container_id = args.container_id or client.default_notebook_id()

    if args.command == "children":
        return [r.to_dict() for r in client.list_immediate_children(container_id)]
    if args.command == "groups":
        return [r.to_dict() for r in client.list_section_groups(container_id)]
    if args.command == "tree":
        return [node.to_dict() for node in client.list_notebook_tree(container_id)]
    if args.command == "create-section":
        return client.create_section(container_id, args.name).to_dict()
    if args.command == "create-group":
        return client.create_section_group(container_id, args.name).to_dict()

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ClientConfig.from_env()
    except OneNoteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    with OneNoteClient(config=config) as client:
        try:
            result = run(client, args)
        except OneNoteError as e:
            logger.debug("Command %s failed", args.command, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
