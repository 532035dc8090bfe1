from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from skillshelf.app import (
    add_category,
    analyze,
    bulk_assign_owner,
    bulk_refresh,
    consolidate,
    create_skill,
    draft_merge,
    list_categories,
    list_skills,
    remove_category,
    rename_category,
    resolve_context,
)
from skillshelf.config import ConfigurationError, configure_logging, get_actor_config
from skillshelf.domain.model import SkillOwner, Tier
from skillshelf.domain.results import Ok, failure_reason
from skillshelf.domain.tiering import progressive_context

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from skillshelf.domain.bulk import BulkResult
    from skillshelf.domain.model import Actor, Skill

log = logging.getLogger(__name__)

_TIER_CHOICES = [tier.value for tier in Tier]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:  # noqa: PLR0915
    parser = argparse.ArgumentParser(description="Curate the Skillshelf knowledge library")
    parser.add_argument(
        "--user-id",
        type=str,
        help="Acting user id (overrides SKILLSHELF_USER_ID)",
    )
    parser.add_argument(
        "--user-email",
        type=str,
        help="Acting user e-mail (overrides SKILLSHELF_USER_EMAIL)",
    )
    parser.add_argument(
        "--user-name",
        type=str,
        help="Acting user display name (overrides SKILLSHELF_USER_NAME)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    skills = subparsers.add_parser("skills", help="Skill management commands")
    skills_sub = skills.add_subparsers(dest="skills_command", required=True)
    skills_sub.add_parser("list", help="List all skills")
    skills_add = skills_sub.add_parser("add", help="Create a skill")
    skills_add.add_argument("--title", type=str, required=True, help="Skill title")
    content = skills_add.add_mutually_exclusive_group(required=True)
    content.add_argument("--content", type=str, help="Skill content (markdown)")
    content.add_argument("--content-file", type=Path, help="Read skill content from a file")
    skills_add.add_argument("--tag", action="append", default=[], help="Tag (repeatable)")
    skills_add.add_argument(
        "--category",
        action="append",
        default=[],
        help="Category membership (repeatable)",
    )
    skills_add.add_argument(
        "--tier",
        choices=_TIER_CHOICES,
        default=Tier.CORE.value,
        help="Default tier",
    )
    skills_add.add_argument(
        "--override",
        action="append",
        default=[],
        metavar="CATEGORY=TIER",
        help="Tier override for a category (repeatable)",
    )
    skills_add.add_argument(
        "--source-url",
        action="append",
        default=[],
        help="Source URL the content was derived from (repeatable)",
    )

    categories = subparsers.add_parser("categories", help="Category management commands")
    categories_sub = categories.add_subparsers(dest="categories_command", required=True)
    categories_sub.add_parser("list", help="List categories in precedence order")
    categories_add = categories_sub.add_parser("add", help="Append a category")
    categories_add.add_argument("name", type=str)
    categories_rename = categories_sub.add_parser(
        "rename",
        help="Rename a category and rekey the skills that use it",
    )
    categories_rename.add_argument("old", type=str)
    categories_rename.add_argument("new", type=str)
    categories_remove = categories_sub.add_parser("remove", help="Remove a category")
    categories_remove.add_argument("name", type=str)

    context = subparsers.add_parser("context", help="Show the tiered context for categories")
    context.add_argument(
        "--category",
        action="append",
        default=[],
        help="Active category (repeatable)",
    )
    context.add_argument(
        "--through",
        choices=_TIER_CHOICES,
        default=Tier.LIBRARY.value,
        help="Last tier to load progressively",
    )
    context.add_argument(
        "--limit",
        type=int,
        help="Maximum skills added per progressive stage",
    )
    context.add_argument(
        "--by-usage",
        action="store_true",
        help="Order skills by usage count within each tier",
    )

    subparsers.add_parser("analyze", help="Analyze the library for redundant skills")

    merge = subparsers.add_parser("merge", help="Consolidate skills into one")
    merge.add_argument("skill_ids", nargs="+", help="Ids of the skills to merge")
    merge.add_argument("--title", type=str, help="Title for the merged skill")
    merge.add_argument(
        "--dry-run",
        action="store_true",
        help="Only show the merge draft; change nothing",
    )

    assign = subparsers.add_parser("assign-owner", help="Add an owner to several skills")
    assign.add_argument("skill_ids", nargs="+", help="Ids of the skills to update")
    assign.add_argument("--name", type=str, required=True, help="Owner display name")
    assign.add_argument("--owner-user-id", type=str, help="Owner user id")
    assign.add_argument("--owner-email", type=str, help="Owner e-mail")

    refresh = subparsers.add_parser("refresh", help="Refresh skills from their source URLs")
    refresh.add_argument("skill_ids", nargs="*", default=[], help="Ids to refresh")
    refresh.add_argument("--all", action="store_true", help="Refresh every skill")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_override(value: str) -> tuple[str, Tier]:
    category, sep, tier = value.partition("=")
    if not sep or not category.strip():
        raise ValueError(f"Invalid override (expected CATEGORY=TIER): {value}")
    try:
        return category.strip(), Tier(tier.strip().lower())
    except ValueError as exc:
        raise ValueError(f"Invalid tier in override: {value}") from exc


def _resolve_actor(args: argparse.Namespace) -> Actor:
    actor = get_actor_config()
    overrides = {
        key: value
        for key, value in (
            ("user_id", args.user_id),
            ("email", args.user_email),
            ("name", args.user_name),
        )
        if value
    }
    return replace(actor, **overrides) if overrides else actor


def _validate(args: argparse.Namespace) -> None:
    for raw in getattr(args, "skill_ids", []):
        _parse_uuid(raw)
    for raw in getattr(args, "override", []):
        _parse_override(raw)
    limit = getattr(args, "limit", None)
    if limit is not None and limit < 0:
        raise ValueError("Limit must be non-negative")
    if args.command == "refresh" and not args.all and not args.skill_ids:
        raise ValueError("Pass skill ids or --all")


def _log_skill(skill: Skill) -> None:
    log.info(
        "%s  %s  tier=%s  categories=%s  owners=%s",
        skill.id,
        skill.title,
        skill.tier.value,
        ", ".join(skill.categories) or "-",
        ", ".join(owner.name for owner in skill.owners) or "-",
    )


def _log_bulk(result: BulkResult) -> None:
    log.info("Bulk %s: %s", result.operation, result.summary())
    for failure in result.failed:
        log.warning("  %s (%s): %s", failure.title, failure.skill_id, failure.error)


def _run_skills(args: argparse.Namespace, actor: Actor) -> None:
    if args.skills_command == "list":
        for skill in list_skills():
            _log_skill(skill)
        return
    content = (
        args.content_file.read_text(encoding="utf-8")
        if args.content_file is not None
        else args.content
    )
    skill = create_skill(
        title=args.title,
        content=content,
        tags=args.tag,
        categories=args.category,
        tier=Tier(args.tier),
        tier_overrides=dict(_parse_override(raw) for raw in args.override),
        source_urls=args.source_url,
        actor=actor,
    )
    log.info("Created skill %s", skill.id)


def _run_categories(args: argparse.Namespace, actor: Actor) -> None:
    match args.categories_command:
        case "list":
            for category in list_categories():
                log.info("%s  %s", category.position, category.name)
        case "add":
            add_category(args.name)
        case "rename":
            result = rename_category(args.old, args.new, actor=actor)
            log.info(
                "Renamed %r to %r: rekeyed=%s, failed=%s",
                result.old,
                result.new,
                len(result.updated),
                len(result.failed),
            )
        case "remove":
            remove_category(args.name)
        case other:
            raise ValueError(f"Unsupported categories command: {other}")


def _run_context(args: argparse.Namespace) -> None:
    tiered = resolve_context(args.category, by_usage=args.by_usage)
    for tier in Tier:
        log.info("%s (%s)", tier.value, len(tiered.bucket(tier)))
        for skill in tiered.bucket(tier):
            log.info("  %s  %s", skill.id, skill.title)
    context = progressive_context(tiered, through=Tier(args.through), limit=args.limit)
    log.info("Context through %s: %s skill(s)", args.through, len(context))


def _run_analyze() -> None:
    outcome = analyze()
    if not isinstance(outcome, Ok):
        log.error("Library analysis failed: %s", failure_reason(outcome))
        return
    analysis = outcome.value
    log.info("Health score %s: %s", analysis.health_score, analysis.summary)
    for rec in analysis.recommendations:
        log.info(
            "[%s/%s] %s (%s): %s",
            rec.priority.value,
            rec.type.value,
            rec.title,
            rec.id,
            ", ".join(str(skill_id) for skill_id in rec.affected_skill_ids),
        )


def _run_merge(args: argparse.Namespace, actor: Actor) -> None:
    skill_ids = [_parse_uuid(raw) for raw in args.skill_ids]
    if args.dry_run:
        draft, target, _ = draft_merge(skill_ids)
        if draft.warning:
            log.warning("%s", draft.warning)
        log.info(
            "Would merge %s into %r (%s) with %s tag(s), %s source(s), %s owner(s)",
            ", ".join(draft.loser_titles),
            args.title or draft.title,
            target.id,
            len(draft.tags),
            len(draft.source_urls),
            len(draft.owners),
        )
        return
    result = consolidate(skill_ids, actor=actor, title=args.title)
    log.info(
        "Merged into %s (%r), deleted %s",
        result.target.id,
        result.target.title,
        len(result.deleted_ids),
    )
    for failure in result.failed_deletions:
        log.warning("Could not delete %s (%s): %s", failure.title, failure.skill_id, failure.error)


def _run_assign_owner(args: argparse.Namespace, actor: Actor) -> None:
    owner = SkillOwner(name=args.name, user_id=args.owner_user_id, email=args.owner_email)
    skill_ids = [_parse_uuid(raw) for raw in args.skill_ids]
    _log_bulk(bulk_assign_owner(skill_ids, owner, actor=actor))


def _run_refresh(args: argparse.Namespace, actor: Actor) -> None:
    if args.all:
        skill_ids = [skill.id for skill in list_skills()]
    else:
        skill_ids = [_parse_uuid(raw) for raw in args.skill_ids]
    _log_bulk(bulk_refresh(skill_ids, actor=actor))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging()
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    actor = _resolve_actor(parsed_args)
    try:
        match parsed_args.command:
            case "skills":
                _run_skills(parsed_args, actor)
            case "categories":
                _run_categories(parsed_args, actor)
            case "context":
                _run_context(parsed_args)
            case "analyze":
                _run_analyze()
            case "merge":
                _run_merge(parsed_args, actor)
            case "assign-owner":
                _run_assign_owner(parsed_args, actor)
            case "refresh":
                _run_refresh(parsed_args, actor)
            case other:
                raise ValueError(f"Unsupported command: {other}")  # noqa: TRY301
    except ValueError:
        log.exception("Invalid request")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
