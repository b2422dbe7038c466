#!/usr/bin/env python3
"""
Remind Me CLI - リマインダー・タグ・ロケール・ルートを操作するコマンドラインインターフェース

Usage:
    python -m remind_me list [--filter all|active|completed] [--search TEXT] [--sort date|title|status] [--format json|text]
    python -m remind_me add --title "タイトル" [--description "詳細"] [--due-date YYYY-MM-DDTHH:MM] [--tag TAG_ID ...]
    python -m remind_me edit --id ID [--title ...] [--description ...] [--due-date ...] [--clear-due-date] [--tag TAG_ID ...] [--clear-tags]
    python -m remind_me toggle --id ID
    python -m remind_me delete --id ID
    python -m remind_me get --id ID
    python -m remind_me stats
    python -m remind_me calendar [--month YYYY-MM]
    python -m remind_me tags list | add --name NAME [--color #RRGGBB] | delete --id ID
    python -m remind_me locale get | set LOCALE
    python -m remind_me translate KEY [--locale LOCALE]
    python -m remind_me route parse PATH [--base-path /repo]
    python -m remind_me route build --route app --locale en [--mode server|static] [--base-path /repo]

共通オプション: --data-dir DIR, --backend file|sqlite|memory, --config PATH, --utc
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import STORAGE_BACKENDS, Config
from .exceptions import ConfigurationError
from .i18n import Locale, LocaleEngine, load_translations
from .reminders import (
    Reminder,
    ReminderFilter,
    ReminderRepository,
    ReminderSort,
    ReminderStore,
    Tag,
    UNSET,
    format_for_display,
    is_overdue,
)
from .reminders.calendar import format_month_year, month_grid, month_summary, parse_month, today
from .reminders.query import unscheduled
from .routing import HostingMode, Route, build_url, parse_route
from .storage import StoragePort, create_storage


@dataclass
class CliContext:
    """コマンド実行時に共有するオブジェクト"""

    storage: StoragePort
    repo: ReminderRepository
    locale_engine: LocaleEngine
    tz: Optional[tzinfo]


def format_reminder_json(reminder: Reminder, tz: Optional[tzinfo] = None) -> Dict[str, Any]:
    """リマインダーを辞書形式に変換（表示用の派生値を含む）"""
    data = reminder.model_dump()
    data["due_display"] = format_for_display(reminder.due_date, tz) if reminder.due_date else ""
    data["overdue"] = bool(reminder.due_date) and not reminder.completed and is_overdue(reminder.due_date, tz=tz)
    return data


def format_reminder_text(
    reminder: Reminder, ctx: CliContext, tags: Optional[List[Tag]] = None
) -> str:
    """リマインダーをテキスト形式で整形"""
    t = ctx.locale_engine.t
    mark = "[x]" if reminder.completed else "[ ]"
    if reminder.due_date:
        due = format_for_display(reminder.due_date, ctx.tz)
        if not reminder.completed and is_overdue(reminder.due_date, tz=ctx.tz):
            due = f"{due} ({t('reminder.overdue')})"
    else:
        due = t("reminder.no_due_date")
    line = f"{mark} [{reminder.id}] {reminder.title} | {t('reminder.due')}: {due}"
    if reminder.description:
        line += f" | {reminder.description}"
    if tags:
        line += " | " + ", ".join(f"#{tag.name}" for tag in tags)
    return line


def format_tag_json(tag: Tag) -> Dict[str, Any]:
    return tag.model_dump()


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False))


def _not_found(kind: str, item_id: str) -> int:
    print(f"Error: ID {item_id} の{kind}が見つかりません。", file=sys.stderr)
    return 1


def _warn_unsaved(ctx: CliContext) -> None:
    if not ctx.repo.last_save_ok:
        print(f"Warning: {ctx.locale_engine.t('toast.save_failed')}", file=sys.stderr)


# --- reminders ---------------------------------------------------------------


def cmd_list(ctx: CliContext, filter_by: str, search: str, sort_by: str, output_format: str) -> int:
    """リマインダー一覧を表示"""
    items = ctx.repo.select(ReminderFilter.parse(filter_by), search, ReminderSort.parse(sort_by), ctx.tz)
    if output_format == "json":
        _print_json([format_reminder_json(item, ctx.tz) for item in items])
    elif not items:
        print(ctx.locale_engine.t("empty.title"))
    else:
        for item in items:
            print(format_reminder_text(item, ctx, ctx.repo.tags_for(item)))
    return 0


def cmd_add(
    ctx: CliContext,
    title: str,
    description: str,
    due_date: Optional[str],
    tag_ids: List[str],
    output_format: str,
) -> int:
    """新しいリマインダーを追加"""
    if not title.strip():
        print("Error: タイトルは必須です。", file=sys.stderr)
        return 1

    created = ctx.repo.create(
        title=title,
        description=description,
        due_date=due_date or "",
        tag_ids=tag_ids,
        tz=ctx.tz,
    )
    _warn_unsaved(ctx)
    if output_format == "json":
        _print_json(format_reminder_json(created, ctx.tz))
    else:
        print(f"{ctx.locale_engine.t('toast.added')}: {format_reminder_text(created, ctx)}")
    return 0


def cmd_edit(
    ctx: CliContext,
    reminder_id: str,
    title: Optional[str],
    description: Optional[str],
    due_date: Optional[str],
    clear_due_date: bool,
    tag_ids: Optional[List[str]],
    clear_tags: bool,
    output_format: str,
) -> int:
    """既存のリマインダーを更新"""
    if title is not None and not title.strip():
        print("Error: タイトルを空にすることはできません。", file=sys.stderr)
        return 1

    due_value: Any = UNSET
    if clear_due_date:
        due_value = ""
    elif due_date is not None:
        due_value = due_date

    new_tags: Optional[List[str]] = tag_ids
    if clear_tags:
        new_tags = []

    updated = ctx.repo.update(
        reminder_id,
        title=title,
        description=description,
        due_date=due_value,
        tag_ids=new_tags,
        tz=ctx.tz,
    )
    if updated is None:
        return _not_found("リマインダー", reminder_id)

    _warn_unsaved(ctx)
    if output_format == "json":
        _print_json(format_reminder_json(updated, ctx.tz))
    else:
        print(f"{ctx.locale_engine.t('toast.updated')}: {format_reminder_text(updated, ctx)}")
    return 0


def cmd_toggle(ctx: CliContext, reminder_id: str, output_format: str) -> int:
    """完了状態を切り替える"""
    updated = ctx.repo.toggle(reminder_id)
    if updated is None:
        return _not_found("リマインダー", reminder_id)

    _warn_unsaved(ctx)
    if output_format == "json":
        _print_json(format_reminder_json(updated, ctx.tz))
    else:
        status = "toast.completed" if updated.completed else "toast.marked_active"
        print(f"{updated.title}: {ctx.locale_engine.t(status)}")
    return 0


def cmd_delete(ctx: CliContext, reminder_id: str, output_format: str) -> int:
    """リマインダーを削除"""
    if not ctx.repo.delete(reminder_id):
        return _not_found("リマインダー", reminder_id)

    _warn_unsaved(ctx)
    if output_format == "json":
        _print_json({"deleted": True, "id": reminder_id})
    else:
        print(f"{ctx.locale_engine.t('toast.deleted')}: {reminder_id}")
    return 0


def cmd_get(ctx: CliContext, reminder_id: str, output_format: str) -> int:
    """特定のリマインダーを取得"""
    reminder = ctx.repo.get(reminder_id)
    if reminder is None:
        return _not_found("リマインダー", reminder_id)

    if output_format == "json":
        _print_json(format_reminder_json(reminder, ctx.tz))
    else:
        print(format_reminder_text(reminder, ctx, ctx.repo.tags_for(reminder)))
    return 0


def cmd_stats(ctx: CliContext, output_format: str) -> int:
    """集計値を表示"""
    stats = ctx.repo.statistics(tz=ctx.tz)
    if output_format == "json":
        _print_json(stats.to_dict())
    else:
        t = ctx.locale_engine.t
        print(
            f"{t('stats.total')}: {stats.total} | {t('stats.active')}: {stats.active} | "
            f"{t('stats.completed')}: {stats.completed} | {t('stats.overdue')}: {stats.overdue}"
        )
    return 0


def cmd_calendar(ctx: CliContext, month: Optional[str], output_format: str) -> int:
    """月ごとのカレンダー表示"""
    if month:
        parsed = parse_month(month)
        if parsed is None:
            print(f"Error: 不正な月指定: {month}（YYYY-MM形式で指定してください）", file=sys.stderr)
            return 1
        year, month_number = parsed
    else:
        year, month_number, _ = today(ctx.tz)

    buckets = month_summary(year, month_number, ctx.repo.calendar(ctx.tz))
    label = format_month_year(year, month_number, ctx.locale_engine.current_locale)
    without_date = unscheduled(ctx.repo.list(), ctx.tz)

    if output_format == "json":
        _print_json(
            {
                "month": f"{year:04d}-{month_number:02d}",
                "label": label,
                "days": [cell.to_dict() for cell in month_grid(year, month_number, buckets)],
                "reminders": {
                    key: [format_reminder_json(item, ctx.tz) for item in items] for key, items in buckets.items()
                },
                "unscheduled": [format_reminder_json(item, ctx.tz) for item in without_date],
            }
        )
        return 0

    print(label)
    for key, items in buckets.items():
        print(f"{key}:")
        for item in items:
            print(f"  {format_reminder_text(item, ctx)}")
    if without_date:
        print(f"{ctx.locale_engine.t('calendar.unscheduled')}:")
        for item in without_date:
            print(f"  {format_reminder_text(item, ctx)}")
    return 0


# --- tags --------------------------------------------------------------------


def cmd_tags(ctx: CliContext, args: argparse.Namespace) -> int:
    """タグの一覧・追加・削除"""
    if args.tags_command == "list":
        tags = ctx.repo.list_tags()
        if args.format == "json":
            _print_json([format_tag_json(tag) for tag in tags])
        elif not tags:
            print(ctx.locale_engine.t("tags.empty"))
        else:
            for tag in tags:
                print(f"[{tag.id}] {tag.name} {tag.color}")
        return 0

    if args.tags_command == "add":
        try:
            tag = ctx.repo.create_tag(args.name, args.color)
        except ValueError as exc:
            print(f"Error: タグを追加できません: {exc}", file=sys.stderr)
            return 1
        _warn_unsaved(ctx)
        if args.format == "json":
            _print_json(format_tag_json(tag))
        else:
            print(f"[{tag.id}] {tag.name} {tag.color}")
        return 0

    if not ctx.repo.delete_tag(args.id):
        return _not_found("タグ", args.id)
    _warn_unsaved(ctx)
    if args.format == "json":
        _print_json({"deleted": True, "id": args.id})
    else:
        print(f"{ctx.locale_engine.t('tags.delete')}: {args.id}")
    return 0


# --- locale / translation / routes --------------------------------------------


def cmd_locale(ctx: CliContext, args: argparse.Namespace) -> int:
    """ロケール設定の表示・変更"""
    engine = ctx.locale_engine
    if args.locale_command == "set":
        locale = Locale.parse(args.locale)
        saved = engine.set_locale(locale)
        if not saved:
            print("Warning: ロケール設定を保存できませんでした。", file=sys.stderr)
    locale = engine.current_locale
    if args.format == "json":
        _print_json({"locale": locale.value, "saved": (engine.saved_locale() or locale).value})
    else:
        print(f"{locale.value} ({engine.t('language.' + locale.value)})")
    return 0


def cmd_translate(ctx: CliContext, key: str, locale_text: Optional[str], output_format: str) -> int:
    """翻訳キーを解決"""
    engine = ctx.locale_engine
    locale = Locale.parse(locale_text) if locale_text else engine.current_locale
    value = engine.t(key, locale)
    if output_format == "json":
        _print_json({"key": key, "locale": locale.value, "value": value})
    else:
        print(value)
    return 0


def cmd_route(args: argparse.Namespace) -> int:
    """URLと (ページ, ロケール) の相互変換"""
    if args.route_command == "parse":
        route, locale = parse_route(args.path, args.base_path)
        if args.format == "json":
            _print_json({"route": route.value, "locale": locale.value})
        else:
            print(f"{route.value} {locale.value}")
        return 0

    try:
        route = Route(args.route)
    except ValueError:
        print(f"Error: 不明なページ: {args.route}", file=sys.stderr)
        return 1
    url = build_url(route, Locale.parse(args.locale), HostingMode.parse(args.mode), args.base_path)
    if args.format == "json":
        _print_json({"url": url})
    else:
        print(url)
    return 0


def _add_format_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="出力フォーマット（デフォルト: text）",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remind-me",
        description="Remind Me CLI - リマインダー管理",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, help="設定ファイル（YAML）のパス")
    parser.add_argument("--data-dir", type=str, help="データ保存ディレクトリ（設定ファイルより優先）")
    parser.add_argument("--backend", choices=list(STORAGE_BACKENDS), help="ストレージバックエンド")
    parser.add_argument("--utc", action="store_true", help="ローカル時刻の代わりにUTCで日時を扱う")

    subparsers = parser.add_subparsers(dest="command", help="実行するコマンド", required=True)

    # list コマンド
    parser_list = subparsers.add_parser("list", help="リマインダー一覧を表示")
    parser_list.add_argument("--filter", default="all", help="all|active|completed（デフォルト: all）")
    parser_list.add_argument("--search", default="", help="タイトル・説明の部分一致検索")
    parser_list.add_argument("--sort", default="date", help="date|title|status（デフォルト: date）")
    _add_format_argument(parser_list)

    # add コマンド
    parser_add = subparsers.add_parser("add", help="新しいリマインダーを追加")
    parser_add.add_argument("--title", required=True, help="タイトル")
    parser_add.add_argument("--description", default="", help="詳細説明")
    parser_add.add_argument("--due-date", help="期限（YYYY-MM-DDTHH:MM または RFC 3339）")
    parser_add.add_argument("--tag", action="append", default=[], help="タグID（複数指定可）")
    _add_format_argument(parser_add)

    # edit コマンド
    parser_edit = subparsers.add_parser("edit", help="既存のリマインダーを更新")
    parser_edit.add_argument("--id", required=True, help="更新するリマインダーのID")
    parser_edit.add_argument("--title", help="新しいタイトル")
    parser_edit.add_argument("--description", help="新しい詳細説明")
    parser_edit.add_argument("--due-date", help="新しい期限")
    parser_edit.add_argument("--clear-due-date", action="store_true", help="期限をクリア")
    parser_edit.add_argument("--tag", action="append", default=None, help="タグID（指定すると置き換え）")
    parser_edit.add_argument("--clear-tags", action="store_true", help="タグをすべて外す")
    _add_format_argument(parser_edit)

    for name, help_text in (
        ("toggle", "完了状態を切り替える"),
        ("delete", "リマインダーを削除"),
        ("get", "特定のリマインダーを取得"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--id", required=True, help="リマインダーのID")
        _add_format_argument(sub)

    # stats コマンド
    parser_stats = subparsers.add_parser("stats", help="集計値を表示")
    _add_format_argument(parser_stats)

    # calendar コマンド
    parser_calendar = subparsers.add_parser("calendar", help="月ごとのカレンダー表示")
    parser_calendar.add_argument("--month", help="対象月（YYYY-MM、デフォルト: 今月）")
    _add_format_argument(parser_calendar)

    # tags コマンド
    parser_tags = subparsers.add_parser("tags", help="タグ管理")
    tags_sub = parser_tags.add_subparsers(dest="tags_command", required=True)
    tags_list = tags_sub.add_parser("list", help="タグ一覧")
    _add_format_argument(tags_list)
    tags_add = tags_sub.add_parser("add", help="タグを追加")
    tags_add.add_argument("--name", required=True, help="タグ名")
    tags_add.add_argument("--color", default="#FA8A59", help="16進カラーコード（デフォルト: #FA8A59）")
    _add_format_argument(tags_add)
    tags_delete = tags_sub.add_parser("delete", help="タグを削除")
    tags_delete.add_argument("--id", required=True, help="タグID")
    _add_format_argument(tags_delete)

    # locale コマンド
    parser_locale = subparsers.add_parser("locale", help="表示言語の確認・変更")
    locale_sub = parser_locale.add_subparsers(dest="locale_command", required=True)
    locale_get = locale_sub.add_parser("get", help="現在のロケール")
    _add_format_argument(locale_get)
    locale_set = locale_sub.add_parser("set", help="ロケールを変更して保存")
    locale_set.add_argument("locale", help="en | zh-Hans | zh-Hant（zh-CN, zh-TW なども可）")
    _add_format_argument(locale_set)

    # translate コマンド
    parser_translate = subparsers.add_parser("translate", help="翻訳キーを解決")
    parser_translate.add_argument("key", help="ドット区切りのキー（例: app.header.title）")
    parser_translate.add_argument("--locale", help="一時的に使用するロケール（保存しない）")
    _add_format_argument(parser_translate)

    # route コマンド
    parser_route = subparsers.add_parser("route", help="URLの解釈・生成")
    route_sub = parser_route.add_subparsers(dest="route_command", required=True)
    route_parse = route_sub.add_parser("parse", help="パスまたはハッシュを解釈")
    route_parse.add_argument("path", help="例: /zh-Hant/app, #/en/privacy")
    route_parse.add_argument("--base-path", default="", help="ベースパス（例: /repo）")
    _add_format_argument(route_parse)
    route_build = route_sub.add_parser("build", help="正規URLを生成")
    route_build.add_argument("--route", default="landing", help="landing|app|privacy|terms")
    route_build.add_argument("--locale", default="en", help="ロケール")
    route_build.add_argument("--mode", default="server", help="server|static")
    route_build.add_argument("--base-path", default="", help="ベースパス（例: /repo）")
    _add_format_argument(route_build)

    return parser


def build_context(args: argparse.Namespace) -> CliContext:
    """設定を読み込み、ストレージ・リポジトリ・ロケールエンジンを初期化"""
    config = Config.load(Path(args.config) if args.config else None)
    if args.backend:
        config.storage.backend = args.backend
    if args.data_dir:
        config.storage.data_dir = args.data_dir

    storage = create_storage(config.storage)
    repo = ReminderRepository(ReminderStore(storage))
    locale_engine = LocaleEngine.at_startup(
        storage,
        default=Locale.parse(config.i18n.default_locale),
        translations=load_translations(Path(config.i18n.locales_dir) if config.i18n.locales_dir else None),
    )
    return CliContext(
        storage=storage,
        repo=repo,
        locale_engine=locale_engine,
        tz=timezone.utc if args.utc else None,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLIエントリポイント"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # ルート変換はストレージを使わない
    if args.command == "route":
        return cmd_route(args)

    try:
        ctx = build_context(args)
    except (ConfigurationError, OSError) as exc:
        print(f"Error: 初期化に失敗しました: {exc}", file=sys.stderr)
        return 1

    # コマンド実行
    if args.command == "list":
        return cmd_list(ctx, args.filter, args.search, args.sort, args.format)
    elif args.command == "add":
        return cmd_add(ctx, args.title, args.description, args.due_date, args.tag, args.format)
    elif args.command == "edit":
        return cmd_edit(
            ctx,
            args.id,
            args.title,
            args.description,
            args.due_date,
            args.clear_due_date,
            args.tag,
            args.clear_tags,
            args.format,
        )
    elif args.command == "toggle":
        return cmd_toggle(ctx, args.id, args.format)
    elif args.command == "delete":
        return cmd_delete(ctx, args.id, args.format)
    elif args.command == "get":
        return cmd_get(ctx, args.id, args.format)
    elif args.command == "stats":
        return cmd_stats(ctx, args.format)
    elif args.command == "calendar":
        return cmd_calendar(ctx, args.month, args.format)
    elif args.command == "tags":
        return cmd_tags(ctx, args)
    elif args.command == "locale":
        return cmd_locale(ctx, args)
    elif args.command == "translate":
        return cmd_translate(ctx, args.key, args.locale, args.format)
    else:
        print(f"Error: 不明なコマンド: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
