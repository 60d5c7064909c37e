import argparse
import asyncio
import sys

from nvr_exports.controller import ExportsController
from nvr_exports.core.config import Settings
from nvr_exports.core.logging import setup_logging
from nvr_exports.schemas.export import ExportMode
from nvr_exports.services.notifications import Notification, NotificationCenter


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage recording exports")
    parser.add_argument("--base-url", help="Backend root URL (defaults to BASE_URL).")
    parser.add_argument("--timezone", help="Timezone for start/end times (defaults to TIMEZONE).")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List exports.")
    list_cmd.add_argument("--search", default="", help="Only show exports matching this name.")

    show_cmd = sub.add_parser("show", help="Print the playback URL of an export.")
    show_cmd.add_argument("export_id")

    create_cmd = sub.add_parser("create", help="Start a new export.")
    create_cmd.add_argument("camera")
    create_cmd.add_argument("start", help="Local start time, e.g. 2024-01-01T09:00")
    create_cmd.add_argument("end", help="Local end time, e.g. 2024-01-01T10:00")
    create_cmd.add_argument("--name", default="")
    create_cmd.add_argument(
        "--mode",
        choices=[mode.value for mode in ExportMode],
        default=ExportMode.REALTIME.value,
    )

    rename_cmd = sub.add_parser("rename", help="Rename an export.")
    rename_cmd.add_argument("export_id")
    rename_cmd.add_argument("new_name")

    delete_cmd = sub.add_parser("delete", help="Delete an export.")
    delete_cmd.add_argument("export_id")
    delete_cmd.add_argument("--yes", action="store_true", help="Skip the confirmation prompt.")

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.timezone:
        overrides["timezone"] = args.timezone
    return Settings(**overrides)


def print_notification(notification: Notification):
    print(f"[{notification.severity.value}] {notification.message}")


async def run(args: argparse.Namespace, controller: ExportsController) -> int:
    await controller.mount()
    try:
        return await dispatch(args, controller)
    finally:
        await controller.unmount()


async def dispatch(args: argparse.Namespace, controller: ExportsController) -> int:
    if not controller.registry.loaded:
        print(f"Could not load exports: {controller.registry.last_error}")
        return 1

    if args.command == "list":
        controller.set_search(args.search)
        view = controller.view()
        if view.empty_message:
            print(view.empty_message)
            return 0
        for item in view.items:
            if item.hidden:
                continue
            exp = item.export
            status = " (in progress)" if exp.in_progress else ""
            print(f"{exp.id}\t{exp.camera or '-'}\t{exp.display_name}{status}")
        return 0

    export = None
    if args.command in ("show", "delete"):
        export = controller.registry.find(args.export_id)
        if export is None:
            print(f"No export with id {args.export_id}")
            return 1

    if args.command == "show":
        controller.open_export(export)
        print(controller.selection.video_url)
        return 0

    if args.command == "create":
        controller.open_create_dialog()
        controller.create.camera = args.camera
        controller.create.start_time = args.start
        controller.create.end_time = args.end
        controller.create.name = args.name
        controller.create.mode = ExportMode(args.mode)
        ok = await controller.submit_create()
    elif args.command == "rename":
        ok = await controller.rename(args.export_id, args.new_name)
    else:
        controller.request_delete(export)
        if not args.yes:
            answer = await asyncio.to_thread(
                input, f"{controller.delete.confirmation_message} [y/N] "
            )
            if answer.strip().lower() not in ("y", "yes"):
                controller.cancel_delete()
                return 0
        ok = await controller.confirm_delete()

    return 0 if ok else 1


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = build_settings(args)
    setup_logging()

    notifications = NotificationCenter()
    notifications.subscribe(print_notification)
    controller = ExportsController(settings=settings, notifier=notifications)

    sys.exit(asyncio.run(run(args, controller)))


if __name__ == "__main__":
    main()
