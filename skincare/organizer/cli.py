"""CLI entry point for the organizer."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from .config import DEFAULT_CONFIG_PATH, load_config
from .datemath import format_display_date
from .db import ProductStore, StorageError
from .expiry import expiring_within, expiry_status, sort_by_expiry
from .images import decode_data_url, encode_image_file
from .models import MAIN_CATEGORIES, SUB_CATEGORIES, ProductForm
from .reconcile import BACKUP_FILENAME, ImportFormatError, MergeMode
from .records import filter_records, form_from_record


def _add_product_fields(p: argparse.ArgumentParser) -> None:
    p.add_argument("--name", dest="product_name", help="Product name")
    p.add_argument("--brand", dest="brand_name", help="Brand name")
    p.add_argument(
        "--category", dest="main_category", choices=MAIN_CATEGORIES,
        help="Main category",
    )
    p.add_argument(
        "--sub-category", dest="sub_category", choices=SUB_CATEGORIES,
        help="Sub category (skincare only)",
    )
    p.add_argument("--expiry", dest="expiry_date", metavar="YYYY-MM-DD")
    p.add_argument("--manufactured", dest="manufacturing_date", metavar="YYYY-MM-DD")
    p.add_argument("--opened", dest="opening_date", metavar="YYYY-MM-DD")
    p.add_argument("--weight", help="Weight or volume, e.g. '30 ml'")
    p.add_argument("--price")
    p.add_argument("--pao", dest="pao_months", metavar="MONTHS",
                   help="Period after opening in months")
    photo = p.add_mutually_exclusive_group()
    photo.add_argument("--image", type=str, help="Attach a photo file")
    photo.add_argument("--capture", action="store_true",
                       help="Take a photo with the camera")


_FORM_FIELDS = (
    "product_name", "brand_name", "main_category", "sub_category",
    "expiry_date", "manufacturing_date", "opening_date", "weight", "price",
    "pao_months",
)


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="skincare-organizer",
        description="Skincare & makeup organizer: track opening dates, PAO and expiry",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress")

    sub = parser.add_subparsers(dest="command")

    # list
    list_parser = sub.add_parser("list", help="List products by expiry")
    list_parser.add_argument("--query", "-q", default="", help="Search text")
    list_parser.add_argument(
        "--category", default="all",
        choices=("all", *MAIN_CATEGORIES, *SUB_CATEGORIES[1:]),
    )
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # show
    show_parser = sub.add_parser("show", help="Show product details")
    show_parser.add_argument("id")

    # add / edit
    add_parser = sub.add_parser("add", help="Add a product")
    _add_product_fields(add_parser)
    edit_parser = sub.add_parser("edit", help="Edit a product")
    edit_parser.add_argument("id")
    _add_product_fields(edit_parser)
    edit_parser.add_argument("--clear-image", action="store_true")

    # delete
    delete_parser = sub.add_parser("delete", help="Delete a product")
    delete_parser.add_argument("id")
    delete_parser.add_argument("--yes", "-y", action="store_true",
                               help="Do not ask for confirmation")

    # import / export
    import_parser = sub.add_parser("import", help="Import a JSON backup")
    import_parser.add_argument("file")
    import_parser.add_argument(
        "--mode", choices=[m.value for m in MergeMode], default=None,
        help="replace the current set or merge by id",
    )
    export_parser = sub.add_parser("export", help="Export a JSON backup")
    export_parser.add_argument("file", nargs="?", default=BACKUP_FILENAME,
                               help="Output file ('-' for stdout)")

    # expiring
    expiring_parser = sub.add_parser("expiring", help="Expired or expiring soon")
    expiring_parser.add_argument("--days", type=int, default=None)

    # report
    report_parser = sub.add_parser("report", help="Write a PDF expiry report")
    report_parser.add_argument("file", help="Output PDF path")

    # cameras / alerts
    sub.add_parser("cameras", help="List available cameras")
    sub.add_parser("alerts", help="Run the scheduled expiry check")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "cameras":
        _cmd_cameras()
        return
    if args.command == "alerts":
        asyncio.run(_cmd_alerts(config))
        return

    store = ProductStore(config.storage.path)
    try:
        match args.command:
            case "list":
                _cmd_list(store, args)
            case "show":
                _cmd_show(store, args)
            case "add":
                _cmd_add(store, config, args)
            case "edit":
                _cmd_edit(store, config, args)
            case "delete":
                _cmd_delete(store, args)
            case "import":
                _cmd_import(store, config, args)
            case "export":
                _cmd_export(store, args)
            case "expiring":
                _cmd_expiring(store, config, args)
            case "report":
                _cmd_report(store, config, args)
    except (StorageError, ImportFormatError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()


def _photo(config, args) -> str | None:
    if args.image:
        return encode_image_file(args.image)
    if args.capture:
        from .camera import ProductCamera

        camera = ProductCamera(
            camera_index=config.camera.index, save_dir=config.camera.save_dir
        )
        print("Taking photo...")
        capture = camera.capture()
        return encode_image_file(capture.image_path)
    return None


def _apply_args(form: ProductForm, args) -> ProductForm:
    for name in _FORM_FIELDS:
        value = getattr(args, name)
        if value is not None:
            setattr(form, name, value)
    return form


def _summary_line(record: dict, today: date) -> str:
    status = expiry_status(record, today=today)
    expires = format_display_date(status.effective)
    countdown = status.relative or "no expiry"
    name = record.get("productName", "")
    if record.get("brandName"):
        name += f" ({record['brandName']})"
    return f"  {str(record.get('id', ''))[:8]}  {name:<40}  {expires}  {countdown}"


def _cmd_list(store: ProductStore, args) -> None:
    records = filter_records(store.load(), args.query, args.category)
    records = sort_by_expiry(records)

    if args.json:
        print(json.dumps(records, ensure_ascii=False, indent=2))
        return

    if not records:
        print("No products yet. Add your first product to get started.")
        return
    today = date.today()
    print(f"Showing {len(records)} item(s)")
    for record in records:
        print(_summary_line(record, today))


def _resolve(store: ProductStore, record_id: str) -> dict:
    """Look up a record by full id or unique id prefix."""
    records = store.load()
    matches = [r for r in records if str(r.get("id", "")).startswith(record_id)]
    exact = [r for r in matches if r.get("id") == record_id]
    if exact:
        return exact[0]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise ValueError(f"No product with id {record_id!r}")
    raise ValueError(f"Ambiguous id prefix {record_id!r}")


def _cmd_show(store: ProductStore, args) -> None:
    record = _resolve(store, args.id)
    status = expiry_status(record, date.today())

    category = record.get("mainCategory", "")
    if record.get("subCategory"):
        category += f" / {record['subCategory']}"
    pao = record.get("paoMonths")
    pao_expiry = "—"
    if status.pao_date:
        pao_expiry = f"{format_display_date(status.pao_date)} ({status.pao_label})"

    print(record.get("productName", ""))
    print(f"  ID:            {record['id']}")
    print(f"  Brand:         {record.get('brandName') or '—'}")
    print(f"  Category:      {category}")
    print(f"  Weight:        {record.get('weight') or '—'}")
    print(f"  Price:         {record.get('price') or '—'}")
    print(f"  Manufactured:  {format_display_date(record.get('manufacturingDate'))}")
    opened = format_display_date(record.get("openingDate"))
    if status.opened_label:
        opened += f" ({status.opened_label})"
    print(f"  Opened:        {opened}")
    expiry = format_display_date(record.get("expiryDate"))
    if status.label:
        expiry += f" ({status.label})"
    print(f"  Expiry date:   {expiry}")
    print(f"  PAO:           {f'{pao}m' if pao else '—'}")
    print(f"  Expiry (PAO):  {pao_expiry}")
    print(f"  Effective:     {format_display_date(status.effective)}"
          f"  {status.relative or ''}")
    print(f"  Photo:         {_photo_summary(record.get('imageData'))}")
    print(f"  Added:         {format_display_date(record.get('createdAt'))}")


def _photo_summary(image_data) -> str:
    if not image_data:
        return "no"
    decoded = decode_data_url(image_data)
    if decoded is None:
        return "unreadable"
    media_type, payload = decoded
    return f"{media_type}, {max(1, round(len(payload) / 1024))} KB"


def _cmd_add(store: ProductStore, config, args) -> None:
    form = _apply_args(ProductForm(), args)
    image = _photo(config, args)
    if image:
        form.image_data = image
    record = store.add(form)
    print(f"Added {record['productName']} ({record['id']})")


def _cmd_edit(store: ProductStore, config, args) -> None:
    existing = _resolve(store, args.id)
    form = _apply_args(form_from_record(existing), args)
    if args.main_category and args.main_category != "skincare":
        form.sub_category = ""
    image = _photo(config, args)
    if image:
        form.image_data = image
    elif args.clear_image:
        form.image_data = ""
    record = store.update(existing["id"], form)
    print(f"Saved changes to {record['productName']}")


def _cmd_delete(store: ProductStore, args) -> None:
    record = _resolve(store, args.id)
    if not args.yes:
        answer = input(
            f"Delete {record.get('productName')}? "
            "This will remove it from storage. [y/N] "
        )
        if answer.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return
    store.delete(record["id"])
    print("Deleted.")


def _cmd_import(store: ProductStore, config, args) -> None:
    text = Path(args.file).read_text(encoding="utf-8")
    mode = args.mode or config.import_.mode
    records = store.import_text(text, mode)
    print(f"Import successful. {len(records)} product(s) stored.")


def _cmd_export(store: ProductStore, args) -> None:
    text = store.export_text()
    if args.file == "-":
        print(text)
        return
    Path(args.file).write_text(text, encoding="utf-8")
    print(f"Exported to {args.file}")


def _cmd_expiring(store: ProductStore, config, args) -> None:
    days = args.days if args.days is not None else config.display.warn_days
    today = date.today()
    due = expiring_within(store.load(), days, today=today)
    if not due:
        print(f"Nothing expires within {days} day(s).")
        return
    print(f"{len(due)} product(s) expired or expiring within {days} day(s):")
    for record in due:
        print(_summary_line(record, today))


def _cmd_report(store: ProductStore, config, args) -> None:
    from .pdf import generate_report

    try:
        path = generate_report(
            store.load(), args.file, font_path=config.report.font_path
        )
    except ImportError as e:
        print(f"PDF error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Report saved: {path}")


def _cmd_cameras() -> None:
    from .camera import ProductCamera

    cameras = ProductCamera.list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  Camera {idx}")


async def _cmd_alerts(config) -> None:
    from .scheduler import ExpiryAlertScheduler

    try:
        scheduler = ExpiryAlertScheduler(config)
    except ImportError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    due = scheduler.check_expiry()
    print(f"{len(due)} product(s) expired or expiring within "
          f"{config.alerts.warn_days} day(s).")
    if not config.alerts.enabled:
        return

    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop()
