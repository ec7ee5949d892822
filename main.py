#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UPN QR: генерация содержимого QR, PNG QR-кода и заполненного бланка UPN
из JSON с платёжными данными (новая или устаревшая схема).
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from qrcode.exceptions import DataOverflowError

from upn_config import get_config
from upn_decode import parse_upn_payload, verify_checksum
from upn_form import FormRenderer
from upn_pdf import build_forms_pdf, format_payment_register_text
from upn_qr import encode_record, render_qr
from upn_record import to_upn_record

logger = logging.getLogger(__name__)


def load_record(path: Path) -> dict:
    """Reads one payment record (JSON object) from file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object with payment fields")
    return data


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate Slovenian UPN QR payloads, QR code images and filled UPN forms "
        "from a JSON payment record (new 19-field or legacy layout)."
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("payload", help="Print the encoded UPN QR text")
    p.add_argument("record", type=Path, help="JSON file with the payment record")

    p = sub.add_parser("qr", help="Write the QR code as PNG")
    p.add_argument("record", type=Path, help="JSON file with the payment record")
    p.add_argument("-o", "--output", type=Path, default=None, help="Output PNG (default: record_qr.png)")
    p.add_argument("--size", type=int, default=None, help="QR image size in pixels")

    p = sub.add_parser("form", help="Write the filled UPN form as PNG")
    p.add_argument("record", type=Path, help="JSON file with the payment record")
    p.add_argument("-o", "--output", type=Path, default=None, help="Output PNG (default: record_upn.png)")
    p.add_argument("--template", type=Path, default=None, help="UPN form template image")
    p.add_argument("--font", type=Path, default=None, help="TrueType font for the form text")

    p = sub.add_parser("pdf", help="Write a printable PDF with register and forms")
    p.add_argument("records", type=Path, nargs="+", help="JSON files with payment records")
    p.add_argument("-o", "--output", type=Path, required=True, help="Output PDF")
    p.add_argument("--template", type=Path, default=None, help="UPN form template image")
    p.add_argument("--font", type=Path, default=None, help="TrueType font for the form text")

    p = sub.add_parser("decode", help="Parse an encoded UPN QR text file")
    p.add_argument("payload", type=Path, help="Text file with UPN QR content")
    return parser


def _run(args: argparse.Namespace, config: dict) -> int:
    locator = config["locator"]

    if args.command == "payload":
        sys.stdout.write(encode_record(load_record(args.record)))
        return 0

    if args.command == "qr":
        output = args.output or args.record.with_name(f"{args.record.stem}_qr.png")
        size = args.size or config["qr_size"]
        output.write_bytes(render_qr(load_record(args.record), size=size))
        print(f"Written: {output}")
        return 0

    if args.command == "form":
        output = args.output or args.record.with_name(f"{args.record.stem}_upn.png")
        renderer = FormRenderer(locator.with_overrides(args.template, args.font))
        renderer.save_form(load_record(args.record), output)
        print(f"Written: {output}")
        return 0

    if args.command == "pdf":
        records = [to_upn_record(load_record(path)) for path in args.records]
        renderer = FormRenderer(locator.with_overrides(args.template, args.font))
        build_forms_pdf(records, args.output, renderer=renderer)
        print(format_payment_register_text(records))
        print(f"Written: {args.output}")
        return 0

    if args.command == "decode":
        text = args.payload.read_text(encoding="utf-8")
        record = parse_upn_payload(text)
        if record is None:
            print("Error: content is not valid UPN QR format (expected first line 'UPNQR').", file=sys.stderr)
            return 1
        for name, value in vars(record).items():
            print(f"{name}: {value}")
        print(f"checksum: {'OK' if verify_checksum(text) else 'MISMATCH'}")
        return 0

    return 1


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = get_config()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.debug else config["log_level"],
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        return _run(args, config)
    except (ValueError, OSError, RuntimeError, DataOverflowError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
