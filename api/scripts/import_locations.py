#!/usr/bin/env python3
"""
Import a JSON file of locations through the running API.

Usage:
    python scripts/import_locations.py locations.json --user-id admin-1
    python scripts/import_locations.py locations.json --preview
"""

import argparse
import base64
import sys
from pathlib import Path
from typing import Dict

import requests


def build_headers(api_key: str, user_id: str) -> Dict[str, str]:
    headers = {"Content-Type": "application/json", "X-User-Id": user_id, "X-User-Role": "admin"}
    if api_key:
        headers["X-API-Key"] = api_key
    return headers


def build_payload(path: Path) -> Dict:
    """Upload the file as base64 so the server sees the original bytes"""
    return {
        "file_content": base64.b64encode(path.read_bytes()).decode("utf-8"),
        "file_name": path.name,
    }


def preview(api_url: str, headers: Dict, payload: Dict) -> int:
    response = requests.post(f"{api_url}/import/preview", headers=headers, json=payload, timeout=60)
    if response.status_code != 200:
        print(f"✗ Preview failed: {response.status_code} {response.text}")
        return 1

    data = response.json()
    print(f"Records: {data['total']}  Valid: {data['valid']}  Invalid: {data['invalid']}")
    for record in data["locations"]:
        if not record.get("_valid"):
            print(f"  ✗ #{record['_index']} {record.get('name') or 'Unknown'}")
            for error in record.get("_errors", []):
                print(f"      - {error}")
    return 0 if data["invalid"] == 0 else 1


def run_import(api_url: str, headers: Dict, payload: Dict) -> int:
    response = requests.post(f"{api_url}/import/", headers=headers, json=payload, timeout=600)
    if response.status_code != 200:
        print(f"✗ Import failed: {response.status_code} {response.text}")
        return 1

    data = response.json()
    summary = data.get("summary") or {}
    print("=" * 50)
    print(f"IMPORT {data['status'].upper()}")
    print(f"  Job ID: {data['job_id']}")
    print(f"  Total: {summary.get('total', 0)}")
    print(f"  Imported: {summary.get('success', 0)}")
    print(f"  Failed: {summary.get('failed', 0)}")

    errors = data.get("errors") or []
    if errors:
        print("\nErrors:")
        for error in errors[:10]:
            print(f"  - #{error['index']} {error['name']}: {error['error']}")
        if len(errors) > 10:
            print(f"  ... and {len(errors) - 10} more errors")

    return 0 if summary.get("failed", 0) == 0 else 1


def main():
    parser = argparse.ArgumentParser(description="Import community resource locations from a JSON file")
    parser.add_argument("file", help="JSON file with an array of locations")
    parser.add_argument("--api-url", default="http://localhost:8000", help="Base URL of the API")
    parser.add_argument("--api-key", default="", help="Value for the X-API-Key header")
    parser.add_argument("--user-id", default="import-script", help="Admin user id recorded as the creator")
    parser.add_argument("--preview", action="store_true", help="Validate only, import nothing")
    args = parser.parse_args()

    path = Path(args.file)
    if not path.is_file():
        print(f"✗ File not found: {path}")
        sys.exit(1)
    if path.suffix.lower() != ".json":
        print("✗ Please select a JSON file")
        sys.exit(1)

    headers = build_headers(args.api_key, args.user_id)
    payload = build_payload(path)
    api_url = args.api_url.rstrip("/")

    try:
        if args.preview:
            sys.exit(preview(api_url, headers, payload))
        sys.exit(run_import(api_url, headers, payload))
    except requests.RequestException as e:
        print(f"✗ Cannot reach API at {api_url}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
