#!/usr/bin/env python3
"""
Fetch inputs from the record-keeping service and print the dashboard payload.

Usage (from repo root; STORE_TOKEN in .env):
  python scripts/print_dashboard.py --subject alice
  python scripts/print_dashboard.py --subject alice --view ACOES --hide IMOVEIS --hide CARROS
"""
from pathlib import Path
import argparse
import json
import sys

# Ensure repo root is on sys.path.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from patrimony.config import default_hidden, settings
from patrimony.logging import setup_logging
from patrimony.pipeline.orchestrator import dashboard_for
from patrimony.providers.store_adapter import StoreAdapter


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--subject", default=settings.default_subject)
    parser.add_argument("--view", default="overall")
    parser.add_argument("--hide", action="append", default=None, help="category to hide (repeatable)")
    parser.add_argument("--log-level", default=None, help="overrides LOG_LEVEL")
    args = parser.parse_args()
    if not args.subject:
        parser.error("--subject is required when DEFAULT_SUBJECT is not set")

    setup_logging(args.log_level)
    hidden = {h.upper() for h in args.hide} if args.hide else default_hidden()
    with StoreAdapter() as store:
        payload = dashboard_for(store, args.subject, args.view, hidden)
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    main()
