from __future__ import annotations

import argparse
import json

from steamguard.core.config import load_config


def main() -> None:
    ap = argparse.ArgumentParser(description="Print the effective steamguard configuration.")
    ap.add_argument("--config", default=None, help="JSON config file (defaults to $STEAMGUARD_CONFIG)")
    args = ap.parse_args()
    cfg = load_config(args.config)
    print(json.dumps(cfg.model_dump(), indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
