#!/usr/bin/env python3

import argparse

from docschema.core.config import load_config
from docschema.core.logging_setup import configure_logging
from docschema.cli import config, template


def main():
    parser = argparse.ArgumentParser(prog="docschema", description="Document template schema toolkit")
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands (they accept the merged config)
    template.register(subparsers)
    config.register(subparsers)

    args = parser.parse_args()
    if hasattr(args, "func"):
        cfg = load_config()
        if args.log_level:
            cfg.setdefault("logging", {})["level"] = args.log_level
        configure_logging(cfg)
        exit(args.func(args, cfg))
    parser.print_help()
    exit(1)


if __name__ == "__main__":
    main()
