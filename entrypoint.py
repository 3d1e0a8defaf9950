#!/usr/bin/env python3
"""
GridFS Cleaner Container Entrypoint

Runs the orphaned chunk cleanup once and exits with its status.
Configuration comes from the environment (MongoConnectionString, DryRun).
"""

import sys


def main():
    from gridfs_cleaner.cli import main as cli_main

    sys.exit(cli_main(sys.argv[1:]))


if __name__ == "__main__":
    main()
