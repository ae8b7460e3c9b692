#!/usr/bin/env python3
"""
Run script for the stock ledger
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from app import create_app
from app.build import build_database
from app.logger import get_logger

# Note: Admin credentials are configured via environment variables.
# Run 'python generate_env.py' to create .env file with secure passwords.

app = create_app()
logger = get_logger("stock_ledger.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Property Stock Ledger')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables and critical data only, then exit')
    parser.add_argument('--enable-debug-data', action='store_true', default=True,
                        help='Insert demo data (default: enabled if flag not present)')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Disable demo data insertion')
    parser.add_argument('--validate-ledger', action='store_true',
                        help='Check stored data against the ledger invariants and exit (non-zero on errors)')
    return parser.parse_args()


def validate_ledger():
    from app.buisness.inventory.ledger_validator import LedgerValidator

    with app.app_context():
        report = LedgerValidator().run()
    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.ok else 1


if __name__ == '__main__':
    args = parse_arguments()

    if args.validate_ledger:
        sys.exit(validate_ledger())

    logger.debug("Starting Property Stock Ledger...")

    # Critical data is ALWAYS checked and inserted regardless of flags
    build_database(seed=args.enable_debug_data and not args.build_only, app=app)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    # FLASK_HOST: Server host (default: 127.0.0.1 for security)
    host = os.environ.get('FLASK_HOST', '127.0.0.1')

    # FLASK_PORT: Server port (default: 5000)
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
