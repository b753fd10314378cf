#!/usr/bin/env python3
"""
Run script for the construction back office
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from buildoffice import create_app
from buildoffice.build import build_database
from buildoffice.logger import get_logger

# Run 'python generate_env.py' to create a .env file with a random SECRET_KEY.

app = create_app()
logger = get_logger("buildoffice.run")


def parse_arguments():
    """Parse command line arguments for the build step"""
    parser = argparse.ArgumentParser(description='Construction back office')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables and critical data only, do not start the server')
    parser.add_argument('--enable-debug-data', action='store_true', default=True,
                        help='Enable debug data insertion (default: enabled if flag not present)')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Disable debug data insertion')
    return parser.parse_args()


def _flag(name):
    return os.environ.get(name, 'False').lower() in ('true', '1', 'yes', 'on')


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting construction back office...")

    # Critical data is always checked and inserted regardless of flags
    with app.app_context():
        build_database(enable_debug_data=args.enable_debug_data, build_only=args.build_only)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    debug_mode = _flag('FLASK_DEBUG')
    use_reloader = _flag('USE_RELOADER')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
