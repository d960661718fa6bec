"""Run the git-browser API server.

Usage:
    GITBROWSER_CONFIG=repos.json python -m git_browser.api

Host and port come from GITBROWSER_HOST / GITBROWSER_PORT
(default 127.0.0.1:8080).
"""

import os
import sys

import uvicorn

from .app import create_app
from .config import ConfigValidationError


def main():
    host = os.environ.get('GITBROWSER_HOST', '127.0.0.1')
    port = int(os.environ.get('GITBROWSER_PORT', '8080'))

    try:
        app = create_app()
    except ConfigValidationError as exc:
        print(f'Invalid configuration: {exc}', file=sys.stderr)
        sys.exit(1)

    print(f'git-browser starting on http://{host}:{port}')
    uvicorn.run(app, host=host, port=port)


if __name__ == '__main__':
    main()
