"""Package entry point for ``python -m listy``.

WHY: Users replay a transcript file through a session with
``python -m listy transcript.txt``, or start the HTTP API with
``python -m listy --serve``.

HOW: Checks sys.argv for the ``--serve`` flag. If present, starts the
API server. Otherwise, delegates to the CLI's main() function.
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from listy.server.app import run_api
        run_api()
    else:
        from listy.cli import main
        main()
