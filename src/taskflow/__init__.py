# SPDX-License-Identifier: MIT

from taskflow.cleanup import register_cleanup
from taskflow.initialize import initialize
from taskflow.logging_setup import setup_logging
from taskflow.terminal.app import run


def main() -> None:
    initialize()
    setup_logging()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
