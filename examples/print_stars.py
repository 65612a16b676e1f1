#!/usr/bin/env python3
"""Example script demonstrating the default job pool.

Ten jobs each print a star. The queue is closed after the last submission
and the script waits for the pool to shut down before exiting.

Expected output:
    **********
"""

import logging

from jobpool import new_default_pool

logger = logging.getLogger(__name__)


def print_star() -> None:
    print("*", end="", flush=True)


def main() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    submitter, done = new_default_pool()
    for _ in range(10):
        submitter.put(print_star)
    submitter.close()

    done.wait()
    print()
    if not done.result.ok:
        logger.error(f"Pool shut down with error: {done.result.error}")


if __name__ == "__main__":
    main()
