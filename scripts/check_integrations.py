"""Check the styling service and local storage before starting the bot.

Exits with status 1 when any check fails.
"""

from __future__ import annotations

import asyncio
import sys

from wardrobe.integrations import run_all_checks
from wardrobe.monitoring import configure_logging


def main() -> int:
    configure_logging()
    results = asyncio.run(run_all_checks())
    for result in results:
        print(f"{'✅' if result.success else '❌'} {result.name}: {result.message}")
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
