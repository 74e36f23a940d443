#!/usr/bin/env python3
"""
ShareBudget - startup configuration
Resolves the deployment environment, opens the checkpoint store for it and
reports what was resolved.
"""
import json
import sys
from typing import List, Optional

from app.dependencies import create_dependencies, default_data_dir
from config import get_logger, setup_logging
from config.exceptions import ShareBudgetError
from config.logging_config import LogContext

logger = get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""
    argv = sys.argv[1:] if argv is None else argv
    debug = "--debug" in argv

    data_dir = default_data_dir()
    root_logger = setup_logging(data_dir=data_dir, debug=debug, console_output=True)
    logger.info("ShareBudget starting...")

    try:
        with LogContext(logger, "Startup configuration"):
            deps = create_dependencies(data_dir=data_dir, app_logger=root_logger)
    except ShareBudgetError as e:
        logger.critical(f"Startup failed: {e}", exc_info=True)
        return 1

    report = deps.registry.summary()
    report["checkpoints"] = {
        kind.value: store.get() for kind, store in deps.checkpoints.items()
    }
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
