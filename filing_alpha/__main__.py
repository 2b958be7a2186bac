"""Unified entry point for filing-alpha pipelines."""

import argparse
import logging
import sys

log = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        logging.basicConfig(level=logging.INFO)
        log.error("Usage: python -m filing_alpha <module> [args...]")
        log.error("Available modules:")
        log.error("  extract   - Score filings and write signals.csv")
        log.error("  backtest  - Run buffered backtest over a signals file")
        sys.exit(1)

    module = argv[0]

    if module == "extract":
        _configure_logging()
        p = argparse.ArgumentParser(prog="filing_alpha extract",
                                    description="Extract features and signals from filings")
        p.add_argument("--config", required=True, help="Path to YAML config file")
        args = p.parse_args(argv[1:])
        from filing_alpha.engine.runner import run_extraction
        out = run_extraction(args.config)
        log.info("Finished: %s", out)
    elif module == "backtest":
        _configure_logging()
        p = argparse.ArgumentParser(prog="filing_alpha backtest",
                                    description="Run buffered backtest")
        p.add_argument("--config", required=True, help="Path to YAML config file")
        args = p.parse_args(argv[1:])
        from filing_alpha.engine.runner import run_backtest_from_config
        run_id = run_backtest_from_config(args.config)
        log.info("Finished: run_id %s", run_id)
    else:
        logging.basicConfig(level=logging.INFO)
        log.error("Unknown module: %s", module)
        sys.exit(1)


if __name__ == "__main__":
    main()
