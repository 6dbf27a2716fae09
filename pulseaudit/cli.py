"""Simple CLI entry point."""

import argparse
import asyncio
import json
import logging
import sys

from pulseaudit.core.audit import run_analysis
from pulseaudit.errors.exceptions import AuditError, ValidationError
from pulseaudit.schemas.common import AnalysisStatus, Strategy
from pulseaudit.services.validators import validate_url

logger = logging.getLogger("pulseaudit")


def _print_failure(error: str) -> None:
    print(json.dumps({"status": "failed", "error": error}))


def _log_status(status: AnalysisStatus) -> None:
    logger.info(f"Status: {status.value}")


def main() -> None:
    """Run a PageSpeed analysis and output JSON to stdout."""
    parser = argparse.ArgumentParser(description="PageSpeed Insights audit CLI")
    parser.add_argument("url", nargs="?", help="URL to analyze")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in Strategy],
        default=None,
        help="Device strategy (default: PSI_STRATEGY or mobile)",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate the URL without running the analysis",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress and retries to stderr",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        if not args.url:
            raise ValidationError("URL is required")

        if args.validate_only:
            validated_url = validate_url(args.url)
            print(
                json.dumps(
                    {
                        "status": "success",
                        "message": "Validation successful",
                        "validated_url": validated_url,
                    }
                )
            )
            return

        strategy = Strategy(args.strategy) if args.strategy else None
        report = asyncio.run(run_analysis(args.url, strategy=strategy, on_status=_log_status))
        print(report.model_dump_json(indent=2))

    except ValidationError as e:
        _print_failure(f"Validation error: {str(e)}")
        sys.exit(1)
    except AuditError as e:
        _print_failure(str(e))
        sys.exit(1)
    except Exception as e:
        _print_failure(f"Unexpected error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
