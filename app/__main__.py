"""CLI entry point for batch scoring of hospice providers."""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from app.config import load_multiples, settings
from app.errors import InvalidConfigurationError
from app.market import MarketConsolidationAnalyzer
from app.models import EvaluationFailure, IndustryMultiples, ProviderEvaluation, ScoringCriteria
from app.repository import SqlProviderRepository
from app.score import ProviderScorer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def run_scoring(
    records: list[dict[str, Any]],
    output_path: Path,
    criteria: ScoringCriteria,
    multiples: Optional[IndustryMultiples] = None,
    workers: int = 1,
    save: bool = False,
) -> list[ProviderEvaluation]:
    """Run the complete scoring pipeline over a batch of records."""
    logger.info(f"Scoring {len(records)} provider records...")
    scorer = ProviderScorer(criteria, multiples)
    ranked, failures = scorer.evaluate_and_rank(records, max_workers=workers)

    for failure in failures:
        logger.warning(f"  Record {failure.index} rejected: {failure.error}")

    if save and ranked:
        logger.info("Saving results to database...")
        repository = SqlProviderRepository()
        repository.save_records([e.record for e in ranked])
        repository.save_results(ranked)

    logger.info(f"Exporting results to {output_path}...")
    export_to_csv(ranked, output_path)
    logger.info(f"Results exported to {output_path}")

    print_summary(ranked, failures)

    return ranked


def load_records(input_path: Path) -> list[dict[str, Any]]:
    """Load provider records from a JSON array or a CSV file."""
    if input_path.suffix.lower() == ".csv":
        with open(input_path, "r", newline="", encoding="utf-8") as f:
            return list(csv.DictReader(f))

    with open(input_path, "r") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("providers", [])
    return data


def _money(value: Optional[float]) -> str:
    return f"{value:.0f}" if value is not None else ""


def export_to_csv(results: list[ProviderEvaluation], output_path: Path):
    """Export ranked evaluations to a CSV file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)

        # Header
        writer.writerow([
            "Rank",
            "CCN",
            "Name",
            "State",
            "County",
            "ADC",
            "Classification",
            "Overall Score",
            "Confidence",
            "Confirming Signals",
            "Reasons",
            "Carry-Back Score",
            "Carry-Back Likelihood",
            "Data Completeness",
            "Revenue Value (Median)",
            "ADC Value (Median)",
        ])

        # Data rows
        for rank, r in enumerate(results, 1):
            record = r.record
            valuation = r.valuation
            revenue_median = (
                valuation.revenue_based.median
                if valuation and valuation.revenue_based else None
            )
            adc_median = (
                valuation.adc_based.median
                if valuation and valuation.adc_based else None
            )
            score = r.breakdown.overall_score
            writer.writerow([
                rank,
                record.ccn,
                record.provider_name or "",
                record.state or "",
                record.county or "",
                record.estimated_adc if record.estimated_adc is not None else "",
                r.classification.classification.value,
                f"{score:.1f}" if score is not None else "",
                r.breakdown.confidence_level.value,
                r.classification.confirming_signals,
                "; ".join(r.classification.reasons),
                f"{r.carry_back.score:.0f}",
                r.carry_back.likelihood,
                f"{r.data_quality.completeness:.2f}",
                _money(revenue_median),
                _money(adc_median),
            ])


def print_summary(results: list[ProviderEvaluation], failures: list[EvaluationFailure]):
    """Print a summary of results to console."""
    print("\n" + "=" * 60)
    print("HOSPICE ACQUISITION TARGETS - RESULTS SUMMARY")
    print("=" * 60)

    report = MarketConsolidationAnalyzer().analyze(results)
    summary = report.summary

    print(f"\nProviders scored: {summary.total}")
    print(f"Rejected records: {len(failures)}")
    print(f"GREEN: {summary.green_count} | YELLOW: {summary.yellow_count} | RED: {summary.red_count}")

    green = [r for r in results if r.classification.classification.value == "GREEN"]
    if green:
        print("\n" + "-" * 60)
        print("TOP 10 GREEN TARGETS")
        print("-" * 60)

        for rank, r in enumerate(green[:10], 1):
            record = r.record
            print(f"\n#{rank} {record.provider_name or record.ccn} ({record.ccn})")
            print(
                f"   Score: {r.breakdown.overall_score:.1f} | "
                f"Confidence: {r.breakdown.confidence_level.value}"
            )
            if record.city or record.state:
                print(f"   Location: {', '.join(p for p in (record.city, record.state) if p)}")
            if record.estimated_adc is not None:
                print(f"   ADC: {record.estimated_adc:g}")
            print(f"   Carry-back: {r.carry_back.likelihood} ({r.carry_back.score:.0f})")
            if r.classification.reasons:
                print(f"   Why: {r.classification.reasons[0]}")

    print("\n" + "=" * 60)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Hospice Acquisition Targets - score, classify and value providers"
    )
    parser.add_argument(
        "--input", "-i",
        type=Path,
        default=Path("providers.json"),
        help="Provider records as a JSON array or CSV (default: providers.json)",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=settings.data_dir / settings.default_output_name,
        help="Output CSV path (default: data/ranked_providers.csv)",
    )
    parser.add_argument(
        "--multiples", "-m",
        type=Path,
        default=settings.industry_multiples_path,
        help="Industry multiples JSON used for valuation ranges",
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=settings.batch_workers,
        help=f"Worker threads for batch scoring (default: {settings.batch_workers})",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Store records and evaluations in the local database",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Load records
    if not args.input.exists():
        logger.error(f"Input file not found: {args.input}")
        logger.info("Create a providers.json file or use --input to specify path")
        sys.exit(1)

    try:
        records = load_records(args.input)
        logger.info(f"Loaded {len(records)} records from {args.input}")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load records: {e}")
        sys.exit(1)

    # Load configuration
    try:
        criteria = settings.criteria()
        multiples = load_multiples(args.multiples) if args.multiples else None
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load industry multiples: {e}")
        sys.exit(1)

    # Run scoring
    try:
        run_scoring(
            records=records,
            output_path=args.output,
            criteria=criteria,
            multiples=multiples,
            workers=args.workers,
            save=args.save,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Scoring failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
