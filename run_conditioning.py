#!/usr/bin/env python
"""
Data Conditioning CLI Entry Point.

Command-line interface for balancing and feature-selecting a dataset
before model training.

Usage:
    python run_conditioning.py --data data.csv --config conditioning.json
"""

import argparse
import logging
import sys

from conditioning.config import BalancingConfig, ConditioningSettings, SelectionConfig, load_config
from conditioning.exceptions import ConditioningError
from conditioning.pipeline import DataConditioningPipeline
from conditioning.preprocessing import load_raw_data, load_sql_table
from conditioning.sink import SqliteSink

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Data Conditioning: class balancing and feature selection',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  From CSV:
    python run_conditioning.py --data data.csv --config conditioning.json

  From SQLite, persisting the result:
    python run_conditioning.py --db source.db --table loans \\
        --where "year >= 2020" --config conditioning.json --output-db out.db

  Only some features:
    python run_conditioning.py --data data.csv --config conditioning.json \\
        --features age,income,balance
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--data', '-d',
        type=str,
        help='Path to input CSV file'
    )
    source.add_argument(
        '--db',
        type=str,
        help='Path to input SQLite database (use with --table)'
    )

    parser.add_argument(
        '--table',
        type=str,
        default=None,
        help='Source table in --db'
    )

    parser.add_argument(
        '--where',
        type=str,
        default=None,
        help='Row filter for --db, without the WHERE keyword'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default=None,
        help='JSON config with dataBalancing / featureEngineering sections'
    )

    parser.add_argument(
        '--target', '-t',
        type=str,
        default=None,
        help='Target column name (overrides the config file)'
    )

    parser.add_argument(
        '--features',
        type=str,
        default=None,
        help='Comma-separated feature columns (default: all non-target columns)'
    )

    parser.add_argument(
        '--output-db',
        type=str,
        default=None,
        help='SQLite database to write the conditioned table to'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.config and not args.target:
        logger.error("Either --config or --target is required")
        sys.exit(2)

    if args.config:
        try:
            settings = load_config(args.config, target_field=args.target)
        except (OSError, ValueError) as e:
            logger.error(f"Could not load config {args.config}: {e}")
            sys.exit(1)
    else:
        settings = ConditioningSettings(
            balancing=BalancingConfig(),
            selection=SelectionConfig(),
            target_field=args.target,
        )

    target = settings.target_field
    features = [f.strip() for f in args.features.split(',')] if args.features else None

    logger.info("=" * 60)
    logger.info("Data Conditioning")
    logger.info("=" * 60)
    logger.info(f"Target: {target}")
    logger.info(f"Balancing: {getattr(settings.balancing.method, 'value', settings.balancing.method)}")
    logger.info(f"Selection: {getattr(settings.selection.method, 'value', settings.selection.method)}")
    logger.info("=" * 60)

    try:
        if args.data:
            df = load_raw_data(args.data, features, target, settings.model_kind)
        else:
            if not args.table:
                logger.error("--table is required with --db")
                sys.exit(2)
            if features is None:
                logger.error("--features is required with --db")
                sys.exit(2)
            df, _ = load_sql_table(
                args.db, args.table, features, target, settings.model_kind, args.where
            )

        if features is None:
            features = [c for c in df.columns if c != target]

        sink = SqliteSink(args.output_db) if args.output_db else None
        pipeline = DataConditioningPipeline(
            sink=sink,
            output_table=settings.output_table or 'conditioned_data',
            model_kind=settings.model_kind,
        )

        result = pipeline.condition(
            df, features, target, settings.balancing, settings.selection
        )

    except FileNotFoundError as e:
        logger.error(f"Data file not found: {e}")
        sys.exit(1)
    except ConditioningError as e:
        logger.error(f"Conditioning failed: {e}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("CONDITIONING COMPLETE")
    print("=" * 60)
    if result.selection_report:
        print(result.selection_report)
    print(f"Original rows: {result.original_row_count:,}")
    print(f"Balanced rows: {result.balanced_row_count:,}")
    print(f"Features ({len(result.feature_names)}): {', '.join(result.feature_names)}")
    print("=" * 60)
    return result


if __name__ == '__main__':
    main()
