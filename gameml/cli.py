#!/usr/bin/env python3
"""
CLI for GAME model scoring and feature statistics

Usage:
    python -m gameml.cli feature-stats --input data.csv [--columns a b c]
    python -m gameml.cli score --input data.csv --feature-columns a b c \
        --booster global=models/global.txt --booster per_user=models/user.json@userId \
        [--id-tag-columns userId] [--task-type logistic_regression] [--output scores.csv] [--evaluate]
"""
import argparse
import json
import logging
import sys
from typing import Dict, List, Tuple

import pandas as pd

from .errors import ConfigurationError
from .stat.basic_statistical_summary import BasicStatisticalSummary
from .task_type import TaskType

logger = logging.getLogger(__name__)

FEATURE_SHARD_ID = "global"
DEFAULT_CHUNK_SIZE = 100_000


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="GAME model CLI"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Feature statistics command
    stats_parser = subparsers.add_parser(
        "feature-stats",
        help="Compute per-column summary statistics of a CSV feature file"
    )
    stats_parser.add_argument(
        "--input",
        required=True,
        help="Path to CSV file"
    )
    stats_parser.add_argument(
        "--columns",
        nargs="*",
        default=None,
        help="Columns to summarize (default: all numeric columns)"
    )
    stats_parser.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Rows read per batch (default: {DEFAULT_CHUNK_SIZE})"
    )

    # Score command
    score_parser = subparsers.add_parser(
        "score",
        help="Score a CSV file with a GAME model composed of saved boosters"
    )
    score_parser.add_argument(
        "--input",
        required=True,
        help="Path to CSV file"
    )
    score_parser.add_argument(
        "--booster",
        action="append",
        required=True,
        metavar="NAME=PATH[@ID_TAG]",
        help="Sub-model: saved booster file; '@ID_TAG' loads it as GPBoost with that group tag"
    )
    score_parser.add_argument(
        "--feature-columns",
        nargs="+",
        required=True,
        help="Feature columns, in the order the boosters were trained on"
    )
    score_parser.add_argument(
        "--id-tag-columns",
        nargs="*",
        default=[],
        help="Columns used as id tags (groups of random effects)"
    )
    score_parser.add_argument(
        "--uid-column",
        default=None,
        help="Column holding unique ids (default: row number)"
    )
    score_parser.add_argument(
        "--response-column",
        default="response",
        help="Response column, used by --evaluate (default: response)"
    )
    score_parser.add_argument(
        "--task-type",
        default=TaskType.LINEAR_REGRESSION.value,
        help="Task type of every sub-model (default: linear_regression)"
    )
    score_parser.add_argument(
        "--output",
        default=None,
        help="Write uid,score CSV to this path"
    )
    score_parser.add_argument(
        "--evaluate",
        action="store_true",
        help="Evaluate scores against the response column"
    )

    return parser.parse_args(argv)


def parse_booster_spec(spec: str) -> Tuple[str, str, str]:
    """Split 'NAME=PATH[@ID_TAG]' into (name, path, id_tag or None).

    Raises:
        ConfigurationError: If the spec has no name or path.
    """
    name, sep, rest = spec.partition("=")
    if not sep or not name.strip() or not rest.strip():
        raise ConfigurationError(f"Invalid booster spec '{spec}', expected NAME=PATH[@ID_TAG]")
    path, _, id_tag = rest.partition("@")
    return name.strip(), path.strip(), (id_tag.strip() or None)


def cmd_feature_stats(args) -> dict:
    """Execute the feature-stats command."""
    batches: List = []
    columns = args.columns
    for chunk in pd.read_csv(args.input, chunksize=args.chunk_size):
        if not columns:
            columns = list(chunk.select_dtypes("number").columns)
        batches.append(chunk[columns].to_numpy(dtype=float))
    if not batches:
        raise ConfigurationError(f"No rows in {args.input}")

    summary = BasicStatisticalSummary.from_batches(batches)
    logger.info("Summarized %d rows x %d columns", summary.count, summary.dimension)

    return {
        "command": "feature-stats",
        "input": args.input,
        **summary.to_dict(columns),
    }


def build_game_model(booster_specs: List[str], task_type: TaskType):
    """Compose a GAME model from booster specs."""
    # Lazy imports to avoid loading ML deps for other commands
    from .models.booster import BoosterModel
    from .models.game_model import GAMEModel

    models: Dict[str, BoosterModel] = {}
    for spec in booster_specs:
        name, path, id_tag = parse_booster_spec(spec)
        if name in models:
            raise ConfigurationError(f"Duplicate sub-model name '{name}'")
        models[name] = BoosterModel(path, FEATURE_SHARD_ID, task_type, random_effect_type=id_tag)
        logger.info("Loaded sub-model '%s' from %s", name, path)
    return GAMEModel(models)


def cmd_score(args) -> dict:
    """Execute the score command."""
    from .data.data_validator import validate_scoring_data
    from .data.game_datum import GameDataset
    from .diagnostics.evaluator import evaluate_scores

    task_type = TaskType.parse(args.task_type)
    game_model = build_game_model(args.booster, task_type)

    df = pd.read_csv(args.input)
    dataset = GameDataset.from_frame(
        df,
        feature_shards={FEATURE_SHARD_ID: args.feature_columns},
        id_tag_columns=args.id_tag_columns,
        response_column=args.response_column,
        uid_column=args.uid_column,
    )

    validation = validate_scoring_data(dataset, game_model)
    for warning in validation.warnings:
        logger.warning(warning)
    if not validation.is_valid:
        logger.error("Scoring data validation failed:\n%s", validation.summary())
        return {
            "command": "score",
            "error": "validation failed",
            "errors": validation.errors,
        }

    scores = game_model.score(dataset)
    logger.info("Scored %d examples with %d sub-models", len(scores), len(game_model))

    result = {
        "command": "score",
        "task_type": task_type.value,
        "sub_models": sorted(name for name, _ in game_model.items()),
        "scored": len(scores),
    }

    if args.output:
        scores.scores.rename("score").reset_index().to_csv(args.output, index=False)
        result["output"] = args.output
        logger.info("Scores written to %s", args.output)

    if args.evaluate:
        report = evaluate_scores(scores, dataset, task_type)
        result["evaluation"] = report.to_dict()
        result["evaluation_summary"] = report.summary()

    return result


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        if args.command == "feature-stats":
            result = cmd_feature_stats(args)
        elif args.command == "score":
            result = cmd_score(args)
        else:
            logger.error(f"Unknown command: {args.command}")
            return 1
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    if args.json:
        print(json.dumps({k: v for k, v in result.items() if k != "evaluation_summary"}, indent=2))
    else:
        print(f"\n{'=' * 50}")
        print(f"Command: {result['command']}")
        print(f"{'=' * 50}")

        if "error" in result:
            print(f"Error: {result['error']}")
            for e in result.get("errors", []):
                print(f"  - {e}")
        elif args.command == "feature-stats":
            print(f"Rows: {result['count']}")
            for name, stats in result["features"].items():
                print(f"  {name:25s} mean={stats['mean']:.4f} var={stats['variance']:.4f} "
                      f"min={stats['min']:.4f} max={stats['max']:.4f} nnz={stats['num_nonzeros']:.0f}")
        elif args.command == "score":
            print(f"Task type: {result['task_type']}")
            print(f"Sub-models: {', '.join(result['sub_models'])}")
            print(f"Scored: {result['scored']} examples")
            if "output" in result:
                print(f"Output: {result['output']}")
            if "evaluation_summary" in result:
                print()
                print(result["evaluation_summary"])

        print(f"{'=' * 50}\n")

    return 1 if "error" in result else 0


if __name__ == "__main__":
    sys.exit(main())
