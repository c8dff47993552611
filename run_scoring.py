"""
Score a questionnaire answers file against a macroarea rule bundle.

Usage:
    python run_scoring.py <macroarea> <answers.json> [--llm] [--root DIR]

Prints the ScoreResult (or, with --llm, the report-generation context)
as JSON. Exit code 2 when the bundle is invalid.
"""
import argparse
import json
import sys

from healthscore.config import settings
from healthscore.loader import load_macroarea
from healthscore.logging import setup_logging
from healthscore.schemas.config import ConfigError
from healthscore.scoring.engine import compute_score, prepare_for_llm


parser = argparse.ArgumentParser(description="Score questionnaire answers")
parser.add_argument("macroarea", help="Bundle directory name")
parser.add_argument("answers", help="JSON file with raw form answers")
parser.add_argument("--llm", action="store_true", help="Print the LLM context instead")
parser.add_argument("--root", default=None, help="Configs root (default from settings)")
args = parser.parse_args()

setup_logging(level=settings.log_level, json_output=settings.log_json)

with open(args.answers, encoding="utf-8") as fh:
    answers = json.load(fh)

try:
    bundle = load_macroarea(args.macroarea, root=args.root)
except ConfigError as exc:
    print(f"Invalid bundle: {exc}", file=sys.stderr)
    sys.exit(2)

result = compute_score(answers, bundle)
output = prepare_for_llm(result, answers) if args.llm else result

print(json.dumps(output.to_dict(), indent=2, ensure_ascii=False))
