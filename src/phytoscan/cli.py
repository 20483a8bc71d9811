"""CLI for phytoscan: ``assess``, ``score``, ``scan``, ``history`` and ``stages``."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from phytoscan.errors import PhytoscanError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phytoscan",
        description="Cercospora leaf spot diagnosis for water spinach",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  phytoscan assess leaf.jpg                          # Photo quality check
  phytoscan score E2 12 3.5                          # Severity for stage + lesions
  phytoscan scan leaf.jpg --classification out.json  # Full diagnosis from classifier output
  phytoscan history                                  # Past diagnoses, newest first
  phytoscan stages E3                                # Encyclopedia entry
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    sub = parser.add_subparsers(dest="command")

    # phytoscan assess
    assess_p = sub.add_parser("assess", help="Check photo quality")
    assess_p.add_argument("image", help="Path to leaf image")
    assess_p.add_argument("--json", action="store_true", help="Print JSON")

    # phytoscan score
    score_p = sub.add_parser("score", help="Compute severity from stage and lesion metrics")
    score_p.add_argument("stage", help="Stage code: H0, N0, E1, E2, E3")
    score_p.add_argument("lesions", type=int, help="Lesion count")
    score_p.add_argument("size", type=float, help="Average lesion size (mm)")

    # phytoscan scan
    scan_p = sub.add_parser("scan", help="Diagnose an image from recorded classifier output")
    scan_p.add_argument("image", help="Path to leaf image")
    scan_p.add_argument(
        "--classification", "-c",
        required=True,
        help="JSON file with the classifier's response for this image",
    )
    scan_p.add_argument(
        "--history",
        default=None,
        help="History file (default: $PHYTOSCAN_HOME/history.json)",
    )
    scan_p.add_argument("--no-save", action="store_true", help="Do not record in history")
    scan_p.add_argument("--json", action="store_true", help="Print JSON")

    # phytoscan history
    hist_p = sub.add_parser("history", help="List or clear past diagnoses")
    hist_p.add_argument(
        "--history",
        default=None,
        help="History file (default: $PHYTOSCAN_HOME/history.json)",
    )
    hist_p.add_argument("--clear", action="store_true", help="Delete all history entries")

    # phytoscan stages
    stages_p = sub.add_parser("stages", help="Show the staging encyclopedia")
    stages_p.add_argument("stage", nargs="?", default=None, help="Single stage to show")

    return parser


def _history_path(arg):
    from phytoscan.paths import get_history_path

    return Path(arg) if arg else get_history_path()


def _open_history(path: Path):
    """Load history, starting empty if the file is missing or unreadable."""
    from phytoscan.history import HistoryLog
    from phytoscan.persistence import load_history

    try:
        return load_history(path)
    except FileNotFoundError:
        return HistoryLog()
    except ValueError as e:
        logger.warning("Failed to load history from %s, starting fresh: %s", path, e)
        return HistoryLog()


def _print_quality(quality) -> None:
    width, height = quality.resolution
    print(f"Resolution:   {width} x {height}{'  (low)' if quality.is_low_res else ''}")
    print(f"Brightness:   {quality.avg_brightness:.1f}")
    print(f"Luma spread:  {quality.luma_spread:.1f}")
    print(f"Highlights:   {quality.highlight_fraction:.1%}")
    if quality.has_issues:
        print(f"Issues:       {', '.join(quality.issues)}")
        print("Poor quality images may yield inaccurate results.")
    else:
        print("Issues:       none")


def _cmd_assess(args: argparse.Namespace) -> None:
    """Handle ``phytoscan assess``."""
    from phytoscan.algorithm.quality import QualityAnalyzer
    from phytoscan.upload import load_image

    quality = QualityAnalyzer().assess(load_image(args.image))
    if args.json:
        print(json.dumps(asdict(quality), indent=2))
    else:
        _print_quality(quality)


def _cmd_score(args: argparse.Namespace) -> None:
    """Handle ``phytoscan score``."""
    from phytoscan.algorithm.severity import SeverityScorer

    print(SeverityScorer().score(args.stage, args.lesions, args.size))


def _cmd_scan(args: argparse.Namespace) -> None:
    """Handle ``phytoscan scan``."""
    from phytoscan.persistence import save_history
    from phytoscan.upload import load_image
    from phytoscan.workflow import ScanWorkflow

    with open(args.classification, "r", encoding="utf-8") as f:
        payload = json.load(f)

    history_path = _history_path(args.history)
    history = None if args.no_save else _open_history(history_path)

    workflow = ScanWorkflow(classifier=lambda _image: payload, history=history)
    result = workflow.run(load_image(args.image))

    if history is not None:
        save_history(history, history_path)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    disease = result.disease
    print(f"{disease.name} [{result.stage.value}] - {disease.severity_label}")
    print(f"{result.confidence_label}: the model is {round(result.confidence * 100)}% sure")
    if result.lesion_count > 0:
        print(
            f"Lesions: {result.lesion_count}  "
            f"Avg size: {result.avg_lesion_size:.1f}mm  "
            f"Severity: {result.severity_score}%"
        )
    if result.quality_issues is not None:
        print("Quality concerns detected: poor quality images may yield inaccurate results.")
    if result.explanation:
        print(f"\n{result.explanation}")
    print("\nManagement steps:")
    for step in disease.treatment.immediate:
        print(f"  - {step}")


def _cmd_history(args: argparse.Namespace) -> None:
    """Handle ``phytoscan history``."""
    from phytoscan.persistence import save_history

    path = _history_path(args.history)
    history = _open_history(path)

    if args.clear:
        history.clear()
        save_history(history, path)
        print("History cleared.")
        return

    if not len(history):
        print("No history yet.")
        return

    for item in history:
        print(
            f"  {item.timestamp}  {item.stage.value}  {item.disease_name:36s}"
            f"  {round(item.confidence * 100):3d}%  severity {item.severity_score}%"
        )


def _cmd_stages(args: argparse.Namespace) -> None:
    """Handle ``phytoscan stages``."""
    from phytoscan.knowledge import DISEASE_DATABASE, get_disease
    from phytoscan.types import DiseaseStage

    if args.stage:
        stage = DiseaseStage.parse(args.stage)
        entries = [(stage, get_disease(stage))]
    else:
        entries = list(DISEASE_DATABASE.items())

    for stage, info in entries:
        print(f"{stage.value}  {info.name}  ({info.severity_label})")
        print(f"    {info.description}")
        if info.lesion_size_range:
            print(f"    Lesion size: {info.lesion_size_range}")
        for symptom in info.symptoms:
            print(f"    * {symptom}")
        for category, steps in info.treatment.sections():
            print(f"    {category.replace('_', ' ').title()}:")
            for step in steps:
                print(f"      - {step}")
        if info.prognosis:
            print(f"    Prognosis: {info.prognosis}")
        print()


def main(argv=None):
    """Entry point for ``phytoscan`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "assess": _cmd_assess,
        "score": _cmd_score,
        "scan": _cmd_scan,
        "history": _cmd_history,
        "stages": _cmd_stages,
    }
    try:
        handlers[args.command](args)
    except (PhytoscanError, FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
