#!/usr/bin/env python3
"""
QuickApply - Main Orchestration
Runs one application pass over every enabled job board.
"""

import argparse
import sys
import time
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError

from quickapply.browser.session import platform_session
from quickapply.config import PLATFORM_NAMES, get_env, load_settings
from quickapply.data.answer_bank import AnswerKnowledgeBase
from quickapply.data.ledger import Ledger
from quickapply.debug.snapshots import SnapshotTaker
from quickapply.debug.unresolved_collector import DEBUG_UNRESOLVED_PATH, UnresolvedCollector
from quickapply.errors import ConfigError, SetupFailure
from quickapply.models import RunOptions
from quickapply.platforms.registry import get_adapter
from quickapply.runner.supervisor import run_platform
from quickapply.utils.logging import get_logger, set_console_level
from quickapply.utils.timing import Pacing

log = get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 2


def format_elapsed_time(seconds):
    """Format elapsed time in human-readable format"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    return f"{int(seconds // 3600)}h {int(seconds % 3600 // 60)}m"


def options_for(settings, platform_settings):
    return RunOptions(
        dry_run=settings.dry_run,
        max_applications=platform_settings.max_applications,
        max_retries=settings.max_retries,
        max_steps=settings.max_steps,
        resume_path=settings.resume_path,
        screenshot_on_error=settings.screenshot_on_error,
    )


def run_one_platform(session, settings, knowledge_base, ledger, run_id, pacing, collector, snapshots):
    """PlatformSummary for one platform, or None when it was never attempted"""
    adapter = get_adapter(session.platform, session.settings, pacing)
    if not adapter.is_logged_in(session.page):
        log.error(
            "%s session expired - run `python -m quickapply.browser.setup --platform %s`",
            session.platform,
            session.platform,
        )
        return None
    try:
        return run_platform(
            session,
            knowledge_base,
            ledger,
            options_for(settings, session.settings),
            run_id=run_id,
            pacing=pacing,
            collector=collector,
            snapshots=snapshots,
            adapter=adapter,
        )
    except SetupFailure as e:
        log.error("%s not attempted: %s", session.platform, e)
        return None


def run(settings, knowledge_base, ledger, pacing=None, session_factory=platform_session):
    """
    One full run: every enabled platform in order, then the run is closed.

    Returns (run_id, {platform: summary dict or None}). A platform that
    crashes or cannot start is reported as None; the others still run.
    """
    pacing = pacing or Pacing(settings.timing())
    run_record = ledger.create_run()
    run_id = run_record.run_id
    log.info("Run %s started (dry_run=%s)", run_id, settings.dry_run)

    jsonl_path = DEBUG_UNRESOLVED_PATH if settings.debug_unresolved else None
    if jsonl_path is not None:
        jsonl_path.write_text("", encoding="utf-8")
    snapshots = SnapshotTaker(settings.snapshot_dir, enabled=settings.screenshot_on_error)

    summaries = {}
    try:
        for name in settings.enabled_platforms():
            collector = UnresolvedCollector(ledger, run_id, jsonl_path)
            try:
                with session_factory(settings.platforms[name], settings.browser_data_dir, settings.headless) as session:
                    summary = run_one_platform(
                        session, settings, knowledge_base, ledger, run_id, pacing, collector, snapshots
                    )
            except PlaywrightError as e:
                log.error("%s browser session failed: %s", name, e)
                summary = None
            summaries[name] = summary.to_dict() if summary is not None else None
    finally:
        # An interrupted run is still closed with the platforms it reached
        ledger.complete_run(run_id, summaries)
        log.info("Run %s completed", run_id)
    return run_id, summaries


def print_report(ledger, run_id, summaries, dry_run=False, elapsed=None):
    stats = ledger.run_stats(run_id)
    applied_label = "Dry-run" if dry_run else "Applied"

    print()
    print("=" * 60)
    print("DAILY REPORT")
    print("=" * 60)
    print(f"Run: {run_id}")
    if elapsed is not None:
        print(f"⏱️  Total time: {format_elapsed_time(elapsed)}")
    print()
    if not summaries:
        print("No platforms enabled.")
    for name, summary in summaries.items():
        if summary is None:
            print(f"  {name:<10} SKIPPED (not attempted)")
            continue
        line = (
            f"  {name:<10} {applied_label}: {summary['applied']:<3} "
            f"Skipped: {summary['skipped']:<3} Errors: {summary['errors']:<3}"
        )
        if summary["blocked"]:
            line += " 🛑 BLOCKED"
        print(line)
    print()
    print(f"Unmatched fields this run: {stats['unmatched_fields']}")
    top = ledger.top_unmatched(5)
    if top:
        print("Most frequent unmatched questions:")
        for label, kind, count in top:
            print(f"  {count:>3}x  [{kind}] {label}")
    print("=" * 60)


def build_parser():
    parser = argparse.ArgumentParser(
        description="QuickApply - one-click job application automation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Speed Modes:
  --speed dev       ~2x faster pacing - for watching a headed run
  --speed super     fastest safe pacing - for debugging selectors
  (default)         Production speed - safest, most human-like

Examples:
  python -m quickapply.main --dry-run
  python -m quickapply.main --platform linkedin --max 5
  python -m quickapply.main --platform indeed,dice --speed dev --headless
        """,
    )
    parser.add_argument("--dry-run", action="store_true", default=None, help="Fill forms but never submit")
    parser.add_argument(
        "--platform",
        help=f"Comma-separated platforms to run ({', '.join(PLATFORM_NAMES)}, or all)",
    )
    parser.add_argument("--max", type=int, help="Maximum applications per platform")
    parser.add_argument("--headless", action="store_true", default=None, help="Run the browser headless")
    parser.add_argument("--speed", choices=["dev", "super"], help="Speed mode: dev or super")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--answers", help="Path to answers.yaml")
    parser.add_argument(
        "--debug-unresolved",
        action="store_true",
        default=None,
        help=f"Also write unmatched fields to {DEBUG_UNRESOLVED_PATH}",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    overrides = {
        "dry_run": args.dry_run,
        "headless": args.headless,
        "speed": args.speed,
        "platforms": args.platform.split(",") if args.platform else None,
        "max_applications": args.max,
        "answers_path": Path(args.answers) if args.answers else None,
        "debug_unresolved": args.debug_unresolved,
    }

    try:
        settings = load_settings(args.config, overrides)
        set_console_level(get_env("LOG_LEVEL", "INFO"))
        settings.ensure_dirs()
        knowledge_base = AnswerKnowledgeBase.from_file(settings.answers_path)
        pacing = Pacing(settings.timing())
    except ConfigError as e:
        print(f"✗ Configuration error: {e}")
        return EXIT_CONFIG

    if settings.dry_run:
        print("\n🧪 DRY RUN - applications will be filled but not submitted\n")
    if not settings.enabled_platforms():
        print("✗ No platforms enabled - set platforms.<name>.enabled in config.yaml or use --platform")
        return EXIT_CONFIG

    ledger = Ledger(settings.database_path)
    start_time = time.time()
    run_id, summaries = run(settings, knowledge_base, ledger, pacing)
    print_report(ledger, run_id, summaries, settings.dry_run, time.time() - start_time)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
