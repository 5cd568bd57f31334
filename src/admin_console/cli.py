"""
Admin console batch runner.

Loads a seed snapshot, proposes every action of an actions file, asks for
confirmation of each one, dispatches the confirmed ones and prints the
resulting dashboard.

Usage:
    admin-console --actions FILE [--seed FILE] [--yes] [--export-dir DIR]

Examples:
    # Review and confirm each action interactively
    admin-console --actions actions.json

    # Apply everything against a custom snapshot and export reports
    admin-console --actions actions.json --seed snapshot.json --yes --export-dir output/reports

Actions file format (a list, or an object with an "actions" list):
    [
      {"type": "admin/APPROVE_STUDENT", "payload": {"studentId": "STU004"}},
      {"type": "admin/TRANSFER_PAYMENT", "payload": {"instructorId": "INS001", "amount": 320.0}}
    ]
"""

import sys
import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .commands import CommandQueue, PendingCommand
from .models.actions import Action, action_from_dict
from .models.state import AdminState
from .store import selectors
from .store.store import AdminStore
from .utils.config import config
from .utils.di_container import DIContainer, configure_default_services
from .utils.file_utils import generate_filename, load_json, save_json
from .utils.logger import setup_logger
from .utils.reports import export_reports


LOG_FILENAME = "admin_console.log"


def parse_arguments(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="admin-console",
        description="Apply a batch of admin actions to a console snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        "--actions",
        required=True,
        type=Path,
        help="JSON file with the actions to apply"
    )

    parser.add_argument(
        "--seed",
        type=Path,
        help="Seed snapshot (overrides ADMIN_SEED_PATH; default: bundled seed)"
    )

    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm every action without prompting"
    )

    parser.add_argument(
        "--export-dir",
        type=Path,
        help="Write a JSON run report and CSV reports to this directory"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)"
    )

    return parser.parse_args(argv)


def load_actions(path: Path) -> List[Action]:
    """
    Read and decode an actions file.

    Raises:
        ValueError: If the file is missing, malformed or names an unknown
            action
    """
    data = load_json(path, required=True)
    if isinstance(data, dict):
        data = data.get("actions")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of actions")

    actions = []
    for index, item in enumerate(data, 1):
        try:
            actions.append(action_from_dict(item))
        except ValueError as e:
            raise ValueError(f"{path}: action #{index}: {e}") from e
    return actions


def describe_action(action: Action) -> str:
    return f"{action.TYPE} {json.dumps(action.payload(), ensure_ascii=False)}"


def confirm_action(command: PendingCommand) -> bool:
    """
    Ask user to confirm one action.

    Returns:
        True if user confirms
    """
    response = input(f"Apply {command.command_id}? (y/n): ").strip().lower()
    return response in ['y', 'yes']


def display_dashboard(state: AdminState):
    """Print the dashboard counters and screen summaries."""
    stats = state.dashboard_stats
    payments = selectors.payment_summary(state)
    packages = selectors.package_summary(state)
    metrics = selectors.report_metrics(state)

    print("\n" + "=" * 60)
    print("DASHBOARD")
    print("=" * 60)
    print(f"Total students:           {stats.total_students}")
    print(f"Total instructors:        {stats.total_instructors}")
    print(f"Active lessons:           {stats.active_lessons}")
    print(f"Pending approvals:        {stats.pending_approvals}")
    print(f"Monthly revenue:          {stats.monthly_revenue:.2f}")
    print(f"Pending payouts:          {stats.pending_payouts:.2f}")
    print("-" * 60)
    print(f"Paid / pending transfers: {payments['total_paid']:.2f} / {payments['total_pending']:.2f}")
    print(
        f"Packages:                 {packages['pending']} pending, "
        f"{packages['approved']} approved, {packages['rejected']} rejected"
    )
    print(f"Unread messages:          {selectors.unread_total(state)}")
    print(f"Student approval rate:    {metrics['approval_rate']}%")
    print("=" * 60)


def save_execution_report(
    queue: CommandQueue,
    state: AdminState,
    export_dir: Path,
    actions_file: Path
):
    """
    Save the run report and CSV reports.

    Args:
        queue: Queue holding every proposed command
        state: Final state
        export_dir: Output directory
        actions_file: Actions file the run was started with
    """
    commands = queue.history()
    report = {
        "timestamp": datetime.now().strftime("%Y%m%d_%H%M%S"),
        "actions_file": str(actions_file),
        "summary": {
            "proposed": len(commands),
            "applied": sum(1 for c in commands if c.result and c.result.is_success),
            "not_applied": sum(1 for c in commands if c.result and c.result.is_failure),
            "cancelled": sum(1 for c in commands if c.result is None),
        },
        "commands": [
            {
                "id": c.command_id,
                "action": c.action.to_dict(),
                "state": c.state.value,
                "status": c.result.status.value if c.result else None,
                "message": c.result.message if c.result else None,
            }
            for c in commands
        ],
        "dashboard_stats": state.dashboard_stats.to_dict(),
    }

    json_path = export_dir / generate_filename("run_report", "json")
    if save_json(report, json_path):
        print(f"\nReport saved to: {json_path}")

    for name, path in export_reports(state, export_dir).items():
        print(f"{name} saved to: {path}")


def run(store: AdminStore, actions: List[Action], assume_yes: bool) -> CommandQueue:
    """
    Propose, confirm and dispatch every action in order.

    Returns:
        The queue with every command and its outcome
    """
    queue = CommandQueue(store)

    for idx, action in enumerate(actions, 1):
        command = queue.propose(action)
        print(f"\n[{idx}/{len(actions)}] {command.command_id}: {describe_action(action)}")

        if not (assume_yes or confirm_action(command)):
            queue.cancel(command.command_id)
            print("      - Cancelled")
            continue

        result = queue.confirm(command.command_id)
        if result.is_success:
            print(f"      ✓ {result.message}")
        else:
            print(f"      ✗ {result.status.value}: {result.message}")

    return queue


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = parse_arguments(argv)

    log_level = args.log_level or config.log_level
    config.create_output_directories()
    logger = setup_logger(
        "admin_console",
        level=getattr(logging, log_level, logging.INFO),
        log_file=str(config.output_dir / "logs" / LOG_FILENAME)
    )

    try:
        logger.info("Validating configuration")
        config.validate()

        actions = load_actions(args.actions)
        print(f"Loaded {len(actions)} actions from {args.actions}")

        container = DIContainer()
        configure_default_services(container, config, seed_path=args.seed)
        store = container.resolve(AdminStore)

        queue = run(store, actions, args.yes)

        display_dashboard(store.state)

        if args.export_dir:
            save_execution_report(queue, store.state, args.export_dir, args.actions)

        commands = queue.history()
        failed = [c for c in commands if c.result is None or c.result.is_failure]
        if failed:
            print(f"\n✗ {len(failed)} of {len(commands)} actions were not applied")
            return 1

        print("\n" + "=" * 60)
        print("EXECUTION COMPLETE")
        print("=" * 60)
        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        logger.info("Interrupted by user")
        return 130

    except ValueError as e:
        logger.error(str(e))
        print(f"\nERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
