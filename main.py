"""Main entry point for the GapLog estimation and allocation engine."""

import argparse
import json
import sys
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path

from loguru import logger

from gaplog.engine.allocator import Allocator
from gaplog.engine.capacity import TimeBlock, available_minutes, capacity_map, expand_capacity_plan
from gaplog.engine.carry_over import carry_over
from gaplog.engine.estimator import DurationEstimator, find_master
from gaplog.engine.ordering import is_allocation_ordered, sort_tasks
from gaplog.errors import GapLogError
from gaplog.evaluation.evaluator import Evaluator
from gaplog.evaluation.generator import DataGenerator
from gaplog.utils.config import load_config, get_default_config
from gaplog.utils.datetime_utils import parse_date, time_to_minutes
from gaplog.utils.records import DataSet, dataset_to_dict, load_dataset

RESULTS_DIR = Path("results")


def resolve_config(config_path: str) -> dict:
    """Load the config file when present, else the defaults."""
    if config_path and Path(config_path).exists():
        return load_config(config_path)
    logger.debug(f"No config at {config_path}, using defaults")
    return get_default_config()


def save_trace(trace, name: str) -> Path:
    """Save a trace as JSON plus a human-readable log."""
    run_id = str(uuid.uuid4())[:8]
    RESULTS_DIR.mkdir(exist_ok=True)

    trace_path = RESULTS_DIR / f"{name}_{run_id}.json"
    with open(trace_path, 'w') as f:
        json.dump(trace.to_dict(), f, indent=2, default=str)

    log_path = RESULTS_DIR / f"{name}_{run_id}.log"
    with open(log_path, 'w') as f:
        f.write(trace.to_human_readable())

    logger.info(f"Trace saved to {trace_path}")
    return trace_path


def ordered_backlog(dataset: DataSet):
    """Pending tasks in allocation order."""
    if not is_allocation_ordered(dataset.tasks):
        logger.debug("Sorting backlog by due date, then creation time")
    return sort_tasks(dataset.tasks)


def run_estimate(args, config: dict) -> int:
    """Estimate one task from a master's history."""
    dataset = load_dataset(args.data)
    estimator = DurationEstimator.from_config(config, args.policy)

    master = find_master(args.master, dataset.masters)
    difficulty = args.difficulty if args.difficulty is not None else estimator.policy.normal_difficulty
    minutes, trace = estimator.estimate_with_trace(master, args.amount, difficulty, dataset.logs)

    unit = master.default_unit_name
    print(f"\nEstimate for {args.amount} {unit}(s) of {master.name or master.id}: {minutes} min")
    print(f"Policy: {trace.policy_name}, phase: {trace.phase}, logs used: {len(trace.contributions)}")

    if args.trace:
        print()
        print(trace.to_human_readable())
    if args.save_trace:
        save_trace(trace, f"estimate_{master.id}")

    return minutes


def run_allocate(args, config: dict):
    """Distribute the pending backlog over the capacity calendar."""
    dataset = load_dataset(args.data)
    start_date = parse_date(args.start) or date.today()

    allocator = Allocator(config)
    result = allocator.allocate(ordered_backlog(dataset), capacity_map(dataset.capacities), start_date)

    print(f"\nAllocated {result.assigned_count} of {len(dataset.tasks)} tasks from {start_date}")
    overflowed = {d.task_id for d in result.trace.decisions if d.constraint_applied == "overflow"}
    for task_id, day in result.assignments.items():
        marker = " (overflow)" if task_id in overflowed else ""
        print(f"  {task_id} -> {day}{marker}")
    if result.unassigned:
        print(f"Unassigned ({len(result.unassigned)}): {', '.join(result.unassigned)}")

    if args.save_trace:
        save_trace(result.trace, "allocation")

    return result


def run_carry_over(args, config: dict):
    """End the day and push the backlog to tomorrow onwards."""
    dataset = load_dataset(args.data)
    today = parse_date(args.today) or date.today()

    result = carry_over(Allocator(config), ordered_backlog(dataset), capacity_map(dataset.capacities), today)

    print(f"\nCarried over {result.carried_count} tasks")
    print(f"Re-allocated {result.allocation.assigned_count} of {len(dataset.tasks)} tasks from tomorrow")
    if result.allocation.unassigned:
        print(f"Unassigned: {', '.join(result.allocation.unassigned)}")

    return result


def parse_block(spec: str) -> TimeBlock:
    """Parse a command line block given as ``HH:MM-HH:MM``."""
    start, sep, end = spec.partition('-')
    if not sep or time_to_minutes(start) == -1 or time_to_minutes(end) == -1:
        raise ValueError(f"Invalid block '{spec}', expected HH:MM-HH:MM")
    return TimeBlock(start=start, end=end)


def run_capacity(args, config: dict):
    """Compute daily available minutes and expand them over a date range."""
    capacity_config = config.get('capacity', {})

    if args.minutes is not None:
        minutes = args.minutes
    else:
        wake = args.wake or capacity_config.get('wake_time', '07:00')
        sleep = args.sleep or capacity_config.get('sleep_time', '23:00')
        if args.block:
            blocks = [parse_block(spec) for spec in args.block]
        else:
            blocks = [
                TimeBlock(start=b['start'], end=b['end'], title=b.get('title'))
                for b in capacity_config.get('blocks', [])
            ]
        minutes = available_minutes(wake, sleep, blocks)

    print(f"\nAvailable per day: {minutes // 60}h {minutes % 60}m ({minutes} min)")

    if args.start and args.end:
        weekdays = args.weekdays if args.weekdays is not None else capacity_config.get('weekdays', [0, 1, 2, 3, 4])
        plan = expand_capacity_plan(parse_date(args.start), parse_date(args.end), weekdays, minutes)
        if not plan:
            print("No matching days in range")
        for capacity in plan:
            print(f"  {capacity.date} ({capacity.date.strftime('%a')}): {capacity.available_minutes} min")
        return plan

    return minutes


def run_evaluation(args, config: dict):
    """Backtest both estimation policies."""
    if args.data:
        dataset = load_dataset(args.data)
    else:
        generator = DataGenerator(seed=args.seed)
        masters = generator.generate_masters()
        dataset = DataSet(masters=masters, logs=generator.generate_logs(masters, datetime(2024, 1, 1, 9)))

    evaluator = Evaluator(config)
    return evaluator.run_evaluation(dataset.masters, dataset.logs, output_dir=str(RESULTS_DIR))


def run_generate(args, config: dict):
    """Write a synthetic data file usable by the other commands."""
    generator = DataGenerator(seed=args.seed)
    today = parse_date(args.today) or date.today()

    masters = generator.generate_masters()
    dataset = DataSet(
        masters=masters,
        logs=generator.generate_logs(masters, datetime.combine(today - timedelta(days=30), datetime.min.time()).replace(hour=9)),
        tasks=generator.generate_backlog(args.count, today),
        capacities=generator.generate_capacities(today),
    )

    RESULTS_DIR.mkdir(exist_ok=True)
    output_path = RESULTS_DIR / "generated_data.json"
    with open(output_path, 'w') as f:
        json.dump(dataset_to_dict(dataset), f, indent=2)

    print(f"Generated {len(dataset.masters)} masters, {len(dataset.logs)} logs, "
          f"{len(dataset.tasks)} tasks, {len(dataset.capacities)} capacity days")
    print(f"Data saved to: {output_path}")

    return dataset


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GapLog task duration estimator and day-by-day allocator"
    )
    parser.add_argument(
        '--config',
        type=str,
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    estimate = subparsers.add_parser('estimate', help='Estimate a task duration')
    estimate.add_argument('--data', required=True, help='YAML/JSON file with masters and logs')
    estimate.add_argument('--master', required=True, help='Task master id')
    estimate.add_argument('--amount', type=float, required=True, help='Units to complete')
    estimate.add_argument('--difficulty', type=int, default=None,
                          help="Predicted difficulty level (default: the policy's normal level)")
    estimate.add_argument(
        '--policy',
        choices=['hybrid', 'weighted-average'],
        default=None,
        help='Estimation policy (default: from config)'
    )
    estimate.add_argument('--trace', action='store_true', help='Print the decision trace')
    estimate.add_argument('--save-trace', action='store_true', help='Save the trace under results/')

    allocate = subparsers.add_parser('allocate', help='Assign pending tasks to days')
    allocate.add_argument('--data', required=True, help='YAML/JSON file with tasks and capacities')
    allocate.add_argument('--start', help='First date to fill (default: today)')
    allocate.add_argument('--save-trace', action='store_true', help='Save the trace under results/')

    carry = subparsers.add_parser('carry-over', help='Move unfinished work to tomorrow onwards')
    carry.add_argument('--data', required=True, help='YAML/JSON file with tasks and capacities')
    carry.add_argument('--today', help='Current date (default: today)')

    capacity = subparsers.add_parser('capacity', help='Compute daily available minutes')
    capacity.add_argument('--wake', help='Wake time HH:MM')
    capacity.add_argument('--sleep', help='Sleep time HH:MM')
    capacity.add_argument('--block', action='append', help='Blocked interval HH:MM-HH:MM (repeatable)')
    capacity.add_argument('--minutes', type=int, help='Use a fixed number of minutes instead')
    capacity.add_argument('--start', help='Plan start date')
    capacity.add_argument('--end', help='Plan end date (inclusive)')
    capacity.add_argument('--weekdays', type=int, nargs='*', help='Weekdays to include, Monday=0')

    evaluate = subparsers.add_parser('evaluate', help='Backtest estimation policies')
    evaluate.add_argument('--data', help='YAML/JSON file with masters and logs (default: generated)')
    evaluate.add_argument('--seed', type=int, default=42)

    generate = subparsers.add_parser('generate', help='Generate a synthetic data file')
    generate.add_argument('--seed', type=int, default=42)
    generate.add_argument('--count', type=int, default=25, help='Pending tasks to generate')
    generate.add_argument('--today', help='Anchor date (default: today)')

    return parser


COMMANDS = {
    'estimate': run_estimate,
    'allocate': run_allocate,
    'carry-over': run_carry_over,
    'capacity': run_capacity,
    'evaluate': run_evaluation,
    'generate': run_generate,
}


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    config = resolve_config(args.config)

    try:
        COMMANDS[args.command](args, config)
    except (GapLogError, FileNotFoundError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
