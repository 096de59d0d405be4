"""Просмотр журнала импорта документов."""

import argparse
import json
import os
from collections import deque
from pathlib import Path
from typing import Optional, Sequence

from importdoc.journal import iter_import_events, tail_import_events


DEFAULT_JOURNAL_PATH = './runtime/import-journal.jsonl'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='importdocument-journal', description='Show document import journal events')
    parser.add_argument(
        '--path',
        default=os.getenv('IMPORTDOC_JOURNAL_PATH') or DEFAULT_JOURNAL_PATH,
        help='Journal file',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    tail_parser = subparsers.add_parser('tail', help='Show last N journal events')
    tail_parser.add_argument('--n', type=int, default=50, help='Number of events to show')
    tail_parser.add_argument('--run-id', default=None, help='Only events of this run')

    runs_parser = subparsers.add_parser('runs', help='Summarise finished runs')
    runs_parser.add_argument('--n', type=int, default=10, help='Number of runs to show')
    return parser


def _print_runs(path: Path, n: int) -> None:
    finished = deque(
        (event for event in iter_import_events(path) if event.get('event_type') == 'run_finished'),
        maxlen=n,
    )
    for event in finished:
        details = event.get('details', {})
        print(
            f"{event.get('ts_utc')} {event.get('run_id')} exit={details.get('exit_code')} "
            f"attempted={details.get('attempted', 0)} succeeded={details.get('succeeded', 0)}"
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    path = Path(args.path)

    if not path.exists():
        print(f'Journal {path} does not exist.')
        return 1

    if args.command == 'tail':
        for event in tail_import_events(path, n=args.n, run_id=args.run_id):
            print(json.dumps(event, ensure_ascii=False))
    elif args.command == 'runs':
        _print_runs(path, args.n)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
