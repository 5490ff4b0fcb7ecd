import argparse
import os
import shlex
import textwrap

from . import base
from . import types
from .config import Config, DEFAULT_BRANCH, DEFAULT_STORE_DIR
from .errors import MinigitError
from .logging_utils import configure_logging

PROMPT = 'minigit> '


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.verbose)

    config = Config(root=args.root, store_dir=args.store_dir,
                    default_branch=args.branch, verbosity=args.verbose)
    repo = base.Repository(config)
    repo.init()
    print(f'Initialized minigit repository in {os.path.abspath(config.store_path)} '
          f'(branch: {repo.current_branch.name})')
    run_shell(repo)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='minigit')
    parser.add_argument('--root', default='.')
    parser.add_argument('--store-dir', default=DEFAULT_STORE_DIR)
    parser.add_argument('--branch', default=DEFAULT_BRANCH)
    parser.add_argument('-v', '--verbose', action='count', default=0)
    return parser.parse_args(argv)


def command_parser():
    parser = argparse.ArgumentParser(prog='', add_help=False)
    commands = parser.add_subparsers(dest='command')
    commands.required = True

    add_parser = commands.add_parser('add')
    add_parser.set_defaults(func=add)
    add_parser.add_argument('file')
    add_parser.add_argument('--source')

    commit_parser = commands.add_parser('commit')
    commit_parser.set_defaults(func=commit)
    commit_parser.add_argument('-m', '--message', required=True)

    log_parser = commands.add_parser('log')
    log_parser.set_defaults(func=log)
    log_parser.add_argument('id', nargs='?')

    branch_parser = commands.add_parser('branch')
    branch_parser.set_defaults(func=branch)
    branch_parser.add_argument('name')

    checkout_parser = commands.add_parser('checkout')
    checkout_parser.set_defaults(func=checkout)
    checkout_parser.add_argument('name')

    merge_parser = commands.add_parser('merge')
    merge_parser.set_defaults(func=merge)
    merge_parser.add_argument('first')
    merge_parser.add_argument('second')
    merge_parser.add_argument('-m', '--message', required=True)

    find_parser = commands.add_parser('find')
    find_parser.set_defaults(func=find)
    find_parser.add_argument('id')

    branches_parser = commands.add_parser('branches')
    branches_parser.set_defaults(func=branches)

    graph_parser = commands.add_parser('graph')
    graph_parser.set_defaults(func=graph)

    history_parser = commands.add_parser('history')
    history_parser.set_defaults(func=history)
    history_parser.add_argument('name')

    for name in ('exit', 'quit'):
        exit_parser = commands.add_parser(name)
        exit_parser.set_defaults(func=exit_shell)

    return parser


def run_shell(repo: base.Repository):
    parser = command_parser()
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break
        if not execute(repo, parser, line):
            break
    print('Exiting minigit...')


def execute(repo: base.Repository, parser: argparse.ArgumentParser, line: str) -> bool:
    """Run one shell line. Returns False when the shell should stop."""
    try:
        argv = shlex.split(line)
    except ValueError as e:
        print(f'error: {e}')
        return True
    if not argv:
        return True

    try:
        args = parser.parse_args(argv)
    except SystemExit:
        return True  # argparse already printed the usage error

    try:
        return args.func(repo, args) is not False
    except MinigitError as e:
        print(f'error: {e}')
        return True


def add(repo, args):
    file_version = repo.track(args.file, source_path=args.source)
    print(f"Tracked file '{file_version.filename}'")


def commit(repo, args):
    commit_ = repo.commit(args.message)
    print(f'Commit created: {commit_.id}')
    _print_report(repo.last_report)


def log(repo, args):
    start = repo.find(args.id) if args.id else None
    for commit_ in repo.log(start):
        print(f'commit {commit_.id}')
        print(f'Date: {commit_.timestamp}\n')
        print(textwrap.indent(commit_.message, '    '))
        print('Files tracked:')
        for filename in commit_.files:
            print(f'    {filename}')
        print('')


def branch(repo, args):
    branch_ = repo.create_branch(args.name)
    print(f"Branch '{branch_.name}' created at commit {branch_.head.id}")


def checkout(repo, args):
    report = repo.checkout(args.name)
    print(f"Switched to branch '{args.name}'")
    print(f'Restored {report.count} file(s) from commit {report.commit_id}')
    _print_report(report)


def merge(repo, args):
    result = repo.merge_branches(args.first, args.second, args.message)
    for conflict in result.conflicts:
        print(f"Conflict in '{conflict.filename}', keeping version from '{args.first}'")
    print(f"Merged '{args.first}' and '{args.second}' into new commit {result.commit.id}")
    _print_report(result.report)


def find(repo, args):
    commit_ = repo.find(args.id)
    print(f'Commit found: {commit_.id}')
    print(f'Message: {commit_.message}')
    print(f'Date: {commit_.timestamp}')
    print('Files:')
    for filename in commit_.files:
        print(f'    {filename}')
    print(f'Snapshots saved under: {repo.snapshot_dir(commit_.id)}')


def branches(repo, args):
    current = repo.current_branch
    for branch_ in repo.branches:
        print(f"{'* ' if branch_ is current else '  '}{branch_.name}")


def graph(repo, args):
    for branch_, chain in repo.branch_graph():
        print(branch_.name)
        for commit_ in chain:
            print(f'    {commit_.id} ({commit_.message})')
            if commit_.is_merge:
                parents = ', '.join(f'[{p.id}]' for p in commit_.parents)
                print(f'        merge of {parents}')


def history(repo, args):
    for commit_ in repo.history(args.name):
        print(f'{commit_.id} ({commit_.message})')


def exit_shell(repo, args):
    return False


def _print_report(report: types.SnapshotReport | None):
    if report is None:
        return
    for skipped in report.skipped:
        print(f'warning: skipped {skipped.filename}: {skipped.reason}')
