import argparse
import sys
import time
from pathlib import Path

from .config import DEFAULTS, compiler_from_config, load_config
from .errors import ConfigError
from .watcher import run_watcher, trigger_recompile


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
                        prog='emmetpy',
                        description='Expand emmet-style abbreviations into markup.',
                        epilog='Without --once or --expand, watches the configured sources and re-expands them on change.')
    parser.add_argument('config', nargs='?', help='YAML configuration file')
    parser.add_argument('--once', action='store_true', help='expand the configured write pairs once and exit')
    parser.add_argument('-e', '--expand', metavar='ABBR', help='print the expansion of ABBR and exit')
    return parser


def collect_paths(cfg, base_path=Path('.')):
    watch_paths = {watch_path for watch_path_str in cfg['watch'] for watch_path in base_path.glob(watch_path_str)}
    write_pairs = {Path(to_write['src']): Path(to_write['dst']) for to_write in cfg['write']}
    return write_pairs, watch_paths


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.expand is not None:
        cfg = load_config(args.config) if args.config else dict(DEFAULTS, indented=False)
        print(compiler_from_config(cfg).expand(args.expand))
        return 0

    if not args.config:
        print("Error: a configuration file is required unless --expand is given.")
        return 2

    if args.once:
        cfg = load_config(args.config)
        write_pairs, _ = collect_paths(cfg)
        written = trigger_recompile(write_pairs, compiler_from_config(cfg))
        return 0 if written == len(write_pairs) else 1

    while True:
        try:
            cfg = load_config(args.config)
            write_pairs, watch_paths = collect_paths(cfg)
            run_watcher(write_pairs, watch_paths, compiler_from_config(cfg))
            return 0
        except (ConfigError, KeyError, TypeError) as e:
            print(f"Error: {e}")
            print("Please check your configuration and try again, attempting to reload in 3 seconds...")
            time.sleep(3)


if __name__ == '__main__':
    sys.exit(main())
