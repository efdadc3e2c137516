from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
import logging
from pathlib import Path
from typing import Dict, Iterable, Set

from .compiler import EmmetCompiler

logger = logging.getLogger(__name__)


def expand_file(src: Path, dst: Path, compiler: EmmetCompiler):
    with open(src, "r", encoding="utf-8") as f:
        source = f.read()
    with open(dst, "w", encoding="utf-8") as f:
        f.write(compiler.expand(source))


def trigger_recompile(write_pairs: Dict[Path, Path], compiler: EmmetCompiler) -> int:
    """Expands every src -> dst pair. Returns how many were written."""
    written = 0
    for (src, dst) in write_pairs.items():
        try:
            expand_file(src, dst, compiler)
        except OSError as e:
            logger.error("Cannot expand %s -> %s: %s", src, dst, e)
            continue
        logger.info("Expanded %s -> %s", src, dst)
        written += 1
    return written


class ChangeHandler(FileSystemEventHandler):
    def __init__(self, files_to_watch: Iterable[Path], write_pairs: Dict[Path, Path], compiler: EmmetCompiler):
        self.files_to_watch: Set[Path] = {x.resolve() for x in files_to_watch} # absolute paths (sources + extra watches)
        self.write_pairs = write_pairs       # {src: dst}
        self.compiler = compiler
        print("Handler initialized. Monitoring for changes...")

    def on_modified(self, event):
        if event.is_directory:
            return

        src_path_abs = Path(event.src_path).resolve()
        if src_path_abs in self.files_to_watch:
            print(f"\nDetected modification in: {src_path_abs}")
            trigger_recompile(self.write_pairs, self.compiler)


def schedule_dirs(observer: Observer, handler: ChangeHandler, files: Iterable[Path]) -> int:
    """Schedules one non-recursive watch per existing parent directory."""
    scheduled = 0
    for dir_path in sorted({p.resolve().parent for p in files}):
        if not dir_path.is_dir():
            logger.warning("Directory '%s' does not exist, not watching it", dir_path)
            continue
        observer.schedule(handler, str(dir_path), recursive=False)
        scheduled += 1
    return scheduled


def run_watcher(write_pairs: Dict[Path, Path], watch_paths: Set[Path], compiler: EmmetCompiler):
    """Expands every pair once, then re-expands whenever a watched file changes, until Ctrl+C."""
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    files_to_watch = set(write_pairs) | watch_paths
    trigger_recompile(write_pairs, compiler)

    observer = Observer()
    if not schedule_dirs(observer, ChangeHandler(files_to_watch, write_pairs, compiler), files_to_watch):
        print("Error: nothing to watch, check the 'write' and 'watch' entries.")
        return

    observer.start()
    print("Watching for changes. Press Ctrl+C to stop.")
    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()
        print("Watcher stopped.")
