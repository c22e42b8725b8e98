#!/usr/bin/env python3
"""
Dataset Watcher for Market Price Match
Monitors the price dataset file and asks the API to reload it when it changes.
"""
import os
import sys
import time
import logging
import threading
import requests
from pathlib import Path
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

# Configuration
DATASET_PATH = Path(os.environ.get("PRICE_DATASET_PATH", "data/crop_price.json")).resolve()
API_URL = os.environ.get("PRICE_API_URL", "http://localhost:8000")
API_KEY = os.environ.get("PRICE_API_KEY", "")
API_KEY_HEADER = os.environ.get("PRICE_API_KEY_HEADER", "X-API-Key")
DEBOUNCE_SECONDS = float(os.environ.get("PRICE_WATCH_DEBOUNCE", "2"))

# Logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def request_reload() -> bool:
    """Ask the API to rebuild its dataset snapshot."""
    headers = {API_KEY_HEADER: API_KEY} if API_KEY else {}
    try:
        response = requests.post(f"{API_URL}/api/dataset/reload", headers=headers, timeout=60)

        if response.status_code == 200:
            result = response.json()
            dataset = result.get("dataset", {})
            logger.info(
                f"Reload done: reloaded={result.get('reloaded')}, "
                f"records={dataset.get('record_count')}, available={dataset.get('available')}"
            )
            return True
        else:
            logger.error(f"Reload failed ({response.status_code}): {response.text}")
            return False
    except requests.exceptions.ConnectionError:
        logger.error(f"Connection error - is the backend running at {API_URL}?")
        return False
    except requests.exceptions.RequestException as e:
        logger.error(f"Reload error: {e}")
        return False


class DatasetHandler(FileSystemEventHandler):
    """Handle file system events for the dataset file only."""

    def __init__(self, dataset_path: Path, debounce: float = DEBOUNCE_SECONDS):
        super().__init__()
        self.dataset_path = dataset_path
        self.debounce = debounce
        self._timer = None
        self._lock = threading.Lock()

    def _is_dataset(self, path) -> bool:
        return Path(os.fsdecode(path)).resolve() == self.dataset_path

    def _schedule_reload(self):
        # Writers often touch the file several times; reload once it settles
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, request_reload)
            self._timer.daemon = True
            self._timer.start()

    def on_created(self, event):
        if not event.is_directory and self._is_dataset(event.src_path):
            logger.info(f"Dataset created: {event.src_path}")
            self._schedule_reload()

    def on_modified(self, event):
        if not event.is_directory and self._is_dataset(event.src_path):
            logger.info(f"Dataset modified: {event.src_path}")
            self._schedule_reload()

    def on_moved(self, event):
        # Atomic writers (temp file + rename) show up as a move onto the dataset
        if not event.is_directory and self._is_dataset(event.dest_path):
            logger.info(f"Dataset replaced: {event.dest_path}")
            self._schedule_reload()


def main():
    watch_dir = DATASET_PATH.parent
    watch_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Market Price Dataset Watcher starting...")
    logger.info(f"  Dataset: {DATASET_PATH}")
    logger.info(f"  API URL: {API_URL}")

    event_handler = DatasetHandler(DATASET_PATH)
    observer = Observer()
    observer.schedule(event_handler, str(watch_dir), recursive=False)
    observer.start()

    logger.info("Watching for dataset changes... (Ctrl+C to stop)")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher...")
        observer.stop()

    observer.join()
    logger.info("Watcher stopped.")


if __name__ == "__main__":
    main()
