"""
gui_workers.py - GUI Worker Threads

Provides background planning and copying to avoid blocking UI
"""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QThread, Signal, QObject

from core import (
    plan_copy, execute_copy, validate_paths,
    CopyOptions, CopyPlan, RenameTable
)


class PlanWorker(QThread):
    """Copy plan generation worker thread"""

    # Signals
    progress = Signal(str)              # Progress message
    finished = Signal(object)           # CopyPlan
    error = Signal(str)                 # Error message

    def __init__(
        self,
        source: Path,
        destination: Path,
        table: RenameTable,
        options: Optional[CopyOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.source = source
        self.destination = destination
        self.table = table
        self.options = options or CopyOptions()

    def run(self):
        try:
            self.progress.emit("Generating copy plan...")
            validate_paths(self.source, self.destination)
            plan = plan_copy(
                self.source,
                self.destination,
                self.table,
                self.options,
                progress_callback=self.progress.emit,
            )
            self.finished.emit(plan)
        except Exception as e:
            self.error.emit(str(e))


class CopyWorker(QThread):
    """Copy execution worker thread"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # CopyResult
    error = Signal(str)                 # Error message

    def __init__(
        self,
        plan: CopyPlan,
        dry_run: bool = False,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.plan = plan
        self.dry_run = dry_run

    def run(self):
        try:
            def progress_callback(current: int, total: int, msg: str):
                self.progress.emit(current, total, msg)

            result = execute_copy(
                self.plan,
                dry_run=self.dry_run,
                progress_callback=progress_callback,
            )

            self.finished.emit(result)
        except Exception as e:
            self.error.emit(str(e))
