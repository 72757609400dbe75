"""
gui_mainwindow.py - GUI Main Window

Single panel:
1. Source / destination selection and rename table
2. Preview of planned operations and execution
"""

from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QCheckBox,
    QTableWidget, QTableWidgetItem, QProgressBar,
    QFileDialog, QMessageBox, QHeaderView, QGroupBox
)
from PySide6.QtCore import Slot
from PySide6.QtGui import QColor

from core import CopyOptions, CopyPlan, CopyResult, RenameTable
from core.models_fs import relative_str
from .gui_workers import PlanWorker, CopyWorker


class ForkPanel(QWidget):
    """Project fork panel"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.plan: Optional[CopyPlan] = None
        self.plan_worker: Optional[PlanWorker] = None
        self.copy_worker: Optional[CopyWorker] = None

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Paths group
        path_group = QGroupBox("Project")
        path_layout = QGridLayout(path_group)

        path_layout.addWidget(QLabel("From:"), 0, 0)
        self.source_edit = QLineEdit()
        self.source_edit.setPlaceholderText("Select source project directory...")
        path_layout.addWidget(self.source_edit, 0, 1)
        self.source_btn = QPushButton("Browse...")
        self.source_btn.clicked.connect(self._browse_source)
        path_layout.addWidget(self.source_btn, 0, 2)

        path_layout.addWidget(QLabel("To:"), 1, 0)
        self.dest_edit = QLineEdit()
        self.dest_edit.setPlaceholderText("New project directory (must not exist)")
        path_layout.addWidget(self.dest_edit, 1, 1)
        self.dest_btn = QPushButton("Browse...")
        self.dest_btn.clicked.connect(self._browse_destination)
        path_layout.addWidget(self.dest_btn, 1, 2)

        options_layout = QHBoxLayout()
        self.links_check = QCheckBox("Follow Symlinks")
        self.links_check.setChecked(True)
        self.dry_run_check = QCheckBox("Dry Run")
        options_layout.addWidget(self.links_check)
        options_layout.addWidget(self.dry_run_check)
        options_layout.addStretch()
        path_layout.addLayout(options_layout, 2, 0, 1, 3)

        layout.addWidget(path_group)

        # Rename table group
        map_group = QGroupBox("Rename Table")
        map_layout = QVBoxLayout(map_group)

        self.map_table = QTableWidget(0, 2)
        self.map_table.setHorizontalHeaderLabels(["Old Symbol", "New Symbol"])
        self.map_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        map_layout.addWidget(self.map_table)

        map_buttons = QHBoxLayout()
        self.add_row_btn = QPushButton("Add")
        self.add_row_btn.clicked.connect(self._add_map_row)
        self.remove_row_btn = QPushButton("Remove")
        self.remove_row_btn.clicked.connect(self._remove_map_row)
        map_buttons.addWidget(self.add_row_btn)
        map_buttons.addWidget(self.remove_row_btn)
        map_buttons.addStretch()
        map_layout.addLayout(map_buttons)

        self.preview_btn = QPushButton("Preview")
        self.preview_btn.clicked.connect(self._do_preview)
        map_layout.addWidget(self.preview_btn)

        layout.addWidget(map_group)

        # Operations table
        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Kind", "Source", "Destination"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.Stretch)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        layout.addWidget(self.table, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.execute_btn = QPushButton("Copy Project")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setEnabled(False)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def _browse_source(self):
        directory = QFileDialog.getExistingDirectory(self, "Select Source Project")
        if directory:
            self.source_edit.setText(directory)

    def _browse_destination(self):
        path, _ = QFileDialog.getSaveFileName(self, "New Project Directory")
        if path:
            self.dest_edit.setText(path)

    def _add_map_row(self):
        row = self.map_table.rowCount()
        self.map_table.insertRow(row)
        self.map_table.setItem(row, 0, QTableWidgetItem(""))
        self.map_table.setItem(row, 1, QTableWidgetItem(""))

    def _remove_map_row(self):
        row = self.map_table.currentRow()
        if row >= 0:
            self.map_table.removeRow(row)

    def rename_table(self) -> RenameTable:
        """Build the rename table from the table rows (incomplete rows are dropped)"""
        pairs = []
        for row in range(self.map_table.rowCount()):
            old_item = self.map_table.item(row, 0)
            new_item = self.map_table.item(row, 1)
            old = old_item.text().strip() if old_item else ""
            new = new_item.text().strip() if new_item else ""
            pairs.append(f"{old}={new}")
        return RenameTable.from_pairs(pairs)

    def options(self) -> CopyOptions:
        return CopyOptions(
            follow_links=self.links_check.isChecked(),
            dry_run=self.dry_run_check.isChecked(),
        )

    def _do_preview(self):
        """Generate preview"""
        source = self.source_edit.text().strip()
        destination = self.dest_edit.text().strip()
        if not source or not destination:
            QMessageBox.warning(self, "Warning", "Please select source and destination first")
            return

        self.preview_btn.setEnabled(False)
        self.preview_btn.setText("Generating...")
        self.execute_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)  # Indeterminate progress

        self.plan_worker = PlanWorker(
            Path(source),
            Path(destination),
            self.rename_table(),
            self.options(),
        )
        self.plan_worker.progress.connect(self._on_plan_progress)
        self.plan_worker.finished.connect(self._on_plan_finished)
        self.plan_worker.error.connect(self._on_plan_error)
        self.plan_worker.start()

    @Slot(str)
    def _on_plan_progress(self, msg: str):
        self.status_label.setText(msg[-80:] if len(msg) > 80 else msg)

    @Slot(object)
    def _on_plan_finished(self, plan: CopyPlan):
        """Plan generation complete"""
        self.plan = plan
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")
        self.progress_bar.setVisible(False)

        self._update_table_preview()

        self.execute_btn.setEnabled(bool(plan.ops))
        self.status_label.setText(
            f"Will create {plan.dir_count} directories and {plan.file_count} files "
            f"(renamed: {plan.renamed_count}, ignored: {len(plan.skipped)})"
        )

    @Slot(str)
    def _on_plan_error(self, error: str):
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Failed to generate preview: {error}")

    def _update_table_preview(self):
        """Update table to display planned operations"""
        if not self.plan:
            return

        self.table.setRowCount(len(self.plan.ops))
        for i, op in enumerate(self.plan.ops):
            self.table.setItem(i, 0, QTableWidgetItem(op.kind.value))
            self.table.setItem(i, 1, QTableWidgetItem(relative_str(op.src, self.plan.source)))
            dst_item = QTableWidgetItem(relative_str(op.dst, self.plan.destination))
            if op.note == "renamed":
                dst_item.setForeground(QColor(0, 150, 0))
            self.table.setItem(i, 2, dst_item)

    def _do_execute(self):
        """Execute copy"""
        if not self.plan or not self.plan.ops:
            return

        dry_run = self.dry_run_check.isChecked()
        if not dry_run:
            reply = QMessageBox.question(
                self, "Confirm",
                f"Copy {self.plan.total_count} entries to {self.plan.destination}?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
            )
            if reply != QMessageBox.StandardButton.Yes:
                return

        self.execute_btn.setEnabled(False)
        self.execute_btn.setText("Copying...")
        self.preview_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, self.plan.total_count)

        self.copy_worker = CopyWorker(self.plan, dry_run=dry_run)
        self.copy_worker.progress.connect(self._on_copy_progress)
        self.copy_worker.finished.connect(self._on_copy_finished)
        self.copy_worker.error.connect(self._on_copy_error)
        self.copy_worker.start()

    @Slot(int, int, str)
    def _on_copy_progress(self, current: int, total: int, msg: str):
        self.progress_bar.setValue(current)
        self.status_label.setText(msg)

    @Slot(object)
    def _on_copy_finished(self, result: CopyResult):
        """Copy complete"""
        self.execute_btn.setText("Copy Project")
        self.preview_btn.setEnabled(True)
        self.progress_bar.setVisible(False)

        if result.ok:
            QMessageBox.information(self, "Complete", result.summary())
        else:
            QMessageBox.critical(self, "Copy Failed", result.summary())

        # A dry run leaves the plan valid
        if result.dry_run:
            self.execute_btn.setEnabled(True)
            self.status_label.setText("Dry run complete")
            return

        self.plan = None
        self.table.setRowCount(0)
        self.status_label.setText("Complete" if result.ok else "Failed")

    @Slot(str)
    def _on_copy_error(self, error: str):
        self.execute_btn.setEnabled(True)
        self.execute_btn.setText("Copy Project")
        self.preview_btn.setEnabled(True)
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Copy failed: {error}")


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Project Fork")
        self.setMinimumSize(800, 600)

        self.panel = ForkPanel()
        self.setCentralWidget(self.panel)

        self.statusBar().showMessage("Ready")
