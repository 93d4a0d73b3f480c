from __future__ import annotations
from PySide6.QtCore import Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QTableWidget,
    QTableWidgetItem, QAbstractItemView, QMessageBox, QFileDialog
)

from vdp_admin.history import History


class HistoryPage(QWidget):
    """Liste des licences de la session: recherche, stats, suppression, export CSV."""
    notify = Signal(str, str)

    def __init__(self, history: History, parent=None):
        super().__init__(parent)
        self.setObjectName("HistoryPage")
        self.history = history

        root = QVBoxLayout(self)

        # stats
        stats_row = QHBoxLayout()
        self.total_lbl = QLabel(); self.hw_lbl = QLabel(); self.global_lbl = QLabel()
        for l in (self.total_lbl, self.hw_lbl, self.global_lbl):
            l.setStyleSheet("font-weight:700; padding:6px 10px; background:#eef2ff; border-radius:8px;")
            stats_row.addWidget(l)
        stats_row.addStretch(1)
        self.export_btn = QPushButton("CSV")
        stats_row.addWidget(self.export_btn)
        root.addLayout(stats_row)

        self.search_edit = QLineEdit(); self.search_edit.setPlaceholderText("Rechercher une clé ou une MAC...")
        root.addWidget(self.search_edit)

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Date", "Clé", "MAC", "Expiration"])
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.horizontalHeader().setStretchLastSection(True)
        root.addWidget(self.table, 1)

        self.empty_lbl = QLabel("Aucune licence dans l'historique.")
        root.addWidget(self.empty_lbl)

        btns = QHBoxLayout()
        self.copy_btn = QPushButton("Copier la clé")
        self.delete_btn = QPushButton("Supprimer")
        self.delete_btn.setStyleSheet("background:#dc2626;")
        btns.addWidget(self.copy_btn); btns.addWidget(self.delete_btn); btns.addStretch(1)
        root.addLayout(btns)

        self.search_edit.textChanged.connect(self.refresh)
        self.copy_btn.clicked.connect(self.copy_selected)
        self.delete_btn.clicked.connect(self.delete_selected)
        self.export_btn.clicked.connect(self.export_csv)
        self.refresh()

    def refresh(self):
        stats = self.history.stats()
        self.total_lbl.setText(f"Total : {stats['total']}")
        self.hw_lbl.setText(f"Matériel : {stats['hardwareBound']}")
        self.global_lbl.setText(f"Globales : {stats['global']}")
        self.export_btn.setVisible(stats['total'] > 0)

        rows = self.history.search(self.search_edit.text())
        self.table.setRowCount(len(rows))
        for r, rec in enumerate(rows):
            for c, val in enumerate((rec.timestamp or '', rec.licenseKey, rec.macAddress, rec.expirationDate)):
                self.table.setItem(r, c, QTableWidgetItem(val))
        self.empty_lbl.setVisible(not rows)

    def _selected_row(self) -> int:
        sel = self.table.selectionModel().selectedRows()
        return sel[0].row() if sel else -1

    def copy_selected(self):
        row = self._selected_row()
        rows = self.history.search(self.search_edit.text())
        if not 0 <= row < len(rows):
            return
        QGuiApplication.clipboard().setText(rows[row].licenseKey)
        self.notify.emit("Copié dans le presse-papier !", "info")

    def delete_selected(self):
        row = self._selected_row()
        if row < 0:
            return
        ans = QMessageBox.question(self, "Supprimer", "Supprimer cette licence de l'historique ?", QMessageBox.Yes | QMessageBox.No)
        if ans != QMessageBox.Yes:
            return
        # the row index belongs to the filtered view
        if self.history.delete_filtered(self.search_edit.text(), row) is not None:
            self.refresh()
            self.notify.emit("Licence supprimée", "error")

    def export_csv(self):
        if len(self.history) == 0:
            return
        directory = QFileDialog.getExistingDirectory(self, "Dossier d'export CSV")
        if not directory:
            return
        try:
            path = self.history.write_csv(directory)
        except OSError as e:
            QMessageBox.warning(self, "Erreur", str(e))
            return
        if path:
            self.notify.emit("CSV exporté", "success")
