from __future__ import annotations
import logging

from PySide6.QtCore import Qt, Signal, QObject, QRunnable, QThreadPool
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QSpinBox, QFrame

from vdp_admin.history import LicenseRecord
from vdp_admin.licensing import IssuanceClient, LicenseError

log = logging.getLogger(__name__)


class _TaskSignals(QObject):
    done = Signal(object)
    error = Signal(str)


class _GenerateTask(QRunnable):
    """Runs one issuance request on the thread pool."""

    def __init__(self, client: IssuanceClient, duration_days: int, mac_address: str):
        super().__init__()
        self.setAutoDelete(False)
        self.signals = _TaskSignals()
        self._client = client
        self._duration_days = duration_days
        self._mac_address = mac_address

    def run(self):
        try:
            record = self._client.generate(self._duration_days, self._mac_address)
        except LicenseError as e:
            self.signals.error.emit(str(e))
        except Exception as e:
            log.exception("license generation failed")
            self.signals.error.emit(f"Erreur inattendue : {e}")
        else:
            self.signals.done.emit(record)


class GeneratePage(QWidget):
    """Formulaire de génération + dernier résultat."""
    generated = Signal(object)
    failed = Signal(str)
    copied = Signal()

    def __init__(self, client_factory=IssuanceClient, parent=None):
        super().__init__(parent)
        self.setObjectName("GeneratePage")
        self._client_factory = client_factory

        layout = QVBoxLayout(self)

        # Last result
        self.result_box = QFrame(self)
        self.result_box.setStyleSheet("QFrame { background:#ecfdf5; border:1px solid #a7f3d0; border-radius:12px; }")
        rb = QVBoxLayout(self.result_box)
        head = QHBoxLayout()
        head.addWidget(QLabel("Dernière licence générée"))
        head.addStretch(1)
        self.close_result_btn = QPushButton("✕"); self.close_result_btn.setFixedWidth(36)
        head.addWidget(self.close_result_btn)
        rb.addLayout(head)
        self.result_key = QLabel(""); self.result_key.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.result_key.setStyleSheet("font-family: monospace; font-size: 18px; font-weight: 800; color:#4f46e5;")
        self.result_meta = QLabel("")
        copy_btn = QPushButton("Copier")
        rb.addWidget(self.result_key); rb.addWidget(self.result_meta); rb.addWidget(copy_btn)
        self.result_box.setVisible(False)
        layout.addWidget(self.result_box)

        # Form
        layout.addWidget(QLabel("Adresse MAC (optionnelle) :", self))
        self.mac_edit = QLineEdit(self)
        self.mac_edit.setPlaceholderText("ex: AA:BB:CC:DD:EE:FF (vide = licence globale)")
        layout.addWidget(self.mac_edit)

        layout.addWidget(QLabel("Durée de validité (jours) :", self))
        self.duration_spin = QSpinBox(self)
        self.duration_spin.setRange(1, 3650)
        self.duration_spin.setValue(365)
        layout.addWidget(self.duration_spin)

        self.generate_btn = QPushButton("Générer la licence", self)
        self.generate_btn.setMinimumHeight(44)
        layout.addWidget(self.generate_btn)
        layout.addStretch(1)

        self.generate_btn.clicked.connect(self._on_generate)
        self.close_result_btn.clicked.connect(self.clear_result)
        copy_btn.clicked.connect(self._copy_result)
        self._last: LicenseRecord | None = None
        self._task: _GenerateTask | None = None

    def _set_busy(self, busy: bool):
        self.generate_btn.setEnabled(not busy)
        self.mac_edit.setEnabled(not busy)
        self.duration_spin.setEnabled(not busy)

    def _on_generate(self):
        if self._task is not None:
            return
        # the request runs off the GUI thread so the window stays responsive
        task = _GenerateTask(self._client_factory(), self.duration_spin.value(), self.mac_edit.text())
        task.signals.done.connect(self._on_task_done)
        task.signals.error.connect(self._on_task_error)
        self._task = task
        self._set_busy(True)
        QThreadPool.globalInstance().start(task)

    def _on_task_done(self, record: LicenseRecord):
        self._task = None
        self._set_busy(False)
        self.generated.emit(record)

    def _on_task_error(self, message: str):
        self._task = None
        self._set_busy(False)
        self.failed.emit(message)

    def show_result(self, record: LicenseRecord):
        self._last = record
        self.result_key.setText(record.licenseKey)
        self.result_meta.setText(f"MAC : {record.macAddress}    Expiration : {record.expirationDate}")
        self.result_box.setVisible(True)

    def clear_result(self):
        self._last = None
        self.result_box.setVisible(False)

    def _copy_result(self):
        if self._last is None:
            return
        QGuiApplication.clipboard().setText(self._last.licenseKey)
        self.copied.emit()
