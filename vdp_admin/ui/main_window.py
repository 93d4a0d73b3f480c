from __future__ import annotations
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QPushButton, QStackedWidget, QSplitter, QLabel
)
from vdp_admin.history import History, LicenseRecord
from vdp_admin.licensing import IssuanceClient
from vdp_admin.security import AuthService
from vdp_admin.ui.generate_page import GeneratePage
from vdp_admin.ui.history_page import HistoryPage
from vdp_admin.ui.profile_page import ProfilePage
from vdp_admin.ui.toast import show_toast

class MainWindow(QMainWindow):
    logged_out = Signal()

    def __init__(self, auth: AuthService, history: History):
        super().__init__()
        self.setWindowTitle("Gestionnaire de Licences VDP")
        self.resize(1000, 700)
        self.auth = auth
        self.history = history
        self._logging_out = False

        splitter = QSplitter(self)
        splitter.setOrientation(Qt.Horizontal)

        # Left: side navigation
        nav = QWidget(); nav_layout = QVBoxLayout(nav)
        self.user_lbl = QLabel(); self.user_lbl.setStyleSheet("font-size:16px; font-weight:bold; padding:8px 0;")
        self.role_lbl = QLabel(); self.role_lbl.setStyleSheet("color:#6b7280; font-size:12px;")
        nav_layout.addWidget(self.user_lbl); nav_layout.addWidget(self.role_lbl)

        self.btn_generate = QPushButton("Générer")
        self.btn_history = QPushButton("Liste")
        self.btn_profile = QPushButton("Profil")
        for b in (self.btn_generate, self.btn_history, self.btn_profile):
            b.setCursor(Qt.PointingHandCursor)
            b.setMinimumHeight(40)
            nav_layout.addWidget(b)
        nav_layout.addStretch(1)

        # Right: pages area
        self.pages = QStackedWidget()
        self.page_generate = GeneratePage(client_factory=self._make_client, parent=self)
        self.page_history = HistoryPage(history, self)
        self.page_profile = ProfilePage(auth, self)
        for w in (self.page_generate, self.page_history, self.page_profile):
            self.pages.addWidget(w)

        splitter.addWidget(nav)
        splitter.addWidget(self.pages)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        # Connections
        self.btn_generate.clicked.connect(lambda: self._switch_to(self.page_generate))
        self.btn_history.clicked.connect(lambda: self._switch_to(self.page_history))
        self.btn_profile.clicked.connect(lambda: self._switch_to(self.page_profile))

        self.page_generate.generated.connect(self._on_generated)
        self.page_generate.failed.connect(lambda msg: self.toast(msg, 'error'))
        self.page_generate.copied.connect(lambda: self.toast("Copié dans le presse-papier !", 'info'))
        self.page_history.notify.connect(self.toast)
        self.page_profile.notify.connect(self.toast)
        self.page_profile.username_changed.connect(lambda _name: self._refresh_identity())
        self.page_profile.logged_out.connect(self._on_logged_out)

        self._apply_modern_style()
        self._refresh_identity()
        self._switch_to(self.page_generate)

    def _make_client(self) -> IssuanceClient:
        # the key is attached only if the operator enabled sending it
        return IssuanceClient.from_settings(self.auth.store.settings, self.auth.store.api_key or None)

    def _switch_to(self, widget):
        if widget is self.page_history:
            self.page_history.refresh()
        self.pages.setCurrentWidget(widget)

    def _refresh_identity(self):
        session = self.auth.session
        self.user_lbl.setText(session.username if session else "")
        self.role_lbl.setText(session.role if session else "")

    def toast(self, msg: str, kind: str = 'info'):
        show_toast(self, msg, kind)

    def _on_generated(self, record: LicenseRecord):
        enriched = self.history.record_success(record)
        self.page_generate.show_result(enriched)
        self.page_history.refresh()
        self.toast("Licence générée avec succès !", 'success')

    def _on_logged_out(self):
        self._logging_out = True
        self.close()
        self.logged_out.emit()

    def closeEvent(self, event):
        if not self._logging_out:
            from PySide6.QtWidgets import QApplication
            QApplication.quit()
        super().closeEvent(event)

    def _apply_modern_style(self):
        self.setStyleSheet(
            """
            * { font-size: 15px; }
            QMainWindow { background: #f1f5f9; }
            QWidget { background: #ffffff; }
            QPushButton {
                background: #4f46e5; color: white; border: none; padding: 10px 14px;
                border-radius: 8px; font-weight: 600;
            }
            QPushButton:hover { background: #4338ca; }
            QPushButton:pressed { background: #3730a3; }
            QLineEdit, QSpinBox, QTableWidget {
                border: 1px solid #e5e7eb; border-radius: 8px; padding: 8px; background: white;
            }
            QLabel { color: #111827; }
            QSplitter::handle { background: #e5e7eb; width: 6px; }
            """
        )
