from __future__ import annotations
from PySide6.QtWidgets import QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton
from PySide6.QtCore import Qt
from vdp_admin.security import AuthService, AuthError

class LoginDialog(QDialog):
    def __init__(self, auth: AuthService, parent=None):
        super().__init__(parent)
        self.auth = auth
        self.setWindowTitle("Connexion Admin")
        self.resize(440, 360)

        title = QLabel("Connexion Admin")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 22px; font-weight: 700; color: #111827;")
        subtitle = QLabel("Gestionnaire de Licences")
        subtitle.setAlignment(Qt.AlignCenter)
        subtitle.setStyleSheet("color:#6b7280; font-size: 14px;")

        self.username_edit = QLineEdit(); self.username_edit.setPlaceholderText("Utilisateur")
        self.password_edit = QLineEdit(); self.password_edit.setPlaceholderText("Mot de passe"); self.password_edit.setEchoMode(QLineEdit.Password)
        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color:#dc2626; font-weight:700;")
        login_btn = QPushButton("Se connecter")
        login_btn.setMinimumHeight(40)
        login_btn.setDefault(True)

        layout = QVBoxLayout(self); layout.setSpacing(10)
        layout.addWidget(title); layout.addWidget(subtitle)
        layout.addLayout(self.row("Utilisateur :", self.username_edit))
        layout.addLayout(self.row("Mot de passe :", self.password_edit))
        layout.addWidget(self.error_label)
        layout.addWidget(login_btn)

        self.setStyleSheet(
            """
            * { font-size: 15px; }
            QDialog { background: #f1f5f9; }
            QLineEdit { border:1px solid #e5e7eb; border-radius:8px; padding:10px; background:#fff; }
            QPushButton { background:#4f46e5; color:#fff; border:none; border-radius:8px; padding:10px 16px; font-weight:700; }
            QPushButton:hover { background:#4338ca; }
            QLabel { color:#111827; }
            """
        )

        login_btn.clicked.connect(self.try_login)
        self.password_edit.returnPressed.connect(self.try_login)
        self.ok = False

    def row(self, label, widget):
        h = QHBoxLayout(); h.addWidget(QLabel(label)); h.addWidget(widget); return h

    def try_login(self):
        try:
            self.auth.login(self.username_edit.text(), self.password_edit.text())
        except AuthError as e:
            self.error_label.setText(str(e))
            return
        self.ok = True
        self.accept()
