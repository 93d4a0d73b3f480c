from __future__ import annotations
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QMessageBox, QCheckBox

from vdp_admin.licensing import SEND_API_KEY
from vdp_admin.security import AuthService, ValidationError


class ProfilePage(QWidget):
    """Profil: identifiant, mot de passe, clé API serveur, adresse du serveur, déconnexion."""
    notify = Signal(str, str)
    username_changed = Signal(str)
    logged_out = Signal()

    def __init__(self, auth: AuthService, parent=None):
        super().__init__(parent)
        self.setObjectName("ProfilePage")
        self.auth = auth
        self.settings = auth.store.settings

        self.username_edit = QLineEdit(); self.username_edit.setPlaceholderText("Nouvel identifiant")
        self.password_edit = QLineEdit(); self.password_edit.setPlaceholderText("Nouveau mot de passe"); self.password_edit.setEchoMode(QLineEdit.Password)
        self.api_key_edit = QLineEdit(); self.api_key_edit.setPlaceholderText("Clé API (32 caractères min.)"); self.api_key_edit.setEchoMode(QLineEdit.Password)
        self.api_base_edit = QLineEdit(); self.api_base_edit.setPlaceholderText("http://localhost:3000")
        self.identity_status = QLabel("")
        self.api_key_status = QLabel("")
        self.send_key_cb = QCheckBox("Envoyer la clé API au serveur (serveur protégé)")

        user_btn = QPushButton("Changer l'identifiant")
        pass_btn = QPushButton("Changer le mot de passe")
        pass_btn.setStyleSheet("background:#059669;")
        key_btn = QPushButton("Sauvegarder Clé API")
        key_btn.setStyleSheet("background:#0f172a;")
        base_btn = QPushButton("Enregistrer l'adresse")
        logout_btn = QPushButton("Déconnexion")
        logout_btn.setStyleSheet("background:#dc2626;")

        layout = QVBoxLayout(self)
        title = QLabel("Profil administrateur")
        title.setStyleSheet("font-size:18px; font-weight:bold; margin: 12px 0;")
        layout.addWidget(title)
        layout.addLayout(self.row(self.username_edit, user_btn))
        layout.addLayout(self.row(self.password_edit, pass_btn))
        layout.addWidget(self.identity_status)
        layout.addWidget(QLabel("Clé API Serveur"))
        layout.addWidget(self.api_key_edit)
        layout.addWidget(key_btn)
        layout.addWidget(self.send_key_cb)
        layout.addWidget(self.api_key_status)
        layout.addWidget(QLabel("Serveur de licences"))
        layout.addLayout(self.row(self.api_base_edit, base_btn))
        layout.addStretch(1)
        layout.addWidget(logout_btn)

        user_btn.clicked.connect(self.update_username)
        pass_btn.clicked.connect(self.update_password)
        key_btn.clicked.connect(self.save_api_key)
        base_btn.clicked.connect(self.save_api_base)
        self.send_key_cb.toggled.connect(self.save_send_api_key)
        logout_btn.clicked.connect(self.logout)
        self.load()

    def row(self, widget, button):
        h = QHBoxLayout(); h.addWidget(widget, 1); h.addWidget(button); return h

    def load(self):
        self.api_key_edit.setText(self.auth.store.api_key)
        self.api_base_edit.setText(self.settings.get('api_base') or '')
        self.send_key_cb.setChecked(self.settings.get(SEND_API_KEY) == '1')

    def _status(self, label: QLabel, msg: str, ok: bool):
        label.setStyleSheet(f"color: {'#059669' if ok else '#dc2626'}; font-weight:700;")
        label.setText(msg)

    def update_username(self):
        try:
            name = self.auth.update_username(self.username_edit.text())
        except ValidationError as e:
            self._status(self.identity_status, str(e), False)
            return
        self.username_edit.clear()
        self._status(self.identity_status, "Identifiant mis à jour !", True)
        self.username_changed.emit(name)
        self.notify.emit("Identifiant mis à jour", "success")

    def update_password(self):
        try:
            self.auth.update_password(self.password_edit.text())
        except ValidationError as e:
            self._status(self.identity_status, str(e), False)
            return
        self.password_edit.clear()
        self._status(self.identity_status, "Mot de passe sécurisé enregistré !", True)
        self.notify.emit("Mot de passe mis à jour", "success")

    def save_api_key(self):
        try:
            self.auth.save_api_key(self.api_key_edit.text())
        except ValidationError as e:
            self._status(self.api_key_status, str(e), False)
            return
        self._status(self.api_key_status, "Clé API enregistrée", True)
        self.notify.emit("Clé API enregistrée", "success")

    def save_send_api_key(self, checked: bool):
        self.settings.set(SEND_API_KEY, "1" if checked else None)

    def save_api_base(self):
        self.settings.set('api_base', self.api_base_edit.text().strip() or None)
        self.notify.emit("Adresse du serveur enregistrée", "success")

    def logout(self):
        self.auth.request_logout()
        ans = QMessageBox.question(self, "Déconnexion", "Voulez-vous vraiment vous déconnecter ?", QMessageBox.Yes | QMessageBox.No)
        if ans != QMessageBox.Yes:
            self.auth.cancel_logout()
            return
        if self.auth.confirm_logout():
            self.logged_out.emit()
