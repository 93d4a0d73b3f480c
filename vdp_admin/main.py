from __future__ import annotations
import logging
import sys
from PySide6.QtWidgets import QApplication
from vdp_admin.data.database import init_db
from vdp_admin.history import History
from vdp_admin.security import AuthService
from vdp_admin.ui.login_dialog import LoginDialog
from vdp_admin.ui.main_window import MainWindow

log = logging.getLogger("vdp_admin")


def main() -> None:
    """Start the operator client: login, then the main window until logout or exit."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    init_db()
    log.info("VDP admin client starting")

    qt_app = QApplication(sys.argv)
    # logging out closes the main window without ending the program
    qt_app.setQuitOnLastWindowClosed(False)

    auth = AuthService()
    # history lives as long as the process, across logouts
    history = History()
    windows: list[MainWindow] = []

    def start_session() -> None:
        login_dialog = LoginDialog(auth)
        if login_dialog.exec() != LoginDialog.Accepted or not login_dialog.ok:
            qt_app.quit()
            return
        window = MainWindow(auth, history)
        window.logged_out.connect(start_session)
        windows[:] = [window]
        window.show()

    start_session()
    if not auth.is_authenticated:
        sys.exit(0)
    sys.exit(qt_app.exec())

if __name__ == "__main__":
    main()
