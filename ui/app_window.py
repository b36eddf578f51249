import logging
import customtkinter as ctk
from models.user import User
from services.reminder_service import ReminderAlert, ReminderService
from services.wallet_service import WalletService
from database.db_manager import DatabaseManager
from database.dismissed_reminder_dao import DismissedReminderDAO
from database.user_dao import UserDAO
from ui.components.alerts_dialog import AlertsDialog
from ui.components.due_banner import DueBanner
from ui.tabs.reminders_tab import RemindersTab
from ui.tabs.schedule_tab import ScheduleTab
from ui.tabs.wallets_tab import WalletsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT

logger = logging.getLogger(__name__)

_REFRESH_SCOPES: dict[str, set[str]] = {
    "reminder": {"reminders", "schedule", "banner"},
    "wallet":   {"reminders", "schedule", "wallets"},
    "user":     {"reminders", "schedule", "wallets", "banner"},
    "full":     {"reminders", "schedule", "wallets", "banner"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        reminder_service: ReminderService,
        wallet_service: WalletService,
        user_dao: UserDAO,
        db: DatabaseManager | None = None,
        dismissed_reminder_dao: DismissedReminderDAO | None = None,
        initial_user: User | None = None,
        startup_alerts: list[ReminderAlert] | None = None,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._reminder_svc = reminder_service
        self._wallet_svc = wallet_service
        self._user_dao = user_dao
        self._db = db
        self._dismissed_dao = dismissed_reminder_dao
        self._startup_alerts = startup_alerts or []
        self._date_format = date_format
        self._symbol = currency_symbol

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self._users = self._user_dao.get_all()
        self._current_user: User | None = (
            initial_user or (self._users[0] if self._users else None)
        )

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_user_bar()
        self._build_banner_area()
        self._build_tabs()
        self._show_due_banner()

        # Show alerts after the window is drawn
        if self._startup_alerts:
            self.after(200, self._show_alerts_dialog)

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    @property
    def current_user(self) -> User | None:
        return self._current_user

    # ── User bar ────────────────────────────────────────────────────────────
    def _build_user_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=44)
        bar.grid(row=0, column=0, sticky="ew")
        bar.grid_propagate(False)

        ctk.CTkLabel(bar, text="User:", anchor="e").pack(side="left", padx=(12, 4), pady=8)

        current_name = self._current_user.name if self._current_user else ""
        self._user_combo_var = ctk.StringVar(value=current_name)
        self._user_combo = ctk.CTkComboBox(
            bar,
            values=[u.name for u in self._users],
            variable=self._user_combo_var,
            width=200,
            state="readonly",
            command=self.on_user_changed,
        )
        self._user_combo.pack(side="left", padx=4)

        ctk.CTkButton(
            bar, text="+ New User", width=100,
            command=self._open_new_user,
        ).pack(side="left", padx=4)

        self._user_error = ctk.CTkLabel(bar, text="", text_color="#F44336")
        self._user_error.pack(side="left", padx=8)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=1, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Reminders", "Schedule", "Wallets"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._reminders_tab = RemindersTab(
            self._tabview.tab("Reminders"),
            reminder_service=self._reminder_svc,
            wallet_service=self._wallet_svc,
            get_user_id=self._get_current_user_id,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
            currency_symbol=self._symbol,
        )
        self._reminders_tab.grid(row=0, column=0, sticky="nsew")

        self._schedule_tab = ScheduleTab(
            self._tabview.tab("Schedule"),
            reminder_service=self._reminder_svc,
            get_user_id=self._get_current_user_id,
            date_format=self._date_format,
            currency_symbol=self._symbol,
        )
        self._schedule_tab.grid(row=0, column=0, sticky="nsew")

        self._wallets_tab = WalletsTab(
            self._tabview.tab("Wallets"),
            wallet_service=self._wallet_svc,
            user_dao=self._user_dao,
            get_user_id=self._get_current_user_id,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._wallets_tab.grid(row=0, column=0, sticky="nsew")

    # ── User management ──────────────────────────────────────────────────────
    def on_user_changed(self, value=None):
        name = self._user_combo_var.get()
        self._current_user = next((u for u in self._users if u.name == name), None)
        logger.info("Switched to user %s", name)
        self.notify_tabs_refresh("user")

    def _get_current_user_id(self) -> int | None:
        return self._current_user.id if self._current_user else None

    def _open_new_user(self):
        dialog = ctk.CTkInputDialog(text="Name of the new user:", title="New User")
        name = dialog.get_input()
        if name is None:
            return
        try:
            user = self._user_dao.create(name)
        except ValueError as e:
            self._user_error.configure(text=str(e))
            return
        self._user_error.configure(text="")
        logger.info("Created user %s (%r)", user.id, user.name)
        self._users = self._user_dao.get_all()
        self._user_combo.configure(values=[u.name for u in self._users])
        self._current_user = user
        self._user_combo_var.set(user.name)
        self._user_combo.set(user.name)
        self.notify_tabs_refresh("user")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "reminders" in tabs: self._reminders_tab.refresh()
        if "schedule"  in tabs: self._schedule_tab.refresh()
        if "wallets"   in tabs: self._wallets_tab.refresh()
        if "banner"    in tabs: self._show_due_banner()

    # ── Banners & dialogs ────────────────────────────────────────────────────
    def _show_due_banner(self):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        user_id = self._get_current_user_id()
        if not user_id:
            return
        due = self._reminder_svc.get_due(user_id)
        if not due:
            return
        DueBanner(
            self._banner_frame, due,
            on_view=lambda: self._tabview.set("Schedule"),
        ).pack(fill="x", pady=2)

    def _show_alerts_dialog(self):
        user_id = self._get_current_user_id()
        if self._startup_alerts and user_id:
            AlertsDialog(
                self,
                self._startup_alerts,
                user_id,
                reminder_service=self._reminder_svc,
                dismissed_reminder_dao=self._dismissed_dao,
            )

    def _on_close(self):
        if self._db:
            if self._current_user:
                self._db.set_setting("last_user_id", str(self._current_user.id))
            self._db.close()
        self.destroy()
