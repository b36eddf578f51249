import customtkinter as ctk
from services.reminder_service import ReminderAlert, ReminderService
from database.dismissed_reminder_dao import DismissedReminderDAO
from utils.constants import SEVERITY_ICONS, SEVERITY_COLORS


class AlertsDialog(ctk.CTkToplevel):
    """Modal startup dialog listing reminder alerts with per-row dismiss buttons."""

    def __init__(
        self,
        master,
        alerts: list[ReminderAlert],
        user_id: int,
        reminder_service: ReminderService,
        dismissed_reminder_dao: DismissedReminderDAO | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = reminder_service
        self._dismissed_dao = dismissed_reminder_dao
        self._user_id = user_id
        self._alerts = list(alerts)

        self.title("Reminders")
        self.geometry("560x420")
        self.resizable(False, True)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(
            self, text="Bills and payments needing attention",
            font=ctk.CTkFont(size=16, weight="bold"), pady=12,
        ).grid(row=0, column=0, sticky="ew", padx=16)

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

        for i, alert in enumerate(self._alerts):
            self._add_row(alert, i)

        ctk.CTkButton(
            self, text="OK, Dismiss All", command=self._dismiss_all,
        ).grid(row=2, column=0, pady=(0, 16), padx=60, sticky="ew")

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_row(self, alert: ReminderAlert, index: int):
        color = SEVERITY_COLORS.get(alert.severity, "#888888")
        icon = SEVERITY_ICONS.get(alert.severity, "·")

        row_frame = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=6)
        row_frame.grid(row=index, column=0, sticky="ew", pady=3, padx=2)
        row_frame.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row_frame, text=icon, text_color=color,
            font=ctk.CTkFont(size=18), width=30,
        ).grid(row=0, column=0, rowspan=2, padx=(8, 4), pady=6)
        ctk.CTkLabel(
            row_frame, text=alert.title,
            font=ctk.CTkFont(size=13, weight="bold"),
            text_color=color, anchor="w",
        ).grid(row=0, column=1, sticky="ew", padx=(0, 4), pady=(6, 0))
        ctk.CTkLabel(
            row_frame, text=alert.detail,
            font=ctk.CTkFont(size=11), text_color=("gray40", "gray70"),
            anchor="w", wraplength=380,
        ).grid(row=1, column=1, sticky="ew", padx=(0, 4), pady=(0, 6))

        if alert.key and self._dismissed_dao:
            ctk.CTkButton(
                row_frame, text="✕", width=28, height=28,
                fg_color="transparent",
                text_color=("gray10", "gray90"),
                hover_color=("gray80", "gray30"),
                command=lambda a=alert, f=row_frame: self._dismiss_one(a, f),
            ).grid(row=0, column=2, rowspan=2, padx=(4, 8), pady=6)

    def _persist(self, alert: ReminderAlert):
        if alert.key and self._dismissed_dao:
            expiry = self._svc.compute_expiry(alert)
            self._dismissed_dao.dismiss(self._user_id, alert.key, expiry)

    def _dismiss_one(self, alert: ReminderAlert, row_frame: ctk.CTkFrame):
        self._persist(alert)
        if alert in self._alerts:
            self._alerts.remove(alert)
        row_frame.destroy()

    def _dismiss_all(self):
        for alert in self._alerts:
            self._persist(alert)
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
