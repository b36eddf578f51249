from datetime import timedelta
import customtkinter as ctk
from services.reminder_service import ReminderService
from services.wallet_service import WalletService
from ui.components.reminder_form import ReminderForm
from ui.components.occurrences_dialog import OccurrencesDialog
from utils.constants import REMINDER_TYPES, RECURRENCE_LABELS, TYPE_COLORS
from utils.currency import format_reminder_amount
from utils.date_helpers import today, format_display_date

_ALL = "All"


class RemindersTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        reminder_service: ReminderService,
        wallet_service: WalletService,
        get_user_id,      # callable → int | None
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = reminder_service
        self._wallet_svc = wallet_service
        self._get_user_id = get_user_id
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Reminders", font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Reminder", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )
        self._type_filter = ctk.StringVar(value=_ALL)
        ctk.CTkSegmentedButton(
            bar, values=[_ALL] + REMINDER_TYPES,
            variable=self._type_filter, command=lambda _v: self._load(),
        ).pack(side="right", padx=8)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _reminders(self, user_id: int):
        type_ = self._type_filter.get()
        reminders = self._svc.get_user_reminders(user_id)
        if type_ != _ALL:
            reminders = [r for r in reminders if r.type == type_]
        return reminders

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        user_id = self._get_user_id()
        reminders = self._reminders(user_id) if user_id else []
        if not reminders:
            ctk.CTkLabel(
                self._scroll,
                text="No reminders yet. Click '+ Add Reminder' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate([
            ("Title", 170), ("Type", 80), ("Amount", 100), ("Wallet", 110),
            ("Repeats", 100), ("Due Date", 95), ("Next Due", 95), ("Status", 70),
            ("Actions", 150),
        ]):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w", font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        ref = today()
        for idx, reminder in enumerate(reminders):
            self._add_row(idx + 1, reminder, user_id, ref)

    def _add_row(self, idx, reminder, user_id, ref):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        # Next due on/after today, so a reminder due today reads "today"
        next_due = self._svc.next_due_date(reminder, after=ref - timedelta(days=1))
        repeats = RECURRENCE_LABELS[reminder.recurrence_kind]
        if reminder.recurrence_interval:
            repeats = f"Every {reminder.recurrence_interval} days"

        data = [
            (reminder.title, 170, None),
            (reminder.type, 80, TYPE_COLORS.get(reminder.type)),
            (format_reminder_amount(reminder.amount, reminder.type, self._symbol), 100,
             TYPE_COLORS.get(reminder.type)),
            (reminder.wallet_name or "—", 110, None),
            (repeats, 100, None),
            (format_display_date(reminder.due_date, self._date_format), 95, None),
            (format_display_date(next_due, self._date_format) if next_due else "—", 95, None),
        ]
        for i, (text, width, color) in enumerate(data):
            label = ctk.CTkLabel(row, text=text, width=width, anchor="w")
            if color:
                label.configure(text_color=color)
            label.grid(row=0, column=i, padx=4, pady=4)

        ctk.CTkLabel(
            row, text="Active" if reminder.is_active else "Paused", width=70, anchor="w",
            text_color="#4CAF50" if reminder.is_active else "gray60",
        ).grid(row=0, column=7, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=8, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda r=reminder: self._open_edit(r),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Pause" if reminder.is_active else "Resume", width=52, height=24,
            fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
            command=lambda r=reminder: self._toggle_active(r, user_id),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Dates", width=46, height=24,
            fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
            command=lambda r=reminder: self._open_dates(r, user_id),
        ).pack(side="left", padx=2)

    def _open_add(self):
        user_id = self._get_user_id()
        if not user_id:
            return
        form = ReminderForm(
            self.winfo_toplevel(), self._svc, self._wallet_svc, user_id,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("reminder")

    def _open_edit(self, reminder):
        form = ReminderForm(
            self.winfo_toplevel(), self._svc, self._wallet_svc, self._get_user_id(),
            reminder=reminder, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("reminder")

    def _open_dates(self, reminder, user_id):
        OccurrencesDialog(
            self.winfo_toplevel(), self._svc, reminder, user_id,
            date_format=self._date_format,
        )

    def _toggle_active(self, reminder, user_id):
        self._svc.set_active(reminder.id, user_id, not reminder.is_active)
        self._notify_refresh("reminder")
