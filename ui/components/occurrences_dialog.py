import customtkinter as ctk
from models.reminder import Reminder
from services.reminder_service import ReminderService
from utils.constants import DEFAULT_OCCURRENCES, MAX_OCCURRENCES
from utils.date_helpers import format_display_date, relative_day_label, today


class OccurrencesDialog(ctk.CTkToplevel):
    """Lists the next N due dates of one reminder."""

    def __init__(
        self,
        master,
        reminder_service: ReminderService,
        reminder: Reminder,
        user_id: int,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = reminder_service
        self._reminder = reminder
        self._user_id = user_id
        self._date_format = date_format

        self.title(f"Upcoming dates · {reminder.title}")
        self.geometry("380x440")
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        ctk.CTkLabel(
            self, text=reminder.title,
            font=ctk.CTkFont(size=16, weight="bold"), pady=10,
        ).grid(row=0, column=0, sticky="ew", padx=16)

        bar = ctk.CTkFrame(self, fg_color="transparent")
        bar.grid(row=1, column=0, sticky="ew", padx=16)
        ctk.CTkLabel(bar, text="Show next").pack(side="left")
        self._count_var = ctk.StringVar(value=str(DEFAULT_OCCURRENCES))
        ctk.CTkComboBox(
            bar, values=[str(n) for n in (5, 10, 20, 30, MAX_OCCURRENCES)],
            variable=self._count_var, width=70, command=lambda _v: self._load(),
        ).pack(side="left", padx=6)
        ctk.CTkLabel(bar, text="dates").pack(side="left")

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=12, pady=8)
        self._scroll.grid_columnconfigure(1, weight=1)

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(self, textvariable=self._error_var, text_color="#F44336").grid(
            row=3, column=0, padx=16, sticky="ew"
        )
        ctk.CTkButton(self, text="Close", command=self.destroy).grid(
            row=4, column=0, pady=(4, 16), padx=100, sticky="ew"
        )

        self._load()
        self.transient(master)
        self.grab_set()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        self._error_var.set("")
        try:
            count = int(self._count_var.get())
        except ValueError:
            self._error_var.set(f"Max occurrences must be between 1 and {MAX_OCCURRENCES}.")
            return
        try:
            dates = self._svc.get_occurrences(self._reminder.id, self._user_id, count)
        except ValueError as e:
            self._error_var.set(str(e))
            return

        if not dates:
            ctk.CTkLabel(
                self._scroll, text="No upcoming dates.", text_color="gray60",
            ).grid(row=0, column=0, columnspan=2, pady=30)
            return

        ref = today()
        for i, d in enumerate(dates):
            ctk.CTkLabel(
                self._scroll, text=format_display_date(d, self._date_format),
                width=110, anchor="w",
            ).grid(row=i, column=0, padx=6, pady=2, sticky="w")
            ctk.CTkLabel(
                self._scroll, text=f"{d.strftime('%a')} · {relative_day_label(d, ref)}",
                text_color="gray60", anchor="w",
            ).grid(row=i, column=1, padx=6, pady=2, sticky="w")
