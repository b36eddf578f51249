import customtkinter as ctk
from services.reminder_service import ReminderService
from ui.components.date_picker import DatePickerWidget
from utils.constants import DEFAULT_SCHEDULE_DAYS, TYPE_COLORS
from utils.currency import format_reminder_amount
from utils.date_helpers import today, format_display_date, relative_day_label

_DAY_CHOICES = ["7", "14", "30", "60", "90", "180", "365"]


class ScheduleTab(ctk.CTkFrame):
    """Left: what falls due over the next N days. Right: what is due on a picked date."""

    def __init__(
        self,
        master,
        reminder_service: ReminderService,
        get_user_id,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = reminder_service
        self._get_user_id = get_user_id
        self._date_format = date_format
        self._symbol = currency_symbol

        self.grid_columnconfigure((0, 1), weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_controls()
        self._schedule_frame = ctk.CTkScrollableFrame(self, label_text="Coming Up")
        self._schedule_frame.grid(row=1, column=0, sticky="nsew", padx=(8, 4), pady=8)
        self._schedule_frame.grid_columnconfigure(1, weight=1)
        self._due_frame = ctk.CTkScrollableFrame(self, label_text="Due On Date")
        self._due_frame.grid(row=1, column=1, sticky="nsew", padx=(4, 8), pady=8)
        self._due_frame.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_controls(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(bar, text="Days ahead:").pack(side="left", padx=(12, 4), pady=8)
        self._days_var = ctk.StringVar(value=str(DEFAULT_SCHEDULE_DAYS))
        ctk.CTkComboBox(
            bar, values=_DAY_CHOICES, variable=self._days_var, width=80,
            state="readonly", command=lambda _v: self._load_schedule(),
        ).pack(side="left", padx=4)

        self._date_picker = DatePickerWidget(
            bar, initial_date=today(), date_format=self._date_format,
            on_change=lambda _d: self._load_due(),
        )
        self._date_picker.pack(side="right", padx=8, pady=6)
        ctk.CTkLabel(bar, text="Check date:").pack(side="right", padx=(12, 4))

    def _load(self):
        self._load_schedule()
        self._load_due()

    def _load_schedule(self):
        for w in self._schedule_frame.winfo_children():
            w.destroy()
        user_id = self._get_user_id()
        if not user_id:
            return
        ref = today()
        entries = self._svc.get_schedule(user_id, int(self._days_var.get()), ref)
        if not entries:
            ctk.CTkLabel(
                self._schedule_frame, text="Nothing due in this period.", text_color="gray60",
            ).grid(row=0, column=0, columnspan=3, pady=20)
            return

        row = 0
        for entry in entries:
            r = entry.reminder
            ctk.CTkLabel(
                self._schedule_frame, text=r.title, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=row, column=0, columnspan=2, padx=6, pady=(6, 0), sticky="w")
            ctk.CTkLabel(
                self._schedule_frame,
                text=format_reminder_amount(r.amount, r.type, self._symbol),
                text_color=TYPE_COLORS.get(r.type), anchor="e",
            ).grid(row=row, column=2, padx=6, pady=(6, 0), sticky="e")
            row += 1
            for d in entry.occurrences:
                ctk.CTkLabel(
                    self._schedule_frame, text=format_display_date(d, self._date_format),
                    width=100, anchor="w",
                ).grid(row=row, column=0, padx=(18, 4), sticky="w")
                ctk.CTkLabel(
                    self._schedule_frame, text=relative_day_label(d, ref),
                    text_color="gray60", anchor="w",
                ).grid(row=row, column=1, padx=4, sticky="w")
                row += 1

    def _load_due(self):
        for w in self._due_frame.winfo_children():
            w.destroy()
        user_id = self._get_user_id()
        check = self._date_picker.get_date()
        if not user_id or check is None:
            return
        due = self._svc.get_due(user_id, check)
        if not due:
            ctk.CTkLabel(
                self._due_frame, text="Nothing due on this date.", text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return
        for i, r in enumerate(due):
            f = ctk.CTkFrame(self._due_frame, fg_color=("gray90", "gray20"), corner_radius=4)
            f.grid(row=i, column=0, sticky="ew", pady=1)
            f.grid_columnconfigure(0, weight=1)
            ctk.CTkLabel(f, text=r.title, anchor="w").grid(row=0, column=0, padx=6, pady=3, sticky="w")
            ctk.CTkLabel(
                f, text=format_reminder_amount(r.amount, r.type, self._symbol),
                text_color=TYPE_COLORS.get(r.type), anchor="e", width=100,
            ).grid(row=0, column=1, padx=6)
