import customtkinter as ctk
from models.reminder import Reminder
from services.reminder_service import ReminderService
from services.wallet_service import WalletService
from services import recurrence_engine as engine
from ui.components.date_picker import DatePickerWidget
from utils.constants import REMINDER_TYPES, RECURRENCE_KINDS, RECURRENCE_LABELS
from utils.date_helpers import today

_NO_WALLET = "(none)"
_PREVIEW_COUNT = 12


class ReminderForm(ctk.CTkToplevel):
    """Add or edit a payment/receivable reminder."""

    def __init__(
        self,
        master,
        reminder_service: ReminderService,
        wallet_service: WalletService,
        user_id: int,
        reminder: Reminder | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = reminder_service
        self._user_id = user_id
        self._reminder = reminder
        self._date_format = date_format
        self.saved = False

        self.title("Edit Reminder" if reminder else "New Reminder")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._wallets = wallet_service.get_accessible(user_id)
        wallet_names = [_NO_WALLET] + [w.name for w in self._wallets]

        r = 0

        self._add_label("Title:", r)
        self._title_var = ctk.StringVar(value=reminder.title if reminder else "")
        ctk.CTkEntry(self, textvariable=self._title_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Type:", r)
        self._type_var = ctk.StringVar(value=reminder.type if reminder else "Payment")
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in REMINDER_TYPES:
            ctk.CTkRadioButton(
                type_frame, text=t, variable=self._type_var, value=t,
            ).pack(side="left", padx=4)
        r += 1

        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{reminder.amount:.2f}" if reminder else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Wallet:", r)
        self._wallet_var = ctk.StringVar(
            value=(reminder.wallet_name or _NO_WALLET) if reminder else _NO_WALLET
        )
        ctk.CTkComboBox(
            self, values=wallet_names, variable=self._wallet_var,
            width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Due Date:", r)
        self._due_picker = DatePickerWidget(
            self,
            initial_date=reminder.due_date if reminder else today(),
            date_format=date_format,
            highlight_dates=self._preview_dates,
        )
        self._due_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("Repeats:", r)
        labels = [RECURRENCE_LABELS[k] for k in RECURRENCE_KINDS]
        initial_kind = reminder.recurrence_kind if reminder else "once"
        self._rec_var = ctk.StringVar(value=RECURRENCE_LABELS[initial_kind])
        ctk.CTkComboBox(
            self, values=labels, variable=self._rec_var,
            width=220, state="readonly", command=self._on_recurrence_change,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Interval row, shown for custom recurrence only
        self._interval_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._interval_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=2, sticky="ew")
        self._interval_var = ctk.StringVar(
            value=str(reminder.recurrence_interval or "") if reminder else ""
        )
        r += 1

        self._add_label("Ends On:", r)
        self._end_picker = DatePickerWidget(
            self,
            initial_date=reminder.duration_end if reminder else None,
            date_format=date_format,
            optional=True,
        )
        self._end_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if reminder:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self._refresh_interval_field()
        self.transient(master)
        self.grab_set()
        self._center()

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _selected_kind(self) -> str:
        label = self._rec_var.get()
        return next((k for k, v in RECURRENCE_LABELS.items() if v == label), "once")

    def _on_recurrence_change(self, value=None):
        self._refresh_interval_field()

    def _refresh_interval_field(self):
        for w in self._interval_frame.winfo_children():
            w.destroy()
        if self._selected_kind() != "custom":
            return
        ctk.CTkLabel(self._interval_frame, text="Every").grid(row=0, column=0, padx=(0, 8))
        ctk.CTkEntry(
            self._interval_frame, textvariable=self._interval_var, width=60,
        ).grid(row=0, column=1)
        ctk.CTkLabel(self._interval_frame, text="days").grid(row=0, column=2, padx=(8, 0))

    def _preview_dates(self):
        """Occurrences of the saved reminder, marked in the due-date calendar."""
        if not self._reminder:
            return []
        return engine.upcoming_occurrences(self._reminder, _PREVIEW_COUNT, today()).to_list()

    def _on_save(self):
        try:
            amount = float(self._amount_var.get())
        except ValueError:
            self._error_var.set("Amount must be a positive number.")
            return

        if not self._due_picker.is_valid():
            self._error_var.set("Invalid date format.")
            return
        if not self._end_picker.is_valid():
            self._error_var.set("Invalid duration end date format.")
            return

        kind = self._selected_kind()
        interval = None
        if kind == "custom":
            try:
                interval = int(self._interval_var.get())
            except ValueError:
                self._error_var.set(
                    "Recurrence interval must be a positive number for custom recurrence."
                )
                return

        wallet_name = self._wallet_var.get()
        wallet = next((w for w in self._wallets if w.name == wallet_name), None)

        fields = dict(
            title=self._title_var.get(),
            amount=amount,
            type_=self._type_var.get(),
            due_date=self._due_picker.get_date(),
            recurrence=kind,
            recurrence_interval=interval,
            duration_end=self._end_picker.get_date(),
            wallet_id=wallet.id if wallet else None,
        )
        try:
            if self._reminder:
                self._svc.update(
                    self._reminder.id, self._user_id,
                    is_active=self._reminder.is_active, **fields,
                )
            else:
                self._svc.create(self._user_id, **fields)
            self.saved = True
            self.destroy()
        except ValueError as e:
            self._error_var.set(str(e))

    def _on_delete(self):
        try:
            self._svc.delete(self._reminder.id, self._user_id)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
