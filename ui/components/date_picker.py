import customtkinter as ctk
from tkcalendar import Calendar
import tkinter as tk
from tkinter import ttk
from datetime import date
from utils.date_helpers import format_date, format_display_date, parse_display_date, today

_HIGHLIGHT_TAG = "occurrence"


class DatePickerWidget(ctk.CTkFrame):
    """Date entry (in display format) + calendar popup button.

    .get_date() returns a date or None; .get() returns the YYYY-MM-DD string.
    `highlight_dates` (a list or a zero-arg callable returning one) is marked
    in the popup, e.g. a reminder's upcoming occurrences.
    """

    def __init__(
        self,
        master,
        initial_date: date | None = None,
        date_format: str = "MM/DD/YYYY",
        optional: bool = False,
        highlight_dates=None,
        on_change=None,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._date_format = date_format
        self._optional = optional
        self._highlight_dates = highlight_dates
        self._on_change = on_change
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(value=format_display_date(initial_date, date_format))

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        ctk.CTkButton(self, text="📅", width=32, command=self._toggle_popup).grid(
            row=0, column=1, padx=(4, 0)
        )
        if optional:
            ctk.CTkButton(
                self, text="✕", width=28,
                fg_color="transparent", text_color=("gray10", "gray90"),
                command=lambda: self.set(None),
            ).grid(row=0, column=2, padx=(2, 0))

    # ── Value access ─────────────────────────────────────────────────────────

    def get_date(self) -> date | None:
        return parse_display_date(self._var.get().strip(), self._date_format)

    def get(self) -> str:
        """Return date as YYYY-MM-DD for storage, or '' if empty/invalid."""
        return format_date(self.get_date()) or ""

    def set(self, value: date | None):
        self._var.set(format_display_date(value, self._date_format))
        self._reset_border()
        if self._on_change:
            self._on_change(value)

    def is_empty(self) -> bool:
        return not self._var.get().strip()

    def is_valid(self) -> bool:
        if self.is_empty():
            return self._optional
        return self.get_date() is not None

    # ── Entry handling ───────────────────────────────────────────────────────

    def _on_focus_out(self, _event=None):
        if self.is_empty():
            self._reset_border()
            return
        d = self.get_date()
        if d:
            self.set(d)
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    # ── Popup ────────────────────────────────────────────────────────────────

    def _toggle_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._close_popup()
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        dark = ctk.get_appearance_mode() == "Dark"
        bg, fg = ("#2b2b2b", "#ffffff") if dark else ("#ffffff", "#000000")
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure("Calendar.Treeview", background=bg, foreground=fg, fieldbackground=bg)

        current = self.get_date() or today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern="yyyy-mm-dd",
            background=bg,
            foreground=fg,
            headersbackground=bg,
            headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg,
            weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        for d in self._resolve_highlights():
            cal.calevent_create(d, "Due", tags=[_HIGHLIGHT_TAG])
        cal.tag_config(_HIGHLIGHT_TAG, background="#FF9800", foreground="white")
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")
        popup.bind("<FocusOut>", lambda e: self._maybe_close())

    def _resolve_highlights(self) -> list[date]:
        source = self._highlight_dates
        if callable(source):
            source = source()
        return list(source or [])

    def _on_date_selected(self, cal):
        # cal always returns yyyy-mm-dd
        self.set(parse_display_date(cal.get_date(), "YYYY-MM-DD"))
        self._close_popup()

    def _close_popup(self):
        if self._popup is not None:
            self._popup.destroy()
            self._popup = None

    def _maybe_close(self):
        popup = self._popup
        if popup is None or not popup.winfo_exists():
            return
        try:
            focused = popup.focus_get()
        except KeyError:
            # tk raises for focus on internal widgets it cannot name
            focused = None
        if focused is None or not str(focused).startswith(str(popup)):
            self._close_popup()
