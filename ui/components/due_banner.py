import customtkinter as ctk
from models.reminder import Reminder
from utils.constants import SEVERITY_COLORS


class DueBanner(ctk.CTkFrame):
    """Dismissible strip announcing how many reminders fall due today."""

    def __init__(self, master, due: list[Reminder], on_view=None, **kwargs):
        super().__init__(master, fg_color=SEVERITY_COLORS["warning"], corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        count = len(due)
        names = ", ".join(r.title for r in due[:3])
        if count > 3:
            names += f" and {count - 3} more"
        message = f"{count} reminder{'s' if count != 1 else ''} due today: {names}"

        ctk.CTkLabel(
            self, text=message, text_color="white", anchor="w", padx=10, pady=6,
        ).grid(row=0, column=0, sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=0, column=1, padx=(0, 4))
        if on_view:
            ctk.CTkButton(
                btn_frame, text="View", width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=on_view,
            ).pack(side="left", padx=2)
        ctk.CTkButton(
            btn_frame, text="✕", width=28, height=24,
            fg_color="transparent", text_color="white",
            command=self.destroy,
        ).pack(side="left")
