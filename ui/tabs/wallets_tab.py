import customtkinter as ctk
from database.user_dao import UserDAO
from services.wallet_service import WalletService


class WalletsTab(ctk.CTkFrame):
    """Create wallets and manage who shares a family wallet."""

    def __init__(
        self,
        master,
        wallet_service: WalletService,
        user_dao: UserDAO,
        get_user_id,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = wallet_service
        self._user_dao = user_dao
        self._get_user_id = get_user_id
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_create_bar()
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(self, textvariable=self._error_var, text_color="#F44336", anchor="w").grid(
            row=1, column=0, sticky="ew", padx=16
        )
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_create_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(bar, text="New wallet:").pack(side="left", padx=(12, 4), pady=8)
        self._name_var = ctk.StringVar()
        ctk.CTkEntry(bar, textvariable=self._name_var, width=200).pack(side="left", padx=4)
        self._family_var = ctk.BooleanVar(value=False)
        ctk.CTkCheckBox(bar, text="Family (shared)", variable=self._family_var).pack(
            side="left", padx=8
        )
        ctk.CTkButton(bar, text="Create", width=80, command=self._on_create).pack(
            side="left", padx=4
        )

    def _on_create(self):
        user_id = self._get_user_id()
        if not user_id:
            return
        try:
            self._svc.create(user_id, self._name_var.get(), self._family_var.get())
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self._error_var.set("")
        self._name_var.set("")
        self._notify_refresh("wallet")

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        user_id = self._get_user_id()
        wallets = self._svc.get_accessible(user_id) if user_id else []
        if not wallets:
            ctk.CTkLabel(
                self._scroll, text="No wallets yet.", text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return
        for idx, wallet in enumerate(wallets):
            self._add_wallet_card(idx, wallet, user_id)

    def _add_wallet_card(self, idx, wallet, user_id):
        card = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        card.grid(row=idx, column=0, sticky="ew", pady=4, padx=2)
        card.grid_columnconfigure(0, weight=1)

        kind = "Family wallet" if wallet.is_family else "Personal wallet"
        ctk.CTkLabel(
            card, text=f"{wallet.name}  ·  {kind}  ·  owner: {wallet.owner_name}",
            font=ctk.CTkFont(weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="ew", padx=10, pady=(8, 2))

        is_owner = wallet.owner_id == user_id
        members = self._svc.get_members(wallet.id, user_id)
        for i, m in enumerate(members, start=1):
            line = ctk.CTkFrame(card, fg_color="transparent")
            line.grid(row=i, column=0, sticky="ew", padx=20)
            ctk.CTkLabel(line, text=f"{m.user_name} ({m.role})", anchor="w").pack(side="left")
            if is_owner and m.role != "owner":
                ctk.CTkButton(
                    line, text="Remove", width=60, height=22,
                    fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
                    command=lambda w=wallet, u=m.user_id: self._remove_member(w.id, u),
                ).pack(side="right")

        if is_owner and wallet.is_family:
            self._add_member_row(card, len(members) + 1, wallet, members)

    def _add_member_row(self, card, row, wallet, members):
        member_ids = {m.user_id for m in members}
        candidates = [u.name for u in self._user_dao.get_all() if u.id not in member_ids]
        if not candidates:
            return
        line = ctk.CTkFrame(card, fg_color="transparent")
        line.grid(row=row, column=0, sticky="ew", padx=20, pady=(4, 8))
        choice = ctk.StringVar(value=candidates[0])
        ctk.CTkComboBox(line, values=candidates, variable=choice, width=160, state="readonly").pack(
            side="left"
        )
        ctk.CTkButton(
            line, text="Add member", width=100,
            command=lambda: self._add_member(wallet.id, choice.get()),
        ).pack(side="left", padx=6)

    def _add_member(self, wallet_id: int, user_name: str):
        user = self._user_dao.get_by_name(user_name)
        if user is None:
            return
        try:
            self._svc.add_member(wallet_id, self._get_user_id(), user.id)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self._error_var.set("")
        self._notify_refresh("wallet")

    def _remove_member(self, wallet_id: int, user_id: int):
        try:
            self._svc.remove_member(wallet_id, self._get_user_id(), user_id)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self._notify_refresh("wallet")
