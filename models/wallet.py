from dataclasses import dataclass


@dataclass
class Wallet:
    id: int
    name: str
    owner_id: int
    is_family: bool = False
    created_at: str = ""
    owner_name: str = ""


@dataclass
class WalletMember:
    wallet_id: int
    user_id: int
    role: str               # 'owner' | 'member'
    joined_at: str = ""
    user_name: str = ""
