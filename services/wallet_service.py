import logging
from models.wallet import Wallet, WalletMember
from database.wallet_dao import WalletDAO
from database.user_dao import UserDAO

logger = logging.getLogger(__name__)


class WalletNotFoundError(ValueError):
    """Wallet does not exist or the acting user may not see it."""


class WalletService:
    def __init__(self, wallet_dao: WalletDAO, user_dao: UserDAO):
        self._dao = wallet_dao
        self._user_dao = user_dao

    def get_accessible(self, user_id: int) -> list[Wallet]:
        return self._dao.get_accessible(user_id)

    def get_by_id(self, wallet_id: int, user_id: int) -> Wallet | None:
        if not self.has_access(user_id, wallet_id):
            return None
        return self._dao.get_by_id(wallet_id)

    def get_members(self, wallet_id: int, user_id: int) -> list[WalletMember]:
        self._require_access(wallet_id, user_id)
        return self._dao.get_members(wallet_id)

    def create(self, owner_id: int, name: str, is_family: bool = False) -> Wallet:
        name = name.strip()
        if not name:
            raise ValueError("Wallet name cannot be empty.")
        if self._user_dao.get_by_id(owner_id) is None:
            raise ValueError("Unknown user.")
        if self._dao.get_by_owner_and_name(owner_id, name):
            raise ValueError(f"A wallet named '{name}' already exists.")
        wallet = self._dao.create(owner_id, name, is_family)
        logger.info("Created wallet %s (%r, family=%s) for user %s",
                    wallet.id, name, is_family, owner_id)
        return wallet

    def delete(self, wallet_id: int, acting_user_id: int):
        wallet = self._require_owner(wallet_id, acting_user_id)
        self._dao.delete(wallet.id)
        logger.info("Deleted wallet %s", wallet.id)

    def add_member(self, wallet_id: int, acting_user_id: int, user_id: int):
        wallet = self._require_owner(wallet_id, acting_user_id)
        if not wallet.is_family:
            raise ValueError("Members can only be added to family wallets.")
        if self._user_dao.get_by_id(user_id) is None:
            raise ValueError("Unknown user.")
        if self._dao.find_membership(wallet_id, user_id):
            raise ValueError("User is already a member of this wallet.")
        self._dao.add_member(wallet_id, user_id)
        logger.info("Added user %s to wallet %s", user_id, wallet_id)

    def remove_member(self, wallet_id: int, acting_user_id: int, user_id: int):
        wallet = self._require_owner(wallet_id, acting_user_id)
        if user_id == wallet.owner_id:
            raise ValueError("The wallet owner cannot be removed.")
        self._dao.remove_member(wallet_id, user_id)
        logger.info("Removed user %s from wallet %s", user_id, wallet_id)

    def has_access(self, user_id: int, wallet_id: int) -> bool:
        wallet = self._dao.get_by_id(wallet_id)
        if wallet is None:
            return False
        if wallet.owner_id == user_id:
            return True
        if wallet.is_family:
            return self._dao.find_membership(wallet_id, user_id) is not None
        return False

    def family_wallet_ids(self, user_id: int) -> list[int]:
        return self._dao.get_member_wallet_ids(user_id, family_only=True)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _require_access(self, wallet_id: int, user_id: int) -> Wallet:
        wallet = self.get_by_id(wallet_id, user_id)
        if wallet is None:
            logger.warning("User %s denied access to wallet %s", user_id, wallet_id)
            raise WalletNotFoundError("Wallet not found.")
        return wallet

    def _require_owner(self, wallet_id: int, user_id: int) -> Wallet:
        wallet = self._require_access(wallet_id, user_id)
        if wallet.owner_id != user_id:
            raise ValueError("Only the wallet owner can do that.")
        return wallet
