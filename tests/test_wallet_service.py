import pytest

from services.wallet_service import WalletNotFoundError


def test_create_adds_owner_membership(wallet_service, me):
    wallet = wallet_service.create(me.id, "  Household  ", is_family=True)
    assert wallet.name == "Household"
    assert wallet.owner_name == "Me"
    members = wallet_service.get_members(wallet.id, me.id)
    assert [(m.user_name, m.role) for m in members] == [("Me", "owner")]


@pytest.mark.parametrize("name, message", [
    ("", "Wallet name cannot be empty."),
    ("   ", "Wallet name cannot be empty."),
])
def test_create_rejects_empty_name(wallet_service, me, name, message):
    with pytest.raises(ValueError, match=message):
        wallet_service.create(me.id, name)


def test_create_rejects_duplicate(wallet_service, me):
    wallet_service.create(me.id, "Cash")
    with pytest.raises(ValueError, match="already exists"):
        wallet_service.create(me.id, "Cash")


def test_create_rejects_unknown_user(wallet_service):
    with pytest.raises(ValueError, match="Unknown user."):
        wallet_service.create(999, "Cash")


def test_family_member_gains_access(wallet_service, me, other):
    wallet = wallet_service.create(me.id, "Household", is_family=True)
    assert not wallet_service.has_access(other.id, wallet.id)

    wallet_service.add_member(wallet.id, me.id, other.id)
    assert wallet_service.has_access(other.id, wallet.id)
    assert [w.name for w in wallet_service.get_accessible(other.id)] == ["Household"]
    assert wallet_service.family_wallet_ids(other.id) == [wallet.id]


def test_add_member_rules(wallet_service, me, other):
    personal = wallet_service.create(me.id, "Pocket")
    with pytest.raises(ValueError, match="family wallets"):
        wallet_service.add_member(personal.id, me.id, other.id)

    family = wallet_service.create(me.id, "Household", is_family=True)
    wallet_service.add_member(family.id, me.id, other.id)
    with pytest.raises(ValueError, match="already a member"):
        wallet_service.add_member(family.id, me.id, other.id)
    with pytest.raises(ValueError, match="Unknown user."):
        wallet_service.add_member(family.id, me.id, 999)


def test_only_owner_manages_members(wallet_service, user_dao, me, other):
    third = user_dao.create("Sam")
    family = wallet_service.create(me.id, "Household", is_family=True)
    wallet_service.add_member(family.id, me.id, other.id)
    with pytest.raises(ValueError, match="Only the wallet owner"):
        wallet_service.add_member(family.id, other.id, third.id)


def test_stranger_gets_not_found(wallet_service, me, other):
    wallet = wallet_service.create(me.id, "Household", is_family=True)
    assert wallet_service.get_by_id(wallet.id, other.id) is None
    with pytest.raises(WalletNotFoundError, match="Wallet not found."):
        wallet_service.get_members(wallet.id, other.id)


def test_remove_member(wallet_service, me, other):
    wallet = wallet_service.create(me.id, "Household", is_family=True)
    wallet_service.add_member(wallet.id, me.id, other.id)
    wallet_service.remove_member(wallet.id, me.id, other.id)
    assert not wallet_service.has_access(other.id, wallet.id)

    with pytest.raises(ValueError, match="owner cannot be removed"):
        wallet_service.remove_member(wallet.id, me.id, me.id)


def test_delete_wallet(wallet_service, me, other):
    wallet = wallet_service.create(me.id, "Household", is_family=True)
    wallet_service.add_member(wallet.id, me.id, other.id)
    with pytest.raises(ValueError, match="Only the wallet owner"):
        wallet_service.delete(wallet.id, other.id)
    wallet_service.delete(wallet.id, me.id)
    assert wallet_service.get_accessible(me.id) == []
