from nftledger.nanocontracts.access import Unauthorized
from nftledger.nanocontracts.collection.errors import (
    NotApprovedOrOwner,
    NotTokenOwner,
    OnlyOneTokenPerAccount,
    StakingActive,
    TransferFromIncorrectOwner,
    TransfersDisabled,
)
from tests.nanocontracts.blueprints.unittest import CollectionTestCase


class StakingCollectionTransfersTestCase(CollectionTestCase):
    def setUp(self):
        super().setUp()
        self.admin("set_public_mint_active", True)
        self.public_mint(self.address1)  # token 0

    def test_transfers_disabled_by_default(self):
        with self.assertRaises(TransfersDisabled):
            self.call("transfer_from", self.address1, self.address1, self.address2, 0)
        self.assertEqual(self.view("owner_of", 0), self.address1)

    def test_transfers_enabled(self):
        self.admin("set_all_transfers_disabled", False)
        self.call("transfer_from", self.address1, self.address1, self.address2, 0)
        self.assertEqual(self.view("owner_of", 0), self.address2)
        self.assertEqual(self.view("balance_of", self.address1), 0)
        self.assertEqual(self.view("balance_of", self.address2), 1)

    def test_only_one_token_per_account(self):
        self.public_mint(self.address2)  # token 1
        self.admin("set_all_transfers_disabled", False)
        with self.assertRaises(OnlyOneTokenPerAccount):
            self.call("transfer_from", self.address1, self.address1, self.address2, 0)
        self.assertEqual(self.view("owner_of", 0), self.address1)

    def test_transfer_requires_approval(self):
        self.admin("set_all_transfers_disabled", False)
        with self.assertRaises(NotApprovedOrOwner):
            self.call("transfer_from", self.address2, self.address1, self.address2, 0)

        self.call("approve", self.address1, self.address2, 0)
        self.call("transfer_from", self.address2, self.address1, self.address3, 0)
        self.assertEqual(self.view("owner_of", 0), self.address3)

    def test_transfer_from_wrong_owner(self):
        self.admin("set_all_transfers_disabled", False)
        with self.assertRaises(TransferFromIncorrectOwner):
            self.call("transfer_from", self.address1, self.address2, self.address3, 0)

    def test_owner_reclaims_token(self):
        # transfers stay disabled; the custodial account defaults to the owner
        self.admin("reclaim", 0)
        self.assertEqual(self.view("owner_of", 0), self.view("custodial_account"))
        self.assertEqual(self.view("owner_of", 0), self.owner)

    def test_reclaim_ignores_one_token_cap(self):
        self.admin("set_allowlist_mint_active", True)
        self.allowlist_mint(self.address2)  # token 1
        self.admin("reclaim", 0)
        self.admin("reclaim", 1)
        self.assertEqual(self.view("balance_of", self.owner), 2)

    def test_reclaim_after_custodial_change(self):
        self.admin("set_custodial_account", self.address2)
        self.admin("reclaim", 0)
        self.assertEqual(self.view("owner_of", 0), self.address2)

    def test_reclaim_only_owner(self):
        with self.assertRaises(Unauthorized):
            self.call("reclaim", self.address2, 0)
        with self.assertRaises(Unauthorized):
            self.call("set_custodial_account", self.address2, self.address2)

    def test_reclaim_staked_token(self):
        self.admin("set_staking_open", True)
        self.call("toggle_staking", self.address1, 0)
        with self.assertRaises(StakingActive):
            self.admin("reclaim", 0)

    def test_exempt_transfer_bypasses_staking_only(self):
        self.admin("set_staking_open", True)
        self.call("toggle_staking", self.address1, 0)

        with self.assertRaises(TransfersDisabled):
            self.call("authorized_staking_exempt_transfer", self.address1, self.address1, self.address2, 0)
        self.assertEqual(self.contract.transfer_policy.outstanding, {})

        self.admin("set_all_transfers_disabled", False)
        self.public_mint(self.address2)  # token 1
        with self.assertRaises(OnlyOneTokenPerAccount):
            self.call("authorized_staking_exempt_transfer", self.address1, self.address1, self.address2, 0)

        self.call("authorized_staking_exempt_transfer", self.address1, self.address1, self.address3, 0)
        self.assertEqual(self.view("owner_of", 0), self.address3)
        self.assertEqual(self.contract.transfer_policy.outstanding, {})

        # the exemption was spent: the next plain transfer is blocked again
        with self.assertRaises(StakingActive):
            self.call("transfer_from", self.address3, self.address3, self.address1, 0)

    def test_exempt_transfer_only_token_owner(self):
        self.admin("set_all_transfers_disabled", False)
        self.call("approve", self.address1, self.address2, 0)
        with self.assertRaises(NotTokenOwner):
            self.call("authorized_staking_exempt_transfer", self.address2, self.address1, self.address3, 0)
