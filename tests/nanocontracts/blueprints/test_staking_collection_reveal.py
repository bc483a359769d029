import unittest

from nftledger.nanocontracts.access import Unauthorized
from nftledger.nanocontracts.collection.errors import AlreadyShuffled, NonexistentToken, RevealNotActive
from nftledger.nanocontracts.collection.reveal import derange
from nftledger.nanocontracts.exception import NCFail
from tests.nanocontracts.blueprints.unittest import CollectionTestCase

SEED = 7854166079704491


class StakingCollectionRevealTestCase(CollectionTestCase):
    def setUp(self):
        super().setUp()
        self.admin("set_public_mint_active", True)
        self.public_mint(self.address1)  # token 0

    def test_unrevealed_uri(self):
        self.assertEqual(self.view("token_uri", 0), "ipfs://unrevealedURI")

    def test_uri_of_nonexistent_token(self):
        with self.assertRaises(NonexistentToken):
            self.view("token_uri", 1)
        with self.assertRaises(NonexistentToken):
            self.view("token_uri", 10_000)

    def test_revealed_uri(self):
        self.admin("set_is_revealed", True)
        self.assertEqual(self.view("token_uri", 0), "revealedURI.ipfs/0.json")

        self.admin("set_base_uri", "ipfs://final/")
        self.assertEqual(self.view("token_uri", 0), "ipfs://final/0.json")

    def test_unrevealed_uri_can_change(self):
        self.admin("set_unrevealed_uri", "ipfs://placeholder")
        self.assertEqual(self.view("token_uri", 0), "ipfs://placeholder")
        with self.assertRaises(Unauthorized):
            self.call("set_unrevealed_uri", self.address1, "ipfs://other")
        with self.assertRaises(Unauthorized):
            self.call("set_base_uri", self.address1, "ipfs://other/")

    def test_shuffle(self):
        self.public_mint(self.address2)  # token 1
        self.public_mint(self.address3)  # token 2
        self.admin("set_is_revealed", True)
        self.assertEqual([self.view("token_uri", i) for i in range(3)], [f"revealedURI.ipfs/{i}.json" for i in range(3)])

        self.admin("shuffler", SEED)

        order = self.view("get_random_numbers_array")
        self.assertEqual(order, derange([0, 1, 2], SEED))
        self.assertEqual(sorted(order), [0, 1, 2])
        for token_id in range(3):
            self.assertNotEqual(order[token_id], token_id)
            self.assertEqual(self.view("token_uri", token_id), f"revealedURI.ipfs/{order[token_id]}.json")

    def test_shuffle_requires_reveal(self):
        with self.assertRaises(RevealNotActive):
            self.admin("shuffler", SEED)
        self.assertEqual(self.view("get_random_numbers_array"), [])

    def test_shuffle_only_once(self):
        self.public_mint(self.address2)
        self.admin("set_is_revealed", True)
        self.admin("shuffler", SEED)
        order = self.view("get_random_numbers_array")

        with self.assertRaises(AlreadyShuffled):
            self.admin("shuffler", SEED + 1)
        self.assertEqual(self.view("get_random_numbers_array"), order)

    def test_shuffle_only_owner(self):
        self.admin("set_is_revealed", True)
        with self.assertRaises(Unauthorized):
            self.call("shuffler", self.address1, SEED)
        with self.assertRaises(Unauthorized):
            self.call("set_is_revealed", self.address1, False)

    def test_shuffle_seed_out_of_range(self):
        self.admin("set_is_revealed", True)
        with self.assertRaises(NCFail):
            self.admin("shuffler", -1)
        with self.assertRaises(NCFail):
            self.admin("shuffler", 2**256)
        # a rejected seed does not use up the shuffle
        self.admin("shuffler", SEED)

    def test_single_token_shuffle_changes_uri(self):
        self.admin("set_is_revealed", True)
        before = self.view("token_uri", 0)

        self.admin("shuffler", SEED)

        self.assertEqual(self.view("get_random_numbers_array"), [1, 0])
        self.assertNotEqual(self.view("token_uri", 0), before)
        self.assertEqual(self.view("token_uri", 0), "revealedURI.ipfs/1.json")

        # the next token takes the slot the first one left
        self.public_mint(self.address2)  # token 1
        self.assertEqual(self.view("token_uri", 1), "revealedURI.ipfs/0.json")

    def test_token_minted_after_shuffle(self):
        self.public_mint(self.address2)  # token 1
        self.admin("set_is_revealed", True)
        self.admin("shuffler", SEED)

        self.public_mint(self.address3)  # token 2
        self.assertEqual(self.view("token_uri", 2), "revealedURI.ipfs/2.json")

    def test_hide_again(self):
        self.admin("set_is_revealed", True)
        self.admin("set_is_revealed", False)
        self.assertEqual(self.view("token_uri", 0), "ipfs://unrevealedURI")


class SingleTokenCollectionRevealTestCase(CollectionTestCase):
    max_total_tokens = 1

    def build_settings(self, **overrides):
        return super().build_settings(PUBLIC_MAX_PER_TX=1, **overrides)

    def test_shuffle_cannot_point_past_the_supply(self):
        self.call("internal_mint", self.owner, 1)
        self.admin("set_is_revealed", True)
        self.admin("shuffler", SEED)
        self.assertEqual(self.view("get_random_numbers_array"), [0])
        self.assertEqual(self.view("token_uri", 0), "revealedURI.ipfs/0.json")


class DerangeTestCase(unittest.TestCase):
    def test_no_fixed_points(self):
        for size in (2, 3, 10, 57):
            for seed in (0, 1, SEED, 2**256 - 1):
                order = derange(list(range(size)), seed)
                self.assertEqual(sorted(order), list(range(size)))
                self.assertTrue(all(order[i] != i for i in range(size)))

    def test_deterministic(self):
        self.assertEqual(derange(list(range(20)), SEED), derange(list(range(20)), SEED))
        self.assertNotEqual(derange(list(range(20)), SEED), derange(list(range(20)), SEED + 1))

    def test_small_inputs(self):
        self.assertEqual(derange([], SEED), [])
        self.assertEqual(derange([0], SEED), [0])
        self.assertEqual(derange([0, 1], SEED), [1, 0])
